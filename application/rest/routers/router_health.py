import logging

from application.rest.schemas.output.common_output import HealthResponse
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from utils.dependencies import get_db

SERVICE_NAME = "notes-service"

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    path="/health",
    description="Report whether the service and its note store are reachable.",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": HealthResponse,
            "description": "Service and database are reachable.",
        },
        status.HTTP_503_SERVICE_UNAVAILABLE: {
            "model": HealthResponse,
            "description": "The database cannot be reached.",
        },
    },
)
async def health_check(db: Session = Depends(get_db)):
    """Health check with a database round trip.

    The user directory and notification sender are not probed: sharing
    degrades on its own when they are down.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed, database unreachable: {e}")
        unhealthy = HealthResponse(
            status="unhealthy", service=SERVICE_NAME, database="unreachable"
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=unhealthy.model_dump(),
        )

    return HealthResponse(status="healthy", service=SERVICE_NAME, database="ok")
