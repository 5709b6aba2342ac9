"""Bitwise Notes Service application.

Creates the FastAPI application, registers the routers and the error
handler, and creates the database tables on startup.

Run locally with:
    uvicorn main:app --port 8002
"""

import logging
from contextlib import asynccontextmanager

from application.rest.routers import router_health, router_notes
from application.rest.schemas.output.common_output import ErrorResponse
from application.utils import ApiError
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from infrastructure.models import note_orm, note_share_orm  # noqa: F401
from infrastructure.models.base import Base
from utils.dependencies import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="Bitwise Notes Service",
    description="Create notes and share them with other registered users",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render domain errors as ErrorResponse bodies."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.detail, error_code=exc.error_code).model_dump(),
    )


app.include_router(router_health.router, tags=["health"])
app.include_router(router_notes.router, tags=["notes"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8002)
