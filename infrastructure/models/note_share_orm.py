"""SQLAlchemy ORM model for NoteShare entity.

This module contains the NoteShareORM class that defines the database schema
for note sharing grants.

Classes:
    NoteShareORM: SQLAlchemy model for note sharing between users.

Architecture:
    Each row adds one user id to a note's share set. The unique constraint on
    (note_id, shared_with_user_id) makes appending a share a single atomic
    INSERT: concurrent grants to different users all persist, and a second
    grant to the same user is rejected by the database.
"""

import uuid
from datetime import datetime

from infrastructure.models.base import Base
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship


class NoteShareORM(Base):
    """SQLAlchemy ORM model for note sharing between users.

    Attributes:
        id (UUID): Primary key, auto-generated UUID.
        note_id (UUID): Foreign key to the shared note.
        shared_by_user_id (str): Keycloak UUID of user who shared the note.
        shared_with_user_id (str): Keycloak UUID of user who receives the share.
        created_at (datetime): Timestamp when share was created.
        note (NoteORM): Many-to-one relationship to the shared note.

    Table Schema:
        - Table name: 'note_shares'
        - Primary key: id (UUID)
        - Foreign key: note_id -> notes.id (ON DELETE CASCADE)
        - Unique: (note_id, shared_with_user_id)

    Example:
        >>> share_orm = NoteShareORM(
        ...     note_id=note.id,
        ...     shared_by_user_id="owner-uuid",
        ...     shared_with_user_id="recipient-uuid"
        ... )
        >>> db.add(share_orm)
        >>> db.commit()
    """

    __tablename__ = "note_shares"
    __table_args__ = (
        UniqueConstraint(
            "note_id", "shared_with_user_id", name="uq_note_shares_note_recipient"
        ),
    )

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key, auto-generated UUID",
    )

    note_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        comment="Foreign key to the shared note",
    )

    shared_by_user_id = Column(
        String(255), nullable=False, comment="Keycloak UUID of user who shared the note"
    )

    shared_with_user_id = Column(
        String(255),
        nullable=False,
        index=True,
        comment="Keycloak UUID of user who receives the share",
    )

    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="Timestamp when share was created",
    )

    note = relationship("NoteORM", back_populates="shares")

    def __repr__(self) -> str:
        return (
            f"<NoteShareORM(id={self.id}, note_id={self.note_id}, "
            f"shared_by={self.shared_by_user_id}, shared_with={self.shared_with_user_id})>"
        )
