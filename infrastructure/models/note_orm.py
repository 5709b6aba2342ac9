"""SQLAlchemy ORM model for Note entity.

This module contains the NoteORM class that defines the database schema
for notes and handles note data persistence.

Classes:
    NoteORM: SQLAlchemy model for notes with owner data and shares.

Architecture:
    This ORM model is part of the Infrastructure layer and should only be used by:
    - SQLAlchemyNoteRepository implementation
    - Other infrastructure-specific code

    Domain code should use the Note entity instead of this ORM model.
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship

from infrastructure.models.base import Base


class NoteORM(Base):
    """SQLAlchemy ORM model for notes and their share set.

    Attributes:
        id (UUID): Primary key, auto-generated UUID.
        title (str): Optional note title, max 255 characters.
        content (str): Optional note content, unlimited text.
        owner_id (str): Keycloak user id of the owner.
        owner_email (str): Owner email captured at creation time.
        created_at (datetime): Timestamp when note was created.
        shares (List[NoteShareORM]): One-to-many relationship with note shares.

    Table Schema:
        - Table name: 'notes'
        - Primary key: id (UUID)
        - Indexes: owner_id, created_at

    Example:
        >>> note_orm = NoteORM(title="Plan", content="# Q1 goals", owner_id="user-uuid",
        ...                    owner_email="alice@example.com")
        >>> db.add(note_orm)
        >>> db.commit()
    """

    __tablename__ = "notes"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key, auto-generated UUID",
    )

    title = Column(String(255), nullable=True, comment="Optional note title")

    content = Column(Text, nullable=True, comment="Optional markdown content")

    owner_id = Column(
        String(255),
        nullable=False,
        index=True,
        comment="Keycloak user UUID who owns the note",
    )

    owner_email = Column(
        String(320), nullable=False, comment="Owner email at creation time"
    )

    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        index=True,
        comment="Timestamp when note was created",
    )

    # Deleting a note deletes its shares
    shares = relationship(
        "NoteShareORM",
        back_populates="note",
        cascade="all, delete-orphan",
        order_by="NoteShareORM.created_at",
        lazy="selectin",
    )

    @property
    def shared_with_ids(self):
        """Ids of the users this note is shared with."""
        return [share.shared_with_user_id for share in self.shares]

    def __repr__(self) -> str:
        return (
            f"<NoteORM(id={self.id}, title='{self.title}', owner_id='{self.owner_id}')>"
        )
