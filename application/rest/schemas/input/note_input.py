"""Note input schemas for API requests.

This module contains Pydantic models for note-related API requests.
"""

from typing import Optional

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    """Schema for creating a new note.

    Both fields are optional; a note without a title is shown as
    "Untitled Note".

    Attributes:
        title (str, optional): The title of the note.
        content (str, optional): The markdown content of the note.

    Example:
        >>> note_data = NoteCreate(title="Plan", content="# Q1 goals")
    """

    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
