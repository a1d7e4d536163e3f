# models.py
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, Text
from sqlmodel import SQLModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class Resume(SQLModel, table=True):
    """
    One uploaded resume and the plain text pulled out of it.

    Rows are only ever inserted; extracted_text never changes afterwards.
    """
    __tablename__ = "resumes"

    id: str = Field(default_factory=_new_id, primary_key=True)
    created_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    original_file_name: str
    mime_type: str

    # Whole document text; can be large, so keep it out of list queries
    extracted_text: str = Field(sa_column=Column(Text, nullable=False))

    @classmethod
    def create(cls, original_file_name: str, extracted_text: str, mime_type: str) -> "Resume":
        """New row with created_at and updated_at set to the same instant."""
        now = _utcnow()
        return cls(
            original_file_name=original_file_name,
            extracted_text=extracted_text,
            mime_type=mime_type,
            created_at=now,
            updated_at=now,
        )


class ResumeSummary(SQLModel):
    """Listing projection of a Resume, without the text."""
    id: str
    created_at: datetime
    updated_at: datetime
    original_file_name: str
    mime_type: str


# Columns selected for listings
SUMMARY_COLUMNS = ("id", "created_at", "updated_at", "original_file_name", "mime_type")
