# backend/services/resume_store.py
"""
Resume Store

Thin persistence layer over the ``resumes`` table. Session work is blocking
(SQLModel/SQLAlchemy), so every public method runs it in a worker thread and
is awaitable from request handlers.
"""

import asyncio
import logging
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from models import Resume, ResumeSummary, SUMMARY_COLUMNS

logger = logging.getLogger(__name__)


class ResumeStore:
    """Insert / get / list access to stored resumes."""

    def __init__(self, engine: Engine):
        self.engine = engine

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, original_file_name: str, extracted_text: str, mime_type: str) -> Resume:
        return await asyncio.to_thread(
            self._insert, original_file_name, extracted_text, mime_type
        )

    def _insert(self, original_file_name: str, extracted_text: str, mime_type: str) -> Resume:
        resume = Resume.create(
            original_file_name=original_file_name,
            extracted_text=extracted_text,
            mime_type=mime_type,
        )
        with Session(self.engine) as session:
            session.add(resume)
            session.commit()
            session.refresh(resume)
            session.expunge(resume)
        logger.info(f"Stored resume {resume.id} ({original_file_name})")
        return resume

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, resume_id: str) -> Optional[Resume]:
        return await asyncio.to_thread(self._get, resume_id)

    def _get(self, resume_id: str) -> Optional[Resume]:
        with Session(self.engine) as session:
            resume = session.get(Resume, resume_id)
            if resume is not None:
                session.expunge(resume)
            return resume

    async def list_summaries(self) -> List[ResumeSummary]:
        """All resumes without extracted_text, oldest first."""
        return await asyncio.to_thread(self._list_summaries)

    def _list_summaries(self) -> List[ResumeSummary]:
        columns = [getattr(Resume, name) for name in SUMMARY_COLUMNS]
        statement = select(*columns).order_by(Resume.created_at, Resume.id)
        with Session(self.engine) as session:
            rows = session.exec(statement).all()
        return [ResumeSummary(**dict(zip(SUMMARY_COLUMNS, row))) for row in rows]

    async def list_full(self) -> List[Resume]:
        """All resumes including their text, oldest first."""
        return await asyncio.to_thread(self._list_full)

    def _list_full(self) -> List[Resume]:
        statement = select(Resume).order_by(Resume.created_at, Resume.id)
        with Session(self.engine) as session:
            resumes = session.exec(statement).all()
            for resume in resumes:
                session.expunge(resume)
        return list(resumes)
