"""
Pytest configuration and shared fixtures for all tests.

This file is automatically loaded by pytest before running tests.
It puts backend/ on the import path and provides dummy settings, an
in-memory database and fake collaborators for the orchestrator.
"""

import os
import sys

# Add backend directory to path for imports FIRST
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Dummy values so settings can load without a real .env
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OPENAI_API_KEY", "test-api-key-for-testing")

import pytest

from db import build_engine, init_db
from models import Resume
from services.resume_store import ResumeStore


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with the resumes table."""
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return ResumeStore(engine)


class FakeOracle:
    """
    Stand-in for LLMOracle.

    ``replies`` maps a substring of the system prompt to either a reply
    string or an exception to raise. Every call is recorded.
    """

    def __init__(self, replies=None, default="No match"):
        self.replies = replies or {}
        self.default = default
        self.calls = []

    async def complete(self, system, user, json_mode=False):
        self.calls.append({"system": system, "user": user, "json_mode": json_mode})
        for needle, reply in self.replies.items():
            if needle in system:
                if isinstance(reply, BaseException):
                    raise reply
                return reply
        return self.default


@pytest.fixture
def fake_oracle_factory():
    return FakeOracle


@pytest.fixture
def resume_factory():
    """Factory for unsaved Resume rows with predictable ids."""
    def create_resume(index: int, text: str = None, file_name: str = None):
        return Resume(
            id=f"resume-{index}",
            original_file_name=file_name or f"candidate_{index}.pdf",
            extracted_text=text or f"RESUME-{index} text body",
            mime_type="application/pdf",
        )

    return create_resume
