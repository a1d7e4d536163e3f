"""
Test suite for the Resume HTTP API

This module tests the /resume endpoints end to end (in-memory database,
fake LLM) to ensure:
- Uploads return {message, id} and enforce size and type limits
- Ask returns the model's answer as a JSON string, 404 for unknown ids
- Search returns only matching resumes
- Taxonomy errors come back with distinct tags
- Startup fails when required configuration is missing

Run tests with: pytest backend/tests/test_resume_api.py -v
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from api import app, get_max_upload_bytes, get_orchestrator, upload_resume
from errors import ConfigurationError
from services.resume_orchestrator import ResumeOrchestrator
from services.text_extractor import ExtractorRegistry, PDF_MIME_TYPE


# ============================================================================
# FIXTURES - Reusable test setup components
# ============================================================================

@pytest.fixture
def pdf_extractor():
    return MagicMock(side_effect=lambda data: data.decode("utf-8"))


@pytest.fixture
def fake_oracle(fake_oracle_factory):
    return fake_oracle_factory(
        replies={"Go engineer": "Jane Doe has 6 years of Go experience."},
        default="No match",
    )


@pytest.fixture
def orchestrator(store, fake_oracle, pdf_extractor):
    return ResumeOrchestrator(
        store=store,
        oracle=fake_oracle,
        extractors=ExtractorRegistry({PDF_MIME_TYPE: pdf_extractor}),
        structured_search=False,
    )


@pytest.fixture
def test_client(orchestrator):
    """
    TestClient wired to the test orchestrator through dependency overrides.
    Startup (settings, real database, OpenAI client) is skipped.
    """
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def upload(test_client):
    """Upload helper; the fake extractor returns the payload as text."""
    def do_upload(text: str, file_name: str = "resume.pdf", mime_type: str = PDF_MIME_TYPE):
        return test_client.post(
            "/resume/upload",
            files={"file": (file_name, text.encode("utf-8"), mime_type)},
        )

    return do_upload


# ============================================================================
# TEST CASES - upload
# ============================================================================

class TestUpload:

    def test_upload_pdf(self, upload, test_client):
        response = upload("Jane Doe, Go engineer", file_name="jane.pdf")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Resume uploaded successfully"

        record = test_client.get(f"/resume/{body['id']}").json()
        assert record["originalFileName"] == "jane.pdf"
        assert record["mimeType"] == PDF_MIME_TYPE
        assert record["extractedText"] == "Jane Doe, Go engineer"

    def test_non_pdf_rejected_without_extraction(self, upload, pdf_extractor):
        response = upload("plain words", file_name="notes.txt", mime_type="text/plain")

        assert response.status_code == 422
        assert response.json()["error"] == "UnsupportedMediaType"
        pdf_extractor.assert_not_called()

    def test_too_large(self, upload, pdf_extractor):
        app.dependency_overrides[get_max_upload_bytes] = lambda: 10

        response = upload("x" * 11)

        assert response.status_code == 413
        pdf_extractor.assert_not_called()

    def test_blank_document(self, upload, test_client):
        response = upload("   \n  ")

        assert response.status_code == 500
        assert response.json()["error"] == "EmptyContent"
        assert test_client.get("/resume").json() == []

    def test_unreadable_document(self, upload, pdf_extractor):
        pdf_extractor.side_effect = RuntimeError("cannot open broken document")

        response = upload("%PDF-broken")

        assert response.status_code == 500
        assert response.json()["error"] == "ExtractionFailed"


class TestUploadSizeLimit:
    """Calls the upload handler directly to see how much of the file it reads."""

    @pytest.fixture
    def upload_file_factory(self):
        def create_file(payload: bytes, size=None):
            file = MagicMock()
            file.size = size
            file.filename = "jane.pdf"
            file.content_type = PDF_MIME_TYPE
            file.read = AsyncMock(side_effect=lambda limit=-1: payload if limit < 0 else payload[:limit])
            return file

        return create_file

    @pytest.mark.asyncio
    async def test_reads_at_most_one_byte_past_limit(self, upload_file_factory, orchestrator):
        file = upload_file_factory(b"x" * 1000)

        with pytest.raises(HTTPException) as exc_info:
            await upload_resume(file=file, orchestrator=orchestrator, max_upload_bytes=10)

        assert exc_info.value.status_code == 413
        file.read.assert_awaited_once_with(11)

    @pytest.mark.asyncio
    async def test_declared_size_rejected_without_reading(self, upload_file_factory, orchestrator):
        file = upload_file_factory(b"x" * 1000, size=1000)

        with pytest.raises(HTTPException) as exc_info:
            await upload_resume(file=file, orchestrator=orchestrator, max_upload_bytes=10)

        assert exc_info.value.status_code == 413
        file.read.assert_not_called()

    @pytest.mark.asyncio
    async def test_payload_at_limit_is_accepted(self, upload_file_factory, orchestrator, store):
        file = upload_file_factory(b"Jane Doe!!", size=10)

        result = await upload_resume(file=file, orchestrator=orchestrator, max_upload_bytes=10)

        stored = await store.get(result.id)
        assert stored.extracted_text == "Jane Doe!!"


# ============================================================================
# TEST CASES - ask
# ============================================================================

class TestAsk:

    def test_ask_returns_answer_string(self, upload, test_client):
        resume_id = upload("Jane Doe, Go engineer").json()["id"]

        response = test_client.post(
            "/resume/ask", json={"resumeId": resume_id, "question": "How much Go?"}
        )

        assert response.status_code == 200
        assert response.json() == "Jane Doe has 6 years of Go experience."

    def test_ask_unknown_resume(self, test_client):
        response = test_client.post(
            "/resume/ask", json={"resumeId": "missing", "question": "How much Go?"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    @pytest.mark.parametrize("payload", [
        {"resumeId": "", "question": "Q?"},
        {"resumeId": "abc", "question": "   "},
        {"question": "Q?"},
        {"resumeId": "abc"},
    ])
    def test_ask_validation(self, test_client, payload):
        response = test_client.post("/resume/ask", json=payload)

        assert response.status_code == 422

    def test_ask_oracle_failure(self, upload, test_client, fake_oracle):
        fake_oracle.replies["Go engineer"] = ConnectionError("quota exceeded")
        resume_id = upload("Jane Doe, Go engineer").json()["id"]

        response = test_client.post(
            "/resume/ask", json={"resumeId": resume_id, "question": "How much Go?"}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "AnswerFailed"


# ============================================================================
# TEST CASES - search
# ============================================================================

class TestSearch:

    def test_search_returns_only_matches(self, upload, test_client):
        upload("Bob Smith, Java developer", file_name="bob.pdf")
        jane_id = upload("Jane Doe, Go engineer", file_name="jane.pdf").json()["id"]

        response = test_client.post("/resume/search", json={"query": "knows Go"})

        assert response.status_code == 200
        assert response.json() == [{
            "id": jane_id,
            "fileName": "jane.pdf",
            "answer": "Jane Doe has 6 years of Go experience.",
            "matchesCriteria": True,
        }]

    def test_search_requires_query(self, test_client):
        assert test_client.post("/resume/search", json={"query": ""}).status_code == 422
        assert test_client.post("/resume/search", json={}).status_code == 422

    def test_search_without_oracle(self, test_client, orchestrator):
        orchestrator.oracle = None

        response = test_client.post("/resume/search", json={"query": "knows Go"})

        assert response.status_code == 500
        assert response.json()["error"] == "OracleUnavailable"


# ============================================================================
# TEST CASES - reads
# ============================================================================

class TestReads:

    def test_unknown_resume(self, test_client):
        response = test_client.get("/resume/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_get_is_idempotent(self, upload, test_client):
        resume_id = upload("Jane Doe, Go engineer").json()["id"]

        first = test_client.get(f"/resume/{resume_id}")
        second = test_client.get(f"/resume/{resume_id}")

        assert first.content == second.content

    def test_listing_omits_text(self, upload, test_client):
        upload("A" * 100_000, file_name="long.pdf")
        upload("Jane Doe, Go engineer", file_name="jane.pdf")

        listing = test_client.get("/resume").json()

        assert [item["originalFileName"] for item in listing] == ["long.pdf", "jane.pdf"]
        assert all("extractedText" not in item for item in listing)


# ============================================================================
# TEST CASES - startup
# ============================================================================

class TestStartup:

    def test_missing_api_key_blocks_startup(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ConfigurationError):
            with TestClient(app):
                pass

    def test_missing_database_url_blocks_startup(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ConfigurationError):
            with TestClient(app):
                pass

    def test_startup_wires_orchestrator(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite://")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with TestClient(app) as client:
            assert isinstance(app.state.orchestrator, ResumeOrchestrator)
            assert app.state.orchestrator.oracle is not None
            assert client.get("/resume").json() == []
