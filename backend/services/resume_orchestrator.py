# backend/services/resume_orchestrator.py
"""
Resume Orchestrator Service

Coordinates extraction, persistence, prompt construction and LLM calls for
the three resume operations:

- ingest: payload -> text -> stored record
- ask: one resume + a question -> the model's answer
- search: a criterion -> every stored resume judged independently, matches only
"""

import asyncio
import json
import logging
from typing import List, Optional, Tuple

from pydantic import BaseModel

from errors import (
    AnswerFailed,
    EmptyContent,
    ExtractionFailed,
    NotFound,
    OracleUnavailable,
    UnsupportedMediaType,
)
from models import Resume, ResumeSummary
from prompts.resume_prompts import NO_MATCH_MARKER, PromptTemplates
from services.llm_oracle import LLMOracle
from services.resume_store import ResumeStore
from services.text_extractor import ExtractorRegistry, default_registry

# Configure logging with detailed format
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SEARCH_ERROR_ANSWER = "Error processing this resume."


class UploadResult(BaseModel):
    message: str
    id: str


class SearchResult(BaseModel):
    id: str
    fileName: str
    answer: str
    matchesCriteria: bool


def is_match(answer: str) -> bool:
    """Literal, case-sensitive substring test on the trimmed answer."""
    return NO_MATCH_MARKER not in (answer or "").strip()


def _as_bool(value) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def classify_answer(raw: str) -> Tuple[str, bool]:
    """
    Decide whether a search answer is a match.

    A JSON object with a ``matchesCriteria`` flag (a boolean, or the strings
    "true"/"false") is classified by that flag. If the flag is unreadable,
    the "No match" substring rule runs on the object's ``answer`` string.
    Any other reply falls back to the substring rule on the raw text.

    Returns:
        (answer text, matches)
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        data = None

    if isinstance(data, dict) and "matchesCriteria" in data:
        answer = data.get("answer")
        matches = _as_bool(data["matchesCriteria"])
        if matches is not None:
            if not isinstance(answer, str):
                answer = raw if matches else NO_MATCH_MARKER
            return answer, matches
        if isinstance(answer, str):
            return answer, is_match(answer)

    return raw, is_match(raw)


class ResumeOrchestrator:
    """
    Entry point for every resume operation.

    Dependencies:
    - ResumeStore: persistence
    - ExtractorRegistry: media type -> text extractor
    - LLMOracle: text completions; None means the model is not available
    """

    def __init__(
        self,
        store: ResumeStore,
        oracle: Optional[LLMOracle] = None,
        extractors: Optional[ExtractorRegistry] = None,
        search_concurrency: int = 4,
        oracle_timeout_seconds: Optional[float] = 60.0,
        structured_search: bool = True,
    ):
        self.store = store
        self.oracle = oracle
        self.extractors = extractors or default_registry()
        self.search_concurrency = max(1, search_concurrency)
        self.oracle_timeout_seconds = oracle_timeout_seconds
        self.structured_search = structured_search

        logger.info(
            "ResumeOrchestrator initialized "
            f"(oracle={'ready' if oracle else 'missing'}, concurrency={self.search_concurrency})"
        )

    # ------------------------------------------------------------------
    # Ingest
    # ------------------------------------------------------------------

    async def ingest(self, data: bytes, mime_type: str, original_file_name: str) -> UploadResult:
        """
        Extract text from an uploaded document and store it.

        Raises:
            UnsupportedMediaType: no extractor for mime_type (nothing extracted)
            ExtractionFailed: the extractor could not read the payload
            EmptyContent: the document has no text (e.g. image-only PDF)
        """
        if not self.extractors.supports(mime_type):
            raise UnsupportedMediaType(
                f"Unsupported file type '{mime_type}'. "
                f"Supported: {', '.join(self.extractors.mime_types)}"
            )

        extractor = self.extractors.get(mime_type)
        try:
            extracted_text = await asyncio.to_thread(extractor, data)
        except Exception as e:
            logger.exception(f"Text extraction failed for {original_file_name}")
            raise ExtractionFailed(
                f"Document parsing failed. Ensure it is a valid {mime_type} file."
            ) from e

        if not extracted_text or not extracted_text.strip():
            raise EmptyContent("Could not extract text from the provided resume.")

        # SQL text columns reject NUL
        extracted_text = extracted_text.replace("\x00", " ")

        resume = await self.store.insert(
            original_file_name=original_file_name,
            extracted_text=extracted_text,
            mime_type=mime_type,
        )
        return UploadResult(message="Resume uploaded successfully", id=resume.id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_resume(self, resume_id: str) -> Resume:
        resume = await self.store.get(resume_id)
        if resume is None:
            raise NotFound(f'Resume with ID "{resume_id}" not found.')
        return resume

    async def list_resumes(self) -> List[ResumeSummary]:
        return await self.store.list_summaries()

    # ------------------------------------------------------------------
    # Question answering
    # ------------------------------------------------------------------

    def _require_oracle(self) -> LLMOracle:
        if self.oracle is None:
            raise OracleUnavailable("LLM not initialized. Check API key configuration.")
        return self.oracle

    async def _call_oracle(self, system: str, user: str, json_mode: bool = False) -> str:
        oracle = self._require_oracle()
        return await asyncio.wait_for(
            oracle.complete(system, user, json_mode=json_mode),
            timeout=self.oracle_timeout_seconds,
        )

    async def ask(self, resume_id: str, question: str) -> str:
        """
        Answer a question using only the text of one resume.

        Raises:
            NotFound: unknown resume_id
            OracleUnavailable: no LLM configured
            AnswerFailed: the LLM call failed or timed out
        """
        resume = await self.get_resume(resume_id)
        self._require_oracle()

        system = PromptTemplates.question_system_prompt(resume.extracted_text)
        try:
            return await self._call_oracle(system, question)
        except Exception as e:
            logger.exception(f"Error invoking LLM for resume {resume_id}")
            raise AnswerFailed("Failed to get an answer from the AI model.") from e

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def _evaluate(self, resume: Resume, criterion: str, semaphore: asyncio.Semaphore) -> SearchResult:
        system, user = PromptTemplates.search_prompt(
            resume.extracted_text, criterion, structured=self.structured_search
        )
        async with semaphore:
            try:
                raw = await self._call_oracle(system, user, json_mode=self.structured_search)
                answer, matches = classify_answer(raw)
            except Exception as e:
                logger.warning(f"Search failed for resume {resume.id}: {e!r}")
                return SearchResult(
                    id=resume.id,
                    fileName=resume.original_file_name,
                    answer=SEARCH_ERROR_ANSWER,
                    matchesCriteria=False,
                )

        return SearchResult(
            id=resume.id,
            fileName=resume.original_file_name,
            answer=answer,
            matchesCriteria=matches,
        )

    async def search(self, criterion: str) -> List[SearchResult]:
        """
        Judge every stored resume against a criterion and return the matches.

        Resumes are evaluated concurrently (bounded by search_concurrency).
        A failed call only marks that resume as non-matching.

        Raises:
            OracleUnavailable: no LLM configured (checked once, up front)
        """
        self._require_oracle()

        resumes = await self.store.list_full()
        semaphore = asyncio.Semaphore(self.search_concurrency)
        results = await asyncio.gather(
            *(self._evaluate(resume, criterion, semaphore) for resume in resumes)
        )

        matches = [r for r in results if r.matchesCriteria]
        logger.info(f"Search evaluated {len(results)} resumes, {len(matches)} matched")
        return matches
