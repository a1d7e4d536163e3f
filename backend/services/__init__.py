# backend/services/__init__.py
"""
Services Package for the Resume Q&A backend

    - text_extractor: media type -> plain text extractors (PDF, optional DOCX)
    - resume_store: SQLModel-backed resume persistence
    - llm_oracle: OpenAI chat-completion client
    - resume_orchestrator: ingest, ask and search over stored resumes
"""

from .text_extractor import (
    ExtractorRegistry,
    default_registry,
    extract_pdf_text,
    extract_docx_text,
    PDF_MIME_TYPE,
    DOCX_MIME_TYPE
)
from .resume_store import ResumeStore
from .llm_oracle import LLMOracle, LLMOracleError, build_oracle
from .resume_orchestrator import (
    ResumeOrchestrator,
    SearchResult,
    UploadResult,
    classify_answer,
    is_match
)

__all__ = [
    "ExtractorRegistry",
    "default_registry",
    "extract_pdf_text",
    "extract_docx_text",
    "PDF_MIME_TYPE",
    "DOCX_MIME_TYPE",
    "ResumeStore",
    "LLMOracle",
    "LLMOracleError",
    "build_oracle",
    "ResumeOrchestrator",
    "SearchResult",
    "UploadResult",
    "classify_answer",
    "is_match",
]
