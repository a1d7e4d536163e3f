# backend/services/text_extractor.py
"""
Text Extraction Service

Turns an uploaded document payload into plain text. Extractors are looked up
by the document's declared media type, so supporting a new format means
registering one more function.
"""

import io
import logging
from typing import Callable, Dict, Iterable, Optional

import docx
import fitz

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

Extractor = Callable[[bytes], str]


def extract_pdf_text(data: bytes) -> str:
    with fitz.open(stream=data, filetype="pdf") as doc:
        return "\n".join(p.get_text() for p in doc)


def extract_docx_text(data: bytes) -> str:
    d = docx.Document(io.BytesIO(data))
    return "\n".join(p.text for p in d.paragraphs)


class ExtractorRegistry:
    """Maps a media type to the function that extracts its text."""

    def __init__(self, extractors: Optional[Dict[str, Extractor]] = None):
        self._extractors: Dict[str, Extractor] = dict(extractors or {})

    def register(self, mime_type: str, extractor: Extractor) -> None:
        self._extractors[mime_type] = extractor
        logger.info(f"Registered text extractor for {mime_type}")

    def supports(self, mime_type: Optional[str]) -> bool:
        return mime_type in self._extractors

    def get(self, mime_type: str) -> Extractor:
        return self._extractors[mime_type]

    @property
    def mime_types(self) -> Iterable[str]:
        return tuple(self._extractors)


def default_registry(enable_docx: bool = False) -> ExtractorRegistry:
    """PDF always; DOCX only when switched on."""
    registry = ExtractorRegistry({PDF_MIME_TYPE: extract_pdf_text})
    if enable_docx:
        registry.register(DOCX_MIME_TYPE, extract_docx_text)
    return registry
