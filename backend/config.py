# config.py
"""
Runtime settings, read from the environment (and backend/.env when present).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from errors import ConfigurationError

# Load .env from this file's directory; real env vars win
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_PORT = 8080
DEFAULT_MAX_UPLOAD_BYTES = 1024 * 1024 * 5  # 5MB


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    database_url: str
    openai_api_key: str
    openai_model: str = DEFAULT_MODEL
    openai_temperature: float = 0.1
    oracle_timeout_seconds: float = 60.0
    oracle_max_retries: int = 5
    search_concurrency: int = 4
    search_structured_output: bool = True
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    enable_docx_uploads: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    port: int = DEFAULT_PORT


def _required(name: str) -> str:
    value = (os.getenv(name) or "").strip()
    if not value:
        raise ConfigurationError(f"{name} is not set in the environment (.env)")
    return value


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Raises:
        ConfigurationError: if DATABASE_URL or OPENAI_API_KEY is missing,
            a numeric setting cannot be parsed, or SEARCH_CONCURRENCY /
            ORACLE_TIMEOUT_SECONDS is not positive.
    """
    concurrency = _env_number("SEARCH_CONCURRENCY", 4, int)
    if concurrency < 1:
        raise ConfigurationError("SEARCH_CONCURRENCY must be at least 1")

    timeout = _env_number("ORACLE_TIMEOUT_SECONDS", 60.0, float)
    if timeout <= 0:
        raise ConfigurationError("ORACLE_TIMEOUT_SECONDS must be greater than 0")

    return Settings(
        database_url=_required("DATABASE_URL"),
        openai_api_key=_required("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL") or DEFAULT_MODEL,
        openai_temperature=_env_number("OPENAI_TEMPERATURE", 0.1, float),
        oracle_timeout_seconds=timeout,
        oracle_max_retries=_env_number("ORACLE_MAX_RETRIES", 5, int),
        search_concurrency=concurrency,
        search_structured_output=_env_bool("SEARCH_STRUCTURED_OUTPUT", True),
        max_upload_bytes=_env_number("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES, int),
        enable_docx_uploads=_env_bool("ENABLE_DOCX_UPLOADS", False),
        cors_origins=get_cors_origins(),
        port=_env_number("PORT", DEFAULT_PORT, int),
    )


def get_port(default: Optional[int] = None) -> int:
    """Listening port, without requiring the rest of the settings."""
    return _env_number("PORT", default or DEFAULT_PORT, int)


def get_cors_origins() -> List[str]:
    origins = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]
    return origins or ["*"]
