# Resume Q&A API

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

import config
from db import build_engine, init_db
from errors import ResumeServiceError
from models import Resume, ResumeSummary
from services.llm_oracle import build_oracle
from services.resume_orchestrator import ResumeOrchestrator, SearchResult, UploadResult
from services.resume_store import ResumeStore
from services.text_extractor import default_registry

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("api")


# ---------- Startup ----------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # ConfigurationError here aborts startup; the app never serves requests
    settings = config.load_settings()
    engine = build_engine(settings.database_url)
    init_db(engine)

    app.state.max_upload_bytes = settings.max_upload_bytes
    app.state.orchestrator = ResumeOrchestrator(
        store=ResumeStore(engine),
        oracle=build_oracle(settings),
        extractors=default_registry(enable_docx=settings.enable_docx_uploads),
        search_concurrency=settings.search_concurrency,
        oracle_timeout_seconds=settings.oracle_timeout_seconds,
        structured_search=settings.search_structured_output,
    )
    logger.info("Resume service ready")
    try:
        yield
    finally:
        engine.dispose()


# ---------- FastAPI & CORS ----------
app = FastAPI(
    title="Resume Q&A API",
    description="API for analyzing and querying resumes",
    version="1.0",
    docs_url="/api",
    openapi_tags=[{"name": "resume"}],
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ResumeServiceError)
async def resume_service_error_handler(request: Request, exc: ResumeServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.tag},
    )


def get_orchestrator(request: Request) -> ResumeOrchestrator:
    return request.app.state.orchestrator


def get_max_upload_bytes(request: Request) -> int:
    return getattr(request.app.state, "max_upload_bytes", config.DEFAULT_MAX_UPLOAD_BYTES)


# ---------- Request / response schemas ----------
class AskQuestionReq(BaseModel):
    resumeId: str = Field(min_length=1)
    question: str = Field(min_length=1)

    @field_validator("resumeId", "question")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class SearchQueryReq(BaseModel):
    query: str = Field(min_length=1)

    @field_validator("query")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class ResumeListItem(BaseModel):
    id: str
    originalFileName: str
    mimeType: str
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_summary(cls, summary: ResumeSummary) -> "ResumeListItem":
        return cls(
            id=summary.id,
            originalFileName=summary.original_file_name,
            mimeType=summary.mime_type,
            createdAt=summary.created_at,
            updatedAt=summary.updated_at,
        )


class ResumeOut(ResumeListItem):
    extractedText: str

    @classmethod
    def from_record(cls, resume: Resume) -> "ResumeOut":
        return cls(
            id=resume.id,
            originalFileName=resume.original_file_name,
            mimeType=resume.mime_type,
            createdAt=resume.created_at,
            updatedAt=resume.updated_at,
            extractedText=resume.extracted_text,
        )


# ---------- Upload Resume ----------
@app.post("/resume/upload", response_model=UploadResult, tags=["resume"])
async def upload_resume(
    file: UploadFile = File(...),
    orchestrator: ResumeOrchestrator = Depends(get_orchestrator),
    max_upload_bytes: int = Depends(get_max_upload_bytes),
):
    too_large = HTTPException(
        status_code=413,
        detail=f"File is too large. Maximum size is {max_upload_bytes} bytes.",
    )
    if file.size is not None and file.size > max_upload_bytes:
        raise too_large

    # One byte past the limit is enough to tell an oversized upload
    data = await file.read(max_upload_bytes + 1)
    if len(data) > max_upload_bytes:
        raise too_large

    result = await orchestrator.ingest(
        data=data,
        mime_type=file.content_type,
        original_file_name=file.filename or "",
    )
    logger.info(f"Uploaded resume {result.id} ({file.filename}, {len(data)} bytes)")
    return result


# ---------- Ask a question about one resume ----------
@app.post("/resume/ask", response_model=str, tags=["resume"])
async def ask_question(
    req: AskQuestionReq,
    orchestrator: ResumeOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.ask(req.resumeId, req.question)


# ---------- Search every resume ----------
@app.post("/resume/search", response_model=List[SearchResult], tags=["resume"])
async def search_resumes(
    req: SearchQueryReq,
    orchestrator: ResumeOrchestrator = Depends(get_orchestrator),
):
    return await orchestrator.search(req.query)


# ---------- Read ----------
@app.get("/resume/{resume_id}", response_model=ResumeOut, tags=["resume"])
async def get_resume(
    resume_id: str,
    orchestrator: ResumeOrchestrator = Depends(get_orchestrator),
):
    resume = await orchestrator.get_resume(resume_id)
    return ResumeOut.from_record(resume)


@app.get("/resume", response_model=List[ResumeListItem], tags=["resume"])
async def get_all_resumes(orchestrator: ResumeOrchestrator = Depends(get_orchestrator)):
    summaries = await orchestrator.list_resumes()
    return [ResumeListItem.from_summary(s) for s in summaries]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.get_port())
