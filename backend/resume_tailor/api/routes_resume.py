import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from .. import config
from ..ai_services import get_ai_service, get_parser_service
from ..errors import UploadRejected, ValidationError
from ..job_fetcher import fetch_job_details
from ..normalize import normalize_resume
from ..schemas import QuestionRequest, QuestionResponse, TailorRequest
from ..tailor import answer_question, tailor_resume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resume", tags=["resume"])

ALLOWED_CONTENT_TYPES = {"application/pdf"}


def check_upload(content_type: Optional[str], size: int) -> None:
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise UploadRejected("Only PDF files are allowed")
    if size > config.MAX_UPLOAD_BYTES:
        raise UploadRejected(f"File too large. Maximum size is {config.MAX_UPLOAD_BYTES // (1024 * 1024)}MB")


@router.post("/parse")
async def parse_resume(file: Optional[UploadFile] = File(None), vlmApiKey: Optional[str] = Form(None)):
    """Parse an uploaded resume PDF into ResumeData"""
    if file is None or not file.filename:
        raise HTTPException(400, "No file uploaded")
    if not vlmApiKey:
        raise HTTPException(400, "VLM Run API key is required")
    try:
        if file.size is not None:
            check_upload(file.content_type, file.size)
        contents = await file.read()
        check_upload(file.content_type, len(contents))
    except ValidationError as e:
        raise HTTPException(400, str(e))

    try:
        envelope = await get_parser_service(vlmApiKey).parse_resume(contents, file.filename)
    except Exception as e:
        logger.error(f"Error parsing resume: {e}")
        raise HTTPException(500, str(e) or "Failed to parse resume")
    return normalize_resume(envelope)


@router.post("/tailor")
async def tailor(body: TailorRequest):
    """Re-fetch the job posting and tailor the resume to it"""
    if not body.resume or not body.geminiApiKey or not body.applicationUrl:
        raise HTTPException(400, "Resume data, Gemini API key, and application URL are required")
    try:
        job_details = await fetch_job_details(body.applicationUrl)
        return await tailor_resume(body.resume, job_details, get_ai_service(body.geminiApiKey))
    except ValidationError as e:
        raise HTTPException(400, str(e))
    except Exception as e:
        logger.error(f"Error tailoring resume: {e}")
        raise HTTPException(500, str(e) or "Failed to tailor resume")


@router.post("/question", response_model=QuestionResponse)
async def question(body: QuestionRequest):
    """Answer a question about a resume"""
    if not body.resume or not body.question or not body.geminiApiKey:
        raise HTTPException(400, "Resume data, question, and Gemini API key are required")
    try:
        answer = await answer_question(body.resume, body.question, get_ai_service(body.geminiApiKey))
    except Exception as e:
        logger.error(f"Error answering resume question: {e}")
        raise HTTPException(500, str(e) or "Failed to answer question")
    return QuestionResponse(answer=answer)
