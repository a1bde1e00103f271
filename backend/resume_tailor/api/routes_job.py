from fastapi import APIRouter, HTTPException

from ..errors import ValidationError
from ..job_fetcher import fetch_job_details
from ..schemas import JobFetchRequest, JobFetchResponse

router = APIRouter(prefix="/api/job", tags=["job"])


@router.post("/fetch", response_model=JobFetchResponse)
async def fetch_job(body: JobFetchRequest):
    """Fetch a job posting and return its extracted text"""
    if not body.url:
        raise HTTPException(400, "Job posting URL is required")
    try:
        job_details = await fetch_job_details(body.url)
    except ValidationError as e:
        raise HTTPException(400, str(e))
    except Exception as e:
        raise HTTPException(500, str(e) or "Failed to fetch job posting")
    return JobFetchResponse(jobDetails=job_details)
