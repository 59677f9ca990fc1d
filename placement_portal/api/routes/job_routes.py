"""
Job Routes

GET /jobs - List all jobs with their employer
POST /jobs - Create job posting (employer only)
GET /jobs/mine - Jobs posted by the calling employer
GET /jobs/{job_id} - Get job details
GET /jobs/{job_id}/applications - Applications for one job (owner or admin)
"""

from typing import List

from fastapi import APIRouter, HTTPException, Depends, Path

from placement_portal.core.auth import get_current_user, get_storage, require_employer
from placement_portal.core.policies import can_view_job_applications, enforce
from placement_portal.services.storage import DatabaseStorage
from placement_portal.schemas.schemas import (
    JobCreate, JobResponse, JobWithEmployerResponse, ApplicationDetailResponse,
    ERROR_RESPONSES, MAX_RECORD_ID
)
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"], responses=ERROR_RESPONSES)


@router.get("", response_model=List[JobWithEmployerResponse])
async def list_jobs(
    user: dict = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage)
):
    """List all job postings, newest first. Any signed-in role."""
    return storage.get_jobs()


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    job: JobCreate,
    employer: dict = Depends(require_employer),
    storage: DatabaseStorage = Depends(get_storage)
):
    """Create a new job posting. The owner is always the calling employer."""
    created = storage.create_job({**job.model_dump(), "employer_id": employer["id"]})
    logger.info("job_created", job_id=created["id"], employer_id=employer["id"])
    return created


@router.get("/mine", response_model=List[JobResponse])
async def list_my_jobs(
    employer: dict = Depends(require_employer),
    storage: DatabaseStorage = Depends(get_storage)
):
    """Get all jobs posted by this employer."""
    return storage.get_jobs_by_employer(employer["id"])


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    user: dict = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage)
):
    """Get details of a specific job."""
    job = storage.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.get("/{job_id}/applications", response_model=List[ApplicationDetailResponse])
async def list_job_applications(
    job_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    user: dict = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage)
):
    """Applications received for one job. Owning employer, admins and officers only."""
    job = storage.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    enforce(can_view_job_applications, user, job, "Cannot view applications for this job")
    return storage.get_applications_by_job(job_id)
