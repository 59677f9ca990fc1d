"""
Application Routes

GET /applications - List applications visible to the caller
POST /applications - Apply to a job (student only)
PATCH /applications/{application_id}/status - Update status (employer/admin/officer)
"""

from typing import List

from fastapi import APIRouter, HTTPException, Depends, Path

from placement_portal.core.auth import get_current_user, get_storage, require_role, require_student
from placement_portal.core.policies import can_manage_application, enforce
from placement_portal.services.storage import DatabaseStorage, DuplicateRecordError
from placement_portal.schemas.schemas import (
    ApplicationCreate, ApplicationStatusUpdate, ApplicationResponse, ApplicationDetailResponse,
    EDIT_APPLICATION_ROLES, ERROR_RESPONSES, MAX_RECORD_ID, UserRole
)
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"], responses=ERROR_RESPONSES)


@router.get("", response_model=List[ApplicationDetailResponse])
async def list_applications(
    user: dict = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage)
):
    """
    Role-filtered list of applications, each with its job and student.

    - student: own applications
    - employer: applications to jobs they posted
    - admin / officer: everything
    """
    role = user["role"]
    if role == UserRole.student.value:
        return storage.get_applications_by_student(user["id"])
    if role == UserRole.employer.value:
        return storage.get_applications_by_employer(user["id"])
    if role in (UserRole.admin.value, UserRole.officer.value):
        return storage.get_all_applications()
    return []


@router.post("", response_model=ApplicationResponse, status_code=201)
async def apply_to_job(
    application: ApplicationCreate,
    student: dict = Depends(require_student),
    storage: DatabaseStorage = Depends(get_storage)
):
    """Apply to a job. Students only. Cannot apply twice to same job."""
    if not storage.get_job(application.job_id):
        raise HTTPException(status_code=404, detail="Job not found")

    try:
        created = storage.create_application(application.job_id, student["id"])
    except DuplicateRecordError:
        raise HTTPException(status_code=400, detail="Already applied to this job")

    logger.info("application_created", application_id=created["id"], job_id=application.job_id, student_id=student["id"])
    return created


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    update: ApplicationStatusUpdate,
    application_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    user: dict = Depends(require_role(*EDIT_APPLICATION_ROLES)),
    storage: DatabaseStorage = Depends(get_storage)
):
    """
    Set an application's status.

    Any status may follow any other; employers are limited to applications
    on their own jobs.
    """
    application = storage.get_application(application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")

    job = storage.get_job(application["job_id"])
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    enforce(can_manage_application, user, job, "Cannot update applications for this job")

    updated = storage.update_application_status(application_id, update.status.value)
    if not updated:
        raise HTTPException(status_code=404, detail="Application not found")
    return updated
