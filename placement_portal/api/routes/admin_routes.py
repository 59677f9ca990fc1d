"""
Administration Routes (admin / officer)

GET /stats - Aggregate placement counts
GET /users - All user accounts
GET /students - All student profiles
GET /employers - All employer profiles
PATCH /employers/{employer_id}/approve - Approve an employer profile
"""

from typing import List

from fastapi import APIRouter, HTTPException, Depends, Path

from placement_portal.core.auth import get_storage, require_admin
from placement_portal.services.storage import DatabaseStorage
from placement_portal.schemas.schemas import (
    StatsResponse, UserResponse, StudentResponse, EmployerResponse,
    ERROR_RESPONSES, MAX_RECORD_ID
)
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    tags=["Administration"],
    dependencies=[Depends(require_admin)],
    responses=ERROR_RESPONSES,
)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(storage: DatabaseStorage = Depends(get_storage)):
    """Students, employers, jobs and selected applications (placements)."""
    return storage.get_stats()


@router.get("/users", response_model=List[UserResponse])
async def list_users(storage: DatabaseStorage = Depends(get_storage)):
    return storage.list_users()


@router.get("/students", response_model=List[StudentResponse])
async def list_students(storage: DatabaseStorage = Depends(get_storage)):
    return storage.list_students()


@router.get("/employers", response_model=List[EmployerResponse])
async def list_employers(storage: DatabaseStorage = Depends(get_storage)):
    return storage.list_employers()


@router.patch("/employers/{employer_id}/approve", response_model=EmployerResponse)
async def approve_employer(
    employer_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    storage: DatabaseStorage = Depends(get_storage)
):
    """Mark an employer profile as approved."""
    employer = storage.approve_employer(employer_id)
    if not employer:
        raise HTTPException(status_code=404, detail="Employer not found")
    logger.info("employer_approved", employer_id=employer_id)
    return employer
