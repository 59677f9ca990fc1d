"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON keys are camelCase on the wire; Python code uses snake_case.
"""

import re
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


# Ids are INTEGER columns
MAX_RECORD_ID = 2**31 - 1


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "admin"
    student = "student"
    employer = "employer"
    officer = "officer"


class ApplicationStatus(str, Enum):
    applied = "applied"
    shortlisted = "shortlisted"
    selected = "selected"
    rejected = "rejected"


ADMIN_ROLES = (UserRole.admin, UserRole.officer)
EDIT_APPLICATION_ROLES = (UserRole.employer, UserRole.admin, UserRole.officer)


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class StudentDetails(CamelModel):
    department: Optional[str] = Field(None, max_length=200)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    graduation_year: Optional[int] = Field(None, ge=1950, le=2100)
    resume_url: Optional[str] = None


class EmployerDetails(CamelModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    industry: Optional[str] = Field(None, max_length=200)
    website: Optional[str] = None


class StudentResponse(CamelModel):
    id: int
    user_id: int
    department: Optional[str] = None
    cgpa: Optional[float] = None
    graduation_year: Optional[int] = None
    resume_url: Optional[str] = None


class EmployerResponse(CamelModel):
    id: int
    user_id: int
    company_name: str
    industry: Optional[str] = None
    website: Optional[str] = None
    is_approved: bool = False


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=150)
    password: str = Field(..., min_length=8)
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    role: UserRole
    student_details: Optional[StudentDetails] = None
    employer_details: Optional[EmployerDetails] = None

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain at least one number")
        return value


class LoginRequest(CamelModel):
    username: str
    password: str


class UserResponse(CamelModel):
    id: int
    username: str
    role: UserRole
    name: str
    email: str
    created_at: Optional[datetime] = None


class ProfileResponse(CamelModel):
    user: UserResponse
    student: Optional[StudentResponse] = None
    employer: Optional[EmployerResponse] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    requirements: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=200)
    salary: str = Field(..., min_length=1, max_length=100)


class JobResponse(CamelModel):
    id: int
    employer_id: int
    title: str
    description: str
    requirements: str
    location: str
    salary: str
    posted_at: Optional[datetime] = None


class JobWithEmployerResponse(JobResponse):
    employer: UserResponse


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(CamelModel):
    job_id: int = Field(..., ge=1, le=MAX_RECORD_ID)


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus


class ApplicationResponse(CamelModel):
    id: int
    job_id: int
    student_id: int
    status: ApplicationStatus
    applied_at: Optional[datetime] = None


class ApplicationDetailResponse(ApplicationResponse):
    job: JobResponse
    student: UserResponse


# ============================================================
# STATS SCHEMAS
# ============================================================

class StatsResponse(CamelModel):
    total_students: int
    total_employers: int
    total_jobs: int
    placements: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    message: str
    errors: Optional[List[FieldError]] = None


# Error bodies listed in the OpenAPI docs of every router
ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 401, 403, 404)}
