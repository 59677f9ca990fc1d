"""
Relational schema - five tables, defined with SQLAlchemy Core so the same
DDL runs on PostgreSQL (production) and SQLite (local dev / tests).

users        -> every account, any role
students     -> 1:1 profile for role=student
employers    -> 1:1 profile for role=employer
jobs         -> postings, owned by an employer user
applications -> student x job, one row per pair
"""

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Integer,
    MetaData, String, Table, Text, UniqueConstraint, false, func
)

USER_ROLES = ("admin", "student", "employer", "officer")
APPLICATION_STATUSES = ("applied", "shortlisted", "selected", "rejected")


def _in_list(column: str, values: tuple) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


metadata = MetaData()

users = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(150), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("name", String(200), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("created_at", DateTime, server_default=func.now()),
    CheckConstraint(_in_list("role", USER_ROLES), name="ck_users_role"),
)

students = Table(
    "students", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False, unique=True),
    Column("department", String(200)),
    Column("cgpa", Float),
    Column("graduation_year", Integer),
    Column("resume_url", Text),
)

employers = Table(
    "employers", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False, unique=True),
    Column("company_name", String(200), nullable=False),
    Column("industry", String(200)),
    Column("website", Text),
    Column("is_approved", Boolean, nullable=False, server_default=false()),
)

jobs = Table(
    "jobs", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("employer_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("title", String(200), nullable=False),
    Column("description", Text, nullable=False),
    Column("requirements", Text, nullable=False),
    Column("location", String(200), nullable=False),
    Column("salary", String(100), nullable=False),
    Column("posted_at", DateTime, server_default=func.now()),
)

applications = Table(
    "applications", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("job_id", Integer, ForeignKey("jobs.id"), nullable=False, index=True),
    Column("student_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("status", String(20), nullable=False, server_default="applied"),
    Column("applied_at", DateTime, server_default=func.now()),
    UniqueConstraint("job_id", "student_id", name="uq_applications_job_student"),
    CheckConstraint(_in_list("status", APPLICATION_STATUSES), name="ck_applications_status"),
)
