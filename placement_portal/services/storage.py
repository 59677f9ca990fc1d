"""
Storage Service - data-access facade over the relational store.

One method per entity operation. Composite reads join the related Job and
User rows and return nested dicts:

    {"id": 1, "status": "applied", ..., "job": {...}, "student": {...}}

Failures propagate as SQLAlchemy errors, except unique-constraint
violations which become DuplicateRecordError.
"""

from contextlib import contextmanager
from typing import Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from placement_portal.db.database import Database
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)

USER_COLUMNS = ("id", "username", "role", "name", "email", "created_at")
JOB_COLUMNS = ("id", "employer_id", "title", "description", "requirements", "location", "salary", "posted_at")
APPLICATION_COLUMNS = ("id", "job_id", "student_id", "status", "applied_at")
STUDENT_COLUMNS = ("id", "user_id", "department", "cgpa", "graduation_year", "resume_url")
EMPLOYER_COLUMNS = ("id", "user_id", "company_name", "industry", "website", "is_approved")


class DuplicateRecordError(Exception):
    """A write hit a unique constraint (username, email, profile, job+student)."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def involves(self, column: str) -> bool:
        return column in self.detail


def _is_unique_violation(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


def _cols(alias: str, columns: tuple, prefix: Optional[str] = None) -> str:
    if prefix is None:
        return ", ".join(f"{alias}.{c}" for c in columns)
    return ", ".join(f"{alias}.{c} AS {prefix}__{c}" for c in columns)


def _nest(row: dict) -> dict:
    """Fold `job__title`-style keys into {"job": {"title": ...}}."""
    out: Dict = {}
    for key, value in row.items():
        head, sep, tail = key.partition("__")
        if sep:
            out.setdefault(head, {})[tail] = value
        else:
            out[key] = value
    return out


APPLICATION_VIEW_SQL = f"""
    SELECT {_cols("a", APPLICATION_COLUMNS)},
           {_cols("j", JOB_COLUMNS, "job")},
           {_cols("u", USER_COLUMNS, "student")}
    FROM applications a
    JOIN jobs j ON a.job_id = j.id
    JOIN users u ON a.student_id = u.id
"""

APPLICATION_VIEW_ORDER = " ORDER BY a.applied_at DESC, a.id DESC"


class DatabaseStorage:
    """Typed CRUD over users, profiles, jobs and applications."""

    def __init__(self, database: Database):
        self.database = database

    @contextmanager
    def _unique_guard(self):
        try:
            yield
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise DuplicateRecordError(str(e.orig)) from e
            raise

    def _fetch_one(self, sql: str, params: dict) -> Optional[dict]:
        with self.database.session() as db:
            row = db.execute(text(sql), params).mappings().first()
        return dict(row) if row else None

    def _fetch_all(self, sql: str, params: Optional[dict] = None) -> List[dict]:
        return self.database.execute_raw_sql(sql, params)

    # ============================================================
    # USERS
    # ============================================================

    def get_user(self, user_id: int) -> Optional[dict]:
        return self._fetch_one("SELECT * FROM users WHERE id = :id", {"id": user_id})

    def get_user_by_username(self, username: str) -> Optional[dict]:
        return self._fetch_one("SELECT * FROM users WHERE username = :username", {"username": username})

    def get_user_by_email(self, email: str) -> Optional[dict]:
        return self._fetch_one("SELECT * FROM users WHERE email = :email", {"email": email})

    def list_users(self) -> List[dict]:
        return self._fetch_all(f"SELECT {_cols('u', USER_COLUMNS)} FROM users u ORDER BY u.id")

    def _insert_user(self, db: Session, user: dict) -> dict:
        result = db.execute(
            text(f"""
                INSERT INTO users (username, password, role, name, email)
                VALUES (:username, :password, :role, :name, :email)
                RETURNING {", ".join(USER_COLUMNS)}
            """),
            {
                "username": user["username"],
                "password": user["password"],
                "role": user["role"],
                "name": user["name"],
                "email": user["email"],
            }
        )
        return dict(result.mappings().one())

    def create_user(self, user: dict) -> dict:
        """Insert a user. `user["password"]` must already be hashed."""
        with self._unique_guard(), self.database.session() as db:
            return self._insert_user(db, user)

    def update_user_password(self, user_id: int, password_hash: str) -> bool:
        with self.database.session() as db:
            result = db.execute(
                text("UPDATE users SET password = :password WHERE id = :id"),
                {"id": user_id, "password": password_hash}
            )
            return result.rowcount == 1

    # ============================================================
    # PROFILES
    # ============================================================

    def _insert_student(self, db: Session, user_id: int, details: dict) -> dict:
        result = db.execute(
            text(f"""
                INSERT INTO students (user_id, department, cgpa, graduation_year, resume_url)
                VALUES (:user_id, :department, :cgpa, :graduation_year, :resume_url)
                RETURNING {", ".join(STUDENT_COLUMNS)}
            """),
            {
                "user_id": user_id,
                "department": details.get("department"),
                "cgpa": details.get("cgpa"),
                "graduation_year": details.get("graduation_year"),
                "resume_url": details.get("resume_url"),
            }
        )
        return dict(result.mappings().one())

    def _insert_employer(self, db: Session, user_id: int, details: dict) -> dict:
        result = db.execute(
            text(f"""
                INSERT INTO employers (user_id, company_name, industry, website)
                VALUES (:user_id, :company_name, :industry, :website)
                RETURNING {", ".join(EMPLOYER_COLUMNS)}
            """),
            {
                "user_id": user_id,
                "company_name": details["company_name"],
                "industry": details.get("industry"),
                "website": details.get("website"),
            }
        )
        return dict(result.mappings().one())

    def create_student(self, user_id: int, details: dict) -> dict:
        with self._unique_guard(), self.database.session() as db:
            return self._insert_student(db, user_id, details)

    def create_employer(self, user_id: int, details: dict) -> dict:
        with self._unique_guard(), self.database.session() as db:
            return self._insert_employer(db, user_id, details)

    def register_user(
        self,
        user: dict,
        student: Optional[dict] = None,
        employer: Optional[dict] = None
    ) -> dict:
        """
        Create a user and its role profile in one transaction.
        If the profile insert fails, the user row is rolled back too.
        """
        with self._unique_guard(), self.database.session() as db:
            created = self._insert_user(db, user)
            if created["role"] == "student" and student is not None:
                self._insert_student(db, created["id"], student)
            elif created["role"] == "employer" and employer is not None:
                self._insert_employer(db, created["id"], employer)
        return created

    def get_student(self, user_id: int) -> Optional[dict]:
        return self._fetch_one(
            f"SELECT {', '.join(STUDENT_COLUMNS)} FROM students WHERE user_id = :uid", {"uid": user_id}
        )

    def get_employer(self, user_id: int) -> Optional[dict]:
        return self._fetch_one(
            f"SELECT {', '.join(EMPLOYER_COLUMNS)} FROM employers WHERE user_id = :uid", {"uid": user_id}
        )

    def list_students(self) -> List[dict]:
        return self._fetch_all(f"SELECT {', '.join(STUDENT_COLUMNS)} FROM students ORDER BY id")

    def list_employers(self) -> List[dict]:
        return self._fetch_all(f"SELECT {', '.join(EMPLOYER_COLUMNS)} FROM employers ORDER BY id")

    def approve_employer(self, employer_id: int) -> Optional[dict]:
        return self._fetch_one(
            f"""
                UPDATE employers SET is_approved = :approved WHERE id = :id
                RETURNING {", ".join(EMPLOYER_COLUMNS)}
            """,
            {"id": employer_id, "approved": True}
        )

    # ============================================================
    # JOBS
    # ============================================================

    def create_job(self, job: dict) -> dict:
        with self.database.session() as db:
            result = db.execute(
                text(f"""
                    INSERT INTO jobs (employer_id, title, description, requirements, location, salary)
                    VALUES (:employer_id, :title, :description, :requirements, :location, :salary)
                    RETURNING {", ".join(JOB_COLUMNS)}
                """),
                {
                    "employer_id": job["employer_id"],
                    "title": job["title"],
                    "description": job["description"],
                    "requirements": job["requirements"],
                    "location": job["location"],
                    "salary": job["salary"],
                }
            )
            return dict(result.mappings().one())

    def get_job(self, job_id: int) -> Optional[dict]:
        return self._fetch_one(f"SELECT {', '.join(JOB_COLUMNS)} FROM jobs WHERE id = :id", {"id": job_id})

    def get_jobs(self) -> List[dict]:
        """All jobs, each with its employer user under "employer"."""
        rows = self._fetch_all(f"""
            SELECT {_cols("j", JOB_COLUMNS)}, {_cols("u", USER_COLUMNS, "employer")}
            FROM jobs j
            JOIN users u ON j.employer_id = u.id
            ORDER BY j.posted_at DESC, j.id DESC
        """)
        return [_nest(r) for r in rows]

    def get_jobs_by_employer(self, employer_id: int) -> List[dict]:
        return self._fetch_all(
            f"""
                SELECT {", ".join(JOB_COLUMNS)} FROM jobs
                WHERE employer_id = :eid ORDER BY posted_at DESC, id DESC
            """,
            {"eid": employer_id}
        )

    # ============================================================
    # APPLICATIONS
    # ============================================================

    def create_application(self, job_id: int, student_id: int) -> dict:
        """Raises DuplicateRecordError if the student already applied to the job."""
        with self._unique_guard(), self.database.session() as db:
            result = db.execute(
                text(f"""
                    INSERT INTO applications (job_id, student_id, status)
                    VALUES (:job_id, :student_id, 'applied')
                    RETURNING {", ".join(APPLICATION_COLUMNS)}
                """),
                {"job_id": job_id, "student_id": student_id}
            )
            return dict(result.mappings().one())

    def get_application(self, application_id: int) -> Optional[dict]:
        return self._fetch_one(
            f"SELECT {', '.join(APPLICATION_COLUMNS)} FROM applications WHERE id = :id",
            {"id": application_id}
        )

    def _application_view(self, where: str = "", params: Optional[dict] = None) -> List[dict]:
        rows = self._fetch_all(APPLICATION_VIEW_SQL + where + APPLICATION_VIEW_ORDER, params)
        return [_nest(r) for r in rows]

    def get_applications_by_student(self, student_id: int) -> List[dict]:
        return self._application_view("WHERE a.student_id = :sid", {"sid": student_id})

    def get_applications_by_employer(self, employer_id: int) -> List[dict]:
        """Applications against any job the employer owns, in a single query."""
        return self._application_view("WHERE j.employer_id = :eid", {"eid": employer_id})

    def get_applications_by_job(self, job_id: int) -> List[dict]:
        return self._application_view("WHERE a.job_id = :jid", {"jid": job_id})

    def get_all_applications(self) -> List[dict]:
        return self._application_view()

    def update_application_status(self, application_id: int, status: str) -> Optional[dict]:
        updated = self._fetch_one(
            f"""
                UPDATE applications SET status = :status WHERE id = :id
                RETURNING {", ".join(APPLICATION_COLUMNS)}
            """,
            {"id": application_id, "status": status}
        )
        if updated:
            logger.info("application_status_updated", application_id=application_id, status=status)
        return updated

    # ============================================================
    # STATS
    # ============================================================

    def get_stats(self) -> dict:
        with self.database.session() as db:
            def count(sql: str) -> int:
                return int(db.execute(text(sql)).scalar() or 0)

            return {
                "total_students": count("SELECT COUNT(*) FROM students"),
                "total_employers": count("SELECT COUNT(*) FROM employers"),
                "total_jobs": count("SELECT COUNT(*) FROM jobs"),
                "placements": count("SELECT COUNT(*) FROM applications WHERE status = 'selected'"),
            }
