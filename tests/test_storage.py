"""Storage layer tests against in-memory SQLite."""

import pytest
from sqlalchemy.exc import IntegrityError

from placement_portal.services.storage import DatabaseStorage, DuplicateRecordError


def make_user(storage, username, role="student"):
    return storage.create_user({
        "username": username,
        "password": "not-a-real-hash",
        "role": role,
        "name": username.title(),
        "email": f"{username}@campus.edu",
    })


def make_job(storage, employer_id, title="Engineer"):
    return storage.create_job({
        "employer_id": employer_id,
        "title": title,
        "description": "desc",
        "requirements": "reqs",
        "location": "Remote",
        "salary": "$1",
    })


class TestUsers:
    def test_create_and_fetch(self, storage):
        user = make_user(storage, "alice")

        assert user["id"] > 0
        assert "password" not in user
        assert storage.get_user(user["id"])["username"] == "alice"
        assert storage.get_user_by_email("alice@campus.edu")["id"] == user["id"]

    def test_missing_user(self, storage):
        assert storage.get_user(42) is None
        assert storage.get_user_by_username("ghost") is None

    def test_unique_username(self, storage):
        make_user(storage, "alice")

        with pytest.raises(DuplicateRecordError) as exc_info:
            storage.create_user({
                "username": "alice", "password": "x", "role": "student",
                "name": "Other", "email": "other@campus.edu",
            })
        assert exc_info.value.involves("username")

    def test_unique_email(self, storage):
        make_user(storage, "alice")

        with pytest.raises(DuplicateRecordError) as exc_info:
            storage.create_user({
                "username": "alice2", "password": "x", "role": "student",
                "name": "Other", "email": "alice@campus.edu",
            })
        assert exc_info.value.involves("email")

    def test_role_check_constraint(self, storage):
        with pytest.raises(IntegrityError):
            make_user(storage, "dean", role="dean")


class TestRegistration:
    def test_register_student_with_profile(self, storage):
        user = storage.register_user(
            {"username": "alice", "password": "x", "role": "student", "name": "Alice", "email": "a@campus.edu"},
            student={"department": "CS", "cgpa": 9.1, "graduation_year": 2026},
        )

        profile = storage.get_student(user["id"])
        assert profile["department"] == "CS"
        assert profile["cgpa"] == pytest.approx(9.1)
        assert storage.get_employer(user["id"]) is None

    def test_profile_for_other_role_ignored(self, storage):
        user = storage.register_user(
            {"username": "acme", "password": "x", "role": "employer", "name": "Acme", "email": "a@campus.edu"},
            student={"department": "CS"},
        )
        assert storage.get_student(user["id"]) is None
        assert storage.get_employer(user["id"]) is None

    def test_failed_profile_rolls_back_user(self, storage, monkeypatch):
        def broken_insert(self, db, user_id, details):
            raise RuntimeError("boom")

        monkeypatch.setattr(DatabaseStorage, "_insert_student", broken_insert)

        with pytest.raises(RuntimeError):
            storage.register_user(
                {"username": "alice", "password": "x", "role": "student", "name": "Alice", "email": "a@campus.edu"},
                student={"department": "CS"},
            )
        assert storage.get_user_by_username("alice") is None
        assert storage.list_users() == []

    def test_one_profile_per_user(self, storage):
        user = make_user(storage, "acme", role="employer")
        storage.create_employer(user["id"], {"company_name": "Acme"})

        with pytest.raises(DuplicateRecordError):
            storage.create_employer(user["id"], {"company_name": "Acme Again"})

    def test_approve_employer(self, storage):
        user = make_user(storage, "acme", role="employer")
        employer = storage.create_employer(user["id"], {"company_name": "Acme"})
        assert not employer["is_approved"]

        assert storage.approve_employer(employer["id"])["is_approved"]
        assert storage.approve_employer(9999) is None


class TestApplications:
    @pytest.fixture
    def world(self, storage):
        acme = make_user(storage, "acme", role="employer")
        globex = make_user(storage, "globex", role="employer")
        alice = make_user(storage, "alice")
        bob = make_user(storage, "bob")
        return {
            "acme_job": make_job(storage, acme["id"], "Acme Job"),
            "globex_job": make_job(storage, globex["id"], "Globex Job"),
            "acme": acme, "globex": globex, "alice": alice, "bob": bob,
        }

    def test_unique_job_student_pair(self, storage, world):
        storage.create_application(world["acme_job"]["id"], world["alice"]["id"])

        with pytest.raises(DuplicateRecordError):
            storage.create_application(world["acme_job"]["id"], world["alice"]["id"])

        assert len(storage.get_applications_by_student(world["alice"]["id"])) == 1

    def test_views_join_job_and_student(self, storage, world):
        storage.create_application(world["acme_job"]["id"], world["alice"]["id"])
        storage.create_application(world["globex_job"]["id"], world["alice"]["id"])
        storage.create_application(world["acme_job"]["id"], world["bob"]["id"])

        by_student = storage.get_applications_by_student(world["alice"]["id"])
        assert {a["job"]["title"] for a in by_student} == {"Acme Job", "Globex Job"}
        assert all(a["student"]["username"] == "alice" for a in by_student)
        assert all("password" not in a["student"] for a in by_student)

        by_employer = storage.get_applications_by_employer(world["acme"]["id"])
        assert {a["student"]["username"] for a in by_employer} == {"alice", "bob"}
        assert all(a["job"]["employer_id"] == world["acme"]["id"] for a in by_employer)

        by_job = storage.get_applications_by_job(world["globex_job"]["id"])
        assert [a["student"]["username"] for a in by_job] == ["alice"]

        assert len(storage.get_all_applications()) == 3

    def test_update_status(self, storage, world):
        application = storage.create_application(world["acme_job"]["id"], world["alice"]["id"])
        assert application["status"] == "applied"

        updated = storage.update_application_status(application["id"], "shortlisted")
        assert updated["status"] == "shortlisted"
        assert storage.get_application(application["id"])["status"] == "shortlisted"

    def test_update_missing_application(self, storage):
        assert storage.update_application_status(9999, "selected") is None

    def test_jobs_joined_with_employer(self, storage, world):
        jobs = storage.get_jobs()
        assert len(jobs) == 2
        by_title = {j["title"]: j for j in jobs}
        assert by_title["Acme Job"]["employer"]["username"] == "acme"
        assert [j["title"] for j in storage.get_jobs_by_employer(world["globex"]["id"])] == ["Globex Job"]


def test_stats_count_rows(storage):
    employers = []
    for i in range(3):
        user = make_user(storage, f"employer{i}", role="employer")
        storage.create_employer(user["id"], {"company_name": f"Company {i}"})
        employers.append(user)
    students = []
    for i in range(5):
        user = make_user(storage, f"student{i}")
        storage.create_student(user["id"], {"department": "CS"})
        students.append(user)
    jobs = [make_job(storage, employers[i % 3]["id"], f"Job {i}") for i in range(6)]
    applications = [
        storage.create_application(jobs[i]["id"], students[i]["id"]) for i in range(5)
    ]
    storage.update_application_status(applications[0]["id"], "selected")
    storage.update_application_status(applications[1]["id"], "rejected")

    assert storage.get_stats() == {
        "total_students": 5,
        "total_employers": 3,
        "total_jobs": 6,
        "placements": 1,
    }
