"""Property-based tests for input validation and ownership policies."""

import pytest
from hypothesis import given, strategies as st, settings
from pydantic import ValidationError

from placement_portal.core.policies import can_manage_application
from placement_portal.schemas.schemas import ApplicationStatus, ApplicationStatusUpdate, RegisterRequest

BASE = {"username": "alice", "email": "alice@campus.edu", "name": "Alice", "role": "student"}

password_chars = st.characters(min_codepoint=33, max_codepoint=126)


class TestPasswordPolicy:
    @given(st.text(alphabet=password_chars, min_size=8, max_size=40))
    @settings(max_examples=50)
    def test_accepts_exactly_policy_compliant_passwords(self, password):
        compliant = any(c.isupper() for c in password) and any(c.isdigit() for c in password)
        try:
            RegisterRequest(**BASE, password=password)
            accepted = True
        except ValidationError:
            accepted = False
        assert accepted == compliant

    @given(st.text(alphabet=password_chars, max_size=7))
    @settings(max_examples=30)
    def test_short_passwords_always_rejected(self, password):
        with pytest.raises(ValidationError):
            RegisterRequest(**BASE, password=password)


class TestStatusEnum:
    @given(st.text(max_size=20))
    @settings(max_examples=50)
    def test_only_enum_values_accepted(self, value):
        valid = value in {s.value for s in ApplicationStatus}
        try:
            ApplicationStatusUpdate(status=value)
            accepted = True
        except ValidationError:
            accepted = False
        assert accepted == valid


class TestOwnershipPolicy:
    roles = st.sampled_from(["admin", "officer", "employer", "student"])
    ids = st.integers(min_value=1, max_value=20)

    @given(role=roles, caller_id=ids, owner_id=ids)
    def test_manage_application(self, role, caller_id, owner_id):
        caller = {"id": caller_id, "role": role}
        job = {"id": 1, "employer_id": owner_id}

        expected = role in ("admin", "officer") or (role == "employer" and caller_id == owner_id)
        assert can_manage_application(caller, job) == expected
