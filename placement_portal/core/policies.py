"""
Resource ownership policies.

A policy takes (caller, resource) and answers allow/deny. Routes call
`enforce` with the answer instead of comparing ids themselves.
"""

from typing import Callable

from fastapi import HTTPException, status

from placement_portal.schemas.schemas import ADMIN_ROLES, UserRole

Policy = Callable[[dict, dict], bool]

ADMIN_ROLE_VALUES = {r.value for r in ADMIN_ROLES}


def is_admin(caller: dict) -> bool:
    return caller["role"] in ADMIN_ROLE_VALUES


def owns_job(caller: dict, job: dict) -> bool:
    return caller["role"] == UserRole.employer.value and job["employer_id"] == caller["id"]


def any_of(*policies: Policy) -> Policy:
    def combined(caller: dict, resource: dict) -> bool:
        return any(policy(caller, resource) for policy in policies)
    return combined


# Admins and officers manage every application; employers only those on their own jobs.
can_manage_application: Policy = any_of(lambda caller, _job: is_admin(caller), owns_job)
can_view_job_applications: Policy = can_manage_application


def enforce(policy: Policy, caller: dict, resource: dict, message: str) -> None:
    """Raise 403 unless the policy allows caller to act on resource."""
    if not policy(caller, resource):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)
