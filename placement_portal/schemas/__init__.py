"""
Schemas module - Request/Response schemas for API endpoints.

The API contract: what the client sends and receives.
"""

from placement_portal.schemas.schemas import (
    ADMIN_ROLES,
    EDIT_APPLICATION_ROLES,
    ApplicationStatus,
    UserRole,
)

__all__ = ["ADMIN_ROLES", "EDIT_APPLICATION_ROLES", "ApplicationStatus", "UserRole"]
