"""
Authentication Routes

POST /register - Register new user (+ role profile) and start a session
POST /login - Login and start a session
POST /logout - End the session
GET /user - Get current user info
GET /user/profile - Get current user's role profile
"""

from fastapi import APIRouter, HTTPException, Depends, Request, Response, status

from placement_portal.core.auth import (
    SessionManager, get_current_user, get_session_manager, get_storage,
    hash_password, password_needs_rehash, require_auth, verify_password
)
from placement_portal.services.storage import DatabaseStorage, DuplicateRecordError
from placement_portal.schemas.schemas import (
    RegisterRequest, LoginRequest, UserResponse, ProfileResponse, MessageResponse, UserRole,
    ERROR_RESPONSES
)
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Authentication"], responses=ERROR_RESPONSES)


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    request: RegisterRequest,
    response: Response,
    storage: DatabaseStorage = Depends(get_storage),
    sessions: SessionManager = Depends(get_session_manager)
):
    """
    Register a new user account.

    Students and employers may include their profile details; the user and
    profile are written in one transaction. Logs the new user in.
    """
    if storage.get_user_by_username(request.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    if storage.get_user_by_email(request.email):
        raise HTTPException(status_code=400, detail="Email already exists")

    try:
        user = storage.register_user(
            {
                "username": request.username,
                "password": hash_password(request.password),
                "role": request.role.value,
                "name": request.name,
                "email": request.email,
            },
            student=request.student_details.model_dump() if request.student_details else None,
            employer=request.employer_details.model_dump() if request.employer_details else None,
        )
    except DuplicateRecordError:
        # lost a race with another registration
        raise HTTPException(status_code=400, detail="Username or email already exists")

    sessions.start(response, user["id"])
    logger.info("user_registered", user_id=user["id"], role=user["role"])
    return user


@router.post("/login", response_model=UserResponse)
async def login(
    request: LoginRequest,
    response: Response,
    storage: DatabaseStorage = Depends(get_storage),
    sessions: SessionManager = Depends(get_session_manager)
):
    """Login with username and password. Sets the session cookie."""
    user = storage.get_user_by_username(request.username)

    if not user or not verify_password(request.password, user["password"]):
        logger.info("login_failed", username=request.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if password_needs_rehash(user["password"]):
        storage.update_user_password(user["id"], hash_password(request.password))
        logger.info("password_rehashed", user_id=user["id"])

    sessions.start(response, user["id"])
    logger.info("login_succeeded", user_id=user["id"])
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(
    http_request: Request,
    response: Response,
    user_id: int = Depends(require_auth),
    sessions: SessionManager = Depends(get_session_manager)
):
    """Destroy the server-side session and clear the cookie."""
    sessions.end(http_request, response)
    logger.info("logged_out", user_id=user_id)
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return user


@router.get("/user/profile", response_model=ProfileResponse)
async def get_my_profile(
    user: dict = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage)
):
    """Current user plus the student or employer profile (none for admin/officer)."""
    student = employer = None
    if user["role"] == UserRole.student.value:
        student = storage.get_student(user["id"])
    elif user["role"] == UserRole.employer.value:
        employer = storage.get_employer(user["id"])
    return ProfileResponse(user=user, student=student, employer=employer)
