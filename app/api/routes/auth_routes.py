"""
Authentication Routes

POST /register - Register a student or company account
POST /login - Login and get JWT token
"""

import logging

from fastapi import APIRouter

from app.core.auth import hash_password, verify_password, create_access_token
from app.core.errors import Unauthorized
from app.services.mongo_service import get_account_service, serialize_doc
from app.schemas.schemas import (
    RegisterRequest, RegisterResponse, LoginRequest, LoginResponse, Role
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

INVALID_CREDENTIALS = "Invalid credentials"


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new student or company account.

    Emails are unique per account type: the same address can hold one
    student and one company account.
    """
    role = request.type.role
    service = get_account_service(role)
    user = service.create(request.name, request.email, hash_password(request.password))

    label = "Student" if role is Role.student else "Company"
    logger.info(f"Registered {role.value} {user['id']}")
    return RegisterResponse(message=f"{label} registered successfully", user=user)


def authenticate_account(role: Role, email: str, password: str) -> LoginResponse:
    """Check credentials against the role's collection and issue a token."""
    account = get_account_service(role).get_by_email(email)

    # same message for unknown email, wrong password and wrong type
    if not account or not verify_password(password, account["password"]):
        raise Unauthorized(INVALID_CREDENTIALS)

    token = create_access_token(str(account["_id"]), role, account["email"])
    return LoginResponse(token=token, user=serialize_doc(account))


@router.post("/login", response_model=LoginResponse)
def login(request: LoginRequest):
    """
    Login and receive JWT access token (valid 7 days).

    Include token in requests: Authorization: Bearer <token>
    """
    return authenticate_account(request.type.role, request.email, request.password)
