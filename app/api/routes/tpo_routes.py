"""
TPO Routes (training & placement officer)

POST /tpo/register - Create a TPO account (bootstrap)
POST /tpo/login - Login as TPO
GET /tpo/students - All students
GET /tpo/companies - All companies
GET /tpo/opportunities - All postings
POST /tpo/verify-student/{student_id} - Mark a student as verified
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends

from app.api.routes.auth_routes import authenticate_account
from app.core.auth import hash_password, get_current_tpo
from app.core.errors import NotFound
from app.services.email_service import send_verification_email
from app.services.mongo_service import TpoService, StudentService, CompanyService, OpportunityService
from app.schemas.schemas import (
    TpoRegisterRequest, TpoLoginRequest, RegisterResponse, LoginResponse,
    StudentEnvelope, StudentListResponse, CompanyListResponse, OpportunityListResponse, Role
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tpo", tags=["TPO"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(request: TpoRegisterRequest):
    """Register a TPO account (initial setup; see scripts/create_tpo.py)."""
    tpo = TpoService().create(request.name, request.email, hash_password(request.password))
    logger.info(f"Registered tpo {tpo['id']}")
    return RegisterResponse(message="TPO registered", user=tpo)


@router.post("/login", response_model=LoginResponse)
def login(request: TpoLoginRequest):
    return authenticate_account(Role.tpo, request.email, request.password)


@router.get("/students", response_model=StudentListResponse)
def get_students(tpo: dict = Depends(get_current_tpo)):
    return {"students": StudentService().list()}


@router.get("/companies", response_model=CompanyListResponse)
def get_companies(tpo: dict = Depends(get_current_tpo)):
    return {"companies": CompanyService().list()}


@router.get("/opportunities", response_model=OpportunityListResponse)
def get_opportunities(tpo: dict = Depends(get_current_tpo)):
    return {"opportunities": OpportunityService().list_all()}


@router.post("/verify-student/{student_id}", response_model=StudentEnvelope)
def verify_student(
    student_id: str,
    background_tasks: BackgroundTasks,
    tpo: dict = Depends(get_current_tpo)
):
    """Set the student's verification flag and email them about it."""
    student = StudentService().verify(student_id)
    if not student:
        raise NotFound("Student not found")

    logger.info(f"TPO {tpo['id']} verified student {student_id}")
    background_tasks.add_task(send_verification_email, student)
    return {"message": "Student verified", "student": student}
