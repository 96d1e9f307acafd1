"""
Student Routes

GET /student/profile - Get own profile
POST /student/profile - Update profile (only provided fields)
POST /student/profile/upload - Upload resume (PDF/DOC/DOCX)
GET /student/applications - Get my applications
POST /student/apply - Apply to an opportunity
GET /student/opportunities - Opportunities I am eligible for
GET /students/verified - Verified students (public)
GET /students/{student_id} - One student (owner, TPO or recruiter)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.core.auth import get_current_student, require_owner_or_roles
from app.core.errors import NotFound
from app.services.eligibility_service import filter_eligible
from app.services.mongo_service import StudentService, OpportunityService, ApplicationService
from app.services.storage_service import get_storage
from app.utils.file_upload import read_resume_file
from app.schemas.schemas import (
    StudentUpdate, StudentEnvelope, StudentListResponse, ResumeUploadResponse,
    ApplicationCreate, ApplicationEnvelope, ApplicationListResponse,
    OpportunityListResponse, Role
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Students"])


def _load_student(student_id: str) -> dict:
    student = StudentService().get_by_id(student_id)
    if not student:
        raise NotFound("Student not found")
    return student


@router.get("/student/profile", response_model=StudentEnvelope)
def get_profile(user: dict = Depends(get_current_student)):
    """Get current student's profile."""
    return {"student": _load_student(user["id"])}


@router.post("/student/profile", response_model=StudentEnvelope)
def update_profile(data: StudentUpdate, user: dict = Depends(get_current_student)):
    """Update student profile. Only provided fields are updated."""
    update = data.model_dump(exclude_unset=True, exclude_none=True)
    student = StudentService().update_profile(user["id"], update)
    if not student:
        raise NotFound("Student not found")
    return {"message": "Profile saved", "student": student}


@router.post("/student/profile/upload", response_model=ResumeUploadResponse)
def upload_resume(
    file: Optional[UploadFile] = File(None, description="Resume file (PDF, DOC or DOCX)"),
    user: dict = Depends(get_current_student),
    storage=Depends(get_storage),
):
    """
    Upload a resume to the asset host and store its URL on the profile.

    Applications made earlier keep the resume URL they were created with.
    """
    content, filename = read_resume_file(file)
    service = StudentService()
    if not service.get_by_id(user["id"]):
        raise NotFound("Student not found")

    url = storage.upload(content, filename, folder="placement-resumes")
    service.set_resume(user["id"], url, filename)
    logger.info(f"Resume uploaded for student {user['id']}")
    return ResumeUploadResponse(url=url, file_name=filename)


@router.get("/student/applications", response_model=ApplicationListResponse)
def get_my_applications(user: dict = Depends(get_current_student)):
    """Get all applications of the current student, newest first."""
    return {"applications": ApplicationService().list_for_student(user["id"])}


@router.post("/student/apply", response_model=ApplicationEnvelope, status_code=201)
def apply(data: ApplicationCreate, user: dict = Depends(get_current_student)):
    """Apply to an opportunity. A student can apply to each opportunity once."""
    application = ApplicationService().apply(
        student_id=user["id"],
        opportunity_id=data.opportunity_id,
        company_id=data.company_id,
        position=data.position,
        additional_info=data.additional_info,
    )
    return {"message": "Application submitted", "application": application}


@router.get("/student/opportunities", response_model=OpportunityListResponse)
def get_eligible_opportunities(user: dict = Depends(get_current_student)):
    """Opportunities matching the student's GPA, department and skills."""
    student = _load_student(user["id"])
    opportunities = OpportunityService().list_all()
    return {"opportunities": list(filter_eligible(student, opportunities))}


@router.get("/students/verified", response_model=StudentListResponse)
def get_verified_students():
    """List students verified by the placement office."""
    return {"students": StudentService().list_verified()}


@router.get("/students/{student_id}", response_model=StudentEnvelope)
def get_student(
    student_id: str,
    user: dict = Depends(require_owner_or_roles(Role.tpo, Role.recruiter, param="student_id")),
):
    """A student's profile; visible to that student, TPOs and recruiters."""
    return {"student": _load_student(student_id)}
