"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Any
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class Role(str, Enum):
    student = "student"
    recruiter = "recruiter"
    tpo = "tpo"


class AccountType(str, Enum):
    """Account types accepted by /register and /login ('company' == recruiter)."""
    student = "student"
    recruiter = "recruiter"
    company = "company"

    @property
    def role(self) -> Role:
        return Role.student if self is AccountType.student else Role.recruiter


class ApplicationStatus(str, Enum):
    pending = "pending"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6)
    type: AccountType

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    type: AccountType

class TpoRegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6)

class TpoLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterResponse(BaseModel):
    message: str
    user: dict

class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: dict


# ============================================================
# STUDENT SCHEMAS
# ============================================================

class Project(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None

class Certification(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    issuer: Optional[str] = None
    date: Optional[str] = None

class StudentUpdate(BaseModel):
    """Partial profile update. Only fields present in the body are applied."""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    roll_number: Optional[str] = None
    semester: Optional[str] = None
    gpa: Optional[str] = None
    tenth_percent: Optional[str] = None
    twelfth_percent: Optional[str] = None
    active_backlogs: Optional[str] = None
    skills: Optional[List[str]] = None
    preferred_roles: Optional[List[str]] = None
    preferred_locations: Optional[List[str]] = None
    projects: Optional[List[Project]] = None
    certifications: Optional[List[Certification]] = None
    resume_url: Optional[str] = None
    resume_file_name: Optional[str] = None

    @field_validator(
        "phone", "department", "roll_number", "semester", "gpa",
        "tenth_percent", "twelfth_percent", "active_backlogs",
        mode="before",
    )
    @classmethod
    def _number_to_str(cls, v: Any) -> Any:
        # Academic fields are stored as strings; clients often send numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("skills", "preferred_roles", "preferred_locations", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> Any:
        # A single string becomes a one-item list; blank becomes empty
        if isinstance(v, str):
            return [v.strip()] if v.strip() else []
        return v

class StudentResponse(BaseModel):
    id: str
    name: str
    email: str
    is_verified: bool = False
    phone: str = ""
    department: str = ""
    roll_number: str = ""
    semester: str = ""
    gpa: str = ""
    tenth_percent: str = ""
    twelfth_percent: str = ""
    active_backlogs: str = ""
    skills: List[str] = []
    preferred_roles: List[str] = []
    preferred_locations: List[str] = []
    projects: List[Project] = []
    certifications: List[Certification] = []
    resume_url: str = ""
    resume_file_name: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ResumeUploadResponse(BaseModel):
    url: str
    file_name: str


# ============================================================
# COMPANY / TPO SCHEMAS
# ============================================================

class CompanyResponse(BaseModel):
    id: str
    name: str
    email: str
    created_at: Optional[datetime] = None


# ============================================================
# OPPORTUNITY SCHEMAS
# ============================================================

class OpportunityCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    role: Optional[str] = None
    package: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    deadline: Optional[datetime] = None
    min_gpa: float = Field(0, ge=0)
    department: Optional[str] = None
    skills: List[str] = []

class OpportunityUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    role: Optional[str] = None
    package: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    deadline: Optional[datetime] = None
    min_gpa: Optional[float] = Field(None, ge=0)
    department: Optional[str] = None
    skills: Optional[List[str]] = None

class OpportunityResponse(BaseModel):
    id: str
    company: Optional[str] = None
    company_name: Optional[str] = None
    title: str
    role: Optional[str] = None
    package: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    deadline: Optional[datetime] = None
    min_gpa: float = 0
    department: Optional[str] = None
    skills: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    opportunity_id: str = Field(..., min_length=1)
    company_id: Optional[str] = None
    position: str = Field(..., min_length=1)
    additional_info: Optional[str] = None

class OpportunitySummary(BaseModel):
    id: str
    title: str
    role: Optional[str] = None
    package: Optional[str] = None

class ApplicationResponse(BaseModel):
    id: str
    student: str
    company: str
    opportunity_id: str
    position: str
    resume_url: str = ""
    additional_info: Optional[str] = None
    status: str = ApplicationStatus.pending.value
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # joined fields, filled depending on who lists
    company_name: Optional[str] = None
    opportunity: Optional[OpportunitySummary] = None
    student_profile: Optional[StudentResponse] = None


# ============================================================
# ENVELOPES (single item / list responses)
# ============================================================

class StudentEnvelope(BaseModel):
    message: Optional[str] = None
    student: StudentResponse

class StudentListResponse(BaseModel):
    students: List[StudentResponse]

class CompanyListResponse(BaseModel):
    companies: List[CompanyResponse]

class OpportunityEnvelope(BaseModel):
    message: Optional[str] = None
    opportunity: OpportunityResponse

class OpportunityListResponse(BaseModel):
    opportunities: List[OpportunityResponse]

class ApplicationEnvelope(BaseModel):
    message: Optional[str] = None
    application: ApplicationResponse

class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
