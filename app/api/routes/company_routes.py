"""
Company Routes (recruiter accounts)

POST /company/opportunities - Create job posting
GET /company/opportunities - Get company's postings
PUT /company/opportunities/{id} - Update own posting
DELETE /company/opportunities/{id} - Delete own posting
GET /company/applications - Get applications received
"""

import logging

from fastapi import APIRouter, Depends

from app.core.auth import get_current_company
from app.core.errors import NotFound
from app.services.mongo_service import OpportunityService, ApplicationService
from app.schemas.schemas import (
    OpportunityCreate, OpportunityUpdate, OpportunityEnvelope, OpportunityListResponse,
    ApplicationListResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/company", tags=["Companies"])

OPPORTUNITY_NOT_FOUND = "Opportunity not found"


@router.post("/opportunities", response_model=OpportunityEnvelope, status_code=201)
def create_opportunity(data: OpportunityCreate, company: dict = Depends(get_current_company)):
    """Create a job posting owned by the calling company."""
    opportunity = OpportunityService().create(company["id"], data.model_dump())
    logger.info(f"Company {company['id']} posted opportunity {opportunity['id']}")
    return {"message": "Opportunity created", "opportunity": opportunity}


@router.get("/opportunities", response_model=OpportunityListResponse)
def get_company_opportunities(company: dict = Depends(get_current_company)):
    """Get all postings of this company."""
    return {"opportunities": OpportunityService().list_for_company(company["id"])}


@router.put("/opportunities/{opportunity_id}", response_model=OpportunityEnvelope)
def update_opportunity(
    opportunity_id: str,
    update: OpportunityUpdate,
    company: dict = Depends(get_current_company)
):
    """
    Update a posting. Only the owning company can update; anyone else gets
    404 as if the posting did not exist.
    """
    fields = update.model_dump(exclude_unset=True, exclude_none=True)
    opportunity = OpportunityService().update_owned(opportunity_id, company["id"], fields)
    if not opportunity:
        raise NotFound(OPPORTUNITY_NOT_FOUND)
    return {"message": "Opportunity updated", "opportunity": opportunity}


@router.delete("/opportunities/{opportunity_id}", response_model=MessageResponse)
def delete_opportunity(opportunity_id: str, company: dict = Depends(get_current_company)):
    """Delete a posting. Past applications to it are kept."""
    if not OpportunityService().delete_owned(opportunity_id, company["id"]):
        raise NotFound(OPPORTUNITY_NOT_FOUND)
    return MessageResponse(message="Opportunity deleted")


@router.get("/applications", response_model=ApplicationListResponse)
def get_applications(company: dict = Depends(get_current_company)):
    """Applications addressed to this company, with applicant profiles."""
    return {"applications": ApplicationService().list_for_company(company["id"])}
