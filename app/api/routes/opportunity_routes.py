"""
Opportunity Routes (public)

GET /opportunities - List all postings with company name
"""

from fastapi import APIRouter

from app.services.mongo_service import OpportunityService
from app.schemas.schemas import OpportunityListResponse

router = APIRouter(tags=["Opportunities"])


@router.get("/opportunities", response_model=OpportunityListResponse)
def list_opportunities():
    return {"opportunities": OpportunityService().list_all()}
