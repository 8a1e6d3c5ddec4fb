"""Company endpoints: public directory and the poster's own company profile."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobboard.api.auth import require_job_poster
from jobboard.database import get_db
from jobboard.models import Company, User
from jobboard.schemas.common import Pagination
from jobboard.schemas.company import CompanyListResponse, CompanyProfileRequest, CompanyResponse
from jobboard.services import companies

router = APIRouter()


def build_company_response(company: Company, active_job_count: int = 0) -> CompanyResponse:
    response = CompanyResponse.model_validate(company)
    response.active_job_count = active_job_count
    return response


@router.get("", response_model=CompanyListResponse)
async def list_companies(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    industry: Optional[str] = None,
    size: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """Browse companies, verified first."""
    rows, total = await companies.list_companies(db, page, limit, search, industry, size)
    return CompanyListResponse(
        companies=[build_company_response(company, count) for company, count in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/profile", response_model=CompanyResponse)
async def get_company_profile(
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db)
):
    """The signed-in poster's company."""
    company, active_jobs = await companies.get_company_profile(db, current_user.id)
    return build_company_response(company, active_jobs)


@router.post("/profile", response_model=CompanyResponse, status_code=201)
async def create_company_profile(
    company_data: CompanyProfileRequest,
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db)
):
    """Create the poster's company. A poster owns at most one (409 otherwise)."""
    company = await companies.create_company(
        db, current_user.id, company_data.model_dump(exclude_unset=True)
    )
    return build_company_response(company)


@router.put("/profile", response_model=CompanyResponse)
async def update_company_profile(
    company_data: CompanyProfileRequest,
    current_user: User = Depends(require_job_poster),
    db: AsyncSession = Depends(get_db)
):
    """Update the poster's existing company."""
    company = await companies.update_company(
        db, current_user.id, company_data.model_dump(exclude_unset=True)
    )
    _, active_jobs = await companies.get_company_profile(db, company.owner_id)
    return build_company_response(company, active_jobs)
