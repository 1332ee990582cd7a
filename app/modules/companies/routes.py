from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.companies.schemas import CompanyCreate, CompanyUpdate, CompanyResponse
from app.modules.companies.service import CompanyService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/companies", tags=["companies"])


def get_company_service(supabase: Client = Depends(get_supabase)) -> CompanyService:
    return CompanyService(supabase)


@router.get("", response_model=List[CompanyResponse])
async def list_companies(
    user_data: Dict = Depends(get_current_user_id),
    service: CompanyService = Depends(get_company_service)
):
    """List the caller's companies"""
    return service.list_companies(user_data["id"])


@router.post("", response_model=CompanyResponse, status_code=201)
async def create_company(
    company_data: CompanyCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: CompanyService = Depends(get_company_service)
):
    """Create a company"""
    return service.create_company(company_data, user_data["id"])


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(
    company_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: CompanyService = Depends(get_company_service)
):
    return service.get_owned_company(company_id, user_data["id"])


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: str,
    company_data: CompanyUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: CompanyService = Depends(get_company_service)
):
    """Update a company (owner only)"""
    return service.update_company(company_id, company_data, user_data["id"])


@router.delete("/{company_id}", status_code=204)
async def delete_company(
    company_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: CompanyService = Depends(get_company_service)
):
    """Delete a company (owner only)"""
    service.delete_company(company_id, user_data["id"])
    return None
