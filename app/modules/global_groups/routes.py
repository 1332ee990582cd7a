from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase
from app.modules.global_groups.schemas import (
    GlobalGroupResponse, GlobalGroupContribute, GlobalGroupAddRequest,
    GlobalGroupImpact, GlobalGroupDeleteResponse, ReconcileReport
)
from app.modules.global_groups.service import GlobalGroupService
from app.modules.groups.schemas import GroupResponse
from app.core.dependencies import get_current_user_id, require_super_user
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/global-groups", tags=["global-groups"])


def get_global_group_service(supabase: Client = Depends(get_service_supabase)) -> GlobalGroupService:
    return GlobalGroupService(supabase)


@router.get("", response_model=List[GlobalGroupResponse])
async def list_global_groups(
    user_data: Dict = Depends(get_current_user_id),
    service: GlobalGroupService = Depends(get_global_group_service)
):
    """List the shared global group catalog"""
    return service.list_global_groups()


@router.post("/contribute", response_model=GlobalGroupResponse, status_code=201)
async def contribute_global_group(
    data: GlobalGroupContribute,
    user_data: Dict = Depends(get_current_user_id),
    service: GlobalGroupService = Depends(get_global_group_service)
):
    """Contribute a new group to the catalog (name, category, location.city and location.state required)"""
    return service.contribute(data, user_data["id"])


@router.post("/reconcile", response_model=ReconcileReport)
async def reconcile_global_groups(
    user_data: Dict = Depends(require_super_user),
    service: GlobalGroupService = Depends(get_global_group_service)
):
    """Recompute added_by_count for every entry and repair group back-references (super users only)"""
    return service.reconcile_counts()


@router.get("/{global_group_id}", response_model=GlobalGroupResponse)
async def get_global_group(
    global_group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GlobalGroupService = Depends(get_global_group_service)
):
    return service.get_global_group(global_group_id)


@router.post("/{global_group_id}/add", response_model=GroupResponse, status_code=201)
async def add_global_group(
    global_group_id: str,
    data: GlobalGroupAddRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: GlobalGroupService = Depends(get_global_group_service)
):
    """Add a catalog entry to one of the caller's companies"""
    return service.add_to_company(global_group_id, data.company_id, user_data["id"])


@router.get("/{global_group_id}/impact", response_model=GlobalGroupImpact)
async def get_global_group_impact(
    global_group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GlobalGroupService = Depends(get_global_group_service)
):
    """Who else uses this entry; check before deleting"""
    return service.get_impact(global_group_id, user_data["id"])


@router.delete("/{global_group_id}", response_model=GlobalGroupDeleteResponse)
async def delete_global_group(
    global_group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GlobalGroupService = Depends(get_global_group_service)
):
    """Delete a catalog entry with its tenant groups and posts (contributor only, fewer than 5 users)"""
    return service.delete_global_group(global_group_id, user_data["id"])
