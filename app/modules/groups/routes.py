from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase, get_service_supabase
from app.modules.groups.schemas import GroupCreate, GroupUpdate, GroupResponse
from app.modules.groups.service import GroupService
from app.modules.global_groups.service import GlobalGroupService
from app.modules.posts.schemas import CadenceResponse
from app.modules.posts.service import PostService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_supabase)) -> GroupService:
    return GroupService(supabase)


def get_catalog_service(supabase: Client = Depends(get_service_supabase)) -> GlobalGroupService:
    return GlobalGroupService(supabase)


def get_post_service(supabase: Client = Depends(get_supabase)) -> PostService:
    return PostService(supabase)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    company_id: Optional[str] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    """List the caller's groups, optionally for one company"""
    return service.list_groups(user_data["id"], company_id=company_id)


@router.post("", response_model=GroupResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    catalog: GlobalGroupService = Depends(get_catalog_service)
):
    """Create a group and link it to the global catalog (creating the entry if the name is new)"""
    group = service.create_group(group_data, user_data["id"])
    return catalog.register_group(group, user_data["id"])


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    return service.get_owned_group(group_id, user_data["id"])


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service)
):
    """Update one of the caller's groups"""
    return service.update_group(group_id, group_data, user_data["id"])


@router.delete("/{group_id}", status_code=204)
async def delete_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    catalog: GlobalGroupService = Depends(get_catalog_service)
):
    """Delete one of the caller's groups and uncount it in the global catalog"""
    group = service.delete_group(group_id, user_data["id"])
    catalog.release_group(group)
    return None


@router.post("/{group_id}/cadence", response_model=CadenceResponse)
async def recompute_group_cadence(
    group_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GroupService = Depends(get_group_service),
    posts: PostService = Depends(get_post_service)
):
    """Recompute posts_this_week, posts_this_month and last_post_date from posted posts"""
    service.get_owned_group(group_id, user_data["id"])
    return posts.recompute_cadence(group_id)
