from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.posts.schemas import PostCreate, PostUpdate, PostResponse, PostStatus
from app.modules.posts.service import PostService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/posts", tags=["posts"])


def get_post_service(supabase: Client = Depends(get_supabase)) -> PostService:
    return PostService(supabase)


@router.get("", response_model=List[PostResponse])
async def list_posts(
    company_id: Optional[str] = None,
    status: Optional[PostStatus] = None,
    user_data: Dict = Depends(get_current_user_id),
    service: PostService = Depends(get_post_service)
):
    """List the caller's posts, optionally filtered by company and status"""
    return service.list_posts(user_data["id"], company_id=company_id, status=status)


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    post_data: PostCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: PostService = Depends(get_post_service)
):
    """Create a post for one of the caller's companies"""
    return service.create_post(post_data, user_data["id"])


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: PostService = Depends(get_post_service)
):
    return service.get_owned_post(post_id, user_data["id"])


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: PostService = Depends(get_post_service)
):
    """Update a post. Setting status to 'posted' refreshes the group's posting cadence."""
    return service.update_post(post_id, post_data, user_data["id"])


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: PostService = Depends(get_post_service)
):
    service.delete_post(post_id, user_data["id"])
    return None
