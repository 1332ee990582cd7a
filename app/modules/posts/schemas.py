from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

PostStatus = Literal["draft", "scheduled", "pending_approval", "ready_to_post", "posted"]


class PostCreate(BaseModel):
    company_id: str = Field(..., min_length=1)
    post_type: str = Field(..., min_length=1)
    content: str
    title: Optional[str] = None
    group_id: Optional[str] = None
    status: PostStatus = "draft"
    scheduled_for: Optional[datetime] = None
    posted_at: Optional[datetime] = None
    post_link: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Post content is required and must be a non-empty string")
        return v


class PostUpdate(BaseModel):
    group_id: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    post_type: Optional[str] = None
    status: Optional[PostStatus] = None
    scheduled_for: Optional[datetime] = None
    posted_at: Optional[datetime] = None
    post_link: Optional[str] = None


class PostResponse(BaseModel):
    id: str
    user_id: str
    company_id: str
    group_id: Optional[str] = None
    group_name: Optional[str] = None
    post_type: str
    title: Optional[str] = None
    content: str
    status: str
    scheduled_for: Optional[datetime] = None
    posted_at: Optional[datetime] = None
    post_link: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CadenceResponse(BaseModel):
    group_id: str
    posts_this_week: int
    posts_this_month: int
    last_post_date: Optional[datetime] = None
