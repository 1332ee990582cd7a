from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

GroupPrivacy = Literal["public", "private", "closed"]
GroupStatus = Literal["active", "inactive", "pending"]
GroupQAStatus = Literal["new", "pending_approval", "approved", "rejected"]


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1)
    company_id: str
    category: Optional[str] = None
    description: Optional[str] = None
    facebook_url: Optional[str] = None
    audience_size: Optional[int] = Field(default=None, ge=0)
    privacy: Optional[GroupPrivacy] = None
    target_city: Optional[str] = None
    target_state: Optional[str] = None
    quality_rating: Optional[int] = Field(default=None, ge=1, le=5)
    status: GroupStatus = "active"
    qa_status: GroupQAStatus = "new"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Group name must be a non-empty string")
        return v.strip()


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    facebook_url: Optional[str] = None
    audience_size: Optional[int] = Field(default=None, ge=0)
    privacy: Optional[GroupPrivacy] = None
    target_city: Optional[str] = None
    target_state: Optional[str] = None
    quality_rating: Optional[int] = Field(default=None, ge=1, le=5)
    status: Optional[GroupStatus] = None
    qa_status: Optional[GroupQAStatus] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Group name must be a non-empty string")
        return v.strip() if v is not None else v


class GroupResponse(BaseModel):
    id: str
    name: str
    user_id: str
    company_id: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    facebook_url: Optional[str] = None
    audience_size: Optional[int] = None
    privacy: Optional[str] = None
    target_city: Optional[str] = None
    target_state: Optional[str] = None
    quality_rating: Optional[int] = None
    status: str = "active"
    qa_status: Optional[str] = None
    source: str = "manual"
    global_group_id: Optional[str] = None
    last_post_date: Optional[datetime] = None
    posts_this_week: int = 0
    posts_this_month: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
