from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from app.modules.companies.schemas import CompanySummary
from app.modules.groups.schemas import GroupPrivacy


class GlobalGroupLocation(BaseModel):
    city: str = ""
    state: str = ""
    country: str = "USA"


class ContributedLocation(BaseModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class GlobalGroupContribute(BaseModel):
    # Required fields are checked by the service so a missing one is a 400, not a 422
    name: Optional[str] = None
    category: Optional[str] = None
    location: Optional[ContributedLocation] = None
    description: Optional[str] = None
    facebook_url: Optional[str] = None
    member_count: Optional[int] = Field(default=None, ge=0)
    privacy: Optional[GroupPrivacy] = None
    industries: Optional[List[str]] = None
    tags: Optional[List[str]] = None


class GlobalGroupAddRequest(BaseModel):
    company_id: Optional[str] = None


class GlobalGroupResponse(BaseModel):
    id: str
    name: str
    category: Optional[str] = None
    description: Optional[str] = ""
    facebook_url: Optional[str] = ""
    location: GlobalGroupLocation = GlobalGroupLocation()
    member_count: int = 0
    privacy: Optional[str] = "public"
    quality_score: int = 70
    industries: List[str] = []
    tags: List[str] = []
    verified: bool = False
    verified_by_admin: bool = False
    contributed_by: Optional[str] = None
    contributed_at: Optional[datetime] = None
    added_by_count: int = 0
    trending_score: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GlobalGroupImpact(BaseModel):
    organizationsUsing: int
    scheduledPosts: int
    organizations: List[CompanySummary]
    canDelete: bool
    isContributor: bool


class AffectedCounts(BaseModel):
    organizations: int
    posts: int


class GlobalGroupDeleteResponse(BaseModel):
    message: str = "Group deleted globally"
    affected: AffectedCounts


class ReconcileReport(BaseModel):
    checked: int = 0
    updated: int = 0
    relinked: int = 0
    orphans_cleared: int = 0
