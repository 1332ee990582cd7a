from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    service_type: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Company name is required and must be a non-empty string")
        return v.strip()


class CompanyUpdate(BaseModel):
    name: Optional[str] = None
    service_type: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Company name must be a non-empty string")
        return v.strip() if v is not None else v


class CompanyResponse(BaseModel):
    id: str
    name: str
    service_type: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CompanySummary(BaseModel):
    """Company identity shown in global group impact reports."""
    id: str
    name: str
