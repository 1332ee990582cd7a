from supabase import Client
from app.modules.companies.schemas import CompanyCreate, CompanyUpdate, CompanyResponse, CompanySummary
from app.core.exceptions import NotFoundError, StorageError
from typing import List
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class CompanyService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_company(self, company_data: CompanyCreate, user_id: str) -> CompanyResponse:
        """Create a company owned by the caller"""
        try:
            now = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("companies").insert({
                **company_data.model_dump(),
                "user_id": user_id,
                "created_at": now,
                "updated_at": now,
            }).execute()
            if not result.data:
                raise StorageError("Failed to create company")
            return CompanyResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def get_owned_company(self, company_id: str, user_id: str) -> CompanyResponse:
        """Get a company only if it belongs to the caller"""
        try:
            result = self.supabase.table("companies")\
                .select("*")\
                .eq("id", company_id)\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise NotFoundError("Company not found or unauthorized")
            return CompanyResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def list_companies(self, user_id: str) -> List[CompanyResponse]:
        """List the caller's companies"""
        try:
            result = self.supabase.table("companies")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [CompanyResponse(**row) for row in result.data]
        except Exception as e:
            raise StorageError(str(e))

    def summarize_companies(self, company_ids: List[str]) -> List[CompanySummary]:
        """Return id and name for the given companies, across tenants"""
        if not company_ids:
            return []
        try:
            result = self.supabase.table("companies")\
                .select("id, name")\
                .in_("id", company_ids)\
                .execute()
            return [CompanySummary(id=row["id"], name=row["name"]) for row in (result.data or [])]
        except Exception as e:
            raise StorageError(str(e))

    def update_company(self, company_id: str, company_data: CompanyUpdate, user_id: str) -> CompanyResponse:
        """Update one of the caller's companies"""
        try:
            update_data = company_data.model_dump(exclude_unset=True)
            if not update_data:
                return self.get_owned_company(company_id, user_id)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("companies")\
                .update(update_data)\
                .eq("id", company_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Company not found")
            return CompanyResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def delete_company(self, company_id: str, user_id: str) -> None:
        """Delete one of the caller's companies"""
        self.get_owned_company(company_id, user_id)
        try:
            result = self.supabase.table("companies")\
                .delete()\
                .eq("id", company_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Company not found")
            logger.info(f"Deleted company {company_id} for user {user_id}")
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))
