from supabase import Client
from app.modules.groups.schemas import GroupCreate, GroupUpdate, GroupResponse
from app.modules.companies.service import CompanyService
from app.core.exceptions import ConflictError, NotFoundError, StorageError
from typing import Any, Dict, Iterable, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

LINK_FIELDS = "id, name, company_id, user_id, global_group_id"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class GroupService:
    """Tenant group store. Every tenant-facing method filters by user_id."""

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.companies = CompanyService(supabase)

    def list_groups(self, user_id: str, company_id: Optional[str] = None) -> List[GroupResponse]:
        """List the caller's groups, optionally for one company"""
        try:
            query = self.supabase.table("groups").select("*").eq("user_id", user_id)
            if company_id:
                query = query.eq("company_id", company_id)
            result = query.order("created_at", desc=True).execute()
            return [GroupResponse(**row) for row in result.data]
        except Exception as e:
            raise StorageError(str(e))

    def get_owned_group(self, group_id: str, user_id: str) -> GroupResponse:
        try:
            result = self.supabase.table("groups")\
                .select("*")\
                .eq("id", group_id)\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise NotFoundError("Group not found or unauthorized")
            return GroupResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def find_by_name(self, user_id: str, company_id: str, name: str) -> Optional[Dict[str, Any]]:
        """Return the caller's group with this exact name in the company, if any"""
        try:
            result = self.supabase.table("groups")\
                .select("id, name")\
                .eq("user_id", user_id)\
                .eq("company_id", company_id)\
                .eq("name", name)\
                .limit(1)\
                .execute()
            return result.data[0] if result.data else None
        except Exception as e:
            raise StorageError(str(e))

    def create_group(self, group_data: GroupCreate, user_id: str) -> GroupResponse:
        """Create a group by hand for one of the caller's companies"""
        self.companies.get_owned_company(group_data.company_id, user_id)
        if self.find_by_name(user_id, group_data.company_id, group_data.name):
            raise ConflictError("You already have this group in your collection")
        return self.insert_group({
            **group_data.model_dump(),
            "user_id": user_id,
            "source": "manual",
        })

    def insert_group(self, record: Dict[str, Any]) -> GroupResponse:
        """Insert a fully built group record; callers validate ownership and duplicates"""
        try:
            now = _now()
            result = self.supabase.table("groups").insert({
                "posts_this_week": 0,
                "posts_this_month": 0,
                "last_post_date": None,
                **record,
                "created_at": now,
                "updated_at": now,
            }).execute()
            if not result.data:
                raise StorageError("Failed to create group")
            group = GroupResponse(**result.data[0])
            logger.info(f"Created group '{group.name}' ({group.id}) for company {group.company_id}")
            return group
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def update_group(self, group_id: str, group_data: GroupUpdate, user_id: str) -> GroupResponse:
        """Update one of the caller's groups"""
        current = self.get_owned_group(group_id, user_id)
        update_data = group_data.model_dump(exclude_unset=True)
        if not update_data:
            return current
        new_name = update_data.get("name")
        if new_name and new_name != current.name and current.company_id:
            if self.find_by_name(user_id, current.company_id, new_name):
                raise ConflictError("You already have this group in your collection")
        try:
            update_data["updated_at"] = _now()
            result = self.supabase.table("groups")\
                .update(update_data)\
                .eq("id", group_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Group not found")
            return GroupResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def set_global_group_id(self, group_id: str, global_group_id: Optional[str]) -> None:
        try:
            self.supabase.table("groups")\
                .update({"global_group_id": global_group_id, "updated_at": _now()})\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            raise StorageError(str(e))

    def update_cadence(self, group_id: str, fields: Dict[str, Any]) -> None:
        """Overwrite the derived posting-cadence fields"""
        try:
            self.supabase.table("groups")\
                .update({**fields, "updated_at": _now()})\
                .eq("id", group_id)\
                .execute()
        except Exception as e:
            raise StorageError(str(e))

    def delete_group(self, group_id: str, user_id: str) -> GroupResponse:
        """Delete one of the caller's groups and return what was deleted"""
        group = self.get_owned_group(group_id, user_id)
        try:
            result = self.supabase.table("groups")\
                .delete()\
                .eq("id", group_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Group not found")
            logger.info(f"Deleted group '{group.name}' ({group_id}) for user {user_id}")
            return group
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    # Cross-tenant queries used by the global group catalog

    def find_linked_groups(self, global_group_id: str, name: str) -> List[Dict[str, Any]]:
        """Groups of every tenant tied to a catalog entry: by back-reference, or by name for rows without one"""
        try:
            by_ref = self.supabase.table("groups")\
                .select(LINK_FIELDS)\
                .eq("global_group_id", global_group_id)\
                .execute()
            by_name = self.supabase.table("groups")\
                .select(LINK_FIELDS)\
                .eq("name", name)\
                .execute()
        except Exception as e:
            raise StorageError(str(e))
        linked: Dict[str, Dict[str, Any]] = {}
        # A row that already points at another entry is not a legacy match
        legacy = [row for row in (by_name.data or []) if not row.get("global_group_id")]
        for row in (by_ref.data or []) + legacy:
            linked.setdefault(row["id"], row)
        return list(linked.values())

    def list_all_group_links(self) -> List[Dict[str, Any]]:
        try:
            result = self.supabase.table("groups").select(LINK_FIELDS).execute()
            return result.data or []
        except Exception as e:
            raise StorageError(str(e))

    def list_all_group_ids(self) -> List[str]:
        try:
            result = self.supabase.table("groups").select("id").execute()
            return [row["id"] for row in (result.data or [])]
        except Exception as e:
            raise StorageError(str(e))

    def delete_groups(self, group_ids: Iterable[str]) -> int:
        ids = list(group_ids)
        if not ids:
            return 0
        try:
            result = self.supabase.table("groups").delete().in_("id", ids).execute()
            return len(result.data or [])
        except Exception as e:
            raise StorageError(str(e))
