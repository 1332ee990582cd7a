from supabase import Client
from app.config import settings
from app.core.exceptions import (
    CascadeIncompleteError, ConflictError, ForbiddenError, NotFoundError, StorageError, ValidationError
)
from app.core.quality import rating_to_score, score_to_rating
from app.modules.global_groups.schemas import (
    GlobalGroupContribute, GlobalGroupResponse, GlobalGroupImpact, GlobalGroupDeleteResponse,
    AffectedCounts, ReconcileReport
)
from app.modules.companies.service import CompanyService
from app.modules.groups.schemas import GroupResponse
from app.modules.groups.service import GroupService
from app.modules.posts.service import PostService
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def is_linked(group: Dict[str, Any], entry: Dict[str, Any]) -> bool:
    """A tenant group belongs to a catalog entry by back-reference; rows without one match by name."""
    ref = group.get("global_group_id")
    return ref == entry["id"] if ref else group.get("name") == entry["name"]


class GlobalGroupService:
    """
    Shared catalog of Facebook groups and its reconciliation with tenant groups.

    The catalog is the one store every tenant writes to. None of the multi-step
    operations here run in a transaction; each step is logged and
    `reconcile_counts` repairs counters and links left behind by a partial failure.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.companies = CompanyService(supabase)
        self.groups = GroupService(supabase)
        self.posts = PostService(supabase)

    def list_global_groups(self) -> List[GlobalGroupResponse]:
        """List every catalog entry; the catalog is not tenant-scoped"""
        try:
            result = self.supabase.table("global_groups").select("*").order("name").execute()
            return [GlobalGroupResponse(**row) for row in result.data]
        except Exception as e:
            raise StorageError(str(e))

    def get_global_group(self, global_group_id: str) -> GlobalGroupResponse:
        try:
            result = self.supabase.table("global_groups")\
                .select("*")\
                .eq("id", global_group_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise NotFoundError("Global group not found")
            return GlobalGroupResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("global_groups")\
                .select("id, name, added_by_count")\
                .eq("name", name)\
                .limit(1)\
                .execute()
            return result.data[0] if result.data else None
        except Exception as e:
            raise StorageError(str(e))

    def _insert_entry(self, record: Dict[str, Any]) -> Dict[str, Any]:
        now = _now()
        try:
            result = self.supabase.table("global_groups").insert({
                "verified": False,
                "verified_by_admin": False,
                "trending_score": 0,
                "contributed_at": now,
                **record,
                "created_at": now,
                "updated_at": now,
            }).execute()
        except Exception as e:
            if "unique" in str(e).lower() or "duplicate" in str(e).lower():
                raise ConflictError("This group already exists in the database")
            raise StorageError(str(e))
        if not result.data:
            raise StorageError("Failed to create global group")
        logger.info(f"Created global group '{record['name']}' (contributed by {record.get('contributed_by')})")
        return result.data[0]

    def _adjust_added_by_count(self, global_group_id: str, delta: int) -> int:
        """Apply delta to added_by_count, never below zero. Returns the new value."""
        try:
            current = self.supabase.table("global_groups")\
                .select("added_by_count")\
                .eq("id", global_group_id)\
                .maybe_single()\
                .execute()
            if not current or not current.data:
                raise NotFoundError("Global group not found")
            new_count = max(0, (current.data.get("added_by_count") or 0) + delta)
            self.supabase.table("global_groups")\
                .update({"added_by_count": new_count, "updated_at": _now()})\
                .eq("id", global_group_id)\
                .execute()
            logger.info(f"added_by_count for global group {global_group_id} is now {new_count}")
            return new_count
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def _is_contributor(self, entry: GlobalGroupResponse, user_id: str) -> bool:
        return entry.contributed_by in (user_id, settings.system_contributor)

    def add_to_company(self, global_group_id: str, company_id: Optional[str], user_id: str) -> GroupResponse:
        """Copy a catalog entry into one of the caller's companies and count the new holder"""
        if not company_id:
            raise ValidationError("Company ID is required")
        self.companies.get_owned_company(company_id, user_id)
        entry = self.get_global_group(global_group_id)
        if self.groups.find_by_name(user_id, company_id, entry.name):
            raise ConflictError("You already have this group in your collection")

        group = self.groups.insert_group({
            "name": entry.name,
            "description": entry.description,
            "company_id": company_id,
            "user_id": user_id,
            "category": entry.category,
            "facebook_url": entry.facebook_url,
            "audience_size": entry.member_count,
            "privacy": entry.privacy,
            "target_city": entry.location.city,
            "target_state": entry.location.state,
            "quality_rating": score_to_rating(entry.quality_score),
            "status": "active",
            "qa_status": "approved",
            "source": "global_database",
            "global_group_id": entry.id,
        })
        try:
            self._adjust_added_by_count(entry.id, 1)
        except HTTPException as e:
            logger.error(f"Group {group.id} added but counter for global group {entry.id} not updated: {e.detail}")
            raise CascadeIncompleteError(
                "Group was added but the global usage counter was not updated", completed=["insert_group"]
            )
        return group

    def contribute(self, data: GlobalGroupContribute, user_id: str) -> GlobalGroupResponse:
        """Add a brand-new entry to the catalog. The contributor does not get a group record."""
        name = (data.name or "").strip()
        location = data.location
        if not name or not (data.category or "").strip() or not location \
                or not (location.city or "").strip() or not (location.state or "").strip():
            raise ValidationError("Missing required fields")
        if self.find_by_name(name):
            raise ConflictError("This group already exists in the database")

        row = self._insert_entry({
            "name": name,
            "category": data.category.strip(),
            "description": data.description or "",
            "facebook_url": data.facebook_url or "",
            "location": {
                "city": location.city.strip(),
                "state": location.state.strip(),
                "country": location.country or "USA",
            },
            "member_count": data.member_count or 0,
            "privacy": data.privacy or "public",
            "quality_score": settings.default_quality_score,
            "industries": data.industries or [],
            "tags": data.tags or [],
            "added_by_count": 0,
            "contributed_by": user_id,
        })
        return GlobalGroupResponse(**row)

    def get_impact(self, global_group_id: str, user_id: str) -> GlobalGroupImpact:
        """What deleting this entry would touch. Read-only."""
        entry = self.get_global_group(global_group_id)
        linked = self.groups.find_linked_groups(entry.id, entry.name)
        company_ids = list(dict.fromkeys(g["company_id"] for g in linked if g.get("company_id")))
        return GlobalGroupImpact(
            organizationsUsing=len(linked),
            scheduledPosts=self.posts.count_scheduled_for_groups(entry.name, [g["id"] for g in linked]),
            organizations=self.companies.summarize_companies(company_ids),
            canDelete=len(linked) < settings.global_group_delete_threshold,
            isContributor=self._is_contributor(entry, user_id),
        )

    def delete_global_group(self, global_group_id: str, user_id: str) -> GlobalGroupDeleteResponse:
        """
        Delete a catalog entry with everything that depends on it, across all tenants:
        posts first (any status), then tenant groups, then the entry itself.
        The entry goes last so a retry after a partial failure can finish the job.
        """
        entry = self.get_global_group(global_group_id)
        if not self._is_contributor(entry, user_id):
            raise ForbiddenError("You can only delete groups you contributed")
        linked = self.groups.find_linked_groups(entry.id, entry.name)
        if len(linked) >= settings.global_group_delete_threshold:
            raise ForbiddenError(
                f"This group is used by {settings.global_group_delete_threshold}+ organizations "
                "and cannot be deleted. Contact support for assistance."
            )

        group_ids = [g["id"] for g in linked]
        completed: List[str] = []
        deleted: Dict[str, int] = {}
        try:
            post_ids = [p["id"] for p in self.posts.find_posts_for_groups(entry.name, group_ids)]
            posts_deleted = self.posts.delete_posts(post_ids)
            completed.append("posts")
            deleted["posts"] = posts_deleted
            logger.info(f"Cascade for global group {entry.id}: deleted {posts_deleted} post(s)")

            groups_deleted = self.groups.delete_groups(group_ids)
            completed.append("groups")
            deleted["groups"] = groups_deleted
            logger.info(f"Cascade for global group {entry.id}: deleted {groups_deleted} group(s)")

            self.supabase.table("global_groups").delete().eq("id", entry.id).execute()
            completed.append("global_group")
        except HTTPException as e:
            logger.error(f"Cascade for global group {entry.id} stopped after {completed}: {e.detail}")
            raise CascadeIncompleteError("Global group deletion stopped part way", completed, deleted)
        except Exception as e:
            logger.error(f"Cascade for global group {entry.id} stopped after {completed}: {e}")
            raise CascadeIncompleteError("Global group deletion stopped part way", completed, deleted)

        logger.info(f"Global group '{entry.name}' ({entry.id}) deleted by {user_id}")
        return GlobalGroupDeleteResponse(
            affected=AffectedCounts(organizations=groups_deleted, posts=posts_deleted)
        )

    def register_group(self, group: GroupResponse, user_id: str) -> GroupResponse:
        """
        Link a hand-made tenant group to the catalog, creating the entry when the
        name is new. Failures are logged only; reconcile_counts relinks by name.
        """
        try:
            entry = self.find_by_name(group.name)
            if entry:
                self._adjust_added_by_count(entry["id"], 1)
            else:
                entry = self._insert_entry({
                    "name": group.name,
                    "category": group.category or "General",
                    "description": group.description or "",
                    "facebook_url": group.facebook_url or "",
                    "location": {
                        "city": group.target_city or "",
                        "state": group.target_state or "",
                        "country": "USA",
                    },
                    "member_count": group.audience_size or 0,
                    "privacy": group.privacy or "public",
                    "quality_score": rating_to_score(group.quality_rating) or settings.default_quality_score,
                    "industries": [],
                    "tags": [],
                    "added_by_count": 1,
                    "contributed_by": user_id,
                })
            self.groups.set_global_group_id(group.id, entry["id"])
            return group.model_copy(update={"global_group_id": entry["id"]})
        except HTTPException as e:
            logger.error(f"Could not register group '{group.name}' ({group.id}) in the global catalog: {e.detail}")
            return group

    def release_group(self, group: GroupResponse) -> None:
        """Uncount a deleted tenant group. Failures are logged only."""
        try:
            global_group_id = group.global_group_id
            if not global_group_id:
                entry = self.find_by_name(group.name)
                global_group_id = entry["id"] if entry else None
            if not global_group_id:
                return
            self._adjust_added_by_count(global_group_id, -1)
        except HTTPException as e:
            logger.warning(f"Failed to decrement global group count for '{group.name}': {e.detail}")

    def reconcile_counts(self) -> ReconcileReport:
        """
        Restore the catalog invariants from the tenant group store:
        fix back-references that point at missing entries, link legacy rows
        by name, and rewrite every added_by_count that drifted.
        Idempotent; a second run reports no changes.
        """
        try:
            entries = self.supabase.table("global_groups").select("id, name, added_by_count").execute().data or []
        except Exception as e:
            raise StorageError(str(e))
        groups = self.groups.list_all_group_links()
        by_id = {e["id"]: e for e in entries}
        by_name = {e["name"]: e for e in entries}
        report = ReconcileReport(checked=len(entries))

        for group in groups:
            ref = group.get("global_group_id")
            if ref and ref in by_id:
                continue
            target = by_name.get(group.get("name"))
            new_ref = target["id"] if target else None
            if ref == new_ref:
                continue
            self.groups.set_global_group_id(group["id"], new_ref)
            group["global_group_id"] = new_ref
            if ref:
                report.orphans_cleared += 1
            else:
                report.relinked += 1

        for entry in entries:
            actual = sum(1 for g in groups if is_linked(g, entry))
            if entry.get("added_by_count") != actual:
                try:
                    self.supabase.table("global_groups")\
                        .update({"added_by_count": actual, "updated_at": _now()})\
                        .eq("id", entry["id"])\
                        .execute()
                except Exception as e:
                    raise StorageError(str(e))
                logger.info(f"Updated count for '{entry['name']}' ({entry.get('added_by_count')} -> {actual})")
                report.updated += 1

        logger.info(
            f"Global group reconciliation: {report.checked} checked, {report.updated} updated, "
            f"{report.relinked} relinked, {report.orphans_cleared} orphan reference(s) fixed"
        )
        return report
