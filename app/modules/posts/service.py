from supabase import Client
from app.config import settings
from app.modules.posts.schemas import PostCreate, PostUpdate, PostResponse, CadenceResponse
from app.modules.companies.service import CompanyService
from app.modules.groups.service import GroupService
from app.core.exceptions import NotFoundError, StorageError
from typing import Any, Dict, Iterable, List, Optional
from fastapi import HTTPException
from datetime import datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)


def _iso_utc(value: Optional[datetime]) -> Optional[str]:
    """Store timestamps as UTC ISO strings so range filters compare correctly"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class PostService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.companies = CompanyService(supabase)
        self.groups = GroupService(supabase)

    def list_posts(
        self,
        user_id: str,
        company_id: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[PostResponse]:
        try:
            query = self.supabase.table("posts").select("*").eq("user_id", user_id)
            if company_id:
                query = query.eq("company_id", company_id)
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True).execute()
            return [PostResponse(**row) for row in result.data]
        except Exception as e:
            raise StorageError(str(e))

    def get_owned_post(self, post_id: str, user_id: str) -> PostResponse:
        try:
            result = self.supabase.table("posts")\
                .select("*")\
                .eq("id", post_id)\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise NotFoundError("Post not found or unauthorized")
            return PostResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def create_post(self, post_data: PostCreate, user_id: str) -> PostResponse:
        """Create a post; a post created as 'posted' refreshes its group's cadence"""
        self.companies.get_owned_company(post_data.company_id, user_id)
        group_name = None
        if post_data.group_id:
            group_name = self.groups.get_owned_group(post_data.group_id, user_id).name

        record = post_data.model_dump(mode="json")
        record["scheduled_for"] = _iso_utc(post_data.scheduled_for)
        record["posted_at"] = _iso_utc(post_data.posted_at)
        now = datetime.now(timezone.utc).isoformat()
        if post_data.status == "posted" and not record["posted_at"]:
            record["posted_at"] = now
        try:
            result = self.supabase.table("posts").insert({
                **record,
                "group_name": group_name,
                "user_id": user_id,
                "created_at": now,
                "updated_at": now,
            }).execute()
            if not result.data:
                raise StorageError("Failed to create post")
            post = PostResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

        if post.status == "posted" and post.group_id:
            self.recompute_cadence(post.group_id)
        return post

    def update_post(self, post_id: str, post_data: PostUpdate, user_id: str) -> PostResponse:
        """
        Update a post; moving it to 'posted' stamps posted_at and refreshes cadence.
        Moving a posted post to another group refreshes both groups.
        """
        previous = self.get_owned_post(post_id, user_id)
        update_data = post_data.model_dump(mode="json", exclude_unset=True)
        if "group_id" in update_data:
            new_group_id = update_data["group_id"]
            update_data["group_name"] = \
                self.groups.get_owned_group(new_group_id, user_id).name if new_group_id else None
        if "posted_at" in update_data:
            update_data["posted_at"] = _iso_utc(post_data.posted_at)
        if "scheduled_for" in update_data:
            update_data["scheduled_for"] = _iso_utc(post_data.scheduled_for)
        now = datetime.now(timezone.utc).isoformat()
        if update_data.get("status") == "posted" and not update_data.get("posted_at"):
            update_data["posted_at"] = now
        update_data["updated_at"] = now
        try:
            result = self.supabase.table("posts")\
                .update(update_data)\
                .eq("id", post_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Post not found")
            post = PostResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

        moved = "group_id" in update_data and previous.group_id != post.group_id
        if moved and previous.status == "posted" and previous.group_id:
            self.recompute_cadence(previous.group_id)
        if post.status == "posted" and post.group_id and (moved or update_data.get("status") == "posted"):
            self.recompute_cadence(post.group_id)
        return post

    def delete_post(self, post_id: str, user_id: str) -> None:
        self.get_owned_post(post_id, user_id)
        try:
            result = self.supabase.table("posts")\
                .delete()\
                .eq("id", post_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Post not found")
        except HTTPException:
            raise
        except Exception as e:
            raise StorageError(str(e))

    def recompute_cadence(self, group_id: str, now: Optional[datetime] = None) -> CadenceResponse:
        """
        Recompute a group's posting-cadence cache from its posted posts.
        Derived values only; safe to run any number of times.
        """
        now = now or datetime.now(timezone.utc)
        week_ago = _iso_utc(now - timedelta(days=settings.cadence_week_days))
        month_ago = _iso_utc(now - timedelta(days=settings.cadence_month_days))
        try:
            week_result = self.supabase.table("posts")\
                .select("id", count="exact")\
                .eq("group_id", group_id)\
                .eq("status", "posted")\
                .gte("posted_at", week_ago)\
                .execute()
            month_result = self.supabase.table("posts")\
                .select("id", count="exact")\
                .eq("group_id", group_id)\
                .eq("status", "posted")\
                .gte("posted_at", month_ago)\
                .execute()
            latest_result = self.supabase.table("posts")\
                .select("posted_at")\
                .eq("group_id", group_id)\
                .eq("status", "posted")\
                .order("posted_at", desc=True)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise StorageError(str(e))

        cadence = {
            "posts_this_week": week_result.count or 0,
            "posts_this_month": month_result.count or 0,
            "last_post_date": latest_result.data[0]["posted_at"] if latest_result.data else None,
        }
        self.groups.update_cadence(group_id, cadence)
        logger.info(
            f"Updated posting cadence for group {group_id}: "
            f"{cadence['posts_this_week']} this week, {cadence['posts_this_month']} this month"
        )
        return CadenceResponse(group_id=group_id, **cadence)

    def recompute_all_cadence(self) -> int:
        """Backfill: recompute cadence for every group. Returns how many groups were refreshed."""
        refreshed = 0
        for group_id in self.groups.list_all_group_ids():
            try:
                self.recompute_cadence(group_id)
                refreshed += 1
            except HTTPException as e:
                logger.error(f"Error recomputing cadence for group {group_id}: {e.detail}")
        logger.info(f"Posting cadence backfill finished: {refreshed} group(s) refreshed")
        return refreshed

    # Cross-tenant queries used by the global group catalog

    def find_posts_for_groups(self, group_name: str, group_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """
        Posts of every status that belong to the given groups: by group_id, or by
        group_name unless the post points at some other group that still exists.
        """
        ids = list(group_ids)
        try:
            by_name: List[Dict[str, Any]] = self.supabase.table("posts")\
                .select("id, group_id, status")\
                .eq("group_name", group_name)\
                .execute().data or []
            by_id: List[Dict[str, Any]] = []
            if ids:
                by_id = self.supabase.table("posts")\
                    .select("id, group_id, status")\
                    .in_("group_id", ids)\
                    .execute().data or []
            other_ids = list({
                row["group_id"] for row in by_name if row.get("group_id") and row["group_id"] not in ids
            })
            live_others = set()
            if other_ids:
                live_others = {
                    row["id"] for row in
                    self.supabase.table("groups").select("id").in_("id", other_ids).execute().data or []
                }
        except Exception as e:
            raise StorageError(str(e))
        posts: Dict[str, Dict[str, Any]] = {}
        for row in by_id + [r for r in by_name if r.get("group_id") not in live_others]:
            posts.setdefault(row["id"], row)
        return list(posts.values())

    def count_scheduled_for_groups(self, group_name: str, group_ids: Iterable[str]) -> int:
        return sum(1 for row in self.find_posts_for_groups(group_name, group_ids) if row.get("status") == "scheduled")

    def delete_posts(self, post_ids: Iterable[str]) -> int:
        ids = list(post_ids)
        if not ids:
            return 0
        try:
            result = self.supabase.table("posts").delete().in_("id", ids).execute()
            return len(result.data or [])
        except Exception as e:
            raise StorageError(str(e))
