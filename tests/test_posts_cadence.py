"""Tests for posts and the posting-cadence cache on groups."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.modules.posts.service import PostService

BASE = "/api/v1/posts"
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _days_ago(days: float) -> str:
    return (NOW - timedelta(days=days)).isoformat()


@pytest.fixture
def seeded(fake_db):
    company = fake_db.add_company("tenant-a", "Vivo Plumbing")
    group = fake_db.add_group("tenant-a", company["id"], "Midland Moms")
    return company, group


class TestRecomputeCadence:
    def test_counts_trailing_windows(self, fake_db, seeded) -> None:
        company, group = seeded
        for days in (1, 3, 10, 29, 45):
            fake_db.add_post("tenant-a", company["id"], group, status="posted", posted_at=_days_ago(days))
        fake_db.add_post("tenant-a", company["id"], group, status="scheduled", posted_at=_days_ago(0.5))

        cadence = PostService(fake_db).recompute_cadence(group["id"], now=NOW)

        assert cadence.posts_this_week == 2
        assert cadence.posts_this_month == 4
        assert cadence.last_post_date == NOW - timedelta(days=1)
        stored = fake_db.get("groups", group["id"])
        assert stored["posts_this_week"] == 2
        assert stored["posts_this_month"] == 4
        assert stored["last_post_date"] == _days_ago(1)

    def test_is_idempotent(self, fake_db, seeded) -> None:
        company, group = seeded
        fake_db.add_post("tenant-a", company["id"], group, status="posted", posted_at=_days_ago(2))
        service = PostService(fake_db)

        first = service.recompute_cadence(group["id"], now=NOW)
        second = service.recompute_cadence(group["id"], now=NOW)

        assert first == second

    def test_group_without_posts(self, fake_db, seeded) -> None:
        _, group = seeded

        cadence = PostService(fake_db).recompute_cadence(group["id"], now=NOW)

        assert (cadence.posts_this_week, cadence.posts_this_month, cadence.last_post_date) == (0, 0, None)

    def test_backfill_covers_every_group(self, fake_db, seeded) -> None:
        company, group = seeded
        other = fake_db.add_group("tenant-b", company["id"], "Odessa Neighbors")
        fake_db.add_post("tenant-b", company["id"], other, status="posted", posted_at=datetime.now(timezone.utc).isoformat())

        refreshed = PostService(fake_db).recompute_all_cadence()

        assert refreshed == 2
        assert fake_db.get("groups", other["id"])["posts_this_week"] == 1


class TestPostLifecycle:
    def test_marking_posted_refreshes_group(self, client, fake_db, seeded, as_user) -> None:
        company, group = seeded
        created = client.post(
            BASE,
            json={"company_id": company["id"], "group_id": group["id"], "post_type": "quick_tip", "content": "Drain tips"},
            headers=as_user("tenant-a"),
        )
        assert created.status_code == 201
        assert created.json()["group_name"] == "Midland Moms"
        assert fake_db.get("groups", group["id"])["posts_this_week"] == 0

        updated = client.put(f"{BASE}/{created.json()['id']}", json={"status": "posted"}, headers=as_user("tenant-a"))

        assert updated.status_code == 200
        assert updated.json()["posted_at"] is not None
        stored = fake_db.get("groups", group["id"])
        assert stored["posts_this_week"] == 1
        assert stored["posts_this_month"] == 1
        assert stored["last_post_date"] is not None

    def test_created_as_posted_refreshes_group(self, client, fake_db, seeded, as_user) -> None:
        company, group = seeded

        response = client.post(
            BASE,
            json={
                "company_id": company["id"],
                "group_id": group["id"],
                "post_type": "value_post",
                "content": "Free estimates",
                "status": "posted",
            },
            headers=as_user("tenant-a"),
        )

        assert response.status_code == 201
        assert fake_db.get("groups", group["id"])["posts_this_week"] == 1

    def test_blank_content_is_rejected(self, client, seeded, as_user) -> None:
        company, _ = seeded

        response = client.post(
            BASE, json={"company_id": company["id"], "post_type": "value_post", "content": "  "}, headers=as_user("tenant-a")
        )

        assert response.status_code == 422

    def test_other_tenants_cannot_touch_posts(self, client, fake_db, seeded, as_user) -> None:
        company, group = seeded
        post = fake_db.add_post("tenant-a", company["id"], group)

        assert client.put(f"{BASE}/{post['id']}", json={"status": "posted"}, headers=as_user("tenant-b")).status_code == 404
        assert client.delete(f"{BASE}/{post['id']}", headers=as_user("tenant-b")).status_code == 404
        assert fake_db.get("posts", post["id"])["status"] == "draft"

    def test_cadence_endpoint(self, client, fake_db, seeded, as_user) -> None:
        company, group = seeded
        fake_db.add_post("tenant-a", company["id"], group, status="posted", posted_at=datetime.now(timezone.utc).isoformat())

        response = client.post(f"/api/v1/groups/{group['id']}/cadence", headers=as_user("tenant-a"))

        assert response.status_code == 200
        assert response.json()["posts_this_week"] == 1


class TestMovePost:
    def test_posted_post_moves_with_its_cadence(self, client, fake_db, seeded, as_user) -> None:
        company, group = seeded
        target = fake_db.add_group("tenant-a", company["id"], "Odessa Neighbors")
        post = fake_db.add_post(
            "tenant-a", company["id"], group, status="posted", posted_at=datetime.now(timezone.utc).isoformat()
        )
        PostService(fake_db).recompute_cadence(group["id"])

        response = client.put(f"{BASE}/{post['id']}", json={"group_id": target["id"]}, headers=as_user("tenant-a"))

        assert response.status_code == 200
        assert response.json()["group_name"] == "Odessa Neighbors"
        assert fake_db.get("groups", group["id"])["posts_this_week"] == 0
        assert fake_db.get("groups", target["id"])["posts_this_week"] == 1

    def test_cannot_move_to_another_tenants_group(self, client, fake_db, seeded, as_user) -> None:
        company, group = seeded
        foreign_company = fake_db.add_company("tenant-b", "Permian Roofing")
        foreign = fake_db.add_group("tenant-b", foreign_company["id"], "Odessa Neighbors")
        post = fake_db.add_post("tenant-a", company["id"], group)

        response = client.put(f"{BASE}/{post['id']}", json={"group_id": foreign["id"]}, headers=as_user("tenant-a"))

        assert response.status_code == 404
        assert fake_db.get("posts", post["id"])["group_id"] == group["id"]

    def test_clearing_the_group_clears_its_name(self, client, fake_db, seeded, as_user) -> None:
        company, group = seeded
        post = fake_db.add_post("tenant-a", company["id"], group)

        response = client.put(f"{BASE}/{post['id']}", json={"group_id": None}, headers=as_user("tenant-a"))

        assert response.status_code == 200
        assert response.json()["group_id"] is None
        assert response.json()["group_name"] is None
