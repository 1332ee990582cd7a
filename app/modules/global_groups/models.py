# Supabase table: global_groups
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

global_groups (shared catalog, not tenant-scoped):
- id: uuid (primary key)
- name: text (not null, unique) - catalog dedup key
- category: text (not null)
- description: text (default: '')
- facebook_url: text (default: '')
- location: jsonb (not null) - {"city": text, "state": text, "country": text}
- member_count: integer (default: 0)
- privacy: text (default: 'public') - values: public, private, closed
- quality_score: integer (default: 70) - 0-100 scale
- industries: text[] (default: {})
- tags: text[] (default: {})
- verified: boolean (default: false)
- verified_by_admin: boolean (default: false)
- contributed_by: text (not null) - tenant user id, or 'system' for seed data
- contributed_at: timestamp (not null)
- added_by_count: integer (default: 0) - groups across all tenants linked to this entry
- trending_score: integer (default: 0)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Tenant groups link back through groups.global_group_id. Rows created before
that column existed are matched by name.
"""
