# Supabase table: groups
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups (tenant-scoped Facebook groups a company posts into):
- id: uuid (primary key)
- name: text (not null) - not unique across tenants
- user_id: uuid (not null) - owning tenant
- company_id: uuid (foreign key to companies.id, not null)
- category: text (nullable)
- description: text (nullable)
- facebook_url: text (nullable)
- audience_size: integer (nullable, >= 0)
- privacy: text (nullable) - values: public, private, closed
- target_city: text (nullable)
- target_state: text (nullable)
- quality_rating: integer (nullable) - 1-5 display scale
- status: text (not null, default: 'active') - values: active, inactive, pending
- qa_status: text (nullable) - values: new, pending_approval, approved, rejected
- source: text (not null, default: 'manual') - values: manual, global_database
- global_group_id: uuid (nullable, references global_groups.id)
- last_post_date: timestamp (nullable) - derived from posts
- posts_this_week: integer (default: 0) - derived from posts
- posts_this_month: integer (default: 0) - derived from posts
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- index on (name), (company_id), (global_group_id)
"""
