# Supabase table: posts
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

posts:
- id: uuid (primary key)
- user_id: uuid (not null) - owning tenant
- company_id: uuid (foreign key to companies.id, not null)
- group_id: uuid (nullable, references groups.id)
- group_name: text (nullable) - copy of groups.name at creation time
- post_type: text (not null) - value_post, feature_friday, diy_guide, ...
- title: text (nullable)
- content: text (not null)
- status: text (not null, default: 'draft')
  values: draft, scheduled, pending_approval, ready_to_post, posted
- scheduled_for: timestamp (nullable)
- posted_at: timestamp (nullable) - set when status becomes 'posted'
- post_link: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- index on (group_id, status, posted_at), (group_name)
"""
