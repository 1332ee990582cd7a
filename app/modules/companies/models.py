# Supabase table: companies
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

companies:
- id: uuid (primary key)
- name: text (not null)
- service_type: text (nullable)
- location: text (nullable)
- description: text (nullable)
- user_id: uuid (not null) - owning tenant
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
