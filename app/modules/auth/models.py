# Supabase Auth
# Identity is issued by Supabase Auth (email/password or Google OAuth on the frontend).
# This service only verifies bearer tokens; no custom tables are required.

"""
Supabase Auth provides:
- auth.get_user() - Resolve the user behind a JWT access token

The verified user id is the tenant id stored as `user_id` on companies,
groups and posts, and as `contributed_by` on global groups.
"""
