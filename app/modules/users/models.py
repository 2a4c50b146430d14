# Supabase tables: user_profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

user_profiles:
- id: uuid (primary key, references auth.users.id)
- username: text (not null)
- email: text (unique, not null) - synced from auth.users
- role: text (not null, default: 'member') - global role: admin | member
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Group members keep a username/email snapshot taken when they were added,
so renaming a profile does not rewrite existing group_members rows.
"""
