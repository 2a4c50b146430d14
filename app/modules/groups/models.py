# Supabase tables: groups, group_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- group_name: text (not null)
- group_desc: text (nullable)
- uid: uuid (foreign key to user_profiles.id, not null) - owner/creator
- type: text (not null, default: 'normal') - values: normal, private
- add_time: bigint (unix seconds)
- up_time: bigint (unix seconds)

group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- uid: uuid (foreign key to user_profiles.id, not null)
- role: text (not null, default: 'dev') - values: owner, dev, guest
- username: text - snapshot taken when the member was added
- email: text - snapshot taken when the member was added
- created_at: timestamp (default: now()) - member list order
- unique constraint on (group_id, uid)

group_name is checked for duplicates before insert only; there is no
unique constraint on it. A private group is created lazily per user the
first time that user lists groups, with group_name 'User-<uid>'.
"""
