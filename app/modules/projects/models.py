# Supabase tables: projects, project_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

projects:
- id: uuid (primary key)
- name: text (not null)
- group_id: uuid (foreign key to groups.id, not null)
- project_type: text (not null, default: 'private') - values: public, private
- uid: uuid (creator)
- add_time: bigint (unix seconds)
- up_time: bigint (unix seconds)

project_members:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null)
- uid: uuid (foreign key to user_profiles.id, not null)
- role: text (not null) - values: owner, dev, guest
- unique constraint on (project_id, uid)

A private project is visible to the callers listed in project_members.
"""
