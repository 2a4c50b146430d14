# Supabase tables: logs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

logs:
- id: uuid (primary key)
- content: text (not null) - human readable, may embed <a href> links
- type: text (not null) - values: group, project, interface, user
- uid: uuid (actor)
- username: text (actor snapshot)
- typeid: uuid (id of the affected entity, e.g. the group id)
- add_time: bigint (unix seconds)
"""
