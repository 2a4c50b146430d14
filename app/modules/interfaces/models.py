# Supabase tables: interfaces, interface_cases, interface_cols
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

interfaces:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null)
- title: text
- path: text
- method: text

interface_cols (test collections):
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null)
- name: text

interface_cases (test cases, grouped into collections):
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null)
- col_id: uuid (foreign key to interface_cols.id)
- interface_id: uuid (foreign key to interfaces.id)
- casename: text

Only deletion by project_id is needed here; it runs when a group is deleted.
"""
