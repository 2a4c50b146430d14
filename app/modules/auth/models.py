# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - JWT token generation and validation
# - Session management

"""
Supabase Auth provides:
- auth.get_user() - Get current user from JWT token

The token only proves identity. Username and global role (admin | member)
come from the user_profiles table, see app/modules/users/models.py.
"""
