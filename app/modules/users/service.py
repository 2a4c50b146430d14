from supabase import Client
from app.core.exceptions import PersistenceError
from app.modules.users.schemas import UserResponse
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def find_by_id(self, user_id: str) -> Optional[UserResponse]:
        """Get user profile by ID, or None when no such user exists"""
        try:
            result = self.supabase.table("user_profiles")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()

            if not result or not result.data:
                return None
            return UserResponse(**result.data)
        except Exception as e:
            logger.error(f"Error loading user {user_id}: {e}")
            raise PersistenceError(str(e))
