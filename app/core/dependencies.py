"""
Core dependencies for request context
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.exceptions import PersistenceError
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import CurrentUser
from app.modules.auth.service import AuthService
from app.modules.users.service import UserService
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service),
    user_service: UserService = Depends(get_user_service)
) -> CurrentUser:
    """Resolve the caller from the JWT token and their user profile"""
    user_data = auth_service.get_current_user(credentials.credentials)
    try:
        profile = user_service.find_by_id(user_data["id"])
    except PersistenceError as e:
        logger.error(f"Error loading profile for {user_data['id']}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load user profile"
        )

    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User profile not found"
        )

    return CurrentUser(
        uid=profile.id,
        username=profile.username,
        email=profile.email or user_data.get("email"),
        role=profile.role
    )
