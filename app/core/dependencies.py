"""
Core dependencies for route protection and tenant scoping
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.exceptions import ForbiddenError
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def is_super_user(user_data: dict) -> bool:
    """Check if user is a super user from app_metadata"""
    # app_metadata is set server-side and cannot be modified by users
    app_metadata = user_data.get("app_metadata") or {}
    return app_metadata.get("type") == "super_user"


def require_super_user(user_data: dict = Depends(get_current_user_id)) -> dict:
    """Dependency for maintenance endpoints that act across all tenants"""
    if not is_super_user(user_data):
        logger.warning(f"User {user_data.get('id')} denied access to a super user endpoint")
        raise ForbiddenError("Only super users can perform this action")
    return user_data
