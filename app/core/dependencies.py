"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import SupabaseClient, get_supabase
from app.modules.auth.service import AuthService
from app.config.permissions_config import permissions_for_user_type
from supabase import Client
from typing import List, Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (user_type, permission_names)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_admin_client() -> Optional[Client]:
    """Service-role client, or None when no service-role key is configured."""
    if not SupabaseClient.has_service_client():
        return None
    return SupabaseClient.get_service_client()


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    admin_client: Optional[Client] = Depends(get_admin_client)
) -> AuthService:
    return AuthService(supabase, admin_client)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def is_admin(user_data: dict) -> bool:
    """Check if user is an admin from app_metadata (set server-side, not user-editable)"""
    app_metadata = user_data.get("app_metadata") or {}
    return app_metadata.get("type") == "admin"


def get_user_type(user_data: dict, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> Optional[str]:
    """Return the caller's profiles.user_type, falling back to user_metadata. Uses request-scoped cache when provided."""
    if cache is not None and "user_type" in cache:
        return cache["user_type"]
    user_type = None
    try:
        result = supabase.table("profiles")\
            .select("user_type")\
            .eq("id", user_data["id"])\
            .maybe_single()\
            .execute()
        if result and result.data:
            user_type = result.data.get("user_type")
    except Exception as e:
        logger.error(f"Error getting user type: {e}")
    if not user_type:
        user_type = (user_data.get("user_metadata") or {}).get("user_type")
    if cache is not None:
        cache["user_type"] = user_type
    return user_type


def get_user_permissions(user_data: dict, supabase: Client, cache: Optional[Dict[str, Any]] = None) -> List[str]:
    """Permission names granted through the caller's user type. Populates request-scoped cache when provided."""
    if cache is not None and "permission_names" in cache:
        return cache["permission_names"]
    if is_admin(user_data):
        names = permissions_for_user_type("admin")
    else:
        user_type = get_user_type(user_data, supabase, cache)
        # admin rights only ever come from app_metadata
        names = [] if user_type == "admin" else permissions_for_user_type(user_type)
    if cache is not None:
        cache["permission_names"] = names
    return names


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    def check_permission(
        request: Request,
        user_data: dict = Depends(get_current_user_id),
        supabase: Client = Depends(get_supabase)
    ) -> dict:
        """Dependency to check if user has required permission"""
        if is_admin(user_data):
            return user_data
        cache = _get_request_cache(request)
        user_permissions = get_user_permissions(user_data, supabase, cache)
        if required_permission not in user_permissions:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {required_permission}"
            )
        return user_data
    return check_permission


def get_access_cache(request: Request) -> Dict[str, Any]:
    """Dependency that returns request-scoped access cache (populated by require_permission when used)."""
    return _get_request_cache(request)


def check_project_owner(
    project_id: str,
    user_data: dict,
    supabase: Client,
    project: Optional[Dict[str, Any]] = None
) -> dict:
    """Allow if admin or owner of the project. Optional project dict avoids duplicate fetch."""
    if project is None:
        project_result = supabase.table("projects")\
            .select("id, owner_id")\
            .eq("id", project_id)\
            .maybe_single()\
            .execute()
        if not project_result or not project_result.data:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Project not found"
            )
        project = project_result.data
    if is_admin(user_data):
        return user_data
    if project.get("owner_id") == user_data["id"]:
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You must be the project owner to perform this action"
    )


def check_bid_card_owner(bid_card_id: str, user_data: dict, supabase: Client) -> dict:
    """Allow if admin or creator of the bid card"""
    result = supabase.table("bid_cards")\
        .select("id, creator_id")\
        .eq("id", bid_card_id)\
        .maybe_single()\
        .execute()
    if not result or not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Bid card not found"
        )
    if is_admin(user_data):
        return user_data
    if result.data.get("creator_id") == user_data["id"]:
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Unauthorized to access this bid card"
    )


def check_self_or_admin(target_user_id: str, user_data: dict) -> dict:
    if is_admin(user_data) or user_data["id"] == target_user_id:
        return user_data
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You can only manage your own profile"
    )
