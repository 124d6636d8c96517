from fastapi import APIRouter, Depends, HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    SetAdminRequest
)
from app.modules.auth.service import AuthService
from app.core.dependencies import get_auth_service, get_current_user_id, is_admin, get_user_permissions
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])

# Security scheme for JWT Bearer token
security = HTTPBearer()


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user and create their profile"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me")
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
    supabase: Client = Depends(get_supabase),
):
    """Get current user, their profile (created on the fly when missing) and permissions."""
    profile, created = service.get_or_create_profile(current_user)
    permissions = get_user_permissions(current_user, supabase)
    return {
        **current_user,
        "profile": profile.model_dump(mode="json") if profile else None,
        "profile_created": created,
        "permissions": permissions,
    }


@router.post("/set-admin", status_code=200)
async def set_admin(
    request: SetAdminRequest,
    current_user: Dict = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service)
):
    """Set admin status for a user (requires current user to be admin)"""
    if not is_admin(current_user):
        raise HTTPException(status_code=403, detail="Only admins can set admin status")

    service.set_admin(request.user_id, request.is_admin)
    return {
        "message": f"User {request.user_id} admin status set to {request.is_admin}",
        "user_id": request.user_id,
        "is_admin": request.is_admin
    }
