from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.profiles.schemas import ProfileUpsert, ProfileResponse, ProfileUpsertResponse
from app.modules.profiles.service import ProfileService
from app.core.dependencies import require_permission, check_self_or_admin, is_admin
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_data: Dict = Depends(require_permission("profiles:read")),
    service: ProfileService = Depends(get_profile_service)
):
    return service.get_profile(user_data["id"])


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    user_data: Dict = Depends(require_permission("profiles:read")),
    service: ProfileService = Depends(get_profile_service)
):
    """Get profile by user ID"""
    return service.get_profile(user_id)


@router.put("/{user_id}", response_model=ProfileUpsertResponse)
async def upsert_profile(
    user_id: str,
    profile_data: ProfileUpsert,
    user_data: Dict = Depends(require_permission("profiles:update")),
    service: ProfileService = Depends(get_profile_service)
):
    """Create or update a profile (own profile only, unless admin)"""
    check_self_or_admin(user_id, user_data)
    if profile_data.user_type == "admin" and not is_admin(user_data):
        raise HTTPException(status_code=403, detail="Only admins can assign the admin user type")
    profile, created = service.upsert_profile(user_id, profile_data)
    return ProfileUpsertResponse(
        profile=profile,
        created=created,
        message="Profile created successfully" if created else "Profile updated successfully"
    )


@router.delete("/{user_id}", status_code=204)
async def delete_profile(
    user_id: str,
    user_data: Dict = Depends(require_permission("profiles:delete")),
    service: ProfileService = Depends(get_profile_service)
):
    check_self_or_admin(user_id, user_data)
    service.delete_profile(user_id)
    return None
