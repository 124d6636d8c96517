from supabase import Client
from app.modules.profiles.schemas import ProfileUpsert, ProfileResponse
from typing import Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = (
    "full_name", "avatar_url", "company_name", "website", "phone",
    "bio", "address", "city", "state", "zip",
)


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def find_profile(self, user_id: str) -> Optional[ProfileResponse]:
        """Profile for user_id, or None when the row does not exist"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                return None
            return ProfileResponse(**result.data)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to fetch profile: {str(e)}")

    def get_profile(self, user_id: str) -> ProfileResponse:
        profile = self.find_profile(user_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def get_profiles(self, user_ids: List[str]) -> Dict[str, ProfileResponse]:
        """Map user_id -> profile for the given ids; missing profiles are omitted"""
        if not user_ids:
            return {}
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .in_("id", list(set(user_ids)))\
                .execute()
            return {p["id"]: ProfileResponse(**p) for p in (result.data or [])}
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to fetch profiles: {str(e)}")

    def create_profile(self, user_id: str, user_type: str, full_name: Optional[str] = None) -> ProfileResponse:
        try:
            result = self.supabase.table("profiles").insert({
                "id": user_id,
                "user_type": user_type,
                "full_name": full_name or "InstaBids User",
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create profile")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to create profile: {str(e)}")

    def upsert_profile(self, user_id: str, profile_data: ProfileUpsert) -> tuple:
        """Update the profile when it exists, insert it otherwise. Returns (profile, created)."""
        existing = self.find_profile(user_id)
        try:
            if existing is not None:
                update_data = {
                    "user_type": profile_data.user_type,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                }
                for field in _PROFILE_FIELDS:
                    value = getattr(profile_data, field)
                    if value is not None:
                        update_data[field] = value
                result = self.supabase.table("profiles")\
                    .update(update_data)\
                    .eq("id", user_id)\
                    .execute()
                if not result.data:
                    raise HTTPException(status_code=404, detail="Profile not found")
                return ProfileResponse(**result.data[0]), False

            insert_data = {"id": user_id, "user_type": profile_data.user_type}
            for field in _PROFILE_FIELDS:
                value = getattr(profile_data, field)
                if value is not None:
                    insert_data[field] = value
            insert_data.setdefault("full_name", "InstaBids User")
            result = self.supabase.table("profiles").insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create profile")
            return ProfileResponse(**result.data[0]), True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to save profile: {str(e)}")

    def delete_profile(self, user_id: str) -> bool:
        try:
            result = self.supabase.table("profiles")\
                .delete()\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to delete profile: {str(e)}")
