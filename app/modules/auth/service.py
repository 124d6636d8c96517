import hashlib
import time
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.modules.profiles.service import ProfileService
from fastapi import HTTPException
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client, admin_client: Optional[Client] = None):
        self.supabase = supabase
        # Service-role client; None when SUPABASE_SERVICE_ROLE_KEY is not configured
        self.admin_client = admin_client

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Create the auth user, then its profile. A failed profile insert only adds a warning."""
        user_metadata = {"user_type": register_data.user_type}
        if register_data.full_name:
            user_metadata["full_name"] = register_data.full_name
        try:
            if self.admin_client is not None:
                auth_response = self.admin_client.auth.admin.create_user({
                    "email": register_data.email,
                    "password": register_data.password,
                    "email_confirm": True,
                    "user_metadata": user_metadata
                })
            else:
                auth_response = self.supabase.auth.sign_up({
                    "email": register_data.email,
                    "password": register_data.password,
                    "options": {
                        "data": user_metadata
                    }
                })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

        user = auth_response.user
        email = user.email or register_data.email
        full_name = register_data.full_name or email.split("@")[0]
        profiles = ProfileService(self.admin_client or self.supabase)
        try:
            profile = profiles.create_profile(user.id, register_data.user_type, full_name)
        except Exception as e:
            detail = getattr(e, "detail", str(e))
            logger.error(f"Profile creation failed for user {user.id}: {detail}")
            return RegisterResponse(
                user_id=user.id,
                email=email,
                profile=None,
                warning=f"User created but profile creation failed: {detail}"
            )

        return RegisterResponse(
            user_id=user.id,
            email=email,
            profile=profile.model_dump(mode="json"),
            message="User and profile created successfully"
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
                "updated_at": user.updated_at
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Supabase tokens are stateless JWTs; they expire on their own
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    def get_or_create_profile(self, user_data: Dict[str, Any]) -> tuple:
        """Return (profile, created). Creates the profile from user_metadata when it is missing."""
        profiles = ProfileService(self.admin_client or self.supabase)
        profile = profiles.find_profile(user_data["id"])
        if profile is not None:
            return profile, False
        metadata = user_data.get("user_metadata") or {}
        user_type = metadata.get("user_type")
        if not user_type:
            return None, False
        try:
            profile = profiles.create_profile(
                user_data["id"],
                user_type,
                metadata.get("full_name") or "InstaBids User"
            )
            logger.info(f"Created missing profile for user {user_data['id']}")
            return profile, True
        except HTTPException as e:
            logger.error(f"Could not create missing profile for user {user_data['id']}: {e.detail}")
            return None, False

    def set_admin(self, user_id: str, is_admin: bool = True) -> bool:
        """Set admin status in app_metadata (requires service role key)"""
        if self.admin_client is None:
            raise HTTPException(
                status_code=500,
                detail="Service role key not configured. Cannot update app_metadata."
            )
        try:
            app_metadata = {"type": "admin"} if is_admin else {}
            response = self.admin_client.auth.admin.update_user_by_id(
                user_id,
                {"app_metadata": app_metadata}
            )

            if not response.user:
                raise HTTPException(status_code=404, detail="User not found")

            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail=f"Failed to update admin status: {str(e)}"
            )
