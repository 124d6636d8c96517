from pydantic import BaseModel, EmailStr
from typing import Optional, Literal, Dict, Any

UserType = Literal["homeowner", "contractor", "property-manager", "labor-contractor", "admin"]


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None
    user_type: UserType


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    profile: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    warning: Optional[str] = None


class SetAdminRequest(BaseModel):
    user_id: str
    is_admin: bool = True
