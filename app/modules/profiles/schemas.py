from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from app.modules.auth.schemas import UserType


class ProfileUpsert(BaseModel):
    user_type: UserType
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    company_name: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    full_name: Optional[str] = None
    user_type: str
    avatar_url: Optional[str] = None
    company_name: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpsertResponse(BaseModel):
    profile: ProfileResponse
    created: bool
    message: str
