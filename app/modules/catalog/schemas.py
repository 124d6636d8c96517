from pydantic import BaseModel
from typing import Optional


class JobCategoryResponse(BaseModel):
    id: str
    name: str
    display_name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    display_order: int = 0
    parent_category_id: Optional[str] = None


class JobTypeResponse(BaseModel):
    id: str
    name: str
    display_name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    display_order: int = 0


class IntentionTypeResponse(BaseModel):
    id: str
    name: str
    display_name: str
    description: Optional[str] = None


class TimelineHorizonResponse(BaseModel):
    id: str
    name: str
    display_name: str
    min_days: Optional[int] = None
    max_days: Optional[int] = None
