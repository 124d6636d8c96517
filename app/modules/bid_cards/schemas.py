from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Literal
from datetime import datetime

BidCardStatus = Literal["draft", "published", "archived"]
Visibility = Literal["public", "private", "group"]
JobSize = Literal["small", "medium", "large", "extra_large"]


class Location(BaseModel):
    address_line1: str = Field(min_length=1)
    address_line2: Optional[str] = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    country: Optional[str] = "USA"
    zip_code: str = Field(min_length=5)
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class BidCardBase(BaseModel):
    job_category_id: Optional[str] = None
    job_type_id: Optional[str] = None
    intention_type_id: Optional[str] = None
    location: Optional[Location] = None
    budget_min: Optional[float] = Field(default=None, ge=0)
    budget_max: Optional[float] = Field(default=None, ge=0)
    timeline_start: Optional[str] = None
    timeline_end: Optional[str] = None
    timeline_horizon_id: Optional[str] = None
    bid_deadline: Optional[str] = None
    max_contractor_messages: Optional[int] = Field(default=None, ge=0)
    guidance_for_bidders: Optional[str] = None
    job_size: Optional[JobSize] = None
    required_certifications: Optional[List[str]] = None
    special_requirements: Optional[str] = None

    @model_validator(mode="after")
    def check_budget_range(self):
        if self.budget_min is not None and self.budget_max is not None and self.budget_min > self.budget_max:
            raise ValueError("Minimum budget cannot be greater than maximum budget")
        return self


class BidCardCreate(BidCardBase):
    title: str = Field(min_length=3, max_length=100)
    description: str = Field(min_length=10, max_length=2000)
    zip_code: str = Field(min_length=5)
    visibility: Visibility = "public"
    group_bidding_enabled: bool = False
    prohibit_negotiation: bool = False


class BidCardUpdate(BidCardBase):
    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, min_length=10, max_length=2000)
    zip_code: Optional[str] = Field(default=None, min_length=5)
    status: Optional[BidCardStatus] = None
    visibility: Optional[Visibility] = None
    group_bidding_enabled: Optional[bool] = None
    prohibit_negotiation: Optional[bool] = None


class BidCardMediaResponse(BaseModel):
    id: str
    bid_card_id: str
    media_type: str
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    content_type: Optional[str] = None
    size_bytes: Optional[int] = None
    url: Optional[str] = None
    created_at: Optional[datetime] = None


class BidCardResponse(BaseModel):
    id: str
    creator_id: str
    title: str
    description: Optional[str] = None
    status: str
    visibility: Optional[str] = None
    job_category_id: Optional[str] = None
    job_type_id: Optional[str] = None
    intention_type_id: Optional[str] = None
    timeline_horizon_id: Optional[str] = None
    job_category: Optional[str] = None
    job_type: Optional[str] = None
    intention_type: Optional[str] = None
    timeline_horizon: Optional[str] = None
    location: Optional[dict] = None
    zip_code: Optional[str] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    timeline_start: Optional[str] = None
    timeline_end: Optional[str] = None
    bid_deadline: Optional[str] = None
    group_bidding_enabled: Optional[bool] = False
    max_contractor_messages: Optional[int] = None
    prohibit_negotiation: Optional[bool] = False
    guidance_for_bidders: Optional[str] = None
    job_size: Optional[str] = None
    required_certifications: Optional[List[str]] = None
    special_requirements: Optional[str] = None
    media: List[BidCardMediaResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
