from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime

ProjectStatus = Literal["draft", "published", "bidding", "in_progress", "completed", "cancelled"]
BidStatus = Literal["accepting_bids", "reviewing_bids", "completed"]
JobSize = Literal["small", "medium", "large", "extra_large"]

# Statuses in which a project takes new bids (together with bid_status == accepting_bids)
BIDDABLE_STATUSES = ("published", "bidding")


def _check_budget(budget_min, budget_max):
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        raise ValueError("Minimum budget cannot be greater than maximum budget")


class ProjectCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: ProjectStatus = "draft"
    bid_status: BidStatus = "accepting_bids"
    budget_min: Optional[float] = Field(default=None, ge=0)
    budget_max: Optional[float] = Field(default=None, ge=0)
    timeline: Optional[str] = None
    timeline_start: Optional[str] = None
    timeline_end: Optional[str] = None
    location: Optional[Dict[str, Any]] = None
    zip_code: Optional[str] = None
    job_type_id: Optional[str] = None
    job_category_id: Optional[str] = None
    job_size: Optional[JobSize] = None
    group_bidding_enabled: bool = False
    image_urls: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_budget_range(self):
        _check_budget(self.budget_min, self.budget_max)
        return self


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    bid_status: Optional[BidStatus] = None
    budget_min: Optional[float] = Field(default=None, ge=0)
    budget_max: Optional[float] = Field(default=None, ge=0)
    timeline: Optional[str] = None
    timeline_start: Optional[str] = None
    timeline_end: Optional[str] = None
    location: Optional[Dict[str, Any]] = None
    zip_code: Optional[str] = None
    job_type_id: Optional[str] = None
    job_category_id: Optional[str] = None
    job_size: Optional[JobSize] = None
    group_bidding_enabled: Optional[bool] = None
    image_urls: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_budget_range(self):
        _check_budget(self.budget_min, self.budget_max)
        return self


class ProjectResponse(BaseModel):
    id: str
    owner_id: str
    title: str
    description: Optional[str] = None
    status: str
    bid_status: Optional[str] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    timeline: Optional[str] = None
    timeline_start: Optional[str] = None
    timeline_end: Optional[str] = None
    location: Optional[Any] = None
    zip_code: Optional[str] = None
    job_type_id: Optional[str] = None
    job_category_id: Optional[str] = None
    job_size: Optional[str] = None
    group_bidding_enabled: Optional[bool] = False
    bid_count: Optional[int] = 0
    image_urls: Optional[List[str]] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
