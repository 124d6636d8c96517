from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

BidStatus = Literal["pending", "accepted", "rejected", "withdrawn"]


class BidCreate(BaseModel):
    amount: float = Field(gt=0)
    description: Optional[str] = None
    timeline_start: Optional[str] = None
    timeline_end: Optional[str] = None
    materials_included: bool = False
    labor_included: bool = True
    permit_included: bool = False
    notes: Optional[str] = None


class BidResponse(BaseModel):
    id: str
    project_id: str
    contractor_id: str
    amount: float
    description: Optional[str] = None
    status: str
    timeline_start: Optional[str] = None
    timeline_end: Optional[str] = None
    materials_included: Optional[bool] = None
    labor_included: Optional[bool] = None
    permit_included: Optional[bool] = None
    notes: Optional[str] = None
    contractor_alias: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
