from pydantic import BaseModel
from typing import Optional, List, Literal
from datetime import datetime

MessageType = Literal["individual", "group"]


class ContractorAliasResponse(BaseModel):
    id: Optional[str] = None
    project_id: str
    contractor_id: str
    alias: str
    created_at: Optional[datetime] = None


class ContractorWithAlias(BaseModel):
    id: str
    name: str
    alias: Optional[str] = None
    avatar: Optional[str] = None
    bid_amount: Optional[float] = None


class AttachmentResponse(BaseModel):
    id: str
    file_name: str
    file_url: str
    file_type: Optional[str] = None
    file_size: Optional[int] = None


class FormattedMessage(BaseModel):
    id: str
    sender_id: str
    sender_alias: Optional[str] = None
    sender_role: Literal["homeowner", "contractor"]
    content: str
    timestamp: datetime
    is_own: bool
    is_group: bool
    read_at: Optional[datetime] = None
    attachments: List[AttachmentResponse] = []


class SendMessageResponse(BaseModel):
    message: FormattedMessage
    recipient_ids: List[str]


class UnreadCountResponse(BaseModel):
    unread: int


class MarkReadResponse(BaseModel):
    message_id: str
    read_at: datetime
