from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from app.database.supabase_client import get_supabase
from app.modules.messaging.schemas import (
    ContractorAliasResponse, ContractorWithAlias, FormattedMessage, MessageType,
    SendMessageResponse, MarkReadResponse, UnreadCountResponse
)
from app.modules.messaging.service import MessagingService
from app.modules.messaging.alias_service import ContractorAliasService
from app.core.dependencies import (
    require_permission, check_project_owner, get_access_cache, get_user_type,
    get_user_permissions, is_admin
)
from supabase import Client
from typing import List, Optional, Dict, Any

router = APIRouter(tags=["messaging"])


def get_messaging_service(supabase: Client = Depends(get_supabase)) -> MessagingService:
    return MessagingService(supabase)


def get_alias_service(supabase: Client = Depends(get_supabase)) -> ContractorAliasService:
    return ContractorAliasService(supabase)


@router.post("/projects/{project_id}/messages", response_model=SendMessageResponse, status_code=201)
async def send_message(
    project_id: str,
    content: str = Form(...),
    message_type: MessageType = Form("individual"),
    recipient_id: Optional[str] = Form(None),
    files: List[UploadFile] = File(default=[]),
    user_data: Dict = Depends(require_permission("messages:send")),
    cache: Dict[str, Any] = Depends(get_access_cache),
    service: MessagingService = Depends(get_messaging_service),
    supabase: Client = Depends(get_supabase)
):
    """
    Send an individual message (to one contractor, or from a contractor to the owner)
    or a group message from the owner to every bidder. Files are stored as attachments.
    """
    if message_type == "group" and not is_admin(user_data):
        if "messages:broadcast" not in get_user_permissions(user_data, supabase, cache):
            raise HTTPException(status_code=403, detail="Insufficient permissions. Required: messages:broadcast")
    return await service.send_message(
        project_id,
        user_data["id"],
        content,
        message_type=message_type,
        recipient_id=recipient_id,
        files=files,
        sender_user_type=get_user_type(user_data, supabase, cache),
    )


@router.get("/projects/{project_id}/messages", response_model=List[FormattedMessage])
async def get_project_messages(
    project_id: str,
    contractor_id: Optional[str] = None,
    user_data: Dict = Depends(require_permission("messages:read")),
    service: MessagingService = Depends(get_messaging_service)
):
    """Messages visible to the caller, oldest first"""
    return service.get_project_messages(
        project_id, user_data["id"], contractor_id=contractor_id, as_owner=is_admin(user_data)
    )


@router.get("/projects/{project_id}/contractors", response_model=List[ContractorWithAlias])
async def list_project_contractors(
    project_id: str,
    user_data: Dict = Depends(require_permission("aliases:read")),
    service: ContractorAliasService = Depends(get_alias_service),
    supabase: Client = Depends(get_supabase)
):
    """Contractors on the project with their aliases (owner only)"""
    check_project_owner(project_id, user_data, supabase)
    return service.get_contractors_with_aliases(project_id)


@router.post("/projects/{project_id}/contractor-aliases/assign", response_model=List[ContractorAliasResponse])
async def assign_contractor_aliases(
    project_id: str,
    user_data: Dict = Depends(require_permission("aliases:assign")),
    service: ContractorAliasService = Depends(get_alias_service),
    supabase: Client = Depends(get_supabase)
):
    check_project_owner(project_id, user_data, supabase)
    return service.assign_contractor_aliases(project_id)


@router.get(
    "/projects/{project_id}/contractor-aliases/{contractor_id}",
    response_model=ContractorAliasResponse
)
async def get_contractor_alias(
    project_id: str,
    contractor_id: str,
    user_data: Dict = Depends(require_permission("aliases:read")),
    service: ContractorAliasService = Depends(get_alias_service),
    supabase: Client = Depends(get_supabase)
):
    """Alias of one contractor; visible to the owner and to the contractor themselves"""
    if user_data["id"] != contractor_id:
        check_project_owner(project_id, user_data, supabase)
    alias = service.get_contractor_alias(project_id, contractor_id)
    if alias is None:
        raise HTTPException(status_code=404, detail="Contractor alias not found")
    return ContractorAliasResponse(project_id=project_id, contractor_id=contractor_id, alias=alias)


@router.get("/messages/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    project_id: Optional[str] = None,
    user_data: Dict = Depends(require_permission("messages:read")),
    service: MessagingService = Depends(get_messaging_service)
):
    return UnreadCountResponse(unread=service.unread_count(user_data["id"], project_id))


@router.post("/messages/{message_id}/read", response_model=MarkReadResponse)
async def mark_message_read(
    message_id: str,
    user_data: Dict = Depends(require_permission("messages:read")),
    service: MessagingService = Depends(get_messaging_service)
):
    return service.mark_read(message_id, user_data["id"])
