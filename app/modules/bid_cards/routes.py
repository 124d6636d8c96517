from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from pydantic import BaseModel, ValidationError
from app.database.supabase_client import get_supabase
from app.modules.bid_cards.schemas import BidCardCreate, BidCardUpdate, BidCardResponse
from app.modules.bid_cards.service import BidCardService
from app.core.dependencies import require_permission, check_bid_card_owner
from supabase import Client
from typing import List, Optional, Dict, Type
import json

router = APIRouter(prefix="/bid-cards", tags=["bid-cards"])


def get_bid_card_service(supabase: Client = Depends(get_supabase)) -> BidCardService:
    return BidCardService(supabase)


def _parse_data(data: Optional[str], model: Type[BaseModel]):
    """Validate the JSON carried in the multipart `data` field"""
    if not data:
        raise HTTPException(status_code=400, detail="Missing bid card data")
    try:
        return model.model_validate_json(data)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=json.loads(e.json(include_url=False)))


@router.post("", response_model=BidCardResponse, status_code=201)
async def create_bid_card(
    data: Optional[str] = Form(None),
    submit: bool = Form(False),
    files: List[UploadFile] = File(default=[]),
    user_data: Dict = Depends(require_permission("bid_cards:create")),
    service: BidCardService = Depends(get_bid_card_service)
):
    """
    Create a bid card from multipart form data: `data` holds the card as JSON,
    any attached files become its media. `submit=true` publishes it, otherwise
    it is saved as a draft.
    """
    bid_card_data = _parse_data(data, BidCardCreate)
    file_contents = await service.read_files(files)
    return service.create_bid_card(bid_card_data, user_data["id"], file_contents, submit=submit)


@router.get("", response_model=List[BidCardResponse])
async def list_bid_cards(
    user_data: Dict = Depends(require_permission("bid_cards:read")),
    service: BidCardService = Depends(get_bid_card_service)
):
    """Caller's bid cards, newest first"""
    return service.list_bid_cards(user_data["id"])


@router.get("/{bid_card_id}", response_model=BidCardResponse)
async def get_bid_card(
    bid_card_id: str,
    user_data: Dict = Depends(require_permission("bid_cards:read")),
    service: BidCardService = Depends(get_bid_card_service),
    supabase: Client = Depends(get_supabase)
):
    check_bid_card_owner(bid_card_id, user_data, supabase)
    return service.get_bid_card(bid_card_id)


@router.patch("/{bid_card_id}", response_model=BidCardResponse)
async def update_bid_card(
    bid_card_id: str,
    data: Optional[str] = Form(None),
    submit: bool = Form(False),
    files: List[UploadFile] = File(default=[]),
    user_data: Dict = Depends(require_permission("bid_cards:update")),
    service: BidCardService = Depends(get_bid_card_service),
    supabase: Client = Depends(get_supabase)
):
    check_bid_card_owner(bid_card_id, user_data, supabase)
    bid_card_data = _parse_data(data, BidCardUpdate) if data else BidCardUpdate()
    file_contents = await service.read_files(files)
    return service.update_bid_card(bid_card_id, bid_card_data, file_contents, submit=submit)


@router.delete("/{bid_card_id}", status_code=204)
async def delete_bid_card(
    bid_card_id: str,
    user_data: Dict = Depends(require_permission("bid_cards:delete")),
    service: BidCardService = Depends(get_bid_card_service),
    supabase: Client = Depends(get_supabase)
):
    check_bid_card_owner(bid_card_id, user_data, supabase)
    service.delete_bid_card(bid_card_id)
    return None
