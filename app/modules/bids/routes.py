from fastapi import APIRouter, Depends, HTTPException
from app.database.supabase_client import get_supabase
from app.modules.bids.schemas import BidCreate, BidResponse
from app.modules.bids.service import BidService
from app.core.dependencies import require_permission, check_project_owner, is_admin
from supabase import Client
from typing import List, Dict

router = APIRouter(tags=["bids"])


def get_bid_service(supabase: Client = Depends(get_supabase)) -> BidService:
    return BidService(supabase)


@router.post("/projects/{project_id}/bids", response_model=BidResponse, status_code=201)
async def submit_bid(
    project_id: str,
    bid_data: BidCreate,
    user_data: Dict = Depends(require_permission("bids:create")),
    service: BidService = Depends(get_bid_service)
):
    """Submit a bid, or revise the caller's pending bid on the project"""
    return service.submit_bid(project_id, user_data["id"], bid_data)


@router.get("/projects/{project_id}/bids", response_model=List[BidResponse])
async def list_project_bids(
    project_id: str,
    user_data: Dict = Depends(require_permission("bids:read")),
    service: BidService = Depends(get_bid_service),
    supabase: Client = Depends(get_supabase)
):
    """Bids on a project, cheapest first (owner only)"""
    check_project_owner(project_id, user_data, supabase)
    return service.list_project_bids(project_id)


@router.get("/bids/mine", response_model=List[BidResponse])
async def list_my_bids(
    user_data: Dict = Depends(require_permission("bids:read")),
    service: BidService = Depends(get_bid_service)
):
    return service.list_contractor_bids(user_data["id"])


@router.post("/bids/{bid_id}/accept", response_model=BidResponse)
async def accept_bid(
    bid_id: str,
    user_data: Dict = Depends(require_permission("bids:review")),
    service: BidService = Depends(get_bid_service),
    supabase: Client = Depends(get_supabase)
):
    """Accept a bid; competing pending bids are rejected and the project moves to in_progress"""
    bid = service.get_bid(bid_id)
    check_project_owner(bid.project_id, user_data, supabase)
    return service.accept_bid(bid)


@router.post("/bids/{bid_id}/reject", response_model=BidResponse)
async def reject_bid(
    bid_id: str,
    user_data: Dict = Depends(require_permission("bids:review")),
    service: BidService = Depends(get_bid_service),
    supabase: Client = Depends(get_supabase)
):
    bid = service.get_bid(bid_id)
    check_project_owner(bid.project_id, user_data, supabase)
    return service.reject_bid(bid)


@router.post("/bids/{bid_id}/withdraw", response_model=BidResponse)
async def withdraw_bid(
    bid_id: str,
    user_data: Dict = Depends(require_permission("bids:withdraw")),
    service: BidService = Depends(get_bid_service)
):
    bid = service.get_bid(bid_id)
    if bid.contractor_id != user_data["id"] and not is_admin(user_data):
        raise HTTPException(status_code=403, detail="You can only withdraw your own bids")
    return service.withdraw_bid(bid)
