from supabase import Client
from app.modules.bids.schemas import BidCreate, BidResponse
from app.modules.messaging.alias_service import ContractorAliasService
from app.modules.projects.schemas import BIDDABLE_STATUSES
from app.modules.projects.service import ProjectService
from typing import List
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class BidService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.projects = ProjectService(supabase)
        self.aliases = ContractorAliasService(supabase)

    def get_bid(self, bid_id: str) -> BidResponse:
        try:
            result = self.supabase.table("bids")\
                .select("*")\
                .eq("id", bid_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Bid not found")
            return BidResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def submit_bid(self, project_id: str, contractor_id: str, bid_data: BidCreate) -> BidResponse:
        """Create the contractor's bid, or update it while it is still pending"""
        project = self.projects.get_project_by_id(project_id)
        if project.owner_id == contractor_id:
            raise HTTPException(status_code=400, detail="You cannot bid on your own project")
        if project.status not in BIDDABLE_STATUSES or project.bid_status != "accepting_bids":
            raise HTTPException(status_code=409, detail="Project is not accepting bids")

        try:
            existing = self.supabase.table("bids")\
                .select("*")\
                .eq("project_id", project_id)\
                .eq("contractor_id", contractor_id)\
                .maybe_single()\
                .execute()
            if existing and existing.data:
                if existing.data.get("status") != "pending":
                    raise HTTPException(
                        status_code=409,
                        detail=f"Bid already {existing.data.get('status')} and can no longer be changed"
                    )
                update_data = bid_data.model_dump()
                update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
                result = self.supabase.table("bids")\
                    .update(update_data)\
                    .eq("id", existing.data["id"])\
                    .execute()
                logger.info(f"Bid {existing.data['id']} updated by {contractor_id}")
            else:
                insert_data = bid_data.model_dump()
                insert_data.update({
                    "project_id": project_id,
                    "contractor_id": contractor_id,
                    "status": "pending",
                })
                result = self.supabase.table("bids").insert(insert_data).execute()
                logger.info(f"Contractor {contractor_id} bid on project {project_id}")

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save bid")
            bid = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to save bid: {str(e)}")

        alias = self.aliases.ensure_contractor_alias(project_id, contractor_id)
        self.projects.refresh_bid_count(project_id)
        return BidResponse(**bid, contractor_alias=alias)

    def list_project_bids(self, project_id: str) -> List[BidResponse]:
        """Bids on the project, cheapest first, annotated with contractor aliases"""
        try:
            result = self.supabase.table("bids")\
                .select("*")\
                .eq("project_id", project_id)\
                .order("amount")\
                .execute()
            aliases = self.aliases.get_alias_map(project_id)
            return [
                BidResponse(**bid, contractor_alias=aliases.get(bid["contractor_id"]))
                for bid in (result.data or [])
            ]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_contractor_bids(self, contractor_id: str) -> List[BidResponse]:
        try:
            result = self.supabase.table("bids")\
                .select("*")\
                .eq("contractor_id", contractor_id)\
                .order("created_at", desc=True)\
                .execute()
            return [BidResponse(**bid) for bid in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _transition(self, bid: BidResponse, status: str) -> BidResponse:
        if bid.status != "pending":
            raise HTTPException(status_code=409, detail=f"Only pending bids can be {status}; bid is {bid.status}")
        try:
            result = self.supabase.table("bids")\
                .update({"status": status, "updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", bid.id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Bid not found")
            logger.info(f"Bid {bid.id} {status}")
            return BidResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def accept_bid(self, bid: BidResponse) -> BidResponse:
        """Accept the bid, reject the other pending bids and start the project"""
        accepted = self._transition(bid, "accepted")
        try:
            self.supabase.table("bids")\
                .update({"status": "rejected", "updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("project_id", bid.project_id)\
                .eq("status", "pending")\
                .neq("id", bid.id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to reject competing bids: {str(e)}")
        self.projects.update_project_status(bid.project_id, "in_progress", bid_status="completed")
        return accepted

    def reject_bid(self, bid: BidResponse) -> BidResponse:
        return self._transition(bid, "rejected")

    def withdraw_bid(self, bid: BidResponse) -> BidResponse:
        withdrawn = self._transition(bid, "withdrawn")
        self.projects.refresh_bid_count(bid.project_id)
        return withdrawn
