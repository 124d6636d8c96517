from supabase import Client
from fastapi import HTTPException, UploadFile
from app.config import settings
from app.modules.bid_cards.schemas import (
    BidCardCreate, BidCardUpdate, BidCardResponse, BidCardMediaResponse
)
from app.modules.catalog.service import CatalogService
from app.modules.media.storage import MediaStorage, file_extension, media_type_for
from typing import List, Optional, Tuple
from datetime import datetime, timezone
import logging
import time

logger = logging.getLogger(__name__)

# bid card column -> (catalog table, response field)
_CATALOG_LOOKUPS = {
    "job_category_id": ("job_categories", "job_category"),
    "job_type_id": ("job_types", "job_type"),
    "intention_type_id": ("project_intention_types", "intention_type"),
    "timeline_horizon_id": ("timeline_horizons", "timeline_horizon"),
}


class BidCardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.catalog = CatalogService(supabase)
        self.storage = MediaStorage(supabase, settings.media_bucket)

    async def read_files(self, files: Optional[List[UploadFile]]) -> List[Tuple[UploadFile, bytes]]:
        """Read uploads up front so an oversized file rejects the request before anything is written"""
        contents = []
        for file in files or []:
            if not file or not file.filename:
                continue
            content = await file.read()
            if len(content) > settings.max_upload_bytes:
                raise HTTPException(
                    status_code=413,
                    detail=f"File {file.filename} exceeds maximum size of {settings.max_upload_bytes} bytes"
                )
            contents.append((file, content))
        return contents

    def _store_media(self, bid_card_id: str, files: List[Tuple[UploadFile, bytes]]) -> int:
        """Upload files and insert bid_card_media rows; failures are logged and skipped"""
        stored = 0
        last_millis = 0
        for file, content in files:
            millis = max(int(time.time() * 1000), last_millis + 1)
            last_millis = millis
            content_type = file.content_type or "application/octet-stream"
            path = f"bid-cards/{bid_card_id}/{millis}.{file_extension(file.filename)}"
            try:
                self.storage.upload(content, path, content_type)
                self.supabase.table("bid_card_media").insert({
                    "bid_card_id": bid_card_id,
                    "media_type": media_type_for(content_type),
                    "file_path": path,
                    "file_name": file.filename,
                    "content_type": content_type,
                    "size_bytes": len(content),
                }).execute()
                stored += 1
            except Exception as e:
                logger.warning(f"Skipping media {file.filename} for bid card {bid_card_id}: {e}")
        return stored

    def _with_catalog_names(self, rows: List[dict]) -> List[dict]:
        for column, (table, field) in _CATALOG_LOOKUPS.items():
            names = self.catalog.display_names(table, [r.get(column) for r in rows])
            for row in rows:
                row[field] = names.get(row.get(column))
        return rows

    def create_bid_card(
        self,
        bid_card_data: BidCardCreate,
        creator_id: str,
        files: List[Tuple[UploadFile, bytes]],
        submit: bool = False
    ) -> BidCardResponse:
        """Create a bid card (published when submit, draft otherwise) with its media"""
        insert_data = bid_card_data.model_dump(mode="json")
        insert_data["creator_id"] = creator_id
        insert_data["status"] = "published" if submit else "draft"
        try:
            result = self.supabase.table("bid_cards").insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create bid card")
            bid_card_id = result.data[0]["id"]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to create bid card: {str(e)}")

        stored = self._store_media(bid_card_id, files)
        logger.info(f"Bid card {bid_card_id} created by {creator_id} ({insert_data['status']}, {stored} file(s))")
        return self.get_bid_card(bid_card_id)

    def get_bid_card(self, bid_card_id: str) -> BidCardResponse:
        """Bid card with catalog names and signed media URLs"""
        try:
            result = self.supabase.table("bid_cards")\
                .select("*")\
                .eq("id", bid_card_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Bid card not found")
            bid_card = self._with_catalog_names([result.data])[0]

            media = self.supabase.table("bid_card_media")\
                .select("*")\
                .eq("bid_card_id", bid_card_id)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        bid_card["media"] = [
            BidCardMediaResponse(**item, url=self.storage.signed_url(item["file_path"]) if item.get("file_path") else None)
            for item in (media.data or [])
        ]
        return BidCardResponse(**bid_card)

    def list_bid_cards(self, creator_id: str) -> List[BidCardResponse]:
        try:
            result = self.supabase.table("bid_cards")\
                .select("*")\
                .eq("creator_id", creator_id)\
                .order("created_at", desc=True)\
                .execute()
            rows = self._with_catalog_names(result.data or [])
            return [BidCardResponse(**row) for row in rows]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_bid_card(
        self,
        bid_card_id: str,
        bid_card_data: BidCardUpdate,
        files: List[Tuple[UploadFile, bytes]],
        submit: bool = False
    ) -> BidCardResponse:
        """Partial update; submit publishes the card"""
        update_data = bid_card_data.model_dump(mode="json", exclude_unset=True)
        if "budget_min" in update_data or "budget_max" in update_data:
            current = self.get_bid_card(bid_card_id)
            budget_min = update_data.get("budget_min", current.budget_min)
            budget_max = update_data.get("budget_max", current.budget_max)
            if budget_min is not None and budget_max is not None and budget_min > budget_max:
                raise HTTPException(
                    status_code=400,
                    detail="Minimum budget cannot be greater than maximum budget"
                )
        if submit:
            update_data["status"] = "published"
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("bid_cards")\
                .update(update_data)\
                .eq("id", bid_card_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Bid card not found")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to update bid card: {str(e)}")

        self._store_media(bid_card_id, files)
        return self.get_bid_card(bid_card_id)

    def delete_bid_card(self, bid_card_id: str) -> bool:
        """Remove stored files, media rows and the card"""
        try:
            media = self.supabase.table("bid_card_media")\
                .select("file_path")\
                .eq("bid_card_id", bid_card_id)\
                .execute()
            paths = [m.get("file_path") for m in (media.data or [])]
            if paths:
                self.storage.remove(paths)
                self.supabase.table("bid_card_media")\
                    .delete()\
                    .eq("bid_card_id", bid_card_id)\
                    .execute()
            result = self.supabase.table("bid_cards")\
                .delete()\
                .eq("id", bid_card_id)\
                .execute()
            logger.info(f"Bid card {bid_card_id} deleted with {len(paths)} media file(s)")
            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
