from supabase import Client
from app.modules.catalog.schemas import (
    JobCategoryResponse, JobTypeResponse, IntentionTypeResponse, TimelineHorizonResponse
)
from typing import Dict, List, Optional
from fastapi import HTTPException


class CatalogService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _list(self, table: str, order_by: str) -> List[dict]:
        try:
            result = self.supabase.table(table).select("*").order(order_by).execute()
            return result.data or []
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to load {table}: {str(e)}")

    def list_job_categories(self, parent_category_id: Optional[str] = None) -> List[JobCategoryResponse]:
        rows = self._list("job_categories", "display_order")
        if parent_category_id:
            rows = [r for r in rows if r.get("parent_category_id") == parent_category_id]
        return [JobCategoryResponse(**r) for r in rows]

    def list_job_types(self) -> List[JobTypeResponse]:
        return [JobTypeResponse(**r) for r in self._list("job_types", "display_order")]

    def list_intention_types(self) -> List[IntentionTypeResponse]:
        return [IntentionTypeResponse(**r) for r in self._list("project_intention_types", "name")]

    def list_timeline_horizons(self) -> List[TimelineHorizonResponse]:
        rows = self._list("timeline_horizons", "name")
        # open-ended horizons (no min_days) come first, then by lower bound
        rows.sort(key=lambda r: r.get("min_days") or 0)
        return [TimelineHorizonResponse(**r) for r in rows]

    def display_names(self, table: str, ids: List[str]) -> Dict[str, str]:
        """id -> display_name for the given catalog rows"""
        ids = [i for i in set(ids) if i]
        if not ids:
            return {}
        try:
            result = self.supabase.table(table)\
                .select("id, name, display_name")\
                .in_("id", ids)\
                .execute()
            return {r["id"]: r.get("display_name") or r.get("name") for r in (result.data or [])}
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to load {table}: {str(e)}")
