from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.catalog.schemas import (
    JobCategoryResponse, JobTypeResponse, IntentionTypeResponse, TimelineHorizonResponse
)
from app.modules.catalog.service import CatalogService
from app.core.dependencies import require_permission
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/catalog", tags=["catalog"])


def get_catalog_service(supabase: Client = Depends(get_supabase)) -> CatalogService:
    return CatalogService(supabase)


@router.get("/job-categories", response_model=List[JobCategoryResponse])
async def list_job_categories(
    parent_category_id: Optional[str] = None,
    user_data: Dict = Depends(require_permission("catalog:read")),
    service: CatalogService = Depends(get_catalog_service)
):
    return service.list_job_categories(parent_category_id)


@router.get("/job-types", response_model=List[JobTypeResponse])
async def list_job_types(
    user_data: Dict = Depends(require_permission("catalog:read")),
    service: CatalogService = Depends(get_catalog_service)
):
    return service.list_job_types()


@router.get("/intention-types", response_model=List[IntentionTypeResponse])
async def list_intention_types(
    user_data: Dict = Depends(require_permission("catalog:read")),
    service: CatalogService = Depends(get_catalog_service)
):
    return service.list_intention_types()


@router.get("/timeline-horizons", response_model=List[TimelineHorizonResponse])
async def list_timeline_horizons(
    user_data: Dict = Depends(require_permission("catalog:read")),
    service: CatalogService = Depends(get_catalog_service)
):
    return service.list_timeline_horizons()
