from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.projects.schemas import ProjectCreate, ProjectUpdate, ProjectResponse
from app.modules.projects.service import ProjectService
from app.core.dependencies import require_permission, check_project_owner
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(supabase: Client = Depends(get_supabase)) -> ProjectService:
    return ProjectService(supabase)


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    user_data: Dict = Depends(require_permission("projects:create")),
    service: ProjectService = Depends(get_project_service)
):
    """Create a new project owned by the caller"""
    return service.create_project(project_data, user_data["id"])


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    status: Optional[str] = None,
    owner_id: Optional[str] = None,
    limit: int = 10,
    offset: int = 0,
    user_data: Dict = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service)
):
    """List projects, optionally filtered by status or owner"""
    return service.list_projects(status=status, owner_id=owner_id, limit=limit, offset=offset)


@router.get("/mine", response_model=List[ProjectResponse])
async def list_my_projects(
    status: Optional[str] = None,
    limit: int = 10,
    offset: int = 0,
    user_data: Dict = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service)
):
    return service.list_projects(status=status, owner_id=user_data["id"], limit=limit, offset=offset)


@router.get("/active", response_model=List[ProjectResponse])
async def list_active_projects(
    limit: int = 10,
    offset: int = 0,
    user_data: Dict = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service)
):
    """Published projects whose bidding is not completed"""
    return service.get_active_projects(limit=limit, offset=offset)


@router.get("/completed", response_model=List[ProjectResponse])
async def list_completed_projects(
    limit: int = 10,
    offset: int = 0,
    user_data: Dict = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service)
):
    return service.get_completed_projects(limit=limit, offset=offset)


@router.get("/available", response_model=List[ProjectResponse])
async def list_available_projects(
    limit: int = 10,
    offset: int = 0,
    user_data: Dict = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service)
):
    """Projects currently accepting bids"""
    return service.get_available_projects(limit=limit, offset=offset)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    user_data: Dict = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service)
):
    return service.get_project_by_id(project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    user_data: Dict = Depends(require_permission("projects:update")),
    service: ProjectService = Depends(get_project_service),
    supabase: Client = Depends(get_supabase)
):
    """Update project (owner only)"""
    check_project_owner(project_id, user_data, supabase)
    return service.update_project(project_id, project_data)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: str,
    user_data: Dict = Depends(require_permission("projects:delete")),
    service: ProjectService = Depends(get_project_service),
    supabase: Client = Depends(get_supabase)
):
    """Delete project (owner only)"""
    check_project_owner(project_id, user_data, supabase)
    service.delete_project(project_id)
    return None
