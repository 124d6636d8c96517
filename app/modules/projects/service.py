from supabase import Client
from app.modules.projects.schemas import ProjectCreate, ProjectUpdate, ProjectResponse, BIDDABLE_STATUSES
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_project(self, project_data: ProjectCreate, owner_id: str) -> ProjectResponse:
        """Create a new project owned by owner_id"""
        try:
            insert_data = project_data.model_dump()
            insert_data["owner_id"] = owner_id
            insert_data["bid_count"] = 0

            result = self.supabase.table("projects").insert(insert_data).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create project")

            logger.info(f"Project {result.data[0]['id']} created by {owner_id}")
            return ProjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to create project: {str(e)}")

    def get_project_by_id(self, project_id: str) -> ProjectResponse:
        """Get project by ID"""
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .eq("id", project_id)\
                .maybe_single()\
                .execute()

            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Project not found")

            return ProjectResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_project(self, project_id: str, project_data: ProjectUpdate) -> ProjectResponse:
        """Partial update; only fields present in the request are written"""
        update_data = project_data.model_dump(exclude_unset=True)
        if "budget_min" in update_data or "budget_max" in update_data:
            current = self.get_project_by_id(project_id)
            budget_min = update_data.get("budget_min", current.budget_min)
            budget_max = update_data.get("budget_max", current.budget_max)
            if budget_min is not None and budget_max is not None and budget_min > budget_max:
                raise HTTPException(
                    status_code=400,
                    detail="Minimum budget cannot be greater than maximum budget"
                )
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("projects")\
                .update(update_data)\
                .eq("id", project_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Project not found")

            return ProjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_projects(
        self,
        status: Optional[str] = None,
        owner_id: Optional[str] = None,
        limit: int = 10,
        offset: int = 0
    ) -> List[ProjectResponse]:
        """List projects, newest first"""
        try:
            query = self.supabase.table("projects").select("*")
            if status:
                query = query.eq("status", status)
            if owner_id:
                query = query.eq("owner_id", owner_id)
            result = query.order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ProjectResponse(**project) for project in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_active_projects(self, limit: int = 10, offset: int = 0) -> List[ProjectResponse]:
        """Published projects whose bidding is not completed"""
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .eq("status", "published")\
                .neq("bid_status", "completed")\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ProjectResponse(**project) for project in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_completed_projects(self, limit: int = 10, offset: int = 0) -> List[ProjectResponse]:
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .eq("bid_status", "completed")\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ProjectResponse(**project) for project in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_available_projects(self, limit: int = 10, offset: int = 0) -> List[ProjectResponse]:
        """Projects contractors can currently bid on"""
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .in_("status", list(BIDDABLE_STATUSES))\
                .eq("bid_status", "accepting_bids")\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [ProjectResponse(**project) for project in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def refresh_bid_count(self, project_id: str) -> int:
        """Recount non-withdrawn bids and store the total on the project"""
        try:
            result = self.supabase.table("bids")\
                .select("id")\
                .eq("project_id", project_id)\
                .neq("status", "withdrawn")\
                .execute()
            count = len(result.data or [])
            self.supabase.table("projects")\
                .update({"bid_count": count})\
                .eq("id", project_id)\
                .execute()
            return count
        except Exception as e:
            logger.warning(f"Failed to refresh bid count for project {project_id}: {e}")
            return -1

    def update_project_status(self, project_id: str, status: str, bid_status: Optional[str] = None) -> ProjectResponse:
        update_data = {"status": status, "updated_at": datetime.now(timezone.utc).isoformat()}
        if bid_status:
            update_data["bid_status"] = bid_status
        try:
            result = self.supabase.table("projects")\
                .update(update_data)\
                .eq("id", project_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Project not found")
            return ProjectResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_project(self, project_id: str) -> bool:
        try:
            result = self.supabase.table("projects")\
                .delete()\
                .eq("id", project_id)\
                .execute()

            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
