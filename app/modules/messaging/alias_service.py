from supabase import Client
from postgrest.exceptions import APIError
from app.config.permissions_config import CONTRACTOR_USER_TYPES
from app.modules.messaging.aliases import (
    order_by_first_interaction, plan_alias_assignments, free_labels, sort_key
)
from app.modules.messaging.schemas import ContractorAliasResponse, ContractorWithAlias
from app.modules.profiles.service import ProfileService
from typing import Dict, List, Optional, Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

_ASSIGN_ATTEMPTS = 3
UNIQUE_VIOLATION = "23505"


def _is_unique_violation(error: Exception) -> bool:
    return isinstance(error, APIError) and error.code == UNIQUE_VIOLATION


class ContractorAliasService:
    """Single source of truth for who is a contractor on a project and which alias they carry."""

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)

    def get_project(self, project_id: str) -> dict:
        try:
            result = self.supabase.table("projects")\
                .select("id, owner_id")\
                .eq("id", project_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Project not found")
        return result.data

    def get_alias_map(self, project_id: str) -> Dict[str, str]:
        """contractor_id -> alias for the project"""
        try:
            result = self.supabase.table("contractor_aliases")\
                .select("contractor_id, alias")\
                .eq("project_id", project_id)\
                .execute()
            return {r["contractor_id"]: r["alias"] for r in (result.data or [])}
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to load contractor aliases: {str(e)}")

    def list_aliases(self, project_id: str) -> List[ContractorAliasResponse]:
        try:
            result = self.supabase.table("contractor_aliases")\
                .select("*")\
                .eq("project_id", project_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to load contractor aliases: {str(e)}")
        rows = sorted(result.data or [], key=lambda r: sort_key(r.get("alias")))
        return [ContractorAliasResponse(**r) for r in rows]

    def get_contractor_alias(self, project_id: str, contractor_id: str) -> Optional[str]:
        return self.get_alias_map(project_id).get(contractor_id)

    def _contractor_interactions(self, project: dict) -> List[Tuple[str, object]]:
        """(contractor_id, timestamp) for every bid and contractor-sent message on the project"""
        project_id = project["id"]
        owner_id = project.get("owner_id")
        interactions = []

        bids = self.supabase.table("bids")\
            .select("contractor_id, created_at")\
            .eq("project_id", project_id)\
            .execute()
        for bid in bids.data or []:
            if bid.get("contractor_id") and bid["contractor_id"] != owner_id:
                interactions.append((bid["contractor_id"], bid.get("created_at")))

        messages = self.supabase.table("messages")\
            .select("sender_id, created_at")\
            .eq("project_id", project_id)\
            .execute()
        message_rows = [m for m in (messages.data or []) if m.get("sender_id") and m["sender_id"] != owner_id]
        if message_rows:
            known = {cid for cid, _ in interactions} | set(self.get_alias_map(project_id))
            unknown = {m["sender_id"] for m in message_rows} - known
            profiles = self.profiles.get_profiles(list(unknown)) if unknown else {}
            contractor_senders = known | {
                uid for uid, p in profiles.items() if p.user_type in CONTRACTOR_USER_TYPES
            }
            for m in message_rows:
                if m["sender_id"] in contractor_senders:
                    interactions.append((m["sender_id"], m.get("created_at")))
        return interactions

    def get_contractor_ids(self, project: dict) -> List[str]:
        """Contractors on the project in first-interaction order, including alias holders with no interaction left"""
        ordered = order_by_first_interaction(self._contractor_interactions(project))
        for contractor_id in self.get_alias_map(project["id"]):
            if contractor_id not in ordered and contractor_id != project.get("owner_id"):
                ordered.append(contractor_id)
        return ordered

    def is_contractor(self, project: dict, user_id: str, user_type: Optional[str] = None) -> bool:
        """True when user_id is a contractor on the project. The owner never is."""
        if not user_id or user_id == project.get("owner_id"):
            return False
        if user_id in self.get_alias_map(project["id"]):
            return True
        bid = self.supabase.table("bids")\
            .select("id")\
            .eq("project_id", project["id"])\
            .eq("contractor_id", user_id)\
            .limit(1)\
            .execute()
        if bid.data:
            return True
        if user_type is None:
            profile = self.profiles.find_profile(user_id)
            user_type = profile.user_type if profile else None
        if user_type not in CONTRACTOR_USER_TYPES:
            return False
        sent = self.supabase.table("messages")\
            .select("id")\
            .eq("project_id", project["id"])\
            .eq("sender_id", user_id)\
            .limit(1)\
            .execute()
        return bool(sent.data)

    def assign_contractor_aliases(self, project_id: str) -> List[ContractorAliasResponse]:
        """Give every contractor on the project an alias. Existing aliases are kept; idempotent."""
        project = self.get_project(project_id)
        for attempt in range(_ASSIGN_ATTEMPTS):
            existing = self.get_alias_map(project_id)
            try:
                ordered = order_by_first_interaction(self._contractor_interactions(project))
            except Exception as e:
                raise HTTPException(status_code=500, detail=f"Failed to load contractor interactions: {str(e)}")
            planned = plan_alias_assignments(existing, ordered)
            if not planned:
                break
            rows = [
                {"project_id": project_id, "contractor_id": contractor_id, "alias": alias}
                for contractor_id, alias in planned
            ]
            try:
                self.supabase.table("contractor_aliases").insert(rows).execute()
                logger.info(f"Assigned aliases on project {project_id}: {dict(planned)}")
                break
            except Exception as e:
                if not _is_unique_violation(e):
                    raise HTTPException(status_code=500, detail=f"Failed to assign contractor aliases: {str(e)}")
                # another writer took a label first; recompute from fresh state
                logger.warning(f"Alias insert conflict on project {project_id} (attempt {attempt + 1}): {e}")
        else:
            raise HTTPException(status_code=409, detail="Could not assign contractor aliases, please retry")
        return self.list_aliases(project_id)

    def ensure_contractor_alias(self, project_id: str, contractor_id: str) -> str:
        """Return the contractor's alias, assigning the lowest free label when missing"""
        for attempt in range(_ASSIGN_ATTEMPTS):
            existing = self.get_alias_map(project_id)
            if contractor_id in existing:
                return existing[contractor_id]
            alias = next(free_labels(existing.values()))
            try:
                self.supabase.table("contractor_aliases").insert({
                    "project_id": project_id,
                    "contractor_id": contractor_id,
                    "alias": alias,
                }).execute()
                logger.info(f"Contractor {contractor_id} is {alias} on project {project_id}")
                return alias
            except Exception as e:
                if not _is_unique_violation(e):
                    raise HTTPException(status_code=500, detail=f"Failed to assign contractor alias: {str(e)}")
                logger.warning(f"Alias insert conflict for contractor {contractor_id} (attempt {attempt + 1}): {e}")
        raise HTTPException(status_code=409, detail="Could not assign contractor alias, please retry")

    def get_contractors_with_aliases(self, project_id: str) -> List[ContractorWithAlias]:
        """Contractors on the project with alias, display name, avatar and latest bid amount"""
        project = self.get_project(project_id)
        try:
            contractor_ids = self.get_contractor_ids(project)
            if not contractor_ids:
                return []
            aliases = self.get_alias_map(project_id)
            profiles = self.profiles.get_profiles(contractor_ids)
            bids = self.supabase.table("bids")\
                .select("contractor_id, amount, created_at")\
                .eq("project_id", project_id)\
                .order("created_at", desc=True)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        latest_bid: Dict[str, float] = {}
        for bid in bids.data or []:
            latest_bid.setdefault(bid["contractor_id"], bid.get("amount"))

        contractors = []
        for contractor_id in contractor_ids:
            profile = profiles.get(contractor_id)
            contractors.append(ContractorWithAlias(
                id=contractor_id,
                name=(profile.full_name if profile and profile.full_name else "Unknown Contractor"),
                alias=aliases.get(contractor_id),
                avatar=profile.avatar_url if profile else None,
                bid_amount=latest_bid.get(contractor_id),
            ))
        contractors.sort(key=lambda c: sort_key(c.alias))
        return contractors
