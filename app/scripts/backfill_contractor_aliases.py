"""
Backfill Contractor Aliases Script
Assigns aliases to every contractor on the given projects, or on every
project when none are given. Existing aliases are left untouched.

Usage: python app/scripts/backfill_contractor_aliases.py [project_id ...]
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.database.supabase_client import SupabaseClient
from app.modules.messaging.alias_service import ContractorAliasService
from fastapi import HTTPException
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def all_project_ids(supabase: Client) -> list:
    result = supabase.table("projects").select("id").execute()
    return [p["id"] for p in (result.data or [])]


def backfill(supabase: Client, project_ids: list) -> dict:
    """project_id -> number of aliases after backfill; failed projects are logged and skipped"""
    service = ContractorAliasService(supabase)
    counts = {}
    for project_id in project_ids:
        try:
            aliases = service.assign_contractor_aliases(project_id)
            counts[project_id] = len(aliases)
            logger.info(f"Project {project_id}: {len(aliases)} contractor alias(es)")
        except HTTPException as e:
            logger.error(f"Project {project_id}: {e.detail}")
    return counts


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    try:
        supabase = SupabaseClient.get_service_client()
        project_ids = argv or all_project_ids(supabase)
        logger.info(f"Backfilling contractor aliases for {len(project_ids)} project(s)...")
        counts = backfill(supabase, project_ids)
        logger.info(f"Backfill completed: {len(counts)}/{len(project_ids)} project(s) processed")
    except Exception as e:
        logger.error(f"Error during backfill: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
