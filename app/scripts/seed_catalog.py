"""
Seed Catalog Script
Populates the job categories, job types, intention types and timeline
horizons reference tables. Rows are matched by name, so the script can be
re-run safely.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.database.supabase_client import SupabaseClient
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CATALOG = {
    "job_categories": [
        {"name": "kitchen", "display_name": "Kitchen", "display_order": 1},
        {"name": "bathroom", "display_name": "Bathroom", "display_order": 2},
        {"name": "addition", "display_name": "Addition", "display_order": 3},
        {"name": "plumbing", "display_name": "Plumbing", "display_order": 4},
        {"name": "electrical", "display_name": "Electrical", "display_order": 5},
        {"name": "roofing", "display_name": "Roofing", "display_order": 6},
    ],
    "job_types": [
        {"name": "renovation", "display_name": "Renovation", "display_order": 1},
        {"name": "repair", "display_name": "Repair", "display_order": 2},
        {"name": "new_construction", "display_name": "New Construction", "display_order": 3},
        {"name": "installation", "display_name": "Installation", "display_order": 4},
    ],
    "project_intention_types": [
        {"name": "one_time", "display_name": "One-time Project"},
        {"name": "ongoing", "display_name": "Ongoing Work"},
        {"name": "emergency", "display_name": "Emergency"},
        {"name": "upgrade", "display_name": "Upgrade"},
    ],
    "timeline_horizons": [
        {"name": "asap", "display_name": "As Soon As Possible", "min_days": 0, "max_days": 7},
        {"name": "within_month", "display_name": "Within a Month", "min_days": 7, "max_days": 30},
        {"name": "within_3_months", "display_name": "Within 3 Months", "min_days": 30, "max_days": 90},
        {"name": "flexible", "display_name": "Flexible", "min_days": None, "max_days": None},
    ],
}


def seed_table(supabase: Client, table: str, rows: list) -> int:
    """Insert or update rows in a catalog table, matched by name"""
    created_count = 0
    updated_count = 0

    for row in rows:
        try:
            existing = supabase.table(table)\
                .select("id")\
                .eq("name", row["name"])\
                .execute()

            if existing.data:
                supabase.table(table)\
                    .update(row)\
                    .eq("name", row["name"])\
                    .execute()
                updated_count += 1
                logger.debug(f"Updated {table}: {row['name']}")
            else:
                supabase.table(table).insert(row).execute()
                created_count += 1
                logger.debug(f"Created {table}: {row['name']}")
        except Exception as e:
            logger.error(f"Error processing {table} row {row['name']}: {e}")

    logger.info(f"{table} seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def seed_catalog(supabase: Client) -> int:
    return sum(seed_table(supabase, table, rows) for table, rows in CATALOG.items())


def main():
    try:
        supabase = SupabaseClient.get_service_client()
        logger.info("Starting catalog seeding...")
        total = seed_catalog(supabase)
        logger.info(f"Seeding completed successfully! {total} rows processed")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
