# Supabase tables: job_categories, job_types, project_intention_types, timeline_horizons
# Read-only reference data; seeded by app/scripts/seed_catalog.py

"""
Expected Supabase table structure:

job_categories:
- id: uuid (primary key)
- name: text (unique, not null)
- display_name: text (not null)
- description: text (nullable)
- icon: text (nullable)
- display_order: integer (not null)
- parent_category_id: uuid (nullable, self reference)

job_types:
- id, name (unique), display_name, description, icon, display_order

project_intention_types:
- id, name (unique), display_name, description

timeline_horizons:
- id, name (unique), display_name
- min_days: integer (nullable)
- max_days: integer (nullable)
"""
