# Supabase table: bids
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

bids:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null)
- contractor_id: uuid (foreign key to auth.users.id, not null)
- amount: numeric (not null, > 0)
- description: text (nullable)
- status: text (default: 'pending') - values: pending, accepted, rejected, withdrawn
- timeline_start: date (nullable)
- timeline_end: date (nullable)
- materials_included: boolean (default: false)
- labor_included: boolean (default: true)
- permit_included: boolean (default: false)
- notes: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique (project_id, contractor_id)
"""
