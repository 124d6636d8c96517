# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- owner_id: uuid (foreign key to auth.users.id, not null)
- title: text (not null)
- description: text (nullable)
- status: text (not null, default: 'draft') - values: draft, published, bidding, in_progress, completed, cancelled
- bid_status: text (default: 'accepting_bids') - values: accepting_bids, reviewing_bids, completed
- budget_min: numeric (nullable)
- budget_max: numeric (nullable)
- timeline: text (nullable)
- timeline_start: date (nullable)
- timeline_end: date (nullable)
- location: jsonb (nullable)
- zip_code: text (nullable)
- job_type_id: uuid (nullable)
- job_category_id: uuid (nullable)
- job_size: text (nullable) - values: small, medium, large, extra_large
- group_bidding_enabled: boolean (default: false)
- bid_count: integer (default: 0) - refreshed whenever a bid is written
- image_urls: text[] (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
