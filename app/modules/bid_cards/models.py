# Supabase tables: bid_cards, bid_card_media
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

bid_cards:
- id: uuid (primary key)
- creator_id: uuid (foreign key to auth.users.id, not null)
- job_category_id: uuid (foreign key to job_categories.id)
- job_type_id: uuid (foreign key to job_types.id)
- intention_type_id: uuid (foreign key to project_intention_types.id)
- title: text (3..100 chars)
- description: text (10..2000 chars)
- location: jsonb - address_line1, address_line2, city, state, country, zip_code, latitude, longitude
- zip_code: text
- budget_min / budget_max: numeric (nullable, budget_min <= budget_max)
- timeline_start / timeline_end: date (nullable)
- timeline_horizon_id: uuid (foreign key to timeline_horizons.id)
- bid_deadline: timestamp (nullable)
- group_bidding_enabled: boolean (default: false)
- status: text - values: draft, published, archived
- visibility: text - values: public, private, group
- max_contractor_messages: integer (nullable)
- prohibit_negotiation: boolean (default: false)
- guidance_for_bidders: text (nullable)
- job_size: text - values: small, medium, large, extra_large
- required_certifications: text[] (nullable)
- special_requirements: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

bid_card_media:
- id: uuid (primary key)
- bid_card_id: uuid (foreign key to bid_cards.id, on delete cascade)
- media_type: text - values: photo, document
- file_path: text - bid-cards/{bid_card_id}/{millis}.{ext} in the media bucket
- file_name: text
- content_type: text
- size_bytes: integer
- created_at: timestamp (default: now())
"""
