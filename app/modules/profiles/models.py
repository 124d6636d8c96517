# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, references auth.users.id)
- full_name: text (not null)
- user_type: text (not null) - values: homeowner, contractor, property-manager, labor-contractor, admin
- avatar_url: text (nullable)
- company_name: text (nullable)
- website: text (nullable)
- phone: text (nullable)
- bio: text (nullable)
- address: text (nullable)
- city: text (nullable)
- state: text (nullable)
- zip: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

user_type is the authoritative contractor-identity field used by messaging.
"""
