# Supabase tables: messages, message_recipients, message_attachments, contractor_aliases
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py and alias_service.py

"""
Expected Supabase table structure:

messages:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null)
- sender_id: uuid (foreign key to auth.users.id, not null)
- content: text (not null)
- message_type: text (not null) - values: individual, group
- contractor_alias: text (nullable) - sender's alias at send time; null for the project owner
- created_at: timestamp (default: now())

message_recipients:
- id: uuid (primary key)
- message_id: uuid (foreign key to messages.id, on delete cascade)
- recipient_id: uuid (foreign key to auth.users.id)
- read_at: timestamp (nullable)
- created_at: timestamp (default: now())
- check: recipient_id differs from the message's sender_id (enforced by the service)

message_attachments:
- id: uuid (primary key)
- message_id: uuid (foreign key to messages.id, on delete cascade)
- file_name: text, file_size: integer, file_type: text, file_url: text
- created_at: timestamp (default: now())

contractor_aliases:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id)
- contractor_id: uuid (foreign key to auth.users.id)
- alias: text (not null) - A, B, ... Z, AA, AB ...
- created_at: timestamp (default: now())
- unique (project_id, contractor_id)
- unique (project_id, alias)
"""
