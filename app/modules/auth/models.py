# Supabase Auth
# This module uses Supabase's built-in authentication system
# Supabase Auth handles:
# - User registration (auth.users table)
# - User login and session management
# - JWT token generation and validation
# - Password hashing and security

"""
Supabase Auth provides:
- auth.sign_up() / auth.admin.create_user() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

user_metadata carries full_name and user_type from registration; the
matching row in public.profiles is created right after sign-up, or lazily
on the first /auth/me call when that insert failed.
app_metadata.type == "admin" marks administrators and is only writable with
the service-role key.
"""
