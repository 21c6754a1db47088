"""Supabase storage and table access."""
