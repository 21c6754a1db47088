"""Persistence helpers."""
