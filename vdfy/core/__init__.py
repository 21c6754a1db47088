"""Configuration, errors, logging and middleware."""
