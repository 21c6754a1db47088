"""Multi-step workflows."""
