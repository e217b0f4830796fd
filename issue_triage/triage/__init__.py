"""Triage policies, action planning and governance execution."""
