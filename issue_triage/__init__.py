"""AI-assisted triage governance for GitHub issues."""

__version__ = "0.1.0"
