# src/search/__init__.py — v1
"""Search collaborators and paginated search orchestration."""
