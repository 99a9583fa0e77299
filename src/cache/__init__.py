# src/cache/__init__.py — v1
"""In-process TTL cache for search, fetch and scoring results."""
