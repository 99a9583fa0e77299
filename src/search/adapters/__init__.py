# src/search/adapters/__init__.py — v1
"""httpx-based implementations of the search and fetch collaborators."""
