# src/fetch/__init__.py — v1
"""Rate-limited, retrying page retrieval."""
