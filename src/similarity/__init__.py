# src/similarity/__init__.py — v1
"""Lexical similarity: tokenizer, metrics, fused scorer, corpus matcher."""
