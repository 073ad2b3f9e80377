"""LLM-backed free-text movie search."""
