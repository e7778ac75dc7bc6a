"""Bundled static data (guide content)."""
