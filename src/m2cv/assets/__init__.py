"""Embedded data files (JSON schemas)."""
