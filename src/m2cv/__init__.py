"""Markdown CV to JSON Resume and PDF through external CLI tools."""

__version__ = "0.1.0"
