"""Marathi news desk: feed ingestion, classification and AI rewriting."""

__version__ = "0.1.0"
