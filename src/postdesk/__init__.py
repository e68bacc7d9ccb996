"""Postdesk - schema-driven post editing for a content manager."""

__version__ = "0.1.0"
