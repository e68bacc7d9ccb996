"""Shared utilities for Postdesk."""
