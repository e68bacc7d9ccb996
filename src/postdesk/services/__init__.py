"""Post editing services."""
