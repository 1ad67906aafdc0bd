"""Mini fixture package."""
