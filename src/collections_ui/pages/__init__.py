"""Page builders, one per route."""
