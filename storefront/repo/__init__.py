"""Database access helpers grouped by aggregate."""
