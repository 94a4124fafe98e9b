"""Remote catalog feed, reconciliation and fallback seed data."""
