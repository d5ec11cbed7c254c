"""Sydney Events: events service."""
