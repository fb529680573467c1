"""Infrastructure layer - persistence adapters."""
