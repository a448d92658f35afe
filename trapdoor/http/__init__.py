"""Init http module."""
