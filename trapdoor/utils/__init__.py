"""Init utils module."""
