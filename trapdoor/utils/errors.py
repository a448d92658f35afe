"""Trapdoor exceptions."""


class TrapdoorError(Exception):
    """Base class for trapdoor errors."""


class ConfigReadError(TrapdoorError):
    """Config resource is missing or could not be read."""


class ConfigParseError(TrapdoorError, ValueError):
    """Config line or entry is malformed."""


class InvalidHostnameError(TrapdoorError, OSError):
    """Hostname passed for resolution is empty."""


class UnsupportedProtocolError(TrapdoorError, ValueError):
    """Scheme has no known TCP port."""
