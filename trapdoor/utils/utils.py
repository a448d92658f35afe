"""Utils module."""

import json
import logging
from pathlib import Path
from typing import Any

import validators

_LOGGER = logging.getLogger(__name__)

# ******************************************************************************


def default_exception_str_builder(e: Exception | None = None, info: str | None = None) -> str:
    """Build default exception message."""
    i_error = ""
    i_info = ""
    if e is not None:
        i_error = f" :: {e}"
    if info is not None:
        i_info = f" :: {info}"
    return f"Unexpected exception occurred{i_info}{i_error}"


# ******************************************************************************


def str_to_bool(value: str | int | bool | None) -> bool:
    """Convert str to bool."""
    return str(value).lower() in ["true", "1", "t", "y", "on", "yes"]


def to_int(value: Any) -> int | None:
    """Convert save any to int."""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# ******************************************************************************


def is_valid_ip(ip: str | None) -> bool:
    """Validate if is a plain ipv4 or ipv6 address (no cidr)."""
    if not ip:
        return False
    return bool(validators.ipv4(ip, cidr=False) or validators.ipv6(ip, cidr=False))


# ******************************************************************************


def load_json_array_file(filename: str | Path, base_path: Path) -> list[Any]:
    """Load a JSON array from a file located under provided base_path."""
    file_path = base_path / filename
    data: Any = json.loads(file_path.read_text(encoding="utf-8"))

    if not isinstance(data, list):
        msg = f"JSON file {file_path.name} must contain a top-level array."
        raise TypeError(msg)

    return data


def load_text_file(filename: str | Path, base_path: Path) -> str:
    """Load TEXT from a file."""
    return (base_path / filename).read_text(encoding="utf-8")
