"""Host config loader.

Reads the bundled host config from a directory. The structured JSON resource is
tried first; when it is missing, unreadable or yields no valid entry the line
based text resource is used instead. Nothing in here raises to the caller, broken
resources, lines and entries only lead to fewer elements.

Text lines look like::

    {label},{tag},{host}[,{scheme:`http`|`https`}[,{type:`url`|`dns:ip-address`}]]

JSON entries look like::

    {"label": "Prod", "tag": "prod", "host": "api.example.com", "scheme": "https",
     "mode": "dns", "inet": ["203.0.113.5"]}
"""

from collections.abc import Iterable
import json
import logging
from pathlib import Path
import re
from typing import Any

from trapdoor.host.element import HostElement, HostMode
from trapdoor.utils import utils
from trapdoor.utils.errors import ConfigParseError, ConfigReadError
from trapdoor.utils.settings import config as trapdoor_isc

_LOGGER = logging.getLogger(__name__)

IPV4_PATTERN = re.compile(r"^((25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)$")

_COMMENT_PREFIXES = ("#", "//")
_REQUIRED_KEYS = ("label", "tag", "host")


def is_ipv4(value: Any) -> bool:
    """Check for a strict dotted-quad ipv4 string."""
    return isinstance(value, str) and IPV4_PATTERN.fullmatch(value) is not None


def _upsert(elements: list[HostElement], element: HostElement) -> None:
    try:
        index = elements.index(element)
    except ValueError:
        elements.append(element)
        return
    _LOGGER.warning(f"Duplicate host tag '{element.tag}', replace {elements[index]} with {element}")
    elements[index] = element


# ******************************************************************************


def load(source: str | Path | None = None) -> list[HostElement]:
    """Load host elements from the config resources found in source."""
    base_path = Path(source) if source is not None else trapdoor_isc.config_dir

    elements: list[HostElement] = []
    try:
        elements = parse_json(_read_json(base_path))
    except ConfigReadError as e:
        _LOGGER.debug(f"Structured host config not usable :: {e}")
    if elements:
        _LOGGER.info(f"Loaded {len(elements)} host element(s) from '{trapdoor_isc.CONFIG_JSON_FILENAME}'")
        return elements

    try:
        elements = parse_text(_read_text(base_path))
    except ConfigReadError as e:
        _LOGGER.warning(f"Fail to load host config :: {e}")
        return []
    _LOGGER.info(f"Loaded {len(elements)} host element(s) from '{trapdoor_isc.CONFIG_TEXT_FILENAME}'")
    return elements


def _read_json(base_path: Path) -> list[Any]:
    try:
        return utils.load_json_array_file(trapdoor_isc.CONFIG_JSON_FILENAME, base_path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, TypeError, RecursionError) as e:
        msg = f"Could not read '{base_path / trapdoor_isc.CONFIG_JSON_FILENAME}'"
        raise ConfigReadError(msg) from e


def _read_text(base_path: Path) -> str:
    try:
        return utils.load_text_file(trapdoor_isc.CONFIG_TEXT_FILENAME, base_path)
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Could not read '{base_path / trapdoor_isc.CONFIG_TEXT_FILENAME}'"
        raise ConfigReadError(msg) from e


# ******************************************************************************


def parse_json(items: Iterable[Any]) -> list[HostElement]:
    """Parse decoded JSON entries, dropping invalid ones."""
    elements: list[HostElement] = []
    for item in items:
        try:
            _upsert(elements, parse_entry(item))
        except ConfigParseError as e:
            _LOGGER.warning(f"Drop host config entry :: {e}")
    return elements


def parse_entry(item: Any) -> HostElement:
    """Parse one decoded JSON entry."""
    if not isinstance(item, dict):
        msg = f"Entry is not an object: {item!r}"
        raise ConfigParseError(msg)
    for key in _REQUIRED_KEYS:
        value = item.get(key)
        if not isinstance(value, str) or not value:
            msg = f"Entry misses required '{key}': {item!r}"
            raise ConfigParseError(msg)

    scheme = item.get("scheme") or "http"
    mode = str(item.get("mode") or HostMode.URL).lower()

    address: str | None = None
    if mode == HostMode.DNS:
        candidates = item.get("inet")
        if isinstance(candidates, list):
            # later candidates are accepted but only the first valid one is used
            address = next((c for c in candidates if is_ipv4(c)), None)
        if address is None:
            _LOGGER.debug(f"No valid inet address for '{item['tag']}', fall back to url mode")

    return HostElement(
        item["label"],
        item["tag"],
        item["host"],
        str(scheme),
        HostMode.DNS if address is not None else HostMode.URL,
        address,
    )


# ******************************************************************************


def parse_text(content: str) -> list[HostElement]:
    """Parse line based config content, skipping comments and invalid lines."""
    elements: list[HostElement] = []
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        try:
            _upsert(elements, parse_line(line))
        except ConfigParseError as e:
            _LOGGER.error(f"Invalid config line :: {e}")
    return elements


def parse_line(line: str) -> HostElement:
    """Parse one config line."""
    sections = line.split(",")
    match len(sections):
        case 3:
            label, tag, host = sections
            return HostElement(label, tag, host)
        case 4:
            label, tag, host, scheme = sections
            return HostElement(label, tag, host, scheme)
        case 5:
            label, tag, host, scheme, type_data = sections
            mode, _, data = type_data.lower().partition(":")
            if mode == HostMode.DNS and is_ipv4(data):
                return HostElement(label, tag, host, scheme, HostMode.DNS, data)
            if type_data.lower() != HostMode.URL:
                _LOGGER.debug(f"Unusable type '{type_data}' for '{tag}', fall back to url mode")
            return HostElement(label, tag, host, scheme)
    raise ConfigParseError(line)
