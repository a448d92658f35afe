"""Host registry module."""

from collections.abc import Iterable
import logging
import threading

from trapdoor.host.element import HostElement

_LOGGER = logging.getLogger(__name__)


class ConfigStore:
    """Process wide configured host elements, shared by registries."""

    def __init__(self) -> None:
        """Config store init."""
        self._lock = threading.Lock()
        self._elements: tuple[HostElement, ...] = ()

    def load(self, elements: Iterable[HostElement]) -> None:
        """Replace configured elements, an empty update is ignored."""
        by_tag: dict[str, HostElement] = {}
        for element in elements:
            # a repeated tag replaces the earlier element in place
            by_tag[element.tag] = element
        loaded = tuple(by_tag.values())
        if not loaded:
            return
        _LOGGER.debug(f"Load global host config :: {[str(e) for e in loaded]}")
        with self._lock:
            self._elements = loaded

    def elements(self) -> tuple[HostElement, ...]:
        """Get configured elements."""
        with self._lock:
            return self._elements


class HostRegistry:
    """Per client host registry.

    Combines the shared configured elements with client specific overrides and
    tracks the selected host tag.
    """

    def __init__(self, store: ConfigStore) -> None:
        """Host registry init."""
        self._store = store
        self._lock = threading.RLock()
        self._overrides: list[HostElement] = []
        self._selected_tag: str = ""

    @property
    def selected_tag(self) -> str:
        """Return the selected tag, empty if nothing is selected."""
        with self._lock:
            return self._selected_tag

    def load_global_config(self, elements: Iterable[HostElement]) -> None:
        """Replace the shared configured elements."""
        self._store.load(elements)

    def add_override(self, element: HostElement) -> None:
        """Add or replace (keeping position) an element by tag."""
        with self._lock:
            try:
                self._overrides[self._overrides.index(element)] = element
            except ValueError:
                self._overrides.append(element)

    def host_elements(self) -> list[HostElement]:
        """Get configured followed by override elements."""
        configured = self._store.elements()
        with self._lock:
            return [*configured, *self._overrides]

    def selected_host(self) -> HostElement | None:
        """Get the selected element, configured ones win over overrides."""
        configured = self._store.elements()
        with self._lock:
            tag = self._selected_tag
            if not tag:
                return None
            return next((e for e in (*configured, *self._overrides) if e.tag == tag), None)

    def select(self, tag: str) -> None:
        """Select a host by tag, unknown tags are allowed."""
        with self._lock:
            if tag != self._selected_tag:
                _LOGGER.debug(f"Select host '{tag}' (was '{self._selected_tag}')")
                self._selected_tag = tag

    def is_host_configured(self, hostname: str) -> bool:
        """Check if any element uses exactly this host."""
        if not hostname:
            return False
        return any(e.host == hostname for e in self.host_elements())

    def dispose(self) -> None:
        """Drop overrides and selection."""
        with self._lock:
            self._overrides.clear()
            self._selected_tag = ""
