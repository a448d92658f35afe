"""Trapdoor client module."""

from collections.abc import Hashable
import logging
import threading
from typing import Any, Self

from aiohttp import ClientSession, TCPConnector
from aiohttp.abc import AbstractResolver
from aiohttp.resolver import AsyncResolver, DefaultResolver

from trapdoor.host.element import HostElement
from trapdoor.host.registry import ConfigStore, HostRegistry
from trapdoor.http.resolver import DnsOverrideResolver
from trapdoor.http.routing import RequestRoutingHook
from trapdoor.http.traffic_log import create_trace_config
from trapdoor.utils.settings import config as trapdoor_isc

_LOGGER = logging.getLogger(__name__)


class Trapdoor:
    """Host switching holder of one http client.

    Use :meth:`TrapdoorPool.obtain` to get the instance belonging to a client
    handle, then build connector and session from it.
    """

    def __init__(self, registry: HostRegistry, pool: "TrapdoorPool | None" = None) -> None:
        """Trapdoor init."""
        self._registry = registry
        self._pool = pool
        self._with_log = trapdoor_isc.DEBUG_LOGGING_TRAFFIC

    @property
    def registry(self) -> HostRegistry:
        """Return the host registry."""
        return self._registry

    def custom_config(self, *elements: HostElement) -> Self:
        """Add host elements for this trapdoor only."""
        for element in elements:
            self._registry.add_override(element)
        return self

    def enable_http_log(self) -> Self:
        """Log request/response exchanges of created sessions."""
        self._with_log = True
        return self

    def elements(self) -> list[HostElement]:
        """Get all configured and custom host elements."""
        return self._registry.host_elements()

    def host(self) -> HostElement | None:
        """Get selected host element."""
        return self._registry.selected_host()

    def select(self, tag: str) -> None:
        """Select host element by tag."""
        if not tag:
            return
        _LOGGER.info(f"Select host '{tag}' by {self}")
        self._registry.select(tag)

    def resolver(self) -> DnsOverrideResolver:
        """Create the dns override resolver."""
        source: AbstractResolver
        if trapdoor_isc.PROXY_NAMESERVER:
            # requires aiodns
            source = AsyncResolver(nameservers=trapdoor_isc.PROXY_NAMESERVER)
        else:
            source = DefaultResolver()
        return DnsOverrideResolver(self._registry, source)

    def connector(self, **kwargs: Any) -> TCPConnector:
        """Create a connector using the dns override resolver."""
        return TCPConnector(resolver=self.resolver(), **kwargs)

    def factory(self, **kwargs: Any) -> RequestRoutingHook:
        """Create the routed client session, must be called inside a running loop."""
        if "connector" not in kwargs:
            kwargs["connector"] = self.connector()
        if self._with_log:
            kwargs["trace_configs"] = [*kwargs.get("trace_configs", []), create_trace_config()]
        hook = RequestRoutingHook(ClientSession(**kwargs), self._registry)
        _LOGGER.debug(f"Create call-factory {hook} by {self}")
        return hook

    def release(self) -> None:
        """Drop custom elements and selection and leave the pool."""
        self._registry.dispose()
        if self._pool is not None:
            self._pool.discard(self)
            self._pool = None


class TrapdoorPool:
    """Mapping of client handles to their trapdoor."""

    def __init__(self, store: ConfigStore) -> None:
        """Trapdoor pool init."""
        self._store = store
        self._lock = threading.Lock()
        self._trapdoors: dict[Hashable, Trapdoor] = {}

    @property
    def store(self) -> ConfigStore:
        """Return the shared config store."""
        return self._store

    def obtain(self, handle: Hashable) -> Trapdoor:
        """Get the trapdoor of a handle, creating it if needed."""
        with self._lock:
            trapdoor = self._trapdoors.get(handle)
            if trapdoor is None:
                trapdoor = Trapdoor(HostRegistry(self._store), self)
                self._trapdoors[handle] = trapdoor
            return trapdoor

    def get(self, handle: Hashable) -> Trapdoor | None:
        """Get the trapdoor of a handle."""
        with self._lock:
            return self._trapdoors.get(handle)

    def remove(self, handle: Hashable) -> Trapdoor | None:
        """Remove and return the trapdoor of a handle."""
        with self._lock:
            return self._trapdoors.pop(handle, None)

    def discard(self, trapdoor: Trapdoor) -> None:
        """Remove a trapdoor whatever handle it is stored with."""
        with self._lock:
            for handle in [h for h, t in self._trapdoors.items() if t is trapdoor]:
                del self._trapdoors[handle]

    def __contains__(self, handle: Hashable) -> bool:
        """Check if handle has a trapdoor."""
        with self._lock:
            return handle in self._trapdoors

    def __len__(self) -> int:
        """Return number of trapdoors."""
        with self._lock:
            return len(self._trapdoors)
