"""Request routing hook module."""

import logging
from types import TracebackType
from typing import Any, Self

from aiohttp import ClientSession
from aiohttp.client import _RequestContextManager
from yarl import URL

from trapdoor.host.element import HostMode
from trapdoor.host.registry import HostRegistry

_LOGGER = logging.getLogger(__name__)


def _target_of(scheme: str, host: str) -> URL:
    """Build the scheme and authority part of a host, the path after a '/' is dropped."""
    parsed = URL(f"//{host.split('/', 1)[0]}")
    if not parsed.host:
        msg = f"No hostname in '{host}'"
        raise ValueError(msg)
    return URL.build(scheme=scheme.lower(), host=parsed.host, port=parsed.explicit_port)


class RequestRoutingHook:
    """Call factory proxy around a client session.

    Requests to a configured host are sent to the selected host when that one is
    in url mode. Any other request passes through untouched.
    """

    def __init__(self, session: ClientSession, registry: HostRegistry) -> None:
        """Request routing hook init."""
        self._session = session
        self._registry = registry

    @property
    def session(self) -> ClientSession:
        """Return the wrapped session."""
        return self._session

    @property
    def closed(self) -> bool:
        """Return if the wrapped session is closed."""
        return self._session.closed

    def route(self, url: str | URL) -> URL:
        """Return the effective url of a request."""
        origin = URL(url)
        selected = self._registry.selected_host()
        if selected is None or selected.mode != HostMode.URL or not self._registry.is_host_configured(origin.host or ""):
            return origin

        try:
            target = _target_of(selected.scheme, selected.host)
        except ValueError as e:
            _LOGGER.warning(f"Unusable host '{selected.host}' of '{selected.tag}', request is not routed :: {e}")
            return origin

        authority = target.raw_authority
        if origin.raw_user is not None:
            userinfo = origin.raw_user if origin.raw_password is None else f"{origin.raw_user}:{origin.raw_password}"
            authority = f"{userinfo}@{authority}"
        routed = URL.build(
            scheme=target.scheme,
            authority=authority,
            path=origin.raw_path,
            query_string=origin.raw_query_string,
            fragment=origin.raw_fragment,
            encoded=True,
        )
        if routed != origin:
            _LOGGER.debug(f"Route request by '{selected.tag}' :: {origin} -> {routed}")
        return routed

    def request(self, method: str, url: str | URL, **kwargs: Any) -> _RequestContextManager:
        """Create a request on the wrapped session."""
        return self._session.request(method, self.route(url), **kwargs)

    def get(self, url: str | URL, **kwargs: Any) -> _RequestContextManager:
        """Perform HTTP GET request."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str | URL, **kwargs: Any) -> _RequestContextManager:
        """Perform HTTP POST request."""
        return self.request("POST", url, **kwargs)

    def put(self, url: str | URL, **kwargs: Any) -> _RequestContextManager:
        """Perform HTTP PUT request."""
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str | URL, **kwargs: Any) -> _RequestContextManager:
        """Perform HTTP PATCH request."""
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str | URL, **kwargs: Any) -> _RequestContextManager:
        """Perform HTTP DELETE request."""
        return self.request("DELETE", url, **kwargs)

    def head(self, url: str | URL, **kwargs: Any) -> _RequestContextManager:
        """Perform HTTP HEAD request."""
        return self.request("HEAD", url, **kwargs)

    def options(self, url: str | URL, **kwargs: Any) -> _RequestContextManager:
        """Perform HTTP OPTIONS request."""
        return self.request("OPTIONS", url, **kwargs)

    async def close(self) -> None:
        """Close the wrapped session."""
        await self._session.close()

    async def __aenter__(self) -> Self:
        """Enter async context."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close on async context exit."""
        await self.close()
