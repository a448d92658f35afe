"""DNS override resolver module."""

import ipaddress
import logging
import socket

from aiohttp.abc import AbstractResolver, ResolveResult
from aiohttp.resolver import DefaultResolver

from trapdoor.host.element import HostMode
from trapdoor.host.registry import HostRegistry
from trapdoor.utils import utils
from trapdoor.utils.errors import InvalidHostnameError

_LOGGER = logging.getLogger(__name__)


class DnsOverrideResolver(AbstractResolver):
    """Resolve configured hosts to the fixed address of the selected DNS mode host.

    Everything else, and every override which can not be used, is resolved by the
    source resolver.
    """

    def __init__(self, registry: HostRegistry, source: AbstractResolver | None = None) -> None:
        """DNS override resolver init."""
        self._registry = registry
        self._source = source if source is not None else DefaultResolver()

    async def resolve(
        self,
        host: str,
        port: int = 0,
        family: socket.AddressFamily = socket.AF_INET,
    ) -> list[ResolveResult]:
        """Resolve host."""
        if not host:
            msg = f"Illegal hostname: {host!r}"
            raise InvalidHostnameError(msg)

        if self._registry.is_host_configured(host):
            selected = self._registry.selected_host()
            if selected is not None and selected.mode == HostMode.DNS:
                if utils.is_valid_ip(selected.address):
                    _LOGGER.debug(f"Resolve '{host}' by '{selected.tag}' to {selected.address}")
                    return [self._literal_result(host, str(selected.address), port)]
                _LOGGER.warning(f"Fail to get inet address '{selected.address}' of '{selected.tag}', resolve '{host}' by source")

        return await self._source.resolve(host, port, family)

    async def close(self) -> None:
        """Close source resolver."""
        await self._source.close()

    @staticmethod
    def _literal_result(hostname: str, address: str, port: int) -> ResolveResult:
        version = ipaddress.ip_address(address).version
        return ResolveResult(
            hostname=hostname,
            host=address,
            port=port,
            family=socket.AF_INET6 if version == 6 else socket.AF_INET,
            proto=0,
            flags=socket.AI_NUMERICHOST | socket.AI_NUMERICSERV,
        )
