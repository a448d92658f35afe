"""Host element model."""

import dataclasses
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ClassVar

from trapdoor.utils.errors import UnsupportedProtocolError

PORT_HTTP = 80
PORT_HTTPS = 443


class HostMode(StrEnum):
    """How a host element is reached."""

    URL = "url"
    DNS = "dns"


def port_of(protocol: str) -> int:
    """Return the default TCP port of a protocol."""
    if not protocol:
        msg = "Must provide a valid tcp protocol."
        raise UnsupportedProtocolError(msg)
    match protocol.lower():
        case "http":
            return PORT_HTTP
        case "https":
            return PORT_HTTPS
    msg = f"No support TCP-Protocol: {protocol}"
    raise UnsupportedProtocolError(msg)


@dataclass(eq=False)
class HostElement:
    """One selectable backend host.

    Identity is the ``tag`` alone: two elements sharing a tag compare and hash
    equal even when label, host or scheme differ. Registry lookups and the
    replace-if-present of overrides rely on this.

    Only ``scheme`` and ``address`` may be reassigned after construction.
    """

    _MUTABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({"scheme", "address"})

    label: str
    tag: str
    host: str
    scheme: str = "https"
    mode: HostMode = HostMode.URL
    address: str | None = field(default=None)

    @property
    def port(self) -> int:
        """Return the port matching the scheme."""
        return port_of(self.scheme)

    @property
    def host_url(self) -> str:
        """Return scheme and host joined as url."""
        return f"{self.scheme}://{self.host}"

    def __setattr__(self, name: str, value: Any) -> None:
        """Allow late correction of scheme and address only."""
        if name not in self._MUTABLE_FIELDS and name in self.__dict__:
            msg = f"cannot assign to field '{name}'"
            raise dataclasses.FrozenInstanceError(msg)
        super().__setattr__(name, value)

    def __eq__(self, other: object) -> bool:
        """Compare by tag."""
        if self is other:
            return True
        if not isinstance(other, HostElement):
            return NotImplemented
        return self.tag == other.tag

    def __hash__(self) -> int:
        """Hash by tag."""
        return hash(self.tag)

    def __str__(self) -> str:
        """Return short description."""
        return f"HostElement(label='{self.label}', tag='{self.tag}', host_url='{self.host_url}')"
