"""Host elements, config loading and registry."""

from trapdoor.host.element import HostElement, HostMode
from trapdoor.host.registry import ConfigStore, HostRegistry

__all__ = ["ConfigStore", "HostElement", "HostMode", "HostRegistry"]
