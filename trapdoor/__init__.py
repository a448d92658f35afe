"""Trapdoor: switch the backend host of an aiohttp client at runtime."""

import argparse
import asyncio
import logging
from pathlib import Path

from trapdoor.client import Trapdoor, TrapdoorPool
from trapdoor.host import loader
from trapdoor.host.element import HostElement, HostMode
from trapdoor.host.registry import ConfigStore, HostRegistry
from trapdoor.utils import utils
from trapdoor.utils.log_helper import LogHelper
from trapdoor.utils.settings import config as trapdoor_isc

__all__ = [
    "ConfigStore",
    "HostElement",
    "HostMode",
    "HostRegistry",
    "Trapdoor",
    "TrapdoorPool",
    "main",
    "start",
]

_LOGGER = logging.getLogger(__name__)


async def start(store: ConfigStore, config_dir: str | Path | None = None) -> list[HostElement]:
    """Load the host config off the event loop and publish it to the store."""
    try:
        _LOGGER.info("Loading host config...")
        elements = await asyncio.to_thread(loader.load, config_dir if config_dir is not None else trapdoor_isc.config_dir)
        store.load(elements)
        _LOGGER.info(f"Host config loaded :: {len(elements)} element(s)")
    except Exception:
        _LOGGER.exception(utils.default_exception_str_builder(info="during loading the host config"))
        raise
    return elements


def read_args(argv: list[str] | None) -> argparse.Namespace:
    """Read arguments."""
    parser = argparse.ArgumentParser(prog=trapdoor_isc.APP_NAME, description="List and select configured hosts")
    parser.add_argument("--version", action="version", version=f"%(prog)s {trapdoor_isc.APP_VERSION}")
    parser.add_argument("--config_dir", type=str, default=None, help="directory with the host config resources")
    parser.add_argument("--select", type=str, default=None, help="tag of the host to select")
    parser.add_argument("--debug_level", type=str, default=None, help="enable debug logs")
    parser.add_argument("--debug_verbose", type=int, default=None, help="enable verbose debug logs")
    return parser.parse_args(args=argv)


def main(argv: list[str] | None = None) -> int:
    """Start as CLI, list host elements and preview a selection."""
    args = read_args(argv)

    if args.debug_level:
        trapdoor_isc.debug_level = args.debug_level
    if args.debug_verbose:
        trapdoor_isc.debug_verbose = args.debug_verbose
    if args.config_dir:
        trapdoor_isc.config_dir = Path(args.config_dir)
    LogHelper()

    store = ConfigStore()
    asyncio.run(start(store))

    trapdoor = TrapdoorPool(store).obtain(trapdoor_isc.APP_NAME)
    if args.select:
        trapdoor.select(args.select)

    selected = trapdoor.host()
    for element in trapdoor.elements():
        print(f"[{'*' if element is selected else ' '}] {element}")  # noqa: T201

    if args.select and selected is None:
        print(f"No host configured with tag '{args.select}'")  # noqa: T201
        return 1
    return 0
