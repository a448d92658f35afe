"""Trapdoor settings module."""

import os
from pathlib import Path

from trapdoor.utils.utils import str_to_bool, to_int


class Config:
    """Runtime settings, filled from environment variables."""

    APP_NAME: str = "trapdoor"
    APP_VERSION: str = "0.3.0"

    # Bundled config resources, tried in this order
    CONFIG_JSON_FILENAME: str = os.environ.get("TRAPDOOR_CONFIG_JSON") or "trapdoor_host_config.json"
    CONFIG_TEXT_FILENAME: str = os.environ.get("TRAPDOOR_CONFIG_TEXT") or "trapdoor_host_config.txt"

    # Optional public nameservers for the fallback resolver (requires aiodns)
    PROXY_NAMESERVER: list[str] = [ns.strip() for ns in os.environ.get("TRAPDOOR_NAMESERVER", "").split(",") if ns.strip()]

    DEBUG_LOGGING_TRAFFIC: bool = str_to_bool(os.environ.get("DEBUG_LOGGING_TRAFFIC"))

    def __init__(self) -> None:
        """Config init."""
        self.config_dir: Path = Path(os.environ.get("TRAPDOOR_CONFIG_DIR") or Path.cwd() / "configs")
        self.debug_level: str = os.environ.get("TRAPDOOR_DEBUG_LEVEL") or "INFO"
        self.debug_verbose: int = to_int(os.environ.get("TRAPDOOR_DEBUG_VERBOSE")) or 1


config = Config()
