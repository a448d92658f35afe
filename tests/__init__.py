"""Tests module."""

HOST = "127.0.0.1"
CONFIGURED_HOST = "api.example.invalid"

JSON_CONFIG = "trapdoor_host_config.json"
TEXT_CONFIG = "trapdoor_host_config.txt"
