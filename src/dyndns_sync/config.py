#!/usr/bin/env python3
"""
Configuration Manager

Loads the YAML/TOML/JSON configuration file, validates it and turns the
backend sections into zones and record stores.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

# Standard library imports
import json
import os
import tomllib
from typing import Any, Dict, List, Optional

# Third-party imports
import yaml

# Internal imports
from .backends import Backend, create_store
from .exceptions import ConfigError
from .models import DesiredRecord, RecordType, Zone
from .network import DEFAULT_IPV4_DETECTION_URL

################################################################################
# CONFIGURATION MANAGER CLASS - File Configuration
################################################################################

class ConfigManager:
    """Configuration handler: runtime settings plus backend/zone definitions."""

    def __init__(self, config_path: str) -> None:
        """Load and validate the configuration file. Raises ConfigError."""
        self.config_path = os.path.abspath(config_path)
        self.config_dir = os.path.dirname(self.config_path)
        self.config = self.load_config(self.config_path)

        self._load_daemon_config()
        self._load_debug_config()
        self._load_network_config()
        self._load_api_config()
        self._load_sync_config()
        self._load_backend_config()

    ################################################################################
    # PUBLIC INTERFACE - Configuration Loading
    ################################################################################

    def load_config(self, path: str) -> Dict[str, Any]:
        """Load configuration from a YAML, TOML or JSON file (chosen by extension)."""
        try:
            if path.endswith('.toml'):
                with open(path, "rb") as f:
                    config = tomllib.load(f)
            else:
                with open(path, "r", encoding="utf-8") as f:
                    if path.endswith('.json'):
                        config = json.load(f)
                    else:
                        config = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigError(f"Configuration file not found: {path}")
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax in {path}: {e}")
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON syntax in {path}: {e}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax in {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Error loading configuration from {path}: {e}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration in {path} must be a mapping")
        return config

    def create_backends(self) -> List[Backend]:
        """Build one Backend (record store + zones) per configured backend entry."""
        backends = []
        for index, (provider, options, zones) in enumerate(self.backend_definitions):
            try:
                store = create_store(provider, options, self)
            except ConfigError as e:
                raise ConfigError(f"backends[{index}]: {e}") from e
            backends.append(Backend(provider=provider, store=store, zones=zones))
        return backends

    @property
    def zones(self) -> List[Zone]:
        """All zones of all backends, in configuration order."""
        return [zone for _, _, zones in self.backend_definitions for zone in zones]

    ################################################################################
    # PRIVATE METHODS - Section Loading
    ################################################################################

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.config.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"'{name}' must be a mapping")
        return section

    def _load_daemon_config(self) -> None:
        """Load check_interval (seconds, 0 = run once)."""
        if "check_interval" not in self.config:
            raise ConfigError("missing required key 'check_interval'")
        self.check_interval = _as_int(self.config["check_interval"], "check_interval", minimum=0)

    def _load_debug_config(self) -> None:
        """Load log_level (top level or [debug] level)."""
        level = self.config.get("log_level") or self._section("debug").get("level")
        self.log_level = str(level).upper() if level else None

    def _load_network_config(self) -> None:
        """Load IP detection config from [network] section."""
        network = self._section("network")
        self.network_ipv4_detection_url = network.get("ipv4_detection_url", DEFAULT_IPV4_DETECTION_URL)
        self.network_timeout = _as_int(network.get("timeout", 10), "network.timeout", minimum=1)
        self.network_retry_attempts = _as_int(network.get("retry_attempts", 3), "network.retry_attempts", minimum=1)

    def _load_api_config(self) -> None:
        """Load provider HTTP config from [provider_api] section."""
        api = self._section("provider_api")
        self.provider_api_timeout = _as_int(api.get("timeout", 30), "provider_api.timeout", minimum=1)
        self.provider_api_retry_attempts = _as_int(api.get("retry_attempts", 3), "provider_api.retry_attempts", minimum=1)
        self.provider_api_base_url: Optional[str] = api.get("base_url") or None

        key_file = self.config.get("encryption_key_path")
        if key_file and not os.path.isabs(key_file):
            key_file = os.path.join(self.config_dir, key_file)
        self.encryption_key_path: Optional[str] = key_file or None

    def _load_sync_config(self) -> None:
        """Load zone concurrency from [sync] section."""
        self.sync_max_workers = _as_int(self._section("sync").get("max_workers", 1), "sync.max_workers", minimum=1)

    def _load_backend_config(self) -> None:
        """Validate backends and parse their zones; record stores are built later by create_backends()."""
        raw_backends = self.config.get("backends")
        if not isinstance(raw_backends, list) or not raw_backends:
            raise ConfigError("'backends' must be a non-empty list")

        self.backend_definitions = []
        for index, raw in enumerate(raw_backends):
            if not isinstance(raw, dict) or not raw.get("provider"):
                raise ConfigError(f"backends[{index}]: missing 'provider'")

            options = {key: value for key, value in raw.items() if key not in ("provider", "zones")}
            zones = tuple(
                parse_zone(zone, f"backends[{index}].zones[{zone_index}]")
                for zone_index, zone in enumerate(_as_list(raw.get("zones"), f"backends[{index}].zones"))
            )
            self.backend_definitions.append((str(raw["provider"]).lower(), options, zones))

################################################################################
# PARSING HELPERS - Zones and Records
################################################################################

def parse_zone(raw: Any, where: str = "zone") -> Zone:
    """Build a Zone from its config mapping."""
    if not isinstance(raw, dict) or not raw.get("id"):
        raise ConfigError(f"{where}: missing zone 'id'")
    records = tuple(
        parse_record(record, f"{where}.records[{index}]")
        for index, record in enumerate(_as_list(raw.get("records"), f"{where}.records"))
    )
    return Zone(id=str(raw["id"]), desired=records)


def parse_record(raw: Any, where: str = "record") -> DesiredRecord:
    """Build a DesiredRecord from its config mapping."""
    if not isinstance(raw, dict):
        raise ConfigError(f"{where}: record must be a mapping")

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError(f"{where}: missing record 'name'")

    if "type" not in raw:
        raise ConfigError(f"{where}: missing record 'type'")
    try:
        record_type = RecordType.parse(raw["type"])
    except ValueError:
        raise ConfigError(f"{where}: unsupported record type '{raw['type']}' (use A, AAAA or CNAME)")

    proxied = raw.get("proxied")
    if proxied is not None and not isinstance(proxied, bool):
        raise ConfigError(f"{where}: 'proxied' must be true or false")

    ttl = raw.get("ttl")
    if ttl is not None:
        ttl = _as_int(ttl, f"{where}.ttl", minimum=1)

    comment = raw.get("comment")
    if comment is not None:
        comment = str(comment)

    return DesiredRecord(
        name=name.strip(),
        type=record_type,
        content=str(raw.get("content") or "").strip(),
        proxied=proxied,
        ttl=ttl,
        comment=comment,
    )


def _as_list(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"{where} must be a list")
    return value


def _as_int(value: Any, where: str, minimum: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{where} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise ConfigError(f"{where} must be >= {minimum}, got {value}")
    return value
