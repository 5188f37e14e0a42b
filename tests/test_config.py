"""Tests for configuration loading, validation and backend construction."""

import json
import textwrap

import pytest

from dyndns_sync.api import CloudflareClient
from dyndns_sync.config import ConfigManager, parse_record, parse_zone
from dyndns_sync.exceptions import ConfigError
from dyndns_sync.models import DesiredRecord, RecordType

YAML_CONFIG = """\
check_interval: 300
log_level: debug
network:
  timeout: 5
sync:
  max_workers: 4
backends:
  - provider: cloudflare
    authentication:
      api_token: "tok-123"
    zones:
      - id: "zone-a"
        records:
          - name: home.example.com
            type: A
          - name: vpn.example.com
            type: a
            proxied: false
            ttl: 120
            comment: "wireguard"
      - id: "zone-b"
        records:
          - name: www.example.com
            type: CNAME
            content: home.example.com
            proxied: true
"""


def write(tmp_path, name: str, content: str) -> str:
    path = tmp_path / name
    path.write_text(textwrap.dedent(content))
    return str(path)


# =============================================================================
# File Formats
# =============================================================================


def test_yaml_config_is_fully_parsed(tmp_path) -> None:
    config = ConfigManager(write(tmp_path, "config.yaml", YAML_CONFIG))

    assert config.check_interval == 300
    assert config.log_level == "DEBUG"
    assert config.network_timeout == 5
    assert config.network_ipv4_detection_url == "https://1.1.1.1/cdn-cgi/trace"
    assert config.sync_max_workers == 4
    assert [z.id for z in config.zones] == ["zone-a", "zone-b"]

    home, vpn = config.zones[0].desired
    assert home == DesiredRecord(name="home.example.com", type=RecordType.A)
    assert vpn == DesiredRecord(name="vpn.example.com", type=RecordType.A, proxied=False, ttl=120, comment="wireguard")
    [www] = config.zones[1].desired
    assert (www.type, www.content, www.proxied) == (RecordType.CNAME, "home.example.com", True)


def test_toml_config(tmp_path) -> None:
    path = write(tmp_path, "config.toml", """\
        check_interval = 0

        [[backends]]
        provider = "Cloudflare"
        authentication = { api_token = "tok" }

        [[backends.zones]]
        id = "zone-a"
        records = [{ name = "home", type = "A" }]
        """)

    config = ConfigManager(path)

    assert config.check_interval == 0
    [(provider, options, zones)] = config.backend_definitions
    assert provider == "cloudflare"
    assert options == {"authentication": {"api_token": "tok"}}
    assert zones[0].desired[0].name == "home"


def test_json_config(tmp_path) -> None:
    data = {"check_interval": 60, "backends": [{"provider": "cloudflare", "authentication": {"api_token": "t"}, "zones": []}]}
    config = ConfigManager(write(tmp_path, "config.json", json.dumps(data)))

    assert config.check_interval == 60
    assert config.zones == []


def test_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        ConfigManager(str(tmp_path / "absent.yaml"))


def test_invalid_yaml(tmp_path) -> None:
    with pytest.raises(ConfigError, match="Invalid YAML"):
        ConfigManager(write(tmp_path, "config.yaml", "check_interval: [1\n"))


# =============================================================================
# Validation
# =============================================================================


@pytest.mark.parametrize("content, message", [
    ("backends: []\n", "check_interval"),
    ("check_interval: -1\nbackends: [{provider: cloudflare}]\n", ">= 0"),
    ("check_interval: true\nbackends: [{provider: cloudflare}]\n", "must be an integer"),
    ("check_interval: 10\n", "non-empty list"),
    ("check_interval: 10\nbackends: [{zones: []}]\n", "missing 'provider'"),
    ("check_interval: 10\nbackends: [{provider: cloudflare, zones: [{records: []}]}]\n", "missing zone 'id'"),
    ("check_interval: 10\nsync: {max_workers: 0}\nbackends: [{provider: cloudflare}]\n", "sync.max_workers"),
])
def test_invalid_config(tmp_path, content: str, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        ConfigManager(write(tmp_path, "config.yaml", content))


def test_relative_key_path_resolves_against_config_dir(tmp_path) -> None:
    content = "check_interval: 0\nencryption_key_path: keys/.key\nbackends: [{provider: cloudflare}]\n"
    config = ConfigManager(write(tmp_path, "config.yaml", content))

    assert config.encryption_key_path == str(tmp_path / "keys" / ".key")


@pytest.mark.parametrize("raw, message", [
    ({"type": "A"}, "missing record 'name'"),
    ({"name": "home"}, "missing record 'type'"),
    ({"name": "home", "type": "MX"}, "unsupported record type"),
    ({"name": "home", "type": "A", "proxied": "yes"}, "'proxied'"),
    ({"name": "home", "type": "A", "ttl": 0}, ">= 1"),
    ("home", "must be a mapping"),
])
def test_invalid_record(raw, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        parse_record(raw)


def test_record_content_is_optional() -> None:
    record = parse_record({"name": " home ", "type": "aaaa", "content": None})

    assert record == DesiredRecord(name="home", type=RecordType.AAAA, content="")


def test_zone_without_records() -> None:
    assert parse_zone({"id": 42}).desired == ()


# =============================================================================
# Backend Construction
# =============================================================================


def test_create_backends_builds_cloudflare_store(tmp_path) -> None:
    config = ConfigManager(write(tmp_path, "config.yaml", YAML_CONFIG))

    [backend] = config.create_backends()

    assert backend.provider == "cloudflare"
    assert isinstance(backend.store, CloudflareClient)
    assert [z.id for z in backend.zones] == ["zone-a", "zone-b"]
    backend.store.close()


def test_unknown_provider(tmp_path) -> None:
    config = ConfigManager(write(tmp_path, "config.yaml", "check_interval: 0\nbackends: [{provider: route53}]\n"))

    with pytest.raises(ConfigError, match=r"backends\[0\]: unknown backend 'route53'"):
        config.create_backends()


def test_api_key_authentication_is_rejected(tmp_path) -> None:
    content = """\
        check_interval: 0
        backends:
          - provider: cloudflare
            authentication: {api_key: k, account_email: me@example.com}
        """
    config = ConfigManager(write(tmp_path, "config.yaml", content))

    with pytest.raises(ConfigError, match="not supported"):
        config.create_backends()
