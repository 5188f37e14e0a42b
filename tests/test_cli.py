"""End-to-end tests of the command-line entry point with a faked provider and IP source."""

import io
import signal

import pytest

from dyndns_sync import cli
from dyndns_sync.api import CloudflareClient
from dyndns_sync.encryption import EncryptionManager
from dyndns_sync.exceptions import ActionFailure, NetworkError, TerminatedError
from dyndns_sync.models import RecordType, RemoteRecord

CONFIG = """\
check_interval: {interval}
backends:
  - provider: cloudflare
    authentication:
      api_token: "tok"
    zones:
      - id: zone-a
        records:
          - name: home.example.com
            type: A
"""


@pytest.fixture
def config_file(tmp_path):
    def make(interval: int = 0) -> str:
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG.format(interval=interval))
        return str(path)
    return make


@pytest.fixture
def provider(monkeypatch):
    """Replace Cloudflare I/O and IP detection; returns the list of writes."""
    writes = []
    remote = [RemoteRecord(id="r1", name="home.example.com", type=RecordType.A, content="203.0.113.1", ttl=1, proxied=False)]

    monkeypatch.setattr(CloudflareClient, "list", lambda self, zone_id: list(remote))
    monkeypatch.setattr(CloudflareClient, "create", lambda self, zone_id, fields: writes.append(("create", zone_id, fields)))
    monkeypatch.setattr(CloudflareClient, "patch", lambda self, zone_id, record_id, fields: writes.append(("patch", zone_id, record_id, fields)))
    monkeypatch.setattr(cli.PublicIPDetector, "current_ipv4", lambda self: "203.0.113.9")
    return writes


# =============================================================================
# Argument Parsing
# =============================================================================


def test_default_command_is_run() -> None:
    args = cli.parse_arguments(["-c", "config.yaml", "--log-level", "debug"])

    assert args.command == "run"
    assert args.log_level == "DEBUG"


def test_run_requires_config() -> None:
    with pytest.raises(SystemExit):
        cli.parse_arguments(["plan"])


def test_format_table_aligns_columns() -> None:
    table = cli.format_table(["Zone", "Name"], [["zone-a", "home"], ["z", "www.example.com"]])

    lines = table.splitlines()
    assert lines[0] == "Zone    Name           "
    assert lines[1] == "------  ---------------"
    assert lines[3].startswith("z       www.example.com")


# =============================================================================
# Commands
# =============================================================================


def test_run_once_patches_stale_record(config_file, provider) -> None:
    assert cli.main(["-c", config_file(), "run"]) == 0

    [(kind, zone_id, record_id, fields)] = provider
    assert (kind, zone_id, record_id, fields.content) == ("patch", "zone-a", "r1", "203.0.113.9")


def test_once_flag_overrides_interval(config_file, provider) -> None:
    assert cli.main(["-c", config_file(interval=300), "--once"]) == 0
    assert len(provider) == 1


def test_failed_action_gives_exit_code_1(config_file, provider, monkeypatch) -> None:
    def reject(self, zone_id, record_id, fields):
        raise ActionFailure("rejected")

    monkeypatch.setattr(CloudflareClient, "patch", reject)

    assert cli.main(["-c", config_file()]) == 1


def test_ip_failure_gives_exit_code_1(config_file, provider, monkeypatch) -> None:
    def unreachable(self):
        raise NetworkError("offline")

    monkeypatch.setattr(cli.PublicIPDetector, "current_ipv4", unreachable)

    assert cli.main(["-c", config_file()]) == 1
    assert provider == []


def test_plan_prints_actions_without_writing(config_file, provider, capsys) -> None:
    assert cli.main(["-c", config_file(), "plan"]) == 0

    out = capsys.readouterr().out
    assert "patch r1" in out
    assert "home.example.com" in out
    assert provider == []


def test_config_error_gives_exit_code_1(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("check_interval: 0\nbackends: []\n")

    assert cli.main(["-c", str(path)]) == 1


def test_signal_termination_exit_code(config_file, provider, monkeypatch) -> None:
    def terminated(self):
        raise TerminatedError("received signal SIGTERM", signal.SIGTERM)

    monkeypatch.setattr(cli, "install_signal_handlers", lambda token, logger: {})
    monkeypatch.setattr(cli.DaemonManager, "run_forever", terminated)

    assert cli.main(["-c", config_file(interval=60)]) == 128 + signal.SIGTERM


def test_encrypt_token_prints_ciphertext(tmp_path, monkeypatch, capsys) -> None:
    key_file = str(tmp_path / ".key")
    monkeypatch.setattr("sys.stdin", io.StringIO("cf-token\n"))

    assert cli.main(["--key-file", key_file, "encrypt-token"]) == 0

    encrypted = capsys.readouterr().out.strip().splitlines()[-1]
    assert EncryptionManager(key_file, create=False).decrypt(encrypted) == "cf-token"


def test_encrypt_token_rejects_empty_input(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("\n"))

    assert cli.main(["--key-file", str(tmp_path / ".key"), "encrypt-token"]) == 1
