#!/usr/bin/env python3
"""
Command-Line Interface

Argument parsing, logger/config setup and exit codes for the `run`,
`plan` and `encrypt-token` commands.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

# Standard library imports
import argparse
import getpass
import logging
import sys
from typing import List, Optional, Sequence

# Local imports
from . import __version__, __software_name__
from .application import Application
from .colors import Colors, LOG_SYMBOLS
from .config import ConfigManager
from .daemon import CancellationToken, DaemonManager, install_signal_handlers
from .encryption import EncryptionManager
from .exceptions import ConfigError, EncryptionError, NetworkError, TerminatedError
from .logger import LoggerManager
from .models import CreateAction, type_name
from .network import PublicIPDetector
from .reconciler import Plan

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

################################################################################
# ARGUMENT PARSING - Command-Line Interface
################################################################################

def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments with subcommands (run, plan, encrypt-token)."""
    parser = argparse.ArgumentParser(
        prog='dyndns-sync',
        description='DYNDNS-SYNC - Declarative Dynamic DNS Reconciler',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -c config.yaml                 # Sync (once or every check_interval seconds)
  %(prog)s -c config.yaml --once          # Single sync regardless of check_interval
  %(prog)s -c config.yaml plan            # Show pending changes without applying them
  %(prog)s --key-file .key encrypt-token  # Encrypt an API token read from stdin
        """
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-c', '--config-file', type=str, default=None, help='Path to configuration file (YAML, TOML or JSON)')
    parser.add_argument('--log-level', type=str.upper, default=None, choices=LOG_LEVELS, help='Log level (overrides config log_level)')
    parser.add_argument('--once', action='store_true', help='Run a single sync even when check_interval > 0')
    parser.add_argument('--daemon-mode', '-d', action='store_true', help='No console output (systemd journal only)')
    parser.add_argument('--key-file', type=str, default=None, help='Encryption key file for encrypt-token (default: config encryption_key_path)')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')
    subparsers.add_parser('run', help='Apply changes (default)')
    subparsers.add_parser('plan', help='Show the actions a sync would apply, without applying them')
    subparsers.add_parser('encrypt-token', help='Encrypt an API token from stdin for api_token_encrypted')

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = 'run'
    if args.command in ('run', 'plan') and not args.config_file:
        parser.error(f"the '{args.command}' command requires --config-file")
    if args.command == 'encrypt-token' and not (args.key_file or args.config_file):
        parser.error("the 'encrypt-token' command requires --key-file or --config-file")
    return args

################################################################################
# CLI COMMAND HANDLERS - Subcommand Processing
################################################################################

def handle_run(app: Application, check_interval: int, logger: logging.Logger) -> int:
    """Run once or continuously. Returns: Exit code."""
    token = CancellationToken()
    if check_interval > 0:
        install_signal_handlers(token, logger)

    daemon = DaemonManager(app, check_interval, token=token, logger=logger)
    try:
        report = daemon.run()
    except TerminatedError as e:
        logger.error(f"{__software_name__} stopped: {e.reason}")
        return 128 + e.signum if e.signum else 1

    if report.ok:
        return 0
    logger.error(f"Single update failed: {report.summary()}")
    return 1


def handle_plan(app: Application, logger: logging.Logger) -> int:
    """Print pending actions per zone without applying them. Returns: Exit code."""
    try:
        current_ip, plans = app.plan_cycle()
    except NetworkError as e:
        logger.error(f"Public IP detection failed: {e}")
        return 1

    print(f"\n{Colors.BOLD}{Colors.CYAN}═══ Plan for IPv4 {current_ip} ═══{Colors.NC}\n")

    exit_code = 0
    rows: List[List[str]] = []
    for backend, zone, zone_plan in plans:
        if not isinstance(zone_plan, Plan):
            print(f"{Colors.RED}{LOG_SYMBOLS['ERROR']} [{zone.id}] cannot list records: {zone_plan}{Colors.NC}")
            exit_code = 1
            continue
        for warning in zone_plan.warnings:
            print(f"{Colors.YELLOW}{LOG_SYMBOLS['WARNING']} [{zone.id}] {warning}{Colors.NC}")
        for action in zone_plan.actions:
            fields = action.payload
            kind = 'create' if isinstance(action, CreateAction) else f"patch {action.target_id}"
            changed = ", ".join(sorted(set(fields.to_payload()) - {'name', 'type', 'content'}))
            rows.append([zone.id, kind, fields.name, type_name(fields.type), fields.content, changed or '-'])

    if rows:
        print(format_table(['Zone', 'Action', 'Name', 'Type', 'Content', 'Also sets'], rows))
    else:
        print(f"{Colors.GREEN}{LOG_SYMBOLS['SUCCESS']} Nothing to do, all records up-to-date{Colors.NC}")
    return exit_code


def handle_encrypt_token(key_file: str, logger: logging.Logger) -> int:
    """Read a token from stdin and print its encrypted form. Returns: Exit code."""
    if sys.stdin.isatty():
        token = getpass.getpass("API token: ").strip()
    else:
        token = sys.stdin.readline().strip()

    if not token:
        logger.error("No token given")
        return 1

    try:
        manager = EncryptionManager(key_file, create=True, logger=logger)
        print(manager.encrypt(token))
    except EncryptionError as e:
        logger.error(f"Encryption failed: {e}")
        return 1
    return 0

################################################################################
# DISPLAY HELPERS
################################################################################

def format_table(headers: list, rows: list, widths: Optional[list] = None) -> str:
    """Format data as simple ASCII table."""
    if not widths:
        widths = [len(str(h)) for h in headers]
        for row in rows:
            for idx, cell in enumerate(row):
                widths[idx] = max(widths[idx], len(str(cell)))

    header_line = "  ".join(f"{str(h):<{w}}" for h, w in zip(headers, widths))
    separator = "  ".join("-" * w for w in widths)
    row_lines = ["  ".join(f"{str(c):<{w}}" for c, w in zip(row, widths)) for row in rows]

    return "\n".join([header_line, separator] + row_lines)

################################################################################
# MAIN APPLICATION - Entry Point and Initialization
################################################################################

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point. Returns: Exit code (0=success)."""
    args = parse_arguments(argv)

    logger = LoggerManager.get_logger(
        level=LoggerManager.resolve_level(args.log_level),
        daemon_mode=args.daemon_mode,
    )

    config = None
    if args.config_file:
        try:
            config = ConfigManager(args.config_file)
        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            return 1
        if not args.log_level and config.log_level:
            LoggerManager.set_level(LoggerManager.resolve_level(config.log_level))

    if args.command == 'encrypt-token':
        key_file = args.key_file or (config.encryption_key_path if config else None)
        if not key_file:
            logger.error("No key file: pass --key-file or set encryption_key_path in the config")
            return 1
        return handle_encrypt_token(key_file, logger)

    try:
        backends = config.create_backends()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    check_interval = 0 if args.once else config.check_interval
    mode = "plan" if args.command == 'plan' else ("once" if check_interval == 0 else "daemon")
    logger.info(f"{__software_name__} {__version__} starting... (mode: {mode})")
    logger.debug(f"Backends: {', '.join(b.store.name for b in backends)}; zones: {len(config.zones)}")

    detector = PublicIPDetector(
        detection_url=config.network_ipv4_detection_url,
        timeout=config.network_timeout,
        retry_attempts=config.network_retry_attempts,
        logger=logger,
    )
    app = Application(backends, detector, max_workers=config.sync_max_workers, logger=logger)

    try:
        if args.command == 'plan':
            return handle_plan(app, logger)
        return handle_run(app, check_interval, logger)
    finally:
        app.cleanup()

################################################################################
# ENTRY POINT - Script Execution Handler
################################################################################

def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        LoggerManager.get_logger().warning("Application interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    run()
