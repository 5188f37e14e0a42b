#!/usr/bin/env python3
"""
DYNDNS-SYNC

Declarative Dynamic DNS Reconciler

Created: 2026-10-19
License: MIT
"""

# Package metadata
__version__ = "0.3.0"
__description__ = "Declarative Dynamic DNS Reconciler"
__software_name__ = "DYNDNS-SYNC"
__syslog_identifier__ = "dyndns-sync"  # Used for systemd journal logging

# Package imports
from .colors import Colors, LOG_COLORS, LOG_SYMBOLS
from .exceptions import (
    DynDNSSyncError,
    ConfigError,
    EncryptionError,
    NetworkError,
    TransportError,
    ProviderProtocolError,
    ActionFailure,
    TerminatedError,
)
from .models import (
    RecordType,
    DesiredRecord,
    RemoteRecord,
    Zone,
    RecordFields,
    CreateAction,
    PatchAction,
    SyncResult,
    CycleReport,
)
from .reconciler import plan, reconcile
from .sync import apply_actions, sync_all
from .backends import RecordStore, Backend
from .config import ConfigManager
from .logger import LoggerManager
from .network import PublicIPDetector
from .api import HTTPClient, CloudflareClient
from .application import Application
from .daemon import CancellationToken, DaemonManager

__all__ = [
    'Colors',
    'LOG_COLORS',
    'LOG_SYMBOLS',
    'DynDNSSyncError',
    'ConfigError',
    'EncryptionError',
    'NetworkError',
    'TransportError',
    'ProviderProtocolError',
    'ActionFailure',
    'TerminatedError',
    'RecordType',
    'DesiredRecord',
    'RemoteRecord',
    'Zone',
    'RecordFields',
    'CreateAction',
    'PatchAction',
    'SyncResult',
    'CycleReport',
    'plan',
    'reconcile',
    'apply_actions',
    'sync_all',
    'RecordStore',
    'Backend',
    'ConfigManager',
    'LoggerManager',
    'PublicIPDetector',
    'HTTPClient',
    'CloudflareClient',
    'Application',
    'CancellationToken',
    'DaemonManager',
]
