#!/usr/bin/env python3
"""
Backend Module

RecordStore interface every DNS provider implements, the Backend container
(one provider account with its zones) and the provider registry used by the
configuration loader.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from .exceptions import ConfigError
from .models import RecordFields, RemoteRecord, Zone

################################################################################
# RECORD STORE INTERFACE
################################################################################

class RecordStore(ABC):
    """Provider capability: list, create and patch records in a zone.

    Implementations raise TransportError / ProviderProtocolError from list()
    and ActionFailure / TransportError from create() and patch().
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name for logging."""
        pass

    @abstractmethod
    def list(self, zone_id: str) -> List[RemoteRecord]:
        """List every record of a zone."""
        pass

    @abstractmethod
    def create(self, zone_id: str, fields: RecordFields) -> None:
        """Create a record."""
        pass

    @abstractmethod
    def patch(self, zone_id: str, record_id: str, fields: RecordFields) -> None:
        """Patch the given fields of an existing record."""
        pass

    def close(self) -> None:
        """Release connections held by the store."""
        pass

################################################################################
# BACKEND CONTAINER
################################################################################

@dataclass
class Backend:
    """One configured provider account and the zones it manages."""

    provider: str
    store: RecordStore
    zones: Tuple[Zone, ...] = field(default_factory=tuple)

################################################################################
# PROVIDER REGISTRY
################################################################################

# provider name -> factory(options, settings) returning a RecordStore
StoreFactory = Callable[[Dict[str, Any], Any], RecordStore]

_PROVIDERS: Dict[str, StoreFactory] = {}


def register_provider(name: str, factory: StoreFactory) -> None:
    """Register a RecordStore factory under a provider name (case-insensitive)."""
    _PROVIDERS[name.lower()] = factory


def available_providers() -> List[str]:
    _load_builtin_providers()
    return sorted(_PROVIDERS)


def create_store(provider: str, options: Dict[str, Any], settings: Any) -> RecordStore:
    """Build the RecordStore for a configured backend. Raises ConfigError for unknown providers."""
    _load_builtin_providers()
    factory = _PROVIDERS.get(provider.lower())
    if factory is None:
        raise ConfigError(f"unknown backend '{provider}' (supported: {', '.join(available_providers())})")
    return factory(options, settings)


def _load_builtin_providers() -> None:
    if "cloudflare" not in _PROVIDERS:
        from .api import cloudflare_from_options
        register_provider("cloudflare", cloudflare_from_options)
