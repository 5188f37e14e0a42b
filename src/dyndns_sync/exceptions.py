"""
Custom Exception Classes for DYNDNS-SYNC.

Exception Hierarchy:
    DynDNSSyncError (Base)
    ├─ ConfigError            - Configuration issues (file parsing, missing keys, bad values)
    ├─ EncryptionError        - Token encryption/decryption failures
    ├─ NetworkError           - Public IP detection failed
    ├─ TransportError         - Network/HTTP failure talking to a provider
    ├─ ProviderProtocolError  - Unexpected or malformed provider response
    ├─ ActionFailure          - Single create/patch rejected by the provider
    └─ TerminatedError        - Continuous mode stopped by a cancellation request
"""

from typing import Optional


class DynDNSSyncError(Exception):
    """Base exception for all DYNDNS-SYNC errors."""
    pass


class ConfigError(DynDNSSyncError):
    """Configuration error (parsing, missing keys, invalid values, unknown provider)."""
    pass


class EncryptionError(DynDNSSyncError):
    """Encryption/Decryption operation failed."""
    pass


class NetworkError(DynDNSSyncError):
    """Public IP detection failed."""
    pass


class TransportError(DynDNSSyncError):
    """Provider could not be reached (connection error, timeout, HTTP error without body)."""
    pass


class ProviderProtocolError(DynDNSSyncError):
    """Provider answered with an unexpected shape (missing 'result', missing record fields)."""
    pass


class ActionFailure(DynDNSSyncError):
    """Provider rejected a single create/patch request."""
    pass


class TerminatedError(DynDNSSyncError):
    """Continuous mode was stopped by a cancellation request (usually a signal)."""

    def __init__(self, reason: str, signum: Optional[int] = None) -> None:
        super().__init__(f"terminated: {reason}")
        self.reason = reason
        self.signum = signum
