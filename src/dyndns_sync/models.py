#!/usr/bin/env python3
"""
Data Model Module

Value objects shared by the reconciler, the record stores and the sync
orchestration: desired/remote records, zones, actions and per-zone results.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .colors import LOG_SYMBOLS

################################################################################
# RECORD TYPES
################################################################################

class RecordType(str, Enum):
    """DNS record types the reconciler manages."""

    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"

    @classmethod
    def parse(cls, value: Any) -> "RecordType":
        """Parse a record type case-insensitively. Raises ValueError for unknown types."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())

    def __str__(self) -> str:
        return self.value


def type_name(value: Union[RecordType, str]) -> str:
    """Plain string form of a record type (remote listings may carry types we do not manage)."""
    return value.value if isinstance(value, RecordType) else str(value)

################################################################################
# RECORDS
################################################################################

@dataclass(frozen=True)
class DesiredRecord:
    """Configuration-declared target state of one DNS record.

    An empty ``content`` means "use the current public IP". ``ttl`` of 1 is the
    provider's automatic TTL.
    """

    name: str
    type: RecordType
    content: str = ""
    proxied: Optional[bool] = None
    ttl: Optional[int] = None
    comment: Optional[str] = None

    def effective_content(self, current_ip: str) -> str:
        return self.content if self.content else current_ip


@dataclass(frozen=True)
class RemoteRecord:
    """Record as reported by the provider. Never cached across cycles."""

    id: str
    name: str
    type: Union[RecordType, str]
    content: str
    proxied: Optional[bool] = None
    ttl: Optional[int] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class Zone:
    id: str
    desired: Tuple[DesiredRecord, ...] = ()

################################################################################
# ACTIONS
################################################################################

@dataclass(frozen=True)
class RecordFields:
    """Body of a create or patch request. Unset optional fields are not sent."""

    name: str
    type: Union[RecordType, str]
    content: str
    ttl: Optional[int] = None
    proxied: Optional[bool] = None
    comment: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": type_name(self.type),
            "name": self.name,
            "content": self.content,
        }
        if self.proxied is not None:
            payload["proxied"] = self.proxied
        if self.ttl is not None:
            payload["ttl"] = self.ttl
        if self.comment is not None:
            payload["comment"] = self.comment
        return payload


@dataclass(frozen=True)
class CreateAction:
    payload: RecordFields

    def describe(self) -> str:
        fields = self.payload
        return (
            f"{LOG_SYMBOLS['CREATE']} create {fields.name} ({type_name(fields.type)}) "
            f"{LOG_SYMBOLS['ARROW']} {fields.content}"
        )


@dataclass(frozen=True)
class PatchAction:
    target_id: str
    payload: RecordFields
    # Observed record the patch was computed against; reporting only
    previous: Optional[RemoteRecord] = field(default=None, compare=False, repr=False)

    def describe(self) -> str:
        fields = self.payload
        changes = []
        old = self.previous
        if old is not None:
            if type_name(old.type) != type_name(fields.type):
                changes.append(f"type {type_name(old.type)} {LOG_SYMBOLS['ARROW']} {type_name(fields.type)}")
            if old.content != fields.content:
                changes.append(f"content {old.content} {LOG_SYMBOLS['ARROW']} {fields.content}")
            for attr in ("ttl", "proxied", "comment"):
                new_value = getattr(fields, attr)
                if new_value is not None:
                    changes.append(f"{attr} {getattr(old, attr)!r} {LOG_SYMBOLS['ARROW']} {new_value!r}")
        detail = ", ".join(changes) if changes else str(fields.to_payload())
        return f"{LOG_SYMBOLS['PATCH']} patch {fields.name} [{self.target_id}]: {detail}"


Action = Union[CreateAction, PatchAction]

################################################################################
# RESULTS
################################################################################

@dataclass
class SyncResult:
    """Outcome of one zone's sync pass.

    A zone whose listing failed carries exactly one failure entry with no action.
    """

    zone_id: str
    actions_attempted: int = 0
    failures: List[Tuple[Optional[Action], str]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def listing_failed(self) -> bool:
        return len(self.failures) == 1 and self.failures[0][0] is None

    @property
    def actions_succeeded(self) -> int:
        return self.actions_attempted - sum(1 for action, _ in self.failures if action is not None)


@dataclass
class CycleReport:
    """Everything one cycle (IP discovery + sync of all backends) produced."""

    current_ip: Optional[str] = None
    results: List[SyncResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and all(result.ok for result in self.results)

    @property
    def failed_zones(self) -> List[str]:
        return [result.zone_id for result in self.results if not result.ok]

    def summary(self) -> str:
        if self.error:
            return f"cycle aborted: {self.error}"
        attempted = sum(result.actions_attempted for result in self.results)
        failed = sum(len(result.failures) for result in self.results)
        return (
            f"{len(self.results)} zone(s), {attempted} action(s) attempted, "
            f"{failed} failure(s), IPv4 {self.current_ip}"
        )
