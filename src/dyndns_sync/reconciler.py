#!/usr/bin/env python3
"""
Reconciler Module

Computes the create/patch actions that move a zone's observed records
toward its desired records. Pure: no I/O, inputs are never mutated.

Matching is by record name only. Every observed record sharing a desired
record's name is diffed on its own, so duplicate-named records at the
provider each get their own patch.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .models import (
    Action,
    CreateAction,
    DesiredRecord,
    PatchAction,
    RecordFields,
    RemoteRecord,
    type_name,
)

# ttl of 1 means "automatic" at the provider
DEFAULT_TTL = 1
DEFAULT_PROXIED = False

################################################################################
# PLAN
################################################################################

@dataclass
class Plan:
    """Actions for one zone plus anomalies spotted in the observed data."""

    actions: List[Action] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def reconcile(desired: Sequence[DesiredRecord], observed: Sequence[RemoteRecord], current_ip: str) -> List[Action]:
    """Return the ordered action list for one zone."""
    return plan(desired, observed, current_ip).actions


def plan(desired: Sequence[DesiredRecord], observed: Sequence[RemoteRecord], current_ip: str) -> Plan:
    """Diff desired against observed records.

    Args:
        desired: Records from configuration, in configuration order
        observed: Records listed from the provider, in listing order
        current_ip: Public IPv4 used for desired records with empty content

    Returns:
        Plan with actions in desired-record order and warnings for remote
        records missing ttl/proxied
    """
    result = Plan()

    for wanted in desired:
        matched = False

        for remote in observed:
            if remote.name != wanted.name:
                continue
            matched = True

            action = _diff(wanted, remote, current_ip, result.warnings)
            if action is not None:
                result.actions.append(action)

        if not matched:
            result.actions.append(_create(wanted, current_ip))

    return result

################################################################################
# PRIVATE HELPERS
################################################################################

def _create(wanted: DesiredRecord, current_ip: str) -> CreateAction:
    return CreateAction(RecordFields(
        name=wanted.name,
        type=wanted.type,
        content=wanted.effective_content(current_ip),
        ttl=wanted.ttl if wanted.ttl is not None else DEFAULT_TTL,
        proxied=wanted.proxied if wanted.proxied is not None else DEFAULT_PROXIED,
        comment=wanted.comment,
    ))


def _diff(wanted: DesiredRecord, remote: RemoteRecord, current_ip: str, warnings: List[str]):
    """Patch for one matched pair, or None when nothing drifted."""
    content = wanted.effective_content(current_ip)
    need_update = type_name(wanted.type) != type_name(remote.type) or content != remote.content
    changed: Dict[str, Any] = {}

    # Absent remote ttl/proxied is unknown state: report it, never diff it
    if remote.ttl is None:
        warnings.append(f"remote record {remote.name} ({remote.id}) has no ttl")
    elif wanted.ttl is not None and wanted.ttl != remote.ttl:
        changed["ttl"] = wanted.ttl

    if remote.proxied is None:
        warnings.append(f"remote record {remote.name} ({remote.id}) has no proxied flag")
    elif wanted.proxied is not None and wanted.proxied != remote.proxied:
        changed["proxied"] = wanted.proxied

    if wanted.comment is not None and remote.comment is not None and wanted.comment != remote.comment:
        changed["comment"] = wanted.comment

    if not need_update and not changed:
        return None

    payload = RecordFields(name=wanted.name, type=wanted.type, content=content, **changed)
    return PatchAction(target_id=remote.id, payload=payload, previous=remote)
