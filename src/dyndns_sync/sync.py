#!/usr/bin/env python3
"""
Sync Module

Applies reconciler actions to a record store and runs the
list -> reconcile -> apply pass for every zone.

Both steps are best effort: a failed action does not stop the following
ones, a zone that cannot be listed does not stop the other zones, and
nothing already applied is rolled back.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from .backends import RecordStore
from .colors import LOG_SYMBOLS
from .exceptions import DynDNSSyncError
from .models import Action, CreateAction, SyncResult, Zone
from .reconciler import plan

logger = logging.getLogger(__name__)

################################################################################
# ACTION EXECUTOR
################################################################################

def apply_actions(zone_id: str, actions: Sequence[Action], store: RecordStore,
                  log: Optional[logging.Logger] = None) -> SyncResult:
    """Execute actions in order, recording each failure and moving on."""
    log = log or logger
    result = SyncResult(zone_id=zone_id)

    for action in actions:
        result.actions_attempted += 1
        try:
            if isinstance(action, CreateAction):
                store.create(zone_id, action.payload)
            else:
                store.patch(zone_id, action.target_id, action.payload)
        except DynDNSSyncError as e:
            result.failures.append((action, str(e)))
            log.error(f"{LOG_SYMBOLS['ERROR']} [{zone_id}] {action.describe()} failed: {e}")
            continue

        log.info(f"[{zone_id}] {action.describe()}")

    return result

################################################################################
# SYNC ORCHESTRATOR
################################################################################

def sync_zone(zone: Zone, store: RecordStore, current_ip: str,
              log: Optional[logging.Logger] = None) -> SyncResult:
    """List, reconcile and apply one zone. Listing errors become a single failure entry."""
    log = log or logger

    try:
        observed = store.list(zone.id)
    except DynDNSSyncError as e:
        log.error(f"{LOG_SYMBOLS['ERROR']} [{zone.id}] cannot list records from {store.name}: {e}")
        return SyncResult(zone_id=zone.id, failures=[(None, f"listing failed: {e}")])

    zone_plan = plan(zone.desired, observed, current_ip)
    for warning in zone_plan.warnings:
        log.warning(f"[{zone.id}] {warning}")

    if not zone_plan.actions:
        log.debug(f"[{zone.id}] {len(zone.desired)} record(s) up-to-date")

    result = apply_actions(zone.id, zone_plan.actions, store, log)
    result.warnings.extend(zone_plan.warnings)
    return result


def sync_all(zones: Sequence[Zone], store: RecordStore, current_ip: str,
             max_workers: int = 1, log: Optional[logging.Logger] = None) -> List[SyncResult]:
    """Sync every zone; results come back in zone order.

    With max_workers > 1 zones run concurrently; zones share nothing but the store.
    """
    if max_workers <= 1 or len(zones) <= 1:
        return [sync_zone(zone, store, current_ip, log) for zone in zones]

    with ThreadPoolExecutor(max_workers=min(max_workers, len(zones)), thread_name_prefix="zone-sync") as pool:
        return list(pool.map(lambda zone: sync_zone(zone, store, current_ip, log), zones))
