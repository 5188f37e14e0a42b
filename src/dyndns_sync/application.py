#!/usr/bin/env python3
"""
Main Application Module

One application cycle: detect the public IPv4 address, then sync every
zone of every configured backend and report the outcome.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

import logging
from typing import List, Optional, Sequence, Tuple, Union

from .backends import Backend
from .colors import LOG_SYMBOLS
from .exceptions import DynDNSSyncError, NetworkError
from .logger import SUCCESS_LEVEL
from .models import CycleReport, Zone
from .network import PublicIPDetector
from .reconciler import Plan, plan
from .sync import sync_all

################################################################################
# APPLICATION CLASS - Core Business Logic
################################################################################

class Application:
    """Runs reconciliation cycles over all configured backends."""

    def __init__(self, backends: Sequence[Backend], detector: PublicIPDetector,
                 max_workers: int = 1, logger: Optional[logging.Logger] = None) -> None:
        """
        Initialize application.

        Args:
            backends: Configured providers with their record stores and zones
            detector: Public IPv4 provider
            max_workers: Zones synced concurrently per backend
            logger: Logger instance from logger.py
        """
        self.backends = list(backends)
        self.detector = detector
        self.max_workers = max_workers
        self.logger = logger if logger else logging.getLogger(__name__)
        self.last_ip: Optional[str] = None

    def run_cycle(self) -> CycleReport:
        """Execute one cycle (detect IP, sync all backends). Never raises for provider or IP failures."""
        self.logger.debug("Starting application cycle...")

        try:
            current_ip = self._detect_ip()
        except NetworkError as e:
            self.logger.error(f"{LOG_SYMBOLS['ERROR']} Public IP detection failed: {e}")
            return CycleReport(error=str(e))

        report = CycleReport(current_ip=current_ip)
        for backend in self.backends:
            self.logger.debug(f"Syncing {len(backend.zones)} zone(s) on {backend.store.name}")
            report.results.extend(
                sync_all(backend.zones, backend.store, current_ip, max_workers=self.max_workers, log=self.logger)
            )

        self._log_report(report)
        return report

    def plan_cycle(self) -> Tuple[Optional[str], List[Tuple[Backend, Zone, Union[Plan, str]]]]:
        """Detect IP and compute every zone's plan without writing anything.

        Returns:
            (current_ip, [(backend, zone, plan or listing error message)])
        """
        current_ip = self._detect_ip()
        plans: List[Tuple[Backend, Zone, Union[Plan, str]]] = []

        for backend in self.backends:
            for zone in backend.zones:
                try:
                    observed = backend.store.list(zone.id)
                except DynDNSSyncError as e:
                    plans.append((backend, zone, str(e)))
                    continue
                plans.append((backend, zone, plan(zone.desired, observed, current_ip)))

        return current_ip, plans

    ################################################################################
    # PUBLIC INTERFACE - Lifecycle Management
    ################################################################################

    def cleanup(self) -> None:
        """Close provider connections."""
        self.logger.debug("Cleaning up application resources...")
        for backend in self.backends:
            backend.store.close()

    ################################################################################
    # PRIVATE METHODS - Helpers
    ################################################################################

    def _detect_ip(self) -> str:
        self.logger.debug("Checking public IPv4 address...")
        current_ip = self.detector.current_ipv4()

        if current_ip != self.last_ip:
            self.logger.info(f"IPv4 address: {self.last_ip or 'unknown'} {LOG_SYMBOLS['ARROW']} {current_ip}")
            self.last_ip = current_ip
        else:
            self.logger.debug(f"IPv4 address unchanged: {current_ip}")
        return current_ip

    def _log_report(self, report: CycleReport) -> None:
        if report.ok:
            self.logger.log(SUCCESS_LEVEL, f"{LOG_SYMBOLS['SUCCESS']} Sync completed: {report.summary()}")
            return

        for result in report.results:
            for action, message in result.failures:
                target = action.describe() if action is not None else "zone"
                self.logger.debug(f"[{result.zone_id}] failed {target}: {message}")
        self.logger.warning(
            f"Sync completed with failures in zone(s) {', '.join(report.failed_zones)}: {report.summary()}"
        )
