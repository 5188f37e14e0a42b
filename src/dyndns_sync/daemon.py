#!/usr/bin/env python3
"""
Daemon Management Module

Runs application cycles once or on a fixed interval, with a cancellation
token that signal handlers (or tests) use to stop the loop between cycles.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

# Standard library imports
import logging
import signal
import threading
import time
from typing import Any, Callable, Dict, NoReturn, Optional

from .exceptions import TerminatedError
from .models import CycleReport

################################################################################
# CANCELLATION TOKEN - Stop Request Between Cycles
################################################################################

class CancellationToken:
    """One-shot stop request. The first cancel() wins and keeps its reason."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self.reason: Optional[str] = None
        self.signum: Optional[int] = None

    def cancel(self, reason: str = "cancelled", signum: Optional[int] = None) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self.reason = reason
            self.signum = signum
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or timeout. Returns True when cancelled."""
        return self._event.wait(timeout=timeout)


def install_signal_handlers(token: CancellationToken, logger: Optional[logging.Logger] = None) -> Dict[int, Any]:
    """Route SIGTERM/SIGINT (and SIGHUP where it exists) to the token. Returns the previous handlers."""
    logger = logger if logger else logging.getLogger(__name__)

    def signal_handler(signum: int, frame: Any) -> None:
        name = signal.Signals(signum).name
        logger.info(f"Received {name}, stopping after the current cycle...")
        token.cancel(f"received signal {name}", signum)

    signums = [signal.SIGTERM, signal.SIGINT]
    if hasattr(signal, 'SIGHUP'):
        signums.append(signal.SIGHUP)

    previous = {}
    for signum in signums:
        previous[signum] = signal.signal(signum, signal_handler)
    return previous

################################################################################
# DAEMON MANAGER CLASS - Scheduling
################################################################################

class DaemonManager:
    """Scheduler: check_interval 0 runs one cycle, anything else loops until cancelled."""

    def __init__(self, application: Any, check_interval: int, token: Optional[CancellationToken] = None,
                 logger: Optional[logging.Logger] = None, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize daemon manager."""
        self.application = application
        self.check_interval = check_interval
        self.token = token if token else CancellationToken()
        self.logger = logger if logger else logging.getLogger(__name__)
        self._clock = clock

        self.cycles = 0
        self.last_report: Optional[CycleReport] = None

    ################################################################################
    # PUBLIC INTERFACE - Run Modes
    ################################################################################

    def run(self) -> CycleReport:
        """Run in the mode selected by check_interval.

        Returns the report in run-once mode; continuous mode only ends by
        raising TerminatedError.
        """
        if self.check_interval == 0:
            return self.run_once()
        return self.run_forever()

    def run_once(self) -> CycleReport:
        """Run a single cycle and hand its report to the caller."""
        self.logger.debug("Starting single-run mode...")
        report = self.application.run_cycle()
        self.cycles += 1
        self.last_report = report
        return report

    def run_forever(self) -> NoReturn:
        """Loop cycles every check_interval seconds until the token is cancelled.

        Raises:
            TerminatedError: always, once cancellation was observed
        """
        self.logger.info(f"Daemon loop started (interval: {self.check_interval}s)")

        while not self.token.cancelled:
            cycle_start = self._clock()

            try:
                self.last_report = self.application.run_cycle()
            except Exception as e:
                # A broken cycle must not end the loop; only cancellation does
                self.logger.error(f"Error in daemon cycle: {e}", exc_info=True)
            self.cycles += 1

            cycle_duration = self._clock() - cycle_start
            sleep_time = max(0.0, self.check_interval - cycle_duration)

            if sleep_time > 0:
                self.logger.debug(f"Cycle completed in {cycle_duration:.2f}s, sleeping for {sleep_time:.2f}s")
            else:
                self.logger.warning(f"Cycle took {cycle_duration:.2f}s, longer than interval {self.check_interval}s")

            if self.token.wait(timeout=sleep_time):
                break

        self.logger.info(f"Daemon loop finished after {self.cycles} cycle(s): {self.token.reason}")
        raise TerminatedError(self.token.reason or "cancelled", self.token.signum)

    ################################################################################
    # PUBLIC INTERFACE - Status and Information
    ################################################################################

    def get_status(self) -> Dict[str, Any]:
        """Get current daemon status information."""
        return {
            'check_interval': self.check_interval,
            'cycles': self.cycles,
            'stop_requested': self.token.cancelled,
            'stop_reason': self.token.reason,
            'last_cycle_ok': self.last_report.ok if self.last_report else None,
        }
