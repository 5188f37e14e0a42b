#!/usr/bin/env python3
"""
Network Utilities Module

Public IPv4 detection with retry logic.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

import ipaddress
import logging
import time
from typing import Optional

import requests

from .exceptions import NetworkError

DEFAULT_IPV4_DETECTION_URL = "https://1.1.1.1/cdn-cgi/trace"

################################################################################
# PUBLIC IP DETECTOR CLASS - IP Detection
################################################################################

class PublicIPDetector:
    """Detects the host's public IPv4 address.

    The Cloudflare trace endpoint answers with ``key=value`` lines, of which
    ``ip=`` carries the address; any other endpoint is expected to answer
    with the bare address (ipify style).
    """

    def __init__(self, detection_url: str = DEFAULT_IPV4_DETECTION_URL, timeout: int = 10,
                 retry_attempts: int = 3, retry_delay: float = 2, logger: Optional[logging.Logger] = None) -> None:
        self.detection_url = detection_url
        self.timeout = timeout
        self.retry_attempts = max(1, retry_attempts)
        self.retry_delay = retry_delay
        self.logger = logger if logger else logging.getLogger(__name__)

    ################################################################################
    # IP ADDRESS DETECTION - Public IP Retrieval
    ################################################################################

    def current_ipv4(self) -> str:
        """Return the current public IPv4 address. Raises NetworkError after all attempts fail."""
        last_error = "no attempt made"

        for attempt in range(self.retry_attempts):
            try:
                response = requests.get(self.detection_url, timeout=self.timeout)
                if response.status_code == 200 and response.text:
                    address = self.parse_response(response.text)
                    self.logger.debug(f"IPv4 address detected: {address}")
                    return address
                last_error = f"HTTP {response.status_code}: {response.text[:200]}"
                self.logger.warning(f"Invalid IPv4 response (attempt {attempt + 1}/{self.retry_attempts}): {last_error}")

            except requests.exceptions.Timeout:
                last_error = "timeout"
                self.logger.warning(f"IPv4 detection timeout (attempt {attempt + 1}/{self.retry_attempts})")
            except requests.exceptions.RequestException as e:
                last_error = str(e)
                self.logger.warning(f"IPv4 detection error (attempt {attempt + 1}/{self.retry_attempts}): {e}")
            except NetworkError as e:
                last_error = str(e)
                self.logger.warning(f"IPv4 detection failed (attempt {attempt + 1}/{self.retry_attempts}): {e}")

            if attempt < self.retry_attempts - 1:
                time.sleep(self.retry_delay)

        raise NetworkError(f"cannot get public IPv4 from {self.detection_url}: {last_error}")

    @staticmethod
    def parse_response(body: str) -> str:
        """Extract and validate the address from a trace or plain-text body."""
        candidate = None
        for line in body.splitlines():
            key, sep, value = line.partition("=")
            if sep and key.strip() == "ip":
                candidate = value.strip()
                break
        if candidate is None:
            candidate = body.strip()

        try:
            return str(ipaddress.IPv4Address(candidate))
        except ValueError:
            raise NetworkError(f"response is not an IPv4 address: {candidate[:100]!r}")

