#!/usr/bin/env python3
"""
API Client Module

HTTP client with retry logic and the Cloudflare record store built on it.

Created: 2026-10-19
License: MIT
"""

################################################################################
# IMPORTS & DEPENDENCIES
################################################################################

# Standard library imports
import time
import logging
from typing import Optional, Dict, Any, List

# Third-party imports
import requests

# Internal imports
from .backends import RecordStore
from .exceptions import ActionFailure, ConfigError, EncryptionError, ProviderProtocolError, TransportError
from .models import RecordFields, RecordType, RemoteRecord

CLOUDFLARE_API_URL = "https://api.cloudflare.com/client/v4"

################################################################################
# HTTP CLIENT CLASS - API Communication with Retry Logic
################################################################################

class HTTPClient:
    """HTTP client with retry logic and error handling."""

    def __init__(self, base_url: Optional[str] = None, timeout: int = 10, retries: int = 3,
                 headers: Optional[Dict[str, str]] = None, logger: Optional[logging.Logger] = None) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.retries = max(1, retries)
        self.session = requests.Session()
        if headers:
            self.session.headers.update(headers)
        self.logger = logger if logger else logging.getLogger(__name__)

    def request_with_retry(self, method: str, endpoint: Optional[str] = None, url: Optional[str] = None,
                           json_data: Optional[Any] = None, **kwargs: Any) -> requests.Response:
        """Make HTTP request with exponential backoff retry logic. Raises TransportError when all attempts fail."""
        if url:
            final_url = url
        elif self.base_url and endpoint:
            final_url = f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        elif endpoint:
            final_url = endpoint
        else:
            raise ValueError("Either 'url' or 'endpoint' (with base_url) must be provided")

        retries = max(1, kwargs.pop('retries', self.retries))
        timeout = kwargs.pop('timeout', self.timeout)
        last_error: Optional[Exception] = None

        for attempt in range(retries):
            try:
                response = self.session.request(method.upper(), final_url, json=json_data, timeout=timeout, **kwargs)
                self.logger.debug(f"{method.upper()} {final_url} - Status: {response.status_code}")
                return response

            except requests.exceptions.Timeout as e:
                last_error = e
                self.logger.warning(f"Request timeout (attempt {attempt + 1}/{retries}) - {final_url}")

            except requests.exceptions.RequestException as e:
                last_error = e
                self.logger.warning(f"Request failed (attempt {attempt + 1}/{retries}): {e}")

            if attempt < retries - 1:  # Don't sleep on last attempt
                time.sleep(2 ** attempt)  # Exponential backoff

        raise TransportError(f"{method.upper()} {final_url} failed after {retries} attempt(s): {last_error}")

    ################################################################################
    # HTTP METHOD CONVENIENCE WRAPPERS - Simplified API
    ################################################################################

    def get(self, endpoint: Optional[str] = None, url: Optional[str] = None, **kwargs: Any) -> requests.Response:
        """GET request wrapper."""
        return self.request_with_retry("GET", endpoint=endpoint, url=url, **kwargs)

    def post(self, endpoint: Optional[str] = None, url: Optional[str] = None, json_data: Optional[Any] = None, **kwargs: Any) -> requests.Response:
        """POST request wrapper."""
        return self.request_with_retry("POST", endpoint=endpoint, url=url, json_data=json_data, **kwargs)

    def patch(self, endpoint: Optional[str] = None, url: Optional[str] = None, json_data: Optional[Any] = None, **kwargs: Any) -> requests.Response:
        """PATCH request wrapper."""
        return self.request_with_retry("PATCH", endpoint=endpoint, url=url, json_data=json_data, **kwargs)

    def close(self) -> None:
        self.session.close()

################################################################################
# CLOUDFLARE RECORD STORE - DNS Provider Integration
################################################################################

class CloudflareClient(RecordStore):
    """Cloudflare DNS record store (API token authentication)."""

    PER_PAGE = 100

    def __init__(self, api_token: str, base_url: str = CLOUDFLARE_API_URL, timeout: int = 30,
                 retries: int = 3, logger: Optional[logging.Logger] = None) -> None:
        """Initialize Cloudflare client. Writes are never retried to avoid duplicate records."""
        if not api_token:
            raise ConfigError("Cloudflare api_token is empty")

        self.logger = logger if logger else logging.getLogger(__name__)
        self.client = HTTPClient(
            base_url=base_url,
            timeout=timeout,
            retries=retries,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
            },
            logger=self.logger,
        )

    @property
    def name(self) -> str:
        return "Cloudflare"

    def list(self, zone_id: str) -> List[RemoteRecord]:
        """Fetch every DNS record of a zone, following pagination."""
        self.logger.debug(f"Fetching records for zone: {zone_id}")
        records: List[RemoteRecord] = []
        page = 1

        while True:
            response = self.client.get(
                endpoint=f"/zones/{zone_id}/dns_records",
                params={"page": page, "per_page": self.PER_PAGE},
            )
            envelope = self._decode(response, ProviderProtocolError)

            if not response.ok or not envelope.get("success", False):
                raise TransportError(
                    f"listing zone {zone_id} failed: HTTP {response.status_code} {self._error_text(envelope, response)}"
                )

            result = envelope.get("result")
            if not isinstance(result, list):
                raise ProviderProtocolError(f"listing zone {zone_id}: response has no 'result' list")

            records.extend(self._parse_record(raw) for raw in result)

            result_info = envelope.get("result_info") or {}
            if not isinstance(result_info, dict):
                raise ProviderProtocolError(f"listing zone {zone_id}: 'result_info' is not an object")
            total_pages = result_info.get("total_pages") or 1
            if isinstance(total_pages, bool) or not isinstance(total_pages, int):
                raise ProviderProtocolError(f"listing zone {zone_id}: invalid total_pages {total_pages!r}")
            if page >= total_pages:
                break
            page += 1

        self.logger.debug(f"Retrieved {len(records)} records for zone {zone_id}")
        return records

    def create(self, zone_id: str, fields: RecordFields) -> None:
        """Create a DNS record."""
        response = self.client.post(
            endpoint=f"/zones/{zone_id}/dns_records",
            json_data=fields.to_payload(),
            retries=1,
        )
        self._check_write(response, f"create {fields.name} in zone {zone_id}")

    def patch(self, zone_id: str, record_id: str, fields: RecordFields) -> None:
        """Patch an existing DNS record; only the fields present in the payload change."""
        response = self.client.patch(
            endpoint=f"/zones/{zone_id}/dns_records/{record_id}",
            json_data=fields.to_payload(),
            retries=1,
        )
        self._check_write(response, f"patch {fields.name} ({record_id}) in zone {zone_id}")

    def close(self) -> None:
        self.client.close()

    ################################################################################
    # PRIVATE METHODS - Response Handling
    ################################################################################

    def _check_write(self, response: requests.Response, what: str) -> None:
        envelope = self._decode(response, ActionFailure)
        if not response.ok or not envelope.get("success", False):
            raise ActionFailure(f"{what} rejected: HTTP {response.status_code} {self._error_text(envelope, response)}")

    @staticmethod
    def _decode(response: requests.Response, error_class: type) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            if not response.ok:
                return {}
            raise error_class(f"non-JSON response (HTTP {response.status_code}): {response.text[:200]}")
        if not isinstance(data, dict):
            raise error_class(f"unexpected response body: {data!r}")
        return data

    @staticmethod
    def _error_text(envelope: Dict[str, Any], response: requests.Response) -> str:
        errors = envelope.get("errors") or []
        messages = [
            f"[{err.get('code')}] {err.get('message')}" if isinstance(err, dict) else str(err)
            for err in errors
        ]
        if messages:
            return "; ".join(messages)
        return response.text[:200] if response.text else response.reason or ""

    @staticmethod
    def _parse_record(raw: Any) -> RemoteRecord:
        if not isinstance(raw, dict):
            raise ProviderProtocolError(f"record entry is not an object: {raw!r}")

        missing = [key for key in ("id", "name", "type") if not raw.get(key)]
        if missing:
            raise ProviderProtocolError(f"record entry missing {', '.join(missing)}: {raw!r}")

        try:
            record_type = RecordType.parse(raw["type"])
        except ValueError:
            record_type = str(raw["type"])

        ttl = raw.get("ttl")
        if ttl is not None and (isinstance(ttl, bool) or not isinstance(ttl, int)):
            raise ProviderProtocolError(f"record {raw['id']} has non-integer ttl: {ttl!r}")

        proxied = raw.get("proxied")
        if proxied is not None and not isinstance(proxied, bool):
            raise ProviderProtocolError(f"record {raw['id']} has non-boolean proxied: {proxied!r}")

        comment = raw.get("comment")
        return RemoteRecord(
            id=str(raw["id"]),
            name=str(raw["name"]),
            type=record_type,
            content=str(raw.get("content") or ""),
            proxied=proxied,
            ttl=ttl,
            comment=str(comment) if comment is not None else None,
        )

################################################################################
# FACTORY - Build From Configuration
################################################################################

def cloudflare_from_options(options: Dict[str, Any], settings: Any) -> CloudflareClient:
    """Build a CloudflareClient from a backend config entry."""
    auth = options.get("authentication")
    if not isinstance(auth, dict):
        raise ConfigError("cloudflare backend requires an 'authentication' mapping")

    if auth.get("api_token"):
        token = str(auth["api_token"]).strip()
    elif auth.get("api_token_encrypted"):
        token = _decrypt_token(auth, settings)
    elif auth.get("api_key") or auth.get("account_email"):
        raise ConfigError("cloudflare api_key/account_email authentication is not supported, use api_token")
    else:
        raise ConfigError("cloudflare authentication needs 'api_token' or 'api_token_encrypted'")

    return CloudflareClient(
        api_token=token,
        base_url=options.get("base_url") or getattr(settings, "provider_api_base_url", None) or CLOUDFLARE_API_URL,
        timeout=getattr(settings, "provider_api_timeout", 30),
        retries=getattr(settings, "provider_api_retry_attempts", 3),
        logger=logging.getLogger(__name__),
    )


def _decrypt_token(auth: Dict[str, Any], settings: Any) -> str:
    from .encryption import EncryptionManager

    key_path = auth.get("encryption_key_path") or getattr(settings, "encryption_key_path", None)
    if not key_path:
        raise ConfigError("api_token_encrypted requires 'encryption_key_path'")
    try:
        manager = EncryptionManager(key_path, create=False)
        return manager.decrypt(str(auth["api_token_encrypted"]))
    except EncryptionError as e:
        raise ConfigError(f"cannot decrypt api_token_encrypted: {e}") from e
