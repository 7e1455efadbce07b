"""
REST API Client

Shared JSON-over-HTTP client for the relational store and the tracker.
Handles authentication headers, rate limiting, retries and error mapping.
"""

import logging
import time
from typing import Any, Dict, Optional, Type

import requests

from ..errors import CatalogError

logger = logging.getLogger(__name__)


class RestClient:
    """
    Shared client for JSON REST APIs.

    Handles:
    - Authentication (headers supplied by the caller)
    - Rate limiting (min_request_interval seconds between calls)
    - Retries on 429/5xx honouring Retry-After
    - Mapping failures to a caller-chosen error type

    Usage:
        client = RestClient(
            base_url="https://xyz.supabase.co/rest/v1",
            headers={"apikey": key},
            error_class=PersistenceError,
        )
        rows = client.request("GET", "lures", params={"select": "id"})
    """

    MAX_RETRIES = 5
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        error_class: Type[CatalogError] = CatalogError,
        min_request_interval: float = 0.0,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root, without trailing slash
            headers: Headers sent with every request (auth, content type)
            error_class: Exception raised when a request ultimately fails
            min_request_interval: Minimum seconds between requests
            timeout: Request timeout in seconds
            session: Optional pre-built session (tests inject a mock)
        """
        self.base_url = base_url.rstrip("/")
        self.error_class = error_class
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if headers:
            self.session.headers.update(headers)

        # Rate limiting
        self.requests_made = 0
        self.last_request_time = 0.0
        self.min_request_interval = min_request_interval

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _rate_limit(self):
        """Wait until min_request_interval has passed since the last request."""
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)

        self.last_request_time = time.time()
        self.requests_made += 1

    def request(
        self,
        method: str,
        path: str = "",
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make a request with rate limiting, retries and error mapping.

        Args:
            method: HTTP method (GET, POST, PATCH)
            path: Path relative to base_url (e.g., "lures" or "/recXXX")
            params: Query string parameters
            json: Request body
            headers: Extra per-request headers

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            error_class: On non-retryable HTTP errors, transport errors,
                or when retries are exhausted
        """
        url = self.base_url
        if path:
            url = f"{self.base_url}/{path.lstrip('/')}"

        for attempt in range(self.MAX_RETRIES):
            self._rate_limit()

            try:
                response = self.session.request(
                    method, url, params=params, json=json,
                    headers=headers, timeout=self.timeout,
                )
            except requests.exceptions.RequestException as e:
                raise self.error_class(f"{method} {path or url} failed: {e}") from e

            # Retry on rate limiting or server errors
            if response.status_code in self.RETRYABLE_STATUS_CODES:
                retry_after = self._retry_after(response, attempt)
                logger.warning("HTTP %d on %s %s, retry %d/%d in %ds...",
                               response.status_code, method, path or url,
                               attempt + 1, self.MAX_RETRIES, retry_after)
                time.sleep(retry_after)
                continue

            if response.status_code >= 400:
                raise self.error_class(
                    f"API error {response.status_code} on {method} {path or url}: "
                    f"{response.text[:200]}"
                )

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise self.error_class(f"Invalid JSON from {method} {path or url}") from e

        raise self.error_class(
            f"Max retries ({self.MAX_RETRIES}) exceeded for {method} {path or url}"
        )

    @staticmethod
    def _retry_after(response: requests.Response, attempt: int) -> int:
        try:
            return int(response.headers.get("Retry-After", 2 ** attempt))
        except (TypeError, ValueError):
            return 2 ** attempt
