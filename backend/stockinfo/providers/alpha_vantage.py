from __future__ import annotations

import json
import socket
import time
from collections.abc import Callable
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

import structlog

from stockinfo.config.settings import AlphaVantageSettings, settings

logger = structlog.get_logger(__name__)

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}
# Returned with HTTP 200 when the key is throttled or invalid.
_NOTICE_KEYS = ("Note", "Information")


class ProviderError(Exception):
    """Raised when Alpha Vantage could not be queried or answered unusably."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProviderHTTPError(ProviderError):
    """Raised when Alpha Vantage answered with an HTTP error status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message, status_code)


class AlphaVantageClient:
    """Blocking client for the Alpha Vantage OVERVIEW function.

    Every attempt is bounded by ``timeout_seconds``. Throttling, 5xx answers
    and network failures are retried with exponential backoff until
    ``max_attempts`` attempts have been made; other HTTP errors fail at once.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://www.alphavantage.co/query",
        timeout_seconds: float = 10.0,
        max_attempts: int = 3,
        backoff_seconds: float = 0.5,
        max_backoff_seconds: float = 8.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self.max_backoff_seconds = max_backoff_seconds
        self._sleep = sleep

    @classmethod
    def from_settings(cls, config: AlphaVantageSettings) -> AlphaVantageClient:
        return cls(
            config.api_key,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            max_attempts=config.max_attempts,
            backoff_seconds=config.backoff_seconds,
            max_backoff_seconds=config.max_backoff_seconds,
        )

    def _build_url(self, params: dict[str, str]) -> str:
        return f"{self.base_url}?{urlencode(params)}"

    def _backoff(self, attempt: int) -> float:
        return min(self.backoff_seconds * (2 ** (attempt - 1)), self.max_backoff_seconds)

    def _get(self, params: dict[str, str]) -> str:
        request = Request(self._build_url(params), headers={"Accept": "application/json"})
        attempt = 0
        while True:
            attempt += 1
            try:
                with urlopen(request, timeout=self.timeout_seconds) as response:
                    return response.read().decode("utf-8")
            except HTTPError as exc:
                message = f"{exc.code} {exc.reason}"
                if exc.code not in _RETRYABLE_STATUS or attempt >= self.max_attempts:
                    raise ProviderHTTPError(exc.code, message) from exc
                failure = message
            except (URLError, TimeoutError, socket.timeout) as exc:
                reason = getattr(exc, "reason", None) or exc
                if attempt >= self.max_attempts:
                    raise ProviderError(f"Alpha Vantage request failed: {reason}") from exc
                failure = str(reason)

            delay = self._backoff(attempt)
            logger.warning(
                "alpha_vantage_retry",
                function=params.get("function"),
                symbol=params.get("symbol"),
                attempt=attempt,
                max_attempts=self.max_attempts,
                delay=delay,
                error=failure,
            )
            self._sleep(delay)

    def fetch_overview(self, symbol: str) -> dict | None:
        """Return the decoded OVERVIEW payload, or None if the body was empty."""
        if not self.api_key:
            raise ProviderError("Alpha Vantage API key is not configured")

        body = self._get({"function": "OVERVIEW", "symbol": symbol, "apikey": self.api_key})
        if not body.strip():
            logger.warning("alpha_vantage_empty_body", symbol=symbol)
            return None

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as exc:
            raise ProviderError("Alpha Vantage returned a malformed response") from exc

        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise ProviderError("Alpha Vantage returned an unexpected response")

        for key in _NOTICE_KEYS:
            if key in payload:
                raise ProviderHTTPError(503, str(payload[key]))

        logger.debug("alpha_vantage_overview_fetched", symbol=symbol, fields=len(payload))
        return payload


def get_overview_client() -> AlphaVantageClient:
    """FastAPI dependency building the provider client from settings."""
    return AlphaVantageClient.from_settings(settings.alpha_vantage)
