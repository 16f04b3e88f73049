"""
HTTP client for the API-Sports family of sports-data APIs.

One key covers every product; each product has its own base URL and match
listing endpoint. Responses arrive in an envelope whose `response` list holds
the events.
"""

import os
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Union

import requests

from .logging_config import get_logger
from .metrics import increment_counter, observe_histogram
from .retry import RetryConfig, retry_sync

logger = get_logger(__name__)

BASE_URLS = {
    "football": "https://v3.football.api-sports.io",
    "basketball": "https://v1.basketball.api-sports.io",
    "hockey": "https://v1.hockey.api-sports.io",
    "american-football": "https://v1.american-football.api-sports.io",
    "mma": "https://v1.mma.api-sports.io",
}

ENDPOINTS = {
    "football": "/fixtures",
    "basketball": "/games",
    "hockey": "/games",
    "american-football": "/games",
    "mma": "/fights",
}


class ApiSportsError(Exception):
    pass


class RetryableStatusError(Exception):
    """HTTP 429/5xx from API-Sports; `retry_after` carries the Retry-After seconds."""

    def __init__(self, status: int, body: str, retry_after: Optional[float] = None):
        super().__init__(f"API-Sports error (status {status}): {body[:200]}")
        self.status = status
        self.retry_after = retry_after


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _is_placeholder(key: str) -> bool:
    k = key.strip().lower()
    return (
        not k
        or "change_me" in k
        or k.startswith("sample")
        or k.startswith("your_")
        or k.startswith("<your")
    )


class ApiSportsClient:
    """
    Client for the API-Sports family (football, basketball, hockey,
    american-football, mma).

    All products share one key, sent as `x-apisports-key`. 429 and 5xx
    responses and network errors are retried with backoff; any other non-2xx
    status raises `ApiSportsError` straight away.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        retry_config: Optional[RetryConfig] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.api_key = api_key or os.getenv("API_FOOTBALL_KEY")
        if not self.api_key:
            raise ApiSportsError("API_FOOTBALL_KEY is not set")
        if _is_placeholder(self.api_key):
            raise ApiSportsError(
                "API_FOOTBALL_KEY appears to be a placeholder value. "
                "Get a key from https://dashboard.api-football.com/ and set it in the environment."
            )

        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig(
            max_attempts=4,
            base_delay=1.0,
            max_delay=30.0,
            retryable_exceptions=(RetryableStatusError, requests.RequestException),
        )
        self._sleep = sleep

    def _request_once(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        resp = requests.get(
            url,
            params=params,
            headers={"x-apisports-key": self.api_key},
            timeout=self.timeout,
        )
        status = resp.status_code
        if 200 <= status < 300:
            try:
                return resp.json()
            except requests.JSONDecodeError as e:
                raise ApiSportsError(f"API-Sports returned a non-JSON body (status {status}): {resp.text[:200]}") from e

        if status == 429 or 500 <= status < 600:
            raise RetryableStatusError(
                status, resp.text, _parse_retry_after(resp.headers.get("Retry-After"))
            )

        raise ApiSportsError(f"API-Sports error (status {status}): {resp.text[:200]}")

    def get(self, sport: str, endpoint: Optional[str] = None, **params: Any) -> List[Dict[str, Any]]:
        """
        GET `<sport base url><endpoint>` and return the envelope's `response` list.

        `endpoint` defaults to the sport's match listing (`/fixtures`, `/games`
        or `/fights`). None-valued params are dropped.
        """
        if sport not in BASE_URLS:
            raise ApiSportsError(f"Unknown API-Sports product: {sport}")

        path = endpoint or ENDPOINTS[sport]
        url = f"{BASE_URLS[sport]}{path}"
        query = {k: v for k, v in params.items() if v is not None}

        kwargs: Dict[str, Any] = {"config": self.retry_config}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep

        increment_counter("api_sports_requests_total")
        try:
            data = retry_sync(self._request_once, url, query, **kwargs)
        except (RetryableStatusError, requests.RequestException) as e:
            increment_counter("api_sports_errors_total")
            raise ApiSportsError(
                f"API-Sports request failed after {self.retry_config.max_attempts} attempts: {e}"
            ) from e
        except ApiSportsError:
            increment_counter("api_sports_errors_total")
            raise

        response = data.get("response") if isinstance(data, dict) else None
        if not isinstance(response, list):
            response = []
        observe_histogram("api_sports_results_per_request", float(len(response)))
        logger.debug("api_sports_response", sport=sport, path=path, params=query, results=len(response))
        return response

    # Convenience methods
    def get_by_id(self, sport: str, match_id: Union[str, int]) -> Optional[Dict[str, Any]]:
        results = self.get(sport, id=match_id)
        return results[0] if results else None

    def get_by_date(self, sport: str, day: Union[date, str], **params: Any) -> List[Dict[str, Any]]:
        day_str = day.isoformat() if isinstance(day, date) else day
        return self.get(sport, date=day_str, **params)
