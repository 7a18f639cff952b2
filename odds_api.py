"""Client for The Odds API with key rotation on unauthorized responses."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import requests

from config import BASE_URL, DEFAULT_REGION_KEYS, REQUEST_TIMEOUT_SECONDS
from models import ScannerError

logger = logging.getLogger(__name__)


class OddsApiError(ScannerError):
    """Raised when odds could not be fetched."""


@dataclass
class KeyRotation:
    """Which API key is in use; advanced when the provider rejects a key."""

    keys: List[str] = field(default_factory=list)
    index: int = 0

    def current(self) -> str:
        if not self.keys:
            raise OddsApiError("No Odds API key configured")
        return self.keys[self.index % len(self.keys)]

    def advance(self) -> str:
        if not self.keys:
            raise OddsApiError("No Odds API key configured")
        self.index = (self.index + 1) % len(self.keys)
        return self.keys[self.index]


def _mask(key: str) -> str:
    if len(key) <= 4:
        return "****"
    return f"...{key[-4:]}"


class OddsApiClient:
    def __init__(
        self,
        rotation: KeyRotation,
        base_url: str = BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.rotation = rotation
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, path: str, params: Dict[str, str]):
        url = f"{self.base_url}{path}"
        attempts = max(1, len(self.rotation.keys))
        for _ in range(attempts):
            query = dict(params, apiKey=self.rotation.current())
            try:
                resp = self.session.get(url, params=query, timeout=self.timeout)
            except requests.RequestException as exc:
                raise OddsApiError(f"Network error: {exc}") from exc
            if resp.status_code == 401:
                rejected = self.rotation.current()
                self.rotation.advance()
                logger.warning(
                    "API key %s unauthorized, switching to next key", _mask(rejected)
                )
                continue
            if resp.status_code >= 400:
                try:
                    payload = resp.json()
                    message = payload.get("message") or payload.get("error")
                except (ValueError, AttributeError):
                    message = resp.text or "Unknown error"
                raise OddsApiError(message or f"API request failed ({resp.status_code})")
            try:
                return resp.json()
            except ValueError as exc:
                raise OddsApiError(f"Failed to parse response from {path}") from exc
        raise OddsApiError("All Odds API keys were rejected as unauthorized")

    @staticmethod
    def _params(markets: Sequence[str], regions: Optional[Sequence[str]]) -> Dict[str, str]:
        params = {
            "regions": ",".join(regions or DEFAULT_REGION_KEYS),
            "oddsFormat": "decimal",
        }
        if markets:
            params["markets"] = ",".join(markets)
        return params

    def fetch_odds(
        self, sport_key: str, markets: Sequence[str], regions: Optional[Sequence[str]] = None
    ) -> List[dict]:
        data = self._request(f"/sports/{sport_key}/odds/", self._params(markets, regions))
        if not isinstance(data, list):
            raise OddsApiError(f"Unexpected odds payload for {sport_key}")
        return data

    def fetch_event_ids(
        self, sport_key: str, regions: Optional[Sequence[str]] = None
    ) -> List[str]:
        data = self._request(f"/sports/{sport_key}/events/", self._params([], regions))
        if not isinstance(data, list):
            raise OddsApiError(f"Unexpected events payload for {sport_key}")
        return [str(event["id"]) for event in data if isinstance(event, dict) and event.get("id")]

    def fetch_event_odds(
        self,
        sport_key: str,
        event_id: str,
        markets: Sequence[str],
        regions: Optional[Sequence[str]] = None,
    ) -> dict:
        data = self._request(
            f"/sports/{sport_key}/events/{event_id}/odds", self._params(markets, regions)
        )
        if not isinstance(data, dict):
            raise OddsApiError(f"Unexpected event odds payload for {event_id}")
        return data

    def fetch_player_props(
        self, sport_key: str, markets: Sequence[str], regions: Optional[Sequence[str]] = None
    ) -> List[dict]:
        events = []
        for event_id in self.fetch_event_ids(sport_key, regions):
            events.append(self.fetch_event_odds(sport_key, event_id, markets, regions))
        return events
