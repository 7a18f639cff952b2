"""Builders for provider-shaped odds documents used across tests."""

from __future__ import annotations

from typing import List, Optional


def outcome(name: str, price, point=None, description: str = "Jalen Brunson") -> dict:
    payload = {"name": name, "price": price, "description": description}
    if point is not None:
        payload["point"] = point
    return payload


def market(key: str, outcomes: List[dict]) -> dict:
    return {"key": key, "outcomes": outcomes}


def bookmaker(key: str, markets: List[dict], title: Optional[str] = None) -> dict:
    return {"key": key, "title": title or key.title(), "markets": markets}


def game(bookmakers: List[dict], home: str = "New York Knicks", away: str = "Boston Celtics") -> dict:
    return {
        "id": f"{home}-{away}".lower().replace(" ", "-"),
        "sport_key": "basketball_nba",
        "home_team": home,
        "away_team": away,
        "bookmakers": bookmakers,
    }
