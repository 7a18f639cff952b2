"""Odds document models and the parser that builds them from provider JSON."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

logger = logging.getLogger(__name__)


class ScannerError(Exception):
    """Raised when a scan could not run at all."""


class InvalidInputError(ScannerError):
    """Raised when the odds document is not shaped like a list of games."""


@dataclass(frozen=True)
class Outcome:
    name: str
    price: float
    point: Optional[float] = None
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "price": self.price,
            "point": self.point,
            "description": self.description,
        }


@dataclass(frozen=True)
class Market:
    key: str
    outcomes: Tuple[Outcome, ...] = ()


@dataclass(frozen=True)
class Bookmaker:
    key: str
    title: str
    markets: Tuple[Market, ...] = ()


@dataclass(frozen=True)
class Game:
    home_team: str
    away_team: str
    bookmakers: Tuple[Bookmaker, ...] = ()
    id: Optional[str] = None
    sport_key: Optional[str] = None
    commence_time: Optional[str] = None

    @property
    def ref(self) -> str:
        return f"{self.home_team} vs {self.away_team}"


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """A validated over/under pair across two bookmakers of one game."""

    game_ref: str
    subject: str
    market: str
    bookmaker_a: str
    outcome_a: Outcome
    bookmaker_b: str
    outcome_b: Outcome
    p_over: float
    p_under: float
    profit_percent: float
    game_id: Optional[str] = None
    commence_time: Optional[str] = None
    bookmaker_a_key: str = ""
    bookmaker_b_key: str = ""

    def to_dict(self, stakes: Optional[dict] = None) -> dict:
        payload = {
            "game": self.game_ref,
            "game_id": self.game_id,
            "commence_time": self.commence_time,
            "subject": self.subject,
            "market": self.market,
            "over": {
                "bookmaker": self.bookmaker_a,
                "bookmaker_key": self.bookmaker_a_key,
                **self.outcome_a.to_dict(),
                "implied_probability": self.p_over,
            },
            "under": {
                "bookmaker": self.bookmaker_b,
                "bookmaker_key": self.bookmaker_b_key,
                **self.outcome_b.to_dict(),
                "implied_probability": self.p_under,
            },
            "profit_percent": round(self.profit_percent, 4),
        }
        if stakes is not None:
            payload["stakes"] = stakes
        return payload


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_outcome(raw: Any) -> Optional[Outcome]:
    """Return an Outcome, or None when the record is malformed."""
    if not isinstance(raw, dict):
        return None
    name = _text(raw.get("name"))
    price = _to_float(raw.get("price"))
    if not name or price is None or price <= 1.0:
        return None
    point = None
    if raw.get("point") is not None:
        point = _to_float(raw.get("point"))
        if point is None:
            return None
    return Outcome(
        name=name,
        price=price,
        point=point,
        description=_text(raw.get("description")),
    )


def parse_market(raw: Any) -> Optional[Market]:
    if not isinstance(raw, dict):
        return None
    key = _text(raw.get("key"))
    outcomes_raw = raw.get("outcomes")
    if not key or not isinstance(outcomes_raw, list):
        return None
    outcomes = []
    for item in outcomes_raw:
        outcome = parse_outcome(item)
        if outcome is None:
            logger.debug("Skipping malformed outcome in market %s: %r", key, item)
            continue
        outcomes.append(outcome)
    return Market(key=key, outcomes=tuple(outcomes))


def parse_bookmaker(raw: Any) -> Optional[Bookmaker]:
    if not isinstance(raw, dict):
        return None
    title = _text(raw.get("title"))
    key = _text(raw.get("key")) or title
    if not key:
        return None
    markets_raw = raw.get("markets") or []
    if not isinstance(markets_raw, list):
        return None
    markets = []
    for item in markets_raw:
        market = parse_market(item)
        if market is None:
            logger.debug("Skipping malformed market for bookmaker %s", key)
            continue
        markets.append(market)
    return Bookmaker(key=key, title=title or key, markets=tuple(markets))


def parse_game(raw: Any) -> Game:
    if not isinstance(raw, dict):
        raise InvalidInputError("Each game must be a JSON object")
    bookmakers_raw = raw.get("bookmakers")
    if bookmakers_raw is None:
        bookmakers_raw = []
    if not isinstance(bookmakers_raw, list):
        raise InvalidInputError("Game 'bookmakers' must be a list")
    bookmakers = []
    for item in bookmakers_raw:
        bookmaker = parse_bookmaker(item)
        if bookmaker is None:
            logger.debug("Skipping malformed bookmaker: %r", item)
            continue
        bookmakers.append(bookmaker)
    return Game(
        home_team=_text(raw.get("home_team")),
        away_team=_text(raw.get("away_team")),
        bookmakers=tuple(bookmakers),
        id=_text(raw.get("id")) or None,
        sport_key=_text(raw.get("sport_key")) or None,
        commence_time=_text(raw.get("commence_time")) or None,
    )


def parse_games(document: Any) -> List[Game]:
    """Parse a provider odds document into games.

    Accepts a list of events or a single event object. Malformed games are
    skipped; a document that is neither raises ``InvalidInputError``.
    """
    if isinstance(document, dict):
        document = [document]
    if not isinstance(document, (list, tuple)):
        raise InvalidInputError("Odds document must be a list of games")
    games = []
    for item in document:
        try:
            games.append(parse_game(item))
        except InvalidInputError as exc:
            logger.debug("Skipping malformed game: %s", exc)
    return games
