"""Configuration constants for the arbitrage detector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

BASE_URL = "https://api.the-odds-api.com/v4"
REQUEST_TIMEOUT_SECONDS = 30

DEFAULT_SPORT_KEY = "basketball_nba"
DEFAULT_REGION_KEYS = ["au"]
DEFAULT_STAKE = 1000.0
DEFAULT_MAX_WORKERS = 4

REGION_CONFIG = {
    "us": {"name": "United States"},
    "us2": {"name": "United States (Additional)"},
    "uk": {"name": "United Kingdom"},
    "eu": {"name": "Europe"},
    "au": {"name": "Australia"},
}

# -----------------------------------------------------------------------------
# Market families
# -----------------------------------------------------------------------------

SUBJECT_DESCRIPTION = "description"
SUBJECT_MARKET = "market"

SIDES_OVER_UNDER = "over_under"
SIDES_HOME_AWAY = "home_away"


@dataclass(frozen=True)
class MarketFamily:
    """A main market key merged with its alternate-lines variant.

    ``subject`` picks how outcomes are grouped: by outcome description
    (player props) or one subject for the whole market (game lines).
    ``negate_over_line`` is set for spreads, where a home -3.5 covers a
    margin over 3.5.
    """

    key: str
    label: str
    primary_key: str
    alternate_key: Optional[str] = None
    subject: str = SUBJECT_DESCRIPTION
    sides: str = SIDES_OVER_UNDER
    line_bearing: bool = True
    negate_over_line: bool = False
    max_outcomes: Optional[int] = None
    player_prop: bool = False


MARKET_FAMILIES: Dict[str, MarketFamily] = {
    family.key: family
    for family in (
        MarketFamily(
            key="player_points",
            label="Points",
            primary_key="player_points",
            alternate_key="player_points_alternate",
            player_prop=True,
        ),
        MarketFamily(
            key="player_rebounds",
            label="Rebounds",
            primary_key="player_rebounds",
            alternate_key="player_rebounds_alternate",
            player_prop=True,
        ),
        MarketFamily(
            key="player_assists",
            label="Assists",
            primary_key="player_assists",
            alternate_key="player_assists_alternate",
            player_prop=True,
        ),
        MarketFamily(
            key="player_threes",
            label="Threes",
            primary_key="player_threes",
            alternate_key="player_threes_alternate",
            player_prop=True,
        ),
        MarketFamily(
            key="totals",
            label="Total",
            primary_key="totals",
            alternate_key="alternate_totals",
            subject=SUBJECT_MARKET,
        ),
        MarketFamily(
            key="spreads",
            label="Spread",
            primary_key="spreads",
            alternate_key="alternate_spreads",
            subject=SUBJECT_MARKET,
            sides=SIDES_HOME_AWAY,
            negate_over_line=True,
        ),
        MarketFamily(
            key="h2h",
            label="Moneyline",
            primary_key="h2h",
            subject=SUBJECT_MARKET,
            sides=SIDES_HOME_AWAY,
            line_bearing=False,
            max_outcomes=2,
        ),
    )
}

DEFAULT_FAMILY_KEYS = ["player_points"]

MARKET_OPTIONS = [
    {"key": family.key, "label": family.label, "player_prop": family.player_prop}
    for family in MARKET_FAMILIES.values()
]


def resolve_families(keys: Optional[List[str]]) -> List[MarketFamily]:
    """Map requested family keys to definitions, dropping unknown ones.

    Falls back to the defaults when nothing valid was requested.
    """
    resolved = []
    seen = set()
    for key in keys or []:
        if not isinstance(key, str):
            continue
        normalized = key.strip().lower()
        family = MARKET_FAMILIES.get(normalized)
        if family and normalized not in seen:
            resolved.append(family)
            seen.add(normalized)
    if resolved:
        return resolved
    return [MARKET_FAMILIES[key] for key in DEFAULT_FAMILY_KEYS]


def market_keys_for(families: List[MarketFamily]) -> List[str]:
    """Return the provider market keys needed to scan ``families``."""
    keys: List[str] = []
    for family in families:
        for key in (family.primary_key, family.alternate_key):
            if key and key not in keys:
                keys.append(key)
    return keys
