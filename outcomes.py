"""Flatten a bookmaker's market listings into comparable outcomes."""

from __future__ import annotations

from typing import List, Optional, Sequence

from config import SIDES_HOME_AWAY, SUBJECT_DESCRIPTION, MarketFamily
from models import Bookmaker, Game, Market, Outcome

SIDE_OVER = "over"
SIDE_UNDER = "under"


def _find_market(markets: Sequence[Market], key: Optional[str]) -> Optional[Market]:
    if not key:
        return None
    for market in markets:
        if market.key == key:
            return market
    return None


def extract_outcomes(
    markets: Sequence[Market], primary_key: str, alternate_key: Optional[str] = None
) -> List[Outcome]:
    """Return primary market outcomes followed by alternate market outcomes.

    Identical lines listed in both markets are kept twice.
    """
    outcomes: List[Outcome] = []
    for key in (primary_key, alternate_key):
        market = _find_market(markets, key)
        if market is not None:
            outcomes.extend(market.outcomes)
    return outcomes


def family_outcomes(bookmaker: Bookmaker, family: MarketFamily) -> List[Outcome]:
    if family.max_outcomes is not None:
        # Three-way moneylines (with a draw) are not two-way markets.
        primary = _find_market(bookmaker.markets, family.primary_key)
        if primary is not None and len(primary.outcomes) > family.max_outcomes:
            return []
    return extract_outcomes(bookmaker.markets, family.primary_key, family.alternate_key)


def subject_for(outcome: Outcome, family: MarketFamily) -> str:
    if family.subject == SUBJECT_DESCRIPTION:
        return outcome.description
    return family.label


def side_for(outcome: Outcome, family: MarketFamily, game: Game) -> Optional[str]:
    name = outcome.name.strip().lower()
    if family.sides == SIDES_HOME_AWAY:
        if name == game.home_team.strip().lower():
            return SIDE_OVER
        if name == game.away_team.strip().lower():
            return SIDE_UNDER
        return None
    if name == "over":
        return SIDE_OVER
    if name == "under":
        return SIDE_UNDER
    return None
