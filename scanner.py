"""Core arbitrage scanning logic."""

from __future__ import annotations

import concurrent.futures
import datetime as dt
import logging
from typing import Any, Iterable, Iterator, List, Optional, Sequence

from arbitrage import evaluate_pair, profit_percent, split_stake
from config import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_STAKE,
    MarketFamily,
    market_keys_for,
    resolve_families,
)
from models import ArbitrageOpportunity, Game, InvalidInputError, ScannerError, parse_games
from pairing import build_index, generate_candidates

logger = logging.getLogger(__name__)

__all__ = [
    "find_opportunities",
    "rank_opportunities",
    "run_live_scan",
    "run_scan",
    "scan_game",
    "scan_games",
]


def _iso_now() -> str:
    now = dt.datetime.now(dt.timezone.utc).replace(microsecond=0)
    return now.strftime("%Y-%m-%dT%H:%M:%SZ")


def _game_opportunities(game: Game, family: MarketFamily) -> Iterator[ArbitrageOpportunity]:
    index = build_index(game, family)
    for candidate in generate_candidates(index):
        probabilities = evaluate_pair(
            candidate.over,
            candidate.under,
            line_bearing=family.line_bearing,
            negate_over_line=family.negate_over_line,
        )
        if probabilities is None:
            continue
        p_over, p_under = probabilities
        yield ArbitrageOpportunity(
            game_ref=game.ref,
            subject=candidate.subject,
            market=family.key,
            bookmaker_a=candidate.bookmaker_a.title,
            outcome_a=candidate.over,
            bookmaker_b=candidate.bookmaker_b.title,
            outcome_b=candidate.under,
            p_over=p_over,
            p_under=p_under,
            profit_percent=profit_percent(p_over, p_under),
            game_id=game.id,
            commence_time=game.commence_time,
            bookmaker_a_key=candidate.bookmaker_a.key,
            bookmaker_b_key=candidate.bookmaker_b.key,
        )


def scan_game(game: Game, families: Sequence[MarketFamily]) -> List[ArbitrageOpportunity]:
    """Return a game's opportunities in discovery order (unranked)."""
    found: List[ArbitrageOpportunity] = []
    for family in families:
        found.extend(_game_opportunities(game, family))
    return found


def rank_opportunities(
    opportunities: Iterable[ArbitrageOpportunity],
) -> List[ArbitrageOpportunity]:
    """Order by profit descending; equal profits keep discovery order."""
    return sorted(opportunities, key=lambda opp: opp.profit_percent, reverse=True)


def scan_games(
    games: Sequence[Game],
    families: Sequence[MarketFamily],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[ArbitrageOpportunity]:
    """Scan games on a bounded worker pool and rank the merged results."""
    if not games:
        return []
    if max_workers <= 1 or len(games) == 1:
        per_game = [scan_game(game, families) for game in games]
    else:
        workers = min(max_workers, len(games))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            per_game = list(executor.map(lambda game: scan_game(game, families), games))
    merged: List[ArbitrageOpportunity] = []
    for found in per_game:
        merged.extend(found)
    return rank_opportunities(merged)


def find_opportunities(
    document: Any,
    markets: Optional[Sequence[str]] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[ArbitrageOpportunity]:
    """Parse an odds document and return its ranked opportunities.

    Raises ``InvalidInputError`` when the document is not a list of games.
    """
    games = parse_games(document)
    families = resolve_families(list(markets) if markets else None)
    return scan_games(games, families, max_workers=max_workers)


def _scan_payload(
    opportunities: List[ArbitrageOpportunity],
    games_scanned: int,
    families: Sequence[MarketFamily],
    stake_amount: float,
) -> dict:
    return {
        "success": True,
        "scan_time": _iso_now(),
        "markets": [family.key for family in families],
        "games_scanned": games_scanned,
        "stake_amount": stake_amount,
        "opportunities": [
            opp.to_dict(stakes=split_stake(opp.p_over, opp.p_under, stake_amount))
            for opp in opportunities
        ],
        "opportunities_count": len(opportunities),
    }


def run_scan(
    document: Any,
    markets: Optional[Sequence[str]] = None,
    stake_amount: float = DEFAULT_STAKE,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict:
    """Scan an odds document and return a JSON-ready result envelope."""
    families = resolve_families(list(markets) if markets else None)
    try:
        games = parse_games(document)
    except InvalidInputError as exc:
        return {"success": False, "error": str(exc), "error_code": 400}
    opportunities = scan_games(games, families, max_workers=max_workers)
    logger.info(
        "Scanned %d games across %s: %d opportunities",
        len(games),
        ",".join(family.key for family in families),
        len(opportunities),
    )
    return _scan_payload(opportunities, len(games), families, stake_amount)


def run_live_scan(
    client,
    sport_key: str,
    markets: Optional[Sequence[str]] = None,
    regions: Optional[Sequence[str]] = None,
    stake_amount: float = DEFAULT_STAKE,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> dict:
    """Fetch odds through ``client`` and scan them.

    Player-prop families are only served by the per-event endpoint, so they
    are fetched event by event; game-line families use the bulk endpoint.
    """
    families = resolve_families(list(markets) if markets else None)
    prop_keys = market_keys_for([family for family in families if family.player_prop])
    line_keys = market_keys_for([family for family in families if not family.player_prop])
    try:
        documents: List[dict] = []
        if line_keys:
            documents.extend(client.fetch_odds(sport_key, line_keys, regions))
        if prop_keys:
            documents.extend(client.fetch_player_props(sport_key, prop_keys, regions))
        games = parse_games(documents)
    except ScannerError as exc:
        logger.error("Live scan for %s failed: %s", sport_key, exc)
        return {"success": False, "error": str(exc), "error_code": 502}
    opportunities = scan_games(games, families, max_workers=max_workers)
    logger.info("Live scan for %s: %d opportunities", sport_key, len(opportunities))
    # Bulk and per-event documents can both describe the same event.
    games_scanned = len({game.id or game.ref for game in games})
    payload = _scan_payload(opportunities, games_scanned, families, stake_amount)
    payload["sport"] = sport_key
    return payload
