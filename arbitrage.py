"""Arbitrage evaluation and profit calculation helpers."""

from __future__ import annotations

from typing import Optional, Tuple

from models import Outcome


def implied_probability(price: float) -> Optional[float]:
    """Return 1 / decimal odds, or None for prices that are not valid odds."""
    if price is None or price <= 1:
        return None
    return 1.0 / price


def lines_compatible(
    over: Outcome,
    under: Outcome,
    line_bearing: bool = True,
    negate_over_line: bool = False,
) -> bool:
    """Return True when the over line does not sit above the under line.

    Line-bearing markets need a point on both outcomes. ``negate_over_line``
    turns a spread handicap (home -3.5) into the margin it must clear (3.5).
    """
    if not line_bearing:
        return True
    if over.point is None or under.point is None:
        return False
    over_line = -over.point if negate_over_line else over.point
    return over_line <= under.point


def evaluate_pair(
    over: Outcome,
    under: Outcome,
    line_bearing: bool = True,
    negate_over_line: bool = False,
) -> Optional[Tuple[float, float]]:
    """Return (p_over, p_under) if the pair is an arbitrage, else None."""
    p_over = implied_probability(over.price)
    p_under = implied_probability(under.price)
    if p_over is None or p_under is None:
        return None
    if not lines_compatible(over, under, line_bearing, negate_over_line):
        return None
    if p_over + p_under >= 1:
        return None
    return p_over, p_under


def profit_percent(p_over: float, p_under: float) -> float:
    """Return the guaranteed return (percent) of an equal-payout stake split."""
    return (1.0 / (p_over + p_under) - 1.0) * 100


def split_stake(p_over: float, p_under: float, stake_total: float) -> dict:
    """Split ``stake_total`` so both legs pay out the same amount."""
    if stake_total <= 0:
        return {"total": 0.0, "over": 0.0, "under": 0.0, "payout": 0.0, "profit": 0.0}
    inverse_sum = p_over + p_under
    stake_over = round(stake_total * p_over / inverse_sum, 2)
    stake_under = round(stake_total - stake_over, 2)
    payout = round(stake_total / inverse_sum, 2)
    return {
        "total": stake_total,
        "over": stake_over,
        "under": stake_under,
        "payout": payout,
        "profit": round(payout - stake_total, 2),
    }
