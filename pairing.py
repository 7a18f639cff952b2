"""Candidate pair generation across bookmakers of a single game."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from config import MarketFamily
from models import Bookmaker, Game, Outcome
from outcomes import SIDE_OVER, SIDE_UNDER, family_outcomes, side_for, subject_for

IndexKey = Tuple[str, str, str]


@dataclass(frozen=True)
class Candidate:
    subject: str
    bookmaker_a: Bookmaker
    over: Outcome
    bookmaker_b: Bookmaker
    under: Outcome


@dataclass
class OutcomeIndex:
    """Outcomes keyed by (subject, bookmaker key, side), in discovery order."""

    subjects: List[str] = field(default_factory=list)
    bookmakers: Dict[str, List[Bookmaker]] = field(default_factory=dict)
    entries: Dict[IndexKey, List[Outcome]] = field(default_factory=dict)

    def add(self, subject: str, bookmaker: Bookmaker, side: str, outcome: Outcome) -> None:
        if subject not in self.bookmakers:
            self.subjects.append(subject)
            self.bookmakers[subject] = []
        offering = self.bookmakers[subject]
        if all(book.key != bookmaker.key for book in offering):
            offering.append(bookmaker)
        self.entries.setdefault((subject, bookmaker.key, side), []).append(outcome)

    def outcomes(self, subject: str, bookmaker_key: str, side: str) -> List[Outcome]:
        return self.entries.get((subject, bookmaker_key, side), [])


def build_index(game: Game, family: MarketFamily) -> OutcomeIndex:
    index = OutcomeIndex()
    for bookmaker in game.bookmakers:
        for outcome in family_outcomes(bookmaker, family):
            side = side_for(outcome, family, game)
            if side is None:
                continue
            index.add(subject_for(outcome, family), bookmaker, side, outcome)
    return index


def _same_bookmaker(book_a: Bookmaker, book_b: Bookmaker) -> bool:
    # Regional feeds of one bookmaker carry distinct keys but share a title.
    if book_a.key == book_b.key:
        return True
    return book_a.title.strip().lower() == book_b.title.strip().lower()


def generate_candidates(index: OutcomeIndex) -> Iterator[Candidate]:
    """Yield every over/under combination for every ordered bookmaker pair.

    Both (a, b) and (b, a) are visited: the over always comes from the first
    bookmaker of the pair and the under from the second.
    """
    for subject in index.subjects:
        for book_a, book_b in itertools.permutations(index.bookmakers[subject], 2):
            if _same_bookmaker(book_a, book_b):
                continue
            overs = index.outcomes(subject, book_a.key, SIDE_OVER)
            unders = index.outcomes(subject, book_b.key, SIDE_UNDER)
            for over, under in itertools.product(overs, unders):
                yield Candidate(subject, book_a, over, book_b, under)
