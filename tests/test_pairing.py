"""Tests for pairing.py — indexing and ordered candidate generation."""

import types
import unittest

from config import MARKET_FAMILIES
from models import parse_game
from pairing import build_index, generate_candidates

from helpers import bookmaker, game, market, outcome

POINTS = MARKET_FAMILIES["player_points"]


def _two_sided_book(key, title=None, player="Jalen Brunson"):
    return bookmaker(
        key,
        [
            market(
                "player_points",
                [
                    outcome("Over", 1.9, 25.5, player),
                    outcome("Under", 1.9, 25.5, player),
                ],
            )
        ],
        title=title,
    )


class TestBuildIndex(unittest.TestCase):
    def test_groups_by_subject_bookmaker_and_side(self):
        doc = game(
            [
                _two_sided_book("sportsbet"),
                _two_sided_book("sportsbet", player="Jayson Tatum"),
                _two_sided_book("tab"),
            ]
        )
        index = build_index(parse_game(doc), POINTS)
        self.assertEqual(index.subjects, ["Jalen Brunson", "Jayson Tatum"])
        self.assertEqual([b.key for b in index.bookmakers["Jalen Brunson"]], ["sportsbet", "tab"])
        self.assertEqual(len(index.outcomes("Jalen Brunson", "tab", "over")), 1)
        self.assertEqual(index.outcomes("Jayson Tatum", "tab", "over"), [])

    def test_is_lazy(self):
        index = build_index(parse_game(game([_two_sided_book("a"), _two_sided_book("b")])), POINTS)
        self.assertIsInstance(generate_candidates(index), types.GeneratorType)


class TestGenerateCandidates(unittest.TestCase):
    def test_visits_both_orderings(self):
        doc = game([_two_sided_book("sportsbet"), _two_sided_book("tab")])
        pairs = [
            (c.bookmaker_a.key, c.bookmaker_b.key)
            for c in generate_candidates(build_index(parse_game(doc), POINTS))
        ]
        self.assertEqual(pairs, [("sportsbet", "tab"), ("tab", "sportsbet")])

    def test_ordered_pair_count(self):
        doc = game([_two_sided_book(key) for key in ("a", "b", "c")])
        candidates = list(generate_candidates(build_index(parse_game(doc), POINTS)))
        self.assertEqual(len(candidates), 6)

    def test_cross_product_of_sides(self):
        doc = game(
            [
                bookmaker(
                    "a",
                    [
                        market(
                            "player_points",
                            [outcome("Over", 2.0, 24.5), outcome("Over", 2.4, 26.5)],
                        ),
                        market("player_points_alternate", [outcome("Over", 3.0, 28.5)]),
                    ],
                ),
                bookmaker(
                    "b",
                    [market("player_points", [outcome("Under", 2.0, 24.5), outcome("Under", 1.7, 26.5)])],
                ),
            ]
        )
        candidates = list(generate_candidates(build_index(parse_game(doc), POINTS)))
        self.assertEqual(len(candidates), 6)
        self.assertTrue(all(c.over.name == "Over" and c.under.name == "Under" for c in candidates))

    def test_never_pairs_a_bookmaker_with_itself(self):
        doc = game(
            [
                _two_sided_book("sportsbet", title="Sportsbet"),
                _two_sided_book("sportsbet", title="Sportsbet AU"),
            ]
        )
        self.assertEqual(list(generate_candidates(build_index(parse_game(doc), POINTS))), [])

    def test_shared_title_distinct_keys_never_pair(self):
        doc = game(
            [
                _two_sided_book("betfair_ex_au", title="Betfair"),
                _two_sided_book("betfair_sb_au", title="Betfair"),
            ]
        )
        candidates = list(generate_candidates(build_index(parse_game(doc), POINTS)))
        self.assertEqual(candidates, [])

    def test_single_bookmaker_yields_nothing(self):
        doc = game([_two_sided_book("sportsbet")])
        self.assertEqual(list(generate_candidates(build_index(parse_game(doc), POINTS))), [])


if __name__ == "__main__":
    unittest.main()
