"""Tests for odds_api.py — requests are mocked, no network."""

import unittest
from unittest.mock import MagicMock

import requests

from odds_api import KeyRotation, OddsApiClient, OddsApiError


def _response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = ""
    return resp


class TestKeyRotation(unittest.TestCase):
    def test_wraps_around(self):
        rotation = KeyRotation(["k1", "k2"])
        self.assertEqual(rotation.current(), "k1")
        self.assertEqual(rotation.advance(), "k2")
        self.assertEqual(rotation.advance(), "k1")

    def test_no_keys(self):
        with self.assertRaises(OddsApiError):
            KeyRotation([]).current()


class TestOddsApiClient(unittest.TestCase):
    def _client(self, responses, keys=("k1", "k2", "k3")):
        session = MagicMock()
        session.get.side_effect = responses
        rotation = KeyRotation(list(keys))
        return OddsApiClient(rotation, session=session), session, rotation

    def test_unauthorized_rotates_to_next_key(self):
        client, session, rotation = self._client(
            [_response(401, {"message": "bad key"}), _response(200, [{"id": "e1"}])]
        )
        self.assertEqual(client.fetch_odds("basketball_nba", ["h2h"], ["au"]), [{"id": "e1"}])
        used = [call.kwargs["params"]["apiKey"] for call in session.get.call_args_list]
        self.assertEqual(used, ["k1", "k2"])
        self.assertEqual(rotation.index, 1)
        params = session.get.call_args.kwargs["params"]
        self.assertEqual(params["markets"], "h2h")
        self.assertEqual(params["regions"], "au")
        self.assertEqual(params["oddsFormat"], "decimal")

    def test_rotation_state_survives_between_calls(self):
        client, session, _ = self._client(
            [_response(401), _response(200, []), _response(200, [])]
        )
        client.fetch_odds("basketball_nba", ["h2h"])
        client.fetch_odds("basketball_nba", ["spreads"])
        used = [call.kwargs["params"]["apiKey"] for call in session.get.call_args_list]
        self.assertEqual(used, ["k1", "k2", "k2"])

    def test_all_keys_rejected(self):
        client, session, _ = self._client([_response(401)] * 3)
        with self.assertRaises(OddsApiError):
            client.fetch_odds("basketball_nba", ["h2h"])
        self.assertEqual(session.get.call_count, 3)

    def test_other_errors_raise_with_message(self):
        client, _, _ = self._client([_response(429, {"message": "Usage quota has been reached"})])
        with self.assertRaisesRegex(OddsApiError, "quota"):
            client.fetch_odds("basketball_nba", ["h2h"])

    def test_network_error(self):
        client, _, _ = self._client(requests.ConnectionError("down"))
        with self.assertRaisesRegex(OddsApiError, "Network error"):
            client.fetch_event_ids("basketball_nba")

    def test_player_props_fetch_each_event(self):
        event_odds = {"id": "e1", "home_team": "A", "away_team": "B", "bookmakers": []}
        client, session, _ = self._client(
            [
                _response(200, [{"id": "e1"}, {"id": "e2"}, {"name": "no id"}]),
                _response(200, event_odds),
                _response(200, dict(event_odds, id="e2")),
            ]
        )
        events = client.fetch_player_props("basketball_nba", ["player_points"], ["au"])
        self.assertEqual([event["id"] for event in events], ["e1", "e2"])
        urls = [call.args[0] for call in session.get.call_args_list]
        self.assertTrue(urls[0].endswith("/sports/basketball_nba/events/"))
        self.assertTrue(urls[1].endswith("/sports/basketball_nba/events/e1/odds"))

    def test_unexpected_payload_shape(self):
        client, _, _ = self._client([_response(200, {"message": "not a list"})])
        with self.assertRaises(OddsApiError):
            client.fetch_odds("basketball_nba", ["h2h"])


if __name__ == "__main__":
    unittest.main()
