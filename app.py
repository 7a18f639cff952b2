from __future__ import annotations

import argparse
import logging
import socket
from typing import Optional

from flask import Flask, jsonify, request

import settings
from config import DEFAULT_SPORT_KEY, MARKET_OPTIONS
from odds_api import KeyRotation, OddsApiClient
from scanner import run_live_scan, run_scan

settings.apply_settings()

app = Flask(__name__)
ENV_API_KEYS = settings.api_keys()

logger = logging.getLogger(__name__)


def _error(message: str, code: int) -> tuple:
    return jsonify({"success": False, "error": message, "error_code": code}), code


def _parse_stake(value) -> float:
    try:
        stake = float(value) if value is not None else settings.stake()
    except (TypeError, ValueError):
        return settings.stake()
    return stake if stake > 0 else settings.stake()


def _parse_string_list(value) -> Optional[list]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, str)] or None


@app.route("/markets")
def markets() -> tuple:
    return jsonify({"markets": MARKET_OPTIONS}), 200


@app.route("/scan", methods=["POST"])
def scan() -> tuple:
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        return _error("Invalid JSON payload", 400)
    if isinstance(payload, list):
        payload = {"games": payload}
    if not isinstance(payload, dict):
        return _error("Scan payload must be a JSON object or a list of games", 400)
    if "games" not in payload:
        return _error("Scan payload is missing 'games'", 400)
    result = run_scan(
        payload.get("games"),
        markets=_parse_string_list(payload.get("markets")),
        stake_amount=_parse_stake(payload.get("stake")),
        max_workers=settings.max_workers(),
    )
    status = 200 if result.get("success") else result.get("error_code", 500)
    return jsonify(result), status


@app.route("/scan/live", methods=["POST"])
def scan_live() -> tuple:
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return _error("Scan payload must be a JSON object", 400)
    keys = ENV_API_KEYS
    if not keys:
        return _error("API key is required", 400)
    sport = payload.get("sport")
    sport_key = sport.strip() if isinstance(sport, str) and sport.strip() else DEFAULT_SPORT_KEY
    client = OddsApiClient(KeyRotation(list(keys)))
    result = run_live_scan(
        client,
        sport_key,
        markets=_parse_string_list(payload.get("markets")),
        regions=_parse_string_list(payload.get("regions")) or settings.regions(),
        stake_amount=_parse_stake(payload.get("stake")),
        max_workers=settings.max_workers(),
    )
    status = 200 if result.get("success") else result.get("error_code", 500)
    return jsonify(result), status


def _port_available(port: int) -> bool:
    if port <= 0:
        return False
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.settimeout(0.5)
        try:
            sock.bind(("127.0.0.1", port))
        except OSError:
            return False
    return True


def _choose_port(preferred: Optional[int]) -> int:
    candidates = [preferred] if preferred else []
    candidates.extend([5000, 5050, 8000])
    for port in dict.fromkeys(candidates):
        if _port_available(port):
            return port
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Sports odds arbitrage detector server")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to run the local server on (default 5000, auto-fallback if busy)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = _choose_port(args.port)
    logger.info("Serving arbitrage detector on port %s", port or "auto")
    app.run(port=port or 0, debug=False)


if __name__ == "__main__":
    main()
