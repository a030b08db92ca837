# app.py
from flask import Flask, request, jsonify
from flask_cors import CORS

import gacha_fetcher
import log_parser
import settings
from errors import WishError
from logger import get_logger

logger = get_logger(__name__)

app = Flask(__name__)
# VERY permissive CORS for the local desktop shell
CORS(app, resources={r"/api/*": {"origins": "*"}})

ALL_BANNERS = [banner for banner, _ in gacha_fetcher.BANNER_CODES]

ERROR_STATUS = {
    "NotFound": 404,
    "PatternNotFound": 404,
    "AuthExpired": 401,
    "TransportError": 502,
    "ApiError": 502,
    "DecodeError": 502,
    "EnvironmentError": 500,
    "ReadError": 500,
}


@app.errorhandler(WishError)
def handle_wish_error(err: WishError):
    logger.warning("%s: %s", err.kind, err)
    return jsonify({"error": str(err), "kind": err.kind}), ERROR_STATUS.get(err.kind, 400)


# ------------------------------
# GET /api/log-path: where the game log lives
# ------------------------------
@app.get("/api/log-path")
def api_log_path():
    return jsonify({"path": str(log_parser.find_log_file())})


# ------------------------------
# GET /api/wish-url: latest wish history URL from the game log
# ------------------------------
@app.get("/api/wish-url")
def api_wish_url():
    return jsonify({"url": log_parser.auto_extract_wish_url()})


# ------------------------------
# POST /api/fetch: fetch selected banners
# ------------------------------
@app.post("/api/fetch")
def api_fetch():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    raw_url = body.get("url")
    raw_url = raw_url.strip() if isinstance(raw_url, str) else ""
    banners = body.get("banners")
    if banners is None:
        banners = ALL_BANNERS

    if not raw_url:
        return jsonify({"error": "Missing 'url' in JSON body (paste full wish history URL)"}), 400
    if not isinstance(banners, list) or not all(isinstance(b, str) for b in banners):
        return jsonify({"error": "'banners' must be a list of banner names"}), 400

    wishes = gacha_fetcher.fetch_all_wishes(raw_url, banners)

    counts = {}
    for w in wishes:
        counts[w.banner] = counts.get(w.banner, 0) + 1

    return jsonify({
        "status": "ok",
        "items": [w.to_dict() for w in wishes],
        "total": len(wishes),
        "counts_by_banner": counts,
    })


if __name__ == "__main__":
    app.run(host=settings.HOST, port=settings.PORT, debug=settings.FLASK_DEBUG)
