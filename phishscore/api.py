"""Main Flask API for PhishScore.

Run: python -m phishscore.api
"""

import logging
from datetime import date
from typing import List, Optional, Tuple

import redis as redis_lib
from flask import Flask, Response, abort, current_app, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from phishscore import config as settings
from phishscore.app.scanner import scan_batch, scan_url
from phishscore.batch import export_csv, parse_url_list, summarize
from phishscore.db import HistoryRepository

logger = logging.getLogger("api")


def _storage_uri(redis_url: Optional[str]) -> str:
    """Prefer Redis for rate-limit counters when it is reachable."""
    if not redis_url:
        return "memory://"
    try:
        redis_lib.from_url(redis_url).ping()
        logger.info("Using Redis at %s for rate limiting", redis_url)
        return redis_url
    except Exception:
        logger.exception("Failed to connect to Redis, falling back to in-memory limiter")
        return "memory://"


def require_api_key() -> None:
    api_key = current_app.config.get("API_KEY")
    if not api_key:
        return
    key = request.headers.get("X-API-Key") or request.args.get("api_key")
    if not key or key != api_key:
        abort(401, description="Invalid or missing API key")


def _batch_urls() -> Tuple[Optional[List[str]], Optional[Tuple[Response, int]]]:
    """Pull the URL list out of a batch request body, or build the error response."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, (jsonify({"error": "missing JSON body"}), 400)
    if "urls" in data:
        raw = data["urls"]
        if not isinstance(raw, list) or not all(isinstance(u, str) for u in raw):
            return None, (jsonify({"error": "'urls' must be a list of strings"}), 400)
        urls = [u.strip() for u in raw if u.strip()]
    elif isinstance(data.get("text"), str):
        urls = parse_url_list(data["text"])
    else:
        return None, (jsonify({"error": "missing 'urls' or 'text' in JSON body"}), 400)

    if not urls:
        return None, (jsonify({"error": "no urls to scan"}), 400)
    max_batch = current_app.config["MAX_BATCH"]
    if len(urls) > max_batch:
        return None, (jsonify({"error": "batch too large", "max_batch": max_batch}), 400)
    return urls, None


def create_app(repository: Optional[HistoryRepository] = None, config: Optional[dict] = None) -> Flask:
    app = Flask(__name__)
    app.config.update(settings.app_defaults())
    if config:
        app.config.update(config)

    if repository is None:
        repository = HistoryRepository(app.config["DATABASE_URL"], capacity=app.config["HISTORY_CAPACITY"])
    app.extensions["history"] = repository

    limiter = Limiter(
        app=app,
        key_func=get_remote_address,
        default_limits=[app.config["RATE_LIMIT"]],
        storage_uri=_storage_uri(app.config.get("REDIS_URL")),
    )

    if app.config.get("API_KEY"):
        logger.info("API key enabled")

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "version": settings.VERSION})

    @app.route("/scan", methods=["POST"])
    @limiter.limit("30 per minute")
    def scan():
        require_api_key()
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "url" not in data:
            return jsonify({"error": "missing 'url' in JSON body"}), 400
        if not isinstance(data["url"], str):
            return jsonify({"error": "'url' must be a string"}), 400

        url = data["url"].strip()
        if not url:
            return jsonify({"error": "empty url"}), 400

        try:
            assessment = scan_url(url)
        except Exception as e:
            logger.exception("Scanner failed: %s", e)
            return jsonify({"error": "scanner_failed", "detail": str(e)}), 500

        entry = repository.append(url, assessment.classification, assessment.combined_score)
        result = assessment.to_dict()
        result["history_id"] = entry["id"]
        return jsonify(result), 200

    @app.route("/batch", methods=["POST"])
    @limiter.limit("10 per minute")
    def batch():
        require_api_key()
        urls, error = _batch_urls()
        if error:
            return error
        results = scan_batch(urls, max_workers=app.config["BATCH_WORKERS"])
        return jsonify({
            "count": len(results),
            "summary": summarize(results),
            "results": [r.to_dict() for r in results],
        }), 200

    @app.route("/batch/export", methods=["POST"])
    @limiter.limit("10 per minute")
    def batch_export():
        require_api_key()
        urls, error = _batch_urls()
        if error:
            return error
        results = scan_batch(urls, max_workers=app.config["BATCH_WORKERS"])
        filename = f"phishing-scan-{date.today().isoformat()}.csv"
        return Response(
            export_csv(results),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/history", methods=["GET"])
    @limiter.limit("20 per minute")
    def history():
        require_api_key()
        try:
            limit = int(request.args.get("limit", repository.capacity))
        except ValueError:
            return jsonify({"error": "limit must be integer"}), 400
        rows = repository.list(limit=max(1, limit))
        return jsonify({"count": len(rows), "rows": rows})

    @app.route("/history/stats", methods=["GET"])
    @limiter.limit("20 per minute")
    def history_stats():
        require_api_key()
        return jsonify(repository.stats())

    @app.route("/history", methods=["DELETE"])
    @limiter.limit("10 per minute")
    def clear_history():
        require_api_key()
        return jsonify({"cleared": repository.clear()})

    @app.route("/history/<int:scan_id>", methods=["GET"])
    @limiter.limit("20 per minute")
    def get_history_item(scan_id: int):
        require_api_key()
        item = repository.get(scan_id)
        if not item:
            return jsonify({"error": "not_found"}), 404
        return jsonify(item)

    @app.route("/history/<int:scan_id>", methods=["DELETE"])
    @limiter.limit("20 per minute")
    def remove_history_item(scan_id: int):
        require_api_key()
        if not repository.remove(scan_id):
            return jsonify({"error": "not_found"}), 404
        return jsonify({"removed": scan_id})

    return app


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    create_app().run(host="0.0.0.0", port=settings.PORT, debug=False)
