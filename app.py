# app.py — Flask backend
import hmac
import logging

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import VERSION, Settings, configure_logging
from errors import AnalysisFailedError, AuthorizationError, RateLimitExceeded, SymptomCheckerError
from llm_wrapper import build_model_client, get_symptom_analysis, parse_analysis_request, utc_timestamp
from rate_limiter import SlidingWindowRateLimiter

logger = logging.getLogger("bantuhealth.app")

EXTENSION_KEY = "bantuhealth"


def _state() -> dict:
    return current_app.extensions[EXTENSION_KEY]


def _client_key() -> str:
    return request.remote_addr or "unknown"


def _check_api_key(settings: Settings) -> None:
    if not settings.api_secret_key:
        return
    provided = request.headers.get("x-api-key", "")
    if not hmac.compare_digest(provided.encode("utf-8"), settings.api_secret_key.encode("utf-8")):
        logger.warning("Rejected request from %s: bad or missing x-api-key", _client_key())
        raise AuthorizationError()


def create_app(settings: Settings = None, model_client=None, rate_limiter: SlidingWindowRateLimiter = None) -> Flask:
    settings = settings or Settings()
    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = {
        "settings": settings,
        "model_client": model_client or build_model_client(settings),
        "rate_limiter": rate_limiter
        or SlidingWindowRateLimiter(settings.rate_limit_max, settings.rate_limit_window_secs),
    }
    CORS(app, resources={r"/api/*": {"origins": settings.cors_origins}})

    @app.before_request
    def enforce_rate_limit():
        if not request.path.startswith("/api/"):
            return None
        limiter = _state()["rate_limiter"]
        key = _client_key()
        if not limiter.allow(key):
            logger.warning("Rate limit exceeded for %s on %s", key, request.path)
            raise RateLimitExceeded(retry_after=limiter.retry_after(key))
        return None

    @app.errorhandler(SymptomCheckerError)
    def handle_app_error(e: SymptomCheckerError):
        body = e.to_dict()
        if isinstance(e, AnalysisFailedError) and not _state()["settings"].is_production:
            body["details"] = e.detail
        resp = jsonify(body)
        resp.status_code = e.status_code
        if isinstance(e, RateLimitExceeded):
            resp.headers["Retry-After"] = str(e.retry_after)
        return resp

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        resp = jsonify({"error": e.description})
        resp.status_code = e.code
        return resp

    @app.route("/", methods=["GET"])
    def index():
        return "BantuHealth AI — POST /api/analyze-symptoms with {'symptoms': [...], 'additionalInfo': '...'}"

    @app.route("/api/analyze-symptoms", methods=["POST"])
    async def analyze_symptoms():
        state = _state()
        _check_api_key(state["settings"])
        data = request.get_json(force=True, silent=True)
        analysis_request = parse_analysis_request(data)
        result = await get_symptom_analysis(analysis_request, state["settings"], state["model_client"])
        return jsonify(result.model_dump())

    @app.route("/api/model", methods=["GET"])
    def model_info():
        return jsonify({"model": _state()["model_client"].model_name})

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "timestamp": utc_timestamp()})

    @app.route("/api/version", methods=["GET"])
    def version():
        return jsonify({"version": VERSION, "timestamp": utc_timestamp()})

    @app.route("/api/status", methods=["GET"])
    def status():
        return jsonify({"status": "running", "timestamp": utc_timestamp()})

    return app


def main():
    settings = Settings.from_env()
    configure_logging(settings)
    app = create_app(settings)
    logger.info("BantuHealth AI API running on port %d", settings.port)
    logger.info("Environment: %s, model: %s", settings.app_env, app.extensions[EXTENSION_KEY]["model_client"].model_name)
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
