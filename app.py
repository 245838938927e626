# app.py - Flask backend
import logging
import threading

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from pydantic import ValidationError

from config import Settings, get_settings
from llm_wrapper import get_chat_answer, make_client
from pydantic_models import ChatRequest, StructuredAnswer

logger = logging.getLogger(__name__)

SERVER_ERROR = "Something went wrong!"
SERVER_ERROR_SUMMARY = "The server encountered an error while processing your request."
BAD_REQUEST_ERROR = "Please POST JSON with 'userInput' field."
BAD_REQUEST_SUMMARY = "Please describe what you would like to know about."

_client_lock = threading.Lock()


def _log_upstream_failure(exc):
    # openai.APIStatusError and requests/httpx errors carry the upstream response
    response = getattr(exc, "response", None)
    if response is None:
        return
    logger.error("Response status: %s", getattr(response, "status_code", None))
    logger.error("Response data: %s", getattr(response, "text", None))


def _get_llm_client(app):
    """
    Return the app's upstream client, building it on first use.

    Built lazily so a missing credential surfaces per request (HTTP 500)
    instead of at startup; one client, and one connection pool, per app.
    """
    settings = app.config["SETTINGS"]
    if settings.use_mock_llm:
        return None
    with _client_lock:
        if app.config["LLM_CLIENT"] is None:
            app.config["LLM_CLIENT"] = make_client(settings)
        return app.config["LLM_CLIENT"]


def create_app(settings: Settings = None, llm_client=None) -> Flask:
    """
    Build the Flask app.

    llm_client is any object with the OpenAI `chat.completions.create` shape;
    when omitted one is built from settings on the first /chat request.
    """
    if settings is None:
        settings = get_settings()

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.config["LLM_CLIENT"] = llm_client
    app.json.sort_keys = False

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()] or "*"
    CORS(app, origins=origins)

    @app.route("/", methods=["GET"])
    def index():
        return "Symptom info chat — POST /chat with {'userInput': '...'}"

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "message": "Server is running"})

    @app.route("/chat", methods=["POST"])
    def chat():
        data = request.get_json(force=True, silent=True)
        try:
            req = ChatRequest.model_validate(data if data is not None else {})
        except ValidationError:
            return jsonify(StructuredAnswer.failure(BAD_REQUEST_ERROR, BAD_REQUEST_SUMMARY).to_json()), 400

        logger.info("Received request with userInput: %s", req.userInput)
        try:
            answer = get_chat_answer(
                req.userInput,
                current_app.config["SETTINGS"],
                client=_get_llm_client(current_app),
            )
        except Exception as e:
            logger.exception("Server error: %s", e)
            _log_upstream_failure(e)
            return jsonify(StructuredAnswer.failure(SERVER_ERROR, SERVER_ERROR_SUMMARY).to_json()), 500

        return jsonify(answer.to_json())

    return app


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = create_app(settings)
    logger.info("Server running on port %s", settings.port)
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
