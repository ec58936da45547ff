"""Flask front end: POST /log/ ingestion, help page, and health check."""

import logging

from flask import Flask, Response, abort, jsonify, request
from werkzeug.exceptions import BadRequest

from http_logger.channel import IntakeChannel
from http_logger.config import Config
from http_logger.handler import MISSING_FIELDS_MESSAGE, classify, ingest
from http_logger.models import Outcome
from http_logger.writer import LogWriter

logger = logging.getLogger(__name__)

HELP_PAGE = """
<html>
    <head>
        <title>JS error logger server</title>
    </head>
    <body>
        <h1>JS error logger server.</h1>
        <p>
            POST form fields named <code>debug</code>, <code>info</code>,
            <code>warning</code> or <code>error</code> to <code>/log/</code>.
            Each field is appended to the log file as one line.
        </p>
        <p>
            Responses are JSON: <code>{"success": {...}, "errors": {...}}</code>.
            200 means every field was accepted, 206 means some were not,
            400 means no known field was present.
        </p>
    </body>
</html>"""

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _collect_fields() -> dict:
    """Merge a top-level JSON object, the query string and the form body."""
    fields = {}
    if request.is_json:
        data = request.get_json()
        if isinstance(data, dict):
            fields.update(data)
    fields.update(request.values.to_dict())
    return fields


def create_app(config: Config, channel: IntakeChannel,
               writer: LogWriter | None = None) -> Flask:
    """Flask application factory."""
    app = Flask(__name__)
    app.config["REMAP_BAD_REQUEST"] = config.remap_bad_request
    app.config["components"] = {
        "config": config,
        "channel": channel,
        "writer": writer,
    }

    @app.route("/log/", methods=["POST"])
    def log_data():
        try:
            fields = _collect_fields()
        except BadRequest as exc:
            return Response(exc.description, status=400, mimetype="text/plain")

        result = ingest(fields, channel)
        outcome = classify(result)

        if outcome is Outcome.BAD_REQUEST:
            return Response(MISSING_FIELDS_MESSAGE, status=400, mimetype="text/plain")
        if outcome is Outcome.PARTIAL:
            return jsonify(result.to_dict()), 206
        return jsonify(result.to_dict()), 200

    if config.serve_help:
        @app.route("/", methods=ALL_METHODS)
        def api_help():
            return Response(HELP_PAGE, status=200, mimetype="text/html")
    else:
        @app.route("/", methods=ALL_METHODS)
        def forbidden():
            abort(403)

    @app.route("/health")
    def health():
        return jsonify({
            "status": "ok",
            "pending": channel.pending,
            "written": writer.written if writer else 0,
            "failed": writer.failed if writer else 0,
            "writer": writer.state.value if writer else None,
        })

    @app.after_request
    def remap_bad_request(response):
        if app.config["REMAP_BAD_REQUEST"] and response.status_code == 400:
            logger.info("Bad request on %s answered as 200: %s",
                        request.path, response.get_data(as_text=True))
            response.status_code = 200
        return response

    return app
