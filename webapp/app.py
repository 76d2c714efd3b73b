"""
Flask application factory for the snippet JSON API.
"""
from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, g, request

from gitsnip.config import GitSnipConfig, get_config
from gitsnip.observability import (
    bind_request_id,
    clear_request_context,
    generate_request_id,
    setup_structlog_logging,
)

logger = logging.getLogger(__name__)


def create_app(config: Optional[GitSnipConfig] = None, service=None) -> Flask:
    """Build the app.

    ``service`` overrides the SnippetService taken from the composition root.
    """
    cfg = config or get_config()
    setup_structlog_logging(cfg.LOG_LEVEL)

    app = Flask(__name__)
    app.secret_key = cfg.SECRET_KEY
    app.config["GITSNIP_CONFIG"] = cfg
    if service is not None:
        app.config["SNIPPET_SERVICE"] = service

    from webapp.routes import snippets_bp

    app.register_blueprint(snippets_bp)

    @app.before_request
    def _correlation_bind():
        """Bind a short request_id to structlog context and store for response header."""
        incoming = str(request.headers.get("X-Request-ID", "")).strip()
        rid = incoming or generate_request_id()
        bind_request_id(rid)
        g.request_id = rid

    @app.after_request
    def _add_request_id_header(resp):
        rid = g.get("request_id")
        if rid:
            resp.headers["X-Request-ID"] = rid
        return resp

    @app.teardown_request
    def _clear_context(_exc):
        clear_request_context()

    return app
