"""CORS policy for the donation front-end calling ``/api/*``."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

ALLOWED_HEADERS = ["Authorization", "Content-Type", "X-Request-ID", "X-Correlation-ID"]
ALLOWED_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]


def allowed_origins(app: Flask) -> list[str]:
    """Origins from ``CORS_ORIGINS``, else the single ``FRONTEND_URL``.

    An empty list means no origin was configured.
    """
    raw = app.config.get("CORS_ORIGINS") or app.config.get("FRONTEND_URL") or ""
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Attach Flask-CORS to the API resources.

    Parameters
    ----------
    app: flask.Flask
        Application whose ``CORS_ORIGINS`` (comma-separated) or
        ``FRONTEND_URL`` and ``CORS_MAX_AGE`` settings are consulted. A blank
        or ``"*"`` origin list allows any origin without credentials; bearer
        tokens travel in the ``Authorization`` header, so the front-end does
        not need cookies either way.
    """
    origins = allowed_origins(app)
    wildcard = len(origins) == 0 or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        allow_headers=ALLOWED_HEADERS,
        methods=ALLOWED_METHODS,
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
