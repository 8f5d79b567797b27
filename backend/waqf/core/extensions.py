"""Flask extension instances and initialization helpers."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Import-safe extension objects; bound to an app in ``init_app``.
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()

REDIS_EXTENSION_KEY = "redis_client"
REFRESH_STORE_EXTENSION_KEY = "refresh_token_store"


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and the refresh token store.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`waqf.models` package to ensure SQLAlchemy metadata is ready for
        migrations.

    Notes
    -----
    Stateful clients (Redis, the refresh token store) are constructed here and
    kept on ``app.extensions`` so their lifetime follows the application.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from waqf import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    redis_url = app.config.get("REDIS_URL")
    if redis_url:
        client = redis.Redis.from_url(redis_url)
        try:
            client.ping()
        except RedisError as exc:
            raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
        app.extensions[REDIS_EXTENSION_KEY] = client
    else:
        app.extensions.pop(REDIS_EXTENSION_KEY, None)

    app.extensions[REFRESH_STORE_EXTENSION_KEY] = _build_refresh_store(app)


def _build_refresh_store(app: Flask):
    """Instantiate the refresh token store selected by ``REFRESH_TOKEN_BACKEND``."""
    backend = str(app.config.get("REFRESH_TOKEN_BACKEND", "sql")).lower()
    if backend == "redis":
        from waqf.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore

        client = app.extensions.get(REDIS_EXTENSION_KEY)
        if client is None:
            raise RuntimeError("REFRESH_TOKEN_BACKEND=redis requires REDIS_URL.")
        return RedisRefreshTokenStore(r=client)
    if backend == "sql":
        from waqf.infra.sqlalchemy.sql_refresh_token_store import SQLRefreshTokenStore

        return SQLRefreshTokenStore()
    raise RuntimeError(f"Unknown REFRESH_TOKEN_BACKEND: {backend!r}")


def get_refresh_store():
    """Return the refresh token store bound to the current application."""
    return current_app.extensions[REFRESH_STORE_EXTENSION_KEY]
