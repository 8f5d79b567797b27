"""Pytest fixtures for the auth service test-suite.

Services own their transactions (they commit), so isolation comes from a fresh
schema per test on an in-memory SQLite database rather than SAVEPOINTs. The
engine keeps a single static connection, so the data survives across app
contexts within a test.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from typing import Any

import pytest
from flask import Flask

from waqf import create_app
from waqf.core.config import TestingConfig
from waqf.core.extensions import db as _db


@pytest.fixture(scope="session")
def app() -> Flask:
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    application = create_app(TestingConfig, instance_relative_config=False)
    application.logger.setLevel("WARNING")
    return application


@pytest.fixture()
def db(app: Flask) -> Generator[Any, None, None]:
    """Create all tables before the test and drop them afterwards."""
    with app.app_context():
        _db.create_all()
    yield _db
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(app: Flask, db: Any) -> Generator[Any, None, None]:
    """Push an app context for the test and expose the scoped session.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        The Flask-SQLAlchemy session used by repositories and services.
    """
    ctx = app.app_context()
    ctx.push()
    try:
        yield db.session
    finally:
        db.session.remove()
        ctx.pop()


@pytest.fixture()
def client(app: Flask, db: Any):
    """Return a Flask test client over a fresh schema.

    No app context is held open, so each request gets its own ``g`` and
    session like in production.
    """
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the Flask-scoped session ---------------------------
@pytest.fixture(autouse=True)
def _factories_session():
    """Point Factory Boy at the Flask-scoped session proxy."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(_db.session)
    yield
