"""Pytest fixtures configuring the app, a fresh schema per test and doubles.

Each test gets its own tables on an in-memory SQLite database, so data
committed by a Unit of Work never leaks between cases.
"""

from __future__ import annotations

import os

import pytest
from customer_auth.core.config import TestingConfig
from customer_auth.core.extensions import db as _db  # Flask-SQLAlchemy instance
from customer_auth.factory import create_app  # application factory under test
from customer_auth.services._shared.ports import InMemoryVendorAPI


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestingConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture()
def vendor_api(app):
    """Install a fresh vendor double as the app-wide unscoped client."""
    api = InMemoryVendorAPI()
    previous = app.extensions.get("vendor_api")
    app.extensions["vendor_api"] = api
    yield api
    app.extensions["vendor_api"] = previous


@pytest.fixture()
def db(app, vendor_api):
    """Create the schema inside an app context and drop it afterwards.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(db):
    """Return the Flask-scoped session the services and factories share."""
    return db.session


@pytest.fixture()
def upstream_tx_log(db, monkeypatch):
    """Record ``(method, in_transaction)`` for every vendor double call."""
    seen: list[tuple[str, bool]] = []
    record = InMemoryVendorAPI._record

    def _record(self, method):
        seen.append((method, db.session().in_transaction()))
        record(self, method)

    monkeypatch.setattr(InMemoryVendorAPI, "_record", _record)
    return seen


@pytest.fixture()
def client(app, db):
    """Flask test client; requests run against the per-test schema."""
    return app.test_client()


@pytest.fixture()
def cli_runner(app, db):
    """Click runner bound to the Flask CLI."""
    return app.test_cli_runner()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the Flask-scoped session ---------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    from tests.factories import SQLAlchemySession

    if "db" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
