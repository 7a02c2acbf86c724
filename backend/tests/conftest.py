"""
Pytest fixtures for RTA backend tests.

Every app-level test runs twice: once on the in-memory store and once on
the SQL store (SQLite in memory). Uploads go to a per-test temp folder.
"""

import io
import os

import pytest

from rta import create_app
from rta.config import TestConfig
from rta.extensions import db
from rta.seed import seed_residents
from rta.services.document_service import DOCX_MIME, XLSX_MIME
from rta.services.session_service import SessionContext
from rta.storage import get_repository


@pytest.fixture(params=["memory", "sql"])
def app(request, tmp_path):
    """Create application for testing on each storage backend."""
    class _Config(TestConfig):
        STORAGE_BACKEND = request.param
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(_Config)

    with app.app_context():
        if request.param == "sql":
            db.create_all()
            seed_residents(get_repository())
        yield app
        db.session.remove()
        if request.param == "sql":
            db.drop_all()


@pytest.fixture
def repo(app):
    return get_repository()


@pytest.fixture
def client(app):
    """Anonymous test client."""
    return app.test_client()


def register(client, username: str, password: str = "secret123", **extra):
    """Register (and thereby log in) a user on this client."""
    payload = {"username": username, "password": password}
    payload.update(extra)
    return client.post("/api/register", json=payload)


@pytest.fixture
def alice_client(app):
    client = app.test_client()
    resp = register(client, "alice", fullName="Alice Ionescu", company="Ministerul Energiei")
    assert resp.status_code == 201
    return client


@pytest.fixture
def bob_client(app):
    client = app.test_client()
    resp = register(client, "bob")
    assert resp.status_code == 201
    return client


@pytest.fixture
def alice(repo, alice_client):
    return repo.get_user_by_username("alice")


@pytest.fixture
def bob(repo, bob_client):
    return repo.get_user_by_username("bob")


def context_for(user) -> SessionContext:
    """Service-level caller context without going through a cookie."""
    return SessionContext(user=user, session=None)


def docx_upload(name: str = "report.docx", payload: bytes = b"x" * 1024, mimetype: str = DOCX_MIME):
    return {"document": (io.BytesIO(payload), name, mimetype)}


def xlsx_upload(name: str = "sheet.xlsx", payload: bytes = b"y" * 2048, mimetype: str = XLSX_MIME):
    return {"document": (io.BytesIO(payload), name, mimetype)}


def stored_files(app) -> list[str]:
    folder = app.config["UPLOAD_FOLDER"]
    if not os.path.isdir(folder):
        return []
    return sorted(os.listdir(folder))
