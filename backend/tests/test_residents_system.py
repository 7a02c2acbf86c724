"""
Resident registry, health endpoint and app-level plumbing tests.
"""

import pytest

from rta import create_app
from rta.config import TestConfig


class TestResidents:

    def test_list_all(self, alice_client):
        resp = alice_client.get("/api/residents")
        assert resp.status_code == 200
        residents = resp.get_json()
        assert len(residents) == 6
        first = residents[0]
        assert first["name"] == "Ion Popescu"
        assert first["residentId"] == "MD2304981"
        assert first["registrationDate"] == "2022-06-15T00:00:00Z"
        assert first["data"]["email"] == "ipopescu@mail.md"

    @pytest.mark.parametrize("source", ["internal", "external"])
    def test_filter_by_source(self, alice_client, source):
        residents = alice_client.get(f"/api/residents?source={source}").get_json()
        assert len(residents) == 3
        assert {r["source"] for r in residents} == {source}

    def test_invalid_source(self, alice_client):
        assert alice_client.get("/api/residents?source=foreign").status_code == 400

    def test_get_by_id(self, alice_client):
        first = alice_client.get("/api/residents").get_json()[0]
        resp = alice_client.get(f"/api/residents/{first['id']}")
        assert resp.status_code == 200
        assert resp.get_json() == first

    def test_unknown_resident(self, alice_client):
        assert alice_client.get("/api/residents/999").status_code == 404


class TestHealth:

    def test_health_ok(self, app, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "ok"
        assert data["storage"] == app.config["STORAGE_BACKEND"]
        assert data["residents"] == 6

    def test_health_reports_storage_failure(self, client, repo, monkeypatch):
        def broken():
            raise RuntimeError("storage down")

        monkeypatch.setattr(repo, "count_residents", broken)
        resp = client.get("/api/health")
        assert resp.status_code == 503
        assert resp.get_json()["status"] == "unhealthy"


class TestAppPlumbing:

    def test_unknown_api_route_is_json_404(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert "error" in resp.get_json()

    def test_method_not_allowed_is_json(self, client):
        resp = client.delete("/api/login")
        assert resp.status_code == 405
        assert "error" in resp.get_json()

    def test_unexpected_error_is_generic_500(self, alice_client, repo, monkeypatch):
        def broken(user_id):
            raise RuntimeError("boom: secret internals")

        monkeypatch.setattr(repo, "list_orders_by_user", broken)
        resp = alice_client.get("/api/orders")
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Internal server error"}

    def test_cors_allows_dev_origin(self, app, client):
        origin = app.config["CORS_ALLOWED_ORIGINS"][0]
        resp = client.get("/api/health", headers={"Origin": origin})
        assert resp.headers["Access-Control-Allow-Origin"] == origin
        assert resp.headers["Access-Control-Allow-Credentials"] == "true"

    def test_cors_ignores_other_origins(self, client):
        resp = client.get("/api/health", headers={"Origin": "https://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers

    def test_session_cookie_flags(self, app, client):
        resp = client.post("/api/register", json={"username": "dora", "password": "secret123"})
        cookie = resp.headers["Set-Cookie"]
        assert cookie.startswith(f"{app.config['AUTH_COOKIE_NAME']}=")
        assert "HttpOnly" in cookie
        assert "SameSite=Lax" in cookie

    def test_unknown_backend_rejected(self):
        class _Config(TestConfig):
            STORAGE_BACKEND = "redis"

        with pytest.raises(ValueError):
            create_app(_Config)
