"""
Order tests.

Verifies:
- creation, listing and lookup scoped to the owner
- 403/404 precedence for foreign and unknown orders
- status transitions (strict table and permissive mode)
- "Order Status Updated" notification and activity on every change
"""

import pytest

from rta.errors import ConflictError, ValidationError
from rta.services import order_service


def _order(order_id="ORD-1", status="pending payment", total=3, doc_type="Raport", price=None):
    payload = {
        "orderId": order_id,
        "status": status,
        "totalDocuments": total,
        "documentType": doc_type,
    }
    if price is not None:
        payload["price"] = price
    return payload


class TestCreateOrder:

    def test_create_returns_order(self, alice_client, alice):
        resp = alice_client.post("/api/orders", json=_order(price=150))
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["orderId"] == "ORD-1"
        assert data["userId"] == alice.id
        assert data["status"] == "pending payment"
        assert data["totalDocuments"] == 3
        assert data["documentType"] == "Raport"
        assert data["price"] == 150
        assert data["createdAt"].endswith("Z")

    def test_price_is_optional(self, alice_client):
        resp = alice_client.post("/api/orders", json=_order())
        assert resp.status_code == 201
        assert resp.get_json()["price"] is None

    def test_status_defaults_to_pending(self, alice_client):
        payload = _order()
        del payload["status"]
        resp = alice_client.post("/api/orders", json=payload)
        assert resp.status_code == 201
        assert resp.get_json()["status"] == "pending"

    def test_duplicate_order_id_rejected(self, alice_client, bob_client):
        assert alice_client.post("/api/orders", json=_order()).status_code == 201
        resp = bob_client.post("/api/orders", json=_order())
        assert resp.status_code == 400
        assert "already exists" in resp.get_json()["error"]
        assert bob_client.get("/api/orders").get_json() == []

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            _order(order_id=""),
            _order(status="shipped"),
            _order(total="3"),
            _order(total=-1),
            _order(total=True),
            _order(doc_type="  "),
            _order(price=12.5),
        ],
    )
    def test_invalid_payload(self, alice_client, payload):
        resp = alice_client.post("/api/orders", json=payload)
        assert resp.status_code == 400
        assert alice_client.get("/api/orders").get_json() == []

    def test_create_notifies_and_records(self, alice_client, repo, alice):
        alice_client.post("/api/orders", json=_order())

        titles = [n.title for n in repo.list_notifications_by_user(alice.id)]
        assert "New Order Created" in titles
        actions = [a.action for a in repo.list_activities_by_user(alice.id)]
        assert actions[0] == "Order Created"


class TestOrderAccess:

    def test_list_only_own_orders(self, alice_client, bob_client):
        alice_client.post("/api/orders", json=_order("ORD-A1"))
        alice_client.post("/api/orders", json=_order("ORD-A2"))
        bob_client.post("/api/orders", json=_order("ORD-B1"))

        alice_ids = [o["orderId"] for o in alice_client.get("/api/orders").get_json()]
        bob_ids = [o["orderId"] for o in bob_client.get("/api/orders").get_json()]
        assert alice_ids == ["ORD-A1", "ORD-A2"]
        assert bob_ids == ["ORD-B1"]

    def test_get_own_order(self, alice_client):
        created = alice_client.post("/api/orders", json=_order()).get_json()
        resp = alice_client.get(f"/api/orders/{created['id']}")
        assert resp.status_code == 200
        assert resp.get_json() == created

    def test_foreign_order_is_forbidden(self, alice_client, bob_client):
        created = alice_client.post("/api/orders", json=_order()).get_json()
        assert bob_client.get(f"/api/orders/{created['id']}").status_code == 403

        resp = bob_client.patch(f"/api/orders/{created['id']}/status", json={"status": "processing"})
        assert resp.status_code == 403
        assert alice_client.get(f"/api/orders/{created['id']}").get_json()["status"] == "pending payment"

    def test_unknown_order_is_not_found(self, alice_client):
        assert alice_client.get("/api/orders/999").status_code == 404
        resp = alice_client.patch("/api/orders/999/status", json={"status": "processing"})
        assert resp.status_code == 404


class TestStatusUpdates:

    def test_update_status_notifies_owner(self, alice_client, repo, alice):
        created = alice_client.post("/api/orders", json=_order()).get_json()

        resp = alice_client.patch(f"/api/orders/{created['id']}/status", json={"status": "processing"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["status"] == "processing"
        assert data["updatedAt"] >= created["updatedAt"]

        notifications = alice_client.get("/api/notifications").get_json()
        updates = [n for n in notifications if n["title"] == "Order Status Updated"]
        assert len(updates) == 1
        assert updates[0]["isRead"] is False
        assert "processing" in updates[0]["message"]

        actions = [a.action for a in repo.list_activities_by_user(alice.id)]
        assert actions[0] == "Order Status Updated"

    def test_missing_status(self, alice_client):
        created = alice_client.post("/api/orders", json=_order()).get_json()
        resp = alice_client.patch(f"/api/orders/{created['id']}/status", json={})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Status is required"

    def test_status_body_must_be_object(self, alice_client):
        created = alice_client.post("/api/orders", json=_order()).get_json()
        resp = alice_client.patch(f"/api/orders/{created['id']}/status", json=["processing"])
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Request body must be a JSON object"
        assert alice_client.get(f"/api/orders/{created['id']}").get_json()["status"] == "pending payment"

    def test_unknown_status(self, alice_client):
        created = alice_client.post("/api/orders", json=_order()).get_json()
        resp = alice_client.patch(f"/api/orders/{created['id']}/status", json={"status": "lost"})
        assert resp.status_code == 400

    def test_terminal_status_cannot_move(self, alice_client):
        created = alice_client.post("/api/orders", json=_order(status="completed")).get_json()
        resp = alice_client.patch(f"/api/orders/{created['id']}/status", json={"status": "processing"})
        assert resp.status_code == 400
        assert alice_client.get(f"/api/orders/{created['id']}").get_json()["status"] == "completed"

    def test_permissive_mode_allows_any_valid_status(self, app, alice_client):
        app.config["ORDER_STRICT_TRANSITIONS"] = False
        created = alice_client.post("/api/orders", json=_order(status="completed")).get_json()
        resp = alice_client.patch(f"/api/orders/{created['id']}/status", json={"status": "pending"})
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "pending"

    def test_full_lifecycle(self, alice_client):
        created = alice_client.post("/api/orders", json=_order(status="pending")).get_json()
        for status in ("pending payment", "processing", "completed"):
            resp = alice_client.patch(f"/api/orders/{created['id']}/status", json={"status": status})
            assert resp.status_code == 200, status
        assert alice_client.get(f"/api/orders/{created['id']}").get_json()["status"] == "completed"


class TestTransitionTable:

    @pytest.mark.parametrize(
        "current,target,allowed",
        [
            ("pending", "pending payment", True),
            ("pending", "processing", True),
            ("pending", "completed", False),
            ("pending payment", "processing", True),
            ("pending payment", "pending", False),
            ("processing", "completed", True),
            ("processing", "rejected", True),
            ("completed", "processing", False),
            ("rejected", "pending", False),
            ("completed", "completed", True),
        ],
    )
    def test_can_transition(self, current, target, allowed):
        assert order_service.can_transition(current, target) is allowed

    def test_unknown_target_raises(self):
        with pytest.raises(ValidationError):
            order_service.can_transition("pending", "archived")

    def test_duplicate_order_id_is_conflict(self, repo, alice):
        repo.create_order(
            user_id=alice.id, order_id="ORD-X", status="pending",
            total_documents=1, document_type="Raport", price=None,
        )
        with pytest.raises(ConflictError):
            repo.create_order(
                user_id=alice.id, order_id="ORD-X", status="pending",
                total_documents=2, document_type="Raport", price=None,
            )
