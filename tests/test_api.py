"""
Tests for the Flask adapter, using the in-memory fake store.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from clinicguard.api.app import create_app
from clinicguard.config import JWT_ALGORITHM, SECRET_KEY


def bearer(sub, **claims):
    payload = {"sub": sub, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
    payload.update(claims)
    return {"Authorization": f"Bearer {jwt.encode(payload, SECRET_KEY, algorithm=JWT_ALGORITHM)}"}


@pytest.fixture
def client(store):
    app = create_app(store=store)
    app.config["TESTING"] = True
    return app.test_client()


# ── Auth ─────────────────────────────────────────────────────────────

def test_health_is_public(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "healthy"


def test_missing_token(client):
    assert client.get("/api/me/context").status_code == 401


def test_bad_header_and_bad_signature(client):
    assert client.get("/api/me/context", headers={"Authorization": "Token x"}).status_code == 401
    forged = jwt.encode({"sub": "sa"}, "not-the-secret", algorithm=JWT_ALGORITHM)
    resp = client.get("/api/me/context", headers={"Authorization": f"Bearer {forged}"})
    assert resp.status_code == 401


def test_expired_token(client):
    headers = bearer("sa", exp=datetime.now(timezone.utc) - timedelta(minutes=1))
    assert client.get("/api/me/context", headers=headers).status_code == 401


def test_unknown_principal(client):
    resp = client.get("/api/me/context", headers=bearer("nobody"))
    assert resp.status_code == 401


# ── Context / check ──────────────────────────────────────────────────

def test_context_for_doctor(client):
    data = client.get("/api/me/context", headers=bearer("doc-a")).get_json()
    assert data["user"]["role"] == "Doctor"
    assert data["tenant"]["id"] == "A"
    assert data["default_view"] == "consultation"
    assert data["blocked_reason"] is None
    assert "prescription.dispense" in data["capabilities"]
    assert "lab-work" in data["views"]


def test_context_pending_clinic(client, store):
    store.tenants["B"].status = "pending"
    data = client.get("/api/me/context", headers=bearer("nurse-b")).get_json()
    assert data["blocked_reason"] == "tenant pending approval"


def test_check(client):
    resp = client.post("/api/authz/check", headers=bearer("doc-a"),
                       json={"capability": "patient.delete", "view": "pharmacy", "tenant_id": "B"})
    data = resp.get_json()
    assert resp.status_code == 200
    assert data["capability"] == {"allowed": False, "reason": "missing capability"}
    assert data["view"] == {"allowed": True, "reason": None}
    assert data["tenant"] == {"allowed": False, "reason": "cross-tenant access"}


def test_check_unknown_capability_is_bad_request(client):
    resp = client.post("/api/authz/check", headers=bearer("doc-a"), json={"capability": "rocket.launch"})
    assert resp.status_code == 400


def test_check_requires_a_question(client):
    resp = client.post("/api/authz/check", headers=bearer("doc-a"), json={})
    assert resp.status_code == 400


@pytest.mark.parametrize("body", [
    ["patient.view"],
    "patient.view",
    {"view": ["pharmacy"]},
    {"capability": ["patient.view"]},
    {"tenant_id": {"id": "A"}},
])
def test_check_rejects_malformed_body(client, body):
    resp = client.post("/api/authz/check", headers=bearer("doc-a"), json=body)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


# ── Tenants ──────────────────────────────────────────────────────────

def test_list_tenants(client):
    sa = client.get("/api/tenants", headers=bearer("sa")).get_json()
    assert [t["id"] for t in sa["tenants"]] == ["A", "B"]
    nurse = client.get("/api/tenants", headers=bearer("nurse-b")).get_json()
    assert [t["id"] for t in nurse["tenants"]] == ["B"]


def test_create_tenant(client):
    resp = client.post("/api/tenants", headers=bearer("sa"), json={"name": "Test Hospital!! "})
    assert resp.status_code == 201
    assert resp.get_json()["tenant"]["slug"] == "test-hospital"

    resp = client.post("/api/tenants", headers=bearer("admin-a"), json={"name": "Sneaky"})
    assert resp.status_code == 403
    body = resp.get_json()
    assert body["error"] == "You don't have permission"
    assert body["reason"] == "only super admins can create tenants"


@pytest.mark.parametrize("body", [["Gamma"], {"name": 5}, {"name": "Gamma", "email": ["g@x.test"]}])
def test_create_tenant_rejects_malformed_body(client, store, body):
    resp = client.post("/api/tenants", headers=bearer("sa"), json=body)
    assert resp.status_code == 400
    assert store.mutations() == []


def test_members(client):
    resp = client.get("/api/tenants/A/members", headers=bearer("admin-a"))
    assert {m["id"] for m in resp.get_json()["members"]} == {"admin-a", "doc-a"}
    assert client.get("/api/tenants/B/members", headers=bearer("admin-a")).status_code == 403


def test_change_member_role(client, store):
    resp = client.patch("/api/tenants/A/members/doc-a/role", headers=bearer("admin-a"),
                        json={"role": "lab_tech"})
    assert resp.status_code == 200
    assert resp.get_json()["role"] == "Lab Tech"
    assert store.users["doc-a"].role == "lab_tech"

    resp = client.patch("/api/tenants/A/members/sa/role", headers=bearer("admin-a"),
                        json={"role": "Doctor"})
    assert resp.status_code == 403
    assert resp.get_json()["reason"] == "cannot modify super admin role"

    resp = client.patch("/api/tenants/A/members/doc-a/role", headers=bearer("admin-a"),
                        json={"role": "wizard"})
    assert resp.status_code == 400


@pytest.mark.parametrize("body", [{"role": 3}, ["Doctor"], {"role": None}])
def test_change_member_role_rejects_malformed_body(client, store, body):
    resp = client.patch("/api/tenants/A/members/doc-a/role", headers=bearer("admin-a"), json=body)
    assert resp.status_code == 400
    assert store.users["doc-a"].role == "Doctor"


def test_remove_member(client, store):
    resp = client.delete("/api/tenants/A/members/admin-a", headers=bearer("admin-a"))
    assert resp.status_code == 403
    assert resp.get_json()["reason"] == "cannot remove yourself"

    resp = client.delete("/api/tenants/A/members/nurse-b", headers=bearer("admin-a"))
    assert resp.status_code == 404

    resp = client.delete("/api/tenants/A/members/doc-a", headers=bearer("admin-a"))
    assert resp.status_code == 200
    assert store.users["doc-a"].status == "deactivated"
