"""
Flask route handlers exposing the authorization kernel.
"""

import sys
from dataclasses import asdict

from flask import jsonify, request

from clinicguard.api.auth import token_required
from clinicguard.context import accessible_tenants, resolve_context
from clinicguard.errors import (
    Denied,
    MISSING_CAPABILITY,
    PrincipalNotFound,
    TargetNotFound,
    UnknownCapabilityError,
)
from clinicguard.isolation import authorize_tenant_access
from clinicguard.models import TenantSpec
from clinicguard.permissions import has_capability, list_capabilities
from clinicguard.privilege import (
    change_role,
    list_tenant_users,
    provision_tenant,
    remove_member,
)
from clinicguard.roles import normalize_role
from clinicguard.views import accessible_views, authorize_view, default_view_for


GENERIC_DENIAL = "You don't have permission"


def _decision_json(decision):
    return {"allowed": decision.allowed, "reason": decision.reason}


def _json_object():
    """Return the JSON body, which must be an object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _str_field(data, key):
    """Return *key* from *data* as a stripped string, or None when absent."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value.strip()


def _user_json(user):
    data = asdict(user)
    data["role"] = str(normalize_role(user.role))
    return data


def register_routes(app, store):
    """Register all API routes on the Flask *app*."""

    # ── Health / info ────────────────────────────────────────────────

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({
            "service": "Clinic Authorization API",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "context": "/api/me/context",
                "check": "/api/authz/check",
                "tenants": "/api/tenants",
                "health": "/health",
            },
        })

    @app.route("/health", methods=["GET"])
    def health():
        healthy = store is not None
        return jsonify({
            "status": "healthy" if healthy else "unhealthy",
            "checks": {"store": healthy},
        }), 200 if healthy else 503

    # ── Caller context ───────────────────────────────────────────────

    @app.route("/api/me/context", methods=["GET"])
    @token_required
    def get_context():
        user, tenant = resolve_context(store, request.principal_id)
        landing = default_view_for(user.role)
        gate = authorize_view(user, tenant, landing)
        return jsonify({
            "success": True,
            "user": _user_json(user),
            "tenant": asdict(tenant) if tenant else None,
            "default_view": landing,
            "blocked_reason": gate.reason,
            "capabilities": sorted(list_capabilities(user.role)),
            "views": accessible_views(user.role),
        }), 200

    @app.route("/api/authz/check", methods=["POST"])
    @token_required
    def check():
        if not request.is_json:
            return jsonify({"error": "Content-Type must be application/json"}), 400

        data = _json_object()
        capability = _str_field(data, "capability")
        view = _str_field(data, "view")
        tenant_id = _str_field(data, "tenant_id")
        if not (capability or view or tenant_id):
            return jsonify({"error": "capability, view or tenant_id is required"}), 400

        user, tenant = resolve_context(store, request.principal_id)
        result = {"success": True}
        if capability:
            allowed = has_capability(user.role, capability)
            result["capability"] = {
                "allowed": allowed,
                "reason": None if allowed else MISSING_CAPABILITY,
            }
        if view:
            result["view"] = _decision_json(authorize_view(user, tenant, view))
        if tenant_id:
            result["tenant"] = _decision_json(authorize_tenant_access(user, tenant_id))
        return jsonify(result), 200

    # ── Tenants ──────────────────────────────────────────────────────

    @app.route("/api/tenants", methods=["GET"])
    @token_required
    def get_tenants():
        tenants = accessible_tenants(store, request.principal_id)
        return jsonify({
            "success": True,
            "tenants": [asdict(t) for t in tenants],
        }), 200

    @app.route("/api/tenants", methods=["POST"])
    @token_required
    def create_tenant():
        if not request.is_json:
            return jsonify({"error": "Content-Type must be application/json"}), 400

        data = _json_object()
        name = _str_field(data, "name")
        if not name:
            return jsonify({"error": "name is required"}), 400

        spec = TenantSpec(name=name)
        for key in ("email", "phone", "location", "country", "currency", "timezone"):
            value = _str_field(data, key)
            if value:
                setattr(spec, key, value)
        if isinstance(data.get("settings"), dict):
            spec.settings = data["settings"]

        requester, _ = resolve_context(store, request.principal_id)
        tenant = provision_tenant(store, requester, spec)
        return jsonify({"success": True, "tenant": asdict(tenant)}), 201

    @app.route("/api/tenants/<tenant_id>/members", methods=["GET"])
    @token_required
    def get_members(tenant_id):
        requester, _ = resolve_context(store, request.principal_id)
        members = list_tenant_users(store, requester, tenant_id)
        return jsonify({
            "success": True,
            "members": [_user_json(m) for m in members],
        }), 200

    @app.route("/api/tenants/<tenant_id>/members/<user_id>/role", methods=["PATCH"])
    @token_required
    def update_member_role(tenant_id, user_id):
        if not request.is_json:
            return jsonify({"error": "Content-Type must be application/json"}), 400

        new_role = _str_field(_json_object(), "role")
        if not new_role:
            return jsonify({"error": "role is required"}), 400

        requester, _ = resolve_context(store, request.principal_id)
        change_role(store, requester, tenant_id, user_id, new_role)
        return jsonify({"success": True, "role": str(normalize_role(new_role))}), 200

    @app.route("/api/tenants/<tenant_id>/members/<user_id>", methods=["DELETE"])
    @token_required
    def delete_member(tenant_id, user_id):
        requester, _ = resolve_context(store, request.principal_id)
        remove_member(store, requester, tenant_id, user_id)
        return jsonify({"success": True, "message": "Member removed"}), 200

    # ── Error handlers ───────────────────────────────────────────────

    @app.errorhandler(PrincipalNotFound)
    def principal_not_found(e):
        return jsonify({"error": "Unknown principal"}), 401

    @app.errorhandler(Denied)
    def denied(e):
        return jsonify({"error": GENERIC_DENIAL, "reason": e.reason}), 403

    @app.errorhandler(TargetNotFound)
    def target_not_found(e):
        return jsonify({"error": "User not found"}), 404

    @app.errorhandler(UnknownCapabilityError)
    def unknown_capability(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(ValueError)
    def bad_request(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Endpoint not found", "message": str(e)}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed", "message": str(e)}), 405

    @app.errorhandler(500)
    def internal_error(e):
        print(f"[ERROR] Internal error: {e}", file=sys.stderr)
        return jsonify({"error": "Internal server error", "message": str(e)}), 500
