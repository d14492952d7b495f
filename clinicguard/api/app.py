"""
Flask application factory and server entry-point.
"""

import logging
import os
import sys
import traceback

from flask import Flask
from flask_cors import CORS

from clinicguard.config import API_HOST, API_PORT
from clinicguard.database import init_engine
from clinicguard.store import SqlTenantStore
from clinicguard.api.routes import register_routes


def configure_logging():
    level_name = os.getenv("LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def create_app(store=None):
    """Build and return a fully configured Flask application."""
    app = Flask(__name__)
    CORS(app)

    # ── Initialise shared resources ──────────────────────────────────
    if store is None:
        try:
            print("[init] Initializing database connection...")
            store = SqlTenantStore(init_engine())
            print("[init] ✓ API server ready")
        except Exception as e:
            print(f"[FATAL] Failed to initialize: {e}", file=sys.stderr)
            traceback.print_exc()
            sys.exit(1)

    # ── Register routes ──────────────────────────────────────────────
    register_routes(app, store)

    return app


def main():
    """Run the development server."""
    print("=" * 60)
    print("Clinic Authorization – REST API Server")
    print("=" * 60)

    configure_logging()
    app = create_app()

    debug = os.getenv("FLASK_ENV") == "development"

    print(f"\n[server] Starting Flask API on {API_HOST}:{API_PORT}")
    print(f"[server] Debug mode: {debug}")
    print("\nAPI Endpoints:")
    print(f"  - GET    http://{API_HOST}:{API_PORT}/api/me/context")
    print(f"  - POST   http://{API_HOST}:{API_PORT}/api/authz/check")
    print(f"  - GET    http://{API_HOST}:{API_PORT}/api/tenants")
    print(f"  - POST   http://{API_HOST}:{API_PORT}/api/tenants")
    print(f"  - GET    http://{API_HOST}:{API_PORT}/api/tenants/<id>/members")
    print(f"  - PATCH  http://{API_HOST}:{API_PORT}/api/tenants/<id>/members/<uid>/role")
    print(f"  - DELETE http://{API_HOST}:{API_PORT}/api/tenants/<id>/members/<uid>")
    print(f"  - GET    http://{API_HOST}:{API_PORT}/health")
    print("\n" + "=" * 60)

    app.run(host=API_HOST, port=API_PORT, debug=debug, threaded=True)


if __name__ == "__main__":
    main()
