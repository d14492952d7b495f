"""
JWT verification middleware for the Flask API.

Tokens are issued by the identity provider; this side only verifies them and
takes the principal id from the ``sub`` claim.
"""

from functools import wraps
from typing import Any, Dict, Optional

import jwt
from flask import jsonify, request

from clinicguard.config import JWT_ALGORITHM, SECRET_KEY


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a JWT token and return the decoded payload (or None)."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def token_required(f):
    """Decorator that protects endpoints with JWT authentication."""
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get("Authorization", "")
        if not auth_header:
            return jsonify({"error": "Authentication token is missing"}), 401

        parts = auth_header.split(" ")
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return jsonify({"error": "Invalid authorization header format"}), 401

        payload = verify_token(parts[1])
        if not payload or not payload.get("sub"):
            return jsonify({"error": "Invalid or expired token"}), 401

        # Attach the caller id to the request context
        request.principal_id = str(payload["sub"])

        return f(*args, **kwargs)

    return decorated
