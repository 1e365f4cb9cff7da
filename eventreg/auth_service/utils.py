"""
Shared authentication helpers.
Provides token creation, decoding, and bearer-token authentication of requests.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
from flask import Response, current_app, g, jsonify, request

from eventreg.database import queries

JWT_ALGORITHM = "HS256"


class TokenExpired(Exception):
    """The token signature is valid but its lifetime has passed."""


class TokenInvalid(Exception):
    """The token is malformed, forged, or carries an unusable subject."""


# --- JWT CREATION ---
def create_token(user_id: int) -> str:
    """
    Generates a new JWT for a given user.

    The payload carries only the user id; everything else about the user
    is looked up again when the token is presented.

    Args:
        user_id (int): The unique ID of the user.

    Returns:
        str: Encoded JWT string.
    """
    now = datetime.now(timezone.utc)
    lifetime = int(current_app.config.get("TOKEN_LIFETIME", 20000))

    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(seconds=lifetime),
    }

    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=JWT_ALGORITHM)


# --- JWT DECODING ---
def decode_token(token: str) -> int:
    """
    Decode a JWT and return the user id it was issued for.

    Raises:
        TokenExpired: The token has expired.
        TokenInvalid: Any other decoding or payload problem.
    """
    try:
        payload = jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except jwt.InvalidTokenError as e:
        raise TokenInvalid(str(e)) from e

    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise TokenInvalid("subject is not a user id") from e


def _error(message: str, code: int) -> Tuple[None, Response, int]:
    return None, jsonify({"error": message}), code


# --- REQUEST AUTHENTICATION ---
def verify_token_from_request() -> Tuple[Optional[Dict[str, Any]], Optional[Response], Optional[int]]:
    """
    Authenticate the current request from its Authorization header.

    The token subject is resolved against the users table on every call,
    so a user removed from the database loses access immediately.
    On success the user row is also stored on flask.g.user.

    Returns:
        tuple: (user, error_response, status_code)
               If successful, error_response and status_code are None.
               If failed, user is None.
    """
    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer "):
        return _error("missing token", 401)

    token = auth.split(" ", 1)[1].strip()

    try:
        user_id = decode_token(token)
    except TokenExpired:
        logging.warning(f"[Auth] Expired token on {request.method} {request.path}")
        return _error("token expired", 401)
    except TokenInvalid as e:
        logging.warning(f"[Auth] Invalid token on {request.method} {request.path}: {e}")
        return _error("invalid token", 401)

    result = queries.find_user_by_id(user_id)
    if result.is_failed:
        return _error("Could not verify user", 500)
    if not result.is_ok:
        logging.warning(f"[Auth] Token subject {user_id} no longer exists")
        return _error("invalid token", 401)

    g.user = result.value
    return result.value, None, None
