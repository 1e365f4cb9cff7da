"""
User route handlers.

Provides routes for:
- User registration
- User login
- Profile retrieval (/me)
- Admin user listing
- Admin user lookup by id

JWT logic lives in `auth_service.utils`, password hashing in
`auth_service.passwords`, and privilege decisions in `auth_service.policy`.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from argon2.exceptions import InvalidHashError, VerificationError
from flask import Blueprint, Response, jsonify, request

from eventreg.auth_service import policy
from eventreg.auth_service.passwords import hash_password, verify_password
from eventreg.auth_service.utils import create_token, verify_token_from_request
from eventreg.database import queries
from eventreg.gateway.validation import (
    NAME_MAX_LENGTH,
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    check_length,
    clean_text,
    json_body,
)

users_bp = Blueprint("users", __name__)


def _profile(user: Dict[str, Any]) -> Dict[str, Any]:
    """Public view of a user row: never includes the password hash."""
    return {
        "id": user["id"],
        "name": user["name"],
        "username": user["username"],
        "is_admin": bool(user.get("is_admin")),
    }


def _require_admin(user: Dict[str, Any]) -> Optional[Tuple[Response, int]]:
    """
    Return an error response unless the caller's stored admin flag is set.
    """
    flag = queries.find_admin_flag(user["username"])
    if flag.is_failed:
        return jsonify({"error": "Could not verify permissions"}), 500
    if not flag.is_ok or not policy.can_list_users(flag.value):
        return jsonify({"error": "User is not an administrator"}), 400
    return None


# --- REQUEST LOGGING ---
@users_bp.before_request
def before_request() -> None:
    """
    Log every incoming request to the users service.
    Headers are left out so bearer tokens never reach the log.
    """
    logging.info(f"[Users] Incoming {request.method} {request.path}")


@users_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Users] Response {response.status}")
    return response


# --- REGISTER ---
@users_bp.route("/register", methods=["POST"])
def register() -> Tuple[Response, int]:
    """
    Register a new user in the system.

    Expects a JSON body with:
    - name (str): 1-64 characters.
    - username (str): Unique, 1-64 characters.
    - password (str): 3-254 characters.

    Returns:
        201: JSON with id, name and username.
        400: Missing or invalid fields.
        409: Username already exists.
        500: Database error.
    """
    data: Dict[str, Any] = json_body()
    name = clean_text(data.get("name"))
    username = clean_text(data.get("username"))
    password = data.get("password")
    if not isinstance(password, str):
        password = ""

    errors = []
    check_length(errors, "name", name, 1, NAME_MAX_LENGTH)
    check_length(errors, "username", username, 1, USERNAME_MAX_LENGTH)
    check_length(errors, "password", password, PASSWORD_MIN_LENGTH, PASSWORD_MAX_LENGTH)
    if errors:
        return jsonify({"errors": errors}), 400

    result = queries.insert_user(name, username, hash_password(password))

    if result.is_conflict:
        return jsonify({"error": "Username already exists"}), 409
    if not result.is_ok:
        return jsonify({"error": "Registration failed"}), 500

    logging.info(f"[Users] Registered user {result.value['id']}")
    return jsonify(result.value), 201


# --- LOGIN ---
@users_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - username (str)
    - password (str)

    Returns:
        201: JSON with the new token.
        400: Missing credentials.
        401: Invalid credentials (unknown user or wrong password).
        500: Database error or unreadable stored hash.
    """
    data: Dict[str, Any] = json_body()
    username = clean_text(data.get("username"))
    password = data.get("password")

    if not username or not isinstance(password, str) or not password:
        return jsonify({"error": "Username and password required"}), 400

    result = queries.find_user_by_username(username)
    if result.is_failed:
        return jsonify({"error": "Login failed"}), 500
    if not result.is_ok:
        return jsonify({"error": "Invalid credentials"}), 401

    user = result.value
    try:
        password_ok = verify_password(password, user["password_hash"])
    except (InvalidHashError, VerificationError):
        logging.error(f"[Users] Stored password hash for user {user['id']} is malformed")
        return jsonify({"error": "Login failed"}), 500

    if not password_ok:
        return jsonify({"error": "Invalid credentials"}), 401

    return jsonify({"token": create_token(user["id"])}), 201


# --- LIST USERS (ADMIN ONLY) ---
@users_bp.route("/", methods=["GET"])
def list_users() -> Tuple[Response, int]:
    """
    Admin-only endpoint to list all usernames.

    Returns:
        200: List of {"username": ...} objects.
        400: Caller is not an administrator.
        401: Authentication failure.
        500: Database error.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    denied = _require_admin(user)
    if denied:
        return denied

    result = queries.list_usernames()
    if not result.is_ok:
        return jsonify({"error": "Failed to retrieve users"}), 500

    return jsonify(result.value), 200


# --- GET CURRENT USER ---
@users_bp.route("/me", methods=["GET"])
def get_current_user() -> Tuple[Response, int]:
    """
    Retrieve the caller's own profile.

    Requires Authorization header: Bearer <token>

    Returns:
        200: User profile object.
        401: Authentication failure.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    return jsonify(_profile(user)), 200


# --- GET USER BY ID (ADMIN ONLY) ---
@users_bp.route("/<int:user_id>", methods=["GET"])
def get_user(user_id: int) -> Tuple[Response, int]:
    """
    Admin-only endpoint to look up another user's profile.

    Returns:
        200: User profile object.
        400: Caller is not an administrator.
        401: Authentication failure.
        404: No such user.
        500: Database error.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    denied = _require_admin(user)
    if denied:
        return denied

    result = queries.find_user_by_id(user_id)
    if result.is_failed:
        return jsonify({"error": "Could not retrieve user"}), 500
    if not result.is_ok:
        return jsonify({"error": "User not found"}), 404

    return jsonify(_profile(result.value)), 200
