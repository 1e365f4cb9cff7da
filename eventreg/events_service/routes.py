"""
Events service routes: create, read, update, delete events, and registration.
Handles event lifecycle management and attendance.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Tuple

from flask import Blueprint, Response, jsonify, request

from eventreg.auth_service import policy
from eventreg.auth_service.utils import verify_token_from_request
from eventreg.database import queries
from eventreg.events_service.slug import get_slug
from eventreg.gateway.validation import (
    COMMENT_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    check_length,
    clean_text,
    json_body,
)

events_bp = Blueprint("events", __name__)


def serialize(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy a database row, converting datetimes to ISO-8601 strings.
    """
    out = dict(row)
    for key, value in out.items():
        if isinstance(value, datetime):
            out[key] = value.isoformat()
    return out


# --- REQUEST LOGGING ---
@events_bp.before_request
def before_request() -> None:
    logging.info(f"[Events] Incoming {request.method} {request.path}")


@events_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Events] Response {response.status}")
    return response


@events_bp.route("/", methods=["GET"])
def list_events() -> Tuple[Response, int]:
    """
    Return all events.

    The listing only carries name, slug, description and timestamps;
    event ids and creators are not exposed here.

    Returns:
        200: List of event objects.
        500: Database error.
    """
    result = queries.list_events()
    if not result.is_ok:
        return jsonify({"error": "Failed to retrieve events"}), 500

    return jsonify([serialize(row) for row in result.value]), 200


@events_bp.route("/", methods=["POST"])
def create_event() -> Tuple[Response, int]:
    """
    Create an event owned by the caller.

    Expects JSON:
        { "name": str (1-64), "description": str (optional, max 254) }

    Returns:
        201: The created event.
        400: Validation error.
        401: Authentication failure.
        500: Database error.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    data: Dict[str, Any] = json_body()
    name = clean_text(data.get("name"))
    description = clean_text(data.get("description"))

    errors = []
    check_length(errors, "name", name, 1, NAME_MAX_LENGTH)
    check_length(errors, "description", description, 0, DESCRIPTION_MAX_LENGTH)
    if errors:
        return jsonify({"errors": errors}), 400

    result = queries.insert_event(user["id"], name, get_slug(name), description)
    if not result.is_ok:
        return jsonify({"error": "Failed to create event"}), 500

    logging.info(f"[Events] User {user['id']} created event {result.value['id']}")
    return jsonify(serialize(result.value)), 201


@events_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id: int) -> Tuple[Response, int]:
    """
    Get a single event together with its registrations.

    Returns:
        200: [event, registrations]
        404: Event not found.
        500: Database error.
    """
    event = queries.find_event(event_id)
    if event.is_failed:
        return jsonify({"error": "Failed to retrieve event"}), 500
    if not event.is_ok:
        return jsonify({"error": "Event not found"}), 404

    registrations = queries.list_registrations(event_id)
    if not registrations.is_ok:
        return jsonify({"error": "Failed to retrieve registrations"}), 500

    return jsonify([
        serialize(event.value),
        [serialize(row) for row in registrations.value],
    ]), 200


@events_bp.route("/<int:event_id>", methods=["PATCH"])
def update_event(event_id: int) -> Tuple[Response, int]:
    """
    Update an event's description.

    Permission:
    - The creator of the event
    - OR an admin

    Returns:
        200: The updated event.
        400: Description empty, unchanged or too long; or permission denied.
        401: Authentication failure.
        404: Event not found.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    event = queries.find_event(event_id)
    if event.is_failed:
        return jsonify({"error": "Failed to retrieve event"}), 500
    if not event.is_ok:
        return jsonify({"error": "Event not found"}), 404

    if not policy.can_modify_event(user, event.value):
        return jsonify({"error": "User did not create event and is not admin"}), 400

    data: Dict[str, Any] = json_body()
    description = clean_text(data.get("description"))

    if not description or description == event.value["description"]:
        return jsonify({"error": "Description is the same or missing"}), 400

    errors = []
    check_length(errors, "description", description, 1, DESCRIPTION_MAX_LENGTH)
    if errors:
        return jsonify({"errors": errors}), 400

    result = queries.update_event_description(event_id, description)
    if result.is_not_found:
        return jsonify({"error": "Event not found"}), 404
    if not result.is_ok:
        return jsonify({"error": "Failed to update event"}), 500

    return jsonify(serialize(result.value)), 200


@events_bp.route("/<int:event_id>", methods=["DELETE"])
def delete_event(event_id: int) -> Tuple[Response, int]:
    """
    Delete an event and all of its registrations.
    Allowed for the event's creator or an admin.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    event = queries.find_event(event_id)
    if event.is_failed:
        return jsonify({"error": "Failed to retrieve event"}), 500
    if not event.is_ok:
        return jsonify({"error": "Event not found"}), 404

    if not policy.can_modify_event(user, event.value):
        return jsonify({"error": "User did not create event and is not admin"}), 400

    result = queries.delete_event(event_id)
    if result.is_not_found:
        return jsonify({"error": "Event not found or already deleted"}), 404
    if not result.is_ok:
        return jsonify({"error": "Failed to delete event"}), 500

    logging.info(f"[Events] User {user['id']} deleted event {event_id} ({result.value} registrations)")
    return "", 204


@events_bp.route("/<int:event_id>/register", methods=["POST"])
def register(event_id: int) -> Tuple[Response, int]:
    """
    Register the caller as an attendee of an event.

    Expects JSON:
        { "comment": str (optional, max 254) }

    Returns:
        201: The registration.
        400: Comment too long.
        404: Event not found.
        409: Already registered.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    data: Dict[str, Any] = json_body()
    comment = clean_text(data.get("comment"))

    errors = []
    check_length(errors, "comment", comment, 0, COMMENT_MAX_LENGTH)
    if errors:
        return jsonify({"errors": errors}), 400

    event = queries.find_event(event_id)
    if event.is_failed:
        return jsonify({"error": "Failed to retrieve event"}), 500
    if not event.is_ok:
        return jsonify({"error": "Event not found"}), 404

    result = queries.insert_registration(event_id, user["id"], comment)
    if result.is_conflict:
        return jsonify({"error": "Already registered for this event"}), 409
    if not result.is_ok:
        return jsonify({"error": "Failed to register"}), 500

    return jsonify(serialize(result.value)), 201


@events_bp.route("/<int:event_id>/register", methods=["DELETE"])
def unregister(event_id: int) -> Tuple[Response, int]:
    """
    Remove the caller's registration for an event.
    The registration must exist; it is looked up before anything is deleted.
    """
    user, err, code = verify_token_from_request()
    if err:
        return err, code

    exists = queries.registration_exists(event_id, user["id"])
    if exists.is_failed:
        return jsonify({"error": "Failed to check registration"}), 500
    if not policy.can_delete_registration(exists.is_ok and exists.value):
        return jsonify({"error": "Registration not found"}), 404

    result = queries.delete_registration(event_id, user["id"])
    if result.is_not_found:
        return jsonify({"error": "Registration not found"}), 404
    if not result.is_ok:
        return jsonify({"error": "Failed to delete registration"}), 500

    return "", 204
