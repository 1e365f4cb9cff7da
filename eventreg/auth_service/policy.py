"""
Authorization decisions.

Pure functions over already-loaded rows: no database access, no Flask.
There is a single boolean admin flag and no role hierarchy.
"""

from typing import Any, Dict, Optional


def is_admin(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user and user.get("is_admin"))


def can_list_users(admin_flag: bool) -> bool:
    """Only administrators may list or look up other users."""
    return bool(admin_flag)


def can_modify_event(user: Dict[str, Any], event: Dict[str, Any]) -> bool:
    """
    Update or delete is allowed for the event's creator or any admin.
    """
    return user.get("id") == event.get("creator") or is_admin(user)


def can_delete_registration(registration_exists: bool) -> bool:
    # existence is looked up for (event, requester), never another user
    return bool(registration_exists)
