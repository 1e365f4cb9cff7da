"""
Data access layer for users, events and registrations.

Every function runs one transaction through get_db() and returns a
QueryResult. Database errors never escape this module: they are logged
and reported as QueryResult.failed().
"""

import logging
from typing import Any, Callable, Optional, Sequence

import psycopg2
import psycopg2.errors

from eventreg.database.db_connection import get_db
from eventreg.database.results import QueryResult


def _run(action: str, work: Callable[[Any], QueryResult]) -> QueryResult:
    """
    Execute `work(cursor)` inside a single transaction.

    Args:
        action (str): Human readable description used in log lines.
        work (callable): Receives an open cursor and returns a QueryResult.

    Returns:
        QueryResult: Whatever `work` returned, or a conflict/failed result.
    """
    try:
        with get_db() as conn:
            with conn.cursor() as cur:
                return work(cur)
    except psycopg2.errors.UniqueViolation as e:
        logging.warning(f"[DB] Unique violation while {action}: {e}")
        return QueryResult.conflict(f"duplicate while {action}")
    except psycopg2.Error as e:
        logging.error(f"[DB] Error while {action}: {e}")
        return QueryResult.failed(f"error while {action}")


def _fetch_one(action: str, sql: str, params: Sequence[Any] = ()) -> QueryResult:
    def work(cur):
        cur.execute(sql, params)
        row = cur.fetchone()
        if not row:
            return QueryResult.not_found()
        return QueryResult.ok(dict(row))

    return _run(action, work)


def _fetch_all(action: str, sql: str, params: Sequence[Any] = ()) -> QueryResult:
    def work(cur):
        cur.execute(sql, params)
        return QueryResult.ok([dict(row) for row in cur.fetchall()])

    return _run(action, work)


# --- USERS ---
def find_user_by_username(username: str) -> QueryResult:
    sql = """
        SELECT id, name, username, password_hash, is_admin
        FROM users
        WHERE username = %s;
    """
    return _fetch_one("finding user by username", sql, (username,))


def find_user_by_id(user_id: int) -> QueryResult:
    sql = """
        SELECT id, name, username, password_hash, is_admin
        FROM users
        WHERE id = %s;
    """
    return _fetch_one("finding user by id", sql, (user_id,))


def list_usernames() -> QueryResult:
    return _fetch_all("listing usernames", "SELECT username FROM users ORDER BY id ASC;")


def find_admin_flag(username: str) -> QueryResult:
    """Returns ok(bool) for a known username, not_found otherwise."""
    result = _fetch_one(
        "reading admin flag",
        "SELECT is_admin FROM users WHERE username = %s;",
        (username,),
    )
    if result.is_ok:
        return QueryResult.ok(bool(result.value["is_admin"]))
    return result


def insert_user(name: str, username: str, password_hash: str) -> QueryResult:
    """Returns ok(row) with id, name and username; conflict if the username is taken."""
    sql = """
        INSERT INTO users (name, username, password_hash)
        VALUES (%s, %s, %s)
        RETURNING id, name, username;
    """
    return _fetch_one("inserting user", sql, (name, username, password_hash))


# --- EVENTS ---
def list_events() -> QueryResult:
    # id and creator are left out of the public listing on purpose
    sql = """
        SELECT name, slug, description, created, updated
        FROM events
        ORDER BY created ASC;
    """
    return _fetch_all("listing events", sql)


def find_event(event_id: int) -> QueryResult:
    sql = """
        SELECT id, creator, name, slug, description, created, updated
        FROM events
        WHERE id = %s;
    """
    return _fetch_one("finding event", sql, (event_id,))


def insert_event(creator: int, name: str, slug: str, description: str) -> QueryResult:
    sql = """
        INSERT INTO events (creator, name, slug, description)
        VALUES (%s, %s, %s, %s)
        RETURNING id, creator, name, slug, description, created, updated;
    """
    return _fetch_one("inserting event", sql, (creator, name, slug, description))


def update_event_description(event_id: int, description: str) -> QueryResult:
    sql = """
        UPDATE events
        SET description = %s, updated = CURRENT_TIMESTAMP
        WHERE id = %s
        RETURNING id, creator, name, slug, description, created, updated;
    """
    return _fetch_one("updating event", sql, (description, event_id))


def _delete_registrations(cur, event_id: int) -> int:
    cur.execute("DELETE FROM registrations WHERE event_id = %s;", (event_id,))
    return cur.rowcount


def delete_registrations_for_event(event_id: int) -> QueryResult:
    """Returns ok(number of rows removed)."""
    return _run(
        "deleting registrations for event",
        lambda cur: QueryResult.ok(_delete_registrations(cur, event_id)),
    )


def delete_event(event_id: int) -> QueryResult:
    """
    Delete an event and all of its registrations in one transaction.

    If the event delete fails, the registration delete is rolled back too.

    Returns:
        QueryResult: ok(number of registrations removed), or not_found
        when no event row matched.
    """

    def work(cur):
        removed = _delete_registrations(cur, event_id)
        cur.execute("DELETE FROM events WHERE id = %s;", (event_id,))
        if cur.rowcount == 0:
            return QueryResult.not_found()
        return QueryResult.ok(removed)

    return _run("deleting event", work)


# --- REGISTRATIONS ---
def insert_registration(event_id: int, user_id: int, comment: Optional[str]) -> QueryResult:
    """Returns ok(row); conflict if the user is already registered for the event."""
    sql = """
        INSERT INTO registrations (user_id, event_id, comment)
        VALUES (%s, %s, %s)
        RETURNING id, user_id, event_id, comment, created;
    """
    return _fetch_one("inserting registration", sql, (user_id, event_id, comment))


def delete_registration(event_id: int, user_id: int) -> QueryResult:
    def work(cur):
        cur.execute(
            "DELETE FROM registrations WHERE event_id = %s AND user_id = %s;",
            (event_id, user_id),
        )
        if cur.rowcount == 0:
            return QueryResult.not_found()
        return QueryResult.ok(cur.rowcount)

    return _run("deleting registration", work)


def list_registrations(event_id: int) -> QueryResult:
    sql = """
        SELECT r.id, r.user_id, u.username, r.comment, r.created
        FROM registrations r
        JOIN users u ON r.user_id = u.id
        WHERE r.event_id = %s
        ORDER BY r.created ASC;
    """
    return _fetch_all("listing registrations", sql, (event_id,))


def registration_exists(event_id: int, user_id: int) -> QueryResult:
    """Returns ok(True) if (event, user) is registered, not_found otherwise."""
    result = _fetch_one(
        "checking registration",
        "SELECT 1 AS found FROM registrations WHERE event_id = %s AND user_id = %s;",
        (event_id, user_id),
    )
    if result.is_ok:
        return QueryResult.ok(True)
    return result
