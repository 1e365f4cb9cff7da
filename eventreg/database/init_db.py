"""
Database bootstrap script.

Applies schema.sql to the database named by DATABASE_URL and, when
ADMIN_USERNAME and ADMIN_PASSWORD are set, creates (or promotes) an
administrator account.

Usage:
    python -m eventreg.database.init_db
"""

import os
import sys

import psycopg2
from dotenv import load_dotenv

from eventreg.auth_service.passwords import hash_password

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schema.sql")


def apply_schema(conn) -> None:
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        schema = f.read()
    with conn.cursor() as cur:
        cur.execute(schema)


def seed_admin(conn, name: str, username: str, password: str) -> None:
    """
    Insert the admin user, or flip is_admin on if the username already exists.
    The password of an existing user is left untouched.
    """
    sql = """
        INSERT INTO users (name, username, password_hash, is_admin)
        VALUES (%s, %s, %s, TRUE)
        ON CONFLICT (username) DO UPDATE SET is_admin = TRUE;
    """
    with conn.cursor() as cur:
        cur.execute(sql, (name, username, hash_password(password)))


def main() -> int:
    load_dotenv()

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("DATABASE_URL is not set. Please set the environment variable.")
        return 1

    print("--- Applying database schema ---")
    conn = None
    try:
        conn = psycopg2.connect(database_url)
        apply_schema(conn)
        print(f"Schema applied from {SCHEMA_PATH}")

        admin_username = os.getenv("ADMIN_USERNAME")
        admin_password = os.getenv("ADMIN_PASSWORD")
        if admin_username and admin_password:
            seed_admin(conn, os.getenv("ADMIN_NAME", "Administrator"), admin_username, admin_password)
            print(f"Admin user '{admin_username}' is ready")

        conn.commit()
    except psycopg2.Error as e:
        print("\nDatabase setup FAILED:")
        print(f" Error: {e}")
        if conn:
            conn.rollback()
        return 1
    finally:
        if conn:
            conn.close()

    print("Database setup complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
