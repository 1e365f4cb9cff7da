"""
Process configuration loaded from the environment (and .env via python-dotenv).
"""

import os
from typing import Any, Dict

from dotenv import load_dotenv


def load_config() -> Dict[str, Any]:
    """
    Read the service configuration from environment variables.

    Required:
        DATABASE_URL, JWT_SECRET
    Optional:
        TOKEN_LIFETIME (seconds, default 20000), HOST, PORT,
        DB_POOL_MIN, DB_POOL_MAX, CORS_ORIGINS (comma separated)

    Returns:
        dict: Flask config keys.

    Raises:
        RuntimeError: If DATABASE_URL or JWT_SECRET is missing.
    """
    load_dotenv()

    database_url = os.getenv("DATABASE_URL")
    jwt_secret = os.getenv("JWT_SECRET")

    missing = [name for name, value in (("DATABASE_URL", database_url), ("JWT_SECRET", jwt_secret)) if not value]
    if missing:
        raise RuntimeError(f"{', '.join(missing)} missing. Set it in .env")

    origins = os.getenv("CORS_ORIGINS", "*")

    return {
        "DATABASE_URL": database_url,
        "JWT_SECRET": jwt_secret,
        "TOKEN_LIFETIME": int(os.getenv("TOKEN_LIFETIME", 20000)),
        "HOST": os.getenv("HOST", "127.0.0.1"),
        "PORT": int(os.getenv("PORT", 3000)),
        "DB_POOL_MIN": int(os.getenv("DB_POOL_MIN", 1)),
        "DB_POOL_MAX": int(os.getenv("DB_POOL_MAX", 10)),
        "CORS_ORIGINS": [o.strip() for o in origins.split(",") if o.strip()],
    }
