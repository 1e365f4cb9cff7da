"""
Request body parsing, sanitization and field validation shared by the blueprints.
"""

from typing import Any, Dict, List, Optional

from flask import request
from markupsafe import escape
from werkzeug.exceptions import BadRequest

# --- FIELD LIMITS ---
NAME_MAX_LENGTH = 64
USERNAME_MAX_LENGTH = 64
PASSWORD_MIN_LENGTH = 3
PASSWORD_MAX_LENGTH = 254
DESCRIPTION_MAX_LENGTH = 254
COMMENT_MAX_LENGTH = 254


def json_body() -> Dict[str, Any]:
    """
    Parse the request body as a JSON object.

    An empty body is treated as {}. Anything that is not a JSON object
    raises BadRequest, which the app turns into a 400 "Invalid json".
    """
    if not request.get_data(cache=True):
        return {}
    data = request.get_json(force=True)
    if not isinstance(data, dict):
        raise BadRequest("JSON body must be an object")
    return data


def clean_text(value: Any) -> str:
    """
    Strip surrounding whitespace and HTML-escape markup.

    Non-string values (numbers, lists, null) become "" so that they fail
    the presence checks instead of reaching the database.
    """
    if not isinstance(value, str):
        return ""
    return str(escape(value.strip()))


def check_length(
    errors: List[Dict[str, str]],
    field: str,
    value: Optional[str],
    min_length: int = 0,
    max_length: Optional[int] = None,
) -> None:
    """
    Append a {field, error} entry to `errors` if `value` is out of bounds.
    """
    length = len(value or "")
    if length < min_length:
        if min_length == 1:
            message = f"{field} must not be empty"
        else:
            message = f"{field} must be at least {min_length} characters"
        errors.append({"field": field, "error": message})
    elif max_length is not None and length > max_length:
        errors.append({
            "field": field,
            "error": f"{field} must be {max_length} characters or less",
        })
