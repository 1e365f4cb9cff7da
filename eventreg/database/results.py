"""
Tagged result returned by every data access call.

Route handlers branch on the status instead of guessing whether a falsy
value meant "no rows" or "the query blew up".
"""

from typing import Any, Optional


class QueryResult:
    OK = "ok"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FAILED = "failed"

    def __init__(self, status: str, value: Any = None, error: Optional[str] = None):
        self.status = status
        self.value = value
        self.error = error

    @classmethod
    def ok(cls, value: Any = None) -> "QueryResult":
        return cls(cls.OK, value=value)

    @classmethod
    def not_found(cls) -> "QueryResult":
        return cls(cls.NOT_FOUND)

    @classmethod
    def conflict(cls, error: str) -> "QueryResult":
        return cls(cls.CONFLICT, error=error)

    @classmethod
    def failed(cls, error: str) -> "QueryResult":
        return cls(cls.FAILED, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status == self.OK

    @property
    def is_not_found(self) -> bool:
        return self.status == self.NOT_FOUND

    @property
    def is_conflict(self) -> bool:
        return self.status == self.CONFLICT

    @property
    def is_failed(self) -> bool:
        return self.status == self.FAILED

    def __repr__(self) -> str:
        return f"QueryResult({self.status!r}, value={self.value!r}, error={self.error!r})"
