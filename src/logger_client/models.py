"""
Payload and transport models for the logger client.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


class RecordValidationError(ValueError):
    """Raised when a string payload is not a valid log event record."""


def _wire(name: str, kind: type) -> Any:
    return field(default=None, metadata={"json": name, "kind": kind})


@dataclass
class LogEventRecord:
    """
    Structured log event as understood by the logging service.

    Attributes use Python names; ``to_dict`` and ``from_json`` translate to
    and from the camelCase names used on the wire. Every field is optional
    and ``None`` values are never sent.
    """

    type: Optional[str] = _wire("type", str)
    event_type_id: Optional[int] = _wire("eventTypeId", int)
    comment: Optional[str] = _wire("comment", str)
    detail: Optional[str] = _wire("detail", str)
    user_email: Optional[str] = _wire("userEmail", str)
    user_ip: Optional[str] = _wire("userIP", str)
    source: Optional[str] = _wire("source", str)
    source_url: Optional[str] = _wire("sourceUrl", str)
    month: Optional[str] = _wire("month", str)
    reason_type_id: Optional[int] = _wire("reasonTypeId", int)
    source_type_id: Optional[int] = _wire("sourceTypeId", int)
    record_counts: Optional[Dict[str, int]] = _wire("recordCounts", dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            f.metadata["json"]: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, text: str) -> "LogEventRecord":
        """Parse ``text`` into a record, ignoring keys the record does not know."""
        try:
            data = json.loads(text)
        except (ValueError, RecursionError) as exc:
            raise RecordValidationError(f"not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise RecordValidationError("JSON payload is not an object")

        values: Dict[str, Any] = {}
        for f in fields(cls):
            name = f.metadata["json"]
            if name not in data or data[name] is None:
                continue
            value = data[name]
            kind = f.metadata["kind"]
            # bool is an int subclass but never a valid id
            if not isinstance(value, kind) or isinstance(value, bool):
                raise RecordValidationError(
                    f"field {name!r} expects {kind.__name__}, got {type(value).__name__}"
                )
            values[f.name] = value
        return cls(**values)


@dataclass
class HttpOutcome:
    """Result of one POST to the logging service."""

    status_code: Optional[int] = None
    data: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.status_code is not None
            and 200 <= self.status_code < 300
        )


__all__ = [
    "RecordValidationError",
    "LogEventRecord",
    "HttpOutcome",
]
