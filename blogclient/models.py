from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


def _to_epoch(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError, OverflowError):
        return 0


@dataclass(frozen=True)
class Post:
    """Post as returned by the API. Immutable on the client side."""

    id: str
    title: str
    body: str
    created_at: int  # epoch seconds

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Post":
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            body=str(data.get("body", "")),
            created_at=_to_epoch(data.get("created_at")),
        )


class Effect(str, Enum):
    NONE = "none"
    GRAYSCALE = "grayscale"
    INVERT = "invert"


@dataclass(frozen=True)
class JobStatus:
    """Single poll response of an effect job."""

    name: str
    status: str  # raw status string: running|succeeded|failed|...
    reason: Optional[str] = None

    @classmethod
    def from_json(cls, name: str, data: Any) -> "JobStatus":
        if not isinstance(data, Mapping):
            return cls(name=name, status=str(data))
        reason = data.get("reason")
        return cls(
            name=str(data.get("name") or name),
            status=str(data.get("status", "")),
            reason=str(reason) if reason else None,
        )
