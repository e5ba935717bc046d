from __future__ import annotations

from dataclasses import dataclass
from typing import Any

MISSING_TEXT = "N/A"
MISSING_TIMESPENT = 0


@dataclass(frozen=True)
class MemberRecord:
    id: Any = None
    first_name: Any = None
    last_name: Any = None
    total_assessment_timespent: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> MemberRecord:
        if not isinstance(payload, dict):
            return cls()
        return cls(
            id=payload.get("id"),
            first_name=payload.get("first_name"),
            last_name=payload.get("last_name"),
            total_assessment_timespent=payload.get("total_assessment_timespent"),
        )

    # Empty and zero values fall back the same way as absent ones.
    @property
    def member_id(self) -> Any:
        return self.id or MISSING_TEXT

    @property
    def display_first_name(self) -> Any:
        return self.first_name or MISSING_TEXT

    @property
    def display_last_name(self) -> Any:
        return self.last_name or MISSING_TEXT

    @property
    def timespent(self) -> Any:
        return self.total_assessment_timespent or MISSING_TIMESPENT


@dataclass(frozen=True)
class ClassTimespentResponse:
    """Decoded class timespent payload. ``members`` is None when the payload carries no member list."""

    members: list[MemberRecord] | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> ClassTimespentResponse:
        if not isinstance(payload, dict):
            return cls()
        members = payload.get("members")
        if not isinstance(members, list):
            return cls()
        return cls(members=[MemberRecord.from_payload(member) for member in members])
