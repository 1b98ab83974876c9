"""roster_recon.models

Value types shared by the header locator, row parser, identity matcher and
reconciliation orchestrator.  Everything here is created at the start of one
reconcile() call and dropped at its end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from roster_recon.normalize import trim

# Semantic field names, in the order used for reporting missing columns.
FIRST_NAME = "first_name"
LAST_NAME = "last_name"
EMAIL = "email"
BIRTHDAY = "birthday"

MANDATORY_FIELDS = (FIRST_NAME, LAST_NAME, BIRTHDAY)
ALL_FIELDS = (EMAIL, FIRST_NAME, LAST_NAME, BIRTHDAY)


# ---------------------------------------------------------------------------
# Member directory snapshot
# ---------------------------------------------------------------------------

def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _text(value: Any) -> str | None:
    return trim(str(value)) if value is not None else None


@dataclass(frozen=True)
class MemberRecord:
    """One known member of the organization, as fetched by the caller."""

    id: Any
    first_name: str | None
    last_name: str | None
    birthday: str | None = None
    email: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MemberRecord":
        """Build a record from an API payload (snake_case) or UI state (camelCase)."""
        member_id = _pick(data, "id", "member_id", "memberId")
        if member_id is None:
            raise ValueError(f"member record has no id: {data!r}")
        return cls(
            id=member_id,
            first_name=_text(_pick(data, "first_name", "firstName")),
            last_name=_text(_pick(data, "last_name", "lastName")),
            birthday=_text(_pick(data, "birthday", "birth_date", "birthDate")),
            email=_text(_pick(data, "email")),
        )


# ---------------------------------------------------------------------------
# Parsing artefacts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColumnMap:
    """Column index per semantic field.  Email is optional."""

    first_name: int
    last_name: int
    birthday: int
    email: int | None = None

    def as_dict(self) -> dict[str, int | None]:
        return {
            FIRST_NAME: self.first_name,
            LAST_NAME: self.last_name,
            EMAIL: self.email,
            BIRTHDAY: self.birthday,
        }


@dataclass(frozen=True)
class RawRow:
    """Cleaned cells of one data line plus its 1-based source line number."""

    line_number: int
    cells: tuple[str, ...]

    def cell(self, index: int | None) -> str:
        if index is None or index >= len(self.cells):
            return ""
        return self.cells[index]


@dataclass(frozen=True)
class NormalizedRow:
    row_number: int
    first_name: str
    last_name: str
    email: str | None
    # ISO date when parseable, the raw cell otherwise, None when empty.
    birthday: str | None

    @property
    def has_name(self) -> bool:
        return bool(self.first_name) and bool(self.last_name)


# ---------------------------------------------------------------------------
# Match outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExistingMember:
    row_number: int
    member_id: Any
    matched_on: str  # "name_birthday" | "email"


@dataclass(frozen=True)
class NewCandidate:
    row_number: int
    first_name: str
    last_name: str
    email: str | None
    birthday: str | None
    temp_id: str

    def to_payload(self) -> dict[str, str]:
        """Participant creation payload for the downstream submit step."""
        payload = {
            "first_name": self.first_name,
            "last_name": self.last_name,
        }
        if self.birthday:
            payload["birthday"] = self.birthday
        if self.email:
            payload["email"] = self.email
        return payload


@dataclass(frozen=True)
class Invalid:
    row_number: int
    reason: str


MatchOutcome = Union[ExistingMember, NewCandidate, Invalid]


# ---------------------------------------------------------------------------
# ImportSummary
# ---------------------------------------------------------------------------

@dataclass
class ImportSummary:
    matched_member_ids: list[Any] = field(default_factory=list)
    new_candidates: list[NewCandidate] = field(default_factory=list)
    rejected_rows: list[Invalid] = field(default_factory=list)
    outcomes: list[MatchOutcome] = field(default_factory=list)
    rows_read: int = 0

    def add(self, outcome: MatchOutcome) -> None:
        self.outcomes.append(outcome)
        if isinstance(outcome, ExistingMember):
            self.matched_member_ids.append(outcome.member_id)
        elif isinstance(outcome, NewCandidate):
            self.new_candidates.append(outcome)
        elif isinstance(outcome, Invalid):
            self.rejected_rows.append(outcome)
        else:
            raise TypeError(f"unknown match outcome: {outcome!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows_read": self.rows_read,
            "matched_member_ids": list(self.matched_member_ids),
            "new_candidates": [
                {
                    "row_number": c.row_number,
                    "temp_id": c.temp_id,
                    **c.to_payload(),
                }
                for c in self.new_candidates
            ],
            "rejected_rows": [
                {"row_number": r.row_number, "reason": r.reason}
                for r in self.rejected_rows
            ],
        }
