"""roster_recon.matching

Identity matching of normalized roster rows against a member snapshot.

Resolution order for one row:
  1. unclaimed member with the same first name, last name and birthday
  2. unclaimed member with the same email (only if the row has one)
  3. NewCandidate when the row has both names
  4. Invalid("missing name") otherwise

Comparisons are exact after normalization (case-insensitive names and email,
birthday on its calendar date).  Members are scanned in snapshot order and
the first hit wins.  A matched member is claimed for the rest of the pass.
"""

from __future__ import annotations

import itertools
import logging
import uuid
from dataclasses import dataclass
from typing import Iterable, Iterator

from roster_recon.models import (
    ExistingMember,
    Invalid,
    MatchOutcome,
    MemberRecord,
    NewCandidate,
    NormalizedRow,
)
from roster_recon.normalize import date_part, name_key, normalize_email

log = logging.getLogger(__name__)

MISSING_NAME = "missing name"


# ---------------------------------------------------------------------------
# Member pool
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _MemberKeys:
    first: str | None
    last: str | None
    birthday: str | None
    email: str | None


class MemberPool:
    """Snapshot slots plus a claimed flag per slot.

    The pool keeps its own list, so claiming never touches the caller's
    snapshot.
    """

    def __init__(self, members: Iterable[MemberRecord]) -> None:
        self._members: list[MemberRecord] = list(members)
        self._keys: list[_MemberKeys] = [
            _MemberKeys(
                first=name_key(m.first_name),
                last=name_key(m.last_name),
                birthday=date_part(m.birthday),
                email=normalize_email(m.email),
            )
            for m in self._members
        ]
        self._claimed: list[bool] = [False] * len(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def member(self, index: int) -> MemberRecord:
        return self._members[index]

    def is_claimed(self, index: int) -> bool:
        return self._claimed[index]

    def claim(self, index: int) -> MemberRecord:
        if self._claimed[index]:
            raise ValueError(f"member slot {index} already claimed")
        self._claimed[index] = True
        return self._members[index]

    def unclaimed(self) -> Iterator[int]:
        for idx, claimed in enumerate(self._claimed):
            if not claimed:
                yield idx

    def find_by_name_and_birthday(
        self, first: str | None, last: str | None, birthday: str | None
    ) -> int | None:
        first_k, last_k = name_key(first), name_key(last)
        if not first_k or not last_k or not birthday:
            return None
        for idx in self.unclaimed():
            k = self._keys[idx]
            if k.first == first_k and k.last == last_k and k.birthday == birthday:
                return idx
        return None

    def find_by_email(self, email: str | None) -> int | None:
        email_k = normalize_email(email)
        if not email_k:
            return None
        for idx in self.unclaimed():
            if self._keys[idx].email == email_k:
                return idx
        return None


# ---------------------------------------------------------------------------
# Temporary ids
# ---------------------------------------------------------------------------

class TempIdFactory:
    """Hands out ids unique within one reconciliation pass."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or uuid.uuid4().hex[:8]
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"tmp-{self._token}-{next(self._counter)}"


# ---------------------------------------------------------------------------
# Row matching
# ---------------------------------------------------------------------------

def match_row(
    row: NormalizedRow,
    pool: MemberPool,
    new_temp_id: TempIdFactory,
) -> MatchOutcome:
    idx = pool.find_by_name_and_birthday(row.first_name, row.last_name, row.birthday)
    if idx is not None:
        member = pool.claim(idx)
        log.debug("line %d matched member %s on name+birthday", row.row_number, member.id)
        return ExistingMember(row.row_number, member.id, matched_on="name_birthday")

    if row.email:
        idx = pool.find_by_email(row.email)
        if idx is not None:
            member = pool.claim(idx)
            log.debug("line %d matched member %s on email", row.row_number, member.id)
            return ExistingMember(row.row_number, member.id, matched_on="email")

    if row.has_name:
        return NewCandidate(
            row_number=row.row_number,
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            birthday=row.birthday,
            temp_id=new_temp_id(),
        )

    log.debug("line %d rejected: %s", row.row_number, MISSING_NAME)
    return Invalid(row.row_number, MISSING_NAME)
