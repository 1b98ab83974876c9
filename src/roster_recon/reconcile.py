"""roster_recon.reconcile

Roster reconciliation: CSV text + member snapshot -> ImportSummary.

Usage:
    from roster_recon.reconcile import reconcile

    summary = reconcile(csv_text, members)
    summary.matched_member_ids   # existing members to attach
    summary.new_candidates       # participants to create downstream
    summary.rejected_rows        # per-row problems

Terminal failures (EmptyFileError, HeaderNotFoundError, MissingColumnsError,
MissingBirthdayError) are raised and no summary is produced.  The function
does no I/O and never mutates the snapshot it is given.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from roster_recon.header import locate_header
from roster_recon.keywords import DEFAULT_KEYWORDS, HeaderKeywords
from roster_recon.matching import MemberPool, TempIdFactory, match_row
from roster_recon.models import ImportSummary, MemberRecord, NormalizedRow
from roster_recon.rows import normalize_row, parse_rows
from roster_recon.shared import EmptyFileError, MissingBirthdayError

log = logging.getLogger(__name__)

# CR and LF only; other Unicode line separators stay inside their cell.
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _as_member(member: MemberRecord | dict[str, Any]) -> MemberRecord:
    if isinstance(member, MemberRecord):
        return member
    return MemberRecord.from_dict(member)


def check_completeness(rows: list[NormalizedRow]) -> None:
    """Reject the import if any named row has no birthday cell."""
    offending = [r.row_number for r in rows if r.has_name and not r.birthday]
    if offending:
        raise MissingBirthdayError(offending)


def reconcile(
    csv_text: str,
    members: Iterable[MemberRecord | dict[str, Any]],
    *,
    keywords: HeaderKeywords = DEFAULT_KEYWORDS,
    temp_ids: TempIdFactory | None = None,
) -> ImportSummary:
    lines = _LINE_BREAK_RE.split(csv_text.lstrip("\ufeff"))
    if not any(line.strip() for line in lines):
        raise EmptyFileError()

    header = locate_header(lines, keywords)
    rows = [normalize_row(raw, header.columns) for raw in parse_rows(lines, header)]
    log.debug("parsed %d data row(s) after header line %d", len(rows), header.line_index + 1)

    try:
        check_completeness(rows)
    except MissingBirthdayError as exc:
        log.warning("import rejected, birthday missing on lines %s", exc.row_numbers)
        raise

    pool = MemberPool(_as_member(m) for m in members)
    new_temp_id = temp_ids or TempIdFactory()
    summary = ImportSummary(rows_read=len(rows))
    for row in rows:
        summary.add(match_row(row, pool, new_temp_id))

    log.info(
        "reconciled %d row(s): %d matched, %d new, %d rejected",
        summary.rows_read,
        len(summary.matched_member_ids),
        len(summary.new_candidates),
        len(summary.rejected_rows),
    )
    return summary
