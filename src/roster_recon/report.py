"""Human-readable rendering of reconciliation results and failures."""

from __future__ import annotations

from roster_recon.models import BIRTHDAY, FIRST_NAME, LAST_NAME, ImportSummary
from roster_recon.shared import (
    EmptyFileError,
    HeaderNotFoundError,
    MissingBirthdayError,
    MissingColumnsError,
    RosterImportError,
    RunCounters,
)

COLUMN_LABELS = {
    FIRST_NAME: "Prénom",
    LAST_NAME: "Nom",
    BIRTHDAY: "Date de naissance",
}

TEMPLATE_HEADER = "Prénom,Nom,Adresse e-mail,Date de naissance"
TEMPLATE_EXAMPLE = "Alice,Martin,alice.martin@example.com,12/04/2010"


def roster_template() -> str:
    """Template CSV offered to users preparing a roster."""
    return f"{TEMPLATE_HEADER}\n{TEMPLATE_EXAMPLE}\n"


def describe_error(exc: RosterImportError) -> str:
    if isinstance(exc, EmptyFileError):
        return "The file is empty."
    if isinstance(exc, HeaderNotFoundError):
        return (
            f"No header row found in the first {exc.lines_inspected} line(s). "
            f"Expected columns such as: {TEMPLATE_HEADER}"
        )
    if isinstance(exc, MissingColumnsError):
        labels = ", ".join(f"{COLUMN_LABELS.get(m, m)} ({m})" for m in exc.missing)
        where = f" on line {exc.header_line}" if exc.header_line else ""
        return f"Header{where} is missing mandatory column(s): {labels}"
    if isinstance(exc, MissingBirthdayError):
        lines = ", ".join(str(n) for n in exc.row_numbers)
        return (
            f"Birthday missing for {len(exc.row_numbers)} participant(s) "
            f"(line(s) {lines}). Nothing was imported."
        )
    return str(exc)


def build_report(summary: ImportSummary, counters: RunCounters) -> str:
    lines = [
        "=== Roster Reconciliation Report ===",
        f"rows_read          : {counters.rows_read}",
        "",
        "--- Matches ---",
        f"matched_existing   : {counters.matched_existing}",
        f"  by name+birthday : {counters.matched_by_name}",
        f"  by email         : {counters.matched_by_email}",
        f"new_candidates     : {counters.new_candidates}",
        f"rows_rejected      : {counters.rows_rejected}",
    ]
    if summary.new_candidates:
        lines += ["", "--- New participants ---"]
        for c in summary.new_candidates:
            lines.append(
                f"  line {c.row_number}: {c.first_name} {c.last_name}"
                f" ({c.birthday or '-'}) [{c.temp_id}]"
            )
    if summary.rejected_rows:
        lines += ["", "--- Rejected rows ---"]
        for r in summary.rejected_rows:
            lines.append(f"  line {r.row_number}: {r.reason}")
    if counters.warnings:
        lines += ["", "--- Warnings ---"]
        lines += [f"  {w}" for w in counters.warnings[:20]]
    return "\n".join(lines)
