"""roster_recon.shared

Shared pieces used by the engine and the CLI: the terminal error taxonomy,
RunCounters, RejectWriter and run-report writing.
"""

from __future__ import annotations

import csv
import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from roster_recon.models import ExistingMember, ImportSummary, Invalid

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class RosterImportError(Exception):
    """Base class for terminal reconciliation failures.

    Raising one of these means the whole import is rejected; no partial
    ImportSummary exists.
    """


class EmptyFileError(RosterImportError):
    def __init__(self) -> None:
        super().__init__("The roster file is empty.")


class HeaderNotFoundError(RosterImportError):
    def __init__(self, lines_inspected: int) -> None:
        self.lines_inspected = lines_inspected
        super().__init__(
            f"No header row found in the first {lines_inspected} non-empty line(s)."
        )


class MissingColumnsError(RosterImportError):
    def __init__(self, missing: list[str], header_line: int | None = None) -> None:
        self.missing = list(missing)
        self.header_line = header_line
        super().__init__(f"Header is missing mandatory column(s): {', '.join(self.missing)}")


class MissingBirthdayError(RosterImportError):
    def __init__(self, row_numbers: list[int]) -> None:
        self.row_numbers = sorted(set(row_numbers))
        super().__init__(
            "Birthday missing on line(s) "
            f"{', '.join(str(n) for n in self.row_numbers)}; import rejected."
        )


class KeywordRulesValidationError(ValueError):
    """Raised when a YAML header keyword file fails schema validation."""


# ---------------------------------------------------------------------------
# RejectWriter
# ---------------------------------------------------------------------------

class RejectWriter:
    """Lazy-open CSV writer for rejected rows."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._fh = None
        self._writer = None

    def write(self, row: dict[str, str], reason: str) -> None:
        if self._fh is None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = open(self._path, "w", newline="", encoding="utf-8")
            fieldnames = list(row.keys()) + ["_reject_reason"]
            self._writer = csv.DictWriter(
                self._fh, fieldnames=fieldnames, extrasaction="ignore"
            )
            self._writer.writeheader()
        out = dict(row)
        out["_reject_reason"] = reason
        self._writer.writerow(out)
        self._fh.flush()

    def write_rejected(self, rejected: list[Invalid]) -> int:
        for r in rejected:
            self.write({"row_number": str(r.row_number)}, r.reason)
        return len(rejected)

    def close(self) -> None:
        if self._fh:
            self._fh.close()


# ---------------------------------------------------------------------------
# RunCounters
# ---------------------------------------------------------------------------

@dataclass
class RunCounters:
    rows_read: int = 0
    matched_existing: int = 0
    matched_by_name: int = 0
    matched_by_email: int = 0
    new_candidates: int = 0
    rows_rejected: int = 0
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: ImportSummary) -> "RunCounters":
        counters = cls(rows_read=summary.rows_read)
        for outcome in summary.outcomes:
            if isinstance(outcome, ExistingMember):
                counters.matched_existing += 1
                if outcome.matched_on == "email":
                    counters.matched_by_email += 1
                else:
                    counters.matched_by_name += 1
        counters.new_candidates = len(summary.new_candidates)
        counters.rows_rejected = len(summary.rejected_rows)
        for c in summary.new_candidates:
            if c.birthday and not _ISO_DATE_RE.match(c.birthday):
                counters.warnings.append(
                    f"line {c.row_number}: unrecognised birthday {c.birthday!r}"
                )
        return counters

    def to_dict(self) -> dict[str, Any]:
        d = {k: v for k, v in self.__dict__.items() if k != "warnings"}
        d["warnings"] = self.warnings[:50]
        return d


# ---------------------------------------------------------------------------
# Report writer
# ---------------------------------------------------------------------------

def write_run_report(
    run_id: str,
    started_at: str,
    mode: str,
    source_paths: dict[str, str],
    counters: RunCounters,
    error: str | None = None,
    reports_dir: Path = Path("./artifacts/reports"),
) -> Path:
    report = {
        "run_id": run_id,
        "mode": mode,
        "started_at": started_at,
        "finished_at": datetime.now(timezone.utc).isoformat(),
        **source_paths,
        "error": error,
        "counters": counters.to_dict(),
    }
    report_path = reports_dir / f"{run_id}.json"
    report_path.parent.mkdir(parents=True, exist_ok=True)
    report_path.write_text(json.dumps(report, indent=2, default=str))
    return report_path
