"""Member snapshot loading for the command line.

The engine itself takes MemberRecord objects; this module turns an exported
directory file (JSON from the members API, or a CSV dump) into those.
"""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any

from roster_recon.models import MemberRecord


def _records_from_json(payload: Any) -> list[dict[str, Any]]:
    # The members endpoint wraps its list in {"data": [...]}.
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        payload = payload["data"]
    if not isinstance(payload, list):
        raise ValueError("member snapshot JSON must be a list or a {'data': [...]} envelope")
    return payload


def load_member_snapshot(path: Path) -> list[MemberRecord]:
    """Read members from a .json or .csv file, keeping file order."""
    text = path.read_text(encoding="utf-8-sig")
    if path.suffix.lower() == ".json":
        rows = _records_from_json(json.loads(text))
    else:
        rows = list(csv.DictReader(io.StringIO(text, newline="")))
    bad = [i for i, r in enumerate(rows) if not isinstance(r, dict)]
    if bad:
        raise ValueError(f"member snapshot entry {bad[0]} is not an object")
    return [MemberRecord.from_dict(r) for r in rows]
