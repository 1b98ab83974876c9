"""roster_recon.rows

Data-row splitting and per-row normalization.  No validation happens here;
the orchestrator decides what an incomplete row means.
"""

from __future__ import annotations

from roster_recon.header import HeaderMatch, split_line
from roster_recon.models import ColumnMap, NormalizedRow, RawRow
from roster_recon.normalize import normalize_birthday, normalize_space, trim


def parse_rows(lines: list[str], header: HeaderMatch) -> list[RawRow]:
    """Split every non-blank line after the header, in file order."""
    rows: list[RawRow] = []
    for idx in range(header.data_start, len(lines)):
        line = lines[idx]
        if not line.strip():
            continue
        rows.append(RawRow(line_number=idx + 1, cells=tuple(split_line(line, header.delimiter))))
    return rows


def normalize_row(raw: RawRow, columns: ColumnMap) -> NormalizedRow:
    return NormalizedRow(
        row_number=raw.line_number,
        first_name=normalize_space(raw.cell(columns.first_name)) or "",
        last_name=normalize_space(raw.cell(columns.last_name)) or "",
        email=trim(raw.cell(columns.email)),
        birthday=normalize_birthday(raw.cell(columns.birthday)),
    )
