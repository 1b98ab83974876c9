"""roster_recon.header

Header row detection for loosely structured roster exports.

Spreadsheet exports often carry a title or a few metadata lines before the
real header, and use either ',' or ';' depending on the locale of the tool
that produced them.  locate_header() scans the first non-empty lines, picks
the first one that looks like a header, and fixes the delimiter and column
positions used for every data row after it.

Known limitation: the first line matching any single keyword wins, so a title
such as "Liste des dates de naissance" is taken as the header.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass

from roster_recon.keywords import DEFAULT_KEYWORDS, HeaderKeywords
from roster_recon.models import (
    ALL_FIELDS,
    BIRTHDAY,
    EMAIL,
    FIRST_NAME,
    LAST_NAME,
    MANDATORY_FIELDS,
    ColumnMap,
)
from roster_recon.normalize import strip_quotes
from roster_recon.shared import HeaderNotFoundError, MissingColumnsError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderMatch:
    line_index: int  # 0-based index into the split lines
    delimiter: str
    columns: ColumnMap
    cells: tuple[str, ...] = ()

    @property
    def data_start(self) -> int:
        return self.line_index + 1


# ---------------------------------------------------------------------------
# Line splitting
# ---------------------------------------------------------------------------

def detect_delimiter(line: str) -> str:
    """',' when the line contains a comma, ';' otherwise."""
    return "," if "," in line else ";"


def split_line(line: str, delimiter: str) -> list[str]:
    """Split one line on delimiter; cells are trimmed and unquoted.

    Balanced quotes may protect a delimiter inside a cell.  A line with an
    odd number of quotes is split on the bare delimiter so a stray quote
    cannot swallow the rest of the row.
    """
    if line.count('"') % 2:
        return [strip_quotes(c) for c in line.split(delimiter)]
    try:
        cells = next(csv.reader([line], delimiter=delimiter))
    except StopIteration:
        return []
    return [strip_quotes(c) for c in cells]


# ---------------------------------------------------------------------------
# Column detection
# ---------------------------------------------------------------------------

def find_columns(
    cells: list[str],
    keywords: HeaderKeywords = DEFAULT_KEYWORDS,
) -> dict[str, int]:
    """Return {field: index of the first cell matching it} for matched fields."""
    found: dict[str, int] = {}
    for name in ALL_FIELDS:
        for idx, cell in enumerate(cells):
            if keywords.field_matches(name, cell):
                found[name] = idx
                break
    return found


def locate_header(
    lines: list[str],
    keywords: HeaderKeywords = DEFAULT_KEYWORDS,
) -> HeaderMatch:
    """Find the header row among the first non-empty lines.

    Raises:
        HeaderNotFoundError: no candidate line matched any keyword set.
        MissingColumnsError: the header lacks first name, last name or
            birthday.
    """
    inspected = 0
    for idx, line in enumerate(lines):
        if not line.strip():
            continue
        if inspected >= keywords.max_header_lines:
            break
        inspected += 1

        delimiter = detect_delimiter(line)
        cells = split_line(line, delimiter)
        found = find_columns(cells, keywords)
        if not found:
            continue

        log.debug("header found on line %d (delimiter=%r): %s", idx + 1, delimiter, found)
        missing = [name for name in MANDATORY_FIELDS if name not in found]
        if missing:
            raise MissingColumnsError(missing, header_line=idx + 1)
        return HeaderMatch(
            line_index=idx,
            delimiter=delimiter,
            columns=ColumnMap(
                first_name=found[FIRST_NAME],
                last_name=found[LAST_NAME],
                birthday=found[BIRTHDAY],
                email=found.get(EMAIL),
            ),
            cells=tuple(cells),
        )

    raise HeaderNotFoundError(inspected)
