"""Normalization functions for roster CSV reconciliation.

All functions accept str | None and return the appropriate type or None.
None of them raise on malformed input.
"""

from __future__ import annotations

import re
import unicodedata

_BIRTHDAY_RE = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4}|\d{2})$")
_ISO_DATE_PART_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ].*)?$")

# Two-digit years below this pivot land in the 2000s, the rest in the 1900s.
CENTURY_PIVOT = 50


# ---------------------------------------------------------------------------
# Rule 1: trim
# ---------------------------------------------------------------------------

def trim(value: str | None) -> str | None:
    """Strip leading/trailing whitespace; treat empty string as None."""
    if value is None:
        return None
    v = value.strip()
    return v if v else None


# ---------------------------------------------------------------------------
# Rule 2: normalize_space
# ---------------------------------------------------------------------------

def normalize_space(value: str | None) -> str | None:
    """Collapse internal runs of whitespace to single spaces, then trim."""
    v = trim(value)
    if v is None:
        return None
    return re.sub(r"\s+", " ", v)


# ---------------------------------------------------------------------------
# Rule 3: normalize_email
# ---------------------------------------------------------------------------

def normalize_email(value: str | None) -> str | None:
    """Lowercase and trim an email address."""
    v = trim(value)
    if v is None:
        return None
    return v.lower()


# ---------------------------------------------------------------------------
# Rule 4: name_key  (for member identity matching)
# ---------------------------------------------------------------------------

def name_key(value: str | None) -> str | None:
    """Return the comparison key for a first or last name.

    Whitespace is collapsed, the string is NFC-composed (spreadsheet exports
    sometimes ship decomposed accents) and casefolded.  Accents are kept:
    "Zoé" and "Zoe" are different names.
    """
    v = normalize_space(value)
    if v is None:
        return None
    return unicodedata.normalize("NFC", v).casefold()


# ---------------------------------------------------------------------------
# Rule 5: strip_quotes
# ---------------------------------------------------------------------------

def strip_quotes(value: str) -> str:
    """Trim a cell and remove one leading and one trailing double quote."""
    v = value.strip()
    if v.startswith('"'):
        v = v[1:]
    if v.endswith('"'):
        v = v[:-1]
    return v.strip()


# ---------------------------------------------------------------------------
# Rule 6: normalize_birthday
# ---------------------------------------------------------------------------

def normalize_birthday(value: str | None) -> str | None:
    """Convert a D/M/Y style date into 'YYYY-MM-DD'.

    Accepts '/', '-' or '.' separators, 1-2 digit day and month and a
    2 or 4 digit year.  Two-digit years resolve to 20YY below 50, 19YY
    otherwise.

    Blank input returns None.  Anything that does not match the pattern
    (an ISO date, free text) comes back unchanged so the caller still
    sees the cell as present.
    """
    v = trim(value)
    if v is None:
        return None
    m = _BIRTHDAY_RE.match(v)
    if m is None:
        return v
    day, month, year = m.groups()
    if len(year) == 2:
        yy = int(year)
        year = f"20{year}" if yy < CENTURY_PIVOT else f"19{year}"
    return f"{year}-{int(month):02d}-{int(day):02d}"


# ---------------------------------------------------------------------------
# Rule 7: date_part
# ---------------------------------------------------------------------------

def date_part(value: str | None) -> str | None:
    """Return the calendar date of an ISO date or datetime string.

    '2010-04-12T08:30:00Z' -> '2010-04-12'.  Values that are not ISO-shaped
    go through normalize_birthday so snapshot dates stored as D/M/Y still
    compare against normalized roster cells.
    """
    v = trim(value)
    if v is None:
        return None
    m = _ISO_DATE_PART_RE.match(v)
    if m:
        return m.group(1)
    return normalize_birthday(v)
