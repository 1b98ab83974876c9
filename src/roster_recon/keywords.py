"""roster_recon.keywords

Header keyword sets used to recognise roster columns, plus a YAML loader so
the sets can be extended without a code change.

Rule file shape (see config/header_keywords.yml):

    version: "v1"
    max_header_lines: 5
    fields:
      first_name:
        keywords: [prénom, prenom, first, firstname]
      last_name:
        keywords: [nom, last, lastname, name]
        exclusions:
          nom: [prénom, prenom]
          name: [first]
      ...

A cell matches a field when it contains one of the field's keywords and none
of the exclusion substrings registered for that keyword.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from roster_recon.models import ALL_FIELDS, BIRTHDAY, EMAIL, FIRST_NAME, LAST_NAME
from roster_recon.shared import KeywordRulesValidationError

DEFAULT_MAX_HEADER_LINES = 5


# ---------------------------------------------------------------------------
# Keyword sets
# ---------------------------------------------------------------------------

def _fold(value: str) -> str:
    return unicodedata.normalize("NFC", value).lower()


@dataclass(frozen=True)
class FieldKeywords:
    keywords: tuple[str, ...]
    exclusions: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def matches(self, cell: str) -> bool:
        """True when the lower-cased cell contains an admissible keyword."""
        folded = _fold(cell)
        for kw in self.keywords:
            if kw not in folded:
                continue
            if any(ex in folded for ex in self.exclusions.get(kw, ())):
                continue
            return True
        return False


@dataclass(frozen=True)
class HeaderKeywords:
    fields: dict[str, FieldKeywords]
    max_header_lines: int = DEFAULT_MAX_HEADER_LINES
    version: str = "builtin"

    def field_matches(self, name: str, cell: str) -> bool:
        return self.fields[name].matches(cell)


DEFAULT_KEYWORDS = HeaderKeywords(
    fields={
        EMAIL: FieldKeywords(("email", "e-mail", "adresse e-mail")),
        FIRST_NAME: FieldKeywords(("prénom", "prenom", "first", "firstname")),
        LAST_NAME: FieldKeywords(
            ("nom", "last", "lastname", "name"),
            exclusions={"nom": ("prénom", "prenom"), "name": ("first",)},
        ),
        BIRTHDAY: FieldKeywords(("naissance", "birthday", "birth", "date")),
    },
)


# ---------------------------------------------------------------------------
# Loader + validator
# ---------------------------------------------------------------------------

def load_keyword_rules(yaml_path: Path) -> HeaderKeywords:
    """Load, validate, and return HeaderKeywords from a YAML file.

    Raises:
        KeywordRulesValidationError: If the file content violates the schema.
        FileNotFoundError: If the YAML file does not exist.
    """
    raw = yaml_path.read_text(encoding="utf-8")
    try:
        data: Any = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise KeywordRulesValidationError(f"Invalid YAML in {yaml_path}: {exc}") from exc
    validate_keyword_rules(data)

    fields: dict[str, FieldKeywords] = {}
    for name in ALL_FIELDS:
        field_def = data["fields"][name]
        fields[name] = FieldKeywords(
            keywords=tuple(_fold(str(k)) for k in field_def["keywords"]),
            exclusions={
                _fold(str(k)): tuple(_fold(str(e)) for e in v)
                for k, v in (field_def.get("exclusions") or {}).items()
            },
        )
    return HeaderKeywords(
        fields=fields,
        max_header_lines=int(data.get("max_header_lines", DEFAULT_MAX_HEADER_LINES)),
        version=str(data["version"]),
    )


def validate_keyword_rules(data: Any) -> None:
    """Raise KeywordRulesValidationError if data does not match the schema.

    Validates:
      - root is a mapping with 'version' and 'fields'
      - every semantic field is present with a non-empty keyword list
      - exclusions only reference declared keywords
      - max_header_lines, when given, is a positive integer
    """
    if not isinstance(data, dict):
        raise KeywordRulesValidationError("YAML root must be a mapping.")

    missing_keys = {"version", "fields"} - set(data.keys())
    if missing_keys:
        raise KeywordRulesValidationError(f"Missing required YAML keys: {sorted(missing_keys)}")

    max_lines = data.get("max_header_lines", DEFAULT_MAX_HEADER_LINES)
    if isinstance(max_lines, bool) or not isinstance(max_lines, int) or max_lines < 1:
        raise KeywordRulesValidationError(
            f"'max_header_lines' must be a positive integer, got {max_lines!r}."
        )

    fields = data.get("fields")
    if not isinstance(fields, dict):
        raise KeywordRulesValidationError("'fields' must be a mapping.")

    missing_fields = set(ALL_FIELDS) - set(fields.keys())
    if missing_fields:
        raise KeywordRulesValidationError(f"Missing field definitions: {sorted(missing_fields)}")

    unknown = set(fields.keys()) - set(ALL_FIELDS)
    if unknown:
        raise KeywordRulesValidationError(f"Unknown fields: {sorted(unknown)}")

    for name, field_def in fields.items():
        if not isinstance(field_def, dict):
            raise KeywordRulesValidationError(f"Field '{name}' must be a mapping.")
        keywords = field_def.get("keywords")
        if not isinstance(keywords, list) or not keywords:
            raise KeywordRulesValidationError(
                f"Field '{name}' must declare a non-empty 'keywords' list."
            )
        if any(not str(k).strip() for k in keywords):
            raise KeywordRulesValidationError(f"Field '{name}' has a blank keyword.")
        exclusions = field_def.get("exclusions") or {}
        if not isinstance(exclusions, dict):
            raise KeywordRulesValidationError(f"Field '{name}' exclusions must be a mapping.")
        declared = {str(k) for k in keywords}
        for kw, excluded in exclusions.items():
            if str(kw) not in declared:
                raise KeywordRulesValidationError(
                    f"Field '{name}' excludes on undeclared keyword '{kw}'."
                )
            if not isinstance(excluded, list):
                raise KeywordRulesValidationError(
                    f"Field '{name}' exclusions for '{kw}' must be a list."
                )
