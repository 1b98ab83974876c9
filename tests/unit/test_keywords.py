"""Unit tests for roster_recon.keywords."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from roster_recon.keywords import (
    DEFAULT_KEYWORDS,
    FieldKeywords,
    load_keyword_rules,
    validate_keyword_rules,
)
from roster_recon.shared import KeywordRulesValidationError

PROJECT_ROOT = Path(__file__).parent.parent.parent

CUSTOM_YAML = textwrap.dedent("""\
    version: "v2"
    max_header_lines: 3
    fields:
      email:
        keywords: [courriel, email]
      first_name:
        keywords: [Prénom, given]
      last_name:
        keywords: [nom, surname]
        exclusions:
          nom: [prénom]
      birthday:
        keywords: [naissance, dob]
""")


@pytest.fixture
def custom_yaml_path(tmp_path: Path) -> Path:
    p = tmp_path / "keywords.yml"
    p.write_text(CUSTOM_YAML, encoding="utf-8")
    return p


def _valid_data() -> dict:
    return {
        "version": "v1",
        "fields": {
            "email": {"keywords": ["email"]},
            "first_name": {"keywords": ["first"]},
            "last_name": {"keywords": ["last"]},
            "birthday": {"keywords": ["birth"]},
        },
    }


# ---------------------------------------------------------------------------
# FieldKeywords
# ---------------------------------------------------------------------------

class TestFieldKeywords:
    def test_substring_match_is_case_insensitive(self):
        assert FieldKeywords(("naissance",)).matches("Date de NAISSANCE")

    def test_exclusion_blocks_keyword(self):
        fk = FieldKeywords(("nom",), exclusions={"nom": ("prénom",)})
        assert not fk.matches("Prénom")

    def test_exclusion_only_applies_to_its_keyword(self):
        fk = FieldKeywords(("name", "last"), exclusions={"name": ("first",)})
        assert fk.matches("first or last")


class TestDefaultKeywords:
    def test_last_name_ignores_prenom(self):
        assert not DEFAULT_KEYWORDS.field_matches("last_name", "Prenom")

    def test_last_name_ignores_first_name(self):
        assert not DEFAULT_KEYWORDS.field_matches("last_name", "First name")

    def test_last_name_matches_nom(self):
        assert DEFAULT_KEYWORDS.field_matches("last_name", "Nom de famille")

    def test_email_matches_adresse(self):
        assert DEFAULT_KEYWORDS.field_matches("email", "Adresse e-mail")

    def test_max_header_lines(self):
        assert DEFAULT_KEYWORDS.max_header_lines == 5


# ---------------------------------------------------------------------------
# load_keyword_rules
# ---------------------------------------------------------------------------

class TestLoadKeywordRules:
    def test_loads_version(self, custom_yaml_path: Path):
        assert load_keyword_rules(custom_yaml_path).version == "v2"

    def test_loads_max_header_lines(self, custom_yaml_path: Path):
        assert load_keyword_rules(custom_yaml_path).max_header_lines == 3

    def test_keywords_are_lowercased(self, custom_yaml_path: Path):
        rules = load_keyword_rules(custom_yaml_path)
        assert "prénom" in rules.fields["first_name"].keywords

    def test_custom_keyword_matches(self, custom_yaml_path: Path):
        rules = load_keyword_rules(custom_yaml_path)
        assert rules.field_matches("email", "Courriel")
        assert rules.field_matches("birthday", "DOB")

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_keyword_rules(tmp_path / "absent.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        p = tmp_path / "bad.yml"
        p.write_text("fields: [unclosed", encoding="utf-8")
        with pytest.raises(KeywordRulesValidationError):
            load_keyword_rules(p)

    def test_shipped_rule_file_matches_builtin_defaults(self):
        rules = load_keyword_rules(PROJECT_ROOT / "config" / "header_keywords.yml")
        assert rules.fields == DEFAULT_KEYWORDS.fields
        assert rules.max_header_lines == DEFAULT_KEYWORDS.max_header_lines


# ---------------------------------------------------------------------------
# validate_keyword_rules
# ---------------------------------------------------------------------------

class TestValidateKeywordRules:
    def test_valid(self):
        validate_keyword_rules(_valid_data())

    def test_root_not_mapping(self):
        with pytest.raises(KeywordRulesValidationError, match="mapping"):
            validate_keyword_rules(["a"])

    def test_missing_version(self):
        data = _valid_data()
        del data["version"]
        with pytest.raises(KeywordRulesValidationError, match="version"):
            validate_keyword_rules(data)

    def test_missing_field(self):
        data = _valid_data()
        del data["fields"]["birthday"]
        with pytest.raises(KeywordRulesValidationError, match="birthday"):
            validate_keyword_rules(data)

    def test_unknown_field(self):
        data = _valid_data()
        data["fields"]["phone"] = {"keywords": ["tel"]}
        with pytest.raises(KeywordRulesValidationError, match="phone"):
            validate_keyword_rules(data)

    def test_empty_keywords(self):
        data = _valid_data()
        data["fields"]["email"]["keywords"] = []
        with pytest.raises(KeywordRulesValidationError, match="email"):
            validate_keyword_rules(data)

    def test_exclusion_on_undeclared_keyword(self):
        data = _valid_data()
        data["fields"]["last_name"]["exclusions"] = {"nom": ["prénom"]}
        with pytest.raises(KeywordRulesValidationError, match="undeclared"):
            validate_keyword_rules(data)

    @pytest.mark.parametrize("value", [0, -1, "5", True])
    def test_bad_max_header_lines(self, value):
        data = _valid_data()
        data["max_header_lines"] = value
        with pytest.raises(KeywordRulesValidationError, match="max_header_lines"):
            validate_keyword_rules(data)
