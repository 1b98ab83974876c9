"""Unit tests for member snapshot loading and MemberRecord.from_dict."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from roster_recon.members import load_member_snapshot
from roster_recon.models import MemberRecord


class TestMemberRecordFromDict:
    def test_snake_case(self):
        rec = MemberRecord.from_dict(
            {"id": 3, "first_name": " Alice ", "last_name": "Martin", "birthday": "2010-04-12", "email": "a@x.com"}
        )
        assert rec == MemberRecord(3, "Alice", "Martin", "2010-04-12", "a@x.com")

    def test_camel_case(self):
        rec = MemberRecord.from_dict({"id": "u-1", "firstName": "Alice", "lastName": "Martin"})
        assert rec.first_name == "Alice"
        assert rec.birthday is None

    def test_blank_email_is_none(self):
        assert MemberRecord.from_dict({"id": 1, "email": "  "}).email is None

    def test_missing_id_raises(self):
        with pytest.raises(ValueError):
            MemberRecord.from_dict({"first_name": "Alice"})

    def test_non_string_values_coerced(self):
        rec = MemberRecord.from_dict({"id": 1, "first_name": 42, "last_name": "Martin", "email": True})
        assert rec.first_name == "42"
        assert rec.email == "True"


class TestLoadMemberSnapshot:
    def test_json_list(self, tmp_path: Path):
        p = tmp_path / "members.json"
        p.write_text(json.dumps([{"id": 1, "first_name": "Alice", "last_name": "Martin"}]), encoding="utf-8")
        assert [m.id for m in load_member_snapshot(p)] == [1]

    def test_json_data_envelope(self, tmp_path: Path):
        p = tmp_path / "members.json"
        p.write_text(json.dumps({"data": [{"id": 1}, {"id": 2}]}), encoding="utf-8")
        assert [m.id for m in load_member_snapshot(p)] == [1, 2]

    def test_json_wrong_shape(self, tmp_path: Path):
        p = tmp_path / "members.json"
        p.write_text(json.dumps({"members": []}), encoding="utf-8")
        with pytest.raises(ValueError):
            load_member_snapshot(p)

    def test_csv(self, tmp_path: Path):
        p = tmp_path / "members.csv"
        p.write_text(
            "id,first_name,last_name,birthday,email\n7,Alice,Martin,2010-04-12,a@x.com\n",
            encoding="utf-8",
        )
        members = load_member_snapshot(p)
        assert members == [MemberRecord("7", "Alice", "Martin", "2010-04-12", "a@x.com")]

    def test_csv_line_separator_stays_in_cell(self, tmp_path: Path):
        p = tmp_path / "members.csv"
        p.write_text("id,first_name,last_name\n7,Ali\u2028ce,Martin\n8,Bob,Durand\n", encoding="utf-8")
        assert [m.id for m in load_member_snapshot(p)] == ["7", "8"]

    def test_json_entry_not_an_object(self, tmp_path: Path):
        p = tmp_path / "members.json"
        p.write_text(json.dumps([1, 2]), encoding="utf-8")
        with pytest.raises(ValueError):
            load_member_snapshot(p)
