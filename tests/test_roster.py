"""
Tests for talent_directory/roster.py - roster CSV loading.
"""
import pandas as pd
import pytest

from talent_directory.roster import (
    load_roster,
    parse_age,
    parse_tech_level,
    parse_tech_stacks,
    roster_records,
    write_roster,
)


@pytest.fixture
def roster_csv(tmp_path):
    path = tmp_path / "employees.csv"
    path.write_text(
        "id,name,age,department,position,techStacks\n"
        "1,Jane Doe,22,Engineering,Software Engineer,Python:3;TypeScript:2\n"
        "2,John Smith,28,,,\n"
        "3,山田 太郎,27,Product,Product Manager,\"\"\"SQL\"\":2\"\n",
        encoding="utf-8",
    )
    return path


class TestParseTechStacks:

    def test_pairs(self):
        assert parse_tech_stacks("Python:3;Go:1") == [
            {"name": "Python", "level": 3},
            {"name": "Go", "level": 1},
        ]

    def test_blank_pairs_are_skipped(self):
        assert parse_tech_stacks("Python:3;; ;") == [{"name": "Python", "level": 3}]

    def test_missing_or_bad_level_is_zero(self):
        assert parse_tech_stacks("Rust;Go:abc") == [
            {"name": "Rust", "level": 0},
            {"name": "Go", "level": 0},
        ]

    def test_quotes_are_stripped(self):
        assert parse_tech_stacks('"SQL":2') == [{"name": "SQL", "level": 2}]

    def test_empty(self):
        assert parse_tech_stacks("") == []
        assert parse_tech_stacks(None) == []

    def test_duplicates_are_kept(self):
        assert len(parse_tech_stacks("Go:1;Go:2")) == 2

    def test_level_parsing(self):
        assert parse_tech_level("4") == 4
        assert parse_tech_level(" 2 ") == 2
        assert parse_tech_level("nan") == 0


class TestParseAge:

    @pytest.mark.parametrize(
        "raw,expected",
        [("22", 22), (" 30 ", 30), ("0", 0), ("", None), ("abc", None), (None, None), ("22.0", 22)],
    )
    def test_values(self, raw, expected):
        assert parse_age(raw) == expected

    def test_fractional_kept_for_schema_to_reject(self):
        assert parse_age("22.5") == 22.5


class TestRosterRecords:

    def test_column_variants_are_standardised(self):
        df = pd.DataFrame(
            {"Employee ID": ["5"], "Full Name": ["Ann  Lee"], "Age": ["31"], "Skills": ["Go:2"]}
        )

        records = roster_records(df)

        assert records == [
            {
                "id": "5",
                "name": "Ann Lee",
                "age": 31,
                "department": "",
                "position": "",
                "techStacks": [{"name": "Go", "level": 2}],
            }
        ]

    def test_missing_age_column_leaves_key_out(self):
        df = pd.DataFrame({"id": ["5"], "name": ["Ann"]})

        assert "age" not in roster_records(df)[0]


class TestLoadRoster:

    def test_loads_rows_in_file_order(self, roster_csv):
        records = load_roster(roster_csv)

        assert [r["id"] for r in records] == ["1", "2", "3"]
        assert records[0]["techStacks"] == [
            {"name": "Python", "level": 3},
            {"name": "TypeScript", "level": 2},
        ]

    def test_optional_columns_default_to_empty(self, roster_csv):
        john = load_roster(roster_csv)[1]

        assert john["department"] == ""
        assert john["position"] == ""
        assert john["techStacks"] == []

    def test_quoted_tech_name(self, roster_csv):
        assert load_roster(roster_csv)[2]["techStacks"] == [{"name": "SQL", "level": 2}]

    def test_short_optional_columns(self, tmp_path):
        path = tmp_path / "short.csv"
        path.write_text("id,name,age\n1,Jane Doe,22\n", encoding="utf-8")

        records = load_roster(path)

        assert records[0]["age"] == 22
        assert records[0]["techStacks"] == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        assert load_roster(path) == []

    def test_line_with_extra_fields_is_skipped(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("id,name,age\n1,Jane,22\n2,Doe,John,28\n3,Taro,27\n", encoding="utf-8")

        assert [r["id"] for r in load_roster(path)] == ["1", "3"]

    def test_write_then_load(self, tmp_path, roster_csv):
        records = load_roster(roster_csv)
        out = write_roster(records, tmp_path / "out" / "roster.csv")

        assert load_roster(out) == records


class TestByteOrderMark:

    def test_bom_header_is_recognised(self, tmp_path):
        path = tmp_path / "exported.csv"
        path.write_bytes("id,name,age\n1,Jane Doe,22\n".encode("utf-8-sig"))

        records = load_roster(path)

        assert records[0]["id"] == "1"
        assert records[0]["age"] == 22
