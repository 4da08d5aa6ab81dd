"""
Tests for talent_directory/cli.py - command line entry point.
"""
from unittest.mock import MagicMock

import pandas as pd
import pytest

from talent_directory import cli
from talent_directory.similarity import rank_similar


@pytest.fixture(autouse=True)
def keep_log_sinks(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


@pytest.fixture
def patched_directory(monkeypatch, directory):
    monkeypatch.setattr(cli, "build_directory", lambda: directory)
    return directory


class TestListCommand:

    def test_lists_everyone(self, patched_directory, capsys):
        assert cli.main(["list"]) == 0

        out = capsys.readouterr().out
        assert "Jane Doe" in out
        assert "3 employee(s)" in out

    def test_keyword(self, patched_directory, capsys):
        cli.main(["list", "sql"])

        out = capsys.readouterr().out
        assert "山田 太郎" in out
        assert "Jane Doe" not in out
        assert "1 employee(s)" in out


class TestSimilarCommand:

    def test_prints_ranking(self, patched_directory, capsys):
        assert cli.main(["similar", "1", "--topk", "1"]) == 0

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("2.80\t3\t")

    def test_unknown_employee(self, patched_directory, capsys):
        assert cli.main(["similar", "999"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_writes_csv(self, patched_directory, tmp_path):
        out = tmp_path / "out" / "similar.csv"

        cli.main(["similar", "1", "--out", str(out)])

        df = pd.read_csv(out, dtype={"Employee_id": str, "Similar_employee_id": str})
        assert list(df.columns) == ["Employee_id", "Similar_employee_id", "Score"]
        assert df["Similar_employee_id"].tolist() == ["3", "2"]


class TestWriteSimilarCsv:

    def test_rounds_scores(self, employee_db, tmp_path):
        current = employee_db.get_employee("1")
        ranked = rank_similar(current, employee_db.get_employees(""))
        out = tmp_path / "similar.csv"

        cli.write_similar_csv("1", ranked, out)

        df = pd.read_csv(out)
        assert df["Score"].tolist() == pytest.approx([2.8, 2.9])
        assert set(df["Employee_id"]) == {1}


class TestStatsCommand:

    def test_prints_labels(self, patched_directory, capsys):
        assert cli.main(["stats"]) == 0

        out = capsys.readouterr().out
        assert "Recommendations: 4" in out
        assert "Mentoring: 2" in out
        assert "High: 2" in out
        assert "Jane Doe: 2" in out


class TestImportCommand:

    def test_puts_every_valid_row(self, monkeypatch, tmp_path, capsys):
        path = tmp_path / "employees.csv"
        path.write_text("id,name,age\n1,Jane Doe,22\n2,John Smith,\n3,山田 太郎,27\n", encoding="utf-8")
        table = MagicMock()
        monkeypatch.setattr(cli, "DynamoDBEmployeeTable", MagicMock(return_value=table))

        assert cli.main(["import", "--csv", str(path), "--table", "t"]) == 0

        put_ids = [call.args[0].id for call in table.put_employee.call_args_list]
        assert put_ids == ["1", "3"]
        assert "Imported 2 employees into t" in capsys.readouterr().out


class TestParser:

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_similar_defaults(self):
        args = cli.build_parser().parse_args(["similar", "7"])

        assert args.topk == 10
        assert args.out is None
