import pytest
from typer.testing import CliRunner

from famgraph.cli import app

runner = CliRunner()

ROWS = [
    "1;1;Ivanov;Ivan;0;0;;10.03.1900;;05.07.1985;;2;3;0;0;0;",
    "2;0;Ivanova;Maria;0;0;;1902;;;;1;3;0;0;1;",
    "3;1;Ivanov;Petr;1;2;;15.06.1925;;;;;;1;1;0;",
]


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "family.csv"
    path.write_text("\n".join(ROWS) + "\n", encoding="utf-8")
    return path


def test_validate(data_file):
    result = runner.invoke(app, ["validate", str(data_file)])
    assert result.exit_code == 0
    assert "3 persons, 0 validation issues" in result.output


def test_kinship(data_file):
    result = runner.invoke(app, ["kinship", str(data_file), "1", "3"])
    assert result.exit_code == 0
    assert "parent" in result.output


def test_kinship_unknown_person(data_file):
    result = runner.invoke(app, ["kinship", str(data_file), "1", "99"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_tree(data_file):
    result = runner.invoke(app, ["tree", str(data_file), "1"])
    assert result.exit_code == 0
    assert "Petr Ivanov (#3)" in result.output


def test_events(data_file):
    result = runner.invoke(app, ["events", str(data_file), "--days", "10", "--today", "10.06.2024"])
    assert result.exit_code == 0
    assert "15.06.2024" in result.output


def test_events_rejects_bad_date(data_file):
    result = runner.invoke(app, ["events", str(data_file), "--today", "June"])
    assert result.exit_code != 0


def test_stats(data_file):
    result = runner.invoke(app, ["stats", str(data_file), "--today", "01.01.2024"])
    assert result.exit_code == 0
    assert "Total: 3" in result.output


def test_person(data_file):
    result = runner.invoke(app, ["person", str(data_file), "3"])
    assert result.exit_code == 0
    assert "Gemini" in result.output
