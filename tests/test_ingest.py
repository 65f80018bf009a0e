import pytest

from famgraph.errors import DuplicateIdError
from famgraph.graph import build_snapshot
from famgraph.ingest import (
    CSV_COLUMNS,
    extract_numeric_id,
    parse_gedcom_date,
    read_csv_records,
    read_records,
)
from famgraph.models import PartialDate, Sex

CSV_ROWS = [
    "1;1;Ivanov;Ivan;0;0;Tver;10.03.1900;Moscow;05.07.1985;;2;3;0;0;0;01.05.1924",
    "2;0;Ivanova;Maria;0;0;;1902;;;;1;3;0;0;1;01.05.1924",
    "3;1;Ivanov;Petr;1;2;;15.06.1925;;;Lenina 5;;;1;1;0;",
]

GEDCOM = """\
0 HEAD
1 SOUR test
1 GEDC
2 VERS 5.5.1
2 FORM LINEAGE-LINKED
1 CHAR UTF-8
0 @I1@ INDI
1 NAME Ivan /Ivanov/
1 SEX M
1 BIRT
2 DATE 10 MAR 1900
1 DEAT
2 DATE 5 JUL 1985
0 @I2@ INDI
1 NAME Maria /Ivanova/
1 SEX F
1 BIRT
2 DATE ABT 1902
0 @I3@ INDI
1 NAME Petr /Ivanov/
1 SEX M
1 BIRT
2 DATE 15 JUN 1925
0 @I4@ INDI
1 NAME Anna /Ivanova/
1 SEX F
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 MARR
2 DATE 1 MAY 1924
1 CHIL @I3@
1 CHIL @I4@
0 TRLR
"""


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "family.csv"
    path.write_text("\n".join([*CSV_ROWS, "", "4;1;Short;Line"]) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def gedcom_file(tmp_path):
    path = tmp_path / "family.ged"
    path.write_text(GEDCOM, encoding="utf-8")
    return path


class TestCsv:
    def test_rows_map_to_columns(self, csv_file):
        records = read_csv_records(csv_file)
        assert len(records) == 3
        assert set(records[0]) == set(CSV_COLUMNS)
        assert records[0]["firstName"] == "Ivan"
        assert records[2]["address"] == "Lenina 5"

    def test_builds_snapshot(self, csv_file):
        snapshot, report = build_snapshot(read_records(csv_file))
        ivan = snapshot.person(1)
        assert ivan.sex is Sex.MALE
        assert ivan.death == PartialDate.full(1985, 7, 5)
        assert ivan.marriage == PartialDate.full(1924, 5, 1)
        assert snapshot.person(2).sex is Sex.FEMALE
        assert snapshot.person(3).parent_ids == (1, 2)
        assert snapshot.person(2).children_ids == (3,)
        assert len(report) == 0

    def test_unbalanced_quotes_are_plain_text(self, tmp_path):
        path = tmp_path / "quoted.csv"
        rows = [CSV_ROWS[0].replace(";Ivan;", ";\"Vanya;"), *CSV_ROWS[1:]]
        path.write_text("\n".join(rows) + "\n", encoding="utf-8")
        records = read_csv_records(path)
        assert [r["id"] for r in records] == ["1", "2", "3"]
        assert records[0]["firstName"] == "\"Vanya"

    def test_byte_order_mark_is_dropped(self, tmp_path):
        path = tmp_path / "bom.csv"
        path.write_text("\n".join(CSV_ROWS) + "\n", encoding="utf-8-sig")
        snapshot, report = build_snapshot(read_records(path))
        assert sorted(snapshot.persons) == [1, 2, 3]
        assert "invalid_id" not in report.counts


class TestGedcom:
    def test_individuals_and_family_links(self, gedcom_file):
        snapshot, _ = build_snapshot(read_records(gedcom_file))
        assert len(snapshot) == 4

        ivan = snapshot.person(1)
        assert (ivan.first_name, ivan.last_name) == ("Ivan", "Ivanov")
        assert ivan.birth == PartialDate.full(1900, 3, 10)
        assert ivan.death == PartialDate.full(1985, 7, 5)
        assert ivan.spouse_ids == (2,)
        assert ivan.marriage == PartialDate.full(1924, 5, 1)

        maria = snapshot.person(2)
        assert maria.birth == PartialDate.year_only(1902)
        assert maria.order_by_spouse == 1

        assert snapshot.person(3).parent_ids == (1, 2)
        assert ivan.children_ids == (3, 4)
        assert snapshot.person(4).order_by_father == 2
        assert snapshot.person(4).birth is None

    def test_colliding_xref_numbers_reject_the_build(self, tmp_path):
        path = tmp_path / "clash.ged"
        path.write_text(
            "0 HEAD\n1 CHAR UTF-8\n"
            "0 @I12@ INDI\n1 NAME Ivan /Ivanov/\n1 SEX M\n"
            "0 @P12@ INDI\n1 NAME Maria /Ivanova/\n1 SEX F\n"
            "0 TRLR\n",
            encoding="utf-8",
        )
        records = read_records(path)
        assert [(r["id"], r["firstName"]) for r in records] == [(12, "Ivan"), (12, "Maria")]
        with pytest.raises(DuplicateIdError) as excinfo:
            build_snapshot(records)
        assert excinfo.value.ids == [12]

class TestGedcomDates:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("25 NOV 1954", PartialDate.full(1954, 11, 25)),
            ("ABT 1905", PartialDate.year_only(1905)),
            ("ABOUT 1905", PartialDate.year_only(1905)),
            ("JAN 1905", PartialDate.year_only(1905)),
            ("(1839-08-29)", PartialDate.full(1839, 8, 29)),
            ("1839-00-00", PartialDate.year_only(1839)),
            ("(05/15/1923)", PartialDate.full(1923, 5, 15)),
            ("(April 17, 1850)", PartialDate.full(1850, 4, 17)),
            ("30 FEB 1900", PartialDate.unknown()),
            ("sometime", PartialDate.unknown()),
        ],
    )
    def test_formats(self, text, expected):
        assert parse_gedcom_date(text) == expected

    def test_missing(self):
        assert parse_gedcom_date(None) is None
        assert parse_gedcom_date("") is None

    def test_numeric_ids(self):
        assert extract_numeric_id("@I_347421849@") == 347421849
        with pytest.raises(ValueError):
            extract_numeric_id("@X@")
