"""Read person records from GEDCOM or semicolon-delimited CSV files."""

import csv
import logging
from pathlib import Path
import re
from typing import Any

from ged4py import GedcomReader

from famgraph.models import PartialDate

logger = logging.getLogger(__name__)

# Month name mappings (handle abbreviations and full names)
MONTH_MAP = {
    "JAN": 1,
    "JANUARY": 1,
    "FEB": 2,
    "FEBRUARY": 2,
    "MAR": 3,
    "MARCH": 3,
    "APR": 4,
    "APRIL": 4,
    "MAY": 5,
    "JUN": 6,
    "JUNE": 6,
    "JUL": 7,
    "JULY": 7,
    "AUG": 8,
    "AUGUST": 8,
    "SEP": 9,
    "SEPT": 9,
    "SEPTEMBER": 9,
    "OCT": 10,
    "OCTOBER": 10,
    "NOV": 11,
    "NOVEMBER": 11,
    "DEC": 12,
    "DECEMBER": 12,
}

CSV_COLUMNS = [
    "id",
    "sex",
    "lastName",
    "firstName",
    "fatherId",
    "motherId",
    "birthPlace",
    "birth",
    "deathPlace",
    "death",
    "address",
    "spouseIds",
    "childrenIds",
    "orderByFather",
    "orderByMother",
    "orderBySpouse",
    "marriage",
]


def extract_numeric_id(xref_id: str) -> int:
    """Extract numeric part from GEDCOM xref_id like '@I_347421849@' or 'I674624289'."""
    # Remove @ symbols and extract all digits
    digits = re.sub(r"[^0-9]", "", xref_id)
    if not digits:
        raise ValueError(f"No numeric ID found in: {xref_id}")
    return int(digits)


def _full_or_year(year: int, month: int | None, day: int | None) -> PartialDate:
    try:
        if month and day:
            return PartialDate.full(year, month, day)
        return PartialDate.year_only(year)
    except ValueError:
        return PartialDate.unknown()


def parse_gedcom_date(date_str: str | None) -> PartialDate | None:
    """
    Parse a GEDCOM date string into a PartialDate.
    Returns None for a missing date and an Unknown date when it cannot be parsed.
    Month-and-year dates keep only the year.

    Handles formats like:
    - "25 NOV 1954"
    - "1698"
    - "ABOUT 1905"
    - "JAN 1905"
    - "(1839-08-29)"
    - "(05/15/1923)"
    - "(April 17, 1850)"
    """
    if not date_str:
        return None

    # Clean up the string
    s = date_str.strip().strip("()").rstrip("?")
    # Remove qualifiers (ABT, ABOUT, BEF, AFT, EST, CAL, AROUND, etc.) - with optional colon
    s = re.sub(
        r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|CIRCA|CA\.?|AROUND):?\s*",
        "",
        s,
        flags=re.IGNORECASE,
    ).strip()

    if not s:
        return PartialDate.unknown()

    # "1839-08-29"; "00" month or day means not recorded
    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})$", s)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _full_or_year(year, month, day)

    # "25 NOV 1954" or "08 March 1893" or "11 Aug. 1968"
    match = re.match(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(2).upper())
        if month:
            return _full_or_year(int(match.group(3)), month, int(match.group(1)))

    # "NOV 1954" or "May, 1837"
    match = re.match(r"^([A-Za-z]+)\.?,?\s*(\d{4})$", s)
    if match and MONTH_MAP.get(match.group(1).upper()):
        return _full_or_year(int(match.group(2)), None, None)

    # "1698"
    match = re.match(r"^(\d{4})$", s)
    if match:
        return _full_or_year(int(match.group(1)), None, None)

    # "01/27/1920" or "01-27-1920" (MM/DD/YYYY)
    match = re.match(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$", s)
    if match:
        return _full_or_year(int(match.group(3)), int(match.group(1)), int(match.group(2)))

    # "April 17, 1850" or "SEPT. 17,1910"
    match = re.match(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(1).upper())
        if month:
            return _full_or_year(int(match.group(3)), month, int(match.group(2)))

    return PartialDate.unknown()


def extract_name_parts(indi) -> tuple[str, str]:
    """Extract given name and surname from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return ("", "")

    name_value = name_rec.value

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_value, tuple):
        given, surname, _ = name_value
        return (given or "", surname or "")

    # Fallback: explicit GIVN/SURN sub-records
    givn = name_rec.sub_tag("GIVN")
    surn = name_rec.sub_tag("SURN")
    if givn or surn:
        return (givn.value if givn else "", surn.value if surn else "")

    return (str(name_value).replace("/", "").strip(), "")


def extract_event_date(rec, tag: str) -> PartialDate | None:
    """Extract the date of an event tag (BIRT, DEAT, MARR)."""
    event = rec.sub_tag(tag)
    if event is None:
        return None

    date_rec = event.sub_tag("DATE")
    # ged4py may return DateValue objects
    if date_rec and date_rec.value:
        return parse_gedcom_date(str(date_rec.value))
    return None


def extract_sex(indi) -> str | None:
    """Extract sex from an individual record."""
    sex_rec = indi.sub_tag("SEX")
    return sex_rec.value if sex_rec else None


def read_gedcom_records(filepath: Path) -> list[dict[str, Any]]:
    """
    Convert a GEDCOM file into raw person records.
    Only INDI and FAM records are read. Individuals whose xrefs reduce to the
    same number are all returned so the snapshot build rejects the batch.
    """
    reader = GedcomReader(str(filepath))
    records: dict[int, dict[str, Any]] = {}
    persons: list[dict[str, Any]] = []

    # First pass: extract all individuals
    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue

        indi_id = extract_numeric_id(rec.xref_id)
        given_name, surname = extract_name_parts(rec)
        person = {
            "id": indi_id,
            "sex": extract_sex(rec),
            "firstName": given_name,
            "lastName": surname,
            "birth": extract_event_date(rec, "BIRT"),
            "death": extract_event_date(rec, "DEAT"),
            "marriage": None,
            "fatherId": None,
            "motherId": None,
            "spouseIds": [],
            "childrenIds": [],
            "orderByFather": 0,
            "orderByMother": 0,
            "orderBySpouse": 0,
        }
        persons.append(person)
        if indi_id in records:
            logger.warning("GEDCOM record %s repeats person id %d", rec.xref_id, indi_id)
            continue
        records[indi_id] = person

    # Second pass: family records carry the links
    for rec in reader.records0("FAM"):
        husb = rec.sub_tag("HUSB")
        wife = rec.sub_tag("WIFE")

        husb_id = extract_numeric_id(husb.xref_id) if husb and husb.xref_id else None
        wife_id = extract_numeric_id(wife.xref_id) if wife and wife.xref_id else None
        marriage = extract_event_date(rec, "MARR")

        # Spouse relationship
        if husb_id in records and wife_id in records:
            for a, b in ((husb_id, wife_id), (wife_id, husb_id)):
                if b not in records[a]["spouseIds"]:
                    records[a]["spouseIds"].append(b)
                if marriage is not None and records[a]["marriage"] is None:
                    records[a]["marriage"] = marriage
            # Wives are ordered by their position among the husband's marriages
            if not records[wife_id]["orderBySpouse"]:
                records[wife_id]["orderBySpouse"] = len(records[husb_id]["spouseIds"])

        # Parent-child relationships, CHIL order is the sibling order
        for position, child in enumerate(rec.sub_tags("CHIL"), start=1):
            if not child.xref_id:
                continue
            child_id = extract_numeric_id(child.xref_id)
            child_rec = records.get(child_id)
            if child_rec is None:
                continue
            if husb_id in records:
                child_rec["fatherId"] = husb_id
                child_rec["orderByFather"] = position
                records[husb_id]["childrenIds"].append(child_id)
            if wife_id in records:
                child_rec["motherId"] = wife_id
                child_rec["orderByMother"] = position
                records[wife_id]["childrenIds"].append(child_id)

    logger.info("Read %d persons from GEDCOM file %s", len(persons), filepath)
    return persons


def read_csv_records(filepath: Path) -> list[dict[str, Any]]:
    """
    Read the semicolon-delimited person file: one person per line, 17 columns
    (id; sex; last name; first name; father; mother; birth place; birth date;
    death place; death date; address; spouse ids; children ids; order by
    father; order by mother; order by spouse; marriage date). Id lists are
    space separated and dates are "DD.MM.YYYY" or "YYYY".
    """
    records: list[dict[str, Any]] = []

    # utf-8-sig drops a leading byte order mark
    with open(filepath, encoding="utf-8-sig", newline="") as f:
        reader = csv.reader(f, delimiter=";", quoting=csv.QUOTE_NONE)
        for line_no, fields in enumerate(reader, start=1):
            if not fields or not any(field.strip() for field in fields):
                continue
            if len(fields) < len(CSV_COLUMNS):
                logger.warning(
                    "Skipping %s line %d: expected %d fields, got %d",
                    filepath,
                    line_no,
                    len(CSV_COLUMNS),
                    len(fields),
                )
                continue
            records.append(
                {column: value.strip() for column, value in zip(CSV_COLUMNS, fields)}
            )

    logger.info("Read %d persons from CSV file %s", len(records), filepath)
    return records


def read_records(filepath: Path) -> list[dict[str, Any]]:
    """Read records, choosing the format by file extension (.ged is GEDCOM)."""
    filepath = Path(filepath)
    if filepath.suffix.lower() == ".ged":
        return read_gedcom_records(filepath)
    return read_csv_records(filepath)
