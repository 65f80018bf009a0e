"""Pytest fixtures: a four-generation family with in-laws and an outsider."""

import pytest

from famgraph.graph import build_snapshot


def make_record(
    person_id,
    sex,
    first_name="",
    last_name="",
    birth="",
    death="",
    marriage="",
    father=0,
    mother=0,
    spouses=(),
    children=(),
    order_by_father=0,
    order_by_mother=0,
    order_by_spouse=0,
):
    return {
        "id": person_id,
        "sex": sex,
        "firstName": first_name,
        "lastName": last_name,
        "birth": birth,
        "death": death,
        "marriage": marriage,
        "fatherId": father,
        "motherId": mother,
        "spouseIds": list(spouses),
        "childrenIds": list(children),
        "orderByFather": order_by_father,
        "orderByMother": order_by_mother,
        "orderBySpouse": order_by_spouse,
    }


@pytest.fixture
def record():
    """Factory for raw person records."""
    return make_record


@pytest.fixture
def family_records():
    r = make_record
    return [
        r(1, "M", "Ivan", "Ivanov", "10.03.1900", "05.07.1985", spouses=[2], children=[3, 4]),
        r(2, "F", "Maria", "Ivanova", "1902", "20.11.1990", spouses=[1], children=[3, 4]),
        r(3, "M", "Petr", "Ivanov", "15.06.1925", "01.02.2001", father=1, mother=2,
          spouses=[5], children=[6, 7], order_by_father=1, order_by_mother=1),
        r(4, "F", "Anna", "Petrova", "02.09.1928", father=1, mother=2,
          spouses=[8], children=[9], order_by_father=2, order_by_mother=2),
        r(5, "F", "Olga", "Ivanova", "1927", spouses=[3], children=[6, 7]),
        r(6, "M", "Sergey", "Ivanov", "15.06.1950", marriage="12.08.1975", father=3, mother=5,
          spouses=[10], children=[11], order_by_father=2, order_by_mother=1),
        r(7, "F", "Elena", "Ivanova", "25.12.1952", father=3, mother=5,
          order_by_father=1, order_by_mother=2),
        r(8, "M", "Boris", "Petrov", "1926", spouses=[4], children=[9]),
        r(9, "F", "Nina", "Petrova", "30.04.1955", father=8, mother=4,
          spouses=[13], children=[12]),
        r(10, "F", "Vera", "Ivanova", "03.03.1953", marriage="12.08.1975",
          spouses=[6], children=[11]),
        r(11, "M", "Dmitry", "Ivanov", "29.02.1976", father=6, mother=10),
        r(12, "F", "Kira", "Petrova", "01.01.1980", mother=9),
        r(13, "M", "Lev", "Sokolov", "1954", spouses=[9]),
        r(14, "M", "Oleg", "Orlov", "1960"),
    ]


@pytest.fixture
def family(family_records):
    """Snapshot of the sample family."""
    snapshot, _ = build_snapshot(family_records)
    return snapshot


@pytest.fixture
def family_report(family_records):
    _, report = build_snapshot(family_records)
    return report
