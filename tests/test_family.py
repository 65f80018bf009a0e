import pytest

from famgraph.errors import PersonNotFoundError
from famgraph.family import immediate_family
from famgraph.graph import build_snapshot


def rows(members):
    return [(m.category, m.relation, m.person_id) for m in members]


class TestImmediateFamily:
    def test_middle_generation(self, family):
        assert rows(immediate_family(family, 3)) == [
            ("self", "self", 3),
            ("parents", "father", 1),
            ("parents", "mother", 2),
            ("spouses", "wife", 5),
            ("siblings", "sister", 4),
            ("children", "son", 6),
            ("children", "daughter", 7),
            ("grandchildren", "grandson", 11),
        ]

    def test_three_generations_down(self, family):
        members = immediate_family(family, 1)
        by_category = {}
        for member in members:
            by_category.setdefault(member.category, []).append(member.person_id)
        assert by_category["spouses"] == [2]
        assert by_category["children"] == [3, 4]
        assert by_category["grandchildren"] == [6, 7, 9]
        assert by_category["greatGrandchildren"] == [11, 12]
        assert "parents" not in by_category

    def test_half_siblings_listed_once(self, record):
        snapshot, _ = build_snapshot(
            [
                record(1, "M", "Father", children=[3, 4]),
                record(2, "F", "First", children=[3]),
                record(5, "F", "Second", children=[4]),
                record(3, "F", "Older", father=1, mother=2),
                record(4, "M", "Younger", father=1, mother=5),
            ]
        )
        assert rows(immediate_family(snapshot, 3))[-1] == ("siblings", "brother", 4)

    def test_outsider_has_only_self(self, family):
        assert rows(immediate_family(family, 14)) == [("self", "self", 14)]

    def test_unknown_person(self, family):
        with pytest.raises(PersonNotFoundError):
            immediate_family(family, 99)
