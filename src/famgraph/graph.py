"""Snapshot building: raw person records to an immutable, indexed NetworkX graph."""

from collections.abc import Iterable, Mapping
import logging
from types import MappingProxyType
from typing import Any

import networkx as nx

from famgraph.dates import parse_date
from famgraph.errors import DuplicateIdError, PersonNotFoundError
from famgraph.models import PartialDate, Person, Sex, ValidationReport
from famgraph.validation import validate_snapshot

logger = logging.getLogger(__name__)

PARENT_OF = "PARENT_OF"
SPOUSE_OF = "SPOUSE_OF"

SEX_ALIASES = {
    "m": Sex.MALE,
    "male": Sex.MALE,
    "1": Sex.MALE,
    "f": Sex.FEMALE,
    "female": Sex.FEMALE,
    "w": Sex.FEMALE,
    "0": Sex.FEMALE,
}


class GraphSnapshot:
    """
    One immutable, fully indexed view of the person population.

    `lineage` holds PARENT_OF edges (parent -> child), `ancestry` the same
    edges reversed, and `marriages` the undirected SPOUSE_OF edges. All three
    graphs are frozen; a snapshot is never edited after it is built.
    """

    def __init__(self, persons: Mapping[int, Person]):
        self._persons = MappingProxyType(dict(persons))

        lineage = nx.DiGraph()
        marriages = nx.Graph()
        for person in self._persons.values():
            lineage.add_node(person.id)
            marriages.add_node(person.id)

        for person in self._persons.values():
            # Father before mother so traversal order is stable
            for parent_id in person.parent_ids:
                lineage.add_edge(parent_id, person.id, relationship_type=PARENT_OF)
            for spouse_id in person.spouse_ids:
                marriages.add_edge(person.id, spouse_id, relationship_type=SPOUSE_OF)

        self.lineage = nx.freeze(lineage)
        self.ancestry = nx.freeze(lineage.reverse(copy=True))
        self.marriages = nx.freeze(marriages)

    @property
    def persons(self) -> Mapping[int, Person]:
        return self._persons

    def __contains__(self, person_id: object) -> bool:
        return person_id in self._persons

    def __len__(self) -> int:
        return len(self._persons)

    def __iter__(self):
        return iter(self._persons.values())

    def get(self, person_id: int) -> Person | None:
        return self._persons.get(person_id)

    def person(self, person_id: int) -> Person:
        try:
            return self._persons[person_id]
        except KeyError:
            raise PersonNotFoundError(person_id) from None

    def parents(self, person_id: int) -> list[Person]:
        return [self._persons[pid] for pid in self.person(person_id).parent_ids]

    def children(self, person_id: int) -> list[Person]:
        return [self._persons[cid] for cid in self.person(person_id).children_ids]

    def spouses(self, person_id: int) -> list[Person]:
        return [self._persons[sid] for sid in self.person(person_id).spouse_ids]

    def ancestor_paths(self, person_id: int, max_depth: int) -> dict[int, list[int]]:
        """
        Shortest path from a person to every ancestor within `max_depth` generations.

        Breadth-first, so each ancestor reached through pedigree collapse keeps
        only its minimum distance; revisits (including cycles in corrupt data)
        are ignored. The person itself is included with the path [person_id].
        """
        self.person(person_id)
        return nx.single_source_shortest_path(self.ancestry, person_id, cutoff=max_depth)


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_ref(value: Any) -> int | None:
    ref = _to_int(value)
    # 0 stands for "no reference" in exported files
    if ref is None or ref <= 0:
        return None
    return ref


def parse_ids(value: Any) -> list[int]:
    if value is None:
        return []
    items = value.split() if isinstance(value, str) else value
    return [ref for ref in (parse_ref(item) for item in items) if ref is not None]


def _to_date(value: Any) -> PartialDate | None:
    if value is None:
        return None
    if isinstance(value, PartialDate):
        return value
    text = str(value).strip()
    if not text:
        return None
    # Present but unparseable text degrades to Unknown rather than absent
    return parse_date(text)


def _to_sex(value: Any) -> Sex | None:
    if isinstance(value, Sex):
        return value
    if value is None:
        return None
    return SEX_ALIASES.get(str(value).strip().lower())


def _dedupe(ids: list[int]) -> tuple[list[int], bool]:
    unique = list(dict.fromkeys(ids))
    return unique, len(unique) != len(ids)


def _draft_from_record(person_id: int, record: Mapping[str, Any], issue) -> dict:
    sex = _to_sex(record.get("sex"))
    if sex is None:
        issue("unknown_sex", person_id, f"Unrecognized sex {record.get('sex')!r}, assuming female")
        sex = Sex.FEMALE

    spouse_ids, spouse_dupes = _dedupe(parse_ids(record.get("spouseIds")))
    children_ids, children_dupes = _dedupe(parse_ids(record.get("childrenIds")))
    if spouse_dupes or children_dupes:
        issue("duplicate_reference", person_id, "Repeated ids in spouse or children list collapsed")

    return {
        "id": person_id,
        "sex": sex,
        "first_name": str(record.get("firstName") or "").strip(),
        "last_name": str(record.get("lastName") or "").strip(),
        "birth": _to_date(record.get("birth")),
        "death": _to_date(record.get("death")),
        "marriage": _to_date(record.get("marriage")),
        "father_id": parse_ref(record.get("fatherId")),
        "mother_id": parse_ref(record.get("motherId")),
        "spouse_ids": spouse_ids,
        "children_ids": children_ids,
        "order_by_father": _to_int(record.get("orderByFather")) or 0,
        "order_by_mother": _to_int(record.get("orderByMother")) or 0,
        "order_by_spouse": _to_int(record.get("orderBySpouse")) or 0,
    }


def _reconcile_parents(drafts: dict[int, dict], issue) -> None:
    """Drop self and dangling parent references."""
    for person_id, draft in drafts.items():
        for slot in ("father_id", "mother_id"):
            parent_id = draft[slot]
            if parent_id is None:
                continue
            if parent_id == person_id:
                issue("self_reference", person_id, "Person listed as their own parent")
                draft[slot] = None
            elif parent_id not in drafts:
                issue("dangling_parent", person_id, f"Parent {parent_id} not found")
                draft[slot] = None

        if draft["father_id"] is not None and draft["father_id"] == draft["mother_id"]:
            issue("conflicting_parent", person_id, "Same person listed as father and mother")
            draft["mother_id"] = None


def _reconcile_children(drafts: dict[int, dict], issue) -> None:
    """Make children lists and parent slots agree in both directions."""
    for person_id, draft in drafts.items():
        slot = "father_id" if draft["sex"] is Sex.MALE else "mother_id"
        kept = []
        for child_id in draft["children_ids"]:
            child = drafts.get(child_id)
            if child_id == person_id:
                issue("self_reference", person_id, "Person listed as their own child")
            elif child is None:
                issue("dangling_child", person_id, f"Child {child_id} not found")
            elif person_id in (child["father_id"], child["mother_id"]):
                kept.append(child_id)
            elif child[slot] is None:
                child[slot] = person_id
                kept.append(child_id)
                issue(
                    "missing_reciprocal_parent",
                    person_id,
                    f"Child {child_id} did not name this person as parent (repaired)",
                )
            else:
                issue(
                    "conflicting_parent",
                    person_id,
                    f"Child {child_id} names {child[slot]} in that parent slot; link dropped",
                )
        draft["children_ids"] = kept

    # Parents named by a child must list that child
    for person_id, draft in drafts.items():
        for parent_id in (draft["father_id"], draft["mother_id"]):
            if parent_id is None:
                continue
            parent = drafts[parent_id]
            if person_id not in parent["children_ids"]:
                parent["children_ids"].append(person_id)
                issue(
                    "missing_child_link",
                    parent_id,
                    f"Child {person_id} missing from children list (repaired)",
                )


def _reconcile_spouses(drafts: dict[int, dict], issue) -> None:
    for person_id, draft in drafts.items():
        kept = []
        for spouse_id in draft["spouse_ids"]:
            if spouse_id == person_id:
                issue("self_reference", person_id, "Person listed as their own spouse")
            elif spouse_id not in drafts:
                issue("dangling_spouse", person_id, f"Spouse {spouse_id} not found")
            else:
                kept.append(spouse_id)
        draft["spouse_ids"] = kept

    for person_id, draft in drafts.items():
        for spouse_id in draft["spouse_ids"]:
            spouse = drafts[spouse_id]
            if person_id not in spouse["spouse_ids"]:
                spouse["spouse_ids"].append(person_id)
                issue(
                    "missing_reciprocal_spouse",
                    spouse_id,
                    f"Spouse {person_id} did not refer back (repaired)",
                )


def build_snapshot(
    records: Iterable[Mapping[str, Any]], min_parent_age: int | None = None
) -> tuple[GraphSnapshot, ValidationReport]:
    """
    Build a GraphSnapshot from raw person records.

    Pass one indexes ids; a duplicate id aborts the whole build with
    DuplicateIdError. Pass two reconciles parent, child and spouse references,
    recording a ValidationIssue for every repair instead of failing.

    Args:
        records: Mappings with the camelCase person fields (id, sex,
            firstName, lastName, birth, death, marriage, fatherId, motherId,
            spouseIds, childrenIds, orderByFather, orderByMother, orderBySpouse)
        min_parent_age: Threshold for the parent_too_young check

    Returns:
        The snapshot and the validation report of soft issues
    """
    report = ValidationReport()

    def issue(kind: str, person_id: int, message: str) -> None:
        logger.debug("Person %s: %s (%s)", person_id, message, kind)
        report.add(kind, person_id, message)

    drafts: dict[int, dict] = {}
    duplicates: list[int] = []

    # First pass: index ids
    for index, record in enumerate(records):
        person_id = _to_int(record.get("id"))
        if person_id is None or person_id <= 0:
            issue("invalid_id", 0, f"Record #{index} has no valid positive id: {record.get('id')!r}")
            continue
        if person_id in drafts:
            duplicates.append(person_id)
            continue
        drafts[person_id] = _draft_from_record(person_id, record, issue)

    if duplicates:
        logger.warning("Snapshot rejected, duplicate ids: %s", sorted(set(duplicates)))
        raise DuplicateIdError(duplicates)

    # Second pass: relationships
    _reconcile_parents(drafts, issue)
    _reconcile_children(drafts, issue)
    _reconcile_spouses(drafts, issue)

    persons = {
        person_id: Person(
            **{
                **draft,
                "spouse_ids": tuple(draft["spouse_ids"]),
                "children_ids": tuple(draft["children_ids"]),
            }
        )
        for person_id, draft in drafts.items()
    }
    snapshot = GraphSnapshot(persons)

    for found in validate_snapshot(snapshot, min_parent_age):
        issue(found.kind, found.person_id, found.message)

    logger.info("Built snapshot: %d persons, %d validation issues", len(snapshot), len(report))
    return snapshot, report
