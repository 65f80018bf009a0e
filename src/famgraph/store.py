"""Copy-on-write holder for the current snapshot and its backing records."""

from collections.abc import Callable, Iterable, Mapping
import copy
import logging
import threading
from typing import Any

from famgraph.errors import PersonNotFoundError
from famgraph.graph import GraphSnapshot, build_snapshot, parse_ids, parse_ref
from famgraph.models import ValidationReport

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class SnapshotStore:
    """
    Owns the raw record list and the snapshot built from it.

    Readers take `current` without locking and keep a consistent view for as
    long as they hold the reference. Writers are serialized: each one copies
    the record list, applies its edit, rebuilds a snapshot and swaps it in.
    A failed rebuild (duplicate ids) leaves the published snapshot untouched.
    """

    def __init__(self, records: Iterable[Mapping[str, Any]] = ()):
        self._lock = threading.Lock()
        snapshot, report = build_snapshot([])
        self._state: tuple[list[Record], GraphSnapshot, ValidationReport] = ([], snapshot, report)
        self.publish(records)

    @property
    def current(self) -> GraphSnapshot:
        return self._state[1]

    @property
    def report(self) -> ValidationReport:
        return self._state[2]

    def records(self) -> list[Record]:
        """Deep copy of the backing records."""
        return copy.deepcopy(self._state[0])

    def _publish_locked(self, records: list[Record]) -> ValidationReport:
        snapshot, report = build_snapshot(records)
        # Single assignment: readers see the old state or the new one, never a mix
        self._state = (records, snapshot, report)
        logger.info("Published snapshot with %d persons", len(snapshot))
        return report

    def publish(self, records: Iterable[Mapping[str, Any]]) -> ValidationReport:
        """Replace the whole record list."""
        with self._lock:
            return self._publish_locked([dict(copy.deepcopy(record)) for record in records])

    def mutate(self, edit: Callable[[list[Record]], list[Record] | None]) -> ValidationReport:
        """
        Apply `edit` to a private copy of the records and publish the result.

        `edit` may change the list in place (returning None) or return a new list.
        """
        with self._lock:
            working = copy.deepcopy(self._state[0])
            result = edit(working)
            return self._publish_locked(working if result is None else result)

    def next_id(self) -> int:
        return max((person.id for person in self.current), default=0) + 1

    def add_person(self, record: Mapping[str, Any]) -> int:
        """Add a person, assigning the next free id when the record has none."""
        with self._lock:
            working = copy.deepcopy(self._state[0])
            new_record = copy.deepcopy(dict(record))
            if parse_ref(new_record.get("id")) is None:
                new_record["id"] = max((p.id for p in self._state[1]), default=0) + 1
            working.append(new_record)
            self._publish_locked(working)
        logger.info("Added person %s", new_record["id"])
        return new_record["id"]

    def update_person(self, person_id: int, **changes: Any) -> ValidationReport:
        """Overwrite fields (camelCase record keys) of one person."""

        def edit(records: list[Record]) -> None:
            _find(records, person_id).update(copy.deepcopy(changes))

        return self.mutate(edit)

    def remove_person(self, person_id: int) -> ValidationReport:
        """Delete a person and every reference other records hold to them."""

        def edit(records: list[Record]) -> list[Record]:
            _find(records, person_id)
            kept = [r for r in records if parse_ref(r.get("id")) != person_id]
            for record in kept:
                record["spouseIds"] = [i for i in parse_ids(record.get("spouseIds")) if i != person_id]
                record["childrenIds"] = [
                    i for i in parse_ids(record.get("childrenIds")) if i != person_id
                ]
                for slot in ("fatherId", "motherId"):
                    if parse_ref(record.get(slot)) == person_id:
                        record[slot] = None
            return kept

        return self.mutate(edit)

    def set_parents(
        self, child_id: int, father_id: int | None = None, mother_id: int | None = None
    ) -> ValidationReport:
        """Replace both parent slots of a child, moving the child between children lists."""

        def edit(records: list[Record]) -> None:
            child = _find(records, child_id)
            for slot in ("fatherId", "motherId"):
                old_parent_id = parse_ref(child.get(slot))
                if old_parent_id is not None:
                    old_parent = _find(records, old_parent_id, missing_ok=True)
                    if old_parent is not None:
                        old_parent["childrenIds"] = [
                            i for i in parse_ids(old_parent.get("childrenIds")) if i != child_id
                        ]

            child["fatherId"] = father_id
            child["motherId"] = mother_id
            for parent_id in (father_id, mother_id):
                if parent_id is None:
                    continue
                parent = _find(records, parent_id)
                children_ids = parse_ids(parent.get("childrenIds"))
                if child_id not in children_ids:
                    children_ids.append(child_id)
                parent["childrenIds"] = children_ids

        return self.mutate(edit)

    def link_spouses(self, person_id: int, spouse_id: int) -> ValidationReport:
        def edit(records: list[Record]) -> None:
            for a, b in ((person_id, spouse_id), (spouse_id, person_id)):
                record = _find(records, a)
                spouse_ids = parse_ids(record.get("spouseIds"))
                if b not in spouse_ids:
                    spouse_ids.append(b)
                record["spouseIds"] = spouse_ids

        return self.mutate(edit)

    def unlink_spouses(self, person_id: int, spouse_id: int) -> ValidationReport:
        def edit(records: list[Record]) -> None:
            for a, b in ((person_id, spouse_id), (spouse_id, person_id)):
                record = _find(records, a)
                record["spouseIds"] = [i for i in parse_ids(record.get("spouseIds")) if i != b]

        return self.mutate(edit)


def _find(records: list[Record], person_id: int, missing_ok: bool = False) -> Record | None:
    for record in records:
        if parse_ref(record.get("id")) == person_id:
            return record
    if missing_ok:
        return None
    raise PersonNotFoundError(person_id)
