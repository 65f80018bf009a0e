import threading

import pytest

from famgraph.errors import DuplicateIdError, PersonNotFoundError
from famgraph.kinship import kinship
from famgraph.store import SnapshotStore


@pytest.fixture
def store(family_records):
    return SnapshotStore(family_records)


class TestPublish:
    def test_initial_snapshot(self, store):
        assert len(store.current) == 14
        assert store.report.counts == {"isolated": 1}

    def test_empty_store(self):
        store = SnapshotStore()
        assert len(store.current) == 0

    def test_readers_keep_their_snapshot(self, store, record):
        before = store.current
        store.publish([record(1, "M", "Solo")])
        assert len(before) == 14
        assert len(store.current) == 1

    def test_failed_build_keeps_previous_snapshot(self, store, record):
        before = store.current
        with pytest.raises(DuplicateIdError):
            store.publish([record(1, "M", "A"), record(1, "F", "B")])
        assert store.current is before

    def test_records_are_copies(self, store):
        records = store.records()
        records[0]["firstName"] = "Changed"
        assert store.current.person(1).first_name == "Ivan"
        assert store.records()[0]["firstName"] == "Ivan"

    def test_caller_records_are_not_shared(self, family_records):
        store = SnapshotStore(family_records)
        family_records[0]["firstName"] = "Changed"
        store.mutate(lambda records: None)
        assert store.current.person(1).first_name == "Ivan"

    def test_added_record_is_not_shared(self, store, record):
        new = record(None, "M", "Guest", spouses=[])
        new_id = store.add_person(new)
        new["spouseIds"].append(14)
        new["firstName"] = "Changed"
        store.mutate(lambda records: None)
        guest = store.current.person(new_id)
        assert guest.spouse_ids == ()
        assert guest.first_name == "Guest"

    def test_update_values_are_not_shared(self, store):
        kids = []
        store.update_person(14, childrenIds=kids)
        kids.append(12)
        store.mutate(lambda records: None)
        assert store.current.person(14).children_ids == ()


class TestMutations:
    def test_add_person_assigns_next_id(self, store, record):
        new_id = store.add_person(record(None, "F", "Newborn", "Ivanova"))
        assert new_id == 15
        assert store.current.person(15).first_name == "Newborn"
        assert store.next_id() == 16

    def test_add_person_keeps_explicit_id(self, store, record):
        assert store.add_person(record(40, "M", "Guest")) == 40
        assert 40 in store.current

    def test_add_duplicate_id_is_rejected(self, store, record):
        with pytest.raises(DuplicateIdError):
            store.add_person(record(14, "M", "Clone"))
        assert store.current.person(14).first_name == "Oleg"

    def test_update_person(self, store):
        store.update_person(14, firstName="Olezhek", death="01.01.2020")
        person = store.current.person(14)
        assert person.first_name == "Olezhek"
        assert not person.is_alive

    def test_update_unknown_person(self, store):
        with pytest.raises(PersonNotFoundError):
            store.update_person(99, firstName="Nobody")

    def test_remove_person_strips_references(self, store):
        report = store.remove_person(6)
        snapshot = store.current
        assert 6 not in snapshot
        assert snapshot.person(3).children_ids == (7,)
        assert snapshot.person(10).spouse_ids == ()
        assert snapshot.person(11).father_id is None
        assert "dangling_parent" not in report.counts

    def test_set_parents_moves_child(self, store):
        store.set_parents(12, father_id=13, mother_id=9)
        snapshot = store.current
        assert snapshot.person(12).parent_ids == (13, 9)
        assert snapshot.person(13).children_ids == (12,)
        assert kinship(snapshot, 13, 12).relationship == "parent"

    def test_set_parents_clears_old_links(self, store):
        store.set_parents(12)
        snapshot = store.current
        assert snapshot.person(12).parent_ids == ()
        assert snapshot.person(9).children_ids == ()

    def test_link_and_unlink_spouses(self, store):
        store.link_spouses(14, 7)
        assert store.current.person(7).spouse_ids == (14,)
        assert kinship(store.current, 14, 7).relationship == "spouse"
        store.unlink_spouses(7, 14)
        assert store.current.person(14).spouse_ids == ()

    def test_concurrent_writers_are_serialized(self, store, record):
        ids = []
        ids_lock = threading.Lock()

        def add(n):
            new_id = store.add_person(record(None, "M", f"Twin{n}"))
            with ids_lock:
                ids.append(new_id)

        threads = [threading.Thread(target=add, args=(n,)) for n in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(ids) == list(range(15, 35))
        assert len(store.current) == 34
