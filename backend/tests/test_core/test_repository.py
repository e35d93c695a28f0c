"""
Unit tests for the in-memory entity repository.
"""

import threading

import pytest

from mission_risk.core.errors import NotFound
from mission_risk.db.repository import InMemoryRepository


class TestInMemoryRepository:
    """Test repository operations."""

    def setup_method(self):
        self.repo = InMemoryRepository("Passenger")

    def test_put_and_get(self, healthy_person):
        self.repo.put(healthy_person)

        assert self.repo.get(healthy_person.id) is healthy_person
        assert len(self.repo) == 1

    def test_get_missing(self):
        assert self.repo.get("nobody") is None

    def test_get_or_raise(self):
        with pytest.raises(NotFound, match="Passenger nobody not found"):
            self.repo.get_or_raise("nobody")

    def test_list_in_insertion_order(self, make_person):
        people = [make_person(name=n) for n in ("A", "B", "C")]
        for p in people:
            self.repo.put(p)

        assert self.repo.list() == people

    def test_put_replaces(self, healthy_person, make_person):
        self.repo.put(healthy_person)
        replacement = make_person(name="Replacement", id=healthy_person.id)
        self.repo.put(replacement)

        assert self.repo.get(healthy_person.id).name == "Replacement"
        assert len(self.repo) == 1

    def test_delete(self, healthy_person):
        self.repo.put(healthy_person)

        assert self.repo.delete(healthy_person.id) is healthy_person
        assert len(self.repo) == 0

    def test_delete_missing(self):
        with pytest.raises(NotFound) as exc_info:
            self.repo.delete("nobody")

        assert exc_info.value.kind == "Passenger"
        assert exc_info.value.record_id == "nobody"

    def test_clear(self, healthy_person):
        self.repo.put(healthy_person)
        self.repo.clear()

        assert self.repo.list() == []

    def test_update_replaces_from_stored_copy(self, healthy_person, make_person):
        self.repo.put(healthy_person)

        updated = self.repo.update(
            healthy_person.id, lambda current: make_person(name=current.name + " II", id=current.id)
        )

        assert updated.name == "Healthy Harriet II"
        assert self.repo.get(healthy_person.id) is updated

    def test_update_missing(self):
        with pytest.raises(NotFound):
            self.repo.update("nobody", lambda current: current)

    def test_update_failure_keeps_entity(self, healthy_person):
        self.repo.put(healthy_person)

        def fail(current):
            raise ValueError("rejected")

        with pytest.raises(ValueError, match="rejected"):
            self.repo.update(healthy_person.id, fail)

        assert self.repo.get(healthy_person.id) is healthy_person

    def test_update_serializes_writers(self, make_person):
        """Test concurrent read-modify-write updates are not lost."""
        counter = make_person(name="Counter", experience_level=0)
        self.repo.put(counter)

        def bump(current):
            return make_person(name=current.name, id=current.id,
                               experience_level=current.experience_level + 1)

        threads = [
            threading.Thread(target=lambda: [self.repo.update(counter.id, bump) for _ in range(50)])
            for _ in range(4)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert self.repo.get(counter.id).experience_level == 200

    def test_locked_blocks_other_writers(self, healthy_person, make_person):
        self.repo.put(healthy_person)
        written = threading.Event()

        def writer():
            self.repo.put(make_person(name="Other"))
            written.set()

        with self.repo.locked():
            thread = threading.Thread(target=writer)
            thread.start()
            assert not written.wait(0.1)
        thread.join()

        assert written.is_set()
        assert len(self.repo) == 2
