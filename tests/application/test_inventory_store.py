"""Tests for the InventoryStore.

Uses the in-memory fake repository; photo files live under tmp_path.
"""

import threading
from pathlib import Path

import pytest

from ims.application.dto import RecordDTO, RecordUpdate
from ims.application.inventory_store import InventoryStore
from ims.domain.exceptions import (
    EntityNotFoundError,
    MissingRequiredFieldError,
    NoPhotoAssociatedError,
    NoPhotoSuppliedError,
    PhotoFileMissingError,
)
from ims.domain.model.record import InventoryRecord
from tests.fakes import FakeRecordRepository


def _setup(tmp_path: Path, records: list[InventoryRecord] | None = None):
    repo = FakeRecordRepository(records)
    store = InventoryStore(tmp_path, repo)
    return store, repo


def _photo(tmp_path: Path, name: str = "1000.jpg") -> str:
    (tmp_path / name).write_bytes(b"\xff\xd8jpeg")
    return f"/inventory-photo/{name}"


class TestCreate:

    def test_first_record(self, tmp_path):
        store, _ = _setup(tmp_path)
        dto = store.create("Drill", "Cordless drill")
        assert dto == RecordDTO(
            id=1, name="Drill", description="Cordless drill", photo_path=None
        )

    def test_description_defaults_to_empty(self, tmp_path):
        store, _ = _setup(tmp_path)
        assert store.create("Drill").description == ""

    def test_sequential_ids(self, tmp_path):
        store, _ = _setup(tmp_path)
        ids = [store.create(f"Item {i}").id for i in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    def test_ids_not_reused_after_delete(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("A")
        second = store.create("B")
        store.delete(second.id)
        assert store.create("C").id == 3

    @pytest.mark.parametrize("name", [None, ""])
    def test_missing_name_does_not_mutate(self, tmp_path, name):
        store, repo = _setup(tmp_path)
        with pytest.raises(MissingRequiredFieldError):
            store.create(name, "no name")
        assert store.list_all() == []
        assert store.next_id == 1
        assert repo.writes == 0

    def test_persists(self, tmp_path):
        store, repo = _setup(tmp_path)
        store.create("Drill")
        assert repo.writes == 1
        assert [r.name for r in repo.saved] == ["Drill"]

    def test_with_photo_reference(self, tmp_path):
        store, _ = _setup(tmp_path)
        dto = store.create("Drill", photo_path="/inventory-photo/1.jpg")
        assert dto.photo_path == "/inventory-photo/1.jpg"


class TestListAndGet:

    def test_empty(self, tmp_path):
        store, _ = _setup(tmp_path)
        assert store.list_all() == []

    def test_insertion_order(self, tmp_path):
        store, _ = _setup(tmp_path)
        for name in ("Drill", "Saw", "Hammer"):
            store.create(name)
        assert [r.name for r in store.list_all()] == ["Drill", "Saw", "Hammer"]

    def test_get(self, tmp_path):
        store, _ = _setup(tmp_path)
        created = store.create("Drill")
        assert store.get(created.id) == created

    def test_get_unknown(self, tmp_path):
        store, _ = _setup(tmp_path)
        with pytest.raises(EntityNotFoundError, match="not found"):
            store.get(42)

    def test_returned_dto_is_a_copy(self, tmp_path):
        store, _ = _setup(tmp_path)
        created = store.create("Drill")
        store.update_fields(created.id, RecordUpdate(name="Saw"))
        assert created.name == "Drill"


class TestUpdateFields:

    def test_description_only_keeps_name(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill", "Cordless drill")
        dto = store.update_fields(1, RecordUpdate(description="18V cordless drill"))
        assert dto.name == "Drill"
        assert dto.description == "18V cordless drill"

    def test_name_only_keeps_description(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill", "Cordless drill")
        dto = store.update_fields(1, RecordUpdate(name="Impact drill"))
        assert dto.name == "Impact drill"
        assert dto.description == "Cordless drill"

    def test_empty_description_is_a_change(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill", "Cordless drill")
        assert store.update_fields(1, RecordUpdate(description="")).description == ""

    def test_nothing_provided_leaves_record(self, tmp_path):
        store, _ = _setup(tmp_path)
        before = store.create("Drill", "Cordless drill")
        assert store.update_fields(1, RecordUpdate()) == before

    def test_unknown_id(self, tmp_path):
        store, repo = _setup(tmp_path)
        with pytest.raises(EntityNotFoundError):
            store.update_fields(7, RecordUpdate(name="X"))
        assert repo.writes == 0

    def test_blank_name_rejected(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill")
        with pytest.raises(MissingRequiredFieldError):
            store.update_fields(1, RecordUpdate(name=" "))
        assert store.get(1).name == "Drill"

    def test_persists(self, tmp_path):
        store, repo = _setup(tmp_path)
        store.create("Drill")
        store.update_fields(1, RecordUpdate(description="new"))
        assert repo.writes == 2
        assert repo.saved[0].description == "new"


class TestUpdatePhoto:

    def test_sets_reference(self, tmp_path):
        store, repo = _setup(tmp_path)
        store.create("Drill")
        dto = store.update_photo(1, "/inventory-photo/5.png")
        assert dto.photo_path == "/inventory-photo/5.png"
        assert repo.saved[0].photo_path == "/inventory-photo/5.png"

    def test_replaces_and_keeps_old_file(self, tmp_path):
        store, _ = _setup(tmp_path)
        old = _photo(tmp_path, "1.jpg")
        store.create("Drill", photo_path=old)
        store.update_photo(1, _photo(tmp_path, "2.jpg"))
        assert (tmp_path / "1.jpg").exists()
        assert store.find_photo_path(1).name == "2.jpg"

    def test_unknown_id(self, tmp_path):
        store, _ = _setup(tmp_path)
        with pytest.raises(EntityNotFoundError):
            store.update_photo(3, "/inventory-photo/5.png")

    @pytest.mark.parametrize("ref", [None, ""])
    def test_missing_photo(self, tmp_path, ref):
        store, repo = _setup(tmp_path)
        store.create("Drill")
        with pytest.raises(NoPhotoSuppliedError):
            store.update_photo(1, ref)
        assert store.get(1).photo_path is None
        assert repo.writes == 1


class TestDelete:

    def test_delete_then_get(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill")
        removed = store.delete(1)
        assert removed.id == 1
        with pytest.raises(EntityNotFoundError):
            store.get(1)

    def test_second_delete_fails(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill")
        store.delete(1)
        with pytest.raises(EntityNotFoundError):
            store.delete(1)

    def test_keeps_photo_file(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill", photo_path=_photo(tmp_path))
        store.delete(1)
        assert (tmp_path / "1000.jpg").exists()

    def test_persists(self, tmp_path):
        store, repo = _setup(tmp_path)
        store.create("A")
        store.create("B")
        store.delete(1)
        assert [r.id for r in repo.saved] == [2]


class TestFindPhotoPath:

    def test_resolves_existing_file(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill", photo_path=_photo(tmp_path))
        path = store.find_photo_path(1)
        assert path == (tmp_path / "1000.jpg").resolve()
        assert path.is_file()

    def test_unknown_id(self, tmp_path):
        store, _ = _setup(tmp_path)
        with pytest.raises(EntityNotFoundError):
            store.find_photo_path(1)

    def test_no_photo(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill")
        with pytest.raises(NoPhotoAssociatedError):
            store.find_photo_path(1)

    def test_file_missing(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill", photo_path="/inventory-photo/gone.jpg")
        with pytest.raises(PhotoFileMissingError):
            store.find_photo_path(1)

    def test_traversal_stripped_to_base_name(self, tmp_path):
        cache = tmp_path / "cache"
        cache.mkdir()
        (tmp_path / "secret.jpg").write_bytes(b"secret")
        store = InventoryStore(cache, FakeRecordRepository())
        store.create("Drill", photo_path="../secret.jpg")
        with pytest.raises(PhotoFileMissingError):
            store.find_photo_path(1)

    def test_parent_reference_rejected(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill", photo_path="/inventory-photo/..")
        with pytest.raises(PhotoFileMissingError):
            store.find_photo_path(1)


class TestSearch:

    def test_without_photo_same_as_get(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill", photo_path=_photo(tmp_path))
        assert store.search(1, include_photo=False) == store.get(1)

    def test_with_photo_returns_path(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill", photo_path=_photo(tmp_path))
        assert store.search(1, include_photo=True) == store.find_photo_path(1)

    def test_with_photo_but_none_associated(self, tmp_path):
        store, _ = _setup(tmp_path)
        store.create("Drill")
        with pytest.raises(NoPhotoAssociatedError):
            store.search(1, include_photo=True)

    def test_unknown(self, tmp_path):
        store, _ = _setup(tmp_path)
        with pytest.raises(EntityNotFoundError):
            store.search(9)


class TestReload:

    def test_next_id_from_existing_records(self, tmp_path):
        store, _ = _setup(tmp_path, [
            InventoryRecord(id=3, name="Drill"),
            InventoryRecord(id=8, name="Saw"),
        ])
        assert store.next_id == 9
        assert [r.id for r in store.list_all()] == [3, 8]

    def test_empty_repository(self, tmp_path):
        store, _ = _setup(tmp_path)
        assert store.next_id == 1

    def test_round_trip_through_repository(self, tmp_path):
        store, repo = _setup(tmp_path)
        store.create("Drill", "Cordless drill")
        store.create("Saw")
        store.update_photo(2, "/inventory-photo/9.jpg")

        reloaded = InventoryStore(tmp_path, repo)
        assert reloaded.list_all() == store.list_all()
        assert reloaded.next_id == 3

    def test_in_memory_only(self, tmp_path):
        store = InventoryStore(tmp_path)
        store.create("Drill")
        assert [r.name for r in store.list_all()] == ["Drill"]


class TestPersistenceFailure:

    def test_failed_write_rolls_back_create(self, tmp_path):
        store, repo = _setup(tmp_path)
        repo.fail_writes = True
        with pytest.raises(OSError, match="disk full"):
            store.create("Drill")
        assert store.list_all() == []
        assert store.next_id == 1

    def test_failed_write_rolls_back_update(self, tmp_path):
        store, repo = _setup(tmp_path)
        store.create("Drill")
        repo.fail_writes = True
        with pytest.raises(OSError):
            store.update_fields(1, RecordUpdate(name="Saw"))
        assert store.get(1).name == "Drill"

    def test_failed_write_rolls_back_delete(self, tmp_path):
        store, repo = _setup(tmp_path)
        store.create("Drill")
        repo.fail_writes = True
        with pytest.raises(OSError):
            store.delete(1)
        assert store.get(1).name == "Drill"


class TestWalkthrough:

    def test_drill_lifecycle(self, tmp_path):
        store, _ = _setup(tmp_path)

        created = store.create("Drill", "Cordless drill")
        assert created.id == 1
        assert created.photo_path is None

        updated = store.update_fields(1, RecordUpdate(description="18V cordless drill"))
        assert (updated.id, updated.name, updated.description) == (
            1, "Drill", "18V cordless drill",
        )
        assert updated.photo_path is None

        with_photo = store.update_photo(1, _photo(tmp_path, "42.jpg"))
        assert with_photo.photo_path is not None
        assert store.find_photo_path(1).is_file()

        store.delete(1)
        with pytest.raises(EntityNotFoundError):
            store.get(1)


class TestConcurrency:

    def test_parallel_creates_get_distinct_ids(self, tmp_path):
        store, repo = _setup(tmp_path)

        threads = [
            threading.Thread(target=store.create, args=(f"Item {i}",))
            for i in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        ids = sorted(r.id for r in store.list_all())
        assert ids == list(range(1, 21))
        assert len(repo.saved) == 20
