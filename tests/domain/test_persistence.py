from __future__ import annotations

import pytest

from hotfixmirror.domain.persistence import HotfixStore
from tests.helpers.hotfixes import (
    FakeHotfixRepository,
    FakeHotfixUnitOfWork,
    make_item,
    make_record,
)


@pytest.fixture
def repository() -> FakeHotfixRepository:
    return FakeHotfixRepository()


@pytest.fixture
def store(repository: FakeHotfixRepository) -> HotfixStore:
    return HotfixStore(lambda: FakeHotfixUnitOfWork(repository))


def test_insert_adds_new_record(store: HotfixStore, repository: FakeHotfixRepository) -> None:
    record = make_record(make_item("DefaultGame.ini"))

    assert store.insert(record) is True
    assert repository.records == [record]
    assert store.exists(record.hash256)


def test_insert_skips_known_hash(store: HotfixStore, repository: FakeHotfixRepository) -> None:
    item = make_item("DefaultGame.ini")
    store.insert(make_record(item))

    duplicate = make_record(make_item("Renamed.ini", hash256=item.hash256))

    assert store.insert(duplicate) is False
    assert len(repository.records) == 1


def test_repeated_insert_of_same_record_is_idempotent(
    store: HotfixStore, repository: FakeHotfixRepository
) -> None:
    record = make_record(make_item("DefaultEngine.ini"))

    store.insert(record)
    store.insert(record)

    assert len(repository.records) == 1


def test_exists_is_false_for_unknown_hash(store: HotfixStore) -> None:
    assert store.exists("0" * 64) is False


def test_distinct_versions_drop_unknown_labels(store: HotfixStore) -> None:
    store.insert(make_record(make_item("A.ini"), version="31.10"))
    store.insert(make_record(make_item("B.ini"), version="unknown"))
    store.insert(make_record(make_item("C.ini"), version=None))
    store.insert(make_record(make_item("D.ini"), version="31.10"))
    store.insert(make_record(make_item("E.ini"), version="30.00"))

    assert sorted(store.list_distinct_versions()) == ["30.00", "31.10"]
