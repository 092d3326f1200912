from datetime import date

import pytest

from vocabox.errors import RemoteStoreError, StoreError
from vocabox.schemas import BuiltinCatalog
from vocabox.sync import SyncReconciler, batch_records

from conftest import make_item, make_list


class FakeRemote:
    """In-memory remote store; batch numbers in fail_batches raise."""

    def __init__(self, fail_batches=()):
        self.fail_batches = set(fail_batches)
        self.calls = 0
        self.lists = {}
        self.items = {}
        self.stats = {}

    def _store(self, target, records):
        self.calls += 1
        if self.calls in self.fail_batches:
            raise RemoteStoreError('connection reset')
        for record in records:
            target[record.id] = record.to_document()
        return len(records)

    def upsert_lists(self, records):
        return self._store(self.lists, records)

    def upsert_items(self, records):
        return self._store(self.items, records)

    def upsert_stats(self, records):
        return self._store(self.stats, records)

    def fetch_builtin_catalog(self):
        return BuiltinCatalog()


@pytest.fixture
def populated(list_repo, item_repo, stats_repo):
    list_repo.upsert_many([
        make_list('mine'),
        make_list('builtin', is_builtin=True),
    ])
    item_repo.upsert_many(
        [make_item(f'studied-{i:03d}', 'mine', level=1 + i % 6) for i in range(150)]
        + [make_item('fresh', 'mine', level=0), make_item('shared', 'builtin', level=2)]
    )
    stats_repo.increment(new_learned=5, reviewed=10, day=date(2024, 3, 1))
    stats_repo.increment(reviewed=3, day=date(2024, 3, 2))


def make_reconciler(list_repo, item_repo, stats_repo, remote, batch_size=100):
    return SyncReconciler(list_repo, item_repo, stats_repo, remote, batch_size=batch_size)


def test_uploads_user_lists_studied_items_and_stats(populated, list_repo, item_repo, stats_repo):
    remote = FakeRemote()
    result = make_reconciler(list_repo, item_repo, stats_repo, remote).sync_all('user-1')

    assert result.success
    assert result.lists_uploaded == 1
    assert result.items_uploaded == 150
    assert result.stats_uploaded == 2
    assert set(remote.lists) == {'mine'}
    assert 'fresh' not in remote.items
    assert 'shared' not in remote.items
    assert set(remote.stats) == {'user-1:2024-03-01', 'user-1:2024-03-02'}
    assert remote.items['studied-000']['user_id'] == 'user-1'


def test_failed_second_item_batch(populated, list_repo, item_repo, stats_repo):
    # calls: 1 = lists, 2 = items 1-100, 3 = items 101-150, 4 = stats
    remote = FakeRemote(fail_batches={3})

    result = make_reconciler(list_repo, item_repo, stats_repo, remote).sync_all('user-1')

    assert result.items_uploaded == 100
    assert not result.success
    assert len(result.errors) == 1
    assert result.stats_uploaded == 2
    assert result.lists_uploaded == 1


def test_progress_reported_before_each_batch(populated, list_repo, item_repo, stats_repo):
    seen = []

    make_reconciler(list_repo, item_repo, stats_repo, FakeRemote()).sync_all(
        'user-1', on_progress=lambda progress: seen.append(
            (progress.phase, progress.current, progress.total)
        )
    )

    assert seen == [
        ('lists', 0, 1),
        ('items', 0, 150),
        ('items', 100, 150),
        ('stats', 0, 2),
        ('done', 153, 153),
    ]


def test_sync_never_touches_local_state(populated, list_repo, item_repo, stats_repo):
    before = (list_repo.get_all(), item_repo.get_all(), stats_repo.get_all())

    make_reconciler(list_repo, item_repo, stats_repo, FakeRemote(fail_batches={1, 2})).sync_all('u')

    assert (list_repo.get_all(), item_repo.get_all(), stats_repo.get_all()) == before


def test_local_read_failure_aborts(populated, list_repo, item_repo, stats_repo, monkeypatch):
    def broken():
        raise StoreError('database is locked')

    monkeypatch.setattr(item_repo, 'get_all', broken)
    remote = FakeRemote()

    result = make_reconciler(list_repo, item_repo, stats_repo, remote).sync_all('user-1')

    assert not result.success
    assert remote.calls == 0
    assert 'database is locked' in result.errors[0]


def test_empty_store_syncs_nothing(list_repo, item_repo, stats_repo):
    result = make_reconciler(list_repo, item_repo, stats_repo, FakeRemote()).sync_all('user-1')

    assert result.success
    assert (result.lists_uploaded, result.items_uploaded, result.stats_uploaded) == (0, 0, 0)


def test_batch_records_and_validation(list_repo, item_repo, stats_repo):
    assert [list(batch) for batch in batch_records([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]
    with pytest.raises(ValueError):
        make_reconciler(list_repo, item_repo, stats_repo, FakeRemote(), batch_size=0)
    with pytest.raises(ValueError):
        make_reconciler(list_repo, item_repo, stats_repo, FakeRemote()).sync_all('')
