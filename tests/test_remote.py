from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from pymongo import UpdateOne
from pymongo.errors import BulkWriteError, ConnectionFailure

from vocabox.errors import RemoteStoreError
from vocabox.leitner import DailyStat
from vocabox.schemas import RemoteItemRecord, RemoteStatRecord
from vocabox.sync import MongoRemoteStore

from conftest import make_item

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mongo():
    client = MagicMock()
    database = MagicMock()
    client.__getitem__.return_value = database
    collections = {}

    def collection(name):
        if name not in collections:
            coll = MagicMock(name=name)
            coll.bulk_write.return_value = MagicMock(upserted_count=1, modified_count=0)
            collections[name] = coll
        return collections[name]

    database.__getitem__.side_effect = collection
    return client, collections


def test_items_are_upserted_by_id(mongo):
    client, collections = mongo
    store = MongoRemoteStore(db_name='test', client=client)
    record = RemoteItemRecord.from_item(make_item('a', level=2), 'user-1', NOW)

    assert store.upsert_items([record]) == 1

    operations = collections['vocabulary_items'].bulk_write.call_args.args[0]
    assert operations == [
        UpdateOne({'_id': 'a'}, {'$set': record.to_document()}, upsert=True)
    ]
    document = record.to_document()
    assert document['mastery_level'] == 2
    assert document['user_id'] == 'user-1'


def test_stat_ids_are_user_scoped(mongo):
    client, collections = mongo
    store = MongoRemoteStore(db_name='test', client=client)
    record = RemoteStatRecord.from_stat(DailyStat(day='2024-03-01', reviewed=4), 'user-1', NOW)

    store.upsert_stats([record])

    operation = collections['daily_stats'].bulk_write.call_args.args[0][0]
    assert operation == UpdateOne(
        {'_id': 'user-1:2024-03-01'}, {'$set': record.to_document()}, upsert=True
    )


def test_empty_batch_skips_remote_call(mongo):
    client, collections = mongo
    store = MongoRemoteStore(db_name='test', client=client)

    assert store.upsert_lists([]) == 0
    assert 'vocabulary_lists' not in collections


@pytest.mark.parametrize('error', [
    ConnectionFailure('timed out'),
    BulkWriteError({'writeErrors': [], 'nInserted': 0}),
])
def test_pymongo_errors_are_wrapped(mongo, error):
    client, collections = mongo
    store = MongoRemoteStore(db_name='test', client=client)
    record = RemoteItemRecord.from_item(make_item('a', level=1), 'user-1', NOW)
    store.db['vocabulary_items'].bulk_write.side_effect = error

    with pytest.raises(RemoteStoreError):
        store.upsert_items([record])


def test_fetch_builtin_catalog(mongo):
    client, collections = mongo
    store = MongoRemoteStore(db_name='test', client=client)
    store.db['builtin_lists'].find.return_value = [
        {'id': 'b1', 'name': 'Basics', 'premium_required': False},
    ]
    store.db['builtin_items'].find.return_value = [
        {'id': 'i1', 'list_id': 'b1', 'source_text': 'yes', 'target_text': 'ja'},
    ]

    catalog = store.fetch_builtin_catalog()

    assert [entry.id for entry in catalog.lists] == ['b1']
    assert catalog.items[0].target_text == 'ja'


def test_missing_mongo_uri(monkeypatch):
    monkeypatch.delenv('MONGO_URI', raising=False)

    with pytest.raises(ValueError):
        MongoRemoteStore()
