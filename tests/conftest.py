import os
import random
import sys
from datetime import datetime, timedelta, timezone

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from vocabox.item_repo import ItemRepository
from vocabox.leitner import Database, Scheduler, VocabularyItem, VocabularyList
from vocabox.list_repo import ListRepository
from vocabox.settings_repo import SettingsRepository
from vocabox.stats_repo import StatsRepository

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
TODAY = T0.astimezone().date()


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start=T0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def db():
    database = Database('sqlite://')
    database.init_db()
    yield database
    database.dispose()


@pytest.fixture
def item_repo(db):
    return ItemRepository(db)


@pytest.fixture
def list_repo(db):
    return ListRepository(db)


@pytest.fixture
def stats_repo(db):
    return StatsRepository(db)


@pytest.fixture
def settings_repo(db):
    return SettingsRepository(db)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scheduler(item_repo, list_repo, rng):
    return Scheduler(item_repo, list_repo, rng=rng)


@pytest.fixture
def clock():
    return FakeClock()


def make_list(list_id='list-1', name='Animals', is_active=True, is_builtin=False, item_count=0):
    return VocabularyList(
        id=list_id,
        name=name,
        created_at=T0,
        updated_at=T0,
        item_count=item_count,
        is_active=is_active,
        is_builtin=is_builtin,
    )


def make_item(item_id, list_id='list-1', level=0, next_review=None,
              source='dog', target='Hund', correct=0, incorrect=0):
    return VocabularyItem(
        id=item_id,
        list_id=list_id,
        source_text=source,
        target_text=target,
        created_at=T0,
        mastery_level=level,
        next_review=next_review,
        correct_count=correct,
        incorrect_count=incorrect,
    )


WORDS = [
    ('dog', 'Hund'),
    ('cat', 'Katze'),
    ('house', 'Haus'),
    ('tree', 'Baum'),
    ('water', 'Wasser'),
    ('bread', 'Brot'),
    ('book', 'Buch'),
]


@pytest.fixture
def user_list(list_repo):
    vocab_list = make_list()
    list_repo.upsert(vocab_list)
    return vocab_list


@pytest.fixture
def new_items(item_repo, user_list):
    items = [
        make_item(f'item-{i}', source=source, target=target)
        for i, (source, target) in enumerate(WORDS[:5])
    ]
    item_repo.upsert_many(items)
    return items
