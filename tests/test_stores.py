from dataclasses import replace
from datetime import date, timedelta

import pytest

from vocabox.errors import ListNotFoundError, ProtectedListError
from vocabox.settings_repo import DEFAULT_DAILY_GOAL

from conftest import T0, make_item, make_list


# ---- Items ----

def test_upsert_twice_stores_one_record(item_repo, user_list):
    item = make_item('a')

    item_repo.upsert(item)
    item_repo.upsert(item)

    assert len(item_repo.get_all()) == 1


def test_item_round_trip_keeps_every_field(item_repo, user_list):
    item = make_item(
        'a', level=3, next_review=T0 + timedelta(days=4), correct=5, incorrect=2
    )
    item = replace(item, last_reviewed_at=T0)

    item_repo.upsert(item)

    assert item_repo.get('a') == item


def test_upsert_replaces_existing(item_repo, user_list):
    item_repo.upsert(make_item('a', level=1))
    item_repo.upsert(make_item('a', level=4))

    assert item_repo.get('a').mastery_level == 4


def test_queries_by_list_and_level(item_repo, list_repo):
    list_repo.upsert_many([make_list('l1'), make_list('l2')])
    item_repo.upsert_many([
        make_item('a', 'l1', level=0),
        make_item('b', 'l1', level=2),
        make_item('c', 'l2', level=2),
    ])

    assert {item.id for item in item_repo.get_by_list('l1')} == {'a', 'b'}
    assert {item.id for item in item_repo.get_by_mastery_level(2)} == {'b', 'c'}
    assert item_repo.count_by_list('l2') == 1


def test_delete_and_delete_by_list(item_repo, list_repo):
    list_repo.upsert_many([make_list('l1'), make_list('l2')])
    item_repo.upsert_many([make_item('a', 'l1'), make_item('b', 'l1'), make_item('c', 'l2')])

    item_repo.delete('c')
    removed = item_repo.delete_by_list('l1')

    assert removed == 2
    assert item_repo.get_all() == []


def test_get_missing_item_returns_none(item_repo):
    assert item_repo.get('missing') is None


# ---- Lists ----

def test_builtin_activity_lives_in_preferences(list_repo):
    builtin = make_list('b1', is_builtin=True, is_active=False)
    list_repo.upsert(builtin)

    assert list_repo.get('b1').is_active is False

    toggled = list_repo.set_active('b1', True)

    assert toggled.is_active is True
    assert list_repo.get_active_ids() == ['b1']
    # re-seeding the record does not reset the user's choice
    list_repo.upsert(builtin)
    assert list_repo.get('b1').is_active is True


def test_user_list_toggle(list_repo, user_list):
    list_repo.set_active(user_list.id, False)

    assert list_repo.get(user_list.id).is_active is False
    assert list_repo.get_active_ids() == []


def test_toggle_unknown_list(list_repo):
    with pytest.raises(ListNotFoundError):
        list_repo.set_active('missing', True)


def test_builtin_list_cannot_be_deleted(list_repo):
    list_repo.upsert(make_list('b1', is_builtin=True))

    with pytest.raises(ProtectedListError):
        list_repo.delete('b1')
    with pytest.raises(ListNotFoundError):
        list_repo.delete('missing')


def test_has_data_and_item_count(list_repo, user_list):
    assert list_repo.has_data()

    list_repo.refresh_item_count(user_list.id, 12)

    assert list_repo.get(user_list.id).item_count == 12


# ---- Daily stats ----

def test_increment_merges_into_one_record(stats_repo):
    day = date(2024, 3, 1)

    stats_repo.increment(new_learned=2, reviewed=3, day=day)
    merged = stats_repo.increment(new_learned=4, reviewed=5, total_time_seconds=60, day=day)

    assert merged.new_learned == 6
    assert merged.reviewed == 8
    assert merged.total_time_seconds == 60
    assert len(stats_repo.get_all()) == 1


def test_stats_are_keyed_by_day(stats_repo):
    stats_repo.increment(reviewed=1, day=date(2024, 3, 2))
    stats_repo.increment(reviewed=1, day=date(2024, 3, 1))

    assert [stat.day for stat in stats_repo.get_all()] == ['2024-03-01', '2024-03-02']
    assert stats_repo.get(date(2024, 3, 3)) is None


def test_negative_increment_rejected(stats_repo):
    with pytest.raises(ValueError):
        stats_repo.increment(reviewed=-1)


# ---- Settings ----

def test_daily_goal_default_and_update(settings_repo):
    assert settings_repo.get_daily_goal() == DEFAULT_DAILY_GOAL

    settings_repo.set_daily_goal(35)

    assert settings_repo.get_daily_goal() == 35
    with pytest.raises(ValueError):
        settings_repo.set_daily_goal(0)
