from datetime import timedelta

import pytest

from vocabox.errors import SessionStateError, StoreError
from vocabox.leitner import Outcome
from vocabox.sessions import ReviewPhase, ReviewSession

from conftest import T0, TODAY, WORDS, make_item


@pytest.fixture
def due_items(item_repo, user_list):
    items = [
        make_item(f'due-{i}', level=level, next_review=T0 - timedelta(hours=1),
                  source=source, target=target)
        for i, ((source, target), level) in enumerate(zip(WORDS, [1, 2, 3, 5]))
    ]
    item_repo.upsert_many(items)
    return items


@pytest.fixture
def session(due_items, item_repo, stats_repo, scheduler, clock):
    return ReviewSession(due_items, item_repo, stats_repo, scheduler, clock=clock)


def test_rejects_new_or_mastered_items(item_repo, stats_repo, scheduler):
    with pytest.raises(ValueError):
        ReviewSession([make_item('a', level=0)], item_repo, stats_repo, scheduler)
    with pytest.raises(ValueError):
        ReviewSession([make_item('a', level=6)], item_repo, stats_repo, scheduler)
    with pytest.raises(ValueError):
        ReviewSession([], item_repo, stats_repo, scheduler)


def test_correct_first_try_moves_up_and_persists(session, item_repo, stats_repo, clock):
    item = session.current_item

    result = session.submit(item.target_text)

    stored = item_repo.get(item.id)
    assert result.accepted and result.committed
    assert stored.mastery_level == item.mastery_level + 1
    assert stored.next_review == clock.now + timedelta(days=2)
    assert stored.correct_count == 1
    assert stats_repo.get(TODAY).reviewed == 1
    assert session.results[item.id] is Outcome.CORRECT


def test_wrong_answer_resets_to_box_one_immediately(session, item_repo, stats_repo, clock):
    item = session.current_item

    result = session.submit('nope')

    stored = item_repo.get(item.id)
    assert not result.accepted and result.committed
    assert session.current_item.id == item.id
    assert stored.mastery_level == 1
    assert stored.incorrect_count == 1
    assert stored.next_review == clock.now + timedelta(days=1)
    assert stats_repo.get(TODAY) is None


def test_abandon_after_miss_keeps_reset(session, item_repo, due_items):
    session.submit(session.current_item.target_text)
    missed = session.current_item
    assert missed.mastery_level == 2

    session.submit('wrong')
    session.abandon()

    stored = item_repo.get(missed.id)
    assert stored.mastery_level == 1
    assert stored.incorrect_count == 1
    assert stored.correct_count == 0


def test_repeated_misses_count_once(session, item_repo):
    item = session.current_item

    session.submit('wrong')
    result = session.submit('still wrong')

    assert not result.accepted
    assert result.attempts == 2
    assert item_repo.get(item.id).incorrect_count == 1


def test_correct_after_miss_resets_to_box_one_once(session, item_repo, clock):
    session.submit(session.current_item.target_text)
    item = session.current_item
    assert item.mastery_level == 2

    session.submit('wrong')
    session.submit('still wrong')
    result = session.submit(item.target_text)

    stored = item_repo.get(item.id)
    assert result.accepted
    assert result.attempts == 3
    assert stored.mastery_level == 1
    assert stored.next_review == clock.now + timedelta(days=1)
    assert stored.incorrect_count == 1
    assert stored.correct_count == 0


def test_typo_override_counts_as_correct(session, item_repo):
    item = session.current_item
    session.submit('hnud')
    assert item_repo.get(item.id).incorrect_count == 1

    result = session.mark_typo(item.id)

    stored = item_repo.get(item.id)
    assert result.accepted and result.committed
    assert stored.mastery_level == item.mastery_level + 1
    assert stored.incorrect_count == 0
    assert stored.correct_count == 1


def test_box_five_correct_masters_item(session, item_repo):
    for _ in range(3):
        session.mark_typo()
    last = session.current_item
    assert last.mastery_level == 5

    result = session.submit(last.target_text)

    stored = item_repo.get(last.id)
    assert result.phase == ReviewPhase.COMPLETED.value
    assert stored.mastery_level == 6
    assert stored.next_review is None


def test_reviewed_counter_counts_exiting_items(session, stats_repo):
    session.submit('wrong')
    session.submit(session.current_item.target_text)
    session.mark_typo()

    assert stats_repo.get(TODAY).reviewed == 2
    assert session.reviewed_count == 2
    assert session.correct_count == 1
    assert session.remaining == 2


def test_abandon_keeps_committed_items(session, item_repo, due_items):
    first = session.current_item
    session.submit(first.target_text)
    session.submit('wrong')

    session.abandon()

    assert session.phase is ReviewPhase.ABANDONED
    assert item_repo.get(first.id).mastery_level == first.mastery_level + 1
    assert item_repo.get(due_items[1].id).mastery_level == 1
    assert item_repo.get(due_items[1].id).incorrect_count == 1
    with pytest.raises(SessionStateError):
        session.submit('anything')


def test_failed_commit_reports_and_moves_on(session, item_repo, stats_repo, monkeypatch):
    item = session.current_item
    calls = []

    def broken_upsert(updated):
        calls.append(updated.id)
        raise StoreError('read-only file system')

    monkeypatch.setattr(item_repo, 'upsert', broken_upsert)
    result = session.submit(item.target_text)

    assert len(calls) == 2
    assert result.accepted and not result.committed
    assert 'read-only' in result.error
    assert session.current_item.id != item.id
    assert session.failed_commits == [item.id]
    assert stats_repo.get(TODAY) is None
    monkeypatch.undo()
    assert item_repo.get(item.id) == item


def test_submit_answer_requires_current_item(session):
    other = session.items[1]

    with pytest.raises(SessionStateError):
        session.submit_answer(other.id, other.target_text)

    result = session.submit_answer(session.current_item.id, session.current_item.target_text)
    assert result.accepted


def test_shuffle_keeps_same_items(due_items, item_repo, stats_repo, scheduler, rng):
    session = ReviewSession(due_items, item_repo, stats_repo, scheduler, shuffle=True, rng=rng)

    assert sorted(item.id for item in session.items) == sorted(item.id for item in due_items)
