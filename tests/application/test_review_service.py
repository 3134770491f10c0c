"""Tests for ReviewService using the in-memory store."""

import json
from datetime import timedelta

import pytest

from kartei.application.review_service import ReviewService
from kartei.domain.exceptions import CardNotFoundError, InvalidRatingError, StoreError
from kartei.domain.models import CardState, Rating
from kartei.infrastructure.stores import InMemoryCardStore


def identity(cards):
    return list(cards)


@pytest.fixture
def store():
    return InMemoryCardStore()


@pytest.fixture
def service(store, scheduler):
    return ReviewService(store, scheduler=scheduler, shuffle=identity)


def words(*pairs):
    return [{"german": de, "spanish": es} for de, es in pairs]


def test_add_word_stores_new_card(service, store, today):
    card = service.add_word({"german": "Hund", "spanish": "perro"})

    assert store.get_card(card.id) == card
    assert card.state is CardState.NEW
    assert card.next_review_date == today


def test_add_words_empty_is_noop(service, store):
    assert service.add_words([]) == []
    assert store.list_cards() == []


def test_rate_persists_updated_card(service, store, today):
    card = service.add_word({"german": "Hund", "spanish": "perro"})

    updated = service.rate(card.id, Rating.GOOD)

    assert store.get_card(card.id) == updated
    assert updated.state is CardState.LEARNING
    assert updated.next_review_date == today + timedelta(days=1)


def test_rate_accepts_button_number(service):
    card = service.add_word({"german": "Hund", "spanish": "perro"})
    assert service.rate(card.id, "4").state is CardState.REVIEW


def test_rate_rejects_bad_rating_without_changes(service, store):
    card = service.add_word({"german": "Hund", "spanish": "perro"})
    with pytest.raises(InvalidRatingError):
        service.rate(card.id, "9")
    assert store.get_card(card.id) == card


def test_rate_unknown_card(service):
    with pytest.raises(CardNotFoundError):
        service.rate("missing", Rating.GOOD)


def test_list_cards_due_only(service, store, make_card):
    store.add_cards([make_card("due", due_in=-1), make_card("later", due_in=5)])

    assert {c.id for c in service.list_cards()} == {"due", "later"}
    assert [c.id for c in service.list_cards(due_only=True)] == ["due"]


def test_build_session_uses_due_cards(service, store, make_card):
    store.add_cards(
        [
            make_card("n1"),
            make_card("r1", CardState.REVIEW, due_in=-2, interval=6, repetitions=2),
            make_card("r2", CardState.REVIEW, due_in=4, interval=6, repetitions=2),
        ]
    )
    assert [c.id for c in service.build_session(10)] == ["r1", "n1"]


def test_preview_does_not_persist(service, store):
    card = service.add_word({"german": "Hund", "spanish": "perro"})
    assert service.preview(card.id)[Rating.EASY] == "4d"
    assert store.get_card(card.id) == card


def test_delete_card(service, store):
    card = service.add_word({"german": "Hund", "spanish": "perro"})
    service.delete_card(card.id)
    assert store.list_cards() == []
    with pytest.raises(CardNotFoundError):
        service.delete_card(card.id)


def test_summary(service, store, make_card):
    store.add_cards(
        [
            make_card("n1"),
            make_card("l1", CardState.LEARNING, due_in=-3),
            make_card("r1", CardState.REVIEW, due_in=2, interval=6, repetitions=2),
        ]
    )
    summary = service.summary()
    assert (summary.total, summary.new, summary.learning, summary.review) == (3, 1, 1, 1)
    assert summary.due == 2
    assert summary.max_days_overdue == 3


def test_reset_progress(service, store, today):
    cards = service.add_words(words(("Hund", "perro"), ("Katze", "gato")))
    service.rate(cards[0].id, Rating.EASY)
    service.rate(cards[1].id, Rating.AGAIN)

    assert service.reset_progress() == 2

    for card in store.list_cards():
        assert card.state is CardState.NEW
        assert card.ease_factor == 2.5
        assert (card.interval, card.repetitions, card.learning_step) == (0, 0, 0)
        assert card.next_review_date == today
        assert card.last_review_date is None
    assert [c.content["german"] for c in store.list_cards()] == ["Hund", "Katze"]


def test_export_then_import_into_empty_store(service, scheduler):
    service.add_words(words(("Hund", "perro"), ("Baum", "árbol")))
    text = service.export_json()
    assert "árbol" in text

    other = ReviewService(InMemoryCardStore(), scheduler=scheduler)
    assert other.import_json(text) == 2
    assert sorted(c.id for c in other.list_cards()) == sorted(c.id for c in service.list_cards())


def test_import_skips_existing_ids(service):
    service.add_words(words(("Hund", "perro")))
    text = service.export_json()
    assert service.import_json(text) == 0
    assert len(service.list_cards()) == 1


def test_import_migrates_legacy_records(service):
    legacy = [
        {
            "id": "old-1",
            "wordData": {"german": "Haus", "spanish": "casa"},
            "easeFactor": 2.5,
            "interval": 15,
            "repetitions": 4,
            "nextReviewDate": "2026-03-01T00:00:00.000Z",
            "isNew": False,
        }
    ]
    assert service.import_json(json.dumps({"cards": legacy})) == 1
    card = service.get_card("old-1")
    assert card.state is CardState.REVIEW
    assert card.interval == 15


@pytest.mark.parametrize(
    "text",
    ["not json", '"a string"', "42", "[1]", '["abc"]', '[{"id": "x", "repetitions": "lots"}]'],
)
def test_import_rejects_invalid_backup(service, text):
    with pytest.raises(StoreError):
        service.import_json(text)


def test_migrate_store_returns_count(service):
    service.add_words(words(("Hund", "perro"), ("Katze", "gato")))
    assert service.migrate_store() == 2
