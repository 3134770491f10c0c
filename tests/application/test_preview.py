import pytest

from kartei.application.preview import format_interval, preview_intervals, preview_offsets
from kartei.domain.models import CardState, Rating


@pytest.mark.parametrize(
    "days, expected",
    [
        (0, "1d"),
        (1, "1d"),
        (6, "6d"),
        (29, "29d"),
        (30, "1mo"),
        (45, "2mo"),
        (364, "12mo"),
        (365, "1.0y"),
        (500, "1.4y"),
    ],
)
def test_format_interval_preview(days, expected):
    assert format_interval(days) == expected


def test_format_interval_rounds_years_when_not_precise():
    assert format_interval(500, precise=False) == "1y"
    assert format_interval(730, precise=False) == "2y"
    assert format_interval(45, precise=False) == "2mo"


def test_preview_for_new_card(scheduler, make_card):
    previews = preview_intervals(scheduler, make_card())
    assert previews == {
        Rating.AGAIN: "1d",
        Rating.HARD: "1d",
        Rating.GOOD: "1d",
        Rating.EASY: "4d",
    }


def test_preview_for_review_card(scheduler, make_card):
    card = make_card(state=CardState.REVIEW, interval=6, repetitions=2)
    assert preview_offsets(scheduler, card) == {
        Rating.AGAIN: 1,
        Rating.HARD: 9,
        Rating.GOOD: 15,
        Rating.EASY: 20,
    }


def test_preview_uses_learning_step_offset(scheduler, make_card):
    card = make_card(state=CardState.LEARNING, learning_step=0)
    assert preview_intervals(scheduler, card)[Rating.GOOD] == "6d"


def test_preview_leaves_card_untouched(scheduler, make_card):
    card = make_card(state=CardState.REVIEW, interval=40, repetitions=4, ease=2.2)
    before = (card.state, card.interval, card.repetitions, card.ease_factor, card.next_review_date)

    preview_intervals(scheduler, card)
    preview_intervals(scheduler, card)

    after = (card.state, card.interval, card.repetitions, card.ease_factor, card.next_review_date)
    assert before == after
