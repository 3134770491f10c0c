"""
Spaced-repetition scheduler.

Anki-style three-state machine (new -> learning -> review) with an SM-2 ease
update. This is a pure computation module with no I/O: "today" comes from an
injected clock so transitions are deterministic under test.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Any

from kartei.application.id_service import generate_card_id
from kartei.application.session import is_card_due
from kartei.domain.constants import EASE_PRECISION
from kartei.domain.models import DEFAULT_PARAMS, Card, CardState, Rating, SchedulerParams

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


def system_clock() -> date:
    return date.today()


def fixed_clock(day: date) -> Clock:
    """Clock that always returns `day`."""

    def clock() -> date:
        return day

    return clock


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, halves away from zero (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


class Scheduler:
    """
    Computes the next scheduling state of a card for a rating.

    Stateless apart from its parameters and clock; never mutates a card.
    """

    def __init__(self, params: SchedulerParams | None = None, clock: Clock | None = None):
        self.params = params or DEFAULT_PARAMS
        self.clock = clock or system_clock

    def today(self) -> date:
        return self.clock()

    def due_date(self, offset_days: int) -> date:
        """Today plus `offset_days`; dates carry no time of day."""
        return self.today() + timedelta(days=offset_days)

    def is_due(self, card: Card) -> bool:
        """A card is due when its review day is today or earlier."""
        return is_card_due(card, self.today())

    def new_card(
        self,
        content: dict[str, Any],
        card_id: str | None = None,
        created_at: datetime | None = None,
    ) -> Card:
        """
        Create a fresh card that is due immediately.

        `created_at` defaults to the start of the clock's current day.
        """
        return Card(
            id=card_id or generate_card_id(),
            content=dict(content),
            state=CardState.NEW,
            learning_step=0,
            ease_factor=self.params.starting_ease,
            interval=0,
            repetitions=0,
            next_review_date=self.today(),
            last_review_date=None,
            created_at=created_at or datetime.combine(self.today(), time()),
        )

    def update_ease(self, ease: float, rating: Rating) -> float:
        """
        SM-2 ease update on the 0-3 quality scale.

        E' = E + (0.1 - (3 - q) * (0.08 + (3 - q) * 0.02)), floored at the
        minimum ease. Easy raises ease by 0.1, Good keeps it, Hard lowers it
        by 0.14.
        """
        miss = 3 - rating.quality
        new_ease = ease + (0.1 - miss * (0.08 + miss * 0.02))
        return round(max(self.params.minimum_ease, new_ease), EASE_PRECISION)

    def next_state(self, card: Card, rating: Rating | str | int) -> Card:
        """Return the card as it stands after being rated `rating` today."""
        rating = Rating.parse(rating)
        today = self.today()

        if rating is Rating.AGAIN:
            updated = self._lapse(card)
        elif card.state is CardState.REVIEW:
            updated = self._review_success(card, rating)
        else:
            updated = self._learning_success(card, rating)

        logger.debug(
            f"[scheduler] {card.id}: {card.state.value} -> {updated.state.value} "
            f"rating={rating.name} interval={updated.interval} due={updated.next_review_date}"
        )
        return replace(updated, last_review_date=today)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _lapse(self, card: Card) -> Card:
        first_step = self.params.learning_steps[0]
        return replace(
            card,
            state=CardState.LEARNING,
            learning_step=0,
            repetitions=0,
            interval=0,
            next_review_date=self.due_date(first_step),
        )

    def _learning_success(self, card: Card, rating: Rating) -> Card:
        if rating is Rating.EASY:
            return self._graduate(card, rating, self.params.easy_interval)

        # A new card enters the ladder at step 0; a learning card climbs one rung.
        next_step = 0 if card.state is CardState.NEW else card.learning_step + 1
        steps = self.params.learning_steps

        if next_step < len(steps):
            return replace(
                card,
                state=CardState.LEARNING,
                learning_step=next_step,
                interval=0,
                next_review_date=self.due_date(steps[next_step]),
            )

        return self._graduate(card, rating, self.params.graduating_interval)

    def _graduate(self, card: Card, rating: Rating, interval: int) -> Card:
        return replace(
            card,
            state=CardState.REVIEW,
            learning_step=0,
            repetitions=1,
            interval=interval,
            ease_factor=self.update_ease(card.ease_factor, rating),
            next_review_date=self.due_date(interval),
        )

    def _review_success(self, card: Card, rating: Rating) -> Card:
        params = self.params
        ease = self.update_ease(card.ease_factor, rating)

        if card.repetitions == 0:
            raw = float(params.graduating_interval)
        elif card.repetitions == 1:
            raw = float(params.second_interval)
        else:
            raw = card.interval * ease * params.modifier(rating)
            if rating is not Rating.HARD:
                raw = max(raw, card.interval + 1)

        if rating is Rating.HARD:
            # On top of the multiply branch, so Hard is scaled twice there.
            raw = max(1.0, raw * params.hard_modifier)

        interval = max(1, round_half_up(raw))
        return replace(
            card,
            state=CardState.REVIEW,
            learning_step=0,
            repetitions=card.repetitions + 1,
            interval=interval,
            ease_factor=ease,
            next_review_date=self.due_date(interval),
        )
