"""
Domain models for cards and scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Any

from .constants import (
    EASY_INTERVAL,
    EASY_MODIFIER,
    GOOD_MODIFIER,
    GRADUATING_INTERVAL,
    HARD_MODIFIER,
    LEARNING_SHARE,
    LEARNING_STEPS,
    MINIMUM_EASE,
    NEW_SHARE,
    REVIEW_SHARE,
    SECOND_INTERVAL,
    STARTING_EASE,
)
from .exceptions import InvalidRatingError


class CardState(str, Enum):
    """Which transition rules apply to a card: new -> learning -> review."""

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"


class Rating(IntEnum):
    """Anki-compatible 4-button rating system."""

    AGAIN = 1  # Failure - back to the first learning step
    HARD = 2  # Difficult recall
    GOOD = 3  # Successful recall
    EASY = 4  # Effortless recall

    @property
    def quality(self) -> int:
        """Ordinal quality on the 0-3 scale used by the ease update."""
        return self.value - 1

    @classmethod
    def parse(cls, value: "str | int | Rating") -> "Rating":
        """
        Accept a Rating, a button number (1-4) or a name ("good", "Easy").

        Raises:
            InvalidRatingError: for anything else.
        """
        if isinstance(value, Rating):
            return value
        text = str(value).strip()
        if text.isdigit():
            try:
                return cls(int(text))
            except ValueError:
                raise InvalidRatingError(f"Unknown rating: {value!r}") from None
        try:
            return cls[text.upper()]
        except KeyError:
            raise InvalidRatingError(f"Unknown rating: {value!r}") from None


@dataclass(frozen=True)
class Card:
    """
    A learnable unit plus its scheduling metadata.

    Attributes:
        id: Unique identifier (ULID), assigned at creation.
        content: Opaque payload (word, translation, examples).
        state: Current state in the new -> learning -> review machine.
        learning_step: Index into the learning ladder (0 outside learning).
        ease_factor: Interval multiplier once in review, never below 1.3.
        interval: Whole days until the next review (0 while new/learning).
        repetitions: Consecutive successful reviews since the last failure.
        next_review_date: Day on which the card becomes due.
        last_review_date: Day of the most recent rating, None if never rated.
        created_at: Creation timestamp, bookkeeping only.
    """

    id: str
    content: dict[str, Any] = field(default_factory=dict)
    state: CardState = CardState.NEW
    learning_step: int = 0
    ease_factor: float = STARTING_EASE
    interval: int = 0
    repetitions: int = 0
    next_review_date: date = field(default_factory=date.today)
    last_review_date: date | None = None
    created_at: datetime | None = None

    @property
    def is_new(self) -> bool:
        return self.state is CardState.NEW


@dataclass(frozen=True)
class SchedulerParams:
    """
    Tunable constants of the scheduler.

    Defaults mirror kartei.domain.constants; AppConfig builds custom ones.
    """

    learning_steps: tuple[int, ...] = LEARNING_STEPS
    graduating_interval: int = GRADUATING_INTERVAL
    easy_interval: int = EASY_INTERVAL
    second_interval: int = SECOND_INTERVAL
    starting_ease: float = STARTING_EASE
    minimum_ease: float = MINIMUM_EASE
    hard_modifier: float = HARD_MODIFIER
    good_modifier: float = GOOD_MODIFIER
    easy_modifier: float = EASY_MODIFIER

    def modifier(self, rating: Rating) -> float:
        if rating is Rating.HARD:
            return self.hard_modifier
        if rating is Rating.EASY:
            return self.easy_modifier
        return self.good_modifier


@dataclass(frozen=True)
class SessionMix:
    """Share of a session's limit drawn from each bucket."""

    learning: float = LEARNING_SHARE
    review: float = REVIEW_SHARE
    new: float = NEW_SHARE


DEFAULT_PARAMS = SchedulerParams()
DEFAULT_MIX = SessionMix()
