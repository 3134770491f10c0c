"""
Deck summary for status displays.

This is a pure computation module with no I/O.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from kartei.application.session import days_overdue, is_card_due
from kartei.domain.models import Card, CardState


@dataclass
class DeckSummary:
    """
    Counts over a card collection on a given day.
    """

    total: int
    new: int
    learning: int
    review: int

    # Due today (or earlier), per state
    due_new: int
    due_learning: int
    due_review: int

    mean_ease: float | None  # None for an empty deck
    max_days_overdue: int

    @property
    def due(self) -> int:
        return self.due_new + self.due_learning + self.due_review


def summarize(cards: Sequence[Card], today: date) -> DeckSummary:
    counts = {state: 0 for state in CardState}
    due = {state: 0 for state in CardState}
    overdue = 0

    for card in cards:
        counts[card.state] += 1
        if is_card_due(card, today):
            due[card.state] += 1
            overdue = max(overdue, days_overdue(card, today))

    mean_ease = round(sum(c.ease_factor for c in cards) / len(cards), 2) if cards else None

    return DeckSummary(
        total=len(cards),
        new=counts[CardState.NEW],
        learning=counts[CardState.LEARNING],
        review=counts[CardState.REVIEW],
        due_new=due[CardState.NEW],
        due_learning=due[CardState.LEARNING],
        due_review=due[CardState.REVIEW],
        mean_ease=mean_ease,
        max_days_overdue=overdue,
    )
