"""
Interval preview for the four rating buttons.

Shows what each button would do, e.g. "Again: 1d  Hard: 1d  Good: 6d  Easy: 4d",
without committing anything.
"""

from kartei.application.scheduler import Scheduler, round_half_up
from kartei.domain.constants import DAYS_PER_MONTH, DAYS_PER_YEAR
from kartei.domain.models import Card, Rating


def format_interval(days: int, precise: bool = True) -> str:
    """
    Render a day count as a short human-readable bucket.

    Args:
        days: Offset in days from today.
        precise: Years get one decimal when True (preview), are rounded otherwise.
    """
    if days < 1:
        return "1d"
    if days < DAYS_PER_MONTH:
        return f"{days}d"
    if days < DAYS_PER_YEAR:
        return f"{round_half_up(days / DAYS_PER_MONTH)}mo"
    if precise:
        return f"{days / DAYS_PER_YEAR:.1f}y"
    return f"{round_half_up(days / DAYS_PER_YEAR)}y"


def preview_offsets(scheduler: Scheduler, card: Card) -> dict[Rating, int]:
    """Days from today until the card would be due, for each rating."""
    today = scheduler.today()
    return {
        rating: (scheduler.next_state(card, rating).next_review_date - today).days
        for rating in Rating
    }


def preview_intervals(scheduler: Scheduler, card: Card) -> dict[Rating, str]:
    """Formatted due offsets for each rating. The card itself is left untouched."""
    return {
        rating: format_interval(days)
        for rating, days in preview_offsets(scheduler, card).items()
    }
