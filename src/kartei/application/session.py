"""
Session builder for mixed review queues.

Builds an ordered study session by:
1. Keeping only due cards and splitting them into learning, review and new
2. Ordering each bucket (overdue learning first, most overdue review first,
   new cards shuffled)
3. Taking a fixed share of the limit from each bucket, backfilling shortfalls
4. Interleaving the picks round-robin so one card type never runs in a block
"""

import logging
import math
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date

from kartei.domain.models import DEFAULT_MIX, Card, CardState, SessionMix

logger = logging.getLogger(__name__)

Shuffle = Callable[[list[Card]], list[Card]]


def random_shuffle(cards: list[Card]) -> list[Card]:
    """Shuffle using the module-level random source."""
    return random.sample(cards, len(cards))


def seeded_shuffle(seed: int) -> Shuffle:
    """Return a shuffle whose permutations are reproducible for `seed`."""
    rng = random.Random(seed)

    def shuffle(cards: list[Card]) -> list[Card]:
        return rng.sample(cards, len(cards))

    return shuffle


def is_card_due(card: Card, today: date) -> bool:
    return card.next_review_date <= today


def days_overdue(card: Card, today: date) -> int:
    """Whole days past the due date, 0 if not yet overdue."""
    return max(0, (today - card.next_review_date).days)


def get_due_cards(cards: Sequence[Card], today: date) -> list[Card]:
    """All due cards, oldest due date first."""
    return sorted(
        (c for c in cards if is_card_due(c, today)),
        key=lambda c: c.next_review_date,
    )


@dataclass
class SessionBuckets:
    """Due cards split by state, each already in priority order."""

    learning: list[Card] = field(default_factory=list)
    review: list[Card] = field(default_factory=list)
    new: list[Card] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.learning) + len(self.review) + len(self.new)


def partition_due_cards(
    cards: Sequence[Card],
    today: date,
    shuffle: Shuffle = random_shuffle,
) -> SessionBuckets:
    """
    Split due cards into ordered learning, review and new buckets.

    Learning cards are time-sensitive, so the most overdue step comes first.
    Review cards are ordered by days overdue (descending), then by ease
    (ascending) so harder cards surface first among equally overdue ones.
    """
    buckets = SessionBuckets()

    for card in cards:
        if not is_card_due(card, today):
            continue
        if card.state is CardState.LEARNING:
            buckets.learning.append(card)
        elif card.state is CardState.REVIEW:
            buckets.review.append(card)
        else:
            buckets.new.append(card)

    buckets.learning.sort(key=lambda c: c.next_review_date)
    buckets.review.sort(key=lambda c: (-days_overdue(c, today), c.ease_factor))
    buckets.new = list(shuffle(buckets.new))
    return buckets


def session_quotas(limit: int, mix: SessionMix = DEFAULT_MIX) -> tuple[int, int, int]:
    """
    Split `limit` into (learning, review, new) quotas.

    Learning and review round up; new receives the remainder, never negative.
    """
    learning = math.ceil(limit * mix.learning)
    review = math.ceil(limit * mix.review)
    new = max(0, limit - learning - review)
    return learning, review, new


def select_session(
    cards: Sequence[Card],
    limit: int,
    *,
    today: date,
    shuffle: Shuffle = random_shuffle,
    mix: SessionMix = DEFAULT_MIX,
) -> list[Card]:
    """
    Build an ordered review session of at most `limit` due cards.

    Args:
        cards: The full card collection; cards not yet due are ignored.
        limit: Maximum session length.
        today: Day used for due-ness and overdue ordering.
        shuffle: Permutation applied to new cards.
        mix: Share of the limit drawn from each bucket.

    Returns:
        Cards interleaved Review, Learning, New. Fewer than `limit` only when
        fewer cards are due; empty when nothing is due.
    """
    if limit <= 0:
        return []

    buckets = partition_due_cards(cards, today, shuffle)
    learning_quota, review_quota, new_quota = session_quotas(limit, mix)

    picks = {
        CardState.LEARNING: buckets.learning[:learning_quota],
        CardState.REVIEW: buckets.review[:review_quota],
        CardState.NEW: buckets.new[:new_quota],
    }
    leftovers = {
        CardState.LEARNING: buckets.learning[learning_quota:],
        CardState.REVIEW: buckets.review[review_quota:],
        CardState.NEW: buckets.new[new_quota:],
    }

    # Backfill from whichever bucket still has cards, in bucket precedence order.
    shortfall = limit - sum(len(p) for p in picks.values())
    for state in (CardState.LEARNING, CardState.REVIEW, CardState.NEW):
        if shortfall <= 0:
            break
        extra = leftovers[state][:shortfall]
        picks[state] = picks[state] + extra
        shortfall -= len(extra)

    session = _interleave(
        picks[CardState.REVIEW],
        picks[CardState.LEARNING],
        picks[CardState.NEW],
    )[:limit]

    logger.debug(
        f"[session] due={buckets.total} limit={limit} "
        f"learning={len(picks[CardState.LEARNING])} review={len(picks[CardState.REVIEW])} "
        f"new={len(picks[CardState.NEW])} selected={len(session)}"
    )
    return session


def _interleave(*queues: list[Card]) -> list[Card]:
    """Round-robin merge: first of each queue, then second of each, ..."""
    merged: list[Card] = []
    longest = max((len(q) for q in queues), default=0)
    for i in range(longest):
        for queue in queues:
            if i < len(queue):
                merged.append(queue[i])
    return merged
