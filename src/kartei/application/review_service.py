"""
Review Service: application layer orchestrator.

Coordinates the card store with the scheduler: creating cards, building
sessions, applying ratings, and the bulk operations (reset, export, import).
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from kartei.application.migration import migrate_cards
from kartei.application.preview import preview_intervals
from kartei.application.records import card_to_json_dict
from kartei.application.scheduler import Scheduler
from kartei.application.session import Shuffle, get_due_cards, random_shuffle, select_session
from kartei.application.stats import DeckSummary, summarize
from kartei.domain.exceptions import StoreError
from kartei.domain.models import DEFAULT_MIX, Card, CardState, Rating, SessionMix
from kartei.domain.ports import CardStore

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service for studying a card collection.

    Follows Dependency Inversion: depends on the CardStore abstraction,
    not concrete adapter implementations.
    """

    def __init__(
        self,
        store: CardStore,
        scheduler: Scheduler | None = None,
        shuffle: Shuffle = random_shuffle,
        mix: SessionMix = DEFAULT_MIX,
    ):
        """
        Args:
            store: The repository (port) holding the cards.
            scheduler: Optional custom scheduler; uses defaults and the system clock if not provided.
            shuffle: Permutation used for new cards in a session.
            mix: Share of a session drawn from learning/review/new cards.
        """
        self._store = store
        self._scheduler = scheduler or Scheduler()
        self._shuffle = shuffle
        self._mix = mix

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    # ------------------------------------------------------------------
    # Cards
    # ------------------------------------------------------------------

    def add_word(self, content: dict[str, Any]) -> Card:
        return self.add_words([content])[0]

    def add_words(self, contents: Iterable[dict[str, Any]]) -> list[Card]:
        cards = [self._scheduler.new_card(content) for content in contents]
        if cards:
            self._store.add_cards(cards)
            logger.info(f"Added {len(cards)} card(s)")
        return cards

    def list_cards(self, due_only: bool = False) -> list[Card]:
        cards = self._store.list_cards()
        if due_only:
            return get_due_cards(cards, self._scheduler.today())
        return cards

    def get_card(self, card_id: str) -> Card:
        return self._store.get_card(card_id)

    def delete_card(self, card_id: str) -> None:
        self._store.delete_card(card_id)
        logger.info(f"Deleted card {card_id}")

    # ------------------------------------------------------------------
    # Reviewing
    # ------------------------------------------------------------------

    def build_session(self, limit: int) -> list[Card]:
        """
        Ordered review queue of at most `limit` due cards; empty if nothing is due.
        """
        return select_session(
            self._store.list_cards(),
            limit,
            today=self._scheduler.today(),
            shuffle=self._shuffle,
            mix=self._mix,
        )

    def rate(self, card_id: str, rating: Rating | str | int) -> Card:
        """
        Apply a rating to a stored card and persist the result.

        Returns:
            The updated card, as stored.
        """
        rating = Rating.parse(rating)
        card = self._store.get_card(card_id)
        updated = self._scheduler.next_state(card, rating)
        self._store.update_card(updated)
        logger.info(
            f"Rated {card_id} {rating.name}: "
            f"{card.state.value} -> {updated.state.value}, due {updated.next_review_date}"
        )
        return updated

    def preview(self, card_id: str) -> dict[Rating, str]:
        return preview_intervals(self._scheduler, self._store.get_card(card_id))

    def summary(self) -> DeckSummary:
        return summarize(self._store.list_cards(), self._scheduler.today())

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def reset_progress(self) -> int:
        """
        Put every card back to a fresh new card, keeping id, content and
        creation time. Returns the number of cards reset.
        """
        cards = self._store.list_cards()
        today = self._scheduler.today()
        fresh = [
            replace(
                card,
                state=CardState.NEW,
                learning_step=0,
                ease_factor=self._scheduler.params.starting_ease,
                interval=0,
                repetitions=0,
                next_review_date=today,
                last_review_date=None,
            )
            for card in cards
        ]
        self._store.replace_all(fresh)
        logger.info(f"Reset progress on {len(fresh)} card(s)")
        return len(fresh)

    def export_json(self) -> str:
        """All cards as a pretty-printed JSON array of records."""
        records = [card_to_json_dict(card) for card in self._store.list_cards()]
        return json.dumps(records, indent=2, ensure_ascii=False)

    def import_json(self, text: str) -> int:
        """
        Import a JSON backup (legacy records are migrated).

        Cards whose id is already stored are skipped. Returns the number imported.

        Raises:
            StoreError: if the text is not a JSON array of card records.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StoreError(f"Invalid backup: {e}") from e
        if isinstance(data, dict):
            data = data.get("cards", [])
        if not isinstance(data, list):
            raise StoreError("Invalid backup: expected a list of cards")

        existing = {c.id for c in self._store.list_cards()}
        incoming: list[Card] = []
        for card in migrate_cards(data):
            if card.id in existing:
                logger.debug(f"Skipping {card.id}: already stored")
                continue
            existing.add(card.id)
            incoming.append(card)

        if incoming:
            self._store.add_cards(incoming)
        logger.info(f"Imported {len(incoming)} of {len(data)} card(s)")
        return len(incoming)

    def migrate_store(self) -> int:
        """
        Rewrite the whole store in the current record shape. Returns the card count.
        """
        cards = self._store.list_cards()
        self._store.replace_all(cards)
        return len(cards)
