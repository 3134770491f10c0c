"""In-memory card store, used for tests and throwaway sessions."""

import logging
from collections.abc import Iterable

from kartei.domain.exceptions import CardNotFoundError, DuplicateCardError
from kartei.domain.models import Card
from kartei.domain.ports import CardStore

logger = logging.getLogger(__name__)


class InMemoryCardStore(CardStore):
    def __init__(self, cards: Iterable[Card] = ()):
        self._cards: dict[str, Card] = {}
        self.add_cards(cards)

    def list_cards(self) -> list[Card]:
        return list(self._cards.values())

    def get_card(self, card_id: str) -> Card:
        try:
            return self._cards[card_id]
        except KeyError:
            raise CardNotFoundError(card_id) from None

    def add_cards(self, cards: Iterable[Card]) -> None:
        cards = list(cards)
        seen: set[str] = set()
        for card in cards:
            if card.id in self._cards or card.id in seen:
                raise DuplicateCardError(card.id)
            seen.add(card.id)
        for card in cards:
            self._cards[card.id] = card

    def update_card(self, card: Card) -> None:
        if card.id not in self._cards:
            raise CardNotFoundError(card.id)
        self._cards[card.id] = card

    def delete_card(self, card_id: str) -> None:
        if self._cards.pop(card_id, None) is None:
            raise CardNotFoundError(card_id)

    def replace_all(self, cards: Iterable[Card]) -> None:
        self._cards = {card.id: card for card in cards}
