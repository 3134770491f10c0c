"""
Ports (interfaces) for card persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from .models import Card


class CardStore(ABC):
    """
    Port for reading and writing the card collection, keyed by card id.

    Implementations:
        - InMemoryCardStore: A dict, lost when the process exits.
        - JsonFileCardStore: A JSON array of records on disk.
    """

    @abstractmethod
    def list_cards(self) -> list[Card]:
        """Return every stored card in insertion order."""
        pass

    @abstractmethod
    def get_card(self, card_id: str) -> Card:
        """
        Raises:
            CardNotFoundError: if no card has this id.
        """
        pass

    @abstractmethod
    def add_cards(self, cards: Iterable[Card]) -> None:
        """
        Raises:
            DuplicateCardError: if any id is already stored.
        """
        pass

    @abstractmethod
    def update_card(self, card: Card) -> None:
        """
        Replace the stored card that has the same id.

        Raises:
            CardNotFoundError: if no card has this id.
        """
        pass

    @abstractmethod
    def delete_card(self, card_id: str) -> None:
        """
        Raises:
            CardNotFoundError: if no card has this id.
        """
        pass

    @abstractmethod
    def replace_all(self, cards: Iterable[Card]) -> None:
        """Overwrite the whole collection."""
        pass

    def add_card(self, card: Card) -> None:
        self.add_cards([card])
