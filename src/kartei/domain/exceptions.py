"""Exceptions raised at the boundaries of the scheduler (stores, parsing)."""


class KarteiError(Exception):
    """Base class for all kartei errors."""


class CardNotFoundError(KarteiError, KeyError):
    """No card with the requested id exists in the store."""

    def __init__(self, card_id: str):
        super().__init__(card_id)
        self.card_id = card_id

    def __str__(self) -> str:
        return f"Card not found: {self.card_id}"


class DuplicateCardError(KarteiError):
    """A card with the same id is already stored."""

    def __init__(self, card_id: str):
        super().__init__(f"Card already exists: {card_id}")
        self.card_id = card_id


class StoreError(KarteiError):
    """The card store could not be read or written."""


class InvalidRatingError(KarteiError, ValueError):
    """A rating could not be parsed."""


class ConfigError(KarteiError):
    """The resolved configuration is invalid."""
