"""
JSON file card store.

The file holds a JSON array of card records (see kartei.application.records).
Legacy records are migrated on read; every write replaces the file atomically.
"""

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from kartei.application.migration import migrate_cards
from kartei.application.records import card_to_json_dict
from kartei.domain.exceptions import CardNotFoundError, DuplicateCardError, StoreError
from kartei.domain.models import Card
from kartei.domain.ports import CardStore

logger = logging.getLogger(__name__)


class JsonFileCardStore(CardStore):
    """
    Reads the whole file on every call and rewrites it on every change.

    One writer per file is assumed; there is no locking.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> list[Card]:
        if not self.path.exists():
            return []
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Could not read {self.path}: {e}") from e
        if not text.strip():
            return []

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupt card file {self.path}: {e}") from e

        # Accept both a bare array and the {"cards": [...]} envelope.
        if isinstance(data, dict):
            data = data.get("cards", [])
        if not isinstance(data, list):
            raise StoreError(f"Corrupt card file {self.path}: expected a list of cards")

        return migrate_cards(data)

    def _write(self, cards: Iterable[Card]) -> None:
        payload = [card_to_json_dict(card) for card in cards]
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"Could not write {self.path}: {e}") from e

        logger.debug(f"[store] wrote {len(payload)} cards to {self.path}")

    def list_cards(self) -> list[Card]:
        return self._read()

    def get_card(self, card_id: str) -> Card:
        for card in self._read():
            if card.id == card_id:
                return card
        raise CardNotFoundError(card_id)

    def add_cards(self, cards: Iterable[Card]) -> None:
        existing = self._read()
        ids = {c.id for c in existing}
        new_cards = list(cards)
        for card in new_cards:
            if card.id in ids:
                raise DuplicateCardError(card.id)
            ids.add(card.id)
        self._write(existing + new_cards)

    def update_card(self, card: Card) -> None:
        cards = self._read()
        for i, stored in enumerate(cards):
            if stored.id == card.id:
                cards[i] = card
                self._write(cards)
                return
        raise CardNotFoundError(card.id)

    def delete_card(self, card_id: str) -> None:
        cards = self._read()
        remaining = [c for c in cards if c.id != card_id]
        if len(remaining) == len(cards):
            raise CardNotFoundError(card_id)
        self._write(remaining)

    def replace_all(self, cards: Iterable[Card]) -> None:
        self._write(cards)
