"""
Normalization of legacy card records.

Older records carry only an `isNew` flag and a repetition count. The state
machine fields (`state`, `learningStep`) are inferred once, at the storage
boundary, before a record ever reaches the scheduler.
"""

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from kartei.application.records import CardRecord
from kartei.domain.exceptions import StoreError
from kartei.domain.models import Card, CardState

logger = logging.getLogger(__name__)


def needs_migration(raw: dict[str, Any]) -> bool:
    return not ("state" in raw and "learningStep" in raw)


def migrate_record(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Return a record that carries `state` and `learningStep`.

    Records that already have both pass through unchanged. Otherwise:
    - `isNew` set or 0 repetitions -> new
    - 1 or 2 repetitions -> learning, step min(repetitions, 1)
    - anything more -> review

    Raises:
        StoreError: if the record is not an object or its repetition count
            is not a number.
    """
    if not isinstance(raw, dict):
        raise StoreError(f"Invalid card record: expected an object, got {type(raw).__name__}")
    if not needs_migration(raw):
        return raw

    try:
        repetitions = int(raw.get("repetitions") or 0)
    except (TypeError, ValueError) as e:
        raise StoreError(
            f"Invalid card record {raw.get('id', '?')}: bad repetitions {raw['repetitions']!r}"
        ) from e
    legacy_new = bool(raw.get("isNew"))
    record = dict(raw)

    if legacy_new or repetitions == 0:
        state = CardState.NEW
        record["repetitions"] = 0
        record["interval"] = 0
        learning_step = 0
    elif repetitions in (1, 2):
        state = CardState.LEARNING
        record["interval"] = 0
        learning_step = min(repetitions, 1)
    else:
        state = CardState.REVIEW
        learning_step = 0

    record["state"] = state.value
    record["learningStep"] = learning_step
    if "isNew" not in raw:
        record["isNew"] = state is CardState.NEW

    logger.debug(f"[migrate] {raw.get('id')}: repetitions={repetitions} -> {state.value}")
    return record


def migrate(raw: dict[str, Any]) -> Card:
    """
    Normalize a raw (possibly legacy) record into a Card.

    Raises:
        StoreError: if the record is structurally unusable (e.g. no id).
    """
    try:
        return CardRecord.model_validate(migrate_record(raw)).to_card()
    except ValidationError as e:
        raise StoreError(f"Invalid card record {raw.get('id', '?')}: {e}") from e


def migrate_cards(raws: Iterable[dict[str, Any]]) -> list[Card]:
    return [migrate(raw) for raw in raws]
