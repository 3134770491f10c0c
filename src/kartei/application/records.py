"""
Persisted card schema.

JSON keys follow the legacy camelCase shape (`wordData`, `easeFactor`,
`nextReviewDate`, ...) so older exports load without conversion.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from kartei.domain.constants import STARTING_EASE
from kartei.domain.models import Card, CardState


def _local_day(moment: datetime) -> date:
    """Calendar day of `moment` in the local timezone; naive values are taken as local."""
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


class CardRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    content: dict[str, Any] = Field(default_factory=dict, alias="wordData")
    ease_factor: float = STARTING_EASE
    interval: int = 0
    repetitions: int = 0
    next_review_date: date = Field(default_factory=date.today)
    last_review_date: date | None = None
    state: CardState = CardState.NEW
    learning_step: int = 0
    # Legacy flag, written for older readers only.
    is_new: bool | None = None
    created_at: datetime | None = None

    @field_validator("next_review_date", "last_review_date", mode="before")
    @classmethod
    def truncate_to_day(cls, v: Any) -> Any:
        # Legacy records store local start of day as a UTC timestamp
        # ("2024-01-04T23:00:00.000Z" is Jan 5 in Madrid); the day is the local one.
        if isinstance(v, str) and len(v) > 10:
            try:
                v = datetime.fromisoformat(v)
            except ValueError:
                return v
        if isinstance(v, datetime):
            return _local_day(v)
        return v

    @field_validator("interval", "repetitions", "learning_step", mode="before")
    @classmethod
    def whole_days(cls, v: Any) -> Any:
        if isinstance(v, float):
            return int(round(v))
        return v

    @classmethod
    def from_card(cls, card: Card) -> "CardRecord":
        return cls(
            id=card.id,
            content=dict(card.content),
            ease_factor=card.ease_factor,
            interval=card.interval,
            repetitions=card.repetitions,
            next_review_date=card.next_review_date,
            last_review_date=card.last_review_date,
            state=card.state,
            learning_step=card.learning_step,
            is_new=card.state is CardState.NEW,
            created_at=card.created_at,
        )

    def to_card(self) -> Card:
        return Card(
            id=self.id,
            content=dict(self.content),
            state=self.state,
            learning_step=self.learning_step,
            ease_factor=self.ease_factor,
            interval=self.interval,
            repetitions=self.repetitions,
            next_review_date=self.next_review_date,
            last_review_date=self.last_review_date,
            created_at=self.created_at,
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def card_to_json_dict(card: Card) -> dict[str, Any]:
    return CardRecord.from_card(card).to_json_dict()
