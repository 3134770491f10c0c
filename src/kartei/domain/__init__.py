# Domain Package
from .exceptions import (
    CardNotFoundError,
    ConfigError,
    DuplicateCardError,
    InvalidRatingError,
    KarteiError,
    StoreError,
)
from .models import (
    DEFAULT_MIX,
    DEFAULT_PARAMS,
    Card,
    CardState,
    Rating,
    SchedulerParams,
    SessionMix,
)
from .ports import CardStore

__all__ = [
    "Card",
    "CardState",
    "Rating",
    "SchedulerParams",
    "SessionMix",
    "DEFAULT_PARAMS",
    "DEFAULT_MIX",
    "CardStore",
    "KarteiError",
    "CardNotFoundError",
    "ConfigError",
    "DuplicateCardError",
    "StoreError",
    "InvalidRatingError",
]
