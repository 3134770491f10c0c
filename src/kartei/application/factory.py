"""
Card Store Factory
Centralizes the logic for selecting the card store and building services.
"""

import logging

from kartei.application.config import AppConfig
from kartei.application.review_service import ReviewService
from kartei.application.scheduler import Scheduler
from kartei.application.session import random_shuffle, seeded_shuffle
from kartei.domain.ports import CardStore
from kartei.infrastructure.stores import InMemoryCardStore, JsonFileCardStore

logger = logging.getLogger(__name__)


def get_card_store(config: AppConfig) -> CardStore:
    """
    Returns the CardStore implementation selected by config.backend.
    """
    if config.backend == "memory":
        logger.debug("Store: in-memory")
        return InMemoryCardStore()

    logger.debug(f"Store: JSON file at {config.store_path}")
    return JsonFileCardStore(config.store_path)


def get_review_service(config: AppConfig, store: CardStore | None = None) -> ReviewService:
    """
    Wires store, scheduler and shuffle from config.
    """
    shuffle = seeded_shuffle(config.seed) if config.seed is not None else random_shuffle
    return ReviewService(
        store=store or get_card_store(config),
        scheduler=Scheduler(params=config.to_scheduler_params()),
        shuffle=shuffle,
        mix=config.to_session_mix(),
    )
