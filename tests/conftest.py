import os
import time
from datetime import date, timedelta

import pytest

from kartei.application.scheduler import Scheduler, fixed_clock
from kartei.domain.models import Card, CardState

TODAY = date(2026, 3, 10)


def _make_card(
    card_id: str = "c1",
    state: CardState = CardState.NEW,
    due_in: int = 0,
    ease: float = 2.5,
    interval: int = 0,
    repetitions: int = 0,
    learning_step: int = 0,
    word: str = "Hund",
) -> Card:
    """Card due `due_in` days from TODAY (negative = overdue)."""
    return Card(
        id=card_id,
        content={"german": word, "spanish": "perro"},
        state=state,
        learning_step=learning_step,
        ease_factor=ease,
        interval=interval,
        repetitions=repetitions,
        next_review_date=TODAY + timedelta(days=due_in),
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_card():
    return _make_card


@pytest.fixture
def scheduler():
    return Scheduler(clock=fixed_clock(TODAY))


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config and card files from the real user
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "KARTEI_SESSION_LIMIT",
        "KARTEI_BACKEND",
        "KARTEI_STORE_PATH",
        "KARTEI_SEED",
        "KARTEI_LEARNING_STEPS",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def local_tz():
    """Set the process timezone (TZ) for one test; restored afterwards."""
    original = os.environ.get("TZ")

    def set_tz(name: str) -> None:
        os.environ["TZ"] = name
        time.tzset()

    yield set_tz

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()
