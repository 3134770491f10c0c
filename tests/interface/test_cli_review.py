"""Tests for the interactive review session."""

import json

import pytest
from typer.testing import CliRunner

from kartei.interface.cli import app

runner = CliRunner()


@pytest.fixture
def store(tmp_path, mock_home):
    return tmp_path / "cards.json"


def run(store, *args, input=None):
    return runner.invoke(app, ["--store", str(store), *args], input=input)


def stored_cards(store):
    return json.loads(store.read_text())


def test_nothing_to_review(store):
    result = run(store, "review")
    assert result.exit_code == 0
    assert "Nothing to review. Come back later!" in result.stdout


def test_review_one_card(store):
    run(store, "add", "Hund", "perro", "--example", "Der Hund bellt.")

    result = run(store, "review", input="\n3\n")

    assert result.exit_code == 0
    assert "[1/1] Hund" in result.stdout
    assert "perro" in result.stdout
    assert "Example: Der Hund bellt." in result.stdout
    assert "3) Good 1d" in result.stdout
    assert "4) Easy 4d" in result.stdout
    assert "Reviewed 1 card(s)." in result.stdout

    [card] = stored_cards(store)
    assert card["state"] == "learning"
    assert card["learningStep"] == 0


def test_reviewed_card_is_not_due_again(store):
    run(store, "add", "Hund", "perro")
    run(store, "review", input="\n3\n")

    result = run(store, "review")
    assert "Nothing to review." in result.stdout


def test_quit_stops_without_rating(store):
    run(store, "add", "Hund", "perro")

    result = run(store, "review", input="\nq\n")

    assert result.exit_code == 0
    assert "Reviewed 0 card(s)." in result.stdout
    assert stored_cards(store)[0]["state"] == "new"


def test_invalid_rating_asks_again(store):
    run(store, "add", "Hund", "perro")

    result = run(store, "review", input="\n9\neasy\n")

    assert result.exit_code == 0
    assert "Answer 1 (Again), 2 (Hard), 3 (Good) or 4 (Easy)." in result.output
    assert "Reviewed 1 card(s)." in result.stdout
    card = stored_cards(store)[0]
    assert card["state"] == "review"
    assert card["interval"] == 4


def test_limit_caps_session(store):
    for word in ("Hund", "Katze", "Maus"):
        run(store, "add", word, "x")

    result = run(store, "review", "--limit", "2", "--seed", "1", input="\n3\n\n3\n")

    assert result.exit_code == 0
    assert "[2/2]" in result.stdout
    assert "Reviewed 2 card(s)." in result.stdout
    states = sorted(c["state"] for c in stored_cards(store))
    assert states == ["learning", "learning", "new"]


def test_invalid_limit(store):
    result = run(store, "review", "--limit", "0")
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
