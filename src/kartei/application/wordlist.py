"""Loading vocabulary word lists from YAML (or JSON) files."""

import logging
from pathlib import Path
from typing import Any

import yaml  # type: ignore
import yaml.error

from kartei.domain.exceptions import KarteiError

logger = logging.getLogger(__name__)

# Accepted spellings for the two required fields, first match wins.
WORD_KEYS = ("german", "word", "front")
TRANSLATION_KEYS = ("spanish", "english", "translation", "back")


class WordListError(KarteiError):
    """The word list file could not be read or parsed."""


def _first(entry: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = entry.get(key)
        if value:
            return str(value).strip()
    return None


def normalize_entry(entry: Any) -> dict[str, Any] | None:
    """
    Turn one word-list entry into card content.

    Returns None for entries without both a word and a translation.
    """
    if not isinstance(entry, dict):
        return None

    word = _first(entry, WORD_KEYS)
    translation = _first(entry, TRANSLATION_KEYS)
    if not word or not translation:
        return None

    content: dict[str, Any] = {
        k: v for k, v in entry.items() if k not in WORD_KEYS + TRANSLATION_KEYS
    }
    content["german"] = word
    content["spanish"] = translation
    content.setdefault("wordType", "other")
    content.setdefault("gender", None)
    return content


def parse_word_list(text: str) -> list[dict[str, Any]]:
    """
    Parse a word list: either a top-level list of entries or a mapping with a
    `words` key. JSON is valid YAML, so both formats go through the same loader.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.error.YAMLError as e:
        raise WordListError(f"Could not parse word list: {e}") from e

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("words", [])
    if not isinstance(data, list):
        raise WordListError("Word list must be a list or a mapping with a 'words' key")

    entries = []
    for i, raw in enumerate(data):
        content = normalize_entry(raw)
        if content is None:
            logger.warning(f"Skipping word list entry #{i + 1}: missing word or translation")
            continue
        entries.append(content)
    return entries


def load_word_list(path: Path) -> list[dict[str, Any]]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise WordListError(f"Could not read {path}: {e}") from e
    return parse_word_list(text)
