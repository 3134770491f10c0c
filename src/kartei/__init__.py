"""kartei: vocabulary flashcards with spaced-repetition scheduling."""

from kartei.consts import VERSION

__version__ = VERSION
