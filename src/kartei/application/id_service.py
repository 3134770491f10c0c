"""Service for minting stable card IDs."""

from ulid import ULID


def generate_card_id() -> str:
    """Generate a sortable, unique card ID using ULID."""
    return str(ULID())
