# Card Store Adapters
from .json_store import JsonFileCardStore
from .memory_store import InMemoryCardStore

__all__ = ["JsonFileCardStore", "InMemoryCardStore"]
