"""State providers that hand out read-only snapshots of world state."""

from state.base import BaseSnapshot, StateProvider, StateSnapshot
from state.geth_dump import GethDumpStateProvider
from state.memory import InMemoryStateProvider
from state.sqlite import SqliteStateProvider

__all__ = [
    "BaseSnapshot",
    "GethDumpStateProvider",
    "InMemoryStateProvider",
    "SqliteStateProvider",
    "StateProvider",
    "StateSnapshot",
]
