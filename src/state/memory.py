from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

from domain.accounts import Account, RawAccountRecord, StateRoot, canonical_root
from errors import SnapshotUnavailable
from state.base import BaseSnapshot


class InMemorySnapshot(BaseSnapshot):
    def __init__(self, root: StateRoot, records: list[RawAccountRecord]) -> None:
        super().__init__(root)
        self._records_list = records

    def _records(self) -> Iterator[RawAccountRecord]:
        return iter(self._records_list)


class InMemoryStateProvider:
    """Synthetic world state, keyed by root. Records are served in insertion order."""

    def __init__(self) -> None:
        self._states: dict[StateRoot, list[RawAccountRecord]] = {}
        self._head: StateRoot | None = None

    def add_state(
        self,
        root: str,
        records: Iterable[RawAccountRecord | Account],
        *,
        head: bool = False,
    ) -> StateRoot:
        state_root = canonical_root(root)
        self._states[state_root] = [_as_raw(record) for record in records]
        if head:
            self._head = state_root
        return state_root

    def head_root(self) -> StateRoot:
        if self._head is None:
            raise SnapshotUnavailable(root="head", reason="no head state registered")
        return self._head

    @contextmanager
    def resolve(self, root: StateRoot) -> Iterator[InMemorySnapshot]:
        records = self._states.get(root)
        if records is None:
            raise SnapshotUnavailable(root=root, reason="unknown state root")
        snapshot = InMemorySnapshot(root, records)
        try:
            yield snapshot
        finally:
            snapshot.release()


def _as_raw(record: RawAccountRecord | Account) -> RawAccountRecord:
    if isinstance(record, RawAccountRecord):
        return record
    return RawAccountRecord(address=record.address, balance=str(record.balance))
