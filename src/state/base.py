from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Iterator, Protocol

from domain.accounts import RawAccountRecord, StateRoot
from errors import SnapshotUnavailable


class StateSnapshot(Protocol):
    @property
    def root(self) -> StateRoot: ...

    def iter_records(self) -> Iterator[RawAccountRecord]: ...


class StateProvider(Protocol):
    def resolve(self, root: StateRoot) -> AbstractContextManager[StateSnapshot]: ...

    def head_root(self) -> StateRoot: ...


class BaseSnapshot(ABC):
    """Snapshot handle that stops serving records once released."""

    def __init__(self, root: StateRoot) -> None:
        self._root = root
        self._released = False

    @property
    def root(self) -> StateRoot:
        return self._root

    def release(self) -> None:
        self._released = True

    def iter_records(self) -> Iterator[RawAccountRecord]:
        if self._released:
            raise SnapshotUnavailable(root=self._root, reason="snapshot handle was already released")
        for record in self._records():
            if self._released:
                raise SnapshotUnavailable(root=self._root, reason="snapshot released during enumeration")
            yield record

    @abstractmethod
    def _records(self) -> Iterator[RawAccountRecord]: ...
