from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError

from db.repositories import StateRepository
from domain.accounts import RawAccountRecord, StateRoot
from errors import SnapshotUnavailable
from state.base import BaseSnapshot

logger = logging.getLogger(__name__)


class SqliteSnapshot(BaseSnapshot):
    def __init__(self, root: StateRoot, repository: StateRepository) -> None:
        super().__init__(root)
        self._repository = repository

    def _records(self) -> Iterator[RawAccountRecord]:
        try:
            yield from self._repository.iter_accounts(self.root)
        except SQLAlchemyError as e:
            raise SnapshotUnavailable(root=self.root, reason=f"state database read failed: {e}") from e


class SqliteStateProvider:
    """World state persisted in the local state database (see `db.models`)."""

    def __init__(self, repository: StateRepository) -> None:
        self._repository = repository

    def head_root(self) -> StateRoot:
        try:
            root = self._repository.head_root()
        except SQLAlchemyError as e:
            raise SnapshotUnavailable(root="head", reason=f"state database read failed: {e}") from e
        if root is None:
            raise SnapshotUnavailable(root="head", reason="state database has no head root")
        return root

    @contextmanager
    def resolve(self, root: StateRoot) -> Iterator[SqliteSnapshot]:
        try:
            known = self._repository.has_root(root)
        except SQLAlchemyError as e:
            raise SnapshotUnavailable(root=root, reason=f"state database read failed: {e}") from e
        if not known:
            raise SnapshotUnavailable(root=root, reason="root not present in state database")

        logger.debug("Resolved state root %s from state database", root)
        snapshot = SqliteSnapshot(root, self._repository)
        try:
            yield snapshot
        finally:
            snapshot.release()
