from __future__ import annotations

from typing import Iterable, Iterator

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from db import models
from domain.accounts import RawAccountRecord, StateRoot


class StateRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_root(self, root: StateRoot, *, block_number: int | None = None, head: bool = False) -> StateRoot:
        self._session.add(models.StateRootOrm(root=root, block_number=block_number, is_head=False))
        self._session.flush()
        if head:
            self._mark_head(root)
        self._session.commit()
        return root

    def add_accounts(self, root: StateRoot, records: Iterable[RawAccountRecord], *, batch_size: int = 10_000) -> int:
        try:
            total = self._add_accounts(root, records, batch_size=batch_size)
        except BaseException:
            self._session.rollback()
            raise
        self._session.commit()
        return total

    def import_state(
        self,
        root: StateRoot,
        records: Iterable[RawAccountRecord],
        *,
        block_number: int | None = None,
        head: bool = False,
        batch_size: int = 10_000,
    ) -> int:
        """Store a root with all of its accounts in a single transaction.

        Nothing is committed unless every record is stored; on failure the
        root, its accounts and the head marker are all rolled back.
        """

        try:
            self._session.add(models.StateRootOrm(root=root, block_number=block_number, is_head=False))
            self._session.flush()
            total = self._add_accounts(root, records, batch_size=batch_size)
            if head:
                self._mark_head(root)
        except BaseException:
            self._session.rollback()
            raise
        self._session.commit()
        return total

    def set_head(self, root: StateRoot) -> None:
        self._mark_head(root)
        self._session.commit()

    def head_root(self) -> StateRoot | None:
        stmt = select(models.StateRootOrm.root).where(models.StateRootOrm.is_head.is_(True)).limit(1)
        root = self._session.scalar(stmt)
        return StateRoot(root) if root is not None else None

    def has_root(self, root: StateRoot) -> bool:
        return self._session.get(models.StateRootOrm, str(root)) is not None

    def iter_accounts(self, root: StateRoot, *, chunk_size: int = 10_000) -> Iterator[RawAccountRecord]:
        stmt = (
            select(models.StateAccountOrm.address, models.StateAccountOrm.balance)
            .where(models.StateAccountOrm.root == str(root))
            .execution_options(yield_per=chunk_size)
        )
        for address, balance in self._session.execute(stmt):
            yield RawAccountRecord(address=address, balance=balance)

    def _add_accounts(self, root: StateRoot, records: Iterable[RawAccountRecord], *, batch_size: int) -> int:
        batch: list[models.StateAccountOrm] = []
        total = 0
        for record in records:
            batch.append(models.StateAccountOrm(root=root, address=record.address, balance=record.balance))
            if len(batch) >= batch_size:
                total += self._flush(batch)
                batch = []
        total += self._flush(batch)
        return total

    def _mark_head(self, root: StateRoot) -> None:
        self._session.execute(update(models.StateRootOrm).values(is_head=False))
        self._session.execute(
            update(models.StateRootOrm).where(models.StateRootOrm.root == str(root)).values(is_head=True)
        )

    def _flush(self, batch: list[models.StateAccountOrm]) -> int:
        if not batch:
            return 0
        self._session.add_all(batch)
        self._session.flush()
        return len(batch)
