from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from domain.accounts import Account, RankedEntry


@dataclass(frozen=True)
class RankingResult:
    entries: list[RankedEntry]
    scanned: int
    skipped_zero: int
    total_balance: int


def rank(accounts: Iterable[Account]) -> RankingResult:
    """Keep positive balances and order them by balance descending, then address ascending.

    Canonical addresses are fixed-width lowercase hex, so comparing them as
    strings matches their byte order. The result does not depend on the
    order of `accounts`.
    """

    retained: list[Account] = []
    scanned = 0
    for account in accounts:
        scanned += 1
        if account.balance > 0:
            retained.append(account)

    retained.sort(key=lambda a: (-a.balance, a.address))
    entries = [RankedEntry(rank=position, account=account) for position, account in enumerate(retained, start=1)]
    return RankingResult(
        entries=entries,
        scanned=scanned,
        skipped_zero=scanned - len(retained),
        total_balance=sum(account.balance for account in retained),
    )


__all__ = ["RankingResult", "rank"]
