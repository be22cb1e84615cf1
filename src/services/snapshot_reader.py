from __future__ import annotations

import logging
from typing import Iterator

from domain.accounts import Account, Address, canonical_address
from errors import CorruptAccountRecord
from state.base import StateSnapshot

logger = logging.getLogger(__name__)


def enumerate_accounts(snapshot: StateSnapshot) -> Iterator[Account]:
    """Yield every account in the snapshot, in whatever order the snapshot stores them.

    Records without an address are skipped. Any record that cannot be parsed
    aborts the enumeration with CorruptAccountRecord.
    """

    seen: set[Address] = set()
    skipped_no_address = 0
    for record in snapshot.iter_records():
        if record.address is None:
            skipped_no_address += 1
            continue

        try:
            address = canonical_address(record.address)
        except ValueError as e:
            raise CorruptAccountRecord(
                root=snapshot.root, address=record.address, raw_balance=record.balance, reason=str(e)
            ) from e

        balance = _parse_balance(record.balance)
        if balance is None:
            raise CorruptAccountRecord(
                root=snapshot.root,
                address=address,
                raw_balance=record.balance,
                reason="balance is not a non-negative base-10 integer",
            )

        if address in seen:
            raise CorruptAccountRecord(
                root=snapshot.root, address=address, raw_balance=record.balance, reason="duplicate address"
            )
        seen.add(address)

        yield Account(address=address, balance=balance)

    if skipped_no_address:
        logger.debug("Skipped %d records without address preimage in %s", skipped_no_address, snapshot.root)


def _parse_balance(raw: str) -> int | None:
    normalized = raw.strip()
    # int() also accepts "+5", "1_000" and non-ASCII digits.
    if not normalized.isascii() or not normalized.isdigit():
        return None
    return int(normalized)
