from __future__ import annotations

import logging
from time import perf_counter

from db.repositories import StateRepository
from state.geth_dump import GethDumpStateProvider

logger = logging.getLogger(__name__)


class StateAlreadyImported(Exception):
    def __init__(self, *, root: str) -> None:
        self.root = root
        super().__init__(f"State root {root} is already imported")


def import_geth_dump(
    provider: GethDumpStateProvider,
    repository: StateRepository,
    *,
    block_number: int | None = None,
    head: bool = False,
) -> int:
    """Copy the dump's state into the state database; all-or-nothing."""

    root = provider.head_root()
    if repository.has_root(root):
        raise StateAlreadyImported(root=root)

    started = perf_counter()
    with provider.resolve(root) as snapshot:
        count = repository.import_state(root, snapshot.iter_records(), block_number=block_number, head=head)
    logger.info("Imported %d account records for root %s in %.2fs", count, root, perf_counter() - started)
    return count


__all__ = ["StateAlreadyImported", "import_geth_dump"]
