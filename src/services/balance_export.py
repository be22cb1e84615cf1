from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter

from domain.accounts import StateRoot
from services.balance_ranker import rank
from services.report_writer import Rounding, write_report
from services.snapshot_reader import enumerate_accounts
from state.base import StateProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportSummary:
    root: StateRoot
    destination: Path
    accounts_scanned: int
    zero_balance_skipped: int
    accounts_written: int
    total_balance: int


def export_balances(
    provider: StateProvider,
    root: StateRoot,
    destination: Path,
    *,
    rounding: Rounding = Rounding.HALF_EVEN,
) -> ExportSummary:
    """Dump every account with a non-zero balance under `root` to `destination`.

    Stages run one after another: the snapshot is fully enumerated and ranked
    before anything is written, and it is released before the write starts.
    """

    logger.info("Resolving state root %s", root)
    with provider.resolve(root) as snapshot:
        logger.info("Enumerating and ranking accounts")
        rank_started = perf_counter()
        ranking = rank(enumerate_accounts(snapshot))
    logger.info(
        "Ranked %d accounts (%d scanned, %d zero balance) in %.2fs",
        len(ranking.entries),
        ranking.scanned,
        ranking.skipped_zero,
        perf_counter() - rank_started,
    )

    logger.info("Writing report to %s", destination)
    write_started = perf_counter()
    written = write_report(ranking.entries, destination, rounding=rounding)
    logger.info("Wrote report in %.2fs", perf_counter() - write_started)

    return ExportSummary(
        root=root,
        destination=destination,
        accounts_scanned=ranking.scanned,
        zero_balance_skipped=ranking.skipped_zero,
        accounts_written=written,
        total_balance=ranking.total_balance,
    )


__all__ = ["ExportSummary", "export_balances"]
