from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from config import config
from db.db import init_db
from db.repositories import StateRepository
from domain.accounts import canonical_root
from errors import BalanceDumpError
from services.balance_export import export_balances
from services.report_writer import Rounding
from state.base import StateProvider
from state.geth_dump import GethDumpStateProvider
from state.sqlite import SqliteStateProvider

logger = logging.getLogger(__name__)


def build_provider(*, state_db: Path, geth_dump: Path | None) -> StateProvider:
    if geth_dump is not None:
        return GethDumpStateProvider(geth_dump)
    session = init_db(db_file=state_db)
    return SqliteStateProvider(StateRepository(session))


def run(
    *,
    state_db: Path,
    geth_dump: Path | None,
    root: str | None,
    output: Path,
    rounding: Rounding,
) -> int:
    try:
        provider = build_provider(state_db=state_db, geth_dump=geth_dump)
        state_root = canonical_root(root) if root else provider.head_root()
        summary = export_balances(provider, state_root, output, rounding=rounding)
    except BalanceDumpError as e:
        logger.error("Balance dump failed: %s", e)
        return 1

    print(f"Dump completed: {summary.destination} ({summary.accounts_written} accounts)")
    return 0


def _root_arg(value: str) -> str:
    try:
        return canonical_root(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def main(argv: Sequence[str] | None = None) -> int:
    settings = config()
    parser = argparse.ArgumentParser(
        description="Dump all accounts with non-zero balance from a state snapshot to a file."
    )
    parser.add_argument("--state-db", type=Path, default=settings.state_db)
    parser.add_argument("--geth-dump", type=Path, default=None, help="Read state from a geth iterative JSON dump")
    parser.add_argument("--root", type=_root_arg, default=None, help="State root to export (default: head)")
    parser.add_argument("--output", type=Path, default=settings.output_path)
    parser.add_argument("--rounding", type=Rounding, choices=list(Rounding), default=settings.rounding)
    args = parser.parse_args(argv)
    return run(
        state_db=args.state_db,
        geth_dump=args.geth_dump,
        root=args.root,
        output=args.output,
        rounding=args.rounding,
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    sys.exit(main())
