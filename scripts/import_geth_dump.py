# flake8: noqa E402
# Run via: uv run scripts/import_geth_dump.py --dump artifacts/state-dump.jsonl --head
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from config import STATE_DB_FILE
from db.db import init_db
from db.repositories import StateRepository
from services.state_import import import_geth_dump
from state.geth_dump import GethDumpStateProvider


def main() -> None:
    parser = argparse.ArgumentParser(description="Load a geth iterative state dump into the local state database.")
    parser.add_argument("--dump", type=Path, required=True)
    parser.add_argument("--state-db", type=Path, default=STATE_DB_FILE)
    parser.add_argument("--block-number", type=int, default=None)
    parser.add_argument("--head", action="store_true", help="Mark the imported root as the current head")
    args = parser.parse_args()
    count = import_geth_dump(
        GethDumpStateProvider(args.dump),
        StateRepository(init_db(db_file=args.state_db)),
        block_number=args.block_number,
        head=args.head,
    )
    print(f"Imported {count} account records from {args.dump}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    main()
