from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from domain.accounts import RawAccountRecord, StateRoot, canonical_root
from errors import CorruptAccountRecord, SnapshotUnavailable
from state.base import BaseSnapshot

logger = logging.getLogger(__name__)


class GethDumpSnapshot(BaseSnapshot):
    def __init__(self, root: StateRoot, path: Path) -> None:
        super().__init__(root)
        self._path = path

    def _records(self) -> Iterator[RawAccountRecord]:
        try:
            handle = self._path.open("r", encoding="utf-8")
        except OSError as e:
            raise SnapshotUnavailable(root=self.root, reason=f"cannot open {self._path}: {e}") from e

        with handle:
            handle.readline()  # root header
            for line_no, line in enumerate(handle, start=2):
                line = line.strip()
                if not line:
                    continue
                yield self._parse_line(line, line_no)

    def _parse_line(self, line: str, line_no: int) -> RawAccountRecord:
        try:
            payload: Any = json.loads(line)
        except json.JSONDecodeError as e:
            raise self._corrupt(line_no, "is not valid JSON") from e
        if not isinstance(payload, dict):
            raise self._corrupt(line_no, "is not a JSON object")

        if "balance" not in payload:
            if "next" in payload:
                # Trailer of a dump cut short by --limit.
                raise SnapshotUnavailable(root=self.root, reason=f"dump truncated at next={payload['next']}")
            raise self._corrupt(line_no, "has no balance field")

        address = payload.get("address")
        if address is not None and not isinstance(address, str):
            raise self._corrupt(line_no, f"has a non-string address {address!r}")
        balance = payload["balance"]
        if isinstance(balance, bool) or not isinstance(balance, (str, int)):
            raise self._corrupt(line_no, f"has a balance of type {type(balance).__name__}", address=address)
        return RawAccountRecord(address=address, balance=str(balance))

    def _corrupt(self, line_no: int, problem: str, *, address: str | None = None) -> CorruptAccountRecord:
        return CorruptAccountRecord(
            root=self.root, address=address, raw_balance="", reason=f"line {line_no} {problem}"
        )


class GethDumpStateProvider:
    """Serves the state written by `geth dump --iterative --nocode --nostorage`.

    The file holds a single state: a `{"root": ...}` header line followed by one
    JSON account object per line.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def head_root(self) -> StateRoot:
        return self._read_root()

    @contextmanager
    def resolve(self, root: StateRoot) -> Iterator[GethDumpSnapshot]:
        dump_root = self._read_root()
        if dump_root != root:
            raise SnapshotUnavailable(root=root, reason=f"dump {self.path} holds root {dump_root}")
        logger.debug("Resolved state root %s from dump %s", root, self.path)
        snapshot = GethDumpSnapshot(root, self.path)
        try:
            yield snapshot
        finally:
            snapshot.release()

    def _read_root(self) -> StateRoot:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                header = handle.readline()
        except OSError as e:
            raise SnapshotUnavailable(root="head", reason=f"cannot open {self.path}: {e}") from e

        try:
            return canonical_root(json.loads(header)["root"])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SnapshotUnavailable(root="head", reason=f"dump {self.path} has no valid root header") from e
