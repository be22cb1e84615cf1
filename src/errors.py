from __future__ import annotations

from pathlib import Path


class BalanceDumpError(Exception):
    """Base class for failures that abort a balance export."""


class SnapshotUnavailable(BalanceDumpError):
    def __init__(self, *, root: str, reason: str) -> None:
        self.root = root
        self.reason = reason
        super().__init__(f"State snapshot unavailable root={root}: {reason}")


class CorruptAccountRecord(BalanceDumpError):
    def __init__(self, *, root: str, address: str | None, raw_balance: str, reason: str) -> None:
        self.root = root
        self.address = address
        self.raw_balance = raw_balance
        self.reason = reason
        super().__init__(
            f"Corrupt account record root={root} address={address} balance={raw_balance!r}: {reason}"
        )


class WriteFailure(BalanceDumpError):
    def __init__(self, *, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write report path={path}: {cause}")
