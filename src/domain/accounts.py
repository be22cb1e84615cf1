from __future__ import annotations

from typing import NewType

from eth_utils import to_checksum_address
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

Address = NewType("Address", str)
StateRoot = NewType("StateRoot", str)

ADDRESS_LENGTH = 20
ROOT_LENGTH = 32
_HEX_DIGITS = frozenset("0123456789abcdef")


def _canonical_hex(value: str, *, length: int, kind: str) -> str:
    normalized = value.strip().lower()
    if normalized.startswith("0x"):
        normalized = normalized[2:]
    if len(normalized) != length * 2:
        raise ValueError(f"{kind} must be {length} bytes, got {value!r}")
    if not all(char in _HEX_DIGITS for char in normalized):
        raise ValueError(f"{kind} is not valid hex: {value!r}")
    return f"0x{normalized}"


def canonical_address(value: str) -> Address:
    return Address(_canonical_hex(value, length=ADDRESS_LENGTH, kind="Address"))


def checksum_address(address: Address) -> str:
    """EIP-55 mixed-case form, used for display only; ordering uses the lowercase form."""
    return str(to_checksum_address(address))


def canonical_root(value: str) -> StateRoot:
    return StateRoot(_canonical_hex(value, length=ROOT_LENGTH, kind="State root"))


class Account(BaseModel):
    """Balance of one address in a state snapshot, in wei."""

    model_config = ConfigDict(frozen=True)

    address: Address
    balance: int

    @field_validator("address", mode="before")
    @classmethod
    def _normalize_address(cls, value: str) -> Address:
        return canonical_address(value)

    @model_validator(mode="after")
    def _validate_balance(self) -> Account:
        if self.balance < 0:
            raise ValueError("Account.balance must be >= 0")
        return self


class RankedEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    rank: int
    account: Account

    @model_validator(mode="after")
    def _validate_rank(self) -> RankedEntry:
        if self.rank < 1:
            raise ValueError("RankedEntry.rank must be >= 1")
        return self


class RawAccountRecord(BaseModel):
    """Account record as stored in the snapshot, before parsing.

    `address` is None when the state holds no preimage for the hashed key.
    """

    model_config = ConfigDict(frozen=True)

    address: str | None
    balance: str
