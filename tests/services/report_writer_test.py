import os
import stat
from pathlib import Path
from typing import Iterator

import pytest

from domain.accounts import Account, RankedEntry, checksum_address
from errors import WriteFailure
from services.report_writer import Rounding, format_balance, format_entry, write_report
from tests.constants import ADDRESS_A, ADDRESS_B, ONE_ETHER


def _entries(*accounts: Account) -> list[RankedEntry]:
    return [RankedEntry(rank=position, account=account) for position, account in enumerate(accounts, start=1)]


@pytest.mark.parametrize(
    ("wei", "expected"),
    [
        (ONE_ETHER, "1.000000"),
        (5 * ONE_ETHER // 2, "2.500000"),
        (1, "0.000000"),
        (123_456_789 * 10**10, "1.234568"),
        (10**6 * ONE_ETHER, "1000000.000000"),
    ],
)
def test_format_balance(wei: int, expected: str) -> None:
    assert format_balance(wei) == expected


def test_format_balance_rounds_half_to_even() -> None:
    half_micro = 5 * 10**11

    assert format_balance(half_micro) == "0.000000"
    assert format_balance(3 * half_micro) == "0.000002"


def test_format_balance_truncates_when_rounding_down() -> None:
    assert format_balance(3 * 5 * 10**11, Rounding.DOWN) == "0.000001"
    assert format_balance(ONE_ETHER - 1, Rounding.DOWN) == "0.999999"
    assert format_balance(ONE_ETHER - 1) == "1.000000"


def test_format_balance_is_exact_for_huge_balances() -> None:
    # Beyond float precision: every digit of the integer part must survive.
    wei = 123456789012345678901234567890 * ONE_ETHER + 654321 * 10**12

    assert format_balance(wei) == "123456789012345678901234567890.654321"


def test_format_entry_is_tab_separated_and_newline_terminated() -> None:
    (entry,) = _entries(Account(address=ADDRESS_A, balance=ONE_ETHER))

    assert format_entry(entry) == f"{checksum_address(ADDRESS_A)}\t1.000000\n"


def test_write_report_writes_lines_in_order(tmp_path: Path) -> None:
    destination = tmp_path / "addresses_balances.txt"
    entries = _entries(
        Account(address=ADDRESS_B, balance=2 * ONE_ETHER),
        Account(address=ADDRESS_A, balance=ONE_ETHER),
    )

    written = write_report(entries, destination)

    assert written == 2
    assert destination.read_text(encoding="utf-8").splitlines() == [
        f"{checksum_address(ADDRESS_B)}\t2.000000",
        f"{checksum_address(ADDRESS_A)}\t1.000000",
    ]
    assert os.listdir(tmp_path) == ["addresses_balances.txt"]


def test_write_report_with_no_entries_creates_empty_file(tmp_path: Path) -> None:
    destination = tmp_path / "addresses_balances.txt"

    assert write_report([], destination) == 0
    assert destination.read_bytes() == b""


def test_write_report_creates_missing_directories(tmp_path: Path) -> None:
    destination = tmp_path / "nested" / "out.txt"

    write_report(_entries(Account(address=ADDRESS_A, balance=1)), destination)

    assert destination.exists()


def test_write_report_keeps_previous_report_when_entries_fail(tmp_path: Path) -> None:
    destination = tmp_path / "addresses_balances.txt"
    destination.write_text("previous\n", encoding="utf-8")

    def failing_entries() -> Iterator[RankedEntry]:
        yield from _entries(Account(address=ADDRESS_A, balance=1))
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        write_report(failing_entries(), destination)

    assert destination.read_text(encoding="utf-8") == "previous\n"
    assert os.listdir(tmp_path) == ["addresses_balances.txt"]


def test_write_report_wraps_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    destination = blocker / "out.txt"

    with pytest.raises(WriteFailure) as exc_info:
        write_report([], destination)

    assert exc_info.value.path == destination
    assert isinstance(exc_info.value.cause, OSError)


def test_write_report_cleans_up_when_replace_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    destination = tmp_path / "addresses_balances.txt"

    def failing_replace(src: object, dst: object) -> None:
        raise PermissionError("read-only")

    monkeypatch.setattr(os, "replace", failing_replace)

    with pytest.raises(WriteFailure):
        write_report(_entries(Account(address=ADDRESS_A, balance=1)), destination)

    assert os.listdir(tmp_path) == []


def test_format_entry_renders_checksummed_address() -> None:
    (entry,) = _entries(Account(address="0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed", balance=ONE_ETHER))

    assert format_entry(entry) == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed\t1.000000\n"


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_write_report_uses_umask_derived_mode(tmp_path: Path) -> None:
    destination = tmp_path / "addresses_balances.txt"
    previous_umask = os.umask(0o022)
    try:
        write_report(_entries(Account(address=ADDRESS_A, balance=1)), destination)
    finally:
        os.umask(previous_umask)

    assert stat.S_IMODE(destination.stat().st_mode) == 0o644
