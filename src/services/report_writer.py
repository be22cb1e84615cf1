from __future__ import annotations

import logging
import os
import tempfile
from decimal import ROUND_DOWN, ROUND_HALF_EVEN, Decimal, localcontext
from enum import StrEnum
from pathlib import Path
from typing import Iterable

from domain.accounts import RankedEntry, checksum_address
from errors import WriteFailure

logger = logging.getLogger(__name__)

WEI_DECIMALS = 18
DISPLAY_DECIMALS = 6
FIELD_SEPARATOR = "\t"

_DISPLAY_QUANTUM = Decimal(1).scaleb(-DISPLAY_DECIMALS)
_REPORT_MODE = 0o666


class Rounding(StrEnum):
    HALF_EVEN = "half_even"
    DOWN = "down"


_DECIMAL_ROUNDING = {
    Rounding.HALF_EVEN: ROUND_HALF_EVEN,
    Rounding.DOWN: ROUND_DOWN,
}


def format_balance(wei: int, rounding: Rounding = Rounding.HALF_EVEN) -> str:
    """Render a wei amount in ether with exactly six fractional digits.

    The conversion is exact; only the final quantization rounds.
    """

    if wei < 0:
        raise ValueError("balance must be >= 0")
    with localcontext() as ctx:
        # Enough digits for the integer part plus the scaled fraction.
        ctx.prec = len(str(wei)) + WEI_DECIMALS + DISPLAY_DECIMALS
        ether = Decimal(wei).scaleb(-WEI_DECIMALS)
        quantized = ether.quantize(_DISPLAY_QUANTUM, rounding=_DECIMAL_ROUNDING[rounding])
    return f"{quantized:.{DISPLAY_DECIMALS}f}"


def format_entry(entry: RankedEntry, rounding: Rounding = Rounding.HALF_EVEN) -> str:
    account = entry.account
    return f"{checksum_address(account.address)}{FIELD_SEPARATOR}{format_balance(account.balance, rounding)}\n"


def write_report(
    entries: Iterable[RankedEntry],
    destination: Path,
    *,
    rounding: Rounding = Rounding.HALF_EVEN,
) -> int:
    """Write one line per entry to `destination`, replacing it atomically.

    Lines go to a temporary file in the destination's directory which is then
    renamed over the destination. On failure the temporary file is removed and
    any previous report is left as it was. Returns the number of lines written.
    """

    destination = Path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent)
    except OSError as e:
        raise WriteFailure(path=destination, cause=e) from e

    tmp_path = Path(tmp_name)
    written = 0
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            for entry in entries:
                handle.write(format_entry(entry, rounding))
                written += 1
            handle.flush()
            os.fsync(handle.fileno())
        # mkstemp creates 0600; give the report the mode a plain create would.
        os.chmod(tmp_path, _REPORT_MODE & ~_current_umask())
        os.replace(tmp_path, destination)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise WriteFailure(path=destination, cause=e) from e
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    logger.info("Wrote %d lines to %s", written, destination)
    return written


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


__all__ = ["DISPLAY_DECIMALS", "FIELD_SEPARATOR", "Rounding", "format_balance", "format_entry", "write_report"]
