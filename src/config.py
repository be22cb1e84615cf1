from __future__ import annotations

from functools import cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from services.report_writer import Rounding

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ARTIFACTS_DIR = PROJECT_ROOT / "artifacts"
STATE_DB_FILE = ARTIFACTS_DIR / "state.db"
DEFAULT_OUTPUT_FILE = Path("addresses_balances.txt")


class AppSettings(BaseSettings):
    state_db: Path = STATE_DB_FILE
    output_path: Path = DEFAULT_OUTPUT_FILE
    rounding: Rounding = Rounding.HALF_EVEN

    model_config = SettingsConfigDict(
        env_prefix="BALANCE_DUMP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@cache
def config() -> AppSettings:
    return AppSettings()
