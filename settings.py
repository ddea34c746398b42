"""Runtime settings for the area converter.

• AREA_CONVERTER_STORE_PATH – JSON file holding the two ratios.
• AREA_CONVERTER_LOG_LEVEL  – logging level name for the app.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv  # type: ignore

DEFAULT_STORE_PATH = os.path.join("~", ".area_converter", "ratios.json")


@dataclass(frozen=True)
class AppSettings:
    """Immutable container for runtime parameters."""

    store_path: str = DEFAULT_STORE_PATH
    log_level: str = "INFO"


def load_settings() -> AppSettings:
    """Read settings from the environment, after loading `.env` if present."""
    load_dotenv()
    return AppSettings(
        store_path=os.getenv("AREA_CONVERTER_STORE_PATH", DEFAULT_STORE_PATH),
        log_level=os.getenv("AREA_CONVERTER_LOG_LEVEL", "INFO").upper(),
    )
