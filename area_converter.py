"""
Area Converter Module

Converts a land area between hectare, bigha and biswa using two
adjustable ratios:

- hectare_to_bigha : bigha in one hectare (default 3.9537)
- bigha_to_biswa   : biswa in one bigha   (default 20)

Numbers are parsed and printed the way a browser form does it, so a
zero ratio gives "Infinity" / "NaN" text instead of an exception.
"""

import logging
import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, List, Optional

import numpy as np

from ratio_store import RatioStore

logger = logging.getLogger(__name__)


DEFAULT_HECTARE_TO_BIGHA = 3.9537
DEFAULT_BIGHA_TO_BISWA = 20.0

# Storage keys
HECTARE_TO_BIGHA_KEY = "hectareToBigha"
BIGHA_TO_BISWA_KEY = "bighaToBiswa"

SETTINGS_PANEL = "settings"

_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


# ---------------------------------------------------------------------
# Number helpers
# ---------------------------------------------------------------------
def parse_float(text: Optional[str]) -> float:
    """
    Parse the longest numeric prefix of `text`.

    Leading whitespace is skipped. Returns NaN when there is no number.
    """
    if text is None:
        return math.nan
    match = _FLOAT_PREFIX.match(text.lstrip())
    if match is None:
        return math.nan
    return float(match.group(0).replace("Infinity", "inf"))


def _non_finite_text(value: float) -> Optional[str]:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return None


def format_fixed(value: float, digits: int = 4) -> str:
    """Fixed-point text with exactly `digits` decimals."""
    special = _non_finite_text(value)
    if special is not None:
        return special
    if abs(value) >= 1e21:
        return format_number(value)
    if value == 0:
        # -0.0 prints unsigned
        value = 0.0
    # halfway values round away from zero
    quantum = Decimal(1).scaleb(-digits)
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def format_number(value: float) -> str:
    """Shortest text for a float, integral values without ".0"."""
    special = _non_finite_text(value)
    if special is not None:
        return special
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _divide(numerator: float, denominator: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.divide(np.float64(numerator), np.float64(denominator)))


def _same(a: float, b: float) -> bool:
    if math.isnan(a) and math.isnan(b):
        return True
    return a == b


# ---------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class RatioConfig:
    hectare_to_bigha: float = DEFAULT_HECTARE_TO_BIGHA
    bigha_to_biswa: float = DEFAULT_BIGHA_TO_BISWA

    def as_storage(self) -> Dict[str, str]:
        return {
            HECTARE_TO_BIGHA_KEY: format_number(self.hectare_to_bigha),
            BIGHA_TO_BISWA_KEY: format_number(self.bigha_to_biswa),
        }

    @classmethod
    def from_storage(cls, raw: Dict[str, str]) -> "RatioConfig":
        """
        Build a config from raw stored strings.

        A key only falls back to its default when its value is missing or
        empty. A present value is parsed as-is, so "abc" loads as NaN.
        """
        hectare_to_bigha = DEFAULT_HECTARE_TO_BIGHA
        bigha_to_biswa = DEFAULT_BIGHA_TO_BISWA

        stored = raw.get(HECTARE_TO_BIGHA_KEY)
        if stored:
            hectare_to_bigha = parse_float(stored)
        stored = raw.get(BIGHA_TO_BISWA_KEY)
        if stored:
            bigha_to_biswa = parse_float(stored)

        return cls(hectare_to_bigha, bigha_to_biswa)


# ---------------------------------------------------------------------
# Outside-click wiring
# ---------------------------------------------------------------------
PointerHandler = Callable[[str], None]


class Subscription:
    """Handle for one registered pointer handler. Release is idempotent."""

    def __init__(self, events: "PointerEvents", handler: PointerHandler):
        self._events = events
        self._handler = handler
        self.active = True

    def release(self) -> None:
        if not self.active:
            return
        self.active = False
        self._events._remove(self._handler)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class PointerEvents:
    """Page-wide pointer-down observer."""

    def __init__(self):
        self._handlers: List[PointerHandler] = []

    def subscribe(self, handler: PointerHandler) -> Subscription:
        self._handlers.append(handler)
        return Subscription(self, handler)

    def _remove(self, handler: PointerHandler) -> None:
        self._handlers.remove(handler)

    @property
    def listener_count(self) -> int:
        return len(self._handlers)

    def pointer_down(self, target: str) -> None:
        """Notify every handler that the pointer went down on `target`."""
        for handler in list(self._handlers):
            handler(target)


# ---------------------------------------------------------------------
# Converter
# ---------------------------------------------------------------------
class Converter:
    """
    State and operations behind the hectare / bigha / biswa form.

    Quantities are kept as display text. Ratios go through `store` on
    every change. While the settings panel is open, one handler is
    registered on `events` and any pointer-down outside the panel closes
    it.
    """

    def __init__(
        self,
        store: RatioStore,
        events: Optional[PointerEvents] = None,
        ratios: Optional[RatioConfig] = None,
    ):
        self.store = store
        self.events = events if events is not None else PointerEvents()

        self.hectare = ""
        self.bigha = ""
        self.biswa = ""

        ratios = ratios if ratios is not None else RatioConfig()
        self.hectare_to_bigha = ratios.hectare_to_bigha
        self.bigha_to_biswa = ratios.bigha_to_biswa

        self.settings_visible = False
        self._outside_click: Optional[Subscription] = None

    @property
    def ratios(self) -> RatioConfig:
        return RatioConfig(self.hectare_to_bigha, self.bigha_to_biswa)

    def initialize(self) -> None:
        """Load ratios from the store, then write the effective pair back."""
        config = RatioConfig.from_storage(self.store.load())
        self.hectare_to_bigha = config.hectare_to_bigha
        self.bigha_to_biswa = config.bigha_to_biswa
        logger.info(
            "Loaded ratios: 1 ha = %s bigha, 1 bigha = %s biswa",
            format_number(self.hectare_to_bigha),
            format_number(self.bigha_to_biswa),
        )
        self._persist()

    # ----- quantities -----

    def edit_hectare(self, text: str) -> None:
        self.hectare = text
        h = parse_float(text)
        if math.isnan(h):
            self.bigha = ""
            self.biswa = ""
            return
        self.bigha = format_fixed(h * self.hectare_to_bigha)
        self.biswa = format_fixed(h * self.hectare_to_bigha * self.bigha_to_biswa)

    def edit_bigha(self, text: str) -> None:
        self.bigha = text
        b = parse_float(text)
        if math.isnan(b):
            self.hectare = ""
            self.biswa = ""
            return
        self.hectare = format_fixed(_divide(b, self.hectare_to_bigha))
        self.biswa = format_fixed(b * self.bigha_to_biswa)

    def edit_biswa(self, text: str) -> None:
        self.biswa = text
        bs = parse_float(text)
        if math.isnan(bs):
            self.bigha = ""
            self.hectare = ""
            return
        self.bigha = format_fixed(_divide(bs, self.bigha_to_biswa))
        self.hectare = format_fixed(
            _divide(bs, self.hectare_to_bigha * self.bigha_to_biswa)
        )

    # ----- settings panel -----

    def toggle_settings(self) -> None:
        self._set_settings_visible(not self.settings_visible)

    def dismiss_settings(self) -> None:
        self._set_settings_visible(False)

    def _set_settings_visible(self, visible: bool) -> None:
        self.settings_visible = visible
        if visible and self._outside_click is None:
            self._outside_click = self.events.subscribe(self._on_pointer_down)
        elif not visible:
            self._release_outside_click()

    def _release_outside_click(self) -> None:
        if self._outside_click is not None:
            self._outside_click.release()
            self._outside_click = None

    def _on_pointer_down(self, target: str) -> None:
        if target != SETTINGS_PANEL:
            logger.debug("Pointer down on %s, closing settings", target)
            self.dismiss_settings()

    def set_hectare_to_bigha(self, text: str) -> None:
        self._set_ratios(_coerce_ratio(text), self.bigha_to_biswa)

    def set_bigha_to_biswa(self, text: str) -> None:
        self._set_ratios(self.hectare_to_bigha, _coerce_ratio(text))

    def save_settings(self) -> None:
        self.dismiss_settings()

    def reset_settings(self) -> None:
        self._set_ratios(DEFAULT_HECTARE_TO_BIGHA, DEFAULT_BIGHA_TO_BISWA)
        self.hectare = ""
        self.bigha = ""
        self.biswa = ""
        self.dismiss_settings()

    def _set_ratios(self, hectare_to_bigha: float, bigha_to_biswa: float) -> None:
        changed = not (
            _same(hectare_to_bigha, self.hectare_to_bigha)
            and _same(bigha_to_biswa, self.bigha_to_biswa)
        )
        self.hectare_to_bigha = hectare_to_bigha
        self.bigha_to_biswa = bigha_to_biswa
        if changed:
            self._persist()

    def _persist(self) -> None:
        self.store.save(self.ratios)

    def close(self) -> None:
        """Tear down: drop the outside-click handler if one is held."""
        self._release_outside_click()


def _coerce_ratio(text: str) -> float:
    # Unparseable, NaN and zero all become 0
    value = parse_float(text)
    if math.isnan(value) or value == 0:
        return 0.0
    return value
