"""Panic-sell detection for HOOT MIND.

Flags small holders dumping near their break-even price, the classic
emotional liquidity exit.
"""

import math
from typing import Iterable, Mapping, Optional

from ..config.thresholds import (
    PANIC_BAND_HIGH,
    PANIC_BAND_MODERATE,
    PANIC_BREAK_EVEN_BAND_PCT,
    TIER_SMALL_MAX,
)
from ..models.events import ActivityRecord
from ..models.reports import PanicReport

_COMMENTS = {
    "high": "High panic behavior detected, likely emotional liquidity exit",
    "moderate": "Moderate panic exit trend forming",
    "low": "Low panic activity",
}


def panic_band(score: float) -> str:
    """Qualitative band for a panic score."""
    if score >= PANIC_BAND_HIGH:
        return "high"
    if score >= PANIC_BAND_MODERATE:
        return "moderate"
    return "low"


def _number(value: Optional[float]) -> float:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value) if math.isfinite(value) else 0.0


class PanicSellDetector:
    """Scores the share of exits that look like panic."""

    def __init__(
        self,
        small_max: float = TIER_SMALL_MAX,
        break_even_band: float = PANIC_BREAK_EVEN_BAND_PCT,
    ) -> None:
        self.small_max = small_max
        self.break_even_band = break_even_band

    def is_panic_exit(self, record: ActivityRecord, balance: float) -> bool:
        near_break_even = abs(_number(record.price_change_percent)) <= self.break_even_band
        return near_break_even and balance < self.small_max

    def detect(
        self,
        records: Iterable[ActivityRecord],
        balances: Optional[Mapping[str, float]] = None,
    ) -> PanicReport:
        """Score panic exits among sell-side records.

        Args:
            records: Activity records for the batch.
            balances: Optional wallet -> total balance map. Falls back to the
                      record's wallet_balance, then 0.
        """
        balances = balances or {}
        total_exits = 0
        panic_exits = 0
        for record in records:
            if record.side != "sell":
                continue
            total_exits += 1
            balance = balances.get(record.wallet, record.wallet_balance)
            if self.is_panic_exit(record, _number(balance)):
                panic_exits += 1

        score = 0 if total_exits == 0 else round(panic_exits / total_exits * 100)
        band = panic_band(score)
        return PanicReport(
            panic_score=score,
            likely_panic_exits=panic_exits,
            total_exits=total_exits,
            band=band,
            comment=_COMMENTS[band],
        )
