"""Dev-wallet exhaustion detection for HOOT MIND."""

import math
from typing import Dict, Iterable

from ..config.thresholds import DEV_EXHAUSTION_THRESHOLD_PCT
from ..models.events import ActivityRecord, DevWalletRecord
from ..models.reports import DevExhaustionReport


def _finite_or_zero(value) -> float:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value) if math.isfinite(value) else 0.0


class DevExhaustionDetector:
    """Tracks how much of the creator allocation is still unsold.

    A dev cohort is exhausted once the remaining share of its initial
    allocation drops to `threshold` percent or below.
    """

    def __init__(self, threshold: float = DEV_EXHAUSTION_THRESHOLD_PCT) -> None:
        self.threshold = threshold

    def detect(
        self,
        dev_wallets: Iterable[DevWalletRecord],
        records: Iterable[ActivityRecord],
    ) -> DevExhaustionReport:
        dev_wallets = list(dev_wallets)

        sold: Dict[str, float] = {}
        for record in records:
            if record.side == "sell":
                sold[record.wallet] = sold.get(record.wallet, 0.0) + _finite_or_zero(record.amount)

        total_initial = 0.0
        total_remaining = 0.0
        for dev in dev_wallets:
            initial = max(_finite_or_zero(dev.initial_balance), 0.0)
            outgoing = abs(_finite_or_zero(dev.outgoing_sum)) + sold.get(dev.address, 0.0)
            remaining = max(initial - outgoing, 0.0)
            if dev.current_balance is not None:
                remaining = min(remaining, max(_finite_or_zero(dev.current_balance), 0.0))
            total_initial += initial
            total_remaining += remaining

        if total_initial <= 0:
            return DevExhaustionReport(dev_wallet_count=len(dev_wallets))

        remaining_pct = round(total_remaining / total_initial * 100, 2)
        return DevExhaustionReport(
            remaining_percentage=remaining_pct,
            exhausted=remaining_pct <= self.threshold,
            dev_wallet_count=len(dev_wallets),
            total_initial=total_initial,
            total_remaining=total_remaining,
        )
