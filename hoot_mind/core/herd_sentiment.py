"""Herd sentiment analysis for HOOT MIND.

Focuses on small-wallet buying: how many, how large, how erratic, and at
which UTC hours the crowd clusters.
"""

import math
from typing import Iterable, List

import numpy as np

from ..config.thresholds import TIER_SMALL_MAX
from ..models.events import ActivityRecord
from ..models.reports import HerdSentimentReport
from .time_buckets import hour_label, hourly_histogram


class HerdSentimentAnalyzer:
    """Small-wallet buy statistics plus overall buy/sell imbalance."""

    def __init__(self, small_max: float = TIER_SMALL_MAX) -> None:
        self.small_max = small_max

    def analyze(self, records: Iterable[ActivityRecord]) -> HerdSentimentReport:
        records = list(records)

        buys = sum(1 for r in records if r.side == "buy")
        sells = sum(1 for r in records if r.side == "sell")

        small_buys: List[ActivityRecord] = [
            r for r in records
            if r.side == "buy" and math.isfinite(r.amount) and r.amount <= self.small_max
        ]
        if not small_buys:
            return HerdSentimentReport(net_sentiment=buys - sells)

        amounts = np.asarray([r.amount for r in small_buys], dtype=float)
        counts = hourly_histogram(r.timestamp for r in small_buys)

        # Most frequent hours first; earlier hour wins a tie
        ranked = sorted((h for h in range(24) if counts[h] > 0), key=lambda h: (-counts[h], h))

        return HerdSentimentReport(
            net_sentiment=buys - sells,
            small_wallet_buy_count=len(small_buys),
            average_buy_amount=float(amounts.mean()),
            volatility=float(amounts.std()),
            active_hours=tuple(hour_label(h) for h in ranked),
        )
