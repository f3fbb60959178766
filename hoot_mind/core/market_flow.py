"""Market flow analysis for HOOT MIND.

Compares the latest liquidity window with the one before it to decide
whether liquidity is entering (bullish) or leaving (bearish).
"""

import math
from typing import Iterable, List

import numpy as np

from ..config.thresholds import FLOW_NEUTRAL, FLOW_TREND_DEADBAND, FLOW_WINDOW
from ..models.reports import MarketFlowReport


class MarketFlowAnalyzer:
    """Bounded inflow/outflow momentum in [0, 100], neutral at 50."""

    def __init__(self, window: int = FLOW_WINDOW) -> None:
        if window < 1:
            raise ValueError(f"window must be >= 1, got {window}")
        self.window = window

    def analyze(self, samples: Iterable[float]) -> MarketFlowReport:
        clean: List[float] = [
            float(s) for s in samples
            if not isinstance(s, bool) and isinstance(s, (int, float))
            and math.isfinite(s) and s >= 0
        ]
        recent = clean[-self.window:]
        previous = clean[-2 * self.window:-self.window] if len(clean) > self.window else []

        recent_mean = float(np.mean(recent)) if recent else 0.0
        previous_mean = float(np.mean(previous)) if previous else 0.0

        if previous_mean == 0:
            strength = FLOW_NEUTRAL
        else:
            change = (recent_mean - previous_mean) / previous_mean
            strength = float(np.clip(FLOW_NEUTRAL + change * 50, 0.0, 100.0))

        if strength > FLOW_NEUTRAL + FLOW_TREND_DEADBAND:
            trend = "increasing"
        elif strength < FLOW_NEUTRAL - FLOW_TREND_DEADBAND:
            trend = "decreasing"
        else:
            trend = "stable"

        return MarketFlowReport(
            inflow_strength=strength,
            recent_mean=recent_mean,
            previous_mean=previous_mean,
            volume_trend=trend,
        )
