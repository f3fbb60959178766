"""Liquidity cycle and regional activity mapping for HOOT MIND.

Both mappers are descriptive. The regional split is a time-of-day proxy
(UTC hour -> trading region), not a geographic measurement.
"""

from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..config.thresholds import REGION_BANDS, REGION_OTHER
from ..models.reports import LiquidityCycleReport, RegionalLiquidityReport
from .time_buckets import hourly_histogram, utc_hour, valid_timestamps


class LiquidityCycleMapper:
    """Buckets activity into a 24-slot UTC hour histogram."""

    def map(self, timestamps: Iterable[float]) -> LiquidityCycleReport:
        counts = hourly_histogram(timestamps)
        hourly = tuple(int(c) for c in counts)
        quiet = tuple(h for h in range(24) if hourly[h] == 0)
        if not any(hourly):
            return LiquidityCycleReport(hourly_activity=hourly, peak_hour=None, quiet_hours=quiet)
        # argmax returns the earliest hour on ties
        return LiquidityCycleReport(
            hourly_activity=hourly,
            peak_hour=int(counts.argmax()),
            quiet_hours=quiet,
        )


class RegionalLiquidityMapper:
    """Maps activity timestamps onto labeled region bands by UTC hour."""

    def __init__(self, bands: Sequence[Tuple[str, int, int]] = REGION_BANDS) -> None:
        self.bands = tuple(bands)

    def region_of(self, hour: int) -> str:
        for label, start, end in self.bands:
            if start <= hour <= end:
                return label
        return REGION_OTHER

    def map(self, timestamps: Iterable[float]) -> RegionalLiquidityReport:
        activity: Dict[str, int] = {label: 0 for label, _, _ in self.bands}
        activity[REGION_OTHER] = 0
        for ts in valid_timestamps(timestamps):
            activity[self.region_of(utc_hour(ts))] += 1

        dominant: Optional[str] = None
        best = 0
        for label, count in activity.items():
            if count > best:
                dominant, best = label, count

        return RegionalLiquidityReport(region_activity=activity, dominant_region=dominant)
