"""UTC hour bucketing shared by the time-of-day analyzers."""

import math
from typing import Iterable, List

import numpy as np


def utc_hour(timestamp: float) -> int:
    """UTC hour (0-23) of a unix timestamp in seconds."""
    return int(timestamp // 3600) % 24


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00 UTC"


def valid_timestamps(timestamps: Iterable[float]) -> List[float]:
    """Drop non-numeric, non-finite and negative timestamps."""
    valid: List[float] = []
    for ts in timestamps:
        if isinstance(ts, bool) or not isinstance(ts, (int, float)):
            continue
        if not math.isfinite(ts) or ts < 0:
            continue
        valid.append(ts)
    return valid


def hourly_histogram(timestamps: Iterable[float]) -> np.ndarray:
    """24-slot count of timestamps per UTC hour."""
    hours = [utc_hour(ts) for ts in valid_timestamps(timestamps)]
    if not hours:
        return np.zeros(24, dtype=int)
    return np.bincount(np.asarray(hours, dtype=int), minlength=24)
