"""Analyzer and aggregator report models for HOOT MIND.

Every analyzer returns one of these typed, immutable records. The aggregator
consumes only these records, never analyzer internals.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Optional, Tuple


class ConcentrationDepth(IntEnum):
    """How many top wallets hold the supermajority of observed volume."""

    TOP_5 = 5
    TOP_10 = 10
    TOP_20 = 20


RISK_LEVELS = ("low", "medium", "high", "critical")


@dataclass(frozen=True)
class WalletTierProfile:
    small_count: int = 0
    medium_count: int = 0
    large_count: int = 0
    small_percent: float = 0.0
    medium_percent: float = 0.0
    large_percent: float = 0.0
    small_wallets: Tuple[str, ...] = ()
    medium_wallets: Tuple[str, ...] = ()
    large_wallets: Tuple[str, ...] = ()

    @property
    def total_wallets(self) -> int:
        return self.small_count + self.medium_count + self.large_count


@dataclass(frozen=True)
class ConcentrationReport:
    depth: ConcentrationDepth = ConcentrationDepth.TOP_20
    top5_share: float = 0.0  # Percent of total volume
    top10_share: float = 0.0
    top20_share: float = 0.0
    holder_count: int = 0


@dataclass(frozen=True)
class HerdSentimentReport:
    net_sentiment: int = 0
    small_wallet_buy_count: int = 0
    average_buy_amount: float = 0.0
    volatility: float = 0.0
    active_hours: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DevExhaustionReport:
    remaining_percentage: float = 0.0
    exhausted: bool = False
    dev_wallet_count: int = 0
    total_initial: float = 0.0
    total_remaining: float = 0.0

    @property
    def supply_known(self) -> bool:
        return self.total_initial > 0

    @property
    def sold_percentage(self) -> float:
        """Share of the dev allocation already sold (0 when unknown)."""
        if not self.supply_known:
            return 0.0
        return round(100.0 - self.remaining_percentage, 2)


@dataclass(frozen=True)
class PanicReport:
    panic_score: int = 0
    likely_panic_exits: int = 0
    total_exits: int = 0
    band: str = "low"
    comment: str = "Low panic activity"


@dataclass(frozen=True)
class LiquidityCycleReport:
    hourly_activity: Tuple[int, ...] = (0,) * 24
    peak_hour: Optional[int] = None
    quiet_hours: Tuple[int, ...] = tuple(range(24))

    @property
    def peak_hour_label(self) -> str:
        if self.peak_hour is None:
            return "n/a"
        return f"{self.peak_hour:02d}:00 UTC"


@dataclass(frozen=True)
class RegionalLiquidityReport:
    region_activity: Dict[str, int] = field(default_factory=dict)
    dominant_region: Optional[str] = None


@dataclass(frozen=True)
class MarketFlowReport:
    inflow_strength: float = 50.0
    recent_mean: float = 0.0
    previous_mean: float = 0.0
    volume_trend: str = "stable"  # increasing | decreasing | stable


@dataclass(frozen=True)
class SignalSnapshot:
    """All analyzer outputs for one batch."""

    tiers: WalletTierProfile = field(default_factory=WalletTierProfile)
    concentration: ConcentrationReport = field(default_factory=ConcentrationReport)
    herd: HerdSentimentReport = field(default_factory=HerdSentimentReport)
    dev: DevExhaustionReport = field(default_factory=DevExhaustionReport)
    panic: PanicReport = field(default_factory=PanicReport)
    cycles: LiquidityCycleReport = field(default_factory=LiquidityCycleReport)
    regions: RegionalLiquidityReport = field(default_factory=RegionalLiquidityReport)
    flow: MarketFlowReport = field(default_factory=MarketFlowReport)
    record_count: int = 0


@dataclass(frozen=True)
class TradeSuggestion:
    action: str  # BUY | SELL | WAIT
    size_percent: float
    reason: str


@dataclass(frozen=True)
class SurvivabilityReport:
    """Aggregated survivability verdict for one batch."""

    score: float
    risk_level: str
    suggestion: TradeSuggestion
    threshold: float
    tiers: WalletTierProfile
    market_flow_strength: float
    panic_score: int
    dev_remaining_percentage: float
    dev_exhausted: bool
    concentration_depth: ConcentrationDepth
    peak_hour: str = "n/a"
    dominant_region: Optional[str] = None
    low_confidence: bool = False
    record_count: int = 0
    adjustments: Tuple[Tuple[str, float], ...] = ()

    def snapshot(self) -> dict:
        """Flat summary for logs and dashboards."""
        return {
            "score": round(self.score, 2),
            "risk_level": self.risk_level,
            "action": self.suggestion.action,
            "size_percent": round(self.suggestion.size_percent, 2),
            "reason": self.suggestion.reason,
            "threshold": self.threshold,
            "whales": self.tiers.large_count,
            "dolphins": self.tiers.medium_count,
            "shrimps": self.tiers.small_count,
            "panic_score": self.panic_score,
            "dev_remaining_pct": self.dev_remaining_percentage,
            "dev_exhausted": self.dev_exhausted,
            "market_flow": round(self.market_flow_strength, 2),
            "concentration_depth": int(self.concentration_depth),
            "peak_hour": self.peak_hour,
            "region": self.dominant_region or "n/a",
            "low_confidence": self.low_confidence,
            "records": self.record_count,
            "adjustments": [list(a) for a in self.adjustments],
        }

    def summary_line(self) -> str:
        return (
            f"score={self.score:.0f} risk={self.risk_level} "
            f"action={self.suggestion.action} size={self.suggestion.size_percent:.1f}% "
            f"panic={self.panic_score} flow={self.market_flow_strength:.1f} "
            f"depth={int(self.concentration_depth)} peak={self.peak_hour}"
        )
