"""Survivability aggregation for HOOT MIND.

Combines every analyzer report into one bounded [0, 100] score, a coarse
risk tier and a trade suggestion. The rule set is additive with fixed,
configurable magnitudes so each adjustment can be inspected in the report:

- herding:        small-tier share above majority      -> penalty
- participation:  medium + large share above threshold -> bonus
- dev_risk:       unsold dev supply above threshold    -> penalty
- inflow:         market flow above midpoint           -> bonus
- concentration:  top-5 wallets hold the supermajority -> penalty
- panic:          panic score in the high band         -> penalty

Every rule is monotonic in its input and the result is clamped.
"""

from typing import List, Tuple

from ..config.settings import ScoringWeights
from ..models.reports import (
    ConcentrationDepth,
    SignalSnapshot,
    SurvivabilityReport,
    TradeSuggestion,
)

NO_DATA_REASON = "no data: activity batch is empty"


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


class SurvivabilityAggregator:
    """Turns a SignalSnapshot into a SurvivabilityReport."""

    def __init__(self, weights: ScoringWeights = ScoringWeights()) -> None:
        self.weights = weights

    # --- Scoring ---

    def dev_risk(self, snapshot: SignalSnapshot) -> float:
        """Unsold dev supply in percent; 0 when no dev allocation is known."""
        if not snapshot.dev.supply_known:
            return 0.0
        return snapshot.dev.remaining_percentage

    def adjustments(self, snapshot: SignalSnapshot) -> List[Tuple[str, float]]:
        """Ordered (rule, delta) pairs that fire for this snapshot."""
        w = self.weights
        tiers = snapshot.tiers
        fired: List[Tuple[str, float]] = []

        if tiers.small_percent > w.small_majority_pct:
            fired.append(("herding", -w.herding_penalty))
        if tiers.medium_percent + tiers.large_percent > w.participation_pct:
            fired.append(("participation", w.participation_bonus))
        if self.dev_risk(snapshot) > w.dev_risk_pct:
            fired.append(("dev_risk", -w.dev_risk_penalty))
        if snapshot.flow.inflow_strength > w.inflow_midpoint:
            fired.append(("inflow", w.inflow_bonus))
        if snapshot.concentration.depth == ConcentrationDepth.TOP_5:
            fired.append(("concentration", -w.concentration_penalty))
        if snapshot.panic.panic_score >= w.panic_high:
            fired.append(("panic", -w.panic_penalty))

        return fired

    def score(self, snapshot: SignalSnapshot) -> float:
        total = self.weights.base_score + sum(delta for _, delta in self.adjustments(snapshot))
        return _clamp(total)

    # --- Risk tier ---

    def risk_level(self, snapshot: SignalSnapshot, score: float) -> str:
        """Coarse risk tier; panic and dev risk dominate."""
        w = self.weights
        panic = snapshot.panic.panic_score
        dev_risky = self.dev_risk(snapshot) > w.dev_risk_pct
        depth = snapshot.concentration.depth

        if panic >= w.panic_critical or (dev_risky and panic >= w.panic_high):
            return "critical"
        if panic >= w.panic_high or dev_risky or depth == ConcentrationDepth.TOP_5:
            return "high"
        if (
            panic >= w.panic_moderate
            or depth == ConcentrationDepth.TOP_10
            or snapshot.tiers.small_percent > w.small_majority_pct
            or score < w.low_score
        ):
            return "medium"
        return "low"

    # --- Suggestion ---

    def suggest(
        self,
        snapshot: SignalSnapshot,
        score: float,
        risk_level: str,
        threshold: float,
    ) -> TradeSuggestion:
        w = self.weights
        cutoff = _clamp(round(threshold * 100, 6))

        if snapshot.record_count == 0:
            return TradeSuggestion("WAIT", 0.0, NO_DATA_REASON)

        if risk_level == "critical":
            return TradeSuggestion(
                "SELL",
                w.exit_size_pct,
                f"critical risk: panic {snapshot.panic.panic_score}, score {score:.0f}",
            )

        if snapshot.concentration.depth == ConcentrationDepth.TOP_5:
            return TradeSuggestion(
                "WAIT",
                0.0,
                f"top-5 wallets hold {snapshot.concentration.top5_share:.0f}% of volume",
            )

        if risk_level == "high":
            return TradeSuggestion("WAIT", 0.0, f"high risk blocks entry (score {score:.0f})")

        if score < cutoff:
            return TradeSuggestion("WAIT", 0.0, f"score {score:.0f} below threshold {cutoff:.0f}")

        headroom = 100.0 - cutoff
        ratio = 1.0 if headroom <= 0 else (score - cutoff) / headroom
        size = w.buy_size_min_pct + ratio * (w.buy_size_max_pct - w.buy_size_min_pct)
        return TradeSuggestion(
            "BUY",
            round(size, 2),
            f"score {score:.0f} clears threshold {cutoff:.0f} with {risk_level} risk",
        )

    def aggregate(self, snapshot: SignalSnapshot, threshold: float) -> SurvivabilityReport:
        """Score a snapshot against the tuner-selected threshold (0..1)."""
        fired = self.adjustments(snapshot)
        score = _clamp(self.weights.base_score + sum(delta for _, delta in fired))
        risk = self.risk_level(snapshot, score)
        suggestion = self.suggest(snapshot, score, risk, threshold)

        return SurvivabilityReport(
            score=score,
            risk_level=risk,
            suggestion=suggestion,
            threshold=threshold,
            tiers=snapshot.tiers,
            market_flow_strength=snapshot.flow.inflow_strength,
            panic_score=snapshot.panic.panic_score,
            dev_remaining_percentage=snapshot.dev.remaining_percentage,
            dev_exhausted=snapshot.dev.exhausted,
            concentration_depth=snapshot.concentration.depth,
            peak_hour=snapshot.cycles.peak_hour_label,
            dominant_region=snapshot.regions.dominant_region,
            low_confidence=snapshot.record_count < self.weights.min_confident_records,
            record_count=snapshot.record_count,
            adjustments=tuple(fired),
        )
