"""Wallet concentration analysis for HOOT MIND."""

import math
from typing import Dict, Iterable, Tuple

from ..config.thresholds import CONCENTRATION_TOP10_PCT, CONCENTRATION_TOP5_PCT
from ..models.reports import ConcentrationDepth, ConcentrationReport


class ConcentrationAnalyzer:
    """Measures how much transferred volume piles up in the top destinations.

    top-5 share > 80%  -> depth 5  (highly concentrated)
    top-10 share > 40% -> depth 10
    otherwise          -> depth 20 (least concentrated, also the safe default)
    """

    def __init__(
        self,
        top5_pct: float = CONCENTRATION_TOP5_PCT,
        top10_pct: float = CONCENTRATION_TOP10_PCT,
    ) -> None:
        self.top5_pct = top5_pct
        self.top10_pct = top10_pct

    def analyze(self, transfers: Iterable[Tuple[str, float]]) -> ConcentrationReport:
        wallet_sums: Dict[str, float] = {}
        for destination, amount in transfers:
            if isinstance(amount, bool) or not isinstance(amount, (int, float)):
                continue
            if not math.isfinite(amount) or amount <= 0:
                continue
            key = destination or "unknown"
            wallet_sums[key] = wallet_sums.get(key, 0.0) + float(amount)

        holders = sorted(wallet_sums.values(), reverse=True)
        total = sum(holders)
        if not holders or total <= 0:
            return ConcentrationReport()

        top5 = sum(holders[:5]) / total * 100
        top10 = sum(holders[:10]) / total * 100
        top20 = sum(holders[:20]) / total * 100

        if top5 > self.top5_pct:
            depth = ConcentrationDepth.TOP_5
        elif top10 > self.top10_pct:
            depth = ConcentrationDepth.TOP_10
        else:
            depth = ConcentrationDepth.TOP_20

        return ConcentrationReport(
            depth=depth,
            top5_share=round(top5, 2),
            top10_share=round(top10, 2),
            top20_share=round(top20, 2),
            holder_count=len(holders),
        )

    def depth(self, transfers: Iterable[Tuple[str, float]]) -> ConcentrationDepth:
        return self.analyze(transfers).depth
