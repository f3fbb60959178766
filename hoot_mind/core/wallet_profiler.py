"""Consumer-tier profiling for HOOT MIND.

Classifies participant wallets into small / medium / large tiers
(shrimp / dolphin / whale) by cumulative transferred amount.
"""

import math
from collections import OrderedDict
from typing import Dict, Iterable, List, Tuple

from ..config.thresholds import TIER_MEDIUM_MAX, TIER_SMALL_MAX
from ..models.reports import WalletTierProfile


class WalletProfiler:
    """Partitions wallets into tiers with fixed thresholds."""

    def __init__(self, small_max: float = TIER_SMALL_MAX, medium_max: float = TIER_MEDIUM_MAX) -> None:
        if medium_max < small_max:
            raise ValueError(f"medium_max ({medium_max}) must be >= small_max ({small_max})")
        self.small_max = small_max
        self.medium_max = medium_max

    def tier_of(self, amount: float) -> str:
        if amount <= self.small_max:
            return "small"
        if amount <= self.medium_max:
            return "medium"
        return "large"

    def profile(self, wallet_amounts: Iterable[Tuple[str, float]]) -> WalletTierProfile:
        """Classify wallets from (address, amount) pairs.

        Amounts for the same address are summed before classification.
        Non-finite amounts are ignored.

        Returns:
            WalletTierProfile with counts, percentages and member lists.
        """
        totals: Dict[str, float] = OrderedDict()
        for address, amount in wallet_amounts:
            if isinstance(amount, bool) or not isinstance(amount, (int, float)):
                continue
            if not math.isfinite(amount):
                continue
            totals[address] = totals.get(address, 0.0) + float(amount)

        members: Dict[str, List[str]] = {"small": [], "medium": [], "large": []}
        for address, total in totals.items():
            members[self.tier_of(total)].append(address)

        total_wallets = max(len(totals), 1)  # Prevent divide by 0

        def pct(tier: str) -> float:
            return len(members[tier]) / total_wallets * 100

        return WalletTierProfile(
            small_count=len(members["small"]),
            medium_count=len(members["medium"]),
            large_count=len(members["large"]),
            small_percent=pct("small"),
            medium_percent=pct("medium"),
            large_percent=pct("large"),
            small_wallets=tuple(members["small"]),
            medium_wallets=tuple(members["medium"]),
            large_wallets=tuple(members["large"]),
        )
