"""Bandit state for the adaptive threshold tuner."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

STATE_VERSION = 1


@dataclass(frozen=True)
class ArmStats:
    """Per-arm statistics. trials >= 0; the reward sum is decayed."""

    trials: int = 0
    decayed_reward_sum: float = 0.0

    @property
    def mean_reward(self) -> float:
        if self.trials <= 0:
            return 0.0
        return self.decayed_reward_sum / self.trials


@dataclass(frozen=True)
class BanditState:
    """Explicit, serialisable tuner state.

    Values are never mutated; updates produce a new BanditState.
    """

    arms: Tuple[float, ...]
    per_arm: Dict[float, ArmStats] = field(default_factory=dict)

    @classmethod
    def fresh(cls, arms: Sequence[float]) -> "BanditState":
        ordered = tuple(float(a) for a in arms)
        if not ordered:
            raise ValueError("BanditState needs at least one arm")
        return cls(arms=ordered, per_arm={a: ArmStats() for a in ordered})

    def stats(self, arm: float) -> ArmStats:
        return self.per_arm.get(arm, ArmStats())

    @property
    def total_trials(self) -> int:
        return sum(self.stats(a).trials for a in self.arms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": STATE_VERSION,
            "arms": list(self.arms),
            "per_arm": {
                str(arm): {
                    "trials": self.stats(arm).trials,
                    "decayed_reward_sum": self.stats(arm).decayed_reward_sum,
                }
                for arm in self.arms
            },
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        arms: Optional[Sequence[float]] = None,
    ) -> "BanditState":
        """Rebuild state from a persisted dict.

        When `arms` is given it wins over the persisted arm list: stats for
        arms that are still configured are kept, new arms start untried.

        Raises:
            ValueError: If the document is structurally unusable.
        """
        if not isinstance(data, dict):
            raise ValueError("bandit state must be a JSON object")

        stored_arms = data.get("arms")
        if arms is None:
            if not isinstance(stored_arms, list) or not stored_arms:
                raise ValueError("bandit state has no arms")
            arms = stored_arms
        state = cls.fresh(arms)

        raw_stats = data.get("per_arm", {})
        if not isinstance(raw_stats, dict):
            raise ValueError("per_arm must be an object")

        per_arm = dict(state.per_arm)
        for key, entry in raw_stats.items():
            try:
                arm = float(key)
                trials = int(entry.get("trials", 0))
                total = float(entry.get("decayed_reward_sum", 0.0))
            except (TypeError, ValueError, AttributeError):
                continue
            if arm not in per_arm or trials < 0 or not math.isfinite(total):
                continue
            per_arm[arm] = ArmStats(trials=trials, decayed_reward_sum=total)

        return cls(arms=state.arms, per_arm=per_arm)
