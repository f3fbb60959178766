"""Adaptive threshold tuner for HOOT MIND.

Epsilon-greedy multi-armed bandit over a small set of score cutoffs.
Each arm is a candidate BUY threshold (fraction of the 0..100 score).

The tuner holds configuration only. State is an explicit BanditState value
passed in and returned, so persistence belongs to the caller.
"""

import math
import random
from typing import Optional, Sequence

from ..config.thresholds import BANDIT_ARMS, BANDIT_DECAY, BANDIT_EPSILON
from ..models.bandit_state import ArmStats, BanditState


class AdaptiveThresholdTuner:
    """Selects and reinforces decision thresholds across runs."""

    def __init__(
        self,
        arms: Sequence[float] = BANDIT_ARMS,
        epsilon: float = BANDIT_EPSILON,
        decay: float = BANDIT_DECAY,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not 0.0 <= epsilon <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {epsilon}")
        if not 0.0 < decay <= 1.0:
            raise ValueError(f"decay must be in (0, 1], got {decay}")
        self.arms = tuple(float(a) for a in arms)
        if not self.arms:
            raise ValueError("at least one arm is required")
        self.epsilon = epsilon
        self.decay = decay
        self.rng = rng or random.Random()

    def initial_state(self) -> BanditState:
        return BanditState.fresh(self.arms)

    def best_arm(self, state: BanditState) -> float:
        """Arm with the highest mean reward; first arm wins ties."""
        best = state.arms[0]
        best_mean = state.stats(best).mean_reward
        for arm in state.arms[1:]:
            mean = state.stats(arm).mean_reward
            if mean > best_mean:
                best, best_mean = arm, mean
        return best

    def select_threshold(self, state: BanditState) -> float:
        """Explore with probability epsilon, otherwise exploit."""
        if self.epsilon > 0 and self.rng.random() < self.epsilon:
            return self.rng.choice(state.arms)
        return self.best_arm(state)

    def record_outcome(self, state: BanditState, arm: float, reward: float) -> BanditState:
        """Return a new state with the outcome folded into `arm`.

        trials += 1, sum += reward, then sum *= decay.

        Raises:
            ValueError: If the arm is unknown or the reward is not finite.
        """
        try:
            arm, reward = float(arm), float(reward)
        except OverflowError:
            raise ValueError("arm and reward must be finite numbers") from None
        if arm not in state.arms:
            raise ValueError(f"Unknown arm {arm} (arms: {list(state.arms)})")
        if not math.isfinite(reward):
            raise ValueError(f"Reward must be finite, got {reward}")

        current = state.stats(arm)
        updated = ArmStats(
            trials=current.trials + 1,
            decayed_reward_sum=(current.decayed_reward_sum + reward) * self.decay,
        )
        per_arm = dict(state.per_arm)
        per_arm[arm] = updated
        return BanditState(arms=state.arms, per_arm=per_arm)
