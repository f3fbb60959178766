"""Runtime configuration for HOOT MIND.

Defaults come from config/thresholds.py. A JSON file can override any
section; unknown keys are ignored and a missing or unreadable file yields
the defaults. Environment variables are applied last.

Example file:

    {
        "tiers": {"small_max": 250},
        "scoring": {"dev_risk_penalty": 30},
        "tuner": {"epsilon": 0.1, "state_path": "state/bandit.json"}
    }
"""

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from . import thresholds as t

ENV_STATE_PATH = "HOOT_MIND_STATE_PATH"
ENV_LOG_DIR = "HOOT_MIND_LOG_DIR"
ENV_LOG_LEVEL = "HOOT_MIND_LOG_LEVEL"
ENV_EPSILON = "HOOT_MIND_EPSILON"


@dataclass(frozen=True)
class TierThresholds:
    """Tier boundaries shared by every tier-aware analyzer."""

    small_max: float = t.TIER_SMALL_MAX
    medium_max: float = t.TIER_MEDIUM_MAX
    amount_mode: str = t.WALLET_AMOUNT_MODE


@dataclass(frozen=True)
class ScoringWeights:
    """Penalty/bonus magnitudes and trigger points for the aggregator."""

    base_score: float = t.SCORE_BASE
    small_majority_pct: float = t.SMALL_MAJORITY_PCT
    herding_penalty: float = t.HERDING_PENALTY
    participation_pct: float = t.PARTICIPATION_PCT
    participation_bonus: float = t.PARTICIPATION_BONUS
    dev_risk_pct: float = t.DEV_RISK_PCT
    dev_risk_penalty: float = t.DEV_RISK_PENALTY
    inflow_midpoint: float = t.INFLOW_MIDPOINT
    inflow_bonus: float = t.INFLOW_BONUS
    concentration_penalty: float = t.CONCENTRATION_PENALTY
    panic_high: float = t.PANIC_BAND_HIGH
    panic_moderate: float = t.PANIC_BAND_MODERATE
    panic_critical: float = t.PANIC_CRITICAL
    panic_penalty: float = t.PANIC_PENALTY
    low_score: float = t.LOW_SCORE
    min_confident_records: int = t.MIN_CONFIDENT_RECORDS
    buy_size_min_pct: float = t.BUY_SIZE_MIN_PCT
    buy_size_max_pct: float = t.BUY_SIZE_MAX_PCT
    exit_size_pct: float = t.EXIT_SIZE_PCT


@dataclass(frozen=True)
class TunerSettings:
    arms: Tuple[float, ...] = t.BANDIT_ARMS
    epsilon: float = t.BANDIT_EPSILON
    decay: float = t.BANDIT_DECAY
    state_path: str = t.BANDIT_STATE_PATH


@dataclass(frozen=True)
class DirectiveBounds:
    amount_min: float = t.AMOUNT_MIN
    amount_max: float = t.AMOUNT_MAX
    reason_max_chars: int = t.REASON_MAX_CHARS
    min_timestamp: int = t.MIN_TIMESTAMP
    target_pattern: str = t.TARGET_ASSET_PATTERN


@dataclass(frozen=True)
class LoggingSettings:
    log_level: str = t.LOG_LEVEL_DEFAULT
    log_dir: str = t.LOG_DIR


@dataclass(frozen=True)
class MindConfig:
    """Complete configuration tree for one pipeline instance."""

    tiers: TierThresholds = field(default_factory=TierThresholds)
    scoring: ScoringWeights = field(default_factory=ScoringWeights)
    tuner: TunerSettings = field(default_factory=TunerSettings)
    directive: DirectiveBounds = field(default_factory=DirectiveBounds)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    dev_exhaustion_pct: float = t.DEV_EXHAUSTION_THRESHOLD_PCT


_SECTIONS = {
    "tiers": TierThresholds,
    "scoring": ScoringWeights,
    "tuner": TunerSettings,
    "directive": DirectiveBounds,
    "logging": LoggingSettings,
}


def _build_section(cls, values: Any):
    """Build a section dataclass from a dict, keeping only known keys."""
    if not isinstance(values, dict):
        return cls()
    known = {f.name for f in fields(cls)}
    kwargs = {k: v for k, v in values.items() if k in known}
    if "arms" in kwargs:
        kwargs["arms"] = tuple(float(a) for a in kwargs["arms"])
    try:
        return cls(**kwargs)
    except TypeError:
        return cls()


def config_from_dict(data: Dict[str, Any]) -> MindConfig:
    """Build a MindConfig from a parsed JSON document."""
    sections = {name: _build_section(cls, data.get(name)) for name, cls in _SECTIONS.items()}
    dev_pct = data.get("dev_exhaustion_pct", t.DEV_EXHAUSTION_THRESHOLD_PCT)
    if not isinstance(dev_pct, (int, float)):
        dev_pct = t.DEV_EXHAUSTION_THRESHOLD_PCT
    return MindConfig(dev_exhaustion_pct=float(dev_pct), **sections)


def apply_env_overrides(config: MindConfig, environ: Optional[Dict[str, str]] = None) -> MindConfig:
    """Apply HOOT_MIND_* environment overrides on top of a config."""
    env = os.environ if environ is None else environ

    tuner = config.tuner
    if env.get(ENV_STATE_PATH):
        tuner = replace(tuner, state_path=env[ENV_STATE_PATH])
    if env.get(ENV_EPSILON):
        try:
            eps = float(env[ENV_EPSILON])
        except ValueError:
            eps = tuner.epsilon
        if 0.0 <= eps <= 1.0:
            tuner = replace(tuner, epsilon=eps)

    log = config.logging
    if env.get(ENV_LOG_DIR):
        log = replace(log, log_dir=env[ENV_LOG_DIR])
    if env.get(ENV_LOG_LEVEL) in ("FULL", "DIRECTIVES_ONLY"):
        log = replace(log, log_level=env[ENV_LOG_LEVEL])

    return replace(config, tuner=tuner, logging=log)


def load_config(filepath: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> MindConfig:
    """Load configuration from a JSON file plus environment overrides.

    Args:
        filepath: Optional path to a JSON config file.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        MindConfig. Falls back to defaults if the file is missing or invalid.
    """
    data: Dict[str, Any] = {}
    if filepath:
        try:
            loaded = json.loads(Path(filepath).read_text(encoding="utf-8"))
            if isinstance(loaded, dict):
                data = loaded
        except (FileNotFoundError, json.JSONDecodeError, OSError):
            data = {}
    return apply_env_overrides(config_from_dict(data), environ)
