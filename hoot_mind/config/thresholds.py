"""Default parameters for HOOT MIND.

These are heuristic defaults, not fitted constants. Override them through
config/settings.py rather than editing the literals here.
"""

# Consumer tiers (token units, cumulative per wallet)
TIER_SMALL_MAX: float = 500
TIER_MEDIUM_MAX: float = 5000
WALLET_AMOUNT_MODE: str = "absolute"  # "absolute" | "net"

# Concentration
CONCENTRATION_TOP5_PCT: float = 80.0
CONCENTRATION_TOP10_PCT: float = 40.0

# Dev exhaustion
DEV_EXHAUSTION_THRESHOLD_PCT: float = 10.0

# Panic selling
PANIC_BREAK_EVEN_BAND_PCT: float = 5.0  # +/-5% of entry = break-even
PANIC_BAND_HIGH: int = 70
PANIC_BAND_MODERATE: int = 40
PANIC_CRITICAL: int = 85

# Market flow
FLOW_WINDOW: int = 10  # samples per window
FLOW_NEUTRAL: float = 50.0
FLOW_TREND_DEADBAND: float = 5.0  # inflow within 50 +/- 5 is "stable"

# Regional bands: label -> inclusive UTC hour range. Time-of-day proxy only.
REGION_BANDS = (
    ("Europe", 0, 3),
    ("Asia", 8, 13),
    ("US", 14, 20),
)
REGION_OTHER: str = "Other"

# Survivability scoring
SCORE_BASE: float = 100.0
SMALL_MAJORITY_PCT: float = 60.0
HERDING_PENALTY: float = 10.0
PARTICIPATION_PCT: float = 15.0
PARTICIPATION_BONUS: float = 15.0
DEV_RISK_PCT: float = 70.0
DEV_RISK_PENALTY: float = 25.0
INFLOW_MIDPOINT: float = 50.0
INFLOW_BONUS: float = 10.0
CONCENTRATION_PENALTY: float = 20.0
PANIC_PENALTY: float = 15.0
LOW_SCORE: float = 50.0
MIN_CONFIDENT_RECORDS: int = 10

# Trade sizing (percent of allocation)
BUY_SIZE_MIN_PCT: float = 10.0
BUY_SIZE_MAX_PCT: float = 50.0
EXIT_SIZE_PCT: float = 100.0

# Adaptive threshold bandit
BANDIT_ARMS = (0.5, 0.6, 0.7, 0.8, 0.9)
BANDIT_EPSILON: float = 0.15
BANDIT_DECAY: float = 0.99
BANDIT_STATE_PATH: str = "state/bandit_state.json"

# Directive contract
TARGET_ASSET_PATTERN: str = r"^[1-9A-HJ-NP-Za-km-z]{32,44}$"
NULL_ASSET: str = "1" * 32  # System program id, always pattern-valid
AMOUNT_MIN: float = 0.0
AMOUNT_MAX: float = 100.0
REASON_MAX_CHARS: int = 200
MIN_TIMESTAMP: int = 1_600_000_000  # ~Sep 2020
URGENCY_LEVELS = ("low", "medium", "high", "panic")
HIGH_URGENCY_SCORE: float = 80.0

# Session Logging
LOG_LEVEL_DEFAULT: str = "DIRECTIVES_ONLY"
LOG_DIR: str = "logs/"
