"""Phase 1 verification test for HOOT MIND: ingestion, tiers, concentration, config."""

import json
import tempfile
from pathlib import Path

from hoot_mind.config.settings import MindConfig, config_from_dict, load_config
from hoot_mind.config.thresholds import (
    BANDIT_ARMS, CONCENTRATION_TOP5_PCT, TIER_MEDIUM_MAX, TIER_SMALL_MAX,
)
from hoot_mind.core.activity_ingestion import (
    ActivityValidationError, normalize_activity, normalize_batch,
    transfer_pairs, wallet_amounts,
)
from hoot_mind.core.concentration import ConcentrationAnalyzer
from hoot_mind.core.wallet_profiler import WalletProfiler
from hoot_mind.models.reports import ConcentrationDepth

MIDNIGHT = 1_699_920_000  # 2023-11-14 00:00 UTC
SENDER = "S" * 44
RECEIVER = "R" * 44


def _raw(**overrides):
    raw = {
        "from_wallet": SENDER,
        "to_wallet": RECEIVER,
        "amount": 120.0,
        "timestamp": MIDNIGHT,
        "side": "buy",
    }
    raw.update(overrides)
    return raw


def test_activity_ingestion():
    print("=== Activity Ingestion ===")
    record = normalize_activity(_raw(price_change_percent="2.5", wallet_balance=40, signature="sig1"))
    assert record.amount == 120.0
    assert record.side == "buy"
    assert record.wallet == RECEIVER
    assert record.price_change_percent == 2.5
    assert record.wallet_balance == 40.0
    assert record.signature == "sig1"
    print("  normalize_activity: OK")

    # Signed-amount convention when side is absent
    sell = normalize_activity(_raw(amount=-75, side=None))
    assert sell.side == "sell"
    assert sell.amount == 75.0
    assert sell.wallet == SENDER
    print("  negative amount -> sell: OK")

    bad_rows = [
        {"from_wallet": SENDER, "amount": 1, "timestamp": MIDNIGHT},
        _raw(amount="lots"),
        _raw(amount=float("nan")),
        _raw(side="hold"),
        _raw(timestamp=12345),
        _raw(timestamp=MIDNIGHT + 10_000),
        _raw(wallet_balance=-1),
        _raw(from_wallet="", to_wallet=""),
    ]
    for row in bad_rows:
        try:
            normalize_activity(row, now=MIDNIGHT)
            assert False, f"Should have raised for {row}"
        except ActivityValidationError:
            pass
    print(f"  {len(bad_rows)} invalid rows rejected: OK")

    records, rejected = normalize_batch([_raw(), _raw(side="sell"), "junk", _raw(amount=None)])
    assert len(records) == 2
    assert rejected == 2
    print("  normalize_batch skips and counts rejects: OK")

    pairs = wallet_amounts(records, mode="net")
    assert pairs == [(RECEIVER, 120.0), (SENDER, -120.0)]
    assert transfer_pairs(records) == [(RECEIVER, 120.0), (RECEIVER, 120.0)]
    print("  wallet_amounts / transfer_pairs: OK")


def test_wallet_profiler():
    print("=== Wallet Profiler ===")
    profiler = WalletProfiler()
    assert profiler.tier_of(TIER_SMALL_MAX) == "small"
    assert profiler.tier_of(TIER_SMALL_MAX + 1) == "medium"
    assert profiler.tier_of(TIER_MEDIUM_MAX) == "medium"
    assert profiler.tier_of(TIER_MEDIUM_MAX + 1) == "large"
    print("  tier boundaries inclusive: OK")

    pairs = [("a", 100), ("b", 300), ("b", 300), ("c", 6000), ("d", 50), ("e", float("inf"))]
    profile = profiler.profile(pairs)
    assert profile.small_wallets == ("a", "d")
    assert profile.medium_wallets == ("b",)  # 600 cumulative
    assert profile.large_wallets == ("c",)
    assert profile.total_wallets == 4
    assert abs(profile.small_percent + profile.medium_percent + profile.large_percent - 100) < 0.01
    print(f"  small={profile.small_percent:.1f}% medium={profile.medium_percent:.1f}% "
          f"large={profile.large_percent:.1f}%: OK")

    empty = profiler.profile([])
    assert empty.total_wallets == 0
    assert empty.small_percent == empty.medium_percent == empty.large_percent == 0
    print("  empty input -> all zero: OK")

    # Percentages sum to 100 for many shapes
    for n in range(1, 40):
        p = profiler.profile((f"w{i}", i * 137.0) for i in range(n))
        assert abs(p.small_percent + p.medium_percent + p.large_percent - 100) < 0.01
    print("  percentages sum to 100 over 39 batches: OK")

    try:
        WalletProfiler(small_max=100, medium_max=10)
        assert False, "Should have raised"
    except ValueError:
        print("  inverted thresholds rejected: OK")


def test_concentration():
    print("=== Concentration ===")
    analyzer = ConcentrationAnalyzer()

    # All volume to one address
    assert analyzer.depth([("whale", 1000.0)]) == ConcentrationDepth.TOP_5
    print("  100% to one address -> depth 5: OK")

    # 30 equal holders: top5 = 16.7%, top10 = 33.3%
    even = [(f"w{i}", 10.0) for i in range(30)]
    report = analyzer.analyze(even)
    assert report.depth == ConcentrationDepth.TOP_20
    assert report.holder_count == 30
    print(f"  30 equal holders -> depth 20 (top5={report.top5_share}%): OK")

    # 20 equal holders: top10 = 50% > 40%
    assert analyzer.depth([(f"w{i}", 10.0) for i in range(20)]) == ConcentrationDepth.TOP_10
    print("  20 equal holders -> depth 10: OK")

    skewed = [("big", 9000.0)] + [(f"s{i}", 100.0) for i in range(10)]
    report = analyzer.analyze(skewed)
    assert report.depth == ConcentrationDepth.TOP_5
    assert report.top5_share > CONCENTRATION_TOP5_PCT
    print(f"  90% to one address -> depth 5 (top5={report.top5_share}%): OK")

    # Bad amounts ignored; empty destinations grouped
    report = analyzer.analyze([("", 5.0), (None, 5.0), ("x", float("nan")), ("y", -3)])
    assert report.holder_count == 1
    assert analyzer.analyze([]).depth == ConcentrationDepth.TOP_20
    print("  degenerate input handled: OK")

    for n in range(0, 50):
        assert analyzer.depth((f"w{i}", float(i + 1)) for i in range(n)) in (5, 10, 20)
    print("  depth always in {5, 10, 20}: OK")


def test_config_loading():
    print("=== Config ===")
    config = load_config(None, environ={})
    assert config == MindConfig()
    assert config.tuner.arms == BANDIT_ARMS
    print("  defaults: OK")

    assert load_config("nonexistent.json", environ={}) == MindConfig()
    print("  missing file -> defaults: OK")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "mind.json"
        path.write_text(json.dumps({
            "tiers": {"small_max": 250, "unknown_key": 1},
            "scoring": {"dev_risk_penalty": 30},
            "tuner": {"arms": [0.4, 0.6], "epsilon": 0.05},
        }))
        config = load_config(str(path), environ={})
        assert config.tiers.small_max == 250
        assert config.tiers.medium_max == TIER_MEDIUM_MAX
        assert config.scoring.dev_risk_penalty == 30
        assert config.tuner.arms == (0.4, 0.6)
        assert config.tuner.epsilon == 0.05
        print("  file overrides, unknown keys ignored: OK")

        path.write_text("{not json")
        assert load_config(str(path), environ={}) == MindConfig()
        print("  invalid JSON -> defaults: OK")

    env = {
        "HOOT_MIND_STATE_PATH": "/tmp/bandit.json",
        "HOOT_MIND_LOG_DIR": "/tmp/logs",
        "HOOT_MIND_LOG_LEVEL": "FULL",
        "HOOT_MIND_EPSILON": "0.3",
    }
    config = load_config(None, environ=env)
    assert config.tuner.state_path == "/tmp/bandit.json"
    assert config.logging.log_dir == "/tmp/logs"
    assert config.logging.log_level == "FULL"
    assert config.tuner.epsilon == 0.3
    print("  env overrides: OK")

    config = load_config(None, environ={"HOOT_MIND_EPSILON": "7", "HOOT_MIND_LOG_LEVEL": "LOUD"})
    assert config == MindConfig()
    print("  out-of-range env values ignored: OK")

    assert config_from_dict({"tiers": "nope"}).tiers == MindConfig().tiers
    print("  malformed section -> section defaults: OK")


if __name__ == "__main__":
    test_activity_ingestion()
    test_wallet_profiler()
    test_concentration()
    test_config_loading()
    print("\n*** ALL PHASE 1 TESTS PASSED ***")
