"""Phase 5 verification test for HOOT MIND: directive contract and builder."""

import itertools
import random
import uuid

from hoot_mind.config.settings import DirectiveBounds
from hoot_mind.config.thresholds import NULL_ASSET, REASON_MAX_CHARS
from hoot_mind.core.directive_contract import (
    DirectiveBuilder, DirectiveContract, DirectiveContractError,
)
from hoot_mind.core.survivability import SurvivabilityAggregator
from hoot_mind.models.directive import ExecutionProfile
from hoot_mind.models.reports import PanicReport, SignalSnapshot, TradeSuggestion

TOKEN = "So11111111111111111111111111111111111111112"
NOW = 1_700_000_000.0


def _builder():
    return DirectiveBuilder(DirectiveContract(), clock=lambda: NOW)


def test_contract_parse():
    print("=== Contract Parse ===")
    contract = DirectiveContract()
    directive = contract.parse("BUY", TOKEN, 25, NOW, "  score clears threshold  ",
                               ExecutionProfile("medium", 0.5))
    assert directive.action == "BUY"
    assert directive.amount_or_percent == 25.0
    assert directive.reason == "score clears threshold"
    assert uuid.UUID(directive.directive_id).version == 4
    assert directive.is_fallback is False
    assert contract.validate(directive) == []
    print("  valid BUY parsed: OK")

    payload = directive.to_dict()
    assert payload["execution_profile"] == {"urgency": "medium", "risk_tolerance": 0.5}
    assert set(payload) == {
        "directive_id", "action", "target_asset", "amount_or_percent",
        "timestamp", "reason", "execution_profile",
    }
    print("  to_dict payload: OK")

    assert contract.parse("WAIT", TOKEN, 0, NOW, "hold").amount_or_percent == 0.0
    assert contract.parse("SELL", TOKEN, 100, NOW, "exit").action == "SELL"
    print("  WAIT 0 / SELL 100 accepted: OK")

    cases = [
        (("buy", TOKEN, 10, NOW, "r"), "action"),
        (("BUY", "0OIl" * 10, 10, NOW, "r"), "target_asset"),
        (("BUY", TOKEN[:20], 10, NOW, "r"), "target_asset"),
        (("BUY", TOKEN, 0, NOW, "r"), "must be > 0"),
        (("BUY", TOKEN, 101, NOW, "r"), "outside"),
        (("WAIT", TOKEN, 5, NOW, "r"), "WAIT amount"),
        (("BUY", TOKEN, float("nan"), NOW, "r"), "finite"),
        (("BUY", TOKEN, True, NOW, "r"), "finite"),
        (("BUY", TOKEN, 10 ** 400, NOW, "r"), "finite"),
        (("SELL", TOKEN, -10 ** 400, NOW, "r"), "finite"),
        (("BUY", TOKEN, 10, 1_000, "r"), "timestamp"),
        (("BUY", TOKEN, 10, float("inf"), "r"), "timestamp"),
        (("BUY", TOKEN, 10, 10 ** 400, "r"), "timestamp"),
        (("BUY", TOKEN, 10, NOW, "   "), "reason"),
        (("BUY", TOKEN, 10, NOW, "x" * (REASON_MAX_CHARS + 1)), "reason"),
    ]
    for args, needle in cases:
        try:
            contract.parse(*args)
            assert False, f"Should have raised for {args[:3]}"
        except DirectiveContractError as exc:
            assert any(needle in v for v in exc.violations), (needle, exc.violations)
    print(f"  {len(cases)} violations named: OK")

    for profile in (ExecutionProfile("urgent", 0.5), ExecutionProfile("low", 1.5),
                    ExecutionProfile("low", 10 ** 400)):
        assert contract.violations("WAIT", TOKEN, 0, NOW, "r", profile)
    print("  execution profile checked: OK")

    narrow = DirectiveContract(DirectiveBounds(amount_max=20))
    assert narrow.violations("BUY", TOKEN, 25, NOW, "r")
    print("  configurable bounds: OK")


def test_builder_profiles():
    print("=== Builder Profiles ===")
    builder = _builder()
    agg = SurvivabilityAggregator()

    calm = agg.aggregate(SignalSnapshot(record_count=20), threshold=0.5)
    directive = builder.build(calm.suggestion, TOKEN, calm)
    assert directive.action == "BUY"
    assert directive.execution_profile == ExecutionProfile("high", 0.8)
    assert directive.timestamp == NOW
    print("  strong BUY -> high urgency, 0.8 tolerance: OK")

    panic = agg.aggregate(SignalSnapshot(panic=PanicReport(panic_score=90), record_count=20), 0.5)
    directive = builder.build(panic.suggestion, TOKEN, panic)
    assert directive.action == "SELL"
    assert directive.execution_profile == ExecutionProfile("panic", 0.2)
    print("  critical SELL -> panic urgency: OK")

    empty = agg.aggregate(SignalSnapshot(), threshold=0.5)
    directive = builder.build(empty.suggestion, TOKEN, empty)
    assert directive.action == "WAIT"
    assert directive.amount_or_percent == 0.0
    assert directive.execution_profile.urgency == "low"
    assert directive.is_fallback is False
    print("  WAIT -> low urgency: OK")

    # A WAIT suggestion never carries size
    directive = builder.build(TradeSuggestion("WAIT", 37.0, "hold"), TOKEN)
    assert directive.amount_or_percent == 0.0
    assert directive.is_fallback is False
    print("  WAIT size forced to 0: OK")


def test_builder_fallback():
    print("=== Builder Fallback ===")
    builder = _builder()

    directive = builder.build(TradeSuggestion("BUY", 150.0, "too big"), TOKEN)
    assert directive.action == "WAIT"
    assert directive.is_fallback is True
    assert directive.target_asset == TOKEN
    assert "amount" in directive.reason
    print(f"  oversize BUY -> {directive.reason!r}: OK")

    directive = builder.build(TradeSuggestion("BUY", 10.0, "ok"), "not-an-address")
    assert directive.action == "WAIT"
    assert directive.target_asset == NULL_ASSET
    assert "target_asset" in directive.reason
    print("  bad target -> null asset: OK")

    long_reason = builder.build(TradeSuggestion("HODL", float("nan"), "x" * 500), "?" * 300)
    assert len(long_reason.reason) <= REASON_MAX_CHARS
    assert builder.contract.validate(long_reason) == []
    print("  long diagnostic truncated: OK")

    broken_clock = DirectiveBuilder(clock=lambda: float("nan"))
    directive = broken_clock.build(TradeSuggestion("BUY", 10.0, "ok"), TOKEN)
    assert directive.is_fallback is True
    assert broken_clock.contract.validate(directive) == []
    print("  broken clock -> valid fallback: OK")

    for clock_value in (10 ** 400, None, "now"):
        odd_clock = DirectiveBuilder(clock=lambda value=clock_value: value)
        directive = odd_clock.build(TradeSuggestion("BUY", 10.0, "ok"), TOKEN)
        assert directive.is_fallback is True
        assert odd_clock.contract.validate(directive) == []
    print("  out-of-range clock values -> valid fallback: OK")


def test_builder_fuzz():
    print("=== Builder Fuzz ===")
    builder = _builder()
    contract = builder.contract
    actions = ["BUY", "SELL", "WAIT", "buy", "", None, "HOLD", 3]
    amounts = [0, 0.0, 1, 50, 100, 100.01, -1, float("nan"), float("inf"), None, "10", True,
               10 ** 400, -10 ** 400]
    reasons = ["ok", "", "   ", None, "x" * 201, "y" * 200, 42]
    targets = [TOKEN, NULL_ASSET, "", None, "0" * 40, TOKEN + "!", TOKEN + "\n", "1" * 45]

    seen_fallbacks = 0
    for action, amount, reason, target in itertools.product(actions, amounts, reasons, targets):
        directive = builder.build(TradeSuggestion(action, amount, reason), target)
        assert contract.validate(directive) == [], (action, amount, reason, target)
        seen_fallbacks += directive.is_fallback
    print(f"  {len(actions) * len(amounts) * len(reasons) * len(targets)} combinations valid "
          f"({seen_fallbacks} fallbacks): OK")

    rng = random.Random(99)
    for _ in range(2000):
        suggestion = TradeSuggestion(
            rng.choice(["BUY", "SELL", "WAIT"]),
            rng.uniform(-50, 150),
            "".join(rng.choice("ab \t") for _ in range(rng.randint(0, 260))),
        )
        directive = builder.build(suggestion, rng.choice(targets))
        assert contract.validate(directive) == []
    print("  2000 random suggestions valid: OK")

    # Objects that are not suggestions at all
    for junk in (None, object(), {"action": "BUY"}):
        assert builder.build(junk, TOKEN).is_fallback is True
    print("  non-suggestion input -> fallback: OK")


if __name__ == "__main__":
    test_contract_parse()
    test_builder_profiles()
    test_builder_fallback()
    test_builder_fuzz()
    print("\n*** ALL PHASE 5 TESTS PASSED ***")
