"""Directive contract for HOOT MIND.

The only path from an analysis result to an actionable Directive.

DirectiveContract checks every field against closed-set, range and pattern
constraints and either returns a Directive or raises. DirectiveBuilder wraps
it and never raises: any violation becomes a WAIT directive whose reason
names the violated constraints, so an executor only ever sees valid objects.
"""

import math
import re
import time
import uuid
from typing import Any, Callable, List, Optional

from ..config.settings import DirectiveBounds
from ..config.thresholds import HIGH_URGENCY_SCORE, NULL_ASSET, URGENCY_LEVELS
from ..models.directive import ACTIONS, Directive, ExecutionProfile
from ..models.reports import SurvivabilityReport, TradeSuggestion

_RISK_TOLERANCE = {"low": 0.8, "medium": 0.5}
_DEFAULT_RISK_TOLERANCE = 0.2


class DirectiveContractError(ValueError):
    """Raised when a candidate directive violates the contract."""

    def __init__(self, violations: List[str]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(self.violations))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_finite(value: Any) -> Optional[float]:
    """Float value of a finite number, None for anything else.

    Ints beyond float range count as not finite.
    """
    if not _is_number(value):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _brief(value: Any) -> str:
    """Short description of a rejected value for violation messages."""
    if isinstance(value, str):
        return repr(value[:24])
    if isinstance(value, float) or value is None or isinstance(value, bool):
        return repr(value)
    return type(value).__name__


class DirectiveContract:
    """Schema validator for directives."""

    def __init__(self, bounds: DirectiveBounds = DirectiveBounds()) -> None:
        self.bounds = bounds
        self._target_re = re.compile(bounds.target_pattern)

    def target_is_valid(self, target_asset: Any) -> bool:
        return isinstance(target_asset, str) and bool(self._target_re.fullmatch(target_asset))

    def violations(
        self,
        action: Any,
        target_asset: Any,
        amount: Any,
        timestamp: Any,
        reason: Any,
        execution_profile: Optional[ExecutionProfile] = None,
    ) -> List[str]:
        """List every constraint the candidate fields violate."""
        b = self.bounds
        found: List[str] = []

        if action not in ACTIONS:
            found.append(f"action {_brief(action)} not in {list(ACTIONS)}")

        if not self.target_is_valid(target_asset):
            found.append("target_asset does not match address pattern")

        amount = _as_finite(amount)
        if amount is None:
            found.append("amount is not a finite number")
        else:
            if not b.amount_min <= amount <= b.amount_max:
                found.append(f"amount {amount} outside [{b.amount_min}, {b.amount_max}]")
            if action in ("BUY", "SELL") and amount <= 0:
                found.append(f"{action} amount must be > 0")
            if action == "WAIT" and amount != 0:
                found.append("WAIT amount must be 0")

        timestamp = _as_finite(timestamp)
        if timestamp is None:
            found.append("timestamp is not a finite number")
        elif timestamp < b.min_timestamp:
            found.append(f"timestamp {timestamp} before {b.min_timestamp}")

        if not isinstance(reason, str) or not reason.strip():
            found.append("reason is empty")
        elif len(reason) > b.reason_max_chars:
            found.append(f"reason longer than {b.reason_max_chars} chars")

        if execution_profile is not None:
            if execution_profile.urgency not in URGENCY_LEVELS:
                found.append(f"urgency {_brief(execution_profile.urgency)} not in {list(URGENCY_LEVELS)}")
            tolerance = _as_finite(execution_profile.risk_tolerance)
            if tolerance is None or not 0.0 <= tolerance <= 1.0:
                found.append(f"risk_tolerance {_brief(execution_profile.risk_tolerance)} outside [0, 1]")

        return found

    def parse(
        self,
        action: Any,
        target_asset: Any,
        amount: Any,
        timestamp: Any,
        reason: Any,
        execution_profile: Optional[ExecutionProfile] = None,
        directive_id: Optional[str] = None,
        is_fallback: bool = False,
    ) -> Directive:
        """Build a Directive from candidate fields.

        Raises:
            DirectiveContractError: Listing every violated constraint.
        """
        found = self.violations(action, target_asset, amount, timestamp, reason, execution_profile)
        if found:
            raise DirectiveContractError(found)
        return Directive(
            directive_id=directive_id or str(uuid.uuid4()),
            action=action,
            target_asset=target_asset,
            amount_or_percent=float(amount),
            timestamp=float(timestamp),
            reason=reason.strip(),
            execution_profile=execution_profile,
            is_fallback=is_fallback,
        )

    def validate(self, directive: Directive) -> List[str]:
        """Re-check an existing Directive; empty list means valid."""
        return self.violations(
            directive.action,
            directive.target_asset,
            directive.amount_or_percent,
            directive.timestamp,
            directive.reason,
            directive.execution_profile,
        )


class DirectiveBuilder:
    """Fail-closed builder: always returns a structurally valid Directive."""

    def __init__(
        self,
        contract: Optional[DirectiveContract] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.contract = contract or DirectiveContract()
        self.clock = clock

    def execution_profile(
        self,
        action: str,
        report: Optional[SurvivabilityReport] = None,
    ) -> ExecutionProfile:
        if report is None:
            return ExecutionProfile("low" if action == "WAIT" else "medium", 0.5)

        tolerance = _RISK_TOLERANCE.get(report.risk_level, _DEFAULT_RISK_TOLERANCE)
        if action == "SELL" and report.risk_level == "critical":
            urgency = "panic"
        elif action == "BUY" and report.score > HIGH_URGENCY_SCORE:
            urgency = "high"
        elif action == "WAIT":
            urgency = "low"
        else:
            urgency = "medium"
        return ExecutionProfile(urgency, tolerance)

    def fallback(self, target_asset: Any, reason: str) -> Directive:
        """WAIT directive carrying a diagnostic reason."""
        target = target_asset if self.contract.target_is_valid(target_asset) else NULL_ASSET
        limit = self.contract.bounds.reason_max_chars
        text = reason.strip() or "WAIT fallback"
        if len(text) > limit:
            text = text[: limit - 3] + "..."
        timestamp = _as_finite(self.clock())
        if timestamp is None:
            timestamp = time.time()
        timestamp = max(timestamp, float(self.contract.bounds.min_timestamp))
        return Directive(
            directive_id=str(uuid.uuid4()),
            action="WAIT",
            target_asset=target,
            amount_or_percent=0.0,
            timestamp=timestamp,
            reason=text,
            execution_profile=ExecutionProfile("low", 0.0),
            is_fallback=True,
        )

    def build(
        self,
        suggestion: TradeSuggestion,
        target_asset: Any,
        report: Optional[SurvivabilityReport] = None,
    ) -> Directive:
        """Turn a trade suggestion into a Directive, or the WAIT fallback."""
        action = getattr(suggestion, "action", None)
        amount = getattr(suggestion, "size_percent", None)
        reason = getattr(suggestion, "reason", None)
        if action == "WAIT":
            amount = 0.0  # WAIT carries no size

        profile = self.execution_profile(action, report) if action in ACTIONS else None

        try:
            return self.contract.parse(
                action=action,
                target_asset=target_asset,
                amount=amount,
                timestamp=self.clock(),
                reason=reason,
                execution_profile=profile,
            )
        except DirectiveContractError as exc:
            return self.fallback(target_asset, f"WAIT fallback, contract violated: {exc}")
