"""Directive: the contract object handed to an execution component."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

ACTIONS = ("BUY", "SELL", "WAIT")


@dataclass(frozen=True)
class ExecutionProfile:
    urgency: str  # low | medium | high | panic
    risk_tolerance: float  # 0..1

    def to_dict(self) -> Dict[str, Any]:
        return {"urgency": self.urgency, "risk_tolerance": self.risk_tolerance}


@dataclass(frozen=True)
class Directive:
    """Validated trading directive.

    Only DirectiveContract.parse() and DirectiveBuilder create these, so an
    instance in hand has already passed every contract check.
    """

    directive_id: str
    action: str
    target_asset: str
    amount_or_percent: float
    timestamp: float
    reason: str
    execution_profile: Optional[ExecutionProfile] = None
    is_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "directive_id": self.directive_id,
            "action": self.action,
            "target_asset": self.target_asset,
            "amount_or_percent": self.amount_or_percent,
            "timestamp": self.timestamp,
            "reason": self.reason,
        }
        if self.execution_profile is not None:
            payload["execution_profile"] = self.execution_profile.to_dict()
        return payload
