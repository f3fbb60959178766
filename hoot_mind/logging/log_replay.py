"""Session replay for HOOT MIND run logs.

Raw events come back as dicts. Directive and outcome events can also be
decoded into typed values, so a session can be audited against the current
contract or its rewards folded back into tuner state.
"""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.directive_contract import DirectiveContract
from ..models.directive import Directive, ExecutionProfile

logger = logging.getLogger(__name__)

EVENT_TYPES = ("RUN_START", "ACTIVITY", "REPORT", "DIRECTIVE", "OUTCOME", "RUN_END")


@dataclass(frozen=True)
class OutcomeEvent:
    """A logged reward for one threshold arm."""

    arm: float
    reward: float
    trials: int


def _finite_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def replay_session(
    filepath: str,
    event_types: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """Read a JSONL session log and return parsed events.

    Args:
        filepath: Path to a .jsonl session log file.
        event_types: Keep only these event types (all known types when None).

    Returns:
        List of event dicts, in file order. Lines that are not JSON objects
        with a known event_type are skipped.

    Raises:
        FileNotFoundError: If the log file does not exist.
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Session log not found: {filepath}")
    wanted = set(event_types) if event_types is not None else set(EVENT_TYPES)

    events: List[Dict[str, Any]] = []
    skipped = 0
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except ValueError:
                skipped += 1  # truncated last line after a crash
                continue
            if not isinstance(event, dict) or event.get("event_type") not in EVENT_TYPES:
                skipped += 1
                continue
            if event["event_type"] in wanted:
                events.append(event)

    if skipped:
        logger.warning("replay: skipped %d unreadable lines in %s", skipped, path)
    return events


def filter_events(events: Iterable[Dict[str, Any]], event_type: str) -> List[Dict[str, Any]]:
    """Events whose event_type matches, in file order."""
    return [e for e in events if e.get("event_type") == event_type]


def decode_directive(event: Dict[str, Any], contract: Optional[DirectiveContract] = None) -> Directive:
    """Rebuild a Directive from a DIRECTIVE event.

    The payload goes back through the contract, so a decoded Directive is
    valid under the bounds in force now.

    Raises:
        ValueError: If the event carries no directive payload.
        DirectiveContractError: If the payload violates the contract.
    """
    contract = contract or DirectiveContract()
    payload = event.get("directive")
    if event.get("event_type") != "DIRECTIVE" or not isinstance(payload, dict):
        raise ValueError("not a DIRECTIVE event")

    profile = None
    raw_profile = payload.get("execution_profile")
    if isinstance(raw_profile, dict):
        profile = ExecutionProfile(raw_profile.get("urgency"), raw_profile.get("risk_tolerance"))

    directive_id = payload.get("directive_id")
    return contract.parse(
        action=payload.get("action"),
        target_asset=payload.get("target_asset"),
        amount=payload.get("amount_or_percent"),
        timestamp=payload.get("timestamp"),
        reason=payload.get("reason"),
        execution_profile=profile,
        directive_id=directive_id if isinstance(directive_id, str) else None,
        is_fallback=event.get("is_fallback") is True,
    )


def replay_directives(filepath: str, contract: Optional[DirectiveContract] = None) -> List[Directive]:
    """Decoded directives from a session log; invalid entries are skipped."""
    directives: List[Directive] = []
    for event in replay_session(filepath, event_types=("DIRECTIVE",)):
        try:
            directives.append(decode_directive(event, contract))
        except ValueError as exc:
            logger.warning("replay: dropping directive from %s: %s", filepath, exc)
    return directives


def replay_outcomes(filepath: str) -> List[OutcomeEvent]:
    """Logged outcomes with a finite arm and reward, in file order."""
    outcomes: List[OutcomeEvent] = []
    for event in replay_session(filepath, event_types=("OUTCOME",)):
        arm, reward = _finite_float(event.get("arm")), _finite_float(event.get("reward"))
        if arm is None or reward is None:
            continue
        trials = event.get("trials")
        if isinstance(trials, bool) or not isinstance(trials, int):
            trials = 0
        outcomes.append(OutcomeEvent(arm, reward, trials))
    return outcomes
