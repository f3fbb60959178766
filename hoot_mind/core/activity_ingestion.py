"""Activity normalization and validation for HOOT MIND."""

import math
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config.thresholds import MIN_TIMESTAMP
from ..models.events import ActivityRecord

_MAX_FUTURE_DRIFT = 60  # Allow 60s clock drift


class ActivityValidationError(ValueError):
    """Raised when a raw activity record fails validation."""


def _optional_float(raw_data: Dict[str, Any], key: str) -> Optional[float]:
    value = raw_data.get(key)
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ActivityValidationError(f"{key} is not numeric: {value!r}")
    if not math.isfinite(number):
        raise ActivityValidationError(f"{key} is not finite: {value!r}")
    return number


def normalize_activity(raw_data: Dict[str, Any], now: Optional[int] = None) -> ActivityRecord:
    """Validate and normalize a raw activity dict into an ActivityRecord.

    Args:
        raw_data: Dict with keys: from_wallet, to_wallet, amount, timestamp,
                  and optionally side, price_change_percent, wallet_balance,
                  signature. When side is missing a negative amount means sell.
        now: Reference time for the future-drift check (defaults to wallclock).

    Returns:
        Validated ActivityRecord.

    Raises:
        ActivityValidationError: If any field is missing or invalid.
    """
    required_keys = {"from_wallet", "to_wallet", "amount", "timestamp"}
    missing = required_keys - set(raw_data.keys())
    if missing:
        raise ActivityValidationError(f"Missing required fields: {sorted(missing)}")

    from_wallet = str(raw_data["from_wallet"] or "")
    to_wallet = str(raw_data["to_wallet"] or "")
    if not from_wallet and not to_wallet:
        raise ActivityValidationError("Record has neither sender nor receiver")

    try:
        amount = float(raw_data["amount"])
    except (TypeError, ValueError):
        raise ActivityValidationError(f"Amount is not numeric: {raw_data['amount']!r}")
    if not math.isfinite(amount):
        raise ActivityValidationError(f"Amount is not finite: {amount}")

    side = raw_data.get("side")
    if side is None:
        side = "sell" if amount < 0 else "buy"
    side = str(side).lower()
    if side not in ("buy", "sell"):
        raise ActivityValidationError(f"Invalid side: {side!r} (expected 'buy' or 'sell')")
    amount = abs(amount)

    try:
        timestamp = int(raw_data["timestamp"])
    except (TypeError, ValueError, OverflowError):
        raise ActivityValidationError(f"Timestamp is not an integer: {raw_data['timestamp']!r}")
    if now is None:
        now = int(time.time())
    if timestamp < MIN_TIMESTAMP:
        raise ActivityValidationError(f"Timestamp too old: {timestamp} (min {MIN_TIMESTAMP})")
    if timestamp > now + _MAX_FUTURE_DRIFT:
        raise ActivityValidationError(f"Timestamp too far in future: {timestamp} (now {now})")

    balance = _optional_float(raw_data, "wallet_balance")
    if balance is not None and balance < 0:
        raise ActivityValidationError(f"Wallet balance must be >= 0, got {balance}")

    signature = raw_data.get("signature")

    return ActivityRecord(
        from_wallet=from_wallet,
        to_wallet=to_wallet,
        amount=amount,
        side=side,
        timestamp=timestamp,
        price_change_percent=_optional_float(raw_data, "price_change_percent"),
        wallet_balance=balance,
        signature=str(signature) if signature else None,
    )


def normalize_batch(
    raw_records: Iterable[Dict[str, Any]],
    now: Optional[int] = None,
) -> Tuple[List[ActivityRecord], int]:
    """Normalize a batch, skipping invalid rows.

    Returns:
        (valid_records, rejected_count)
    """
    records: List[ActivityRecord] = []
    rejected = 0
    for raw in raw_records:
        if not isinstance(raw, dict):
            rejected += 1
            continue
        try:
            records.append(normalize_activity(raw, now=now))
        except ActivityValidationError:
            rejected += 1
    return records, rejected


def wallet_amounts(records: Iterable[ActivityRecord], mode: str = "absolute") -> List[Tuple[str, float]]:
    """Per-record (participant, amount) pairs for tier classification.

    mode "absolute" uses trade sizes; "net" counts sells negative.
    """
    pairs: List[Tuple[str, float]] = []
    for record in records:
        amount = record.amount
        if mode == "net" and record.side == "sell":
            amount = -amount
        pairs.append((record.wallet, amount))
    return pairs


def transfer_pairs(records: Iterable[ActivityRecord]) -> List[Tuple[str, float]]:
    """(destination, amount) pairs for concentration analysis."""
    return [(record.to_wallet, record.amount) for record in records]
