"""Input data models for HOOT MIND."""

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple


@dataclass(frozen=True)
class ActivityRecord:
    """One observed transfer/trade for the analysed asset."""

    from_wallet: str
    to_wallet: str
    amount: float  # Token units, always >= 0
    side: Literal["buy", "sell"]
    timestamp: int  # Unix epoch seconds (UTC)
    price_change_percent: Optional[float] = None  # Since the participant's entry
    wallet_balance: Optional[float] = None  # Participant's total token balance
    signature: Optional[str] = None

    @property
    def wallet(self) -> str:
        """Participant wallet: the receiver of a buy, the sender of a sell."""
        return self.to_wallet if self.side == "buy" else self.from_wallet


@dataclass(frozen=True)
class DevWalletRecord:
    """Creator/privileged wallet with a trusted initial allocation."""

    address: str
    initial_balance: float
    current_balance: Optional[float] = None
    outgoing_sum: Optional[float] = None


@dataclass(frozen=True)
class AnalysisBatch:
    """Everything one pipeline run consumes.

    `timestamps` defaults to the record timestamps when left empty.
    """

    target_asset: str
    records: Tuple[ActivityRecord, ...] = ()
    dev_wallets: Tuple[DevWalletRecord, ...] = ()
    liquidity_samples: Tuple[float, ...] = ()
    timestamps: Tuple[int, ...] = field(default=())

    def activity_timestamps(self) -> Tuple[int, ...]:
        if self.timestamps:
            return tuple(self.timestamps)
        return tuple(r.timestamp for r in self.records)
