"""Data models for HOOT MIND."""
from .events import ActivityRecord, AnalysisBatch, DevWalletRecord
from .reports import (
    ConcentrationDepth,
    ConcentrationReport,
    DevExhaustionReport,
    HerdSentimentReport,
    LiquidityCycleReport,
    MarketFlowReport,
    PanicReport,
    RegionalLiquidityReport,
    SignalSnapshot,
    SurvivabilityReport,
    TradeSuggestion,
    WalletTierProfile,
)
from .bandit_state import ArmStats, BanditState
from .directive import Directive, ExecutionProfile

__all__ = [
    "ActivityRecord",
    "AnalysisBatch",
    "DevWalletRecord",
    "ConcentrationDepth",
    "ConcentrationReport",
    "DevExhaustionReport",
    "HerdSentimentReport",
    "LiquidityCycleReport",
    "MarketFlowReport",
    "PanicReport",
    "RegionalLiquidityReport",
    "SignalSnapshot",
    "SurvivabilityReport",
    "TradeSuggestion",
    "WalletTierProfile",
    "ArmStats",
    "BanditState",
    "Directive",
    "ExecutionProfile",
]
