"""Core logic for HOOT MIND."""
from .activity_ingestion import ActivityValidationError, normalize_activity, normalize_batch
from .wallet_profiler import WalletProfiler
from .concentration import ConcentrationAnalyzer
from .herd_sentiment import HerdSentimentAnalyzer
from .dev_exhaustion import DevExhaustionDetector
from .panic_sell import PanicSellDetector
from .liquidity_cycles import LiquidityCycleMapper, RegionalLiquidityMapper
from .market_flow import MarketFlowAnalyzer
from .survivability import SurvivabilityAggregator
from .threshold_tuner import AdaptiveThresholdTuner
from .directive_contract import DirectiveBuilder, DirectiveContract, DirectiveContractError

__all__ = [
    "ActivityValidationError",
    "normalize_activity",
    "normalize_batch",
    "WalletProfiler",
    "ConcentrationAnalyzer",
    "HerdSentimentAnalyzer",
    "DevExhaustionDetector",
    "PanicSellDetector",
    "LiquidityCycleMapper",
    "RegionalLiquidityMapper",
    "MarketFlowAnalyzer",
    "SurvivabilityAggregator",
    "AdaptiveThresholdTuner",
    "DirectiveBuilder",
    "DirectiveContract",
    "DirectiveContractError",
]
