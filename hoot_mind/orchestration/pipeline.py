"""Run orchestration for HOOT MIND.

One run turns an AnalysisBatch into exactly one validated Directive:

1. Analyzers (tiers, concentration, herd, dev, panic, cycles, regions, flow)
2. Survivability aggregation against the tuner-selected threshold
3. Directive contract (fail-closed WAIT fallback)
4. Session logging

Outcomes are fed back later through record_outcome(), which updates the
persisted bandit state in one read-modify-write transaction.
"""

import dataclasses
import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from ..config.settings import MindConfig, load_config
from ..core.activity_ingestion import normalize_batch, transfer_pairs, wallet_amounts
from ..core.concentration import ConcentrationAnalyzer
from ..core.dev_exhaustion import DevExhaustionDetector
from ..core.directive_contract import DirectiveBuilder, DirectiveContract
from ..core.herd_sentiment import HerdSentimentAnalyzer
from ..core.liquidity_cycles import LiquidityCycleMapper, RegionalLiquidityMapper
from ..core.market_flow import MarketFlowAnalyzer
from ..core.panic_sell import PanicSellDetector
from ..core.survivability import SurvivabilityAggregator
from ..core.threshold_tuner import AdaptiveThresholdTuner
from ..core.wallet_profiler import WalletProfiler
from ..logging import log_replay
from ..logging.session_logger import SessionLogger
from ..models.bandit_state import BanditState
from ..models.directive import Directive
from ..models.events import AnalysisBatch
from ..models.reports import SignalSnapshot, SurvivabilityReport
from ..persistence.bandit_store import BanditStateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    directive: Directive
    report: Optional[SurvivabilityReport]  # None when analysis failed
    threshold: float


class MindPipeline:
    """Wires analyzers, aggregator, tuner and contract into one run."""

    def __init__(
        self,
        config: Optional[MindConfig] = None,
        store: Optional[BanditStateStore] = None,
        session_logger: Optional[SessionLogger] = None,
        rng: Optional[random.Random] = None,
        parallel: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or MindConfig()
        self.store = store
        self.session_logger = session_logger
        self.parallel = parallel

        tiers = self.config.tiers
        scoring = self.config.scoring
        tuner = self.config.tuner

        self.profiler = WalletProfiler(tiers.small_max, tiers.medium_max)
        self.concentration = ConcentrationAnalyzer()
        self.herd = HerdSentimentAnalyzer(tiers.small_max)
        self.dev = DevExhaustionDetector(self.config.dev_exhaustion_pct)
        self.panic = PanicSellDetector(small_max=tiers.small_max)
        self.cycles = LiquidityCycleMapper()
        self.regions = RegionalLiquidityMapper()
        self.flow = MarketFlowAnalyzer()
        self.aggregator = SurvivabilityAggregator(scoring)
        self.tuner = AdaptiveThresholdTuner(tuner.arms, tuner.epsilon, tuner.decay, rng=rng)
        self.builder = DirectiveBuilder(DirectiveContract(self.config.directive), clock=clock)

        # Used when no store is attached, or as the tuner's in-process view
        self._state: BanditState = self.tuner.initial_state()

        if self.session_logger:
            self.session_logger.log_run_start(dataclasses.asdict(self.config))

    @classmethod
    def from_config(
        cls,
        config_path: Optional[str] = None,
        target_asset: Optional[str] = None,
        rng: Optional[random.Random] = None,
        parallel: bool = False,
    ) -> "MindPipeline":
        """Build a pipeline with a file-backed store and, when a target asset
        is given, a session logger."""
        config = load_config(config_path)
        store = BanditStateStore(config.tuner.state_path, arms=config.tuner.arms)
        session_logger = None
        if target_asset:
            session_logger = SessionLogger(
                target_asset,
                log_level=config.logging.log_level,
                output_dir=config.logging.log_dir,
            )
        return cls(config, store=store, session_logger=session_logger, rng=rng, parallel=parallel)

    # --- Analysis ---

    def _tasks(self, batch: AnalysisBatch) -> Dict[str, Callable[[], Any]]:
        records = batch.records
        timestamps = batch.activity_timestamps()
        mode = self.config.tiers.amount_mode
        return {
            "tiers": lambda: self.profiler.profile(wallet_amounts(records, mode=mode)),
            "concentration": lambda: self.concentration.analyze(transfer_pairs(records)),
            "herd": lambda: self.herd.analyze(records),
            "dev": lambda: self.dev.detect(batch.dev_wallets, records),
            "panic": lambda: self.panic.detect(records),
            "cycles": lambda: self.cycles.map(timestamps),
            "regions": lambda: self.regions.map(timestamps),
            "flow": lambda: self.flow.analyze(batch.liquidity_samples),
        }

    def analyze(self, batch: AnalysisBatch) -> SignalSnapshot:
        """Run every analyzer over the batch."""
        tasks = self._tasks(batch)
        if self.parallel:
            with ThreadPoolExecutor(max_workers=len(tasks)) as pool:
                futures = {name: pool.submit(fn) for name, fn in tasks.items()}
                results = {name: future.result() for name, future in futures.items()}
        else:
            results = {name: fn() for name, fn in tasks.items()}
        return SignalSnapshot(record_count=len(batch.records), **results)

    # --- Tuner state ---

    def current_state(self) -> BanditState:
        if self.store is None:
            return self._state
        self._state = self.store.current(self.tuner.initial_state)
        return self._state

    def record_outcome(self, arm: float, reward: float) -> BanditState:
        """Fold a realised reward into the arm that produced a directive.

        Raises:
            ValueError: If the arm is unknown or the reward is not finite.
        """
        def mutate(state: BanditState) -> BanditState:
            return self.tuner.record_outcome(state, arm, reward)

        if self.store is None:
            self._state = mutate(self._state)
        else:
            self._state = self.store.update(mutate, self.tuner.initial_state)

        if self.session_logger:
            try:
                self.session_logger.log_outcome(float(arm), float(reward), self._state.stats(float(arm)).trials)
            except (OSError, ValueError):
                logger.exception("session logging failed for outcome on arm %s", arm)
        logger.debug("outcome recorded: arm=%s reward=%s", arm, reward)
        return self._state

    def replay_outcomes(self, filepath: str) -> BanditState:
        """Fold the outcomes logged in a session file into tuner state.

        Used to rebuild a lost or reset state file from session logs.
        Outcomes for arms outside the current configuration are skipped.
        Nothing is written to this pipeline's own session log.
        """
        outcomes = [o for o in log_replay.replay_outcomes(filepath) if o.arm in self.tuner.arms]

        def mutate(state: BanditState) -> BanditState:
            for outcome in outcomes:
                state = self.tuner.record_outcome(state, outcome.arm, outcome.reward)
            return state

        if self.store is None:
            self._state = mutate(self._state)
        else:
            self._state = self.store.update(mutate, self.tuner.initial_state)
        logger.info("replayed %d outcomes from %s", len(outcomes), filepath)
        return self._state

    # --- Runs ---

    def run(self, batch: AnalysisBatch) -> PipelineResult:
        """Produce exactly one Directive for the batch. Never raises."""
        threshold = self.tuner.best_arm(self._state)
        try:
            snapshot = self.analyze(batch)
            threshold = self.tuner.select_threshold(self.current_state())
            report = self.aggregator.aggregate(snapshot, threshold)
        except Exception as exc:  # run boundary: always hand back a directive
            logger.exception("analysis failed for %s", batch.target_asset)
            directive = self.builder.fallback(
                batch.target_asset,
                f"WAIT fallback, analysis failed: {type(exc).__name__}",
            )
            self._log_run(batch, None, directive)
            return PipelineResult(directive=directive, report=None, threshold=threshold)

        directive = self.builder.build(report.suggestion, batch.target_asset, report)
        if directive.is_fallback:
            logger.warning("directive fell back to WAIT: %s", directive.reason)
        self._log_run(batch, report, directive)
        return PipelineResult(directive=directive, report=report, threshold=threshold)

    def run_raw(
        self,
        raw_records: Iterable[Dict[str, Any]],
        target_asset: str,
        **batch_fields: Any,
    ) -> PipelineResult:
        """Normalize raw activity dicts, then run. Invalid rows are skipped."""
        records, rejected = normalize_batch(raw_records)
        if rejected:
            logger.info("skipped %d invalid activity records", rejected)
        batch = AnalysisBatch(target_asset=target_asset, records=tuple(records), **batch_fields)
        return self.run(batch)

    def _log_run(
        self,
        batch: AnalysisBatch,
        report: Optional[SurvivabilityReport],
        directive: Directive,
    ) -> None:
        if not self.session_logger:
            return
        try:
            for record in batch.records:
                self.session_logger.log_activity(record)
            if report is not None:
                self.session_logger.log_report(report)
            self.session_logger.log_directive(directive)
        except (OSError, ValueError):
            # Closed or full log file; the directive is still returned.
            logger.exception("session logging failed for %s", batch.target_asset)

    def close(self, reason: str = "complete") -> None:
        if self.session_logger:
            try:
                self.session_logger.log_run_end(reason)
            except (OSError, ValueError):
                logger.exception("session logging failed at close")
