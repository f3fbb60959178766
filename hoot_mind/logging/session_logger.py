"""JSONL session logger for HOOT MIND."""

import json
import re
import time
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from ..models.directive import Directive
from ..models.events import ActivityRecord
from ..models.reports import SurvivabilityReport
from ..config.thresholds import LOG_LEVEL_DEFAULT, LOG_DIR

LOG_LEVELS = ("FULL", "DIRECTIVES_ONLY")

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class SessionLogger:
    """Writes run events to a JSONL file.

    In DIRECTIVES_ONLY mode (default), only run start/end, directives and
    outcomes are logged. In FULL mode, every activity record and the full
    survivability report are also logged.
    """

    def __init__(
        self,
        target_asset: str,
        log_level: str = LOG_LEVEL_DEFAULT,
        output_dir: str = LOG_DIR,
    ) -> None:
        if log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {log_level!r}")
        self.target_asset = target_asset
        self.log_level = log_level
        self._dir = Path(output_dir)
        self._dir.mkdir(parents=True, exist_ok=True)

        ts = int(time.time())
        # Asset names come from callers; keep them inside output_dir.
        safe_asset = _UNSAFE_FILENAME_CHARS.sub("_", str(target_asset))[:64] or "unknown"
        filename = f"hoot_mind_session_{safe_asset}_{ts}.jsonl"
        self._filepath = self._dir / filename
        self._file: Optional[TextIO] = open(self._filepath, "a", encoding="utf-8")

    def _write_line(self, data: Dict[str, Any]) -> None:
        if self._file and not self._file.closed:
            self._file.write(json.dumps(data, separators=(",", ":")) + "\n")
            self._file.flush()

    @property
    def full(self) -> bool:
        return self.log_level == "FULL"

    def log_run_start(self, config: Dict[str, Any]) -> None:
        """Log run start (always logged regardless of level)."""
        self._write_line({
            "event_type": "RUN_START",
            "timestamp": int(time.time()),
            "target_asset": self.target_asset,
            "config": config,
        })

    def log_activity(self, record: ActivityRecord) -> None:
        """Log one activity record (only in FULL mode)."""
        if not self.full:
            return
        self._write_line({
            "event_type": "ACTIVITY",
            "timestamp": record.timestamp,
            "wallet": record.wallet,
            "side": record.side,
            "amount": record.amount,
            "price_change_percent": record.price_change_percent,
            "signature": record.signature,
        })

    def log_report(self, report: SurvivabilityReport) -> None:
        """Log the survivability report (only in FULL mode)."""
        if not self.full:
            return
        self._write_line({
            "event_type": "REPORT",
            "timestamp": int(time.time()),
            "target_asset": self.target_asset,
            "report": report.snapshot(),
        })

    def log_directive(self, directive: Directive) -> None:
        self._write_line({
            "event_type": "DIRECTIVE",
            "timestamp": directive.timestamp,
            "is_fallback": directive.is_fallback,
            "directive": directive.to_dict(),
        })

    def log_outcome(self, arm: float, reward: float, trials: int) -> None:
        self._write_line({
            "event_type": "OUTCOME",
            "timestamp": int(time.time()),
            "arm": arm,
            "reward": reward,
            "trials": trials,
        })

    def log_run_end(self, reason: str) -> None:
        """Log run end and close the file."""
        try:
            self._write_line({
                "event_type": "RUN_END",
                "timestamp": int(time.time()),
                "reason": reason,
            })
        finally:
            self.close()

    def close(self) -> None:
        if self._file and not self._file.closed:
            self._file.close()

    @property
    def filepath(self) -> Path:
        """Return the path to the log file."""
        return self._filepath
