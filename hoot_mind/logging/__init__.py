"""Session logging for HOOT MIND."""
from .session_logger import LOG_LEVELS, SessionLogger
from .log_replay import (
    EVENT_TYPES,
    OutcomeEvent,
    decode_directive,
    filter_events,
    replay_directives,
    replay_outcomes,
    replay_session,
)

__all__ = [
    "EVENT_TYPES",
    "LOG_LEVELS",
    "OutcomeEvent",
    "SessionLogger",
    "decode_directive",
    "filter_events",
    "replay_directives",
    "replay_outcomes",
    "replay_session",
]
