from .clock import Clock, FixedClock, SystemClock, format_timestamp, parse_timestamp_ms
from .config import ResurrectionPolicy, validate_policy
from .contracts import Decision
from .evaluation import RoutingAssessment, RoutingDecisionEngine, evaluate
from .hook import SyncHook
from .observability import NullLogger, NullMetrics, Observability, StdlibLogger

__all__ = [
    "Clock",
    "Decision",
    "FixedClock",
    "NullLogger",
    "NullMetrics",
    "Observability",
    "ResurrectionPolicy",
    "RoutingAssessment",
    "RoutingDecisionEngine",
    "StdlibLogger",
    "SyncHook",
    "SystemClock",
    "evaluate",
    "format_timestamp",
    "parse_timestamp_ms",
    "validate_policy",
]
