from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from .contracts import (
    Decision,
    DocumentRevision,
    PriorRevision,
    RevisionMetadata,
)


class StructuredLogger(Protocol):
    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None: ...


class MetricsRecorder(Protocol):
    def increment(
        self, name: str, value: int = 1, tags: Mapping[str, str] | None = None
    ) -> None: ...

    def observe(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None: ...

    def gauge(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None: ...


@dataclass(frozen=True)
class StdlibLogger:
    logger: logging.Logger

    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None:
        self.logger.log(level, message, extra={"fields": dict(fields)})


@dataclass(frozen=True)
class NullLogger:
    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None:
        return None


@dataclass(frozen=True)
class NullMetrics:
    def increment(
        self, name: str, value: int = 1, tags: Mapping[str, str] | None = None
    ) -> None:
        return None

    def observe(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None:
        return None

    def gauge(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None:
        return None


@dataclass(frozen=True)
class Observability:
    logger: StructuredLogger
    metrics: MetricsRecorder

    @classmethod
    def null(cls) -> Observability:
        return cls(logger=NullLogger(), metrics=NullMetrics())

    def log_revision_received(
        self,
        doc: DocumentRevision,
        old_doc: PriorRevision,
        meta: RevisionMetadata | None,
    ) -> None:
        self.logger.log(
            logging.INFO,
            "revision_routing.revision_received",
            {
                "doc": _as_field(doc),
                "old_doc": _as_field(old_doc),
                "meta": _as_field(meta),
            },
        )

    def log_decision(self, decision: Decision, *, age_ms: int | None = None) -> None:
        fields: dict[str, object] = {
            "path": decision.path,
            "channels": sorted(decision.channels),
            "expiry": decision.expiry,
            "short_circuited": decision.short_circuited,
            "reasons": list(decision.reasons),
        }
        if age_ms is not None:
            fields["age_ms"] = age_ms
        level = logging.WARNING if decision.short_circuited else logging.INFO
        self.logger.log(level, "revision_routing.decision", fields)

    def record_metrics(self, decision: Decision, *, age_ms: int | None = None) -> None:
        self.metrics.increment("revision_routing.decisions", tags={"path": decision.path})
        for reason in decision.reasons:
            self.metrics.increment("revision_routing.reasons", tags={"reason": reason})
        if age_ms is not None:
            self.metrics.observe(
                "revision_routing.orphan_age_ms",
                float(age_ms),
                tags={"path": decision.path},
            )


def _as_field(value: object) -> object:
    if isinstance(value, Mapping):
        return dict(value)
    return value
