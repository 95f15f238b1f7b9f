from __future__ import annotations

from .clock import Clock, SystemClock
from .config import ResurrectionPolicy
from .contracts import Decision, DocumentRevision, PriorRevision, RevisionMetadata
from .evaluation import RoutingDecisionEngine
from .observability import Observability


class SyncHook:
    """Host-facing entry point invoked once per accepted revision.

    Logs the raw inputs, reads the clock once, evaluates and reports the
    decision. The host applies ``channels``/``expiry`` and skips its own
    routing when ``short_circuited`` is set.
    """

    def __init__(
        self,
        *,
        policy: ResurrectionPolicy,
        clock: Clock | None = None,
        observability: Observability | None = None,
    ) -> None:
        self._engine = RoutingDecisionEngine(policy=policy)
        self._clock = clock or SystemClock()
        self._observability = observability or Observability.null()

    @property
    def engine(self) -> RoutingDecisionEngine:
        return self._engine

    def __call__(
        self,
        doc: DocumentRevision,
        old_doc: PriorRevision,
        meta: RevisionMetadata | None,
    ) -> Decision:
        self._observability.log_revision_received(doc, old_doc, meta)
        now_ms = self._clock.now_ms()
        assessment = self._engine.assess(doc, old_doc, meta, now_ms=now_ms)
        decision = assessment.decision
        self._observability.log_decision(decision, age_ms=assessment.orphan_age_ms)
        self._observability.record_metrics(decision, age_ms=assessment.orphan_age_ms)
        return decision
