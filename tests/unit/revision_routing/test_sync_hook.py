import logging
import unittest
from collections.abc import Mapping

from revision_routing import FixedClock, Observability, ResurrectionPolicy, SyncHook
from revision_routing.clock import format_timestamp
from revision_routing.observability import NullLogger, NullMetrics, StdlibLogger

_NOW_MS = 1_709_294_400_000
_HOUR_MS = 3_600_000


class FakeLogger:
    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    def log(self, level: int, message: str, fields: Mapping[str, object]) -> None:
        self.calls.append({"level": level, "message": message, "fields": dict(fields)})


class FakeMetrics:
    def __init__(self) -> None:
        self.increments: list[tuple[str, int, Mapping[str, str] | None]] = []
        self.observations: list[tuple[str, float, Mapping[str, str] | None]] = []

    def increment(
        self, name: str, value: int = 1, tags: Mapping[str, str] | None = None
    ) -> None:
        self.increments.append((name, value, tags))

    def observe(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None:
        self.observations.append((name, value, tags))

    def gauge(
        self, name: str, value: float, tags: Mapping[str, str] | None = None
    ) -> None:
        return None


class CountingClock:
    def __init__(self, now_ms: int) -> None:
        self.reads = 0
        self._now_ms = now_ms

    def now_ms(self) -> int:
        self.reads += 1
        return self._now_ms


def _policy() -> ResurrectionPolicy:
    return ResurrectionPolicy(window_ms=_HOUR_MS, soft_delete_channel="soft_deleted", soft_delete_ttl_s=300)


class TestSyncHook(unittest.TestCase):
    def setUp(self) -> None:
        self.logger = FakeLogger()
        self.metrics = FakeMetrics()
        self.clock = CountingClock(_NOW_MS)
        self.hook = SyncHook(
            policy=_policy(),
            clock=self.clock,
            observability=Observability(logger=self.logger, metrics=self.metrics),
        )

    def test_logs_inputs_then_decision(self) -> None:
        doc = {"channels": ["public"], "expiry": 60}
        decision = self.hook(doc, None, {"rev": "1-abc"})

        self.assertEqual(decision.channels, frozenset({"public"}))
        self.assertEqual(self.clock.reads, 1)
        messages = [call["message"] for call in self.logger.calls]
        self.assertEqual(
            messages,
            ["revision_routing.revision_received", "revision_routing.decision"],
        )
        received = self.logger.calls[0]["fields"]
        self.assertEqual(received, {"doc": doc, "old_doc": None, "meta": {"rev": "1-abc"}})
        decided = self.logger.calls[1]
        self.assertEqual(decided["level"], logging.INFO)
        self.assertEqual(
            decided["fields"],
            {
                "path": "normal",
                "channels": ["public"],
                "expiry": 60,
                "short_circuited": False,
                "reasons": ["updated_at_missing"],
            },
        )

    def test_soft_delete_decision_logs_warning_with_age(self) -> None:
        doc = {"updatedAt": format_timestamp(_NOW_MS - 2 * _HOUR_MS)}
        decision = self.hook(doc, None, {})

        self.assertTrue(decision.short_circuited)
        decided = self.logger.calls[-1]
        self.assertEqual(decided["level"], logging.WARNING)
        self.assertEqual(decided["fields"]["age_ms"], 2 * _HOUR_MS)  # type: ignore[index]
        self.assertIn(
            ("revision_routing.decisions", 1, {"path": "soft_delete"}),
            self.metrics.increments,
        )
        self.assertIn(
            ("revision_routing.reasons", 1, {"reason": "resurrection_window_exceeded"}),
            self.metrics.increments,
        )
        self.assertEqual(
            self.metrics.observations,
            [("revision_routing.orphan_age_ms", float(2 * _HOUR_MS), {"path": "soft_delete"})],
        )

    def test_prior_revision_records_no_age(self) -> None:
        doc = {"updatedAt": format_timestamp(_NOW_MS - 2 * _HOUR_MS)}
        decision = self.hook(doc, {"channels": ["a"]}, {})

        self.assertFalse(decision.short_circuited)
        self.assertNotIn("age_ms", self.logger.calls[-1]["fields"])  # type: ignore[operator]
        self.assertEqual(self.metrics.observations, [])

    def test_contract_violation_propagates(self) -> None:
        with self.assertRaises(ValueError):
            self.hook("not-a-doc", None, {})  # type: ignore[arg-type]

    def test_defaults_to_null_observability(self) -> None:
        hook = SyncHook(policy=_policy(), clock=FixedClock(_NOW_MS))
        decision = hook({"channels": "a"}, None, {})
        self.assertEqual(decision.channels, frozenset({"a"}))
        self.assertIsNotNone(hook.engine.policy)


class TestObservability(unittest.TestCase):
    def test_null_collaborators_do_nothing(self) -> None:
        observability = Observability.null()
        self.assertIsInstance(observability.logger, NullLogger)
        self.assertIsInstance(observability.metrics, NullMetrics)

    def test_stdlib_logger_attaches_fields(self) -> None:
        logger = logging.getLogger("revision_routing.tests")
        with self.assertLogs(logger, level="INFO") as captured:
            StdlibLogger(logger).log(logging.INFO, "revision_routing.decision", {"path": "normal"})
        self.assertEqual(len(captured.records), 1)
        self.assertEqual(captured.records[0].fields, {"path": "normal"})  # type: ignore[attr-defined]


if __name__ == "__main__":
    unittest.main()
