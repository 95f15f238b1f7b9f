import unittest

from revision_routing.contracts import Decision
from revision_routing.serialize import decision_to_dict, revision_input_from_dict


class TestDecisionToDict(unittest.TestCase):
    def test_channels_are_sorted(self) -> None:
        decision = Decision(
            channels=frozenset({"b", "a"}),
            expiry="2022-06-23T05:00:00+01:00",
            short_circuited=False,
            reasons=("prior_revision_present",),
        )
        self.assertEqual(
            decision_to_dict(decision),
            {
                "channels": ["a", "b"],
                "expiry": "2022-06-23T05:00:00+01:00",
                "short_circuited": False,
                "path": "normal",
                "reasons": ["prior_revision_present"],
            },
        )

    def test_empty_decision(self) -> None:
        payload = decision_to_dict(Decision())
        self.assertEqual(payload["channels"], [])
        self.assertIsNone(payload["expiry"])
        self.assertEqual(payload["reasons"], [])


class TestRevisionInputFromDict(unittest.TestCase):
    def test_camel_case_old_doc(self) -> None:
        revision = revision_input_from_dict(
            {"doc": {"channels": "a"}, "oldDoc": {"channels": "b"}, "meta": {"rev": "2-x"}}
        )
        self.assertEqual(revision.doc, {"channels": "a"})
        self.assertEqual(revision.old_doc, {"channels": "b"})
        self.assertEqual(revision.meta, {"rev": "2-x"})

    def test_snake_case_alias_and_defaults(self) -> None:
        revision = revision_input_from_dict({"doc": {}, "old_doc": {"a": 1}})
        self.assertEqual(revision.old_doc, {"a": 1})
        self.assertEqual(revision.meta, {})
        self.assertIsNone(revision_input_from_dict({"doc": {}, "oldDoc": None}).old_doc)

    def test_invalid_shapes_fail(self) -> None:
        for payload in [
            [],
            {},
            {"doc": "x"},
            {"doc": {}, "oldDoc": 5},
            {"doc": {}, "meta": "rev"},
        ]:
            with self.subTest(payload=payload):
                with self.assertRaises(ValueError):
                    revision_input_from_dict(payload)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
