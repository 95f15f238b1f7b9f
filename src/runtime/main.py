from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable, Sequence
from typing import TextIO

from revision_routing.clock import Clock, FixedClock, SystemClock, parse_timestamp_ms
from revision_routing.config import ResurrectionPolicy
from revision_routing.config.loader import load_default_policy, load_policy_file
from revision_routing.contracts import Decision
from revision_routing.hook import SyncHook
from revision_routing.observability import Observability
from revision_routing.serialize import decision_to_dict, revision_input_from_dict
from runtime.observability import bootstrap_observability


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="revision-router",
        description="Replay document revisions (JSON Lines) through the routing hook.",
    )
    parser.add_argument("--input", help="JSONL file of {doc, oldDoc, meta}; stdin when omitted")
    parser.add_argument("--now", help="evaluation time as ISO-8601 with offset; wall clock when omitted")
    parser.add_argument("--profile", help="profile from the packaged policy config")
    parser.add_argument("--policy", help="YAML policy file to use instead of the packaged one")
    parser.add_argument("--log-dir", help="write structured logs to this directory")
    return parser.parse_args(argv)


def _load_policy(args: argparse.Namespace) -> ResurrectionPolicy:
    if args.policy:
        return load_policy_file(args.policy, profile=args.profile)
    return load_default_policy(profile=args.profile)


def _build_clock(now: str | None) -> Clock:
    if now is None:
        return SystemClock()
    now_ms = parse_timestamp_ms(now)
    if now_ms is None:
        raise ValueError(f"--now must be ISO-8601 with a UTC offset, got {now!r}")
    return FixedClock(now_ms)


def replay(
    lines: Iterable[str],
    *,
    hook: SyncHook,
    out: TextIO,
) -> list[Decision]:
    decisions: list[Decision] = []
    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            payload = json.loads(line)
            revision = revision_input_from_dict(payload)
        except ValueError as exc:
            raise ValueError(f"line {line_no}: {exc}") from exc
        decision = hook(revision.doc, revision.old_doc, revision.meta)
        out.write(json.dumps(decision_to_dict(decision), sort_keys=True) + "\n")
        decisions.append(decision)
    return decisions


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        policy = _load_policy(args)
        clock = _build_clock(args.now)
    except (OSError, ValueError) as exc:
        print(f"revision-router: {exc}", file=sys.stderr)
        return 2
    observability: Observability = bootstrap_observability(log_dir=args.log_dir)
    hook = SyncHook(policy=policy, clock=clock, observability=observability)
    try:
        if args.input:
            with open(args.input, encoding="utf-8") as handle:
                replay(handle, hook=hook, out=sys.stdout)
        else:
            replay(sys.stdin, hook=hook, out=sys.stdout)
    except (OSError, ValueError) as exc:
        print(f"revision-router: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
