#!/usr/bin/env python3
"""Replay a recorded proctoring event stream on virtual time.

Reads a JSON-lines event file (see examguard.bootstrap.replay for the
format), runs it against a fresh session controller with in-memory
collaborators and prints a JSON summary: final state, ledger, transitions
and the collaborator calls that were made.

Policy values come from EXAM_* environment variables (a .env file is loaded
if present); command-line flags override them.

Usage:
    python scripts/replay_session.py events.jsonl
    python scripts/replay_session.py events.jsonl --threshold 5 --run-out-clock
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from examguard.bootstrap.replay import parse_event_lines, replay_session  # noqa: E402
from examguard.config.session_policy_config import SessionPolicyConfig  # noqa: E402
from examguard.infrastructure.observability import configure_structlog  # noqa: E402


def _build_config(args: argparse.Namespace) -> SessionPolicyConfig:
    config = SessionPolicyConfig.from_environment()
    overrides = {}
    if args.duration is not None:
        overrides["total_duration_seconds"] = args.duration
    if args.threshold is not None:
        overrides["violation_threshold"] = args.threshold
    if args.count_focus_loss:
        overrides["count_focus_loss_as_violation"] = True
    return dataclasses.replace(config, **overrides) if overrides else config


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Replay a proctoring event stream against a session controller."
    )
    parser.add_argument("events", type=Path, help="JSON-lines event file")
    parser.add_argument("--session-id", default="replay", help="Session id for logs")
    parser.add_argument("--duration", type=int, help="Total session seconds")
    parser.add_argument("--threshold", type=int, help="Violation threshold")
    parser.add_argument(
        "--count-focus-loss",
        action="store_true",
        help="Also count focus loss as a violation",
    )
    parser.add_argument(
        "--run-out-clock",
        action="store_true",
        help="Advance time after the last event until the session clock expires",
    )
    parser.add_argument(
        "--log-format",
        choices=("production", "development"),
        default="development",
        help="JSON logs (production) or console logs (development)",
    )
    args = parser.parse_args()

    if not args.events.exists():
        print(f"Event file not found: {args.events}", file=sys.stderr)
        sys.exit(1)

    configure_structlog(environment=args.log_format)

    try:
        config = _build_config(args)
        with open(args.events, encoding="utf-8") as f:
            events = parse_event_lines(f)
    except ValueError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        sys.exit(2)

    run = asyncio.run(
        replay_session(
            events,
            config=config,
            session_id=args.session_id,
            run_out_clock=args.run_out_clock,
        )
    )
    print(json.dumps(run.summary(), indent=2))


if __name__ == "__main__":
    main()
