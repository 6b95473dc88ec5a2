"""Replay a recorded stream of client events against a session on virtual time.

Each event is a mapping with the simulated time ``at`` (seconds since the
session was built) and an ``event`` name, plus event-specific fields:

    {"at": 0, "event": "start"}
    {"at": 5, "event": "window_blur"}
    {"at": 7, "event": "window_focus"}
    {"at": 9, "event": "violation", "category": "right-click"}
    {"at": 12, "event": "key", "combo": "Ctrl+Shift+I"}
    {"at": 20, "event": "fullscreen_exit"}
    {"at": 24, "event": "return_to_fullscreen"}
    {"at": 30, "event": "answer", "index": 0, "value": 42}
    {"at": 60, "event": "submit"}

Timers (grace periods, the session clock) fire between events exactly as
they would have on a live loop.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from examguard.application.services.session_controller import SessionController
from examguard.bootstrap.session import build_session_controller
from examguard.config.session_policy_config import SessionPolicyConfig
from examguard.domain.models.key_combination import KeyCombination
from examguard.domain.models.violation import ViolationCategory
from examguard.infrastructure.adapters.virtual_time import (
    VirtualClock,
    VirtualTimerScheduler,
)
from examguard.infrastructure.stubs.display_mode_stub import DisplayModeStub
from examguard.infrastructure.stubs.navigator_stub import NavigatorStub
from examguard.infrastructure.stubs.notice_presenter_stub import NoticePresenterStub
from examguard.infrastructure.stubs.session_backend_stub import SessionBackendStub

KNOWN_EVENTS = frozenset(
    {
        "start",
        "submit",
        "window_blur",
        "window_focus",
        "visibility_hidden",
        "visibility_visible",
        "fullscreen_exit",
        "fullscreen_enter",
        "return_to_fullscreen",
        "violation",
        "key",
        "answer",
    }
)


@dataclass(frozen=True)
class ReplayEvent:
    """One recorded client event."""

    at: float
    event: str
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ReplayEvent:
        """Build an event from a decoded JSON object.

        Raises:
            ValueError: If ``at`` or ``event`` is missing or the event is unknown.
        """
        if "at" not in raw or "event" not in raw:
            raise ValueError(f"Replay event needs 'at' and 'event': {dict(raw)!r}")
        name = str(raw["event"])
        if name not in KNOWN_EVENTS:
            raise ValueError(f"Unknown replay event: {name!r}")
        extras = {k: v for k, v in raw.items() if k not in ("at", "event")}
        return cls(at=float(raw["at"]), event=name, fields=extras)


def parse_event_lines(lines: Iterable[str]) -> list[ReplayEvent]:
    """Parse JSON-lines text, skipping blank lines and ``#`` comments."""
    events = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        events.append(ReplayEvent.from_mapping(json.loads(stripped)))
    return sorted(events, key=lambda e: e.at)


@dataclass
class ReplayRun:
    """A controller on virtual time together with its recording stubs."""

    controller: SessionController
    scheduler: VirtualTimerScheduler
    backend: SessionBackendStub
    navigator: NavigatorStub
    presenter: NoticePresenterStub
    display: DisplayModeStub

    def summary(self) -> dict[str, Any]:
        controller = self.controller
        return {
            "session_id": controller.session_id,
            "state": controller.state.value,
            "ended_at": self.scheduler.clock.now(),
            "termination_reason": (
                controller.termination_reason.value
                if controller.termination_reason
                else None
            ),
            "submission_trigger": (
                controller.submission_trigger.value
                if controller.submission_trigger
                else None
            ),
            "ledger": controller.ledger.to_dict(),
            "transitions": [t.to_dict() for t in controller.transitions],
            "navigations": [d.value for d in self.navigator.destinations],
            "submit_calls": self.backend.submit_calls,
            "cleanup_calls": self.backend.cleanup_calls,
            "final_notices": [n.message for n in self.presenter.visible],
            "collaborator_failures": [str(f) for f in controller.collaborator_failures],
        }


def build_replay_run(
    session_id: str = "replay",
    config: SessionPolicyConfig | None = None,
) -> ReplayRun:
    """Build a controller wired to a virtual clock and in-memory stubs."""
    clock = VirtualClock()
    scheduler = VirtualTimerScheduler(clock)
    backend = SessionBackendStub(session_id=session_id)
    navigator = NavigatorStub()
    presenter = NoticePresenterStub()
    display = DisplayModeStub(fullscreen=True)
    controller = build_session_controller(
        session_id,
        config=config or SessionPolicyConfig(),
        backend=backend,
        navigator=navigator,
        presenter=presenter,
        display=display,
        clock=clock,
        scheduler=scheduler,
    )
    return ReplayRun(
        controller=controller,
        scheduler=scheduler,
        backend=backend,
        navigator=navigator,
        presenter=presenter,
        display=display,
    )


async def apply_event(run: ReplayRun, event: ReplayEvent) -> None:
    controller = run.controller
    name = event.event
    if name == "start":
        await controller.prepare()
        await controller.start()
    elif name == "submit":
        await controller.submit()
    elif name == "window_blur":
        await controller.focus_guard.on_window_blur()
    elif name == "window_focus":
        await controller.focus_guard.on_window_focus()
    elif name == "visibility_hidden":
        await controller.focus_guard.on_visibility_hidden()
    elif name == "visibility_visible":
        await controller.focus_guard.on_visibility_visible()
    elif name == "fullscreen_exit":
        await run.display.user_exits_fullscreen()
    elif name == "fullscreen_enter":
        await run.display.request_fullscreen()
    elif name == "return_to_fullscreen":
        await controller.fullscreen_guard.return_to_fullscreen()
    elif name == "violation":
        await controller.report_violation(ViolationCategory(event.fields["category"]))
    elif name == "key":
        await controller.report_key_combination(
            KeyCombination.parse(str(event.fields["combo"]))
        )
    elif name == "answer":
        await controller.record_answer(
            int(event.fields["index"]), event.fields.get("value")
        )


async def replay_session(
    events: Iterable[ReplayEvent],
    *,
    config: SessionPolicyConfig | None = None,
    session_id: str = "replay",
    run_out_clock: bool = False,
) -> ReplayRun:
    """Replay ``events`` in time order.

    Args:
        events: Recorded events.
        config: Session policy for the replay.
        session_id: Identifier used in logs and the summary.
        run_out_clock: After the last event, keep advancing virtual time
            until the session clock expires (if the session is still active).

    Returns:
        The finished run; call ``summary()`` for a report.
    """
    run = build_replay_run(session_id=session_id, config=config)
    for event in sorted(events, key=lambda e: e.at):
        await run.scheduler.run_until(event.at)
        await apply_event(run, event)
    if run_out_clock and not run.controller.state.is_terminal():
        await run.scheduler.advance(run.controller.session_clock.remaining() + 1)
    return run
