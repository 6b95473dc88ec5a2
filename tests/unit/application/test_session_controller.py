"""Unit tests for SessionController.

Tests cover:
- Lifecycle preconditions (prepare/start only from PRE_START)
- Violation intake, warning notices and the violation-count callback
- Idempotent terminal transitions
- Post-termination and post-submission sequences
- Collaborator retry-once and failure recording
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from examguard.application.services.grace_period_guard import GuardPhase
from examguard.application.services.session_clock import ClockPhase
from examguard.application.services.session_controller import (
    SUBMIT_FAILED_MESSAGE,
    SUBMITTED_MESSAGE,
    TIME_UP_PREFIX,
    SessionController,
)
from examguard.application.services.violation_tracker import THRESHOLD_MESSAGE
from examguard.config.session_policy_config import SessionPolicyConfig
from examguard.domain.errors import (
    InvalidSessionTransitionError,
    SessionCollaboratorError,
)
from examguard.domain.models.key_combination import KeyCombination
from examguard.domain.models.notice import NoticeLevel, NoticeSlot
from examguard.domain.models.session_signal import SessionSignal
from examguard.domain.models.session_state import (
    Destination,
    Question,
    SessionResult,
    SessionState,
    SubmissionTrigger,
    TerminationReason,
)
from examguard.domain.models.violation import OutcomeKind, ViolationCategory
from examguard.infrastructure.adapters.virtual_time import (
    VirtualClock,
    VirtualTimerScheduler,
)
from examguard.infrastructure.stubs.display_mode_stub import DisplayModeStub
from examguard.infrastructure.stubs.navigator_stub import NavigatorStub
from examguard.infrastructure.stubs.notice_presenter_stub import NoticePresenterStub
from examguard.infrastructure.stubs.session_backend_stub import SessionBackendStub
from tests.helpers import SessionHarness, build_harness


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_prepare_loads_questions(self, harness: SessionHarness) -> None:
        questions = await harness.controller.prepare()

        assert len(questions) == 20
        assert harness.controller.questions[0].question_id == "math-1"
        assert harness.controller.state is SessionState.PRE_START

    @pytest.mark.asyncio
    async def test_start_activates_guards_and_clock(self, harness: SessionHarness) -> None:
        await harness.begin()
        controller = harness.controller

        assert controller.state is SessionState.ACTIVE
        assert controller.focus_guard.phase is GuardPhase.WATCHING
        assert controller.fullscreen_guard.phase is GuardPhase.WATCHING
        assert controller.session_clock.is_running
        assert harness.presenter.last_time_display == "02:00:00"
        assert [t.cause for t in controller.transitions] == ["start"]

    @pytest.mark.asyncio
    async def test_guards_idle_before_start(self, harness: SessionHarness) -> None:
        await harness.controller.focus_guard.on_window_blur()
        await harness.display.user_exits_fullscreen()

        assert harness.controller.focus_guard.phase is GuardPhase.IDLE
        assert harness.controller.fullscreen_guard.phase is GuardPhase.IDLE

    @pytest.mark.asyncio
    async def test_start_twice_raises(self, harness: SessionHarness) -> None:
        await harness.begin()

        with pytest.raises(InvalidSessionTransitionError, match="Cannot start"):
            await harness.controller.start()

    @pytest.mark.asyncio
    async def test_prepare_after_start_raises(self, harness: SessionHarness) -> None:
        await harness.begin()

        with pytest.raises(InvalidSessionTransitionError):
            await harness.controller.prepare()

    @pytest.mark.asyncio
    async def test_start_outside_fullscreen_opens_countdown(self) -> None:
        h = build_harness(display=DisplayModeStub(fullscreen=False))

        await h.begin()

        assert h.controller.fullscreen_guard.is_grace_pending
        assert h.presenter.visible_in(NoticeSlot.FULLSCREEN)

    @pytest.mark.asyncio
    async def test_prepare_failure_raises_after_retry(self) -> None:
        backend = AsyncMock()
        backend.load_session_questions = AsyncMock(
            side_effect=[ConnectionError("down"), ConnectionError("still down")]
        )
        h = build_harness(backend=backend)

        with pytest.raises(SessionCollaboratorError) as exc_info:
            await h.controller.prepare()

        assert exc_info.value.operation == "load_session_questions"
        assert backend.load_session_questions.await_count == 2
        assert h.controller.state is SessionState.PRE_START


class TestAnswers:
    @pytest.mark.asyncio
    async def test_answer_rejected_before_start(self, harness: SessionHarness) -> None:
        assert await harness.controller.record_answer(0, "B") is False
        assert harness.backend.answers == {}

    @pytest.mark.asyncio
    async def test_answer_passed_to_backend(self, harness: SessionHarness) -> None:
        await harness.begin()

        assert await harness.controller.record_answer(3, "C") is True
        assert harness.backend.answers == {3: "C"}

    @pytest.mark.asyncio
    async def test_bad_answer_index_recorded_as_failure(
        self, harness: SessionHarness
    ) -> None:
        await harness.begin()

        assert await harness.controller.record_answer(99, "C") is False

        [failure] = harness.controller.collaborator_failures
        assert failure.operation == "record_answer"
        assert isinstance(failure.cause, IndexError)
        assert harness.controller.state is SessionState.ACTIVE

    @pytest.mark.asyncio
    async def test_answer_rejected_after_submission(
        self, harness: SessionHarness
    ) -> None:
        await harness.begin()
        await harness.controller.submit()

        assert await harness.controller.record_answer(0, "A") is False


class TestViolationIntake:
    @pytest.mark.asyncio
    async def test_counted_violation_shows_warning(self, harness: SessionHarness) -> None:
        await harness.begin()

        outcome = await harness.controller.report_violation(ViolationCategory.RIGHT_CLICK)

        assert outcome.kind is OutcomeKind.COUNTED
        [notice] = harness.presenter.visible_in(NoticeSlot.VIOLATION)
        assert notice.level is NoticeLevel.WARNING
        assert notice.message == "Warning: Right-click detected (1/10)"

    @pytest.mark.asyncio
    async def test_warnings_replace_each_other(self, harness: SessionHarness) -> None:
        await harness.begin()

        await harness.controller.report_violation(ViolationCategory.RIGHT_CLICK)
        await harness.controller.report_violation(ViolationCategory.DEV_TOOLS)

        [notice] = harness.presenter.visible_in(NoticeSlot.VIOLATION)
        assert notice.message == "Warning: Developer tools detected (2/10)"

    @pytest.mark.asyncio
    async def test_violation_before_start_ignored(self, harness: SessionHarness) -> None:
        outcome = await harness.controller.report_violation(ViolationCategory.RIGHT_CLICK)

        assert outcome.kind is OutcomeKind.IGNORED_CLOSED
        assert harness.controller.ledger.total == 0

    @pytest.mark.asyncio
    async def test_violation_count_callback(self) -> None:
        totals: list[int] = []
        h = build_harness(on_violation_count=totals.append)
        await h.begin()

        await h.controller.report_violation(ViolationCategory.RIGHT_CLICK)
        await h.controller.report_violation(ViolationCategory.RIGHT_CLICK)
        await h.controller.report_violation(ViolationCategory.DEV_TOOLS)

        assert totals == [1, 2]

    @pytest.mark.asyncio
    async def test_restricted_key_combination_reported(
        self, harness: SessionHarness
    ) -> None:
        await harness.begin()

        outcome = await harness.controller.report_key_combination(
            KeyCombination.parse("Ctrl+Shift+I")
        )

        assert outcome is not None
        assert outcome.category is ViolationCategory.DEV_TOOLS
        assert harness.controller.ledger.count_for(ViolationCategory.DEV_TOOLS) == 1

    @pytest.mark.asyncio
    async def test_allowed_key_combination_ignored(self, harness: SessionHarness) -> None:
        await harness.begin()

        assert await harness.controller.report_key_combination(KeyCombination("a")) is None
        assert harness.controller.ledger.total == 0

    @pytest.mark.asyncio
    async def test_threshold_violation_terminates(self) -> None:
        h = build_harness(SessionPolicyConfig(violation_threshold=2))
        await h.begin()

        await h.controller.report_violation(ViolationCategory.RIGHT_CLICK)
        outcome = await h.controller.report_violation(ViolationCategory.DEV_TOOLS)

        assert outcome.threshold_reached
        assert h.controller.state is SessionState.TERMINATED
        assert h.controller.termination_reason is TerminationReason.VIOLATION_THRESHOLD
        threshold_notice = h.presenter.shown_in(NoticeSlot.VIOLATION)[-1]
        assert threshold_notice.level is NoticeLevel.ERROR
        assert threshold_notice.message.endswith(THRESHOLD_MESSAGE)

    @pytest.mark.asyncio
    async def test_focus_loss_counted_when_configured(self) -> None:
        h = build_harness(SessionPolicyConfig(count_focus_loss_as_violation=True))
        await h.begin()

        await h.controller.focus_guard.on_window_blur()
        await h.controller.focus_guard.on_visibility_hidden()

        assert h.controller.ledger.count_for(ViolationCategory.WINDOW_FOCUS) == 1
        assert h.controller.ledger.total == 1

    @pytest.mark.asyncio
    async def test_focus_loss_not_counted_by_default(self, harness: SessionHarness) -> None:
        await harness.begin()

        await harness.controller.focus_guard.on_window_blur()

        assert harness.controller.ledger.total == 0


class TestTermination:
    @pytest.mark.asyncio
    async def test_termination_sequence(self, harness: SessionHarness) -> None:
        await harness.begin()

        terminated = await harness.controller.request_termination(
            TerminationReason.FOCUS_GRACE_EXPIRED
        )

        controller = harness.controller
        assert terminated is True
        assert controller.state is SessionState.TERMINATED
        assert controller.focus_guard.phase is GuardPhase.STOPPED
        assert controller.fullscreen_guard.phase is GuardPhase.STOPPED
        assert controller.session_clock.phase is ClockPhase.STOPPED
        assert controller.tracker.is_closed
        assert harness.display.exit_calls == 1
        assert harness.backend.cleanup_calls == 1
        assert harness.navigator.destinations == [Destination.DASHBOARD]
        [notice] = harness.presenter.visible
        assert notice.message == TerminationReason.FOCUS_GRACE_EXPIRED.final_message
        assert notice.level is NoticeLevel.ERROR

    @pytest.mark.asyncio
    async def test_second_termination_is_noop(self, harness: SessionHarness) -> None:
        await harness.begin()

        first = await harness.controller.request_termination(
            TerminationReason.VIOLATION_THRESHOLD
        )
        second = await harness.controller.request_termination(
            TerminationReason.FULLSCREEN_GRACE_EXPIRED
        )

        assert (first, second) == (True, False)
        assert harness.controller.termination_reason is TerminationReason.VIOLATION_THRESHOLD
        assert harness.backend.cleanup_calls == 1
        assert harness.navigator.destinations == [Destination.DASHBOARD]

    @pytest.mark.asyncio
    async def test_concurrent_terminations_run_once(self, harness: SessionHarness) -> None:
        await harness.begin()

        results = await asyncio.gather(
            harness.controller.request_termination(TerminationReason.FOCUS_GRACE_EXPIRED),
            harness.controller.request_termination(
                TerminationReason.FULLSCREEN_GRACE_EXPIRED
            ),
        )

        assert sorted(results) == [False, True]
        assert harness.backend.cleanup_calls == 1
        assert len(harness.navigator.destinations) == 1

    @pytest.mark.asyncio
    async def test_termination_before_start_ignored(self, harness: SessionHarness) -> None:
        assert await harness.controller.request_termination(
            TerminationReason.VIOLATION_THRESHOLD
        ) is False
        assert harness.controller.state is SessionState.PRE_START

    @pytest.mark.asyncio
    async def test_termination_after_submission_ignored(
        self, harness: SessionHarness
    ) -> None:
        await harness.begin()
        await harness.controller.submit()

        assert await harness.controller.request_termination(
            TerminationReason.VIOLATION_THRESHOLD
        ) is False
        assert harness.controller.state is SessionState.SUBMITTED
        assert harness.navigator.destinations == [Destination.RESULTS]

    @pytest.mark.asyncio
    async def test_exit_fullscreen_echo_does_not_retrigger(
        self, harness: SessionHarness
    ) -> None:
        await harness.begin()

        await harness.controller.request_termination(TerminationReason.VIOLATION_THRESHOLD)
        await harness.advance(60)

        assert harness.display.events_emitted == [False]
        assert len(harness.controller.transitions) == 2
        assert harness.navigator.destinations == [Destination.DASHBOARD]

    @pytest.mark.asyncio
    async def test_navigation_delayed_by_notice_period(self) -> None:
        h = build_harness(SessionPolicyConfig(termination_notice_seconds=5))
        await h.begin()

        await h.controller.request_termination(TerminationReason.FOCUS_GRACE_EXPIRED)
        assert h.navigator.destinations == []
        assert [t.name for t in h.scheduler.pending()] == ["termination_navigation"]

        await h.advance(5)
        assert h.navigator.destinations == [Destination.DASHBOARD]

    @pytest.mark.asyncio
    async def test_dispatch_routes_terminating_signal(self, harness: SessionHarness) -> None:
        await harness.begin()

        await harness.controller.dispatch(SessionSignal.threshold_reached())

        assert harness.controller.termination_reason is TerminationReason.VIOLATION_THRESHOLD


class TestSubmission:
    @pytest.mark.asyncio
    async def test_candidate_submission_sequence(self, harness: SessionHarness) -> None:
        await harness.begin()
        await harness.controller.record_answer(0, "A")

        assert await harness.controller.submit() is True

        controller = harness.controller
        assert controller.state is SessionState.SUBMITTED
        assert controller.submission_trigger is SubmissionTrigger.CANDIDATE
        assert controller.result is not None
        assert controller.result.details == {"answered": 1, "total": 20}
        assert harness.backend.submitted_answers == {0: "A"}
        assert harness.backend.submit_calls == 1
        assert harness.backend.cleanup_calls == 1
        assert harness.display.exit_calls == 1
        assert harness.navigator.destinations == [Destination.RESULTS]
        [notice] = harness.presenter.visible
        assert notice.message == SUBMITTED_MESSAGE

    @pytest.mark.asyncio
    async def test_second_submission_is_noop(self, harness: SessionHarness) -> None:
        await harness.begin()

        await harness.controller.submit()
        assert await harness.controller.submit() is False
        assert harness.backend.submit_calls == 1

    @pytest.mark.asyncio
    async def test_clock_expiry_submission_prefixes_message(self) -> None:
        h = build_harness(SessionPolicyConfig(total_duration_seconds=60))
        await h.begin()

        await h.advance(60)

        assert h.controller.submission_trigger is SubmissionTrigger.CLOCK_EXPIRED
        [notice] = h.presenter.visible
        assert notice.message == TIME_UP_PREFIX + SUBMITTED_MESSAGE

    @pytest.mark.asyncio
    async def test_submission_stops_pending_grace_periods(
        self, harness: SessionHarness
    ) -> None:
        await harness.begin()
        await harness.controller.focus_guard.on_window_blur()

        await harness.controller.submit()
        await harness.advance(30)

        assert harness.controller.state is SessionState.SUBMITTED
        assert harness.controller.termination_reason is None


class TestCollaboratorRetry:
    @pytest.mark.asyncio
    async def test_submit_succeeds_on_retry(self) -> None:
        backend = SessionBackendStub(submit_failures=1)
        h = build_harness(backend=backend)
        await h.begin()

        await h.controller.submit()

        assert backend.submit_calls == 2
        assert h.controller.collaborator_failures == ()
        assert h.presenter.visible[0].message == SUBMITTED_MESSAGE

    @pytest.mark.asyncio
    async def test_submit_failure_recorded_and_session_still_ends(self) -> None:
        backend = SessionBackendStub(submit_failures=2)
        h = build_harness(backend=backend)
        await h.begin()

        assert await h.controller.submit() is True

        [failure] = h.controller.collaborator_failures
        assert failure.operation == "submit_session"
        assert h.controller.result is None
        [notice] = h.presenter.visible
        assert notice.level is NoticeLevel.ERROR
        assert notice.message == SUBMIT_FAILED_MESSAGE
        assert backend.cleanup_calls == 1
        assert h.navigator.destinations == [Destination.RESULTS]

    @pytest.mark.asyncio
    async def test_navigation_failure_recorded(self) -> None:
        navigator = NavigatorStub(failures=2)
        h = build_harness(navigator=navigator)
        await h.begin()

        await h.controller.request_termination(TerminationReason.VIOLATION_THRESHOLD)

        assert navigator.attempts == [Destination.DASHBOARD, Destination.DASHBOARD]
        assert navigator.destinations == []
        assert [f.operation for f in h.controller.collaborator_failures] == [
            "navigate_away"
        ]

    @pytest.mark.asyncio
    async def test_cleanup_failure_does_not_block_navigation(self) -> None:
        backend = SessionBackendStub(cleanup_failures=5)
        h = build_harness(backend=backend)
        await h.begin()

        await h.controller.request_termination(TerminationReason.FOCUS_GRACE_EXPIRED)

        assert backend.cleanup_calls == 2
        assert h.navigator.destinations == [Destination.DASHBOARD]

    @pytest.mark.asyncio
    async def test_mocked_collaborators_called_in_order(self) -> None:
        clock = VirtualClock()
        calls: list[str] = []
        backend = AsyncMock()
        backend.load_session_questions = AsyncMock(
            return_value=[Question(question_id="q1", prompt="1 + 1?")]
        )
        backend.submit_session = AsyncMock(
            side_effect=lambda: calls.append("submit") or SessionResult("s-1")
        )
        backend.cleanup_session_state = AsyncMock(
            side_effect=lambda: calls.append("cleanup")
        )
        navigator = AsyncMock()
        navigator.navigate_away = AsyncMock(
            side_effect=lambda destination: calls.append(f"navigate:{destination.value}")
        )
        display = DisplayModeStub()
        controller = SessionController(
            session_id="s-1",
            backend=backend,
            navigator=navigator,
            presenter=NoticePresenterStub(),
            display=display,
            clock=clock,
            scheduler=VirtualTimerScheduler(clock),
        )

        await controller.prepare()
        await controller.start()
        await controller.submit()

        assert calls == ["submit", "cleanup", "navigate:results"]
        assert controller.result == SessionResult("s-1")
        assert display.exit_calls == 1
