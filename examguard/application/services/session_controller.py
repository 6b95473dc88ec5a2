"""Session controller - the authoritative session state machine.

The controller is constructed once per session with its collaborators
injected. It owns the session state, the violation tracker, both guards and
the session clock, and it is the only component allowed to change the state
or call the external collaborators (backend, navigator, display).

Transitions:
    PRE_START --start()--> ACTIVE
    ACTIVE --threshold / grace elapsed--> TERMINATED
    ACTIVE --candidate submit / clock expired--> SUBMITTED

Every guard, the tracker and the clock report through ``dispatch``. Terminal
requests are idempotent: the state check and the transition happen before the
first suspension point, so on the single event loop only the first caller has
any effect. Teardown of all guards and the clock completes before any
collaborator is called, so a fullscreen-exit or blur event caused by the
teardown itself lands on a stopped guard and is ignored.

Usage:
    controller = build_session_controller(session_id="exam-42")

    questions = await controller.prepare()   # guidelines screen
    await controller.start()                 # guards + clock start together

    # wire client events
    await controller.focus_guard.on_window_blur()
    await controller.report_violation(ViolationCategory.RIGHT_CLICK)

    await controller.submit()
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

from examguard.application.ports.clock_source import ClockSourceProtocol
from examguard.application.ports.display_mode import DisplayModeProtocol
from examguard.application.ports.navigator import NavigatorProtocol
from examguard.application.ports.notice_presenter import NoticePresenterProtocol
from examguard.application.ports.session_backend import SessionBackendProtocol
from examguard.application.ports.timer_scheduler import (
    TimerHandle,
    TimerSchedulerProtocol,
)
from examguard.application.services.focus_guard import FocusGuard
from examguard.application.services.fullscreen_guard import FullscreenGuard
from examguard.application.services.notice_board import NoticeBoard
from examguard.application.services.session_clock import SessionClock
from examguard.application.services.violation_tracker import (
    THRESHOLD_MESSAGE,
    ViolationTracker,
)
from examguard.config.session_policy_config import (
    DEFAULT_SESSION_POLICY,
    SessionPolicyConfig,
)
from examguard.domain.errors.session import (
    InvalidSessionTransitionError,
    SessionCollaboratorError,
)
from examguard.domain.models.key_combination import (
    KeyCombination,
    classify_key_combination,
)
from examguard.domain.models.notice import Notice, NoticeLevel, NoticeSlot
from examguard.domain.models.session_signal import SessionSignal
from examguard.domain.models.session_state import (
    Destination,
    Question,
    SessionResult,
    SessionState,
    SessionTransition,
    SubmissionTrigger,
    TerminationReason,
)
from examguard.domain.models.violation import (
    OutcomeKind,
    ViolationCategory,
    ViolationLedger,
    ViolationOutcome,
)

log = structlog.get_logger()

T = TypeVar("T")

SUBMITTED_MESSAGE = "Your responses have been submitted successfully."
TIME_UP_PREFIX = "Time is up. "
SUBMIT_FAILED_MESSAGE = (
    "Your session has ended, but your responses could not be submitted. "
    "Please contact support."
)


class SessionController:
    """Owns session state and drives the session to one terminal outcome.

    Attributes:
        _state: Current lifecycle state. Mutated only by ``_transition``.
        _tracker: Violation counter for this session.
        _focus_guard: Window focus guard.
        _fullscreen_guard: Fullscreen guard.
        _session_clock: Total-duration countdown.
        _notices: Single-slot notice board in front of the presenter.
        _collaborator_failures: Collaborator calls that failed after retry.
    """

    def __init__(
        self,
        *,
        session_id: str,
        backend: SessionBackendProtocol,
        navigator: NavigatorProtocol,
        presenter: NoticePresenterProtocol,
        display: DisplayModeProtocol,
        clock: ClockSourceProtocol,
        scheduler: TimerSchedulerProtocol,
        config: SessionPolicyConfig | None = None,
        on_violation_count: Callable[[int], None] | None = None,
    ) -> None:
        """Initialize the controller and its child components.

        Args:
            session_id: Identifier of the exam/interview session.
            backend: Persistence and question collaborator.
            navigator: Router used once the session ends.
            presenter: UI surface for notices and the countdown.
            display: Fullscreen control of the candidate's window.
            clock: Monotonic time source shared by every timer.
            scheduler: Timer scheduler shared by every timer.
            config: Session policy. Uses the default policy if not provided.
            on_violation_count: Called with the new total after every
                counted violation.
        """
        self._session_id = session_id
        self._backend = backend
        self._navigator = navigator
        self._display = display
        self._clock = clock
        self._scheduler = scheduler
        self._config = config or DEFAULT_SESSION_POLICY
        self._on_violation_count = on_violation_count

        self._state = SessionState.PRE_START
        self._transitions: list[SessionTransition] = []
        self._questions: list[Question] = []
        self._termination_reason: TerminationReason | None = None
        self._submission_trigger: SubmissionTrigger | None = None
        self._result: SessionResult | None = None
        self._collaborator_failures: list[SessionCollaboratorError] = []
        self._navigation_timer: TimerHandle | None = None

        self._notices = NoticeBoard(presenter)
        self._tracker = ViolationTracker(
            clock=clock,
            threshold=self._config.violation_threshold,
            cooldown_seconds=self._config.per_category_cooldown_seconds,
        )
        self._focus_guard = FocusGuard(
            clock=clock,
            scheduler=scheduler,
            notices=self._notices,
            signal_sink=self.dispatch,
            grace_seconds=self._config.focus_grace_seconds,
            tick_seconds=self._config.clock_tick_seconds,
            focus_loss_reporter=(
                self.report_violation
                if self._config.count_focus_loss_as_violation
                else None
            ),
        )
        self._fullscreen_guard = FullscreenGuard(
            clock=clock,
            scheduler=scheduler,
            notices=self._notices,
            signal_sink=self.dispatch,
            display=display,
            grace_seconds=self._config.fullscreen_grace_seconds,
            tick_seconds=self._config.clock_tick_seconds,
        )
        self._session_clock = SessionClock(
            clock=clock,
            scheduler=scheduler,
            notices=self._notices,
            signal_sink=self.dispatch,
            total_duration_seconds=self._config.total_duration_seconds,
            tick_seconds=self._config.clock_tick_seconds,
        )
        self._log = log.bind(service="session_controller", session_id=session_id)

    # =========================================================================
    # Read-only state
    # =========================================================================

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def config(self) -> SessionPolicyConfig:
        return self._config

    @property
    def transitions(self) -> tuple[SessionTransition, ...]:
        return tuple(self._transitions)

    @property
    def questions(self) -> tuple[Question, ...]:
        return tuple(self._questions)

    @property
    def ledger(self) -> ViolationLedger:
        return self._tracker.ledger

    @property
    def tracker(self) -> ViolationTracker:
        return self._tracker

    @property
    def focus_guard(self) -> FocusGuard:
        return self._focus_guard

    @property
    def fullscreen_guard(self) -> FullscreenGuard:
        return self._fullscreen_guard

    @property
    def session_clock(self) -> SessionClock:
        return self._session_clock

    @property
    def notices(self) -> NoticeBoard:
        return self._notices

    @property
    def termination_reason(self) -> TerminationReason | None:
        return self._termination_reason

    @property
    def submission_trigger(self) -> SubmissionTrigger | None:
        return self._submission_trigger

    @property
    def result(self) -> SessionResult | None:
        return self._result

    @property
    def collaborator_failures(self) -> tuple[SessionCollaboratorError, ...]:
        return tuple(self._collaborator_failures)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def prepare(self) -> list[Question]:
        """Load the session's questions while on the guidelines screen.

        Returns:
            The loaded questions.

        Raises:
            InvalidSessionTransitionError: If the session already started.
            SessionCollaboratorError: If loading failed twice.
        """
        if self._state is not SessionState.PRE_START:
            raise InvalidSessionTransitionError(self._state, "prepare")
        ok, questions = await self._call_collaborator(
            "load_session_questions", self._backend.load_session_questions
        )
        if not ok:
            raise self._collaborator_failures[-1]
        self._questions = list(questions or [])
        self._log.info("session_prepared", question_count=len(self._questions))
        return list(self._questions)

    async def start(self) -> None:
        """Move PRE_START -> ACTIVE and start every guard and the clock.

        No suspension point separates the state change from the guard and
        clock starts, so there is no window in which the clock runs while a
        guard is not yet watching, or the reverse.

        Raises:
            InvalidSessionTransitionError: If not in PRE_START.
        """
        if self._state is not SessionState.PRE_START:
            raise InvalidSessionTransitionError(self._state, "start")
        initially_fullscreen = self._display.is_fullscreen()

        self._transition(SessionState.ACTIVE, cause="start")
        self._focus_guard.start()
        self._fullscreen_guard.start(initially_fullscreen=initially_fullscreen)
        self._session_clock.start()

        self._log.info(
            "session_started",
            total_duration_seconds=self._config.total_duration_seconds,
            violation_threshold=self._config.violation_threshold,
            initially_fullscreen=initially_fullscreen,
        )

    async def submit(self) -> bool:
        """Candidate-initiated submission ("End Test")."""
        return await self.request_submission(SubmissionTrigger.CANDIDATE)

    async def record_answer(self, question_index: int, value: Any) -> bool:
        """Pass an answer through to the backend while the session is active.

        Returns:
            True if the backend stored the answer; False if the session is
            not active or the backend failed twice.
        """
        if self._state is not SessionState.ACTIVE:
            self._log.warning(
                "answer_rejected_session_not_active",
                state=self._state.value,
                question_index=question_index,
            )
            return False
        ok, _ = await self._call_collaborator(
            "record_answer",
            lambda: self._backend.record_answer(question_index, value),
        )
        return ok

    # =========================================================================
    # Violation intake
    # =========================================================================

    async def report_violation(self, category: ViolationCategory) -> ViolationOutcome:
        """Feed one raw violation signal (keyboard, mouse, dev-tools, ...).

        Args:
            category: Category of the detected action.

        Returns:
            The tracker's decision. Events outside ACTIVE are ignored.
        """
        if self._state is not SessionState.ACTIVE:
            return ViolationOutcome(
                kind=OutcomeKind.IGNORED_CLOSED,
                category=category,
                total=self._tracker.ledger.total,
            )

        outcome = self._tracker.record(category)
        if not outcome.counted:
            return outcome

        if outcome.threshold_reached:
            self._notices.show(
                Notice(
                    slot=NoticeSlot.VIOLATION,
                    level=NoticeLevel.ERROR,
                    message=f"{outcome.message}. {THRESHOLD_MESSAGE}",
                )
            )
        else:
            self._notices.show(
                Notice(
                    slot=NoticeSlot.VIOLATION,
                    level=NoticeLevel.WARNING,
                    message=outcome.message or "",
                )
            )

        if self._on_violation_count is not None:
            self._on_violation_count(outcome.total)

        if outcome.threshold_reached:
            await self.dispatch(SessionSignal.threshold_reached())
        return outcome

    async def report_key_combination(
        self, combo: KeyCombination
    ) -> ViolationOutcome | None:
        """Classify a key press and report it if it is restricted.

        Returns:
            The tracker outcome, or None if the combination is allowed.
        """
        category = classify_key_combination(combo)
        if category is None:
            return None
        return await self.report_violation(category)

    # =========================================================================
    # Signal dispatch and terminal transitions
    # =========================================================================

    async def dispatch(self, signal: SessionSignal) -> None:
        """Single entry point for every signal from guards, tracker and clock."""
        self._log.debug(
            "signal_received",
            kind=signal.kind.value,
            source=signal.source,
            state=self._state.value,
        )
        if signal.is_terminating:
            assert signal.reason is not None
            await self.request_termination(signal.reason, source=signal.source)
        else:
            await self.request_submission(signal.submission_trigger)

    async def request_termination(
        self, reason: TerminationReason, *, source: str = "controller"
    ) -> bool:
        """Force-end the session.

        Idempotent: only the first call while ACTIVE has any effect.

        Sequence: set TERMINATED, tear down guards/clock/tracker, show the
        final reason, exit fullscreen, clean up session data, navigate to the
        dashboard (after the configured notice delay, if any).

        Returns:
            True if this call terminated the session.
        """
        if self._state is not SessionState.ACTIVE:
            self._log.debug(
                "termination_ignored",
                reason=reason.value,
                source=source,
                state=self._state.value,
            )
            return False

        self._termination_reason = reason
        self._transition(SessionState.TERMINATED, cause=reason.value)
        self._teardown()

        self._notices.clear()
        self._notices.show(
            Notice(
                slot=NoticeSlot.SESSION,
                level=NoticeLevel.ERROR,
                message=reason.final_message,
                persistent=True,
            )
        )
        self._log.warning(
            "session_terminated",
            reason=reason.value,
            source=source,
            **self._tracker.ledger.to_dict(),
        )

        await self._call_collaborator("exit_fullscreen", self._display.exit_fullscreen)
        await self._call_collaborator(
            "cleanup_session_state", self._backend.cleanup_session_state
        )

        delay = self._config.termination_notice_seconds
        if delay > 0:
            self._navigation_timer = self._scheduler.call_later(
                delay, self._navigate_to_dashboard, name="termination_navigation"
            )
        else:
            await self._navigate_to_dashboard()
        return True

    async def request_submission(
        self, trigger: SubmissionTrigger = SubmissionTrigger.CANDIDATE
    ) -> bool:
        """Normally end the session and submit it.

        Idempotent: only the first call while ACTIVE has any effect.

        Sequence: set SUBMITTED, tear down guards/clock/tracker, submit,
        show the outcome, exit fullscreen, clean up, navigate to results.

        Returns:
            True if this call submitted the session.
        """
        if self._state is not SessionState.ACTIVE:
            self._log.debug(
                "submission_ignored",
                trigger=trigger.value,
                state=self._state.value,
            )
            return False

        self._submission_trigger = trigger
        self._transition(SessionState.SUBMITTED, cause=trigger.value)
        self._teardown()
        self._notices.clear()

        ok, result = await self._call_collaborator(
            "submit_session", self._backend.submit_session
        )
        self._result = result
        prefix = TIME_UP_PREFIX if trigger is SubmissionTrigger.CLOCK_EXPIRED else ""
        if ok:
            self._notices.show(
                Notice(
                    slot=NoticeSlot.SESSION,
                    level=NoticeLevel.INFO,
                    message=prefix + SUBMITTED_MESSAGE,
                    persistent=True,
                )
            )
        else:
            self._notices.show(
                Notice(
                    slot=NoticeSlot.SESSION,
                    level=NoticeLevel.ERROR,
                    message=prefix + SUBMIT_FAILED_MESSAGE,
                    persistent=True,
                )
            )
        self._log.info(
            "session_submitted",
            trigger=trigger.value,
            submitted=ok,
            **self._tracker.ledger.to_dict(),
        )

        await self._call_collaborator("exit_fullscreen", self._display.exit_fullscreen)
        await self._call_collaborator(
            "cleanup_session_state", self._backend.cleanup_session_state
        )
        await self._call_collaborator(
            "navigate_away", lambda: self._navigator.navigate_away(Destination.RESULTS)
        )
        return True

    # =========================================================================
    # Internals
    # =========================================================================

    def _transition(self, to_state: SessionState, *, cause: str) -> None:
        transition = SessionTransition(
            from_state=self._state,
            to_state=to_state,
            cause=cause,
            at=self._clock.now(),
        )
        self._state = to_state
        self._transitions.append(transition)
        self._log.info("session_state_changed", **transition.to_dict())

    def _teardown(self) -> None:
        """Stop every event source before anything else happens."""
        self._focus_guard.stop()
        self._fullscreen_guard.stop()
        self._session_clock.stop()
        self._tracker.close()

    async def _navigate_to_dashboard(self) -> None:
        self._navigation_timer = None
        await self._call_collaborator(
            "navigate_away",
            lambda: self._navigator.navigate_away(Destination.DASHBOARD),
        )

    async def _call_collaborator(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
    ) -> tuple[bool, T | None]:
        """Call an external collaborator, retrying once on failure.

        The state machine itself never retries; only the I/O call is
        repeated. A second failure is logged, recorded on
        ``collaborator_failures`` and reported to the caller.

        Returns:
            Tuple of (succeeded, value returned by the call or None).
        """
        try:
            return True, await call()
        except Exception as first_error:
            self._log.warning(
                "collaborator_call_failed",
                operation=operation,
                attempt=1,
                error=str(first_error),
            )
        try:
            return True, await call()
        except Exception as e:
            failure = SessionCollaboratorError(operation, e)
            self._collaborator_failures.append(failure)
            self._log.error(
                "collaborator_call_failed_after_retry",
                operation=operation,
                attempt=2,
                error=str(e),
                exc_info=True,
            )
            return False, None
