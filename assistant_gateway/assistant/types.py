"""Domain types for threads, messages, runs and exchanges."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from assistant_gateway.assistant.errors import InvalidTransitionError


class RunStatus(str, Enum):
    """Run statuses reported by the upstream."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    INCOMPLETE = "incomplete"


# requires_action needs tool outputs, which this workflow never submits.
FAILURE_STATUSES = frozenset(
    status.value
    for status in (
        RunStatus.FAILED,
        RunStatus.CANCELLED,
        RunStatus.EXPIRED,
        RunStatus.INCOMPLETE,
        RunStatus.REQUIRES_ACTION,
    )
)
TERMINAL_STATUSES = FAILURE_STATUSES | {RunStatus.COMPLETED.value}


class Message(BaseModel):
    """A single message in a thread.

    Attributes:
        id: Upstream message identifier.
        role: ``user`` or ``assistant``.
        content: Text content; multiple text blocks are joined by blank lines.
        thread_id: Thread the message belongs to.
        created_at: Unix timestamp of creation.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: str
    content: str
    thread_id: str
    created_at: int = 0

    @classmethod
    def from_upstream(cls, message: Any) -> "Message":
        """Build a Message from an SDK message object, keeping text blocks only."""
        parts: list[str] = []
        for block in message.content or []:
            if getattr(block, "type", None) == "text":
                parts.append(block.text.value)

        return cls(
            id=message.id,
            role=message.role,
            content="\n\n".join(parts),
            thread_id=message.thread_id,
            created_at=message.created_at or 0,
        )


class Run(BaseModel):
    """Snapshot of an upstream run as last observed."""

    model_config = ConfigDict(frozen=True)

    id: str
    thread_id: str
    status: str
    last_error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.COMPLETED

    @classmethod
    def from_upstream(cls, run: Any) -> "Run":
        last_error = getattr(run, "last_error", None)
        error_text = None
        if last_error is not None:
            code = getattr(last_error, "code", None)
            text = getattr(last_error, "message", None) or str(last_error)
            error_text = f"{code}: {text}" if code else text

        status = run.status
        if isinstance(status, Enum):
            status = status.value

        return cls(
            id=run.id,
            thread_id=run.thread_id,
            status=status,
            last_error=error_text,
        )


class RunResult(BaseModel):
    """Outcome of a completed run plus local bookkeeping."""

    run: Run
    polls: int = Field(ge=0)
    elapsed: float = Field(ge=0.0)


class ExchangeState(str, Enum):
    """Lifecycle of one user turn through the workflow."""

    NEW = "new"
    THREAD_RESOLVED = "thread_resolved"
    MESSAGE_SUBMITTED = "message_submitted"
    RUN_QUEUED = "run_queued"
    RUN_IN_PROGRESS = "run_in_progress"
    RUN_COMPLETED = "run_completed"
    RUN_FAILED = "run_failed"
    RUN_TIMED_OUT = "run_timed_out"
    CANCELLED = "cancelled"
    MESSAGES_FETCHED = "messages_fetched"


_RUN_OUTCOMES = {
    ExchangeState.RUN_COMPLETED,
    ExchangeState.RUN_FAILED,
    ExchangeState.RUN_TIMED_OUT,
    ExchangeState.CANCELLED,
}

_TRANSITIONS: dict[ExchangeState, set[ExchangeState]] = {
    ExchangeState.NEW: {ExchangeState.THREAD_RESOLVED, ExchangeState.CANCELLED},
    ExchangeState.THREAD_RESOLVED: {
        ExchangeState.MESSAGE_SUBMITTED,
        ExchangeState.CANCELLED,
    },
    ExchangeState.MESSAGE_SUBMITTED: {
        ExchangeState.RUN_QUEUED,
        ExchangeState.RUN_IN_PROGRESS,
        *_RUN_OUTCOMES,
    },
    ExchangeState.RUN_QUEUED: {ExchangeState.RUN_IN_PROGRESS, *_RUN_OUTCOMES},
    ExchangeState.RUN_IN_PROGRESS: set(_RUN_OUTCOMES),
    ExchangeState.RUN_COMPLETED: {ExchangeState.MESSAGES_FETCHED},
    ExchangeState.RUN_FAILED: set(),
    ExchangeState.RUN_TIMED_OUT: set(),
    ExchangeState.CANCELLED: set(),
    ExchangeState.MESSAGES_FETCHED: set(),
}

TERMINAL_EXCHANGE_STATES = frozenset(
    state for state, targets in _TRANSITIONS.items() if not targets
)


def exchange_state_for(status: str) -> ExchangeState:
    """Map an observed run status onto the exchange state machine."""
    if status == RunStatus.QUEUED:
        return ExchangeState.RUN_QUEUED
    if status == RunStatus.COMPLETED:
        return ExchangeState.RUN_COMPLETED
    if status in FAILURE_STATUSES:
        return ExchangeState.RUN_FAILED
    return ExchangeState.RUN_IN_PROGRESS


@dataclass
class Exchange:
    """Tracks one user turn through the workflow state machine."""

    state: ExchangeState = ExchangeState.NEW
    thread_id: str | None = None
    run_id: str | None = None
    history: list[ExchangeState] = field(default_factory=lambda: [ExchangeState.NEW])

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_EXCHANGE_STATES

    def advance(self, state: ExchangeState) -> None:
        """Move to ``state``; repeating the current state is a no-op.

        Raises:
            InvalidTransitionError: If ``state`` is not reachable from the
                current state.
        """
        if state == self.state:
            return
        if state not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Cannot move exchange from {self.state.value} to {state.value}"
            )
        self.state = state
        self.history.append(state)
