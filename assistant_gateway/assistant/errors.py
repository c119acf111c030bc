"""Error taxonomy for the assistant workflow.

Every upstream failure reaches the caller as one of these tagged errors,
with the upstream status and detail attached. SDK exceptions are translated
at the component boundary by `translate_upstream_error`.
"""

from typing import Any

import openai


class AssistantError(Exception):
    """Base class for all assistant workflow errors."""

    #: Short machine-readable tag used in API error payloads.
    error_type = "assistant_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamError(AssistantError):
    """An upstream API call was rejected.

    Attributes:
        operation: Name of the upstream operation that failed.
        status_code: Upstream HTTP status, if one was received.
        detail: Upstream error body or message.
    """

    error_type = "upstream_error"

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.detail = detail


class ThreadCreationError(UpstreamError):
    """Creating a new thread failed."""

    error_type = "thread_creation_failed"


class RunSubmissionError(UpstreamError):
    """Appending the user message or starting the run failed."""

    error_type = "run_submission_failed"


class RunPollError(UpstreamError):
    """Retrieving run status was rejected by the upstream."""

    error_type = "run_poll_failed"


class MessageFetchError(UpstreamError):
    """Listing thread messages failed."""

    error_type = "message_fetch_failed"


class UpstreamUnavailableError(UpstreamError):
    """The upstream could not be reached or answered with a 5xx."""

    error_type = "upstream_unavailable"


class RunFailedError(AssistantError):
    """A run reached a terminal status other than ``completed``."""

    error_type = "run_failed"

    def __init__(self, run_id: str, status: str, last_error: Any = None) -> None:
        message = f"Run {run_id} ended with status '{status}'"
        if last_error:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.run_id = run_id
        self.status = status
        self.last_error = last_error


class RunTimeoutError(AssistantError):
    """A run did not reach a terminal status within the maximum wait."""

    error_type = "run_timeout"

    def __init__(self, run_id: str, max_wait: float, polls: int, elapsed: float) -> None:
        super().__init__(
            f"Run {run_id} did not finish within {max_wait:.1f}s ({polls} polls)"
        )
        self.run_id = run_id
        self.max_wait = max_wait
        self.polls = polls
        self.elapsed = elapsed


class InvalidTransitionError(AssistantError):
    """An exchange was moved between states that are not connected."""

    error_type = "invalid_transition"


def translate_upstream_error(
    exc: openai.OpenAIError,
    error_cls: type[UpstreamError],
    operation: str,
) -> UpstreamError:
    """Map an OpenAI SDK exception onto the workflow taxonomy.

    Network failures and 5xx answers become `UpstreamUnavailableError`;
    anything else becomes ``error_cls``.

    Args:
        exc: Exception raised by the SDK.
        error_cls: Operation-specific error class for rejected calls.
        operation: Upstream operation name, attached to the error.

    Returns:
        The translated error, ready to be raised ``from exc``.
    """
    if isinstance(exc, openai.APIConnectionError):
        return UpstreamUnavailableError(
            f"{operation}: upstream unreachable ({exc})",
            operation=operation,
            detail=str(exc),
        )

    if isinstance(exc, openai.APIStatusError):
        detail = exc.body if exc.body is not None else exc.message
        if exc.status_code >= 500:
            return UpstreamUnavailableError(
                f"{operation}: upstream returned {exc.status_code}",
                operation=operation,
                status_code=exc.status_code,
                detail=detail,
            )
        return error_cls(
            f"{operation}: upstream returned {exc.status_code}",
            operation=operation,
            status_code=exc.status_code,
            detail=detail,
        )

    return error_cls(f"{operation}: {exc}", operation=operation, detail=str(exc))
