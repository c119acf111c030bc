"""Run submission and polling.

The orchestrator appends the user's message, starts a run and waits for it
to reach a terminal status. Waiting is an ``asyncio.sleep`` between status
reads, so a cancelled task stops polling immediately and no worker thread is
held while a run is in progress.

The number of status reads is bounded by ``ceil(max_wait / interval) + 1``:
every backoff delay is at least the base interval and the final sleep is
clipped to whatever remains of ``max_wait``. Each status read is itself
bounded by the time left, so a slow read cannot hold the wait open past
``max_wait`` by more than one interval.
"""

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Literal
from weakref import WeakValueDictionary

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from assistant_gateway.assistant.config import AssistantConfig
from assistant_gateway.assistant.errors import (
    RunFailedError,
    RunPollError,
    RunSubmissionError,
    RunTimeoutError,
    UpstreamUnavailableError,
    translate_upstream_error,
)
from assistant_gateway.assistant.types import (
    Exchange,
    ExchangeState,
    Run,
    RunResult,
    exchange_state_for,
)

logger = logging.getLogger(__name__)

# Keeps exponential growth inside float range.
_MAX_EXPONENT = 64


class BackoffPolicy(BaseModel):
    """Delay schedule between run status reads.

    Attributes:
        strategy: ``constant``, ``linear`` or ``exponential``.
        interval: Base delay in seconds; no delay is ever shorter.
        step: Seconds added per read for ``linear``.
        multiplier: Growth factor per read for ``exponential``.
        max_interval: Upper bound for any single delay.
    """

    strategy: Literal["constant", "linear", "exponential"] = "constant"
    interval: float = Field(default=1.5, gt=0.0)
    step: float = Field(default=0.5, ge=0.0)
    multiplier: float = Field(default=2.0, ge=1.0)
    max_interval: float = Field(default=10.0, gt=0.0)

    @classmethod
    def from_config(cls, config: AssistantConfig) -> "BackoffPolicy":
        return cls(
            strategy=config.backoff,
            interval=config.poll_interval,
            step=config.backoff_step,
            multiplier=config.backoff_multiplier,
            max_interval=config.max_poll_interval,
        )

    def delay(self, attempt: int) -> float:
        """Return the delay after the ``attempt``-th status read (0-based)."""
        if self.strategy == "linear":
            value = self.interval + self.step * attempt
        elif self.strategy == "exponential":
            value = self.interval * self.multiplier ** min(attempt, _MAX_EXPONENT)
        else:
            value = self.interval
        return min(value, max(self.max_interval, self.interval))

    def max_polls(self, max_wait: float) -> int:
        return math.ceil(max_wait / self.interval) + 1


@dataclass
class RunOptions:
    """Per-call overrides for `RunOrchestrator.submit_and_wait`.

    Attributes:
        max_wait: Seconds to wait for the run; defaults to the config value.
        backoff: Polling schedule; defaults to the configured policy.
        cancel_upstream: Cancel the upstream run when the wait is cancelled.
        exchange: State machine to advance as the run progresses.
    """

    max_wait: float | None = None
    backoff: BackoffPolicy | None = None
    cancel_upstream: bool = False
    exchange: Exchange | None = None

    def __post_init__(self) -> None:
        if self.max_wait is not None and self.max_wait <= 0:
            raise ValueError(f"max_wait must be positive, got {self.max_wait}")


class RunOrchestrator:
    """Submits a message to a thread and waits for the resulting run.

    At most one run per thread is in flight through this orchestrator: a
    second submission against the same thread waits for the first to finish.
    When ``max_concurrent_runs`` is configured, the number of runs being
    waited on at once is capped as well.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        config: AssistantConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._config = config
        self._backoff = BackoffPolicy.from_config(config)
        self._clock = clock
        self._sleep = sleep
        self._thread_locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()
        self._run_slots = (
            asyncio.Semaphore(config.max_concurrent_runs)
            if config.max_concurrent_runs
            else None
        )

    @property
    def backoff(self) -> BackoffPolicy:
        return self._backoff

    def _thread_lock(self, thread_id: str) -> asyncio.Lock:
        lock = self._thread_locks.get(thread_id)
        if lock is None:
            lock = asyncio.Lock()
            self._thread_locks[thread_id] = lock
        return lock

    async def submit_and_wait(
        self,
        thread_id: str,
        message_text: str,
        options: RunOptions | None = None,
    ) -> RunResult:
        """Append a user message, start a run and wait until it finishes.

        Args:
            thread_id: Thread to post to.
            message_text: The user's message.
            options: Per-call overrides.

        Returns:
            RunResult for the completed run.

        Raises:
            RunSubmissionError: Message or run creation was rejected.
            RunFailedError: The run ended in a non-success terminal status.
            RunTimeoutError: The run did not finish within ``max_wait``.
            UpstreamUnavailableError: The upstream was unreachable or failed.
            asyncio.CancelledError: The wait was cancelled by the caller.
        """
        options = options or RunOptions()
        exchange = options.exchange

        try:
            async with self._thread_lock(thread_id):
                run = await self._submit(thread_id, message_text, exchange)
                if self._run_slots is None:
                    return await self._wait(run, options)
                async with self._run_slots:
                    return await self._wait(run, options)
        except asyncio.CancelledError:
            # Covers the lock wait and submission as well as polling.
            if exchange is not None and not exchange.is_terminal:
                exchange.advance(ExchangeState.CANCELLED)
            raise

    async def _submit(
        self,
        thread_id: str,
        message_text: str,
        exchange: Exchange | None,
    ) -> Run:
        try:
            await self._client.beta.threads.messages.create(
                thread_id=thread_id,
                role="user",
                content=message_text,
            )
        except openai.OpenAIError as e:
            logger.warning(f"Message submission to thread {thread_id} failed: {e}")
            raise translate_upstream_error(e, RunSubmissionError, "create_message") from e

        if exchange is not None:
            exchange.advance(ExchangeState.MESSAGE_SUBMITTED)

        try:
            created = await self._client.beta.threads.runs.create(
                thread_id=thread_id,
                assistant_id=self._config.assistant_id,
            )
        except openai.OpenAIError as e:
            logger.warning(f"Run creation on thread {thread_id} failed: {e}")
            raise translate_upstream_error(e, RunSubmissionError, "create_run") from e

        run = Run.from_upstream(created)
        logger.info(f"Started run {run.id} on thread {thread_id}")

        if exchange is not None:
            exchange.run_id = run.id
            if not run.is_terminal:
                self._observe(exchange, run)
        return run

    async def _wait(self, run: Run, options: RunOptions) -> RunResult:
        policy = options.backoff or self._backoff
        max_wait = options.max_wait if options.max_wait is not None else self._config.max_wait
        max_polls = policy.max_polls(max_wait)
        exchange = options.exchange

        started = self._clock()
        deadline = started + max_wait
        polls = 0

        try:
            while True:
                # The read at the deadline still gets one interval.
                budget = max(deadline - self._clock(), policy.interval)
                polls += 1
                try:
                    async with asyncio.timeout(budget):
                        current = await self._poll(run)
                except TimeoutError:
                    raise self._timed_out(run, exchange, max_wait, polls, started) from None
                logger.debug(f"Run {run.id} status {current.status} (poll {polls})")

                if exchange is not None:
                    self._observe(exchange, current)
                if current.is_terminal:
                    break

                remaining = deadline - self._clock()
                if remaining <= 0 or polls >= max_polls:
                    raise self._timed_out(run, exchange, max_wait, polls, started)

                await self._sleep(min(policy.delay(polls - 1), remaining))

        except asyncio.CancelledError:
            logger.info(f"Stopped waiting on run {run.id} after {polls} polls")
            if options.cancel_upstream:
                await self._cancel_upstream(run)
            raise

        elapsed = self._clock() - started
        if not current.succeeded:
            logger.warning(
                f"Run {current.id} ended with status {current.status}: {current.last_error}"
            )
            raise RunFailedError(current.id, current.status, current.last_error)

        logger.info(f"Run {current.id} completed after {polls} polls ({elapsed:.1f}s)")
        return RunResult(run=current, polls=polls, elapsed=elapsed)

    def _timed_out(
        self,
        run: Run,
        exchange: Exchange | None,
        max_wait: float,
        polls: int,
        started: float,
    ) -> RunTimeoutError:
        elapsed = self._clock() - started
        logger.warning(f"Run {run.id} timed out after {elapsed:.1f}s")
        if exchange is not None:
            exchange.advance(ExchangeState.RUN_TIMED_OUT)
        return RunTimeoutError(run.id, max_wait, polls, elapsed)

    async def _poll(self, run: Run) -> Run:
        # Status reads are idempotent, so transient failures may be retried.
        failures = 0
        while True:
            try:
                retrieved = await self._client.beta.threads.runs.retrieve(
                    run_id=run.id,
                    thread_id=run.thread_id,
                )
                return Run.from_upstream(retrieved)
            except openai.OpenAIError as e:
                error = translate_upstream_error(e, RunPollError, "retrieve_run")
                failures += 1
                if (
                    not isinstance(error, UpstreamUnavailableError)
                    or failures > self._config.poll_retries
                ):
                    raise error from e
                logger.warning(f"Reading run {run.id} failed ({e}), retrying")

    async def _cancel_upstream(self, run: Run) -> None:
        try:
            await self._client.beta.threads.runs.cancel(
                run_id=run.id,
                thread_id=run.thread_id,
            )
            logger.info(f"Requested upstream cancellation of run {run.id}")
        except openai.OpenAIError as e:
            logger.warning(f"Upstream cancellation of run {run.id} failed: {e}")

    @staticmethod
    def _observe(exchange: Exchange, run: Run) -> None:
        state = exchange_state_for(run.status)
        # A run can be seen queued again after it started; keep the later state.
        if state == ExchangeState.RUN_QUEUED and exchange.state != ExchangeState.MESSAGE_SUBMITTED:
            return
        exchange.advance(state)
