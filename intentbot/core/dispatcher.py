"""Asynchronous intent dispatcher backed by a fixed pool of workers."""

from __future__ import annotations

import asyncio
from typing import Literal, TypeAlias

from loguru import logger

from intentbot.core.errors import DispatchQueueFullError, NLUQueryError, NLUTimeoutError
from intentbot.core.matcher import match_intent
from intentbot.core.models import (
    ChatMessage,
    DispatchContext,
    DispatchOutcome,
    DispatchRecord,
    NLUResult,
)
from intentbot.core.ports import DispatchObserver, Intent, NLUPort, ReplyPort, intent_name
from intentbot.core.registry import IntentRegistry
from intentbot.telemetry.base import TelemetryPort
from intentbot.telemetry.inmemory import InMemoryTelemetry
from intentbot.telemetry.recorder import DispatchMetrics

QueryFailurePolicy: TypeAlias = Literal["drop", "report"]

PRIVATE = "PRIVATE"
DEFAULT_WORKERS = 2
DEFAULT_QUERY_FAILURE_MESSAGE = "I couldn't reach my language service right now, please try again later."

ACTION_OUTPUT = (
    'Executing Intelligence Action "{action}" for:'
    "\n\t\tUser:\t {author}"
    "\n\t\tServer:\t {server}"
    "\n\t\tChannel: {channel}"
    "\n\t\tMessage: {message}"
    "\n\t\tResponse: {response}"
)


def strip_trigger(text: str) -> str:
    """Drop the leading command word and trim what remains."""
    parts = text.strip().split(None, 1)
    if len(parts) < 2:
        return ""
    return parts[1].strip()


def describe_author(message: ChatMessage) -> str:
    author = message.author
    return f"{author.name}#{author.discriminator} [{author.id}]"


def describe_server(message: ChatMessage) -> str:
    if not message.is_guild or message.guild is None:
        return PRIVATE
    return f"{message.guild.name} [{message.guild.id}]"


def describe_channel(message: ChatMessage) -> str:
    if not message.is_guild:
        return PRIVATE
    return f"{message.channel.name} [{message.channel.id}]"


def diagnostic_line(context: DispatchContext, result: NLUResult) -> str:
    """Multi-line diagnostic entry for one resolved NLU call."""
    message = context.message
    return ACTION_OUTPUT.format(
        action=result.action,
        author=describe_author(message),
        server=describe_server(message),
        channel=describe_channel(message),
        message=message.content,
        response=result.fulfillment,
    )


class Dispatcher:
    """Fire-and-forget intent dispatch.

    ``submit`` enqueues a request and returns immediately; a fixed number of
    worker tasks drain the queue, each taking one request through the NLU
    call, matching, and at most one intent invocation before taking the next.

    A dispatcher built without an NLU port is disabled for its whole
    lifetime: registration returns False and submissions are ignored.
    """

    def __init__(
        self,
        nlu: NLUPort | None,
        *,
        reply: ReplyPort,
        telemetry: TelemetryPort | None = None,
        workers: int = DEFAULT_WORKERS,
        queue_maxsize: int = 0,
        query_timeout: float | None = None,
        on_query_failure: QueryFailurePolicy = "drop",
        query_failure_message: str = DEFAULT_QUERY_FAILURE_MESSAGE,
        diagnostics_enabled: bool = True,
        observer: DispatchObserver | None = None,
    ) -> None:
        if on_query_failure not in ("drop", "report"):
            raise ValueError(f"Unknown query failure policy: {on_query_failure!r}")
        self._nlu = nlu
        self._enabled = nlu is not None
        self._reply = reply
        self._metrics = DispatchMetrics(telemetry or InMemoryTelemetry())
        self._registry = IntentRegistry(enabled=self._enabled, on_register=self._metrics.init_intent)
        self._worker_count = max(1, int(workers))
        self._queue: asyncio.Queue[DispatchContext] = asyncio.Queue(maxsize=max(0, int(queue_maxsize)))
        self._query_timeout = query_timeout if query_timeout and query_timeout > 0 else None
        self._on_query_failure = on_query_failure
        self._query_failure_message = query_failure_message
        self._diagnostics_enabled = diagnostics_enabled
        self._observer = observer
        self._workers: list[asyncio.Task[None]] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def registry(self) -> IntentRegistry:
        return self._registry

    @property
    def nlu(self) -> NLUPort | None:
        return self._nlu

    @property
    def metrics(self) -> DispatchMetrics:
        return self._metrics

    @property
    def worker_count(self) -> int:
        return self._worker_count

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._workers)

    @property
    def pending(self) -> int:
        """Number of queued requests not yet picked up by a worker."""
        return self._queue.qsize()

    def register(self, action: str, wildcard: bool, handler: Intent) -> bool:
        return self._registry.register(action, wildcard, handler)

    def register_intent(self, handler: Intent) -> bool:
        return self._registry.register_intent(handler)

    # ── Submission ───────────────────────────────────────────────────────

    def submit(self, context: DispatchContext) -> bool:
        """Accept one request for asynchronous processing.

        Returns False when the dispatcher is disabled. Raises
        ``DispatchQueueFullError`` when a bounded queue is full.
        """
        if not self._enabled:
            return False

        request = context.with_utterance(strip_trigger(context.utterance))
        try:
            self._queue.put_nowait(request)
        except asyncio.QueueFull as e:
            logger.warning(
                "Dispatch queue full ({} pending), rejecting request from {}",
                self._queue.qsize(),
                describe_author(request.message),
            )
            self._emit(DispatchRecord(context=request, outcome=DispatchOutcome.REJECTED))
            raise DispatchQueueFullError(f"dispatch queue is full ({self._queue.maxsize} pending)") from e

        self._metrics.received()
        self._metrics.queue_size(self._queue.qsize())
        return True

    # ── Worker lifecycle ─────────────────────────────────────────────────

    def start(self) -> None:
        """Spawn the worker tasks on the running event loop."""
        if not self._enabled or self.running:
            return
        self._workers = [
            asyncio.create_task(self._worker(index), name=f"intentbot-dispatch-{index}")
            for index in range(self._worker_count)
        ]
        logger.info("Intent dispatcher started with {} workers", self._worker_count)

    async def join(self) -> None:
        """Wait until every accepted request has been processed."""
        if not self._enabled:
            return
        await self._queue.join()

    async def stop(self) -> None:
        """Cancel the workers; requests still queued are discarded."""
        workers, self._workers = self._workers, []
        for task in workers:
            task.cancel()
        if workers:
            await asyncio.gather(*workers, return_exceptions=True)
            logger.info("Intent dispatcher stopped")

    async def __aenter__(self) -> Dispatcher:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def _worker(self, index: int) -> None:
        while True:
            context = await self._queue.get()
            try:
                self._metrics.queue_size(self._queue.qsize())
                await self._process(context)
            except Exception:
                logger.exception("Dispatch worker {} failed while processing a request", index)
            finally:
                self._queue.task_done()

    # ── Request processing ───────────────────────────────────────────────

    async def _process(self, context: DispatchContext) -> DispatchOutcome:
        try:
            result = await self._query(context)
        except NLUQueryError as e:
            await self._handle_query_failure(context, e)
            return DispatchOutcome.QUERY_FAILED

        if self._diagnostics_enabled:
            logger.info("{}", diagnostic_line(context, result))

        if not result.ok:
            logger.warning(
                "NLU returned status {} ({}) for action '{}'",
                result.status_code,
                result.status.error_type,
                result.action,
            )
            await self._reply.send_error(context.message, result.error_text())
            self._emit(DispatchRecord(context=context, outcome=DispatchOutcome.STATUS_ERROR, result=result))
            return DispatchOutcome.STATUS_ERROR

        matched = match_intent(result.action, self._registry.entries())
        if matched is None:
            logger.debug("No intent registered for action '{}'", result.action)
            self._emit(DispatchRecord(context=context, outcome=DispatchOutcome.UNMATCHED, result=result))
            return DispatchOutcome.UNMATCHED

        _, intent = matched
        return await self._invoke(context, result, intent)

    async def _query(self, context: DispatchContext) -> NLUResult:
        if self._nlu is None:
            raise RuntimeError("Dispatcher is disabled")
        call = self._nlu.query(context.utterance, session_id=context.resolved_session_id)
        if self._query_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._query_timeout)
        except TimeoutError as e:
            raise NLUTimeoutError(f"NLU query timed out after {self._query_timeout}s") from e

    async def _handle_query_failure(self, context: DispatchContext, error: NLUQueryError) -> None:
        logger.error(f"NLU query failed for {describe_author(context.message)}: {error}")
        if self._on_query_failure == "report":
            await self._reply.send_error(context.message, self._query_failure_message)
        self._emit(DispatchRecord(context=context, outcome=DispatchOutcome.QUERY_FAILED, error=error))

    async def _invoke(self, context: DispatchContext, result: NLUResult, intent: Intent) -> DispatchOutcome:
        name = intent_name(intent)
        self._metrics.executed(name)
        try:
            with self._metrics.time_execution(name):
                await intent.invoke(context, result)
        except Exception as e:
            logger.opt(exception=e).error("Intent {} failed on action '{}'", name, result.action)
            self._emit(
                DispatchRecord(
                    context=context,
                    outcome=DispatchOutcome.HANDLER_FAILED,
                    intent_name=name,
                    result=result,
                    error=e,
                )
            )
            return DispatchOutcome.HANDLER_FAILED

        self._emit(
            DispatchRecord(context=context, outcome=DispatchOutcome.INVOKED, intent_name=name, result=result)
        )
        return DispatchOutcome.INVOKED

    def _emit(self, record: DispatchRecord) -> None:
        if self._observer is None:
            return
        try:
            self._observer(record)
        except Exception:
            logger.exception("Dispatch observer failed on {} record", record.outcome.value)
