"""Streaming conversation controller.

Owns the transcript, the latency series and the debug snapshot. Turns one
user submission into exactly one in-flight backend request, mirrors
streamed chunks into the transcript as they arrive, and records telemetry
when the request ends.

States:
    IDLE --submit--> AWAITING_RESPONSE --success/failure--> IDLE

Everything runs on a single event loop; the only suspension points are
the gateway call and the chunk deliveries it makes.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from ..config import GatewayConfig
from ..errors import BackendFailureError, EmptyTaskAndQuestionError, SubmissionInProgressError
from ..gateway import BackendGateway, RoutedCall, StreamingCall, create_gateway
from ..llm import LLMProvider
from ..prompts import PromptBuilder
from ..prompts.builder import to_plain_data
from ..tasks import DEFAULT_TASK_KIND, TaskCatalog, TaskKind, default_catalog
from .accumulator import StreamAccumulator
from .analytics import AnalyticsRecorder, AnalyticsSummary
from .debug import DebugRecorder
from .models import (
    AnalyticsSample,
    ControllerEvent,
    ControllerState,
    ErrorSnapshot,
    EventKind,
    Message,
    Role,
    SuccessSnapshot,
)
from .store import ConversationStore

# User message content when only a task kind is submitted
DEFAULT_USER_CONTENT = "Analyze data"
ANALYTICS_LABEL_FORMAT = "%H:%M:%S"

Listener = Callable[[ControllerEvent], None]
DebugCallback = Callable[[str, str, str], None]

_transcript_adapter = TypeAdapter(list[Message])


def export_filename(now: datetime | None = None) -> str:
    """File name for an exported transcript, e.g. chat-history-20260101T120000.json."""
    now = now or datetime.now()
    return f"chat-history-{now.strftime('%Y%m%dT%H%M%S')}.json"


def parse_transcript(data: bytes | str) -> list[Message]:
    """Rebuild messages from bytes produced by export_transcript()."""
    return _transcript_adapter.validate_json(data)


@dataclass
class _PendingRequest:
    request_id: int
    message_index: int
    task_kind: TaskKind | None
    input_snapshot: dict[str, Any] | None
    prompt: str
    started_at: float
    label: str


class ConversationController:
    """State machine for one conversation.

    Hidden design decisions:
    - Which gateway variant is used (fixed at construction)
    - How streamed chunks are merged into the transcript
    - How latency and debug records are derived from a request

    Usage:
        async with ConversationController(gateway) as controller:
            controller.subscribe(render)
            await controller.submit(TaskKind.WATER_QUALITY_ANALYSIS, data, "")
    """

    def __init__(
        self,
        gateway: BackendGateway,
        catalog: TaskCatalog | None = None,
        prompt_builder: PromptBuilder | None = None,
        strict: bool = False,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the controller.

        Args:
            gateway: RoutedCall or StreamingCall gateway
            catalog: Task catalog (default: the built-in catalog)
            prompt_builder: Prompt builder (default: one over ``catalog``)
            strict: Raise EmptyTaskAndQuestionError instead of silently
                ignoring empty submissions
            clock: Monotonic clock in seconds, used for latency
            now: Wall clock, used for message timestamps and labels

        Raises:
            TypeError: If gateway is neither a RoutedCall nor a StreamingCall
        """
        if isinstance(gateway, StreamingCall):
            self._dispatch = self._dispatch_streaming
            self._fallback_kind: TaskKind | None = None
        elif isinstance(gateway, RoutedCall):
            self._dispatch = self._dispatch_routed
            self._fallback_kind = DEFAULT_TASK_KIND
        else:
            raise TypeError(
                f"Gateway must be a RoutedCall or StreamingCall, got {type(gateway).__name__}"
            )

        self._gateway = gateway
        self._catalog = catalog or default_catalog
        self._prompt_builder = prompt_builder or PromptBuilder(self._catalog)
        self._strict = strict
        self._clock = clock
        self._now = now

        self._store = ConversationStore()
        self._accumulator = StreamAccumulator()
        self._analytics = AnalyticsRecorder()
        self._debug_recorder = DebugRecorder()

        self._state = ControllerState.IDLE
        self._pending: _PendingRequest | None = None
        self._request_counter = 0
        self._pending_question = ""
        self._last_error: BackendFailureError | None = None
        self._listeners: list[Listener] = []
        self._debug_callback: DebugCallback | None = None

    @classmethod
    def from_config(
        cls,
        config: GatewayConfig,
        provider: LLMProvider | None = None,
        **kwargs: Any
    ) -> "ConversationController":
        """Build a controller whose gateway is created from ``config``."""
        return cls(create_gateway(config, provider), **kwargs)

    # Read accessors

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state is ControllerState.AWAITING_RESPONSE

    @property
    def gateway(self) -> BackendGateway:
        return self._gateway

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._store.messages

    @property
    def analytics(self) -> tuple[AnalyticsSample, ...]:
        return self._analytics.samples

    def analytics_pairs(self) -> list[tuple[str, int]]:
        return self._analytics.as_pairs()

    def analytics_summary(self) -> AnalyticsSummary | None:
        return self._analytics.summary()

    @property
    def debug_snapshot(self) -> SuccessSnapshot | ErrorSnapshot | None:
        return self._debug_recorder.snapshot

    def debug_json(self) -> str:
        return self._debug_recorder.to_json()

    @property
    def last_error(self) -> BackendFailureError | None:
        """Failure of the most recent submission, None if it succeeded."""
        return self._last_error

    @property
    def pending_question(self) -> str:
        """Question of the in-flight or last failed submission."""
        return self._pending_question

    # Notification

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the callback for execution logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Controller", message)

    def _notify(self, kind: EventKind, **fields: Any) -> None:
        event = ControllerEvent(kind=kind, **fields)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                self._debug("error", f"Listener failed on {kind.value} event: {e}")

    # Transitions

    async def submit(
        self,
        task_kind: TaskKind | str | None = None,
        structured_input: Any = None,
        free_text: str = "",
    ) -> Message | None:
        """Submit a question and wait for the response.

        Backend failures are recorded, not raised: the returned assistant
        message then holds whatever partial text had streamed in, and
        ``last_error`` / ``debug_snapshot`` describe the failure.

        Args:
            task_kind: Task to run, or None for a free-text question
            structured_input: Readings accompanying the request (opaque)
            free_text: The user's question

        Returns:
            The final assistant message, or None if the submission was empty

        Raises:
            SubmissionInProgressError: If a submission is already in flight
            EmptyTaskAndQuestionError: On an empty submission in strict mode
            UnknownTaskKindError: If task_kind is not in the catalog
        """
        if self.is_busy:
            raise SubmissionInProgressError()

        question = (free_text or "").strip()
        if task_kind is None and not question:
            if self._strict:
                raise EmptyTaskAndQuestionError()
            self._debug("debug", "Ignored submission without task or question")
            return None

        kind = self._catalog.resolve(task_kind).kind if task_kind is not None else None
        snapshot = to_plain_data(structured_input) if structured_input is not None else None
        submitted_at = self._now()

        self._store.append(Message(
            role=Role.USER,
            content=question or DEFAULT_USER_CONTENT,
            created_at=submitted_at,
            task_kind=kind,
            input_snapshot=snapshot,
        ))
        index = self._store.append(Message(
            role=Role.ASSISTANT,
            created_at=self._now(),
            task_kind=kind,
        ))
        self._accumulator.begin()

        try:
            # Routed gateways answer untasked questions with the default task
            prompt = self._prompt_builder.build(
                kind or self._fallback_kind, structured_input, question
            )
        except Exception as e:
            self._accumulator.abort()
            self._debug_recorder.record_error(e, kind, snapshot)
            self._debug("error", f"Prompt construction failed: {e}")
            raise

        self._request_counter += 1
        pending = _PendingRequest(
            request_id=self._request_counter,
            message_index=index,
            task_kind=kind,
            input_snapshot=snapshot,
            prompt=prompt,
            started_at=self._clock(),
            label=submitted_at.strftime(ANALYTICS_LABEL_FORMAT),
        )
        self._pending = pending
        self._pending_question = question
        self._state = ControllerState.AWAITING_RESPONSE

        try:
            task_name = kind.value if kind else "free text"
            self._debug("info", f"Submitting {task_name} request #{pending.request_id}")
            self._debug("debug", f"Prompt: {prompt[:200]}{'...' if len(prompt) > 200 else ''}")
            self._notify(EventKind.SUBMITTED, message_index=index, content="")

            try:
                final_text = await self._dispatch(pending, structured_input, question)
                if not isinstance(final_text, str):
                    raise TypeError(
                        f"Gateway returned {type(final_text).__name__} instead of response text"
                    )
            except asyncio.CancelledError as e:
                self._fail(pending, e)
                raise
            except Exception as e:
                failure = BackendFailureError(e)
                failure.__cause__ = e
                return self._fail(pending, failure)

            return self._complete(pending, final_text)
        finally:
            self._release(pending)

    async def _dispatch_streaming(
        self,
        pending: _PendingRequest,
        structured_input: Any,
        question: str,
    ) -> str:
        assert isinstance(self._gateway, StreamingCall)
        return await self._gateway.stream(
            pending.prompt, partial(self._on_chunk, pending.request_id)
        )

    async def _dispatch_routed(
        self,
        pending: _PendingRequest,
        structured_input: Any,
        question: str,
    ) -> str:
        assert isinstance(self._gateway, RoutedCall)
        kind = pending.task_kind or self._fallback_kind
        return await self._gateway.call(kind, structured_input, question)

    def _on_chunk(self, request_id: int, chunk: str) -> None:
        pending = self._pending
        if pending is None or pending.request_id != request_id:
            self._debug("warning", f"Ignored chunk for finished request #{request_id}")
            return

        self._accumulator.append(chunk)
        message = self._store.update_content(pending.message_index, self._accumulator.current)
        self._notify(EventKind.CHUNK, message_index=pending.message_index, content=message.content)

    def _complete(self, pending: _PendingRequest, final_text: str) -> Message:
        latency_ms = max(0, round((self._clock() - pending.started_at) * 1000))

        # The terminal value wins over anything accumulated from chunks
        message = self._store.update_content(pending.message_index, final_text)
        self._analytics.record(pending.label, latency_ms)
        self._debug_recorder.record_success(
            pending.task_kind,
            pending.input_snapshot,
            pending.prompt,
            final_text,
            latency_ms,
        )
        self._accumulator.finish()
        self._pending_question = ""
        self._last_error = None
        self._pending = None
        self._state = ControllerState.IDLE

        self._debug("info", f"Request #{pending.request_id} completed in {latency_ms} ms")
        self._notify(EventKind.COMPLETED, message_index=pending.message_index, content=final_text)
        return message

    def _fail(self, pending: _PendingRequest, error: BaseException) -> Message:
        partial_text = self._accumulator.current
        self._accumulator.abort()
        self._debug_recorder.record_error(
            error,
            pending.task_kind,
            pending.input_snapshot,
            pending.prompt,
            partial_text,
        )
        if isinstance(error, BackendFailureError):
            self._last_error = error
        self._pending = None
        self._state = ControllerState.IDLE

        message = self._store[pending.message_index]
        self._debug("error", f"Request #{pending.request_id} failed: {error}")
        self._notify(
            EventKind.FAILED,
            message_index=pending.message_index,
            content=message.content,
            error=str(error) or type(error).__name__,
        )
        return message

    def _release(self, pending: _PendingRequest) -> None:
        # No-op when _complete or _fail already ran to the end
        if self._pending is not pending:
            return
        self._accumulator.abort()
        self._pending = None
        self._state = ControllerState.IDLE

    def reset(self) -> None:
        """Clear the transcript and analytics; the debug snapshot is kept.

        Raises:
            SubmissionInProgressError: If a submission is in flight
        """
        if self.is_busy:
            raise SubmissionInProgressError()
        self._store.clear()
        self._analytics.clear()
        self._debug("info", "Conversation reset")
        self._notify(EventKind.RESET)

    # Export

    def export_transcript(self) -> bytes:
        """Serialize the transcript as UTF-8 JSON.

        Each entry has role, content, timestamp and, when present,
        taskKind and inputSnapshot.
        """
        return _transcript_adapter.dump_json(
            list(self._store.messages), indent=2, by_alias=True, exclude_none=True
        )

    def save_transcript(self, directory: Path) -> Path:
        """Write the exported transcript to a timestamped file in ``directory``."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / export_filename(self._now())
        path.write_bytes(self.export_transcript())
        self._debug("info", f"Transcript saved to {path}")
        return path

    # Lifecycle

    async def close(self) -> None:
        """Close the gateway and its provider."""
        await self._gateway.close()

    async def __aenter__(self) -> "ConversationController":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
