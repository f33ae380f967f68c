"""ResponseHandler: drives one streamed generation into one transcript message."""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set, Union

from assistant_relay.config.models import RelayConfig
from assistant_relay.indicators.broadcaster import IndicatorBroadcaster
from assistant_relay.llm_providers.abc import GenerationProvider
from assistant_relay.llm_providers.types import (
    GenerationEvent,
    GenerationEventStream,
    RequiresActionEvent,
    ToolOutput,
)
from assistant_relay.log_adapters.abc import LogAdapter
from assistant_relay.tools.executor import ToolExecutor
from assistant_relay.transport.abc import ChatTransport
from assistant_relay.transport.types import AI_INDICATOR_STOP, MessageRecord, TransportEvent

from .throttle import should_persist
from .types import GenerationSnapshot, GenerationState

logger = logging.getLogger(__name__)

DEFAULT_ERROR_TEXT = "Error generating the message"


async def _close_stream(stream: GenerationEventStream) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception as e:
        logger.debug(f"ResponseHandler: Ignoring error while closing stream: {e}")


class ResponseHandler:
    """
    State machine for one generation bound to one outbound message.

    Events are consumed strictly in order by ``run()``. Tool round trips
    swap in the continuation stream and keep looping. Every terminal path
    (completion, cancellation, error, deadline, external dispose) goes
    through a single guard so the transcript receives exactly one final
    ``generating: False`` update and ``dispose()`` has effect once.
    """

    def __init__(
        self,
        *,
        provider: GenerationProvider,
        context_id: str,
        stream: GenerationEventStream,
        transport: ChatTransport,
        message: MessageRecord,
        indicators: Optional[IndicatorBroadcaster] = None,
        tool_executor: Optional[ToolExecutor] = None,
        config: Optional[RelayConfig] = None,
        on_dispose: Optional[Callable[["ResponseHandler"], None]] = None,
        log_adapter: Optional[LogAdapter] = None,
    ):
        self._provider = provider
        self._context_id = context_id
        self._stream = stream
        self._transport = transport
        self._message = message
        self._indicators = indicators or IndicatorBroadcaster(transport)
        self._tool_executor = tool_executor
        self._config = config or RelayConfig()
        self._on_dispose = on_dispose
        self._log_adapter = log_adapter

        self._state: GenerationState = "PENDING"
        self._text_parts: List[str] = []
        self._chunk_count = 0
        self._run_id: Optional[str] = None
        self._done = False
        self._disposed = False
        self._final_persisted = False
        self._cleared = False
        self._finishing = False
        self._finished = asyncio.Event()
        self._consumer_stopped = False
        self._task: Optional["asyncio.Task[None]"] = None
        self._pending_writes: Set["asyncio.Task[None]"] = set()

        self._stop_subscription = transport.subscribe(AI_INDICATOR_STOP, self._handle_stop_event)

    @property
    def message_id(self) -> str:
        return self._message["id"]

    @property
    def conversation_id(self) -> str:
        return self._message.get("cid", "")

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def run_id(self) -> Optional[str]:
        return self._run_id

    @property
    def done(self) -> bool:
        return self._done

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def accumulated_text(self) -> str:
        return "".join(self._text_parts)

    @property
    def chunk_count(self) -> int:
        return self._chunk_count

    def snapshot(self) -> GenerationSnapshot:
        return GenerationSnapshot(
            run_id=self._run_id,
            message_id=self.message_id,
            conversation_id=self.conversation_id,
            state=self._state,
            accumulated_text=self.accumulated_text,
            chunk_count=self._chunk_count,
            done=self._done,
        )

    # --- Lifecycle ---

    async def run(self) -> None:
        """Consumes the generation to a terminal state, then disposes."""
        self._task = asyncio.current_task()
        timeout = self._config.generation_timeout_seconds
        await self._log_event("generation.started", {"message_id": self.message_id, "conversation_id": self.conversation_id})
        try:
            try:
                if timeout:
                    await asyncio.wait_for(self._consume_all(), timeout=timeout)
                else:
                    await self._consume_all()
            except asyncio.TimeoutError:
                logger.warning(f"ResponseHandler: Generation for message '{self.message_id}' exceeded {timeout:g}s.")
                await self._finish(
                    "ERROR",
                    text=f"Generation timed out after {timeout:g} seconds",
                    error="timeout",
                    cancel_upstream=True,
                )
            except Exception as e:
                logger.error(f"ResponseHandler: Stream error for message '{self.message_id}': {e}", exc_info=True)
                await self._fail(e)

            if not self._done:
                if self._text_parts:
                    logger.warning(f"ResponseHandler: Stream for message '{self.message_id}' ended without a completion event. Finalizing received text.")
                    await self._finish("COMPLETED")
                else:
                    await self._fail("Generation ended unexpectedly")
            await self.dispose()
        except asyncio.CancelledError:
            if self._consumer_stopped and self._task is not None and self._task.uncancel() == 0:
                # Only our own stop request was pending.
                return
            await self.dispose()
            raise

    async def cancel(self) -> bool:
        """Stops the generation. Returns False if it had already reached a terminal state."""
        if self._done:
            return False
        logger.info(f"ResponseHandler: Stop generating for message '{self.message_id}'.")
        return await self._finish("CANCELLED", cancel_upstream=True)

    async def dispose(self) -> None:
        """
        Releases the handler. If another task is mid-way through a terminal
        transition, waits for it; that transition owns the final write.
        """
        if self._finishing:
            await self._finished.wait()
        await self._dispose()

    async def _dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if not self._done:
            # Detached before any terminal event; the upstream run is left alone.
            self._done = True
            self._state = "CANCELLED"
        self._stop_subscription.unsubscribe()
        if not self._final_persisted:
            await self._reconcile_transcript()
        if not self._cleared:
            self._cleared = True
            await self._indicators.clear(self.conversation_id, self.message_id)
        self._stop_consumer()
        if self._on_dispose:
            try:
                self._on_dispose(self)
            except Exception as e:
                logger.error(f"ResponseHandler: on_dispose callback failed for message '{self.message_id}': {e}", exc_info=True)

    # --- Stream consumption ---

    async def _consume_all(self) -> None:
        stream: Optional[GenerationEventStream] = self._stream
        while stream is not None and not self._done:
            stream = await self._consume(stream)

    async def _consume(self, stream: GenerationEventStream) -> Optional[GenerationEventStream]:
        next_stream: Optional[GenerationEventStream] = None
        try:
            async for event in stream:
                if self._done:
                    break
                next_stream = await self._handle_event(event)
                if next_stream is not None or self._done:
                    break
        finally:
            await _close_stream(stream)
        return next_stream

    async def _handle_event(self, event: GenerationEvent) -> Optional[GenerationEventStream]:
        event_type = event.get("type")
        if event_type == "run_step_created":
            if event.get("run_id") and not self._run_id:
                self._run_id = event["run_id"]
            self._enter_generating()
            if event.get("step_type") == "message_creation":
                await self._indicators.update(self.conversation_id, self.message_id, "GENERATING")
        elif event_type == "message_created":
            self._enter_generating()
            await self._indicators.update(self.conversation_id, self.message_id, "GENERATING")
        elif event_type == "text_delta":
            self._enter_generating()
            self._append_text(event.get("value") or "")
        elif event_type == "requires_action":
            return await self._handle_tool_calls(event)  # type: ignore[arg-type]
        elif event_type == "completed":
            await self._finish("COMPLETED")
        elif event_type == "run_failed":
            await self._fail(event.get("message") or DEFAULT_ERROR_TEXT)
        elif event_type == "run_cancelled":
            await self._finish("CANCELLED")
        else:
            logger.debug(f"ResponseHandler: Ignoring event type '{event_type}'.")
        return None

    def _enter_generating(self) -> None:
        if self._state == "PENDING":
            self._state = "GENERATING"

    def _append_text(self, value: str) -> None:
        index = self._chunk_count
        self._text_parts.append(value)
        self._chunk_count += 1
        if should_persist(index, self._config.throttle):
            self._schedule_partial_persist(self.accumulated_text)

    async def _handle_tool_calls(self, event: RequiresActionEvent) -> Optional[GenerationEventStream]:
        if event.get("run_id") and not self._run_id:
            self._run_id = event["run_id"]
        self._state = "AWAITING_TOOLS"
        await self._indicators.update(self.conversation_id, self.message_id, "EXTERNAL_SOURCES")

        outputs: List[ToolOutput] = []
        unknown: List[str] = []
        for call in event.get("tool_calls", []):
            if not self._tool_executor or not self._tool_executor.is_known(call["name"]):
                logger.warning(f"ResponseHandler: No handler for requested tool '{call['name']}'. Skipping.")
                unknown.append(call["name"])
                continue
            output = await self._tool_executor.execute(
                call["name"], call["arguments"], context={"message_id": self.message_id, "run_id": self._run_id}
            )
            outputs.append({"tool_call_id": call["id"], "output": output})
            await self._log_event("tool.executed", {"message_id": self.message_id, "tool": call["name"], "tool_call_id": call["id"]})

        if self._done:
            return None
        if not outputs:
            names = ", ".join(unknown) or "none"
            if self._config.unknown_tool_policy == "complete":
                logger.info(f"ResponseHandler: Only unsupported tools requested ({names}); finalizing received text.")
                await self._finish("COMPLETED")
            else:
                await self._finish(
                    "ERROR",
                    text=f"Assistant requested unsupported tool(s): {names}",
                    error="unsupported_tool",
                    cancel_upstream=True,
                )
            return None

        run_id = event["run_id"] or self._run_id
        logger.debug(f"ResponseHandler: Submitting {len(outputs)} tool output(s) for run '{run_id}'.")
        next_stream = self._provider.submit_tool_outputs(self._context_id, run_id, outputs)  # type: ignore[arg-type]
        self._state = "GENERATING"
        return next_stream

    # --- Stop signal ---

    async def _handle_stop_event(self, event: TransportEvent) -> None:
        if self._done or event.get("message_id") != self.message_id:
            return
        await self.cancel()

    # --- Terminal transitions ---

    async def _fail(self, error: Union[str, BaseException]) -> bool:
        if isinstance(error, BaseException):
            text = str(error) or DEFAULT_ERROR_TEXT
            detail = f"{type(error).__name__}: {error}"
        else:
            text = error or DEFAULT_ERROR_TEXT
            detail = text
        return await self._finish("ERROR", text=text, error=detail)

    async def _finish(
        self,
        state: GenerationState,
        *,
        text: Optional[str] = None,
        error: Optional[str] = None,
        cancel_upstream: bool = False,
    ) -> bool:
        if self._done:
            return False
        self._done = True
        self._state = state
        self._finishing = True
        try:
            if cancel_upstream:
                await self._cancel_upstream()
            await self._drain_pending_writes()
            if state == "ERROR":
                await self._indicators.update(self.conversation_id, self.message_id, "ERROR")

            fields: Dict[str, Any] = {
                "text": self.accumulated_text if text is None else text,
                "generating": False,
            }
            if error is not None:
                fields["error"] = error
            try:
                await self._transport.partial_update_message(self.message_id, fields)
                self._final_persisted = True
            except Exception as e:
                logger.error(f"ResponseHandler: Final update failed for message '{self.message_id}': {e}", exc_info=True)

            self._cleared = True
            await self._indicators.clear(self.conversation_id, self.message_id)
            await self._log_event(
                "generation.finished",
                {"message_id": self.message_id, "run_id": self._run_id, "state": state, "chunks": self._chunk_count},
            )
            await self._dispose()
        finally:
            self._finishing = False
            self._finished.set()
        return True

    async def _cancel_upstream(self) -> None:
        if not self._run_id:
            logger.debug(f"ResponseHandler: No run id known for message '{self.message_id}'; skipping upstream cancel.")
            return
        try:
            await self._provider.cancel_generation(self._context_id, self._run_id)
        except Exception as e:
            logger.error(f"ResponseHandler: Error cancelling run '{self._run_id}': {e}", exc_info=True)

    def _stop_consumer(self) -> None:
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            self._consumer_stopped = True
            task.cancel()

    # --- Transcript writes ---

    def _schedule_partial_persist(self, text: str) -> None:
        task = asyncio.create_task(self._persist_partial(text))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _persist_partial(self, text: str) -> None:
        try:
            await self._transport.partial_update_message(self.message_id, {"text": text, "generating": True})
        except Exception as e:
            logger.warning(f"ResponseHandler: Partial update failed for message '{self.message_id}': {e}")

    async def _drain_pending_writes(self) -> None:
        if self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    async def _reconcile_transcript(self) -> None:
        await self._drain_pending_writes()
        try:
            current = await self._transport.get_message(self.message_id)
            if current is None or not current.get("generating"):
                return
            fields: Dict[str, Any] = {"generating": False}
            if self._text_parts:
                fields["text"] = self.accumulated_text
            await self._transport.partial_update_message(self.message_id, fields)
            self._final_persisted = True
        except Exception as e:
            logger.error(f"ResponseHandler: Could not clear generating status on dispose for message '{self.message_id}': {e}", exc_info=True)

    async def _log_event(self, event_type: str, data: Dict[str, Any]) -> None:
        if not self._log_adapter:
            return
        try:
            await self._log_adapter.process_event(event_type, data)
        except Exception as e:
            logger.debug(f"ResponseHandler: Log adapter failed for '{event_type}': {e}")
