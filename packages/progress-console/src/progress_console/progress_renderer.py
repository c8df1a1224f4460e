"""
Renders progress events into the console's status area.

Provides:
- ProgressLabelAllocator: hands the fixed pool of worker labels to operations,
  giving the deepest active operation under a parent precedence over it
- BuildStatusRenderer: the overall build status line driven by root operations
- ConsoleBackedProgressRenderer: throttles the event stream into periodic
  flushes, each one a single consistent redraw
"""
from __future__ import annotations

import enum
import logging
import threading
import time
from collections import deque
from typing import Callable, Hashable, Iterable, Protocol

from .console import AnsiConsole
from .errors import ProgressProtocolError, TerminalWriteError
from .events import (
    EndOutputEvent,
    OutputEvent,
    OutputEventListener,
    ProgressCompleteEvent,
    ProgressEvent,
    ProgressStartEvent,
)
from .formatting import StatusBarFormatter
from .label import StyledLabel, single_line
from .operations import ProgressOperation, ProgressOperations
from .style import Span, Style
from .width import truncate_to_width

logger = logging.getLogger(__name__)

DEFAULT_THROTTLE_MS = 85


# ─────────────────────────────────────────────────────────────────────────────
# Label allocation
# ─────────────────────────────────────────────────────────────────────────────

class LabelState(enum.Enum):
    BOUND = "bound"
    UNBOUND = "unbound"
    SHADOWED = "shadowed"


class _Association:
    __slots__ = ("operation", "label")

    def __init__(self, operation: ProgressOperation, label: StyledLabel) -> None:
        self.operation = operation
        self.label = label


class ProgressLabelAllocator:
    """
    Binds worker labels to operations.

    A starting operation takes its parent's label if the parent has one (the
    parent is then shadowed), otherwise a free label, otherwise it waits in a
    FIFO queue. When a label is released it goes back to the shadowed parent of
    the operation that held it if there is one, else to the oldest waiting
    operation.
    """

    def __init__(self, labels: Iterable[StyledLabel], formatter: StatusBarFormatter) -> None:
        self._formatter = formatter
        self._free_labels: deque[StyledLabel] = deque(labels)
        self._assigned: dict[Hashable, _Association] = {}
        self._shadowed_by: dict[Hashable, set[Hashable]] = {}
        self._unassigned: deque[ProgressOperation] = deque()

    def attach(self, operation: ProgressOperation) -> None:
        association = None
        parent = operation.parent
        if parent is not None:
            association = self._assigned.pop(parent.operation_id, None)
            if association is not None:
                self._shadowed_by.setdefault(parent.operation_id, set()).add(operation.operation_id)
                logger.debug("%r takes the label of its parent %r", operation.operation_id, parent.operation_id)

        if association is None and self._free_labels:
            association = _Association(operation, self._free_labels.popleft())
        elif association is not None:
            association = _Association(operation, association.label)

        if association is None:
            self._unassigned.append(operation)
            logger.debug("No free label for %r, %d waiting", operation.operation_id, len(self._unassigned))
        else:
            self._assigned[operation.operation_id] = association

    def detach(self, operation: ProgressOperation) -> None:
        parent = operation.parent
        restore_parent = False
        if parent is not None:
            shadowing = self._shadowed_by.get(parent.operation_id)
            if shadowing is not None and operation.operation_id in shadowing:
                shadowing.discard(operation.operation_id)
                if not shadowing:
                    del self._shadowed_by[parent.operation_id]
                restore_parent = True
        self._shadowed_by.pop(operation.operation_id, None)

        association = self._assigned.pop(operation.operation_id, None)
        if association is None:
            try:
                self._unassigned.remove(operation)
            except ValueError:
                pass
            return

        association.label.set_text("")
        self._free_labels.appendleft(association.label)
        if restore_parent and parent is not None:
            logger.debug("Label of %r returns to its parent %r", operation.operation_id, parent.operation_id)
            self.attach(parent)
        # The restored parent may have taken its own parent's label instead
        # of the freed one, so keep handing out labels while both remain.
        while self._free_labels and self._unassigned:
            self.attach(self._unassigned.popleft())

    def render_now(self) -> None:
        for association in self._assigned.values():
            association.label.set_text(self._formatter.format(association.operation))

    # ── views ────────────────────────────────────────────────────────────────

    def state_of(self, operation_id: Hashable) -> LabelState | None:
        if operation_id in self._assigned:
            return LabelState.BOUND
        if operation_id in self._shadowed_by:
            return LabelState.SHADOWED
        if any(op.operation_id == operation_id for op in self._unassigned):
            return LabelState.UNBOUND
        return None

    def label_for(self, operation_id: Hashable) -> StyledLabel | None:
        association = self._assigned.get(operation_id)
        return association.label if association is not None else None

    def bound_operation_ids(self) -> list[Hashable]:
        return list(self._assigned)

    def unassigned_operation_ids(self) -> list[Hashable]:
        return [op.operation_id for op in self._unassigned]

    def shadowed_parent_ids(self) -> set[Hashable]:
        return set(self._shadowed_by)

    @property
    def free_label_count(self) -> int:
        return len(self._free_labels)


# ─────────────────────────────────────────────────────────────────────────────
# Overall build status
# ─────────────────────────────────────────────────────────────────────────────

class BuildStatusRenderer:
    def __init__(self, build_status_label: StyledLabel, columns: Callable[[], int]) -> None:
        self._label = build_status_label
        self._columns = columns
        self._current_status: str | None = None

    @property
    def current_status(self) -> str | None:
        return self._current_status

    def build_started(self, operation: ProgressOperation) -> None:
        self._current_status = operation.message

    def build_progressed(self, event: ProgressEvent) -> None:
        self._current_status = event.status

    def build_finished(self, event: ProgressCompleteEvent) -> None:
        self._current_status = ""

    def render_now(self) -> None:
        if self._current_status is not None:
            text = self._trim_to_console(self._current_status)
            self._label.set_text(Span(text, Style.HEADER) if text else "")

    def _trim_to_console(self, text: str) -> str:
        text = single_line(text)
        width = self._columns() - 1
        if width > 0:
            return truncate_to_width(text, width)
        return text


# ─────────────────────────────────────────────────────────────────────────────
# Event batching
# ─────────────────────────────────────────────────────────────────────────────

class Cancellable(Protocol):
    def cancel(self) -> None:
        ...


Scheduler = Callable[[float, Callable[[], None]], Cancellable]


def start_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class ConsoleBackedProgressRenderer:
    """
    Queues output events and renders them in throttled batches.

    The first event after a quiet period is rendered straight away; events
    that follow within ``throttle_ms`` are queued and rendered together by a
    single deferred flush. Every event is also forwarded, in order, to the
    downstream listener during the flush.
    """

    def __init__(
        self,
        listener: OutputEventListener,
        console: AnsiConsole,
        formatter: StatusBarFormatter,
        throttle_ms: int = DEFAULT_THROTTLE_MS,
        scheduler: Scheduler | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if throttle_ms < 0:
            raise ValueError(f"throttle_ms must not be negative, got {throttle_ms}")
        self._listener = listener
        self._console = console
        self._throttle_ms = throttle_ms
        self._schedule = scheduler or start_timer
        self._clock = clock or _monotonic_ms

        self._operations = ProgressOperations()
        self._allocator = ProgressLabelAllocator(console.get_build_progress_labels(), formatter)
        self._build_status = BuildStatusRenderer(console.status_bar, lambda: console.terminal.columns)

        # Protected by lock
        self._lock = threading.RLock()
        self._queue: list[OutputEvent] = []
        self._last_update: float | None = None
        self._pending_flush: Cancellable | None = None
        self._root_operation_id: Hashable | None = None
        self._ended = False
        self._failed = False

    # ── views ────────────────────────────────────────────────────────────────

    @property
    def operations(self) -> ProgressOperations:
        return self._operations

    @property
    def allocator(self) -> ProgressLabelAllocator:
        return self._allocator

    @property
    def console(self) -> AnsiConsole:
        return self._console

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def failed(self) -> bool:
        return self._failed

    # ── event intake ─────────────────────────────────────────────────────────

    def on_output(self, event: OutputEvent) -> None:
        with self._lock:
            if self._ended:
                raise ProgressProtocolError(
                    f"Received {type(event).__name__} after the end of output", event=event
                )

            if self._failed:
                self._forward_only(event)
                return

            self._queue.append(event)

            if isinstance(event, EndOutputEvent):
                # Flush and shut down
                try:
                    self._render_now(self._clock())
                finally:
                    self._ended = True
                    self._cancel_pending_flush()
                return

            if len(self._queue) > 1:
                # A flush is already scheduled for the queued events
                return

            now = self._clock()
            if self._last_update is None or now - self._last_update >= self._throttle_ms:
                self._render_now(now)
                return

            if self._pending_flush is None:
                self._pending_flush = self._schedule(self._throttle_ms / 1000.0, self._scheduled_flush)

    def flush(self) -> None:
        """Render everything queued so far right now."""
        with self._lock:
            if self._failed:
                self._console.flush()
                return
            self._render_now(self._clock())

    def close(self) -> None:
        """End the output if that has not happened yet and retire the status area."""
        with self._lock:
            try:
                if not self._ended:
                    self.on_output(EndOutputEvent())
            finally:
                self._console.close()

    def _scheduled_flush(self) -> None:
        with self._lock:
            self._pending_flush = None
            if self._failed:
                return
            try:
                self._render_now(self._clock())
            except Exception:
                logger.exception("Deferred progress flush failed")
                raise

    def _cancel_pending_flush(self) -> None:
        if self._pending_flush is not None:
            self._pending_flush.cancel()
            self._pending_flush = None

    # ── rendering ────────────────────────────────────────────────────────────

    def _render_now(self, now: float) -> None:
        if not self._queue:
            # Already rendered
            return

        events = self._queue
        self._queue = []
        logger.debug("Rendering %d queued event(s)", len(events))
        pending = iter(events)
        try:
            for event in pending:
                try:
                    self._apply(event)
                except ProgressProtocolError as exc:
                    self._failed = True
                    # The status display stops here; build output still gets through
                    self._listener.on_output(event)
                    self._forward(pending)
                    self._console.flush()
                    raise ProgressProtocolError(
                        f"Unable to process incoming event '{event!r}' ({type(event).__name__}): {exc}",
                        event=event,
                    ) from exc
                self._listener.on_output(event)

            self._allocator.render_now()
            self._build_status.render_now()
            self._last_update = now
            self._console.flush()
        except TerminalWriteError as exc:
            self._failed = True
            logger.error("Terminal write failed, status display stopped: %s", exc)
            self._forward(pending)
            raise

    def _forward(self, events: Iterable[OutputEvent]) -> None:
        for event in events:
            self._listener.on_output(event)

    def _apply(self, event: OutputEvent) -> None:
        if isinstance(event, ProgressStartEvent):
            operation = self._operations.start(
                event.short_description, event.status, event.operation_id, event.parent_id
            )
            if event.parent_id is None:
                self._root_operation_id = event.operation_id
                self._build_status.build_started(operation)
            self._allocator.attach(operation)
        elif isinstance(event, ProgressCompleteEvent):
            operation = self._operations.complete(event.operation_id)
            if event.operation_id == self._root_operation_id:
                self._root_operation_id = None
                self._build_status.build_finished(event)
            self._allocator.detach(operation)
        elif isinstance(event, ProgressEvent):
            self._operations.progress(event.status, event.operation_id)
            if event.operation_id == self._root_operation_id:
                self._build_status.build_progressed(event)

    def _forward_only(self, event: OutputEvent) -> None:
        if isinstance(event, EndOutputEvent):
            self._ended = True
            self._cancel_pending_flush()
        self._listener.on_output(event)
        self._console.flush()
