"""
DemoLifecycleController - submit + poll state machine for one demo.

States:
    IDLE -> SUBMITTING -> POLLING -> COMPLETED | FAILED
                 |            |
                 +-> ERRORED  +-> ERRORED (fetch failure after a terminal status)

Polling rules:
- Entering POLLING issues an immediate fetch, then a RepeatingTimer ticks
  every poll_interval seconds
- At most one get_demo() fetch is outstanding; a tick that fires while one
  is in flight is skipped, so snapshots apply in the order fetches started
- A successful fetch replaces the snapshot and clears the recorded error
- A failed fetch records the error; polling continues
- COMPLETED or FAILED cancels the timer for good
- close() cancels the timer and the outstanding fetch synchronously;
  listeners never hear from the controller again
- A listener that raises is logged and skipped
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Protocol, assert_never

from demo_client.exceptions import DemoClientError, InvalidStateError, ValidationError
from demo_client.lifecycle.timer import RepeatingTimer
from demo_client.types import Credits, Demo, DemoId, DemoStatus, GenerationOptions

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 3.0


class DemoSource(Protocol):
    """The subset of APIClient the lifecycle controller needs."""

    async def generate_demo(
        self, prompt: str, options: GenerationOptions | None = None
    ) -> DemoId: ...

    async def get_demo(self, demo_id: DemoId) -> Demo: ...

    async def get_credits(self) -> Credits: ...


class LifecycleState(str, Enum):
    """Controller states."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    ERRORED = "errored"

    @property
    def is_final(self) -> bool:
        return self in (
            LifecycleState.COMPLETED,
            LifecycleState.FAILED,
            LifecycleState.ERRORED,
        )


@dataclass(frozen=True)
class LifecycleSnapshot:
    """
    What a consumer renders: the controller state plus the latest demo.

    Attributes:
        state: Controller state
        demo_id: Demo being tracked, None before submission
        demo: Latest successfully fetched snapshot
        error: Last recorded error, cleared by the next success
    """

    state: LifecycleState
    demo_id: DemoId | None
    demo: Demo | None
    error: DemoClientError | None


Listener = Callable[[LifecycleSnapshot], None]


class DemoLifecycleController:
    """
    Tracks one demo from submission to a terminal status.

    Example:
        async with DemoLifecycleController(api, remaining_quota=3) as controller:
            controller.subscribe(render)
            await controller.submit("Teach me Jollof rice")
            final = await asyncio.wait_for(controller.wait(), timeout=600)
    """

    def __init__(
        self,
        api: DemoSource,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        remaining_quota: int | None = None,
    ) -> None:
        """
        Initialize an idle controller.

        Args:
            api: Source of demos, usually an APIClient
            poll_interval: Seconds between status fetches (default 3.0)
            remaining_quota: Demos the user may still submit; None skips
                the local quota check
        """
        self.api = api
        self.poll_interval = poll_interval
        self.remaining_quota = remaining_quota

        self.state = LifecycleState.IDLE
        self.demo_id: DemoId | None = None
        self.demo: Demo | None = None
        self.error: DemoClientError | None = None

        self._listeners: list[Listener] = []
        self._timer: RepeatingTimer | None = None
        self._in_flight: asyncio.Task[None] | None = None
        self._closed = False
        self._done = asyncio.Event()

        # Stats
        self.fetch_count = 0
        self.skipped_ticks = 0

    async def __aenter__(self) -> "DemoLifecycleController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Consumer API
    # -------------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def fetch_in_flight(self) -> bool:
        return self._in_flight is not None

    @property
    def can_download(self) -> bool:
        return self.state is LifecycleState.COMPLETED

    @property
    def can_share(self) -> bool:
        return self.state is LifecycleState.COMPLETED

    def snapshot(self) -> LifecycleSnapshot:
        return LifecycleSnapshot(
            state=self.state, demo_id=self.demo_id, demo=self.demo, error=self.error
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for every state or snapshot change.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def refresh_quota(self) -> int:
        """Load remaining_quota from GET /user/credits."""
        credits = await self.api.get_credits()
        self.remaining_quota = credits.remaining
        return credits.remaining

    async def submit(
        self, prompt: str, options: GenerationOptions | None = None
    ) -> DemoId:
        """
        Submit a prompt and start polling the demo it creates.

        Blank prompts and exhausted quota are rejected before any request.
        A failed submission moves to ERRORED; call submit() again to retry.

        Returns:
            The new demo's identifier.

        Raises:
            ValidationError: Blank prompt or remaining quota <= 0.
            InvalidStateError: Not IDLE/ERRORED, or already closed.
            DemoClientError: Whatever generate_demo() raised.
        """
        if self._closed:
            raise InvalidStateError("submit", "closed")
        if self.state not in (LifecycleState.IDLE, LifecycleState.ERRORED):
            raise InvalidStateError("submit", self.state.value)

        if not prompt or not prompt.strip():
            raise self._reject(ValidationError("prompt", "Please enter a query"))
        if self.remaining_quota is not None and self.remaining_quota <= 0:
            raise self._reject(
                ValidationError(
                    "quota",
                    "You have reached your monthly demo limit. Upgrade to continue.",
                )
            )

        self.error = None
        self._set_state(LifecycleState.SUBMITTING)
        try:
            demo_id = await self.api.generate_demo(prompt, options)
        except DemoClientError as e:
            if not self._closed:
                self.error = e
                self._set_state(LifecycleState.ERRORED)
            raise

        if self.remaining_quota is not None:
            self.remaining_quota -= 1
        logger.info("Submitted demo %s", demo_id)

        if self._closed:
            # Consumer went away mid-submission; nothing left to poll for
            return demo_id
        self.watch(demo_id)
        return demo_id

    def watch(self, demo_id: DemoId) -> None:
        """
        Start polling an existing demo.

        Issues the first fetch immediately. Must be called from inside a
        running event loop.

        Raises:
            InvalidStateError: Already polling or finished, or closed.
        """
        if self._closed:
            raise InvalidStateError("watch", "closed")
        if self.state not in (
            LifecycleState.IDLE,
            LifecycleState.SUBMITTING,
            LifecycleState.ERRORED,
        ):
            raise InvalidStateError("watch", self.state.value)

        self.demo_id = demo_id
        self.error = None
        self._set_state(LifecycleState.POLLING)
        self._timer = RepeatingTimer(self.poll_interval, self._on_tick).start()
        self._on_tick()

    async def wait(self) -> LifecycleSnapshot:
        """
        Wait until the demo reaches a final state or the controller closes.

        No timeout is applied here; wrap in asyncio.wait_for() to bound it.
        """
        await self._done.wait()
        return self.snapshot()

    def close(self) -> None:
        """
        Tear down: stop polling and detach all listeners.

        Synchronous and idempotent. A fetch still in flight is cancelled,
        and if its response arrives anyway it is discarded.
        """
        if self._closed:
            return
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
        if self._in_flight is not None:
            self._in_flight.cancel()
        self._listeners.clear()
        self._done.set()
        logger.debug("Controller for demo %s closed", self.demo_id)

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------

    def _on_tick(self) -> None:
        if self._closed or self.state is not LifecycleState.POLLING:
            return
        if self._in_flight is not None:
            self.skipped_ticks += 1
            logger.debug("Fetch for %s still in flight, skipping tick", self.demo_id)
            return

        if self.demo_id is None:
            raise InvalidStateError("poll", "no demo is being watched")
        self.fetch_count += 1
        self._in_flight = asyncio.create_task(self._fetch(self.demo_id))

    async def _fetch(self, demo_id: DemoId) -> None:
        try:
            demo = await self.api.get_demo(demo_id)
        except DemoClientError as e:
            if not self._closed:
                self._record_failure(e)
            return
        except Exception:
            # Log but keep polling; the next tick starts a fresh fetch
            logger.exception("Unexpected failure fetching demo %s", demo_id)
            return
        finally:
            # Any exit, cancellation included, frees the slot for the next tick
            self._in_flight = None

        if self._closed:
            logger.debug("Discarding late snapshot for %s", demo_id)
            return
        self._apply(demo)

    def _record_failure(self, error: DemoClientError) -> None:
        logger.warning("Fetching demo %s failed: %s", self.demo_id, error)
        self.error = error
        if self.demo is not None and self.demo.is_terminal:
            self._finish(LifecycleState.ERRORED)
        else:
            self._emit()

    def _apply(self, demo: Demo) -> None:
        current = self.demo
        if current is not None:
            if demo.status.rank < current.status.rank:
                logger.warning(
                    "Ignoring snapshot for %s: status went from %s back to %s",
                    demo.id,
                    current.status.value,
                    demo.status.value,
                )
                return
            if (
                demo.status is DemoStatus.PROCESSING
                and current.status is DemoStatus.PROCESSING
                and demo.progress_percent < current.progress_percent
            ):
                demo = replace(demo, progress_percent=current.progress_percent)

        self.demo = demo
        self.error = None

        match demo.status:
            case DemoStatus.PENDING | DemoStatus.PROCESSING:
                self._emit()
            case DemoStatus.COMPLETED:
                self._finish(LifecycleState.COMPLETED)
            case DemoStatus.FAILED:
                self._finish(LifecycleState.FAILED)
            case _:
                assert_never(demo.status)

    def _finish(self, state: LifecycleState) -> None:
        if self._timer is not None:
            self._timer.cancel()
        logger.info("Demo %s finished: %s", self.demo_id, state.value)
        # Release waiters before listeners run
        self._done.set()
        self._set_state(state)

    # -------------------------------------------------------------------------
    # Notification
    # -------------------------------------------------------------------------

    def _reject(self, error: ValidationError) -> ValidationError:
        self.error = error
        self._emit()
        return error

    def _set_state(self, state: LifecycleState) -> None:
        if state is not self.state:
            logger.debug("Demo %s: %s -> %s", self.demo_id, self.state.value, state.value)
        self.state = state
        self._emit()

    def _emit(self) -> None:
        if self._closed:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Listener %r failed on %s", listener, snapshot.state.value)
