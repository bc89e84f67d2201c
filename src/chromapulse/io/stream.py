"""
Resilient feature stream.

ConnectionStateMachine holds the reconnection policy as plain transitions
driven by four inputs (open, close, error, shutdown). It knows nothing
about sockets: it is handed a callable that starts one connection attempt
and a callable that schedules a delayed callback.

FeatureStream plugs those into asyncio and the websockets client.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Union

import websockets
from websockets.exceptions import WebSocketException

logger = logging.getLogger(__name__)

DEFAULT_URL = "ws://localhost:8766"
MAX_RETRIES = 5
RETRY_DELAY = 3.0  # seconds

# (delay, callback) -> handle with a cancel() method, like loop.call_later
Scheduler = Callable[[float, Callable[[], None]], Any]


class ConnectionState(Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    EXHAUSTED = "exhausted"


class ConnectionStateMachine:
    """
    Bounded fixed-delay reconnection policy.

    Every close while connecting or connected counts as one consecutive
    failure. Failures below MAX_RETRIES each schedule a single new attempt
    after RETRY_DELAY; failure number MAX_RETRIES is terminal (EXHAUSTED)
    until restart() is called. A successful open resets the count.

    Errors never cause a transition on their own: the transport always
    follows an error with a close, and that close is what gets counted.
    """

    def __init__(
        self,
        attempt: Callable[[], None],
        call_later: Scheduler,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        on_status: Callable[[str], None] | None = None,
    ):
        """
        Args:
            attempt: Starts one connection attempt. The attempt must later
                report handle_open and/or handle_close.
            call_later: Schedules a delayed callback and returns a
                cancellable handle.
            max_retries: Consecutive failures before giving up.
            retry_delay: Delay before each retry, in seconds.
            on_status: Called with the new status string on every change.
        """
        self._attempt = attempt
        self._call_later = call_later
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.on_status = on_status

        self.state = ConnectionState.CONNECTING
        self.retry_count = 0
        self.attempts = 0
        self._pending = None
        self._shut_down = False

    @property
    def status(self) -> str:
        """
        Human-readable connection status.

        A retry attempt in flight keeps reporting the retry it belongs to.
        """
        if self.state is ConnectionState.CONNECTED:
            return "Connected!"
        if self.state is ConnectionState.EXHAUSTED:
            return "Disconnected. Retry limit reached. Please refresh to reconnect."
        if self.retry_count == 0:
            return "Connecting..."
        return f"Disconnected. Retrying... ({self.retry_count}/{self.max_retries})"

    @property
    def retry_pending(self) -> bool:
        return self._pending is not None

    def _set_state(self, state: ConnectionState):
        previous = self.status
        self.state = state
        if self.status != previous:
            logger.info("Connection status: %s", self.status)
            if self.on_status:
                self.on_status(self.status)

    def _launch(self):
        self.attempts += 1
        self._set_state(ConnectionState.CONNECTING)
        self._attempt()

    def start(self):
        """Make the initial connection attempt."""
        if self._shut_down:
            return
        self._launch()

    def handle_open(self):
        if self._shut_down:
            return
        self.retry_count = 0
        self._set_state(ConnectionState.CONNECTED)

    def handle_error(self, error: BaseException):
        logger.warning("Connection error: %s", error)

    def handle_close(self):
        if self._shut_down or self._pending is not None:
            return
        if self.state not in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
            return

        self.retry_count = min(self.retry_count + 1, self.max_retries)
        if self.retry_count >= self.max_retries:
            self._set_state(ConnectionState.EXHAUSTED)
            return

        self._set_state(ConnectionState.DISCONNECTED)
        self._pending = self._call_later(self.retry_delay, self._retry)

    def _retry(self):
        self._pending = None
        if self._shut_down:
            return
        self._launch()

    def restart(self) -> bool:
        """
        Start over after the retry limit is reached, or skip a pending delay.

        Returns:
            True if a new attempt was started.
        """
        if self._shut_down:
            return False
        if self.state not in (ConnectionState.EXHAUSTED, ConnectionState.DISCONNECTED):
            return False
        self._cancel_pending()
        self.retry_count = 0
        self._launch()
        return True

    def shutdown(self):
        """Intentional teardown: cancel any pending retry, ignore later closes."""
        self._shut_down = True
        self._cancel_pending()

    def _cancel_pending(self):
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


class FeatureStream:
    """
    WebSocket client that keeps reconnecting per ConnectionStateMachine.

    Each attempt runs as one asyncio task. Text messages are handed to
    on_message one at a time, in arrival order, on the event loop.
    """

    def __init__(
        self,
        url: str,
        on_message: Callable[[Union[str, bytes]], None],
        on_status: Callable[[str], None] | None = None,
        connect: Callable[[str], Any] | None = None,
        call_later: Scheduler | None = None,
        retry_delay: float = RETRY_DELAY,
    ):
        """
        Args:
            url: WebSocket endpoint.
            on_message: Receives each raw message.
            on_status: Receives every status change.
            connect: Factory returning an async context manager that yields
                an async-iterable socket. Defaults to websockets.connect.
            call_later: Retry scheduler. Defaults to the running loop's.
            retry_delay: Delay before each retry, in seconds.
        """
        self.url = url
        self._on_message = on_message
        self._connect = connect or websockets.connect
        self._call_later = call_later
        self._task: asyncio.Task | None = None
        self.machine = ConnectionStateMachine(
            attempt=self._spawn_session,
            call_later=self._schedule,
            retry_delay=retry_delay,
            on_status=on_status,
        )

    @property
    def status(self) -> str:
        return self.machine.status

    @property
    def state(self) -> ConnectionState:
        return self.machine.state

    def _schedule(self, delay: float, callback: Callable[[], None]):
        if self._call_later is not None:
            return self._call_later(delay, callback)
        return asyncio.get_running_loop().call_later(delay, callback)

    def _spawn_session(self):
        self._task = asyncio.get_running_loop().create_task(self._session())

    async def _session(self):
        try:
            async with self._connect(self.url) as ws:
                self.machine.handle_open()
                async for message in ws:
                    self._on_message(message)
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            self.machine.handle_error(e)
        finally:
            # Ignored after shutdown, so cancellation by close() is safe
            self.machine.handle_close()

    def start(self):
        """Begin connecting. Must be called from within the running loop."""
        logger.info("Connecting to feature stream at %s", self.url)
        self.machine.start()

    def restart(self) -> bool:
        return self.machine.restart()

    async def join(self):
        """Wait for the current connection attempt to finish."""
        if self._task is not None:
            await self._task

    async def close(self):
        """Shut down for good: no retries, active connection cancelled."""
        self.machine.shutdown()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
