import asyncio
import logging

from .errors import ProtocolViolation
from .metrics import compute_stats
from .models import (
    DispatchState,
    MetricsCallback,
    Outcome,
    ProgressCallback,
    Stats,
    Target,
)
from .timed import timed_request
from .transport import AiohttpTransport, HttpTransport
from .utils import now

logger = logging.getLogger(__name__)

_CLOSED = object()


class ResultChannel:
    """Bounded hand-off of finished outcomes from request tasks to the dispatcher.

    Senders block while the queue is full; nothing is ever dropped. Once
    closed, the receiver drains what is already queued and then gets a
    ProtocolViolation instead of blocking forever.
    """

    def __init__(self, maxsize: int = 1) -> None:
        self._q: asyncio.Queue = asyncio.Queue(maxsize=max(1, maxsize))
        self._cause: BaseException | None = None
        self.closed = False

    async def send(self, outcome: Outcome) -> None:
        if self.closed:
            raise ProtocolViolation("send on a closed result channel")
        await self._q.put(outcome)

    def close(self, cause: BaseException | None = None) -> None:
        if self.closed:
            return
        self.closed = True
        self._cause = cause
        try:
            self._q.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            # the receiver is not blocked; recv() sees `closed` once drained
            pass

    async def recv(self) -> Outcome:
        if self.closed and self._q.empty():
            self._raise_closed()
        item = await self._q.get()
        if item is _CLOSED:
            self._raise_closed()
        return item

    def _raise_closed(self):
        raise ProtocolViolation(
            "result channel closed before all requests reported back"
        ) from self._cause


class Dispatcher:
    """Admission loop keeping at most `target.concurrency` requests in flight.

    FILLING launches requests while there is capacity and work left,
    DRAINING waits for the next outcome on the result channel, COMPLETE is
    reached once every one of `target.total_count` requests has reported.
    """

    def __init__(
        self,
        target: Target,
        transport: HttpTransport,
        progress_callback: ProgressCallback | None = None,
        channel_size: int | None = None,
    ) -> None:
        self.target = target
        self.transport = transport
        self.progress_callback = progress_callback

        # Runtime state
        self.state = DispatchState.FILLING
        self.running = 0
        self.finished = 0
        self.peak_running = 0
        self.outcomes: list[Outcome] = []

        self._channel = ResultChannel(channel_size or target.concurrency)
        self._tasks: set[asyncio.Task] = set()
        self._started = False
        self._shutting_down = False

    @property
    def remaining(self) -> int:
        return self.target.total_count - self.running - self.finished

    # ────────────────────────────────
    # Request Tasks
    # ────────────────────────────────

    async def _request(self) -> None:
        outcome = await timed_request(self.transport, self.target.uri)
        await self._channel.send(outcome)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            if not self._shutting_down:
                logger.error("Request task was cancelled before reporting back")
                self._channel.close(asyncio.CancelledError())
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Request task crashed: {exc!r}")
            self._channel.close(exc)

    def _launch(self) -> None:
        task = asyncio.create_task(self._request())
        task.add_done_callback(self._on_task_done)
        self._tasks.add(task)
        self.running += 1
        self.peak_running = max(self.peak_running, self.running)
        logger.debug(
            f"Launched request {self.running + self.finished}/{self.target.total_count} "
            f"(running={self.running})"
        )

    def _fill(self) -> None:
        self.state = DispatchState.FILLING
        while self.remaining > 0 and self.running < self.target.concurrency:
            self._launch()
        self.state = DispatchState.DRAINING

    # ────────────────────────────────
    # Main Loop
    # ────────────────────────────────

    async def run(self) -> list[Outcome]:
        if self._started:
            raise ProtocolViolation("a dispatcher can only run once")
        self._started = True

        total = self.target.total_count
        logger.info(
            f"Dispatching {total} requests to {self.target.uri} "
            f"with concurrency={self.target.concurrency}"
        )
        try:
            while self.finished < total:
                self._fill()
                outcome = await self._channel.recv()
                self.running -= 1
                self.finished += 1
                self.outcomes.append(outcome)
                if self.progress_callback:
                    self.progress_callback(self.finished, total, outcome)
        finally:
            await self._shutdown()

        self.state = DispatchState.COMPLETE
        logger.info(f"All {total} requests finished (peak concurrency {self.peak_running})")
        return self.outcomes

    async def _shutdown(self) -> None:
        self._shutting_down = True
        pending = [t for t in self._tasks if not t.done()]
        if pending:
            logger.info(f"Cancelling {len(pending)} in-flight requests")
            for t in pending:
                t.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
        self._channel.close()


async def run(
    target: Target,
    transport: HttpTransport | None = None,
    progress_callback: ProgressCallback | None = None,
    metrics_callback: MetricsCallback | None = None,
    request_timeout_s: float = 30.0,
) -> Stats:
    """Fire `target.total_count` GETs at `target.uri` and summarise them.

    Without a transport, an AiohttpTransport is opened for the duration of
    the run.
    """
    if transport is None:
        async with AiohttpTransport(request_timeout_s=request_timeout_s) as owned:
            return await run(target, owned, progress_callback, metrics_callback)

    dispatcher = Dispatcher(target, transport, progress_callback=progress_callback)
    t0 = now()
    outcomes = await dispatcher.run()
    elapsed = now() - t0
    return compute_stats(outcomes, elapsed=elapsed, metrics_callback=metrics_callback)
