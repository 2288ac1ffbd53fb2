import asyncio
import logging
import signal
import time

logger = logging.getLogger(__name__)

# ────────────────────────────────
# Time Helpers
# ────────────────────────────────


def now() -> float:
    return time.perf_counter()


def format_duration(seconds: float) -> str:
    """Whole milliseconds, truncated: 0.0219s -> '21ms'."""
    return f"{int(seconds * 1000)}ms"


# ────────────────────────────────
# Signal Handling
# ────────────────────────────────


class GracefulKiller:
    """Cancels a running task on SIGINT/SIGTERM instead of killing the loop."""

    def __init__(self, task: asyncio.Task):
        self.task = task
        self.kill_now = False
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.exit_gracefully, sig)
            except (NotImplementedError, RuntimeError):
                # no signal support: Windows loops, or not the main thread
                logger.debug(f"Signal handlers unavailable for {sig!r}")

    def exit_gracefully(self, signum) -> None:
        logger.warning(f"Received signal {signum}, cancelling in-flight requests")
        self.kill_now = True
        self.task.cancel()
