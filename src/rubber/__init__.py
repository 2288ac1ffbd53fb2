__all__ = [
    "Dispatcher",
    "ResultChannel",
    "run",
    "timed_request",
    "compute_stats",
    "AiohttpTransport",
    "HttpTransport",
    "RunConfig",
    "Target",
    "Response",
    "Success",
    "Failure",
    "Stats",
    "DispatchState",
    "RubberError",
    "TransportError",
    "ProtocolViolation",
    "ConfigurationError",
    "render_summary",
    "render_latency_histogram",
]

__version__ = "0.1.0"

from .errors import RubberError, TransportError, ProtocolViolation, ConfigurationError
from .models import Target, Response, Success, Failure, Stats, DispatchState
from .transport import AiohttpTransport, HttpTransport
from .timed import timed_request
from .metrics import compute_stats
from .core import Dispatcher, ResultChannel, run
from .config import RunConfig
from .rendering import render_summary, render_latency_histogram
