from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Union
from collections.abc import Callable, Mapping

from .errors import ConfigurationError, TransportError


@dataclass(frozen=True)
class Target:
    uri: str
    total_count: int
    concurrency: int

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ConfigurationError(
                f"concurrency must be at least 1, got {self.concurrency}"
            )
        if self.total_count < 0:
            raise ConfigurationError(
                f"number of requests must not be negative, got {self.total_count}"
            )


@dataclass(frozen=True)
class Response:
    status: int
    size: int = 0


@dataclass(frozen=True)
class Success:
    duration: float
    response: Response

    @property
    def status_code(self) -> int:
        return self.response.status


@dataclass(frozen=True)
class Failure:
    error: TransportError


Outcome = Union[Success, Failure]


class DispatchState(str, Enum):
    FILLING = "filling"
    DRAINING = "draining"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Stats:
    count: int
    errors: int
    total: float
    slowest: float
    fastest: float
    average: float
    status_codes: Mapping[int, int]
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        # read-only view over a private copy
        object.__setattr__(self, "status_codes", MappingProxyType(dict(self.status_codes)))

    @property
    def requests(self) -> int:
        return self.count + self.errors

    @property
    def error_rate(self) -> float:
        return self.errors / self.requests if self.requests else 0.0

    @property
    def rps(self) -> float:
        return self.requests / self.elapsed if self.elapsed > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "errors": self.errors,
            "total": self.total,
            "slowest": self.slowest,
            "fastest": self.fastest,
            "average": self.average,
            "elapsed": self.elapsed,
            "error_rate": self.error_rate,
            "rps": self.rps,
            "status_codes": dict(self.status_codes),
        }


# Observer: (finished, total_count, outcome) after every completion
ProgressCallback = Callable[[int, int, Outcome], None]

# Metrics callback: callable accepting stats dict
MetricsCallback = Callable[[dict[str, Any]], None]
