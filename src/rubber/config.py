import logging
import os

from pydantic import AnyHttpUrl, BaseModel, Field, TypeAdapter, ValidationError, field_validator

from .errors import ConfigurationError
from .models import Target

logger = logging.getLogger(__name__)

DEFAULT_NUMBER = 100
DEFAULT_CONCURRENCY = 10

_url_adapter = TypeAdapter(AnyHttpUrl)


def _default_timeout() -> float:
    return float(os.getenv("RUBBER_TIMEOUT_S", "30"))


class RunConfig(BaseModel):
    """Validated settings for one load run."""

    url: str
    number: int = Field(default=DEFAULT_NUMBER, ge=0, le=2**32 - 1)
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1, le=2**16 - 1)
    timeout: float = Field(default_factory=_default_timeout, gt=0)

    @field_validator("url")
    @classmethod
    def _absolute_http_url(cls, v: str) -> str:
        _url_adapter.validate_python(v)
        return v

    @classmethod
    def load(cls, **values) -> "RunConfig":
        """Build a config, turning pydantic's errors into ConfigurationError."""
        try:
            config = cls(**{k: v for k, v in values.items() if v is not None})
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(problems) from e
        logger.debug(f"Loaded config: {config!r}")
        return config

    def to_target(self) -> Target:
        return Target(
            uri=self.url, total_count=self.number, concurrency=self.concurrency
        )
