class RubberError(Exception):
    """Base class for everything rubber raises on purpose."""


class TransportError(RubberError):
    """A single request could not be completed by the transport.

    Connection refused, DNS failure, TLS failure, timeout or a reset stream.
    Recorded as a failed outcome; it never aborts a run.
    """

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ProtocolViolation(RubberError):
    """The dispatcher lost track of in-flight requests and cannot finish."""


class ConfigurationError(RubberError):
    """Run configuration was rejected before any request was launched."""
