import logging

from .errors import TransportError
from .models import Failure, Outcome, Success
from .transport import HttpTransport
from .utils import now

logger = logging.getLogger(__name__)


async def timed_request(transport: HttpTransport, uri: str) -> Outcome:
    """Issue one GET and time it.

    The clock starts when the coroutine first runs, not when it is created.
    A transport failure becomes a Failure without a duration; anything else
    the transport raises propagates to the caller.
    """
    start = now()
    try:
        response = await transport.get(uri)
    except TransportError as e:
        logger.warning(f"Request to {uri} failed: {e.reason}")
        return Failure(error=e)
    duration = now() - start
    logger.debug(f"{uri} -> {response.status} in {duration:.4f}s")
    return Success(duration=duration, response=response)
