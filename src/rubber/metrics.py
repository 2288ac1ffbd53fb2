import math
import logging
from collections import defaultdict
from collections.abc import Iterable

from .models import Failure, MetricsCallback, Outcome, Stats

logger = logging.getLogger(__name__)


def compute_stats(
    outcomes: Iterable[Outcome],
    elapsed: float = 0.0,
    metrics_callback: MetricsCallback | None = None,
) -> Stats:
    count = 0
    errors = 0
    durations: list[float] = []
    slowest = 0.0
    fastest = math.inf
    status_codes: dict[int, int] = defaultdict(int)

    for outcome in outcomes:
        if isinstance(outcome, Failure):
            errors += 1
            continue
        d = outcome.duration
        count += 1
        durations.append(d)
        slowest = max(slowest, d)
        fastest = min(fastest, d)
        status_codes[outcome.status_code] += 1

    # fsum is exactly rounded, so the total does not depend on completion order
    total = math.fsum(durations)
    logger.debug(f"Computing stats: success={count}, errors={errors}")

    if count:
        average = total / count
    else:
        # nothing succeeded: report zeroes rather than inf / division by zero
        average = 0.0
        fastest = 0.0
        if errors:
            logger.warning("No successful requests recorded.")
        else:
            logger.info("No requests recorded. Returning empty stats.")

    stats = Stats(
        count=count,
        errors=errors,
        total=total,
        slowest=slowest,
        fastest=fastest,
        average=average,
        status_codes=dict(status_codes),
        elapsed=elapsed,
    )

    if metrics_callback:
        metrics_callback(stats.to_dict())

    logger.info(
        f"Stats computed: success={count}, errors={errors}, "
        f"average={average:.3f}s, error_rate={stats.error_rate * 100:.1f}%"
    )
    return stats
