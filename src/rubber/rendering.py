from .models import Stats
from .utils import format_duration


def render_summary(stats: Stats) -> str:
    lines = [
        "Summary:",
        f"    slowest:   {format_duration(stats.slowest)}",
        f"    fastest:   {format_duration(stats.fastest)}",
        f"    average:   {format_duration(stats.average)}",
        f"    total:     {format_duration(stats.total)}",
        f"    elapsed:   {format_duration(stats.elapsed)}",
        f"    requests:  {stats.requests}",
        f"    succeeded: {stats.count}",
        f"    errors:    {stats.errors}",
        f"    rps:       {stats.rps:.1f}",
        "Status Codes:",
    ]
    if not stats.status_codes:
        lines.append("    (none)")
    for code in sorted(stats.status_codes):
        lines.append(f"    {code}: {stats.status_codes[code]}")
    return "\n".join(lines)


def render_latency_histogram(stats: Stats, latencies: list[float], bins: int = 10) -> str:
    """Spread the successful durations of a run between its fastest and slowest.

    Bars are scaled to the share of all successful responses, and the last
    column is the running share up to the end of that bin.
    """
    if not stats.count or not latencies:
        return "No successful responses."
    lo, hi = stats.fastest, stats.slowest
    if hi <= lo:
        return f"All {stats.count} responses took {format_duration(lo)}"

    width = 40
    counts = [0] * bins
    for x in latencies:
        j = int((x - lo) / (hi - lo) * bins)
        counts[min(max(j, 0), bins - 1)] += 1

    lines = [
        f"Latency distribution ({stats.count} responses, "
        f"{format_duration(lo)} to {format_duration(hi)})"
    ]
    seen = 0
    for i, c in enumerate(counts):
        seen += c
        left = format_duration(lo + (hi - lo) * i / bins)
        right = format_duration(lo + (hi - lo) * (i + 1) / bins)
        bar = "#" * int(c / stats.count * width)
        lines.append(
            f"{left:>8} - {right:<8}| {bar:<{width}} {c:>6}  {seen / stats.count:6.1%}"
        )
    return "\n".join(lines)
