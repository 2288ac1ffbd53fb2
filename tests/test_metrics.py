import random

import pytest

from rubber.errors import TransportError
from rubber.metrics import compute_stats
from rubber.models import Failure, Response, Success


def ok(ms, status=200):
    return Success(duration=ms / 1000, response=Response(status=status))


def failed():
    return Failure(error=TransportError("http://test/", "timeout"))


def test_five_successes():
    stats = compute_stats([ok(10), ok(20), ok(30), ok(40), ok(50)])

    assert stats.count == 5
    assert stats.errors == 0
    assert stats.slowest == pytest.approx(0.050)
    assert stats.fastest == pytest.approx(0.010)
    assert stats.average == pytest.approx(0.030)
    assert stats.total == pytest.approx(0.150)
    assert stats.status_codes == {200: 5}


def test_mixed_successes_and_failures():
    stats = compute_stats([ok(12), failed(), ok(18)])

    assert stats.count == 2
    assert stats.errors == 1
    assert stats.status_codes == {200: 2}
    assert stats.error_rate == pytest.approx(1 / 3)


def test_all_failed_has_zero_average():
    stats = compute_stats([failed(), failed()])

    assert stats.count == 0
    assert stats.errors == 2
    assert stats.average == 0.0
    assert stats.fastest == 0.0
    assert stats.slowest == 0.0
    assert stats.status_codes == {}


def test_empty():
    stats = compute_stats([])

    assert (stats.count, stats.errors) == (0, 0)
    assert stats.average == 0.0
    assert stats.rps == 0.0
    assert stats.error_rate == 0.0


def test_histogram_counts_each_status():
    stats = compute_stats([ok(5, 200), ok(6, 404), ok(7, 200), ok(8, 500), failed()])
    assert stats.status_codes == {200: 2, 404: 1, 500: 1}


def test_order_does_not_matter():
    rng = random.Random(7)
    outcomes = [ok(rng.uniform(1, 500), rng.choice([200, 201, 404])) for _ in range(200)]
    outcomes += [failed() for _ in range(13)]
    baseline = compute_stats(outcomes)

    for _ in range(5):
        shuffled = outcomes[:]
        rng.shuffle(shuffled)
        stats = compute_stats(shuffled)
        assert stats.count == baseline.count
        assert stats.errors == baseline.errors
        assert stats.total == baseline.total
        assert stats.slowest == baseline.slowest
        assert stats.fastest == baseline.fastest
        assert stats.average == baseline.average
        assert stats.status_codes == baseline.status_codes


def test_average_is_total_over_count():
    stats = compute_stats([ok(3), ok(4), ok(11)])
    assert stats.average == stats.total / stats.count


def test_metrics_callback_gets_a_dict():
    seen = []
    compute_stats([ok(10), failed()], elapsed=2.0, metrics_callback=seen.append)

    assert len(seen) == 1
    assert seen[0]["count"] == 1
    assert seen[0]["errors"] == 1
    assert seen[0]["rps"] == pytest.approx(1.0)
    assert seen[0]["status_codes"] == {200: 1}


def test_status_codes_are_read_only():
    stats = compute_stats([ok(10), ok(20, 404)])

    with pytest.raises(TypeError):
        stats.status_codes[200] = 99
    assert stats.to_dict()["status_codes"] == {200: 1, 404: 1}
    assert stats.status_codes == {200: 1, 404: 1}
