import math

import pytest

from gridslam.weights import needs_resampling, normalize_log_weights


def test_weights_sum_to_one():
    weights, _ = normalize_log_weights([-3.0, -1.0, 0.5, -10.0], 3.0)
    assert sum(weights) == pytest.approx(1.0)
    assert all(w > 0 for w in weights)


def test_equal_log_weights_give_uniform_weights():
    weights, neff = normalize_log_weights([-2.0, -2.0], 3.0)
    assert weights == pytest.approx([0.5, 0.5])
    assert neff == pytest.approx(2.0)


def test_neff_equals_count_for_uniform_weights():
    logs = [1.5] * 7
    _, neff = normalize_log_weights(logs, 1.0)
    assert neff == pytest.approx(len(logs))


def test_neff_bounded_by_particle_count():
    logs = [0.0, -50.0, -3.0, -0.5, -20.0]
    _, neff = normalize_log_weights(logs, 0.5)
    assert 1.0 <= neff <= len(logs) + 1e-9


def test_order_is_preserved():
    logs = [-5.0, 2.0, -1.0, 0.0]
    weights, _ = normalize_log_weights(logs, 3.0)
    assert sorted(range(4), key=lambda i: weights[i]) == sorted(range(4), key=lambda i: logs[i])


def test_larger_gain_flattens_weights():
    logs = [0.0, -30.0, -60.0]
    _, sharp = normalize_log_weights(logs, 0.1)
    _, flat = normalize_log_weights(logs, 100.0)
    assert flat > sharp


def test_shift_invariance():
    logs = [-1.0, -4.0, 2.0]
    first, neff1 = normalize_log_weights(logs, 3.0)
    second, neff2 = normalize_log_weights([w + 1000.0 for w in logs], 3.0)
    assert first == pytest.approx(second)
    assert neff1 == pytest.approx(neff2)


def test_empty_input():
    weights, neff = normalize_log_weights([], 3.0)
    assert weights == []
    assert math.isinf(neff)


@pytest.mark.parametrize(
    "neff, threshold, count, expected",
    [(5.0, 0.5, 20, True), (10.0, 0.5, 20, False), (15.0, 0.5, 20, False), (29.9, 1.0, 30, True)],
)
def test_needs_resampling(neff, threshold, count, expected):
    assert needs_resampling(neff, threshold, count) is expected