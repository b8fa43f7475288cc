from collections import Counter

import numpy as np
from circlag.lag import compute_lags, iter_lags, lag_within


def test_compute_lags_keeps_pairs_within_threshold():
    lags = compute_lags([1, 2], [3], epsilon=1.0)
    assert lags.tolist() == [-1.0]


def test_compute_lags_order_is_u_outer_v_inner():
    lags = compute_lags([10, 20], [1, 2], epsilon=100.0)
    assert lags.tolist() == [9.0, 8.0, 19.0, 18.0]


def test_compute_lags_threshold_is_inclusive():
    assert compute_lags([0.0], [2.5], epsilon=2.5).tolist() == [-2.5]
    assert lag_within(2.5, 0.0, 2.5) == 2.5
    assert lag_within(2.6, 0.0, 2.5) is None


def test_threshold_exclusion():
    assert compute_lags([0], [100], epsilon=1).size == 0


def test_empty_inputs_give_empty_output():
    for eps in (0.0, 1.0, np.inf):
        assert compute_lags([], [1, 2], eps).size == 0
        assert compute_lags([1, 2], [], eps).size == 0


def test_negation_symmetry():
    u = [0.5, 1.0, 4.25, 7.0]
    v = [1.5, 3.0, 6.75]
    a = compute_lags(u, v, epsilon=3.0)
    b = compute_lags(v, u, epsilon=3.0)
    assert Counter((-a).tolist()) == Counter(b.tolist())


def test_threshold_monotonicity():
    u = [0.0, 1.5, 3.0, 8.0]
    v = [0.5, 2.0, 9.5]
    small = Counter(compute_lags(u, v, epsilon=1.0).tolist())
    large = Counter(compute_lags(u, v, epsilon=5.0).tolist())
    assert all(large[k] >= n for k, n in small.items())


def test_cardinality_bound():
    u = [0.0, 1.0, 2.0]
    v = [5.0, 50.0]
    assert compute_lags(u, v, epsilon=4.5).size <= len(u) * len(v)
    assert compute_lags(u, v, epsilon=np.inf).size == len(u) * len(v)


def test_compute_lags_returns_float_array():
    lags = compute_lags(np.array([3, 4]), (1,), epsilon=10)
    assert lags.dtype == float
    assert np.allclose(lags, [2.0, 3.0])


def test_iter_lags_yields_indices_in_pair_order():
    u = np.array([10.0, 20.0])
    v = np.array([1.0, 15.0])
    got = list(iter_lags(u, v, epsilon=9.0))
    assert got == [(0, 0, 9.0), (0, 1, -5.0), (1, 1, 5.0)]
    assert compute_lags(u, v, 9.0).tolist() == [d for _, _, d in got]
