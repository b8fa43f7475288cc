from __future__ import annotations
from typing import Iterable, Iterator, Tuple
import numpy as np

DEFAULT_EPSILON = 10.0


def lag_within(ui: float, vj: float, epsilon: float = DEFAULT_EPSILON):
    """Return ``ui - vj`` if ``|ui - vj| <= epsilon``, else ``None``."""
    d = ui - vj
    return d if abs(d) <= epsilon else None


def compute_lags(u: Iterable[float], v: Iterable[float], epsilon: float = DEFAULT_EPSILON) -> np.ndarray:
    r"""Pairwise differences ``u ⊖ v`` within a threshold.

    .. math::

        u \ominus v = [u_i - v_j] \quad u_i \in u,\ v_j \in v
        \iff |u_i - v_j| \le \epsilon

    Pairs are visited with ``u`` in the outer loop and ``v`` in the inner
    loop; callers that care about order sort the result.  No validation is
    done here, so non-finite input gives unspecified results.

    Returns
    -------
    lags : ndarray
        1-D float array, possibly empty.
    """
    u = np.asarray(u, dtype=float).ravel()
    v = np.asarray(v, dtype=float).ravel()
    return np.asarray([d for _i, _j, d in iter_lags(u, v, epsilon)], dtype=float)


def iter_lags(u: np.ndarray, v: np.ndarray, epsilon: float = DEFAULT_EPSILON) -> Iterator[Tuple[int, int, float]]:
    """Yield ``(i, j, u[i] - v[j])`` for pairs within ``epsilon``, u outer, v inner."""
    for i, ui in enumerate(u):
        for j, vj in enumerate(v):
            d = lag_within(float(ui), float(vj), epsilon)
            if d is not None:
                yield i, j, d
