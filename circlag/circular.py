"""Circular lag enumeration (shift → wrap → pairwise filter → flatten)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union
import logging, math
import numpy as np
import pandas as pd

from .lag import DEFAULT_EPSILON, compute_lags, iter_lags

logger = logging.getLogger(__name__)

# absorbs float error when counting offsets, e.g. (T - t0)/dt = 5.999999...
_COUNT_TOL = 1e-9

LAG_TABLE_COLUMNS = ["shift", "u_index", "v_index", "u_shifted", "v", "lag"]


def _as_events(x, name: str) -> np.ndarray:
    arr = np.asarray(x, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be a 1-D sequence of timestamps, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains non-finite timestamps")
    return arr


def _positive(value, name: str) -> float:
    v = float(value)
    if not math.isfinite(v) or v <= 0:
        raise ValueError(f"{name} must be a positive finite number, got {value!r}")
    return v


def _check_epsilon(epsilon) -> float:
    e = float(epsilon)
    if math.isnan(e) or e < 0:
        raise ValueError(f"epsilon must be >= 0, got {epsilon!r}")
    return e


def wrap(x: float, period: float) -> float:
    """Reduce ``x`` modulo ``period`` into ``[0, period)``."""
    r = float(x) % period
    # tiny negative x can round up to exactly ``period``
    return 0.0 if r >= period else r


def circular_shift(u: Iterable[float], offset: float, period: float) -> np.ndarray:
    """Return ``(u[i] + offset) mod period`` for every element of ``u``."""
    u = np.asarray(u, dtype=float).ravel()
    return np.array([wrap(ui + offset, period) for ui in u], dtype=float)


def shift_offsets(start: float, stop: float, step: float) -> np.ndarray:
    """Offsets ``start, start + step, ...`` up to and including ``stop``.

    There are ``floor((stop - start)/step) + 1`` of them; each is computed as
    ``start + k*step`` so rounding does not accumulate.
    """
    step = _positive(step, "step")
    start, stop = float(start), float(stop)
    if not (math.isfinite(start) and math.isfinite(stop)):
        raise ValueError(f"start and stop must be finite, got start={start!r} stop={stop!r}")
    span = stop - start
    if span < 0:
        return np.empty(0, dtype=float)
    ratio = span / step
    n = int(math.floor(ratio + _COUNT_TOL * max(1.0, ratio))) + 1
    return np.array([start + k * step for k in range(n)], dtype=float)


def auto_period(u: Iterable[float], v: Iterable[float]) -> int:
    """Latest whole timestamp plus one: ``floor(max(u ∪ v)) + 1``."""
    both = np.concatenate([np.asarray(u, dtype=float).ravel(), np.asarray(v, dtype=float).ravel()])
    if both.size == 0:
        raise ValueError("Cannot derive a period from two empty sequences")
    latest = float(both.max())
    if not math.isfinite(latest):
        raise ValueError("Cannot derive a period from non-finite timestamps")
    return int(math.floor(latest)) + 1


@dataclass(frozen=True)
class AutoShift:
    """Integer mode.

    ``period = floor(max(u ∪ v)) + 1`` and the offsets are ``0, 1, ..., period - 1``,
    so the last shift brings ``u`` back round to one step before alignment.
    """

    name = "auto"

    def period(self, u, v) -> float:
        return float(auto_period(u, v))

    def offsets(self, u, v) -> np.ndarray:
        return shift_offsets(0.0, auto_period(u, v) - 1, 1.0)


@dataclass(frozen=True)
class ParameterizedShift:
    """Continuous mode.

    ``period = T + dt``; offsets run ``t0, t0 + dt, ..., T`` with ``T`` included.
    """

    T: float
    dt: float
    t0: float = 0.0

    name = "parameterized"

    def period(self, u=None, v=None) -> float:
        return float(self.T) + float(self.dt)

    def offsets(self, u=None, v=None) -> np.ndarray:
        return shift_offsets(self.t0, self.T, self.dt)


ShiftPolicy = Union[AutoShift, ParameterizedShift]


def resolve_shifts(u, v, policy: Optional[ShiftPolicy] = None) -> Tuple[float, np.ndarray]:
    """Return ``(period, offsets)`` for ``policy`` (default :class:`AutoShift`)."""
    policy = policy if policy is not None else AutoShift()
    period = _positive(policy.period(u, v), "period")
    offsets = policy.offsets(u, v)
    logger.debug("policy=%s period=%g shifts=%d", policy.name, period, len(offsets))
    return period, offsets


def enumerate_lags(
    u: Iterable[float],
    v: Iterable[float],
    period: float,
    offsets: Iterable[float],
    epsilon: float = DEFAULT_EPSILON,
) -> np.ndarray:
    """Lags of every shifted copy of ``u`` against ``v``, flattened in offset order.

    ``period`` and ``offsets`` are taken as given, e.g. from
    :func:`resolve_shifts`.
    """
    period = _positive(period, "period")
    epsilon = _check_epsilon(epsilon)
    u = _as_events(u, "u")
    v = _as_events(v, "v")
    chunks = [compute_lags(circular_shift(u, t, period), v, epsilon) for t in offsets]
    if not chunks:
        return np.empty(0, dtype=float)
    return np.concatenate(chunks)


def enumerate_lag_table(
    u: Iterable[float],
    v: Iterable[float],
    period: float,
    offsets: Iterable[float],
    epsilon: float = DEFAULT_EPSILON,
) -> pd.DataFrame:
    """Same enumeration as :func:`enumerate_lags`, one provenance row per lag."""
    period = _positive(period, "period")
    epsilon = _check_epsilon(epsilon)
    u = _as_events(u, "u")
    v = _as_events(v, "v")
    rows = []
    for t in offsets:
        shifted = circular_shift(u, t, period)
        for i, j, d in iter_lags(shifted, v, epsilon):
            rows.append((float(t), i, j, float(shifted[i]), float(v[j]), d))
    return _table_frame(rows)


def _table_frame(rows) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=LAG_TABLE_COLUMNS)
    return df.astype({"shift": float, "u_index": int, "v_index": int,
                      "u_shifted": float, "v": float, "lag": float})


def lag_vector(
    u: Iterable[float],
    v: Iterable[float],
    period: float,
    step: float,
    epsilon: float = DEFAULT_EPSILON,
    *,
    start: float = 0.0,
    stop: Optional[float] = None,
) -> np.ndarray:
    """Circular lags of ``u`` against ``v`` for an explicit period and step.

    ``u`` is shifted by each offset ``start + k*step`` up to ``stop``
    (inclusive; default ``period - step``, one full cycle), wrapped into
    ``[0, period)`` and filtered against the fixed ``v`` with
    :func:`~circlag.lag.compute_lags`.  Results are concatenated in shift
    order.

    Raises
    ------
    ValueError
        For a non-positive ``period`` or ``step``, a negative ``epsilon`` or
        non-finite timestamps.
    """
    period = _positive(period, "period")
    step = _positive(step, "step")
    epsilon = _check_epsilon(epsilon)
    u = _as_events(u, "u")
    v = _as_events(v, "v")
    if u.size == 0 or v.size == 0:
        return np.empty(0, dtype=float)
    stop = period - step if stop is None else float(stop)
    offsets = shift_offsets(start, stop, step)
    logger.debug("period=%g step=%g shifts=%d", period, step, len(offsets))
    return enumerate_lags(u, v, period, offsets, epsilon)


def circular_lags(
    u: Iterable[float],
    v: Iterable[float],
    policy: Optional[ShiftPolicy] = None,
    epsilon: float = DEFAULT_EPSILON,
) -> np.ndarray:
    """Circular lags with the period and offsets taken from ``policy``."""
    epsilon = _check_epsilon(epsilon)
    u = _as_events(u, "u")
    v = _as_events(v, "v")
    if u.size == 0 or v.size == 0:
        return np.empty(0, dtype=float)
    period, offsets = resolve_shifts(u, v, policy)
    return enumerate_lags(u, v, period, offsets, epsilon)


def auto_lag_vector(u, v, epsilon: float = DEFAULT_EPSILON) -> np.ndarray:
    return circular_lags(u, v, AutoShift(), epsilon)


def parameterized_lag_vector(u, v, t0: float, T: float, dt: float,
                             epsilon: float = DEFAULT_EPSILON) -> np.ndarray:
    return circular_lags(u, v, ParameterizedShift(T=T, dt=dt, t0=t0), epsilon)


def lag_table(
    u: Iterable[float],
    v: Iterable[float],
    policy: Optional[ShiftPolicy] = None,
    epsilon: float = DEFAULT_EPSILON,
) -> pd.DataFrame:
    """Circular lags with provenance, one row per retained lag.

    Columns are ``shift``, ``u_index``, ``v_index``, ``u_shifted``, ``v`` and
    ``lag``.  Rows come out in the same order as :func:`circular_lags`, so
    ``lag_table(...)["lag"]`` equals ``circular_lags(...)`` element-wise.
    """
    epsilon = _check_epsilon(epsilon)
    u = _as_events(u, "u")
    v = _as_events(v, "v")
    if u.size == 0 or v.size == 0:
        return _table_frame([])
    period, offsets = resolve_shifts(u, v, policy)
    return enumerate_lag_table(u, v, period, offsets, epsilon)
