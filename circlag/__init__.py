
"""
circlag - circular lags between two event sequences (e.g. spike times).
"""

__version__ = "0.1.0"

from .lag import compute_lags, iter_lags, lag_within, DEFAULT_EPSILON
from .circular import (
    wrap,
    circular_shift,
    shift_offsets,
    auto_period,
    AutoShift,
    ParameterizedShift,
    resolve_shifts,
    enumerate_lags,
    enumerate_lag_table,
    lag_vector,
    circular_lags,
    auto_lag_vector,
    parameterized_lag_vector,
    lag_table,
)
from .config import LagConfig, PRESETS, load_config, config_from_dict

__all__ = [
    "__version__",
    "compute_lags", "iter_lags", "lag_within", "DEFAULT_EPSILON",
    "wrap", "circular_shift", "shift_offsets", "auto_period",
    "AutoShift", "ParameterizedShift", "resolve_shifts",
    "enumerate_lags", "enumerate_lag_table",
    "lag_vector", "circular_lags", "auto_lag_vector", "parameterized_lag_vector",
    "lag_table",
    "LagConfig", "PRESETS", "load_config", "config_from_dict",
]
