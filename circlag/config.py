from __future__ import annotations

from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional
import json, math, logging

from .lag import DEFAULT_EPSILON
from .circular import AutoShift, ParameterizedShift, ShiftPolicy

logger = logging.getLogger(__name__)

MODES = ("auto", "parameterized")


@dataclass
class LagConfig:
    """Inputs controlling a circular-lag run.

    ``epsilon`` is the inclusion threshold: lags with ``|lag| <= epsilon`` are
    kept.  ``mode`` selects the shift policy; ``t0``, ``T`` and ``dt`` are
    only read in ``"parameterized"`` mode, where ``T`` and ``dt`` are
    required.
    """

    epsilon: float = DEFAULT_EPSILON
    mode: str = "auto"
    t0: float = 0.0
    T: Optional[float] = None
    dt: Optional[float] = None

    def validate(self) -> "LagConfig":
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode '{self.mode}'; expected one of {MODES}")
        eps = float(self.epsilon)
        if math.isnan(eps) or eps < 0:
            raise ValueError("epsilon must be >= 0")
        if self.mode == "parameterized":
            if self.T is None or self.dt is None:
                raise ValueError("Parameterized mode requires both T and dt")
            for key in ("t0", "T", "dt"):
                if not math.isfinite(float(getattr(self, key))):
                    raise ValueError(f"{key} must be finite, got {getattr(self, key)!r}")
            if not float(self.dt) > 0:
                raise ValueError("dt must be > 0")
            if float(self.T) < float(self.t0):
                raise ValueError("T must be >= t0")
        return self

    def policy(self) -> ShiftPolicy:
        self.validate()
        if self.mode == "auto":
            return AutoShift()
        return ParameterizedShift(T=float(self.T), dt=float(self.dt), t0=float(self.t0))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Named configurations for the two reference scenarios.
PRESETS: dict[str, LagConfig] = {
    "integer": LagConfig(epsilon=10.0, mode="auto"),
    "continuous": LagConfig(epsilon=10.0, mode="parameterized", t0=0.0, T=3.0, dt=0.5),
}


def config_from_dict(data: Dict[str, Any], base: Optional[LagConfig] = None) -> LagConfig:
    """Overlay ``data`` on ``base`` (default ``LagConfig()``) and validate."""
    known = {f.name for f in fields(LagConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
    merged = (base or LagConfig()).to_dict()
    merged.update(data)
    return LagConfig(**merged).validate()


def load_config(path: str | Path, base: Optional[LagConfig] = None) -> LagConfig:
    """Read a JSON object of :class:`LagConfig` fields."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    data = json.loads(p.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"Config {p} must contain a JSON object")
    logger.info("Loaded lag config from %s", p)
    return config_from_dict(data, base)
