from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

from insights.schemas.series import MAX_MEASUREMENT, BucketUnit, Period


# -----------------------
# Defaults (easy to change later)
# -----------------------
DEFAULT_EXPRESSIVE_FLOOR = 0.01                  # 1% minimum meaningful ceiling
DEFAULT_THRESHOLD_FRACTIONS = (0.3, 0.6, 1.0)    # calm / natural / expressive
DEFAULT_AXIS_HEADROOM = 1.2                      # 20% above highest value/threshold
DEFAULT_STEP_TABLE = (
    (0.016, 0.002),
    (0.04, 0.005),
    (0.08, 0.01),
    (0.16, 0.02),
    (0.4, 0.05),
    (0.8, 0.1),
    (1.6, 0.2),
    (4.0, 0.5),
    (8.0, 1.0),
)
DEFAULT_WINDOWS = {
    Period.DAY: (BucketUnit.HOUR, 24),
    Period.WEEK: (BucketUnit.DAY, 7),
    Period.MONTH: (BucketUnit.DAY, 30),
}
DEFAULT_SUMMARY_DAYS = {
    Period.DAY: 1,
    Period.WEEK: 7,
    Period.MONTH: 30,
}
MIN_HEADROOM = 1.2
MAX_HEADROOM = 10.0


def load_env() -> str:
    """
    Load the .env that lives in apps/api/.env deterministically.
    Returns the absolute env path used (useful for debug).
    """
    # insights/core/config.py -> insights/core -> insights -> apps/api
    api_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
    env_path = os.path.join(api_root, ".env")
    # process env (deploy settings, test monkeypatch) wins over the file
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def getenv_required(key: str) -> str:
    val = os.getenv(key)
    if not val:
        raise RuntimeError(f"{key} missing. Put it in apps/api/.env")
    return val


def getenv_default(key: str, default: str) -> str:
    return os.getenv(key, default)


@dataclass(frozen=True)
class AnalyticsConfig:
    """
    Immutable tuning knobs for bucketing, scale derivation and streaks.

    Validated on construction so every consumer can rely on:
    - threshold fractions strictly ascending in (0, 1]
    - a positive, finite expressive floor
    - floor * fractions strictly ascending and above zero
    - headroom in [1.2, 10]
    - a step table ascending in both max_range and stride
    """

    expressive_floor: float = DEFAULT_EXPRESSIVE_FLOOR
    threshold_fractions: Tuple[float, float, float] = DEFAULT_THRESHOLD_FRACTIONS
    axis_headroom: float = DEFAULT_AXIS_HEADROOM
    step_table: Tuple[Tuple[float, float], ...] = DEFAULT_STEP_TABLE
    windows: Dict[Period, Tuple[BucketUnit, int]] = field(
        default_factory=lambda: dict(DEFAULT_WINDOWS)
    )
    summary_days: Dict[Period, int] = field(
        default_factory=lambda: dict(DEFAULT_SUMMARY_DAYS)
    )
    streak_requires_today: bool = False

    def __post_init__(self) -> None:
        if not _is_positive_finite(self.expressive_floor):
            raise ValueError("expressive_floor must be a positive finite number")
        if self.expressive_floor > MAX_MEASUREMENT:
            raise ValueError(f"expressive_floor must be <= {MAX_MEASUREMENT:g}")

        fractions = tuple(self.threshold_fractions)
        if len(fractions) != 3:
            raise ValueError("threshold_fractions needs exactly three values")
        if not all(_is_positive_finite(f) and f <= 1.0 for f in fractions):
            raise ValueError("threshold_fractions must lie in (0, 1]")
        if not (fractions[0] < fractions[1] < fractions[2]):
            raise ValueError("threshold_fractions must be strictly ascending")

        # the floor thresholds themselves must stay distinct (subnormal floors round together)
        calm, natural, expressive = (self.expressive_floor * f for f in fractions)
        if not (0 < calm < natural < expressive):
            raise ValueError("expressive_floor is too small to keep thresholds distinct")

        if not (math.isfinite(self.axis_headroom) and MIN_HEADROOM <= self.axis_headroom <= MAX_HEADROOM):
            raise ValueError(f"axis_headroom must lie in [{MIN_HEADROOM}, {MAX_HEADROOM}]")

        if not self.step_table:
            raise ValueError("step_table must not be empty")
        prev_range, prev_stride = 0.0, 0.0
        for max_range, stride in self.step_table:
            if not (_is_positive_finite(max_range) and _is_positive_finite(stride)):
                raise ValueError("step_table entries must be positive finite numbers")
            if max_range <= prev_range or stride < prev_stride:
                raise ValueError("step_table must be ascending in max_range and stride")
            prev_range, prev_stride = max_range, stride

        for period in Period:
            if period not in self.windows:
                raise ValueError(f"windows missing period {period.value!r}")
            unit, count = self.windows[period]
            if not isinstance(unit, BucketUnit) or int(count) < 1:
                raise ValueError(f"invalid window for period {period.value!r}")
            days = self.summary_days.get(period)
            if days is None or int(days) < 1:
                raise ValueError(f"invalid summary_days for period {period.value!r}")

    def window_for(self, period: Period) -> Tuple[BucketUnit, int]:
        unit, count = self.windows[period]
        return unit, int(count)


def _is_positive_finite(x: float) -> bool:
    return isinstance(x, (int, float)) and math.isfinite(x) and x > 0


# -----------------------
# Env parsing
# -----------------------
def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number, got {raw!r}")


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be an integer, got {raw!r}")


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes")


def _env_fractions(key: str, default: Tuple[float, float, float]) -> Tuple[float, float, float]:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        parts = tuple(float(p) for p in raw.split(","))
    except ValueError:
        raise RuntimeError(f"{key} must be three comma-separated numbers, got {raw!r}")
    if len(parts) != 3:
        raise RuntimeError(f"{key} must be three comma-separated numbers, got {raw!r}")
    return parts  # type: ignore[return-value]


def _env_step_table(key: str, default: Tuple[Tuple[float, float], ...]) -> Tuple[Tuple[float, float], ...]:
    # format: "0.016:0.002,0.04:0.005,..."
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    rows = []
    try:
        for item in raw.split(","):
            max_range, stride = item.split(":")
            rows.append((float(max_range), float(stride)))
    except ValueError:
        raise RuntimeError(f"{key} must look like 'max:stride,max:stride', got {raw!r}")
    return tuple(rows)


def _env_window(key: str, default: Tuple[BucketUnit, int]) -> Tuple[BucketUnit, int]:
    # format: "day:7"
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        unit, count = raw.split(":")
        return BucketUnit(unit.strip().lower()), int(count)
    except ValueError:
        raise RuntimeError(f"{key} must look like 'unit:count' (unit in hour/day/week/month), got {raw!r}")


def config_from_env(env_path: Optional[str] = None) -> AnalyticsConfig:
    """
    Build AnalyticsConfig from INSIGHTS_* environment variables.
    Malformed values raise RuntimeError naming the variable.
    """
    if env_path is not None:
        load_dotenv(dotenv_path=env_path, override=False)

    windows = {
        Period.DAY: _env_window("INSIGHTS_DAY_WINDOW", DEFAULT_WINDOWS[Period.DAY]),
        Period.WEEK: _env_window("INSIGHTS_WEEK_WINDOW", DEFAULT_WINDOWS[Period.WEEK]),
        Period.MONTH: _env_window("INSIGHTS_MONTH_WINDOW", DEFAULT_WINDOWS[Period.MONTH]),
    }
    summary_days = {
        Period.DAY: _env_int("INSIGHTS_DAY_SUMMARY_DAYS", DEFAULT_SUMMARY_DAYS[Period.DAY]),
        Period.WEEK: _env_int("INSIGHTS_WEEK_SUMMARY_DAYS", DEFAULT_SUMMARY_DAYS[Period.WEEK]),
        Period.MONTH: _env_int("INSIGHTS_MONTH_SUMMARY_DAYS", DEFAULT_SUMMARY_DAYS[Period.MONTH]),
    }

    try:
        return AnalyticsConfig(
            expressive_floor=_env_float("INSIGHTS_EXPRESSIVE_FLOOR", DEFAULT_EXPRESSIVE_FLOOR),
            threshold_fractions=_env_fractions("INSIGHTS_THRESHOLD_FRACTIONS", DEFAULT_THRESHOLD_FRACTIONS),
            axis_headroom=_env_float("INSIGHTS_AXIS_HEADROOM", DEFAULT_AXIS_HEADROOM),
            step_table=_env_step_table("INSIGHTS_STEP_TABLE", DEFAULT_STEP_TABLE),
            windows=windows,
            summary_days=summary_days,
            streak_requires_today=_env_bool("INSIGHTS_STREAK_REQUIRES_TODAY", False),
        )
    except ValueError as e:
        raise RuntimeError(f"invalid INSIGHTS_* configuration: {e}")
