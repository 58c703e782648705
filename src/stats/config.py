"""
Settings accepted by the statistics layer.

    EngineConfig(bin_count=None, calibration_buckets=10,
                 rolling_window=10, min_paired_observations=3)

bin_count=None means "pick per column" (Sturges' rule, see histogram.py).
"""

from dataclasses import dataclass

from src.stats.correlation import MIN_PAIRED_OBSERVATIONS

CALIBRATION_BUCKETS = 10
ROLLING_WINDOW = 10


def _check_positive(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class EngineConfig:
    bin_count: int | None = None
    calibration_buckets: int = CALIBRATION_BUCKETS
    rolling_window: int = ROLLING_WINDOW
    min_paired_observations: int = MIN_PAIRED_OBSERVATIONS

    def __post_init__(self) -> None:
        if self.bin_count is not None:
            _check_positive("bin_count", self.bin_count)
        _check_positive("calibration_buckets", self.calibration_buckets)
        _check_positive("rolling_window", self.rolling_window)
        _check_positive("min_paired_observations", self.min_paired_observations)
