import pytest

from src.stats.config import EngineConfig


def test_defaults():
    cfg = EngineConfig()
    assert cfg.bin_count is None
    assert cfg.calibration_buckets == 10
    assert cfg.rolling_window == 10
    assert cfg.min_paired_observations == 3


@pytest.mark.parametrize(
    "field, value",
    [
        ("bin_count", 0),
        ("calibration_buckets", -1),
        ("rolling_window", 2.0),
        ("min_paired_observations", 0),
    ],
)
def test_invalid_values_name_the_field(field, value):
    with pytest.raises(ValueError, match=field):
        EngineConfig(**{field: value})
