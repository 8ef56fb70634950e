"""Statistical checks applied to generator output."""

from .chisquare import ChiSquareResult, chi_square_test
from .critical import critical_value_95
from .histogram import (
    Histogram,
    build_histogram,
    check_range_membership,
    histogram_for_channel,
    histogram_layout,
)
from .oracle import theoretical_histogram
from .reproducibility import check_reproducibility, random_partition
from .sphere import (
    SphereResult,
    sphere_test_applicable,
    sphere_volume_test,
    unit_ball_volume,
)

__all__ = [
    "ChiSquareResult",
    "Histogram",
    "SphereResult",
    "build_histogram",
    "check_range_membership",
    "check_reproducibility",
    "chi_square_test",
    "critical_value_95",
    "histogram_for_channel",
    "histogram_layout",
    "random_partition",
    "sphere_test_applicable",
    "sphere_volume_test",
    "theoretical_histogram",
    "unit_ball_volume",
]
