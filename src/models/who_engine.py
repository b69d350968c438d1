"""
WHO Child Growth Standards — percentile engine.

Answers two questions against the WHO LMS reference:
- what percentile is this measurement at this age?
- what value sits at a given percentile at every reference age? (chart curves)
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from src.models.interpolation import interpolate
from src.models.lms import (
    calculate_z_score as lms_z_score,
    percentile_to_z_score,
    round_half_up,
    z_score_to_percentile,
    z_score_to_value,
)
from src.models.who_reference import (
    MEASUREMENT_TYPES, SEXES, WHO_REFERENCE, ReferenceSeries, ReferenceTables,
)


@dataclass(frozen=True)
class CurvePoint:
    age: int
    value: float


class WHOPercentileEngine:
    """WHO growth percentile engine using the LMS method.

    Holds read-only reference series keyed by (measurement type, sex); every
    call is a pure computation, so one engine can be shared across threads.
    """

    def __init__(self, reference: ReferenceTables = None):
        self.reference = reference or WHO_REFERENCE

    def get_series(self, measurement_type: str, sex: str) -> ReferenceSeries:
        try:
            return self.reference[(measurement_type, sex)]
        except KeyError:
            raise ValueError(
                f"No reference series for type={measurement_type!r}, "
                f"sex={sex!r} (types: {', '.join(MEASUREMENT_TYPES)}; "
                f"sexes: {', '.join(SEXES)})"
            ) from None

    def age_range(self, measurement_type: str, sex: str) -> Tuple[int, int]:
        series = self.get_series(measurement_type, sex)
        return series.age_min, series.age_max

    def calculate_z_score(self, value: float, age_in_days: float,
                          measurement_type: str, sex: str) -> Optional[float]:
        """Z-score at the interpolated LMS, or None outside the reference ages."""
        series = self.get_series(measurement_type, sex)
        if age_in_days < series.age_min or age_in_days > series.age_max:
            return None
        L, M, S = interpolate(series, age_in_days)
        return lms_z_score(value, L, M, S)

    def calculate_percentile(self, value: float, age_in_days: float,
                             measurement_type: str, sex: str) -> Optional[float]:
        """Percentile (0-100) of a measurement.

        Returns None when the age falls outside the reference range; the
        engine never extrapolates.
        """
        z = self.calculate_z_score(value, age_in_days, measurement_type, sex)
        if z is None:
            return None
        return z_score_to_percentile(z)

    def get_percentile_curve(self, percentile: float, measurement_type: str,
                             sex: str) -> List[CurvePoint]:
        """Expected value at `percentile` for every reference anchor age."""
        series = self.get_series(measurement_type, sex)
        z = percentile_to_z_score(percentile)
        return [
            CurvePoint(
                age=point.age,
                value=round_half_up(z_score_to_value(z, point.L, point.M, point.S), 2),
            )
            for point in series
        ]

    @property
    def available_series(self) -> list:
        return sorted(self.reference.keys())


default_engine = WHOPercentileEngine()


def calculate_percentile(value: float, age_in_days: float,
                         measurement_type: str, sex: str) -> Optional[float]:
    return default_engine.calculate_percentile(value, age_in_days, measurement_type, sex)


def get_percentile_curve(percentile: float, measurement_type: str,
                         sex: str) -> List[CurvePoint]:
    return default_engine.get_percentile_curve(percentile, measurement_type, sex)
