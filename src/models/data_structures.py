"""
Data structures for infant growth tracking.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from config.settings import (
    PERCENTILE_ALERT_HIGH, PERCENTILE_ALERT_LOW,
    PERCENTILE_NORMAL_HIGH, PERCENTILE_NORMAL_LOW,
)
from src.models.who_engine import WHOPercentileEngine
from src.models.who_reference import SEXES
from src.utils.dates import DateLike, calculate_age_in_days, parse_date

# measurement type -> GrowthMeasurement attribute
MEASUREMENT_FIELDS = {
    'weight': 'weight_kg',
    'height': 'height_cm',
    'head': 'head_cm',
}


@dataclass
class GrowthMeasurement:
    id: str
    date: date
    age_in_days: int
    weight_kg: float
    height_cm: float
    head_cm: float
    weight_percentile: Optional[float] = None
    height_percentile: Optional[float] = None
    head_percentile: Optional[float] = None

    def value(self, measurement_type: str) -> float:
        return getattr(self, MEASUREMENT_FIELDS[measurement_type])

    def percentile(self, measurement_type: str) -> Optional[float]:
        return getattr(self, f'{measurement_type}_percentile')

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'age_in_days': self.age_in_days,
            'weight_kg': self.weight_kg,
            'height_cm': self.height_cm,
            'head_cm': self.head_cm,
            'weight_percentile': self.weight_percentile,
            'height_percentile': self.height_percentile,
            'head_percentile': self.head_percentile,
        }


def _check_sex(sex: str):
    if sex not in SEXES:
        raise ValueError(f"Unknown sex {sex!r} (expected one of: {', '.join(SEXES)})")


def percentile_band(percentile: Optional[float]) -> Optional[str]:
    """'alert' outside P3-P97, 'normal' within P25-P75, 'watch' otherwise."""
    if percentile is None:
        return None
    if percentile < PERCENTILE_ALERT_LOW or percentile > PERCENTILE_ALERT_HIGH:
        return 'alert'
    if PERCENTILE_NORMAL_LOW <= percentile <= PERCENTILE_NORMAL_HIGH:
        return 'normal'
    return 'watch'


@dataclass
class InfantProfile:
    """An infant and their measurement history (oldest first)."""

    infant_id: str
    sex: str
    birth_date: date
    name: Optional[str] = None
    measurements: List[GrowthMeasurement] = field(default_factory=list)
    engine: WHOPercentileEngine = field(
        default_factory=WHOPercentileEngine, repr=False, compare=False
    )

    def __post_init__(self):
        _check_sex(self.sex)
        self.birth_date = parse_date(self.birth_date)
        self.name = self.name or self.infant_id

    def _score(self, measurement: GrowthMeasurement) -> GrowthMeasurement:
        measurement.age_in_days = calculate_age_in_days(self.birth_date, measurement.date)
        for measurement_type in MEASUREMENT_FIELDS:
            pct = self.engine.calculate_percentile(
                measurement.value(measurement_type), measurement.age_in_days,
                measurement_type, self.sex,
            )
            setattr(measurement, f'{measurement_type}_percentile', pct)
        return measurement

    def add_measurement(self, measurement_id: str, measured_on: DateLike,
                        weight_kg: float, height_cm: float,
                        head_cm: float) -> GrowthMeasurement:
        """Record (or replace, by id) a measurement with age and percentiles."""
        measurement = self._score(GrowthMeasurement(
            id=measurement_id, date=parse_date(measured_on), age_in_days=0,
            weight_kg=weight_kg, height_cm=height_cm, head_cm=head_cm,
        ))
        self.measurements = [m for m in self.measurements if m.id != measurement_id]
        self.measurements.append(measurement)
        self.measurements.sort(key=lambda m: m.date)
        return measurement

    def remove_measurement(self, measurement_id: str) -> bool:
        before = len(self.measurements)
        self.measurements = [m for m in self.measurements if m.id != measurement_id]
        return len(self.measurements) < before

    def get_measurement(self, measurement_id: str) -> Optional[GrowthMeasurement]:
        return next((m for m in self.measurements if m.id == measurement_id), None)

    def update_profile(self, name: str = None, birth_date: DateLike = None,
                       sex: str = None):
        """Change profile fields; ages and percentiles are recomputed.

        Inputs are checked before anything is changed, so a rejected update
        leaves the profile as it was.
        """
        if sex is not None:
            _check_sex(sex)
        if birth_date is not None:
            birth_date = parse_date(birth_date)

        if name is not None:
            self.name = name
        if birth_date is not None:
            self.birth_date = birth_date
        if sex is not None:
            self.sex = sex
        for m in self.measurements:
            self._score(m)

    def to_dict(self) -> dict:
        return {
            'infant_id': self.infant_id,
            'name': self.name,
            'sex': self.sex,
            'birth_date': self.birth_date.isoformat(),
            'measurement_count': len(self.measurements),
            'measurements': [m.to_dict() for m in self.measurements],
        }
