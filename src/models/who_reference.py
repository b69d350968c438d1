"""
WHO Child Growth Standards — LMS reference tables.
Source: WHO Multicentre Growth Reference Study (MGRS, 2006), 0-24 months.

Tables are published per completed month; anchors are stored by age in days
(30.4375 days per month, rounded half up) so they can be indexed directly by a
measurement's age.
"""
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, Literal, Tuple

import numpy as np

MeasurementType = Literal["weight", "height", "head"]
Sex = Literal["male", "female"]

MEASUREMENT_TYPES = ("weight", "height", "head")
SEXES = ("male", "female")

DAYS_PER_MONTH = 30.4375

# =============================================================================
# WHO LMS Reference Tables
# Format: age_months -> (L, M, S)
# =============================================================================

WHO_LMS_TABLES = {
    'weight': {
        'male': {
            0: (0.3487, 3.3464, 0.14602), 1: (0.2297, 4.4709, 0.13395),
            2: (0.1970, 5.5675, 0.12385), 3: (0.1738, 6.3762, 0.11727),
            4: (0.1553, 7.0023, 0.11316), 5: (0.1395, 7.5105, 0.11080),
            6: (0.1257, 7.9340, 0.10958), 7: (0.1134, 8.2970, 0.10902),
            8: (0.1021, 8.6151, 0.10882), 9: (0.0917, 8.9014, 0.10881),
            10: (0.0820, 9.1649, 0.10891), 11: (0.0730, 9.4122, 0.10906),
            12: (0.0644, 9.6479, 0.10925), 15: (0.0413, 10.3108, 0.11007),
            18: (0.0211, 10.9385, 0.11119), 21: (0.0029, 11.5486, 0.11261),
            24: (-0.0137, 12.1515, 0.11426),
        },
        'female': {
            0: (0.3809, 3.2322, 0.14171), 1: (0.1714, 4.1873, 0.13724),
            2: (0.0962, 5.1282, 0.13000), 3: (0.0402, 5.8458, 0.12619),
            4: (-0.0050, 6.4237, 0.12402), 5: (-0.0430, 6.8985, 0.12274),
            6: (-0.0756, 7.2970, 0.12204), 7: (-0.1039, 7.6422, 0.12178),
            8: (-0.1288, 7.9487, 0.12181), 9: (-0.1507, 8.2254, 0.12199),
            10: (-0.1700, 8.4800, 0.12223), 11: (-0.1872, 8.7192, 0.12247),
            12: (-0.2024, 8.9481, 0.12268), 15: (-0.2384, 9.6008, 0.12299),
            18: (-0.2637, 10.2315, 0.12309), 21: (-0.2815, 10.8534, 0.12335),
            24: (-0.2941, 11.4775, 0.12390),
        },
    },
    'height': {
        'male': {
            0: (1.0, 49.8842, 0.03795), 1: (1.0, 54.7244, 0.03557),
            2: (1.0, 58.4249, 0.03424), 3: (1.0, 61.4292, 0.03328),
            4: (1.0, 63.8860, 0.03257), 5: (1.0, 65.9026, 0.03204),
            6: (1.0, 67.6236, 0.03165), 7: (1.0, 69.1645, 0.03139),
            8: (1.0, 70.5994, 0.03124), 9: (1.0, 71.9687, 0.03117),
            10: (1.0, 73.2812, 0.03118), 11: (1.0, 74.5388, 0.03125),
            12: (1.0, 75.7488, 0.03137), 15: (1.0, 79.1458, 0.03197),
            18: (1.0, 82.2587, 0.03279), 21: (1.0, 85.1348, 0.03376),
            24: (1.0, 87.8161, 0.03479),
        },
        'female': {
            0: (1.0, 49.1477, 0.03790), 1: (1.0, 53.6872, 0.03640),
            2: (1.0, 57.0673, 0.03568), 3: (1.0, 59.8029, 0.03520),
            4: (1.0, 62.0899, 0.03486), 5: (1.0, 64.0301, 0.03463),
            6: (1.0, 65.7311, 0.03448), 7: (1.0, 67.2873, 0.03441),
            8: (1.0, 68.7498, 0.03440), 9: (1.0, 70.1435, 0.03444),
            10: (1.0, 71.4818, 0.03452), 11: (1.0, 72.7710, 0.03464),
            12: (1.0, 74.0150, 0.03479), 15: (1.0, 77.5099, 0.03534),
            18: (1.0, 80.7079, 0.03598), 21: (1.0, 83.6654, 0.03666),
            24: (1.0, 86.4153, 0.03734),
        },
    },
    'head': {
        'male': {
            0: (1.0, 34.4618, 0.03686), 1: (1.0, 37.2759, 0.03133),
            2: (1.0, 39.1285, 0.02997), 3: (1.0, 40.5135, 0.02918),
            4: (1.0, 41.6317, 0.02868), 5: (1.0, 42.5576, 0.02837),
            6: (1.0, 43.3306, 0.02817), 7: (1.0, 43.9803, 0.02804),
            8: (1.0, 44.5300, 0.02796), 9: (1.0, 44.9998, 0.02792),
            10: (1.0, 45.4051, 0.02790), 11: (1.0, 45.7573, 0.02789),
            12: (1.0, 46.0661, 0.02789), 15: (1.0, 46.8060, 0.02792),
            18: (1.0, 47.3711, 0.02800), 21: (1.0, 47.8408, 0.02810),
            24: (1.0, 48.2515, 0.02821),
        },
        'female': {
            0: (1.0, 33.8787, 0.03496), 1: (1.0, 36.5463, 0.03210),
            2: (1.0, 38.2521, 0.03168), 3: (1.0, 39.5328, 0.03140),
            4: (1.0, 40.5817, 0.03119), 5: (1.0, 41.4590, 0.03102),
            6: (1.0, 42.1995, 0.03087), 7: (1.0, 42.8290, 0.03075),
            8: (1.0, 43.3671, 0.03063), 9: (1.0, 43.8300, 0.03053),
            10: (1.0, 44.2319, 0.03044), 11: (1.0, 44.5844, 0.03035),
            12: (1.0, 44.8965, 0.03027), 15: (1.0, 45.6551, 0.03006),
            18: (1.0, 46.2424, 0.02987), 21: (1.0, 46.7384, 0.02972),
            24: (1.0, 47.1822, 0.02957),
        },
    },
}


@dataclass(frozen=True)
class ReferencePoint:
    age: int  # days
    L: float
    M: float
    S: float


@dataclass(frozen=True)
class ReferenceSeries:
    """Anchors for one (measurement type, sex), strictly increasing by age."""

    points: Tuple[ReferencePoint, ...]

    def __post_init__(self):
        if len(self.points) < 2:
            raise ValueError("A reference series needs at least 2 points")
        for prev, nxt in zip(self.points, self.points[1:]):
            if nxt.age <= prev.age:
                raise ValueError(
                    f"Reference ages must be strictly increasing "
                    f"(got {prev.age} then {nxt.age})"
                )

    @property
    def age_min(self) -> int:
        return self.points[0].age

    @property
    def age_max(self) -> int:
        return self.points[-1].age

    @property
    def ages(self) -> list:
        return [p.age for p in self.points]

    @cached_property
    def arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """(ages, L, M, S) as float arrays, built once per series."""
        return (
            np.array([p.age for p in self.points], dtype=float),
            np.array([p.L for p in self.points], dtype=float),
            np.array([p.M for p in self.points], dtype=float),
            np.array([p.S for p in self.points], dtype=float),
        )

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)


ReferenceTables = Dict[Tuple[str, str], ReferenceSeries]


def month_to_day(month: float) -> int:
    return int(month * DAYS_PER_MONTH + 0.5)


def series_from_months(table: dict) -> ReferenceSeries:
    """Build a series from a {age_months: (L, M, S)} table."""
    return ReferenceSeries(tuple(
        ReferencePoint(age=month_to_day(month), L=L, M=M, S=S)
        for month, (L, M, S) in sorted(table.items())
    ))


def build_reference(lms_tables: dict = None) -> ReferenceTables:
    """Build the (measurement type, sex) -> ReferenceSeries mapping."""
    lms_tables = lms_tables or WHO_LMS_TABLES
    return {
        (measurement_type, sex): series_from_months(table)
        for measurement_type, by_sex in lms_tables.items()
        for sex, table in by_sex.items()
    }


WHO_REFERENCE: ReferenceTables = build_reference()
