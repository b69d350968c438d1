"""
Age-indexed linear interpolation of LMS parameters between reference anchors.
"""
import numpy as np

from src.models.lms import LMS
from src.models.who_reference import ReferenceSeries


def interpolate(series: ReferenceSeries, age_in_days: float) -> LMS:
    """L, M, S at `age_in_days`.

    Anchor ages return the anchor's parameters untouched; anything in between
    is interpolated linearly from the bracketing pair. The age must lie in
    [series.age_min, series.age_max].
    """
    if age_in_days < series.age_min or age_in_days > series.age_max:
        raise ValueError(
            f"Age {age_in_days} days outside reference range "
            f"[{series.age_min}, {series.age_max}]"
        )

    ages, Ls, Ms, Ss = series.arrays
    return LMS(
        L=float(np.interp(age_in_days, ages, Ls)),
        M=float(np.interp(age_in_days, ages, Ms)),
        S=float(np.interp(age_in_days, ages, Ss)),
    )
