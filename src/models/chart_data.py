"""
Chart-ready data: WHO percentile lines and an infant's own plotted points.
"""
from typing import List, Sequence, Tuple

import pandas as pd

from config.settings import CHART_PERCENTILES
from src.models.data_structures import InfantProfile
from src.models.who_engine import WHOPercentileEngine, default_engine


def build_percentile_lines(measurement_type: str, sex: str,
                           percentiles: Sequence[float] = None,
                           engine: WHOPercentileEngine = None) -> List[dict]:
    """One {percentile, points} line per requested percentile."""
    engine = engine or default_engine
    percentiles = percentiles or CHART_PERCENTILES
    return [
        {
            'percentile': pct,
            'points': engine.get_percentile_curve(pct, measurement_type, sex),
        }
        for pct in percentiles
    ]


def percentile_lines_frame(measurement_type: str, sex: str,
                           percentiles: Sequence[float] = None,
                           engine: WHOPercentileEngine = None) -> pd.DataFrame:
    """Wide chart table: index = age in days, one column per percentile."""
    lines = build_percentile_lines(measurement_type, sex, percentiles, engine)
    columns = {
        line['percentile']: pd.Series(
            [p.value for p in line['points']],
            index=[p.age for p in line['points']],
        )
        for line in lines
    }
    df = pd.DataFrame(columns)
    df.index.name = 'age_days'
    return df


def measurement_points(profile: InfantProfile,
                       measurement_type: str) -> List[Tuple[int, float]]:
    """(age in days, value) for every stored measurement, oldest first."""
    return [
        (m.age_in_days, m.value(measurement_type))
        for m in profile.measurements
    ]
