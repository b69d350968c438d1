"""
LMS (Lambda-Mu-Sigma) transforms for the WHO Child Growth Standards.

The LMS method expresses a reference distribution at a given age with three
parameters:
- L (lambda): Box-Cox power, captures skewness
- M (mu): median
- S (sigma): coefficient of variation

Z = ((value/M)^L - 1) / (L * S)    when L != 0
Z = ln(value/M) / S                when L == 0

Z-scores are mapped to percentiles with the Zelen & Severo polynomial
approximation of the standard normal CDF, and percentiles back to Z-scores with
the Hastings rational approximation of its inverse. The two approximations are
independent, so a percentile -> Z -> percentile round trip is close but not
exact.
"""
from typing import NamedTuple

import numpy as np

# |L| below this is treated as exactly zero (log form of the transform)
L_ZERO_TOLERANCE = 1e-4

# Percentile plateau outside |Z| > 3.5
Z_CLAMP = 3.5
PERCENTILE_FLOOR = 0.02
PERCENTILE_CEILING = 99.98

# Input clamp for the inverse approximation
INVERSE_PERCENTILE_MIN = 0.01
INVERSE_PERCENTILE_MAX = 99.99

# Zelen & Severo (Abramowitz & Stegun 26.2.17)
_CDF_P = 0.2316419
_CDF_D = 0.3989423
_CDF_B = (0.3193815, -0.3565638, 1.781478, -1.821256, 1.330274)

# Hastings (Abramowitz & Stegun 26.2.23)
_INV_C = (2.515517, 0.802853, 0.010328)
_INV_D = (1.432788, 0.189269, 0.001308)


class LMS(NamedTuple):
    L: float
    M: float
    S: float


def round_half_up(value: float, digits: int = 2) -> float:
    """Round to `digits` decimals, halves away from zero."""
    scale = 10 ** digits
    return float(np.copysign(np.floor(abs(value) * scale + 0.5) / scale, value))


def calculate_z_score(value: float, L: float, M: float, S: float) -> float:
    """Z-score of `value` under the LMS model.

    Inputs are not validated: non-positive value, M or S give NaN/inf.
    """
    ratio = np.float64(value) / M
    if abs(L) < L_ZERO_TOLERANCE:
        return float(np.log(ratio) / S)
    return float((np.power(ratio, L) - 1.0) / (L * S))


def z_score_to_value(z: float, L: float, M: float, S: float) -> float:
    """Inverse LMS: the measurement value sitting at Z-score `z`."""
    if abs(L) < L_ZERO_TOLERANCE:
        return float(M * np.exp(z * S))
    return float(M * np.power(np.float64(1.0 + L * S * z), 1.0 / L))


def z_score_to_percentile(z: float) -> float:
    """Percentile (0-100, 2 decimals) for a Z-score."""
    if z < -Z_CLAMP:
        return PERCENTILE_FLOOR
    if z > Z_CLAMP:
        return PERCENTILE_CEILING

    t = 1.0 / (1.0 + _CDF_P * abs(z))
    d = _CDF_D * np.exp(-z * z / 2.0)
    b1, b2, b3, b4, b5 = _CDF_B
    prob = d * t * (b1 + t * (b2 + t * (b3 + t * (b4 + t * b5))))

    percentile = (1.0 - prob) * 100.0 if z > 0 else prob * 100.0
    return round_half_up(percentile, 2)


def percentile_to_z_score(percentile: float) -> float:
    """Approximate Z-score for a percentile (0-100)."""
    percentile = max(INVERSE_PERCENTILE_MIN, min(INVERSE_PERCENTILE_MAX, percentile))
    p = percentile / 100.0

    if p < 0.5:
        t = np.sqrt(-2.0 * np.log(p))
        sign = -1.0
    else:
        t = np.sqrt(-2.0 * np.log(1.0 - p))
        sign = 1.0

    c0, c1, c2 = _INV_C
    d1, d2, d3 = _INV_D
    numerator = c0 + c1 * t + c2 * t * t
    denominator = 1.0 + d1 * t + d2 * t * t + d3 * t * t * t
    return float(sign * (t - numerator / denominator))
