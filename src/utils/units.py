"""
Imperial/metric conversions. Measurements are stored in SI units (kg, cm);
converted values are rounded half up, 3 decimals for kg, 2 for everything else.
"""
from src.models.lms import round_half_up

KG_TO_LB = 2.20462
LB_TO_KG = 1 / KG_TO_LB
CM_TO_IN = 0.393701
IN_TO_CM = 1 / CM_TO_IN


def kg_to_lb(kg: float) -> float:
    return round_half_up(kg * KG_TO_LB, 2)


def lb_to_kg(lb: float) -> float:
    return round_half_up(lb * LB_TO_KG, 3)


def cm_to_in(cm: float) -> float:
    return round_half_up(cm * CM_TO_IN, 2)


def in_to_cm(inches: float) -> float:
    return round_half_up(inches * IN_TO_CM, 2)
