"""
LifeFlow — Statistics Engine
=============================
Pure descriptive statistics over numeric sequences, plus the donor
summary shown on the dashboard.

Every function returns a neutral default (0 or None) on empty input
instead of raising.
"""

import math
from typing import Hashable, Iterable, Optional, Sequence

from lifeflow.models import Donor, DonorStatistics


# ═══════════════════════════════════════════════════════════════════════════
# SCALAR FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════

def mean(values: Optional[Sequence[float]]) -> float:
    """Arithmetic mean; 0 for an empty or missing sequence."""
    if not values:
        return 0
    return sum(values) / len(values)


def median(values: Optional[Sequence[float]]) -> float:
    """
    Middle value of the sorted sequence; the average of the two middle
    values for even lengths. The input is left untouched.
    """
    if not values:
        return 0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 != 0:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def mode(values: Optional[Iterable[Hashable]]):
    """
    Most frequent value, or None if empty.

    Ties go to whichever value reached the winning count first: a later
    value only takes over once its count strictly exceeds the current max.
    """
    frequency: dict = {}
    max_freq = 0
    result = None

    for item in values or []:
        frequency[item] = frequency.get(item, 0) + 1
        if frequency[item] > max_freq:
            max_freq = frequency[item]
            result = item

    return result


def std_dev(values: Optional[Sequence[float]]) -> float:
    """Population standard deviation (divides by N)."""
    if not values:
        return 0
    avg = mean(values)
    square_diffs = [(v - avg) ** 2 for v in values]
    return math.sqrt(mean(square_diffs))


def round_half_up(value: float) -> int:
    """Round .5 upwards, as the dashboard has always displayed figures."""
    return math.floor(value + 0.5)


# ═══════════════════════════════════════════════════════════════════════════
# DONOR SUMMARY
# ═══════════════════════════════════════════════════════════════════════════

def summarize(donors: Sequence[Donor]) -> DonorStatistics:
    """Aggregate statistics over the given donors."""
    blood_types = [d.blood_type for d in donors]
    ages = [d.age for d in donors]

    return DonorStatistics(
        total_donors=len(donors),
        most_common_blood_type=mode(blood_types),
        average_age=round_half_up(mean(ages)),
        median_age=median(ages),
        age_std_dev=f"{std_dev(ages):.2f}",
    )
