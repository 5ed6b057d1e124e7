"""Preamble to physical units.

These are the instrument's documented conversions; the x values are scaled
into the unit picked from the whole acquisition span.
"""

from __future__ import annotations

import numpy as np

from dsoplot.types.records import Calibration, PreambleRecord, TimeUnitScale

Y_MARGIN = 1.1  # 5% beyond half the vertical range on each side


def time_unit_scale(seconds: float) -> TimeUnitScale:
    """Pick a human readable unit for a time interval.

    The unit follows the decimal exponent of ``abs(seconds)``: exponent
    <= -8 is nsec, -7..-5 usec, -4..-2 msec, anything larger sec.

    Examples
    --------
    >>> time_unit_scale(3e-6)
    TimeUnitScale(multiplier=1000000.0, unit='usec')
    """
    exponent = int(f"{abs(seconds):.6E}".split("E")[1])
    if exponent <= -8:
        return TimeUnitScale(1e9, "nsec")
    if exponent <= -5:
        return TimeUnitScale(1e6, "usec")
    if exponent <= -2:
        return TimeUnitScale(1000.0, "msec")
    return TimeUnitScale(1.0, "sec")


def sample_x(preamble: PreambleRecord, index, time_scale: float = 1.0):
    """Scaled time of sample `index` (scalar or array)."""
    return (
        (index - preamble.x_reference) * preamble.x_increment + preamble.x_origin
    ) * time_scale


def sample_times(preamble: PreambleRecord, count: int, time_scale: float = 1.0):
    return sample_x(preamble, np.arange(count), time_scale)


def calibrate(preamble: PreambleRecord, vertical_range: float) -> Calibration:
    scale, unit = time_unit_scale(preamble.points * preamble.x_increment)
    return Calibration(
        x_min=preamble.x_origin * scale,
        x_max=sample_x(preamble, preamble.points - 1, scale),
        y_half_range=vertical_range * Y_MARGIN / 2,
        time_scale=scale,
        time_unit=unit,
    )
