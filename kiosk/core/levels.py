"""
Light level codec.

The display's dial has four discrete steps; the flow engine works with a
normalized intensity in [0, 1]. The mapping is a fixed table:

    level   intensity
    0 OFF   0.00
    1 LOW   0.05
    2 MED   0.50
    3 FULL  1.00

decodeLevel() is a lookup (unknown levels fall back to OFF).
encodeIntensity() picks the nearest table entry, lower index on ties.
"""

import math
from enum import IntEnum
from typing import Any, Tuple


class LightLevel(IntEnum):
    """Discrete light levels shown on the display"""
    OFF = 0
    LOW = 1
    MEDIUM = 2
    FULL = 3


LIGHT_INTENSITIES: Tuple[float, ...] = (0.00, 0.05, 0.50, 1.00)


def decodeLevel(level: Any) -> float:
    """Discrete level -> intensity. Out-of-range or non-integer input is OFF."""
    if isinstance(level, bool):
        return LIGHT_INTENSITIES[LightLevel.OFF]
    if isinstance(level, float) and level.is_integer():
        level = int(level)  # JSON encoders may send 2.0 for 2
    if not isinstance(level, int):
        return LIGHT_INTENSITIES[LightLevel.OFF]
    if 0 <= level < len(LIGHT_INTENSITIES):
        return LIGHT_INTENSITIES[level]
    return LIGHT_INTENSITIES[LightLevel.OFF]


def encodeIntensity(intensity: float) -> int:
    """Intensity -> nearest discrete level. Defined for every real input."""
    value = float(intensity)
    if math.isnan(value):
        return int(LightLevel.OFF)
    if math.isinf(value):
        return int(LightLevel.FULL if value > 0 else LightLevel.OFF)

    best = 0
    bestDiff = abs(value - LIGHT_INTENSITIES[0])
    for index in range(1, len(LIGHT_INTENSITIES)):
        diff = abs(value - LIGHT_INTENSITIES[index])
        # Strict comparison keeps the lower index on ties
        if diff < bestDiff:
            best = index
            bestDiff = diff
    return best
