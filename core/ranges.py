"""Value range (min, max, median) over extracted values."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ValueRange:
    """Summary of the non-null values for one (layer, scope) selection."""

    min: float
    max: float
    median: float
    count: int

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def is_degenerate(self) -> bool:
        """True when every value is the same (including a single sample)."""
        return self.min == self.max


def analyze(values) -> ValueRange | None:
    """
    Compute min, max and median over the usable values.

    Args:
        values: Iterable of numbers or None

    Returns:
        ValueRange, or None when no finite values remain
    """
    cleaned = [v for v in values if v is not None and not isinstance(v, bool)]
    array = np.asarray(cleaned, dtype=float)
    array = array[np.isfinite(array)]
    if array.size == 0:
        return None

    return ValueRange(
        min=float(array.min()),
        max=float(array.max()),
        median=float(np.median(array)),
        count=int(array.size),
    )
