from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Range1D:
    """
    Closed interval [min, max] of a kinematic or integration variable.

    A degenerate range (min == max) is legal and stands for a fixed value.
    """
    min: float
    max: float

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError(f"Invalid range: min={self.min} > max={self.max}")

    @property
    def width(self) -> float:
        return self.max - self.min

    @property
    def is_degenerate(self) -> bool:
        return self.min == self.max

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def intersect(self, other: Optional["Range1D"]) -> Optional["Range1D"]:
        """Overlap of two ranges, or None when they are disjoint. None acts as 'no restriction'."""
        if other is None:
            return self
        lo = max(self.min, other.min)
        hi = min(self.max, other.max)
        if lo > hi:
            return None
        return Range1D(lo, hi)

    def __str__(self):
        return f"[{self.min:.6g}, {self.max:.6g}]"
