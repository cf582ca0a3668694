from abc import ABC, abstractmethod
from typing import Sequence


class ScalarFunction(ABC):
    """
    Real function of a fixed-size real vector, the unit of work handed to an integrator.

    Subclasses hold whatever configuration they need (set at construction) and
    implement `_evaluate`. The public entry points check the input size.
    """

    def __init__(self, dimensionality: int):
        if dimensionality < 1:
            raise ValueError(f"dimensionality must be >= 1, got {dimensionality}")
        self._dimensionality = int(dimensionality)

    @property
    def dimensionality(self) -> int:
        return self._dimensionality

    def evaluate(self, x: Sequence[float]) -> float:
        if len(x) != self._dimensionality:
            raise ValueError(
                f"{type(self).__name__} expects {self._dimensionality} parameter(s), got {len(x)}"
            )
        return float(self._evaluate(x))

    def __call__(self, x: Sequence[float]) -> float:
        return self.evaluate(x)

    @abstractmethod
    def _evaluate(self, x: Sequence[float]) -> float:
        ...
