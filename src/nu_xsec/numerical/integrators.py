import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

import numpy as np
from scipy import integrate

from nu_xsec.numerical.functions import ScalarFunction
from nu_xsec.numerical.range import Range1D
from nu_xsec.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntegrationSettings:
    epsabs: float = 0.0
    epsrel: float = 1e-6
    limit: int = 200            # max sub-intervals per axis (adaptive)
    n_points: int = 40          # nodes per axis (Gauss-Legendre)
    warn_rel_error: float = 1e-3


@dataclass(frozen=True)
class ParamBinding:
    """Ties the `index`-th entry of a function's input vector to a named variable and its range."""
    index: int
    name: str
    range: Range1D


class IntegratorBase(ABC):
    """
    Generic numerical integration engine.

    Implementations keep no state between calls so a single instance can be
    used recursively, e.g. from inside the function it is integrating.
    """

    def __init__(self, settings: IntegrationSettings = None):
        self._settings = settings if settings is not None else IntegrationSettings()

    @property
    def settings(self) -> IntegrationSettings:
        return self._settings

    def integrate(self, func: ScalarFunction, bindings: Sequence[ParamBinding]) -> float:
        if func is None:
            raise ConfigurationError("No function given to the integrator")

        ranges = self._resolve_bindings(func, bindings)

        # zero-width domain: nothing to integrate
        if any(r.is_degenerate for r in ranges):
            logger.debug("Degenerate integration domain %s, returning 0", [str(r) for r in ranges])
            return 0.0

        return float(self._integrate(func, ranges))

    @abstractmethod
    def _integrate(self, func: ScalarFunction, ranges: Sequence[Range1D]) -> float:
        """Integrate `func` over the box `ranges`, ordered by parameter index."""
        ...

    def _resolve_bindings(self, func, bindings):
        bindings = sorted(bindings, key=lambda b: b.index)
        indices = [b.index for b in bindings]
        if indices != list(range(func.dimensionality)):
            raise ValueError(
                f"Bindings {indices} do not cover the {func.dimensionality} parameter(s) "
                f"of {type(func).__name__} exactly once."
            )
        for b in bindings:
            logger.debug("param %d (%s) in %s", b.index, b.name, b.range)
        return [b.range for b in bindings]


class QuadIntegrator(IntegratorBase):
    """Adaptive Gauss-Kronrod quadrature from QUADPACK (scipy.integrate.quad / nquad)."""

    def _integrate(self, func, ranges):
        s = self._settings
        if len(ranges) == 1:
            r = ranges[0]
            value, abs_error = integrate.quad(
                lambda t: func.evaluate((t,)),
                r.min, r.max,
                epsabs=s.epsabs, epsrel=s.epsrel, limit=s.limit,
            )
        else:
            # nquad passes the parameters positionally, first one innermost
            value, abs_error = integrate.nquad(
                lambda *args: func.evaluate(args),
                [[r.min, r.max] for r in ranges],
                opts={"epsabs": s.epsabs, "epsrel": s.epsrel, "limit": s.limit},
            )

        if value != 0 and abs(abs_error / value) > s.warn_rel_error:
            logger.warning(
                "High relative error in integration of %s: %.2e",
                type(func).__name__, abs(abs_error / value),
            )
        return value


@lru_cache(maxsize=None)
def _gl_nodes(n: int):
    return np.polynomial.legendre.leggauss(int(n))


class GaussLegendreIntegrator(IntegratorBase):
    """Fixed-order tensor-product Gauss-Legendre rule, `n_points` nodes per axis."""

    def _integrate(self, func, ranges):
        x, w = _gl_nodes(self._settings.n_points)

        axes_nodes = []
        axes_weights = []
        for r in ranges:
            half, center = 0.5 * r.width, 0.5 * (r.max + r.min)
            axes_nodes.append(center + half * x)
            axes_weights.append(half * w)

        total = 0.0
        for idx in itertools.product(range(len(x)), repeat=len(ranges)):
            point = [axes_nodes[a][i] for a, i in enumerate(idx)]
            weight = np.prod([axes_weights[a][i] for a, i in enumerate(idx)])
            total += weight * func.evaluate(point)
        return total
