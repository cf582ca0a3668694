import math

import numpy as np
import pytest

from nu_xsec.numerical.functions import ScalarFunction
from nu_xsec.numerical.integrators import (
    GaussLegendreIntegrator, IntegrationSettings, ParamBinding, QuadIntegrator,
)
from nu_xsec.numerical.range import Range1D


class Polynomial2D(ScalarFunction):
    """f(u, v) = u^2 v"""
    def __init__(self):
        super().__init__(dimensionality=2)

    def _evaluate(self, x):
        return x[0] ** 2 * x[1]


class Sine(ScalarFunction):
    def __init__(self):
        super().__init__(dimensionality=1)

    def _evaluate(self, x):
        return math.sin(x[0])


integrators = [
    QuadIntegrator(IntegrationSettings(epsrel=1e-8)),
    GaussLegendreIntegrator(IntegrationSettings(n_points=20)),
]


def test_range():
    r = Range1D(1.0, 3.0)
    assert r.width == 2.0
    assert r.contains(1.0) and r.contains(3.0) and not r.contains(3.1)
    assert Range1D(2.0, 2.0).is_degenerate
    assert r.intersect(Range1D(2.0, 5.0)) == Range1D(2.0, 3.0)
    assert r.intersect(Range1D(4.0, 5.0)) is None
    assert r.intersect(None) is r
    with pytest.raises(ValueError):
        Range1D(1.0, 0.0)


def test_dimensionality_mismatch():
    f = Polynomial2D()
    assert f.dimensionality == 2
    assert f([2.0, 3.0]) == 12.0
    with pytest.raises(ValueError):
        f([1.0])
    with pytest.raises(ValueError):
        Sine().evaluate((0.1, 0.2))


@pytest.mark.parametrize("integrator", integrators, ids=lambda i: type(i).__name__)
def test_analytic_integrals(integrator):
    print(f"{type(integrator).__name__}...")
    val = integrator.integrate(Sine(), [ParamBinding(0, "t", Range1D(0.0, math.pi))])
    assert np.isclose(val, 2.0, rtol=1e-8)

    # int_0^2 int_1^3 u^2 v dv du = (8/3) * 4
    bindings = [ParamBinding(1, "v", Range1D(1.0, 3.0)), ParamBinding(0, "u", Range1D(0.0, 2.0))]
    val = integrator.integrate(Polynomial2D(), bindings)
    assert np.isclose(val, 32.0 / 3.0, rtol=1e-8)


@pytest.mark.parametrize("integrator", integrators, ids=lambda i: type(i).__name__)
def test_degenerate_domain(integrator):
    bindings = [ParamBinding(0, "u", Range1D(1.0, 1.0)), ParamBinding(1, "v", Range1D(0.0, 1.0))]
    assert integrator.integrate(Polynomial2D(), bindings) == 0.0


def test_incomplete_bindings():
    integrator = QuadIntegrator()
    with pytest.raises(ValueError):
        integrator.integrate(Polynomial2D(), [ParamBinding(0, "u", Range1D(0.0, 1.0))])
    with pytest.raises(ValueError):
        integrator.integrate(Polynomial2D(), [
            ParamBinding(0, "u", Range1D(0.0, 1.0)),
            ParamBinding(0, "v", Range1D(0.0, 1.0)),
        ])


def test_nested_integration_reentrant():
    # the same integrator used from inside the function it integrates
    integrator = QuadIntegrator()

    class Outer(ScalarFunction):
        def __init__(self):
            super().__init__(dimensionality=1)

        def _evaluate(self, x):
            a = x[0]
            return integrator.integrate(Sine(), [ParamBinding(0, "t", Range1D(0.0, a))])

    # int_0^pi (1 - cos a) da = pi
    val = integrator.integrate(Outer(), [ParamBinding(0, "a", Range1D(0.0, math.pi))])
    assert np.isclose(val, math.pi, rtol=1e-7)
