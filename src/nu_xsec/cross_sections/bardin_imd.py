"""
Inverse muon decay (nu_mu + e- -> mu- + nu_e) differential cross section dxsec/dy
with all 1-loop radiative corrections, after

    D.Yu.Bardin and V.A.Dokuchaeva, Nucl.Phys.B287:839 (1987)

This is the truly inclusive cross section: the bremsstrahlung part above a
photon energy threshold is not subtracted, so it does not suit setups with
a photon trigger threshold.
"""
import logging
import math

from nu_xsec.cross_sections.base import XSecModelBase
from nu_xsec.interaction.interaction import Interaction, InteractionFlag, ProcessType
from nu_xsec.numerical.functions import ScalarFunction
from nu_xsec.numerical.integrators import IntegratorBase, ParamBinding
from nu_xsec.numerical.range import Range1D
from nu_xsec.utils import constants
from nu_xsec.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

# keeps y_max off 1 where log(1-y) diverges
Y_MAX_EPSILON = 1e-5

# keeps the main dilogarithm window off t = 0 where log(1 - z t)/t is 0/0
DILOG_EPSILON = 1e-2


class DilogarithmIntegrand(ScalarFunction):
    """log(1 - z t) / t as a function of t."""

    def __init__(self, z: float):
        super().__init__(dimensionality=1)
        self._z = z

    def _evaluate(self, params):
        t = params[0]
        if t == 0:
            return -self._z
        if t * self._z >= 1.0:
            return 0.0
        return math.log(1.0 - self._z * t) / t


def dilogarithm(z: float, integrator: IntegratorBase) -> float:
    """
    Li2(z) = -int_0^1 log(1 - z t)/t dt, by numerical integration.

    The bulk is integrated over [eps, 1 - eps]; the two end slices are
    integrated separately with the same integrand so the result holds to
    the integrator precision.
    """
    func = DilogarithmIntegrand(z)
    eps = DILOG_EPSILON

    window = integrator.integrate(func, [ParamBinding(0, "t", Range1D(eps, 1.0 - eps))])
    head = integrator.integrate(func, [ParamBinding(0, "t", Range1D(0.0, eps))])
    tail = integrator.integrate(func, [ParamBinding(0, "t", Range1D(1.0 - eps, 1.0))])

    li2 = -(head + window + tail)
    logger.debug("Li2(z = %g) = %g", z, li2)
    return li2


# coeff(i, k, r): coefficient of y^k in the polynomial poly(i, r, y), k = -3..2
_COEFFS = {
    1: {
        -3: lambda r: -0.19444444 * r ** 3,
        -2: lambda r: (0.083333333 + 0.29166667 * r) * r ** 2,
        -1: lambda r: -0.58333333 * r - 0.5 * r ** 2 - r ** 3 / 6.0,
        0: lambda r: -1.30555560 + 3.125 * r + 0.375 * r ** 2,
        1: lambda r: -0.91666667 - 0.25 * r,
        2: lambda r: 0.041666667,
    },
    2: {
        -3: lambda r: 0.0,
        -2: lambda r: 0.5 * r ** 2,
        -1: lambda r: 0.5 * r - 2.0 * r ** 2,
        0: lambda r: 0.25 - 0.75 * r + 1.5 * r ** 2,
        1: lambda r: 0.5,
        2: lambda r: 0.0,
    },
    3: {
        -3: lambda r: 0.16666667 * r ** 3,
        -2: lambda r: 0.25 * r ** 2 * (1.0 - r),
        -1: lambda r: r - 0.5 * r ** 2,
        0: lambda r: 0.66666667,
        1: lambda r: 0.0,
        2: lambda r: 0.0,
    },
    4: {
        -3: lambda r: 0.0,
        -2: lambda r: r ** 2,
        -1: lambda r: r * (1.0 - 4.0 * r),
        0: lambda r: 1.5 * r ** 2,
        1: lambda r: 1.0,
        2: lambda r: 0.0,
    },
    5: {
        -3: lambda r: 0.16666667 * r ** 3,
        -2: lambda r: -0.25 * r ** 2 * (1.0 + r),
        -1: lambda r: 0.5 * r * (1.0 + 3.0 * r),
        0: lambda r: -1.9166667 + 2.25 * r - 1.5 * r ** 2,
        1: lambda r: -0.5,
        2: lambda r: 0.0,
    },
    6: {
        -3: lambda r: 0.0,
        -2: lambda r: 0.16666667 * r ** 2,
        -1: lambda r: -0.25 * r * (r + 0.33333333),
        0: lambda r: 1.25 * (r + 0.33333333),
        1: lambda r: 0.5,
        2: lambda r: 0.0,
    },
}


class BardinIMDRadCorPXSec(XSecModelBase):
    """
    dxsec/dy for inverse muon decay including 1-loop radiative corrections.

    y is the inelasticity (Ev - El)/Ev. The result is per target electron when
    ASSUME_FREE_NUCLEON is set, otherwise it is multiplied by the target Z.
    """
    differential_variables = ("y",)

    def __init__(self, integrator: IntegratorBase):
        if integrator is None:
            raise ConfigurationError("BardinIMDRadCorPXSec needs an integrator for Li2")
        self._integrator = integrator

    @property
    def integrator(self):
        return self._integrator

    def evaluate_differential_xsec(self, interaction: Interaction) -> float:
        if not self.valid_process(interaction):
            return 0.0
        if not self.valid_kinematics(interaction):
            return 0.0

        E = interaction.probe_energy
        me = constants.ELECTRON_MASS
        sig0 = constants.GF_2 * me * E / constants.PI
        re = 0.5 * me / E
        r = (constants.MUON_MASS_2 / constants.ELECTRON_MASS_2) * re

        # Bardin's y is El/Ev
        y = 1.0 - interaction.kinematics.y

        y_min, y_max = self.y_limits(re, r)

        logger.debug("sig0 = %g, r = %g, re = %g", sig0, r, re)
        logger.debug("allowed y: [%g, %g]", y_min, y_max)

        if y < y_min or y > y_max:
            return 0.0

        dsig_dy = 2.0 * sig0 * (1.0 - r + (constants.ALPHA_EM / constants.PI) * self.fa(re, r, y))

        logger.debug("dxsec[1-loop]/dy (Ev = %g, y = %g) = %g", E, y, dsig_dy)

        if interaction.test_flag(InteractionFlag.ASSUME_FREE_NUCLEON):
            return dsig_dy

        # number of scattering centers
        return dsig_dy * interaction.target.Z

    @staticmethod
    def y_limits(re, r):
        """Allowed range of El/Ev."""
        y_min = r + re
        y_max = 1.0 + re + r * re / (1.0 + re)
        return y_min, min(y_max, 1.0 - Y_MAX_EPSILON)

    def _check_process(self, interaction):
        return interaction.process == ProcessType.IMD

    def _check_kinematics(self, interaction):
        E = interaction.probe_energy
        s = constants.ELECTRON_MASS_2 + 2.0 * constants.ELECTRON_MASS * E
        if s < constants.MUON_MASS_2:
            logger.info(
                "Ev = %g (s = %g) is below threshold (s-min = %g) for IMD",
                E, s, constants.MUON_MASS_2,
            )
            return False
        return True

    def fa(self, re, r, y):
        y2 = y * y
        rre = r * re
        r_y = r / y
        y_r = y / r
        log = math.log
        li2 = self.li2

        fa = (1 - r) * (log(y2 / rre) * log(1 - r_y)
                        + log(y_r) * log(1 - y)
                        - li2(r)
                        + li2(y)
                        + li2((r - y) / (1 - y))
                        + 1.5 * (1 - r) * log(1 - r))

        fa += 0.5 * (1 + 3 * r) * (li2((1 - r_y) / (1 - r))
                                   - li2((y - r) / (1 - r))
                                   - log(y_r) * log((y - r) / (1 - r)))

        fa += (self.poly(1, r, y)
               - self.poly(2, r, y) * log(r)
               - self.poly(3, r, y) * log(re)
               + self.poly(4, r, y) * log(y)
               + self.poly(5, r, y) * log(1 - y)
               + self.poly(6, r, y) * (1 - r_y) * log(1 - r_y))
        return fa

    @staticmethod
    def poly(i, r, y):
        return sum(BardinIMDRadCorPXSec.coeff(i, k, r) * y ** k for k in range(-3, 3))

    @staticmethod
    def coeff(i, k, r):
        try:
            return _COEFFS[i][k](r)
        except KeyError:
            return 0.0

    def li2(self, z):
        return dilogarithm(z, self._integrator)
