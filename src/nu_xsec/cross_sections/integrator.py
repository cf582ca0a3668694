import logging
from dataclasses import dataclass
from typing import Optional

from nu_xsec.cross_sections.base import XSecModelBase
from nu_xsec.cross_sections import functions as xsec_functions
from nu_xsec.interaction.interaction import Interaction, ProcessType
from nu_xsec.interaction.kinematics import KineVar
from nu_xsec.interaction.phase_space import KPhaseSpace
from nu_xsec.numerical.integrators import IntegratorBase
from nu_xsec.numerical.range import Range1D
from nu_xsec.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KinematicCuts:
    """Optional acceptance cuts. None means no cut on that variable."""
    W: Optional[Range1D] = None
    Q2: Optional[Range1D] = None

    @property
    def any(self) -> bool:
        return self.W is not None or self.Q2 is not None


def _build_qel(model, interaction, cuts):
    if cuts.Q2 is not None:
        return xsec_functions.DXSec_DQ2_E_Q2Cuts(model, interaction, cuts.Q2)
    return xsec_functions.DXSec_DQ2_E(model, interaction)


def _build_res(model, interaction, cuts):
    if cuts.any:
        return xsec_functions.D2XSec_DWDQ2_E_WQ2Cuts(model, interaction, cuts.W, cuts.Q2)
    return xsec_functions.D2XSec_DWDQ2_E(model, interaction)


def _build_dis(model, interaction, cuts):
    if cuts.any:
        return xsec_functions.D2XSec_DxDy_E_WQ2Cuts(model, interaction, cuts.W, cuts.Q2)
    return xsec_functions.D2XSec_DxDy_E(model, interaction)


def _build_imd(model, interaction, cuts):
    return xsec_functions.DXSec_Dy_E(model, interaction)


_ADAPTER_BUILDERS = {
    ProcessType.QEL: _build_qel,
    ProcessType.RES: _build_res,
    ProcessType.DIS: _build_dis,
    ProcessType.IMD: _build_imd,
}


class XSecIntegrator:
    """
    Integrates a differential cross section model over the allowed phase space.

    The scalar function handed to the generic integrator is chosen from the
    process type, its integration ranges come from the phase space boundary
    calculator intersected with the configured cuts.
    """

    def __init__(self, integrator: IntegratorBase, phase_space: KPhaseSpace = None,
                 cuts: KinematicCuts = None):
        if integrator is None:
            raise ConfigurationError("XSecIntegrator needs a numerical integrator")
        self._integrator = integrator
        self._phase_space = phase_space if phase_space is not None else KPhaseSpace()
        self._cuts = cuts if cuts is not None else KinematicCuts()

    @property
    def integrator(self):
        return self._integrator

    @property
    def cuts(self):
        return self._cuts

    def integrate(self, model: XSecModelBase, interaction: Interaction) -> float:
        """Total cross section of `interaction` (within cuts) at its probe energy."""
        self._check_model(model)
        try:
            builder = _ADAPTER_BUILDERS[interaction.process]
        except KeyError:
            raise ConfigurationError(f"No integration strategy for process {interaction.process}") from None

        func = builder(model, interaction, self._cuts)
        logger.debug("Integrating %s with %s", type(model).__name__, type(func).__name__)

        ranges = self._ranges(func, interaction)
        if ranges is None:
            return 0.0

        xsec = self._run(func, ranges, interaction)
        logger.info(
            "XSec[%s, E = %g GeV] = %g GeV^-2",
            interaction.process.name, interaction.probe_energy, xsec,
        )
        return xsec

    # ---------- partial cross sections ----------
    def dxsec_dx(self, model, interaction, x):
        """dxsec/dx at fixed x, integrating d2xsec/dxdy over y."""
        self._check_model(model)
        func = xsec_functions.D2XSec_DxDy_Ex(model, interaction, x, self._cuts.W, self._cuts.Q2)
        return self._integrate_slice(func, interaction)

    def dxsec_dy(self, model, interaction, y):
        """dxsec/dy at fixed y, integrating d2xsec/dxdy over x."""
        self._check_model(model)
        func = xsec_functions.D2XSec_DxDy_Ey(model, interaction, y, self._cuts.W, self._cuts.Q2)
        return self._integrate_slice(func, interaction)

    def dxsec_dW(self, model, interaction, W):
        """dxsec/dW at fixed W, integrating d2xsec/dWdQ2 over Q2."""
        self._check_model(model)
        if self._cuts.W is not None and not self._cuts.W.contains(W):
            return 0.0
        func = xsec_functions.D2XSec_DWDQ2_EW(model, interaction, W, self._cuts.W, self._cuts.Q2)
        q2_range = self._phase_space.q2_limits_at_w(interaction, W)
        if q2_range is None:
            return 0.0
        q2_range = q2_range.intersect(self._cuts.Q2)
        if q2_range is None or q2_range.is_degenerate:
            return 0.0
        return self._run(func, {"Q2": q2_range}, interaction)

    def dxsec_dQ2(self, model, interaction, Q2):
        """dxsec/dQ2 at fixed Q2, integrating d2xsec/dWdQ2 over W."""
        self._check_model(model)
        if self._cuts.Q2 is not None and not self._cuts.Q2.contains(Q2):
            return 0.0
        func = xsec_functions.D2XSec_DWDQ2_EQ2(model, interaction, Q2, self._cuts.W, self._cuts.Q2)
        return self._integrate_slice(func, interaction)

    # ---------- internals ----------
    def _integrate_slice(self, func, interaction):
        ranges = self._ranges(func, interaction)
        if ranges is None:
            return 0.0
        return self._run(func, ranges, interaction)

    def _ranges(self, func, interaction):
        """Integration ranges of the free variables, or None when the cuts leave nothing."""
        ranges = {}
        for name in func.free_variables:
            r = self._limits(name, interaction)
            if r is None or r.is_degenerate:
                logger.debug("Empty or degenerate %s range, cross section is 0", name)
                return None
            ranges[name] = r

        # a cut on a variable that is not integrated over may still exclude its whole range
        held = [name for name in func.cut_variables if name not in ranges]
        if interaction.process == ProcessType.QEL and self._cuts.W is not None:
            # W = M throughout
            held.append("W")
        for name in held:
            if self._limits(name, interaction) is None:
                logger.debug("%s cuts exclude the allowed %s range, cross section is 0", name, name)
                return None
        return ranges

    def _run(self, func, ranges, interaction):
        bindings = func.param_bindings(ranges)
        with interaction.exclusive():
            xsec = self._integrator.integrate(func, bindings)
        return max(float(xsec), 0.0)

    def _limits(self, name, interaction) -> Optional[Range1D]:
        r = self._phase_space.limits(KineVar(name), interaction)
        if r is None:
            return None
        return r.intersect(self._cut(name))

    def _cut(self, name):
        if name == "W":
            return self._cuts.W
        if name == "Q2":
            return self._cuts.Q2
        return None

    @staticmethod
    def _check_model(model):
        if model is None:
            raise ConfigurationError("No cross section model given")
