"""
Cross section models exported as scalar functions for the numerical integrators.

Each class binds a model and an interaction and projects the differential
cross section onto a subset of free kinematic variables, the others being
held fixed (the probe energy always is). The input vector is decoded in the
order of `free_variables`, written into the interaction's kinematic record,
and the model is called. When the model's own variables differ from the
density variables of the function, the (x,y) <-> (W,Q2) Jacobian is applied.

These objects are meant to live for one integration call.
"""
from abc import abstractmethod
from typing import Optional

from nu_xsec.cross_sections.base import XSecModelBase
from nu_xsec.interaction.interaction import Interaction
from nu_xsec.interaction.kinematics import jacobian_for
from nu_xsec.numerical.functions import ScalarFunction
from nu_xsec.numerical.integrators import ParamBinding
from nu_xsec.numerical.range import Range1D
from nu_xsec.utils.errors import ConfigurationError


class XSecFunction(ScalarFunction):
    free_variables: tuple = ()
    density_variables: tuple = ()

    def __init__(self, model: XSecModelBase, interaction: Interaction):
        super().__init__(dimensionality=len(self.free_variables))
        if model is None:
            raise ConfigurationError(f"{type(self).__name__}: no cross section model given")
        if interaction is None:
            raise ConfigurationError(f"{type(self).__name__}: no interaction given")
        self._model = model
        self._interaction = interaction

        # models that do not declare their variables are taken as native to this function
        model_variables = tuple(model.differential_variables) or self.density_variables
        self._jacobian = jacobian_for(model_variables, self.density_variables)
        self._transformed = model_variables != self.density_variables

    @property
    def model(self):
        return self._model

    @property
    def interaction(self):
        return self._interaction

    def param_bindings(self, ranges: dict) -> list:
        """Bindings for an integrator, `ranges` mapping free variable names to Range1D."""
        return [ParamBinding(i, name, ranges[name]) for i, name in enumerate(self.free_variables)]

    def _evaluate(self, params):
        E = self._interaction.probe_energy
        M = self._interaction.target.hit_nucleon_mass
        kinematics = self._interaction.kinematics

        self._set_kinematics(params, E, M)

        if not self._accept(kinematics):
            return 0.0

        jacobian = 1.0
        if self._transformed:
            jacobian = self._jacobian(kinematics, E, M)
            if jacobian <= 0:
                return 0.0

        return self._model.evaluate_differential_xsec(self._interaction) * jacobian

    @abstractmethod
    def _set_kinematics(self, params, E, M):
        """Write the free variables `params` (and any fixed ones) into the kinematic record."""
        ...

    # no cuts by default
    @property
    def cut_variables(self) -> tuple:
        return ()

    def _accept(self, kinematics) -> bool:
        return True


class _WQ2Cuts:
    """Acceptance cuts on W and Q2. A missing range does not cut."""

    def _init_cuts(self, W_cuts: Optional[Range1D], Q2_cuts: Optional[Range1D]):
        self._W_cuts = W_cuts
        self._Q2_cuts = Q2_cuts

    @property
    def W_cuts(self):
        return self._W_cuts

    @property
    def Q2_cuts(self):
        return self._Q2_cuts

    @property
    def cut_variables(self):
        return tuple(name for name, cut in (("W", self._W_cuts), ("Q2", self._Q2_cuts)) if cut is not None)

    def _accept(self, kinematics):
        if self._W_cuts is not None and not self._W_cuts.contains(kinematics.W):
            return False
        if self._Q2_cuts is not None and not self._Q2_cuts.contains(kinematics.Q2):
            return False
        return True


# ---------------------------------------------------------------------------
class D2XSec_DxDy_E(XSecFunction):
    """d2xsec/dxdy = f(x,y) at fixed E."""
    free_variables = ("x", "y")
    density_variables = ("x", "y")

    def _set_kinematics(self, params, E, M):
        self._interaction.kinematics.set_xy(params[0], params[1], E, M)


class D2XSec_DxDy_E_WQ2Cuts(_WQ2Cuts, D2XSec_DxDy_E):
    """d2xsec/dxdy = f(x,y) at fixed E, zero outside the W and Q2 cuts."""

    def __init__(self, model, interaction, W_cuts: Optional[Range1D], Q2_cuts: Optional[Range1D]):
        super().__init__(model, interaction)
        self._init_cuts(W_cuts, Q2_cuts)


class DXSec_DQ2_E(XSecFunction):
    """dxsec/dQ2 = f(Q2) at fixed E."""
    free_variables = ("Q2",)
    density_variables = ("Q2",)

    def _set_kinematics(self, params, E, M):
        self._interaction.kinematics.Q2 = params[0]


class DXSec_DQ2_E_Q2Cuts(_WQ2Cuts, DXSec_DQ2_E):
    """dxsec/dQ2 = f(Q2) at fixed E, zero outside the Q2 cut."""

    def __init__(self, model, interaction, Q2_cuts: Optional[Range1D]):
        super().__init__(model, interaction)
        self._init_cuts(None, Q2_cuts)


class D2XSec_DWDQ2_E(XSecFunction):
    """d2xsec/dWdQ2 = f(W,Q2) at fixed E."""
    free_variables = ("W", "Q2")
    density_variables = ("W", "Q2")

    def _set_kinematics(self, params, E, M):
        self._interaction.kinematics.set_wq2(params[0], params[1], E, M)


class D2XSec_DWDQ2_E_WQ2Cuts(_WQ2Cuts, D2XSec_DWDQ2_E):
    """d2xsec/dWdQ2 = f(W,Q2) at fixed E, zero outside the W and Q2 cuts."""

    def __init__(self, model, interaction, W_cuts: Optional[Range1D], Q2_cuts: Optional[Range1D]):
        super().__init__(model, interaction)
        self._init_cuts(W_cuts, Q2_cuts)


class DXSec_Dy_E(XSecFunction):
    """dxsec/dy = f(y) at fixed E."""
    free_variables = ("y",)
    density_variables = ("y",)

    def _set_kinematics(self, params, E, M):
        self._interaction.kinematics.y = params[0]


class D2XSec_DxDy_Ex(_WQ2Cuts, XSecFunction):
    """d2xsec/dxdy = f(y) at fixed E and x, optionally zero outside W and Q2 cuts."""
    free_variables = ("y",)
    density_variables = ("x", "y")

    def __init__(self, model, interaction, x: float,
                 W_cuts: Optional[Range1D] = None, Q2_cuts: Optional[Range1D] = None):
        super().__init__(model, interaction)
        self._init_cuts(W_cuts, Q2_cuts)
        self._x = x

    def _set_kinematics(self, params, E, M):
        self._interaction.kinematics.set_xy(self._x, params[0], E, M)


class D2XSec_DxDy_Ey(_WQ2Cuts, XSecFunction):
    """d2xsec/dxdy = f(x) at fixed E and y, optionally zero outside W and Q2 cuts."""
    free_variables = ("x",)
    density_variables = ("x", "y")

    def __init__(self, model, interaction, y: float,
                 W_cuts: Optional[Range1D] = None, Q2_cuts: Optional[Range1D] = None):
        super().__init__(model, interaction)
        self._init_cuts(W_cuts, Q2_cuts)
        self._y = y

    def _set_kinematics(self, params, E, M):
        self._interaction.kinematics.set_xy(params[0], self._y, E, M)


class D2XSec_DWDQ2_EW(_WQ2Cuts, XSecFunction):
    """d2xsec/dWdQ2 = f(Q2) at fixed E and W, optionally zero outside W and Q2 cuts."""
    free_variables = ("Q2",)
    density_variables = ("W", "Q2")

    def __init__(self, model, interaction, W: float,
                 W_cuts: Optional[Range1D] = None, Q2_cuts: Optional[Range1D] = None):
        super().__init__(model, interaction)
        self._init_cuts(W_cuts, Q2_cuts)
        self._W = W

    def _set_kinematics(self, params, E, M):
        self._interaction.kinematics.set_wq2(self._W, params[0], E, M)


class D2XSec_DWDQ2_EQ2(_WQ2Cuts, XSecFunction):
    """d2xsec/dWdQ2 = f(W) at fixed E and Q2, optionally zero outside W and Q2 cuts."""
    free_variables = ("W",)
    density_variables = ("W", "Q2")

    def __init__(self, model, interaction, Q2: float,
                 W_cuts: Optional[Range1D] = None, Q2_cuts: Optional[Range1D] = None):
        super().__init__(model, interaction)
        self._init_cuts(W_cuts, Q2_cuts)
        self._Q2 = Q2

    def _set_kinematics(self, params, E, M):
        self._interaction.kinematics.set_wq2(params[0], self._Q2, E, M)
