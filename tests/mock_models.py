from nu_xsec.cross_sections.base import XSecModelBase
from nu_xsec.interaction.phase_space import KPhaseSpace


class SpyModel(XSecModelBase):
    """Returns `value(kinematics)` and records every call."""

    def __init__(self, differential_variables=(), value=None):
        self.differential_variables = tuple(differential_variables)
        self._value = value if value is not None else (lambda kin: 1.0)
        self.calls = 0
        self.seen = []

    def evaluate_differential_xsec(self, interaction):
        self.calls += 1
        k = interaction.kinematics
        self.seen.append(k.snapshot())
        return self._value(k)


class XYPolynomialModel(XSecModelBase):
    """d2xsec/dxdy = x (1 - x) y, no kinematic checks."""
    differential_variables = ("x", "y")

    def evaluate_differential_xsec(self, interaction):
        k = interaction.kinematics
        return k.x * (1.0 - k.x) * k.y


class WQ2BoundaryModel(XSecModelBase):
    """
    d2xsec/dWdQ2 vanishing continuously on the boundary of the allowed (W, Q2) region:
        (W - Wmin)(Wmax - W)(Q2max(W) - Q2)(Q2 - Q2min(W))
    """
    differential_variables = ("W", "Q2")

    def __init__(self):
        self._phase_space = KPhaseSpace()

    def evaluate_differential_xsec(self, interaction):
        k = interaction.kinematics
        w_range = self._phase_space.w_limits(interaction)
        if w_range is None or k.W is None or not w_range.contains(k.W):
            return 0.0
        q2_range = self._phase_space.q2_limits_at_w(interaction, k.W)
        if q2_range is None or not q2_range.contains(k.Q2):
            return 0.0
        return (k.W - w_range.min) * (w_range.max - k.W) * (q2_range.max - k.Q2) * (k.Q2 - q2_range.min)
