import logging
import math
from typing import Optional

from nu_xsec.interaction.interaction import Interaction, ProcessType
from nu_xsec.interaction.kinematics import KineVar
from nu_xsec.numerical.range import Range1D
from nu_xsec.utils import constants

logger = logging.getLogger(__name__)


class KPhaseSpace:
    """
    Kinematically allowed ranges of x, y, Q2 and W for a given initial state.

    The ranges are the bounding box of the allowed region: the cross section
    models still reject points that fall outside the true boundary. None is
    returned when nothing is allowed (e.g. below threshold).
    """

    def limits(self, var: KineVar, interaction: Interaction) -> Optional[Range1D]:
        process = interaction.process
        if process == ProcessType.IMD:
            return self._imd_limits(var, interaction)

        if var == KineVar.W:
            return self.w_limits(interaction)
        if var == KineVar.Q2:
            return self.q2_limits(interaction)
        if var == KineVar.X:
            return self.x_limits(interaction)
        if var == KineVar.Y:
            return self.y_limits(interaction)
        raise ValueError(f"Unknown kinematic variable {var}")

    # ---------- hadronic processes ----------
    def w_limits(self, interaction):
        M = interaction.target.hit_nucleon_mass
        if interaction.process == ProcessType.QEL:
            return Range1D(M, M)

        s = self._s(interaction)
        w_min = M + constants.PION_MASS
        w_max = math.sqrt(s) - interaction.fsl_mass
        if w_max <= w_min:
            logger.debug("No W phase space: W in [%g, %g]", w_min, w_max)
            return None
        return Range1D(w_min, w_max)

    def q2_limits_at_w(self, interaction, W):
        M = interaction.target.hit_nucleon_mass
        ml2 = interaction.fsl_mass ** 2
        s = self._s(interaction)

        auxC = 0.5 * (s - M * M) / s
        aux1 = s + ml2 - W * W
        aux2 = aux1 * aux1 - 4.0 * s * ml2
        if aux1 < 0 or aux2 < 0:
            return None
        aux2 = math.sqrt(aux2)

        q2_min = max(0.0, -ml2 + auxC * (aux1 - aux2))
        q2_max = -ml2 + auxC * (aux1 + aux2)
        if q2_max < q2_min:
            return None
        return Range1D(q2_min, q2_max)

    def q2_limits(self, interaction):
        w_range = self.w_limits(interaction)
        if w_range is None:
            return None
        # the Q2 range is widest at the lowest W
        return self.q2_limits_at_w(interaction, w_range.min)

    def x_limits(self, interaction):
        M = interaction.target.hit_nucleon_mass
        if interaction.process == ProcessType.QEL:
            return Range1D(1.0, 1.0)
        s = self._s(interaction)
        x_min = interaction.fsl_mass ** 2 / (s - M * M)
        if x_min >= 1.0:
            return None
        return Range1D(x_min, 1.0)

    def y_limits(self, interaction):
        M = interaction.target.hit_nucleon_mass
        E = interaction.probe_energy
        w_range = self.w_limits(interaction)
        if w_range is None:
            return None
        y_min = (w_range.min ** 2 - M * M) / (2.0 * M * E)
        y_max = 1.0 - interaction.fsl_mass / E
        if y_max <= y_min:
            return None
        return Range1D(max(y_min, 0.0), y_max)

    # ---------- inverse muon decay ----------
    def _imd_limits(self, var, interaction):
        if var != KineVar.Y:
            raise ValueError(f"Inverse muon decay is parametrized in y only, not {var.value}")
        E = interaction.probe_energy
        me, me2 = constants.ELECTRON_MASS, constants.ELECTRON_MASS_2
        s = me2 + 2.0 * me * E
        if s < constants.MUON_MASS_2:
            logger.debug("E = %g GeV below the inverse muon decay threshold", E)
            return None
        y_max = 1.0 - (constants.MUON_MASS_2 - me2) / (2.0 * me * E)
        return Range1D(0.0, y_max)

    @staticmethod
    def _s(interaction):
        M = interaction.target.hit_nucleon_mass
        return M * M + 2.0 * M * interaction.probe_energy
