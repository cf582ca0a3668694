import numpy as np
import matplotlib.pyplot as plt

from nu_xsec.cross_sections.bardin_imd import BardinIMDRadCorPXSec
from nu_xsec.interaction.interaction import Interaction, InteractionFlag
from nu_xsec.interaction.kinematics import KineVar
from nu_xsec.interaction.phase_space import KPhaseSpace
from nu_xsec.numerical.integrators import GaussLegendreIntegrator, IntegrationSettings
from nu_xsec.utils import constants, pdg

E = 30.0  # GeV

model = BardinIMDRadCorPXSec(integrator=GaussLegendreIntegrator(IntegrationSettings(n_points=60)))

interaction = Interaction.imd(pdg.TGT_FREE_PROTON, E=E)
interaction.set_flag(InteractionFlag.ASSUME_FREE_NUCLEON)
interaction.summary()

y_range = KPhaseSpace().limits(KineVar.Y, interaction)
print(f"y in {y_range}")

y_list = np.linspace(y_range.min, y_range.max, 200)
dxsec = np.zeros_like(y_list)
for i, y in enumerate(y_list):
    interaction.kinematics.y = y
    dxsec[i] = model.evaluate_differential_xsec(interaction)

# tree level, flat in y
re = 0.5 * constants.ELECTRON_MASS / E
r = (constants.MUON_MASS_2 / constants.ELECTRON_MASS_2) * re
born = 2.0 * constants.GF_2 * constants.ELECTRON_MASS * E / constants.PI * (1.0 - r)

plt.figure(figsize=(6.5, 4.0))
plt.plot(y_list, dxsec / born, lw=2, label="1-loop / Born")
plt.axhline(1.0, ls="--", lw=1, color="k")
plt.xlabel(r"$y = (E_\nu - E_\mu)/E_\nu$")
plt.ylabel(r"$d\sigma/dy$ ratio")
plt.title(rf"IMD radiative corrections, $E_\nu$ = {E:.0f} GeV")
plt.grid(True, alpha=0.3)
plt.legend(frameon=False)
plt.tight_layout()
plt.show()
