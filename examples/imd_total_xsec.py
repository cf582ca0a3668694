import logging

import numpy as np
from tqdm import tqdm
import matplotlib.pyplot as plt

from nu_xsec.cross_sections.bardin_imd import BardinIMDRadCorPXSec, Y_MAX_EPSILON
from nu_xsec.cross_sections.integrator import XSecIntegrator
from nu_xsec.interaction.interaction import Interaction
from nu_xsec.numerical.integrators import IntegrationSettings, QuadIntegrator
from nu_xsec.utils import constants, pdg
from nu_xsec.utils.units import XSEC_UNIT_1E38_CM2

logging.basicConfig(level=logging.WARNING)

# Li2 needs a tighter tolerance than the outer y integral
model = BardinIMDRadCorPXSec(integrator=QuadIntegrator(IntegrationSettings(epsrel=1e-7)))
xsec_integrator = XSecIntegrator(QuadIntegrator(IntegrationSettings(epsrel=1e-4)))

# IMD on iron: 26 electrons per atom
target = pdg.TGT_FE56
n_electrons = pdg.ion_Z(target)

E_list = np.linspace(11.0, 100.0, 40)
xsec = np.zeros_like(E_list)
xsec_born = np.zeros_like(E_list)

for i, E in tqdm(enumerate(E_list), total=len(E_list)):
    interaction = Interaction.imd(target, E=E)
    xsec[i] = xsec_integrator.integrate(model, interaction) / XSEC_UNIT_1E38_CM2

    # tree level: flat in El/Ev over the same window
    re = 0.5 * constants.ELECTRON_MASS / E
    r = (constants.MUON_MASS_2 / constants.ELECTRON_MASS_2) * re
    sig0 = constants.GF_2 * constants.ELECTRON_MASS * E / constants.PI
    born = 2.0 * sig0 * (1.0 - r) * ((1.0 - Y_MAX_EPSILON) - (r + re))
    xsec_born[i] = n_electrons * born / XSEC_UNIT_1E38_CM2

print(f"xsec(E = {E_list[-1]:.0f} GeV) = {xsec[-1]:.4e} x 1e-38 cm^2 (Born: {xsec_born[-1]:.4e})")

fig, (ax0, ax1) = plt.subplots(2, 1, figsize=(6.5, 6.0), sharex=True)
ax0.plot(E_list, xsec / E_list, lw=2, label="1-loop")
ax0.plot(E_list, xsec_born / E_list, "--", lw=1.5, label="Born")
ax0.set_ylabel(r"$\sigma / E_\nu$ [$10^{-38}$ cm$^2$/GeV]")
ax0.set_title(r"$\nu_\mu e^- \to \mu^- \nu_e$ on Fe56")
ax0.legend(frameon=False)
ax0.grid(True, alpha=0.3)

ax1.plot(E_list, xsec / xsec_born, lw=2)
ax1.set_xlabel(r"$E_\nu$ [GeV]")
ax1.set_ylabel("1-loop / Born")
ax1.grid(True, alpha=0.3)

plt.tight_layout()
plt.show()
