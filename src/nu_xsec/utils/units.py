# natural units: energies in GeV, cross sections in GeV^-2

# (hbar c)^2 in GeV^2 cm^2
GEV2_TO_CM2 = 0.389379e-27
CM2_TO_GEV2 = 1.0 / GEV2_TO_CM2

# 1e-38 cm^2, the customary neutrino cross section unit
XSEC_UNIT_1E38_CM2 = 1e-38 * CM2_TO_GEV2


def to_cm2(xsec_gev2):
    """Convert a cross section from GeV^-2 to cm^2."""
    return xsec_gev2 * GEV2_TO_CM2
