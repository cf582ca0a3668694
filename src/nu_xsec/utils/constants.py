import math

# all values in GeV
GF = 1.16639e-5             # Fermi constant [GeV^-2]
GF_2 = GF ** 2
ALPHA_EM = 1.0 / 137.03599976

ELECTRON_MASS = 0.000510998918
ELECTRON_MASS_2 = ELECTRON_MASS ** 2
MUON_MASS = 0.105658357
MUON_MASS_2 = MUON_MASS ** 2
TAU_MASS = 1.77699

PROTON_MASS = 0.93827203
NEUTRON_MASS = 0.93956536
NUCLEON_MASS = 0.5 * (PROTON_MASS + NEUTRON_MASS)
PION_MASS = 0.13957018

PI = math.pi
