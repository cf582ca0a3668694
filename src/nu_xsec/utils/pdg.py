from nu_xsec.utils import constants

ELECTRON = 11
MUON = 13
TAU = 15
NU_E = 12
NU_MU = 14
NU_TAU = 16
NU_E_BAR = -12
NU_MU_BAR = -14
NU_TAU_BAR = -16

PROTON = 2212
NEUTRON = 2112

# ion codes follow the 10LZZZAAAI convention
TGT_FREE_PROTON = 1000010010
TGT_FE56 = 1000260560

_MASSES = {
    ELECTRON: constants.ELECTRON_MASS,
    MUON: constants.MUON_MASS,
    TAU: constants.TAU_MASS,
    PROTON: constants.PROTON_MASS,
    NEUTRON: constants.NEUTRON_MASS,
}


def is_neutrino(pdg: int) -> bool:
    return abs(pdg) in (NU_E, NU_MU, NU_TAU)


def charged_lepton_partner(pdg: int) -> int:
    """Charged lepton produced by a charged-current interaction of neutrino `pdg`."""
    if not is_neutrino(pdg):
        raise ValueError(f"{pdg} is not a neutrino code")
    lepton = abs(pdg) - 1
    # neutrinos produce negative leptons (positive codes), antineutrinos positive ones
    return lepton if pdg > 0 else -lepton


def mass(pdg: int) -> float:
    if is_neutrino(pdg):
        return 0.0
    try:
        return _MASSES[abs(pdg)]
    except KeyError:
        raise KeyError(f"no mass known for pdg code {pdg}") from None


def ion_code(Z: int, A: int) -> int:
    return 1000000000 + Z * 10000 + A * 10


def ion_Z(code: int) -> int:
    return (code // 10000) % 1000


def ion_A(code: int) -> int:
    return (code // 10) % 1000
