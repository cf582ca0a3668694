import numpy as np
import pytest

from nu_xsec.interaction.interaction import Interaction, InteractionFlag, ProcessType, Target
from nu_xsec.interaction.kinematics import KineVar, jacobian_for, wq2_to_xy, xy_to_wq2
from nu_xsec.interaction.phase_space import KPhaseSpace
from nu_xsec.utils import constants, pdg
from nu_xsec.utils.errors import ConfigurationError, InteractionInUseError
from nu_xsec.utils.units import GEV2_TO_CM2, to_cm2

# QEL, RES and DIS nu_mu CC on iron at 3 GeV
tgt, hit_nucleon, neutrino, Ev = pdg.TGT_FE56, pdg.PROTON, pdg.NU_MU, 3.0
qelcc = Interaction.qel_cc(tgt, hit_nucleon, neutrino, Ev)
rescc = Interaction.res_cc(tgt, hit_nucleon, neutrino, Ev)
discc = Interaction.dis_cc(tgt, hit_nucleon, neutrino, Ev)
phase_space = KPhaseSpace()


def test_target():
    t = qelcc.target
    assert (t.Z, t.A, t.N) == (26, 56, 30)
    assert t.pdg == pdg.TGT_FE56
    assert t.hit_nucleon_mass == constants.PROTON_MASS
    assert Target(Z=1, A=1).hit_nucleon_mass == constants.NUCLEON_MASS


def test_lepton_masses():
    assert pdg.charged_lepton_partner(pdg.NU_MU) == pdg.MUON
    assert pdg.charged_lepton_partner(pdg.NU_E_BAR) == -pdg.ELECTRON
    assert pdg.charged_lepton_partner(pdg.NU_MU_BAR) == -pdg.MUON
    assert pdg.mass(pdg.charged_lepton_partner(pdg.NU_TAU_BAR)) == constants.TAU_MASS
    with pytest.raises(ValueError):
        pdg.charged_lepton_partner(pdg.PROTON)
    assert discc.fsl_mass == constants.MUON_MASS
    assert Interaction.imd(tgt, 20.0).fsl_mass == constants.MUON_MASS
    nc = discc.copy()
    nc.is_cc = False
    assert nc.fsl_mass == 0.0


def test_flags():
    interaction = discc.copy()
    assert not interaction.test_flag(InteractionFlag.ASSUME_FREE_NUCLEON)
    interaction.set_flag(InteractionFlag.ASSUME_FREE_NUCLEON)
    interaction.set_flag(InteractionFlag.SKIP_KINEMATIC_CHECK)
    assert interaction.test_flag(InteractionFlag.ASSUME_FREE_NUCLEON)
    interaction.set_flag(InteractionFlag.ASSUME_FREE_NUCLEON, on=False)
    assert not interaction.test_flag(InteractionFlag.ASSUME_FREE_NUCLEON)
    assert interaction.test_flag(InteractionFlag.SKIP_KINEMATIC_CHECK)
    # the copy source is untouched
    assert discc.flags == InteractionFlag.NONE


def test_kinematic_relations():
    M, E = constants.PROTON_MASS, Ev
    W, Q2 = xy_to_wq2(E, M, 0.3, 0.5)
    x, y = wq2_to_xy(E, M, W, Q2)
    assert np.isclose(x, 0.3) and np.isclose(y, 0.5)
    assert wq2_to_xy(E, M, 0.5, 0.0)[0] == -1.0

    k = discc.copy().kinematics
    k.set_xy(0.3, 0.5, E, M)
    assert np.isclose(k.W, W) and np.isclose(k.Q2, Q2)
    saved = k.snapshot()
    k.reset()
    assert k.x is None and k.W is None
    k.restore(saved)
    assert k.x == 0.3


def test_jacobian_table():
    assert jacobian_for(("y",), ("y",))(None, 1.0, 1.0) == 1.0
    with pytest.raises(ConfigurationError):
        jacobian_for(("y",), ("Q2",))


def test_exclusive_is_not_reentrant():
    interaction = rescc.copy()
    with interaction.exclusive():
        interaction.kinematics.W = 1.2
        with pytest.raises(InteractionInUseError):
            with interaction.exclusive():
                pass
    assert interaction.kinematics.W is None
    # released
    with interaction.exclusive():
        pass


def test_phase_space_limits():
    M = constants.PROTON_MASS
    for interaction in (qelcc, rescc, discc):
        interaction.summary()
        for var in KineVar:
            print(f"  {var.value} in {phase_space.limits(var, interaction)}")

    assert phase_space.limits(KineVar.W, qelcc).is_degenerate
    w = phase_space.limits(KineVar.W, rescc)
    assert np.isclose(w.min, M + constants.PION_MASS)
    assert np.isclose(w.max, np.sqrt(M * M + 2 * M * Ev) - constants.MUON_MASS)

    q2 = phase_space.limits(KineVar.Q2, discc)
    assert 0.0 <= q2.min < q2.max < 2 * M * Ev
    x = phase_space.limits(KineVar.X, discc)
    y = phase_space.limits(KineVar.Y, discc)
    assert 0.0 < x.min < x.max == 1.0
    assert 0.0 < y.min < y.max < 1.0


def test_imd_phase_space():
    assert phase_space.limits(KineVar.Y, Interaction.imd(tgt, 10.0)) is None
    y = phase_space.limits(KineVar.Y, Interaction.imd(tgt, 20.0))
    assert y.min == 0.0 and 0.0 < y.max < 1.0
    with pytest.raises(ValueError):
        phase_space.limits(KineVar.W, Interaction.imd(tgt, 20.0))


def test_units():
    assert np.isclose(to_cm2(1.0), GEV2_TO_CM2)
    assert ProcessType.IMD.name == "IMD"
