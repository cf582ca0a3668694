from nu_xsec.interaction.interaction import Interaction
from nu_xsec.interaction.kinematics import KineVar
from nu_xsec.interaction.phase_space import KPhaseSpace
from nu_xsec.utils import pdg

# nu_mu CC on iron, struck proton, 3 GeV
tgt, hit_nucleon, neutrino, Ev = pdg.TGT_FE56, pdg.PROTON, pdg.NU_MU, 3.0

interactions = [
    Interaction.qel_cc(tgt, hit_nucleon, neutrino, Ev),
    Interaction.res_cc(tgt, hit_nucleon, neutrino, Ev),
    Interaction.dis_cc(tgt, hit_nucleon, neutrino, Ev),
]

phase_space = KPhaseSpace()

for interaction in interactions:
    interaction.summary()
    for var in KineVar:
        print(f"  {var.value:>2} in {phase_space.limits(var, interaction)}")
    print()

imd = Interaction.imd(tgt, 20.0)
imd.summary()
print(f"   y in {phase_space.limits(KineVar.Y, imd)}")
