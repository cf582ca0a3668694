import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace, astuple
from enum import Enum, IntFlag
from typing import Optional

from nu_xsec.interaction.kinematics import xy_to_wq2, wq2_to_xy
from nu_xsec.utils import constants, pdg
from nu_xsec.utils.errors import InteractionInUseError


class ProcessType(Enum):
    QEL = "quasi-elastic"
    RES = "resonance"
    DIS = "deep-inelastic"
    IMD = "inverse-muon-decay"


class InteractionFlag(IntFlag):
    NONE = 0
    ASSUME_FREE_NUCLEON = 1
    SKIP_PROCESS_CHECK = 2
    SKIP_KINEMATIC_CHECK = 4


@dataclass
class Target:
    Z: int
    A: int
    hit_nucleon_pdg: Optional[int] = None   # None for scattering off atomic electrons

    @staticmethod
    def from_pdg(code: int, hit_nucleon_pdg: Optional[int] = None) -> "Target":
        return Target(Z=pdg.ion_Z(code), A=pdg.ion_A(code), hit_nucleon_pdg=hit_nucleon_pdg)

    @property
    def pdg(self) -> int:
        return pdg.ion_code(self.Z, self.A)

    @property
    def N(self) -> int:
        return self.A - self.Z

    @property
    def hit_nucleon_mass(self) -> float:
        if self.hit_nucleon_pdg is None:
            return constants.NUCLEON_MASS
        return pdg.mass(self.hit_nucleon_pdg)


@dataclass
class InitialState:
    probe_pdg: int
    probe_energy: float         # lab frame, GeV
    target: Target


@dataclass
class Kinematics:
    """Mutable kinematic record. Unset variables are None."""
    x: Optional[float] = None
    y: Optional[float] = None
    Q2: Optional[float] = None
    W: Optional[float] = None

    def set_xy(self, x, y, E, M):
        """Set (x, y) and keep (W, Q2) consistent with them."""
        self.x, self.y = x, y
        self.W, self.Q2 = xy_to_wq2(E, M, x, y)

    def set_wq2(self, W, Q2, E, M):
        """Set (W, Q2) and keep (x, y) consistent with them."""
        self.W, self.Q2 = W, Q2
        self.x, self.y = wq2_to_xy(E, M, W, Q2)

    def snapshot(self) -> tuple:
        return astuple(self)

    def restore(self, values: tuple):
        self.x, self.y, self.Q2, self.W = values

    def reset(self):
        self.restore((None, None, None, None))


@dataclass
class Interaction:
    """
    Scattering process description: initial state, process, kinematics and option flags.

    The kinematic record is used as scratch space by the cross section
    integration. Only one integration may use an instance at a time, see
    `exclusive()`.
    """
    initial_state: InitialState
    process: ProcessType
    is_cc: bool = True
    kinematics: Kinematics = field(default_factory=Kinematics)
    flags: InteractionFlag = InteractionFlag.NONE
    _guard: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    # ---------- factories ----------
    @staticmethod
    def qel_cc(target_pdg: int, hit_nucleon_pdg: int, probe_pdg: int, E: float) -> "Interaction":
        return Interaction._build(ProcessType.QEL, target_pdg, hit_nucleon_pdg, probe_pdg, E)

    @staticmethod
    def res_cc(target_pdg: int, hit_nucleon_pdg: int, probe_pdg: int, E: float) -> "Interaction":
        return Interaction._build(ProcessType.RES, target_pdg, hit_nucleon_pdg, probe_pdg, E)

    @staticmethod
    def dis_cc(target_pdg: int, hit_nucleon_pdg: int, probe_pdg: int, E: float) -> "Interaction":
        return Interaction._build(ProcessType.DIS, target_pdg, hit_nucleon_pdg, probe_pdg, E)

    @staticmethod
    def imd(target_pdg: int, E: float) -> "Interaction":
        """nu_mu + e- -> mu- + nu_e, scattering off the atomic electrons of the target."""
        return Interaction._build(ProcessType.IMD, target_pdg, None, pdg.NU_MU, E)

    @staticmethod
    def _build(process, target_pdg, hit_nucleon_pdg, probe_pdg, E):
        target = Target.from_pdg(target_pdg, hit_nucleon_pdg=hit_nucleon_pdg)
        init_state = InitialState(probe_pdg=probe_pdg, probe_energy=float(E), target=target)
        return Interaction(initial_state=init_state, process=process, is_cc=True)

    # ---------- accessors ----------
    @property
    def probe_energy(self) -> float:
        return self.initial_state.probe_energy

    @property
    def target(self) -> Target:
        return self.initial_state.target

    @property
    def fsl_mass(self) -> float:
        """Mass of the final state primary lepton."""
        if self.process == ProcessType.IMD:
            return constants.MUON_MASS
        if not self.is_cc:
            return 0.0
        return pdg.mass(pdg.charged_lepton_partner(self.initial_state.probe_pdg))

    def test_flag(self, flag: InteractionFlag) -> bool:
        return bool(self.flags & flag)

    def set_flag(self, flag: InteractionFlag, on: bool = True):
        if on:
            self.flags |= flag
        else:
            self.flags &= ~flag

    def copy(self) -> "Interaction":
        """Independent copy (own kinematics, own guard)."""
        target = replace(self.target)
        init_state = replace(self.initial_state, target=target)
        return Interaction(
            initial_state=init_state,
            process=self.process,
            is_cc=self.is_cc,
            kinematics=replace(self.kinematics),
            flags=self.flags,
        )

    @contextmanager
    def exclusive(self):
        """
        Borrow the interaction for one integration.

        Non-blocking and non-reentrant: a second borrow, from another thread or
        from inside the first one, raises InteractionInUseError. The kinematic
        record is restored on exit.
        """
        if not self._guard.acquire(blocking=False):
            raise InteractionInUseError(
                f"Interaction ({self.process.name}, E={self.probe_energy} GeV) is already in use"
            )
        saved = self.kinematics.snapshot()
        try:
            yield self
        finally:
            self.kinematics.restore(saved)
            self._guard.release()

    def summary(self):
        init = self.initial_state
        tgt = init.target
        print(f"{'CC' if self.is_cc else 'NC'} {self.process.value} interaction:")
        print(f"  probe = {init.probe_pdg}, E = {init.probe_energy:.4f} GeV")
        print(f"  target = {tgt.pdg} (Z={tgt.Z}, A={tgt.A}, N={tgt.N}), hit nucleon = {tgt.hit_nucleon_pdg}")
        k = self.kinematics
        print(f"  kinematics: x={k.x}, y={k.y}, Q2={k.Q2}, W={k.W}")
        if self.flags:
            print(f"  flags: {self.flags!r}")
