from abc import ABC, abstractmethod

from nu_xsec.interaction.interaction import Interaction, InteractionFlag


class XSecModelBase(ABC):
    """
    Differential cross section model.

    `evaluate_differential_xsec` returns the differential cross section in the
    variables listed by `differential_variables`, read from the interaction's
    kinematics. Kinematically forbidden inputs give exactly 0.
    """

    # e.g. ("y",), ("Q2",), ("x", "y"), ("W", "Q2")
    differential_variables: tuple = ()

    @abstractmethod
    def evaluate_differential_xsec(self, interaction: Interaction) -> float:
        ...

    # Default: every process is accepted (can be overridden)
    def valid_process(self, interaction: Interaction) -> bool:
        if interaction.test_flag(InteractionFlag.SKIP_PROCESS_CHECK):
            return True
        return self._check_process(interaction)

    def valid_kinematics(self, interaction: Interaction) -> bool:
        if interaction.test_flag(InteractionFlag.SKIP_KINEMATIC_CHECK):
            return True
        return self._check_kinematics(interaction)

    def _check_process(self, interaction: Interaction) -> bool:
        return True

    def _check_kinematics(self, interaction: Interaction) -> bool:
        return True
