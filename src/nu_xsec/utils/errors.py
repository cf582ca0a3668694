class ConfigurationError(RuntimeError):
    """A required collaborator (model, integrator, ...) is missing or unusable."""


class InteractionInUseError(RuntimeError):
    """An Interaction is already borrowed by another integration."""
