"""Error taxonomy for the configuration wizard."""


class ConfigWizardError(Exception):
    """Base class for every error the wizard reports to the user."""


class FetchError(ConfigWizardError):
    """A flow, template or manifest could not be retrieved from the service."""


class FlowDefinitionError(ConfigWizardError):
    """The dialog flow document is structurally unusable."""


class UnknownStepError(ConfigWizardError):
    """A transition (or the flow start) names a step that is not defined."""

    def __init__(self, step_id: str):
        super().__init__(f"Unknown step: {step_id}")
        self.step_id = step_id


class StateKeyError(ConfigWizardError):
    """A dotted state key is empty or would write through a non-object value."""


class TemplateEvaluationError(ConfigWizardError):
    """The output template failed to compile or evaluate."""


class DeliveryError(ConfigWizardError):
    """The generated configuration could not be turned into a deployment package."""


class PersistenceError(ConfigWizardError):
    """A generated artifact could not be written to disk."""
