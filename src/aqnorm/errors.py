"""Exceptions raised by the normalisation engine."""


class AqnormError(Exception):
    """Base class for all package errors."""


class InvalidInput(AqnormError, ValueError):
    """Dataset or argument does not have the expected prepared shape."""


class InvalidModel(AqnormError, TypeError):
    """Model object lacks the predictive capability we need."""


class UnsupportedOperation(AqnormError, NotImplementedError):
    """Requested operation (e.g. standard errors) is not available for the model."""


class WorkerFailure(AqnormError, RuntimeError):
    """A single resampling trial raised; the whole ensemble is aborted."""

    def __init__(self, trial: int, message: str):
        super().__init__(trial, message)
        self.trial = trial
        self.message = message

    def __str__(self) -> str:
        return f"Trial {self.trial} failed: {self.message}"
