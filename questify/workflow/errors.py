"""Errors surfaced to the user by the workflow."""


class WorkflowError(Exception):
    """Base class. `message` is what the user sees."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WorkflowError):
    """A required field is missing; the request is not sent."""


class ServiceError(WorkflowError):
    """The API (generation, persistence or auth) answered with an error or was unreachable."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class ExportError(WorkflowError):
    """Writing an exported file failed."""


class InvalidTransition(WorkflowError):
    """An action was attempted from a step that does not allow it."""
