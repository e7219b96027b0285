"""Errors raised by the generation service. The API turns them into {"error": ...} with status 500."""

INVALID_FORMAT_MESSAGE = "Invalid response format from AI"
DEFAULT_FAILURE_MESSAGE = "Failed to generate question paper"


class GenerationError(Exception):
    """Any failure producing a question paper. `message` is shown to the user verbatim."""

    def __init__(self, message: str = DEFAULT_FAILURE_MESSAGE):
        super().__init__(message)
        self.message = message


class ConfigurationError(GenerationError):
    """The generation credential is missing."""


class UpstreamFormatError(GenerationError):
    """The model returned text that is not a valid question paper."""

    def __init__(self, message: str = INVALID_FORMAT_MESSAGE, raw: str = ""):
        super().__init__(message)
        self.raw = raw
