"""Exceptions raised by the flyer pipeline."""

USER_FACING_MESSAGE = "Failed to generate PDF. Please try again."


class FlyerError(Exception):
    """Base class for failures inside the flyer pipeline."""


class RasterizationError(FlyerError):
    """A section could not be rendered to a bitmap."""

    def __init__(self, key, cause=None):
        self.key = key
        self.cause = cause
        super().__init__(f"Rasterization failed for section '{getattr(key, 'value', key)}': {cause}")


class SaveError(FlyerError):
    """The finished document could not be written."""


class GenerationCancelled(FlyerError):
    """The caller abandoned generation between two sections."""


class FlyerGenerationError(Exception):
    """The single error surfaced to end users; details live in the logs."""

    def __init__(self, message: str = USER_FACING_MESSAGE):
        super().__init__(message)
