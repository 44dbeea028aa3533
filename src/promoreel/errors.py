"""Exception taxonomy shared across promoreel components.

Remote failures are re-expressed at the component boundary, so callers
above a gateway or the orchestrator never see raw SDK or HTTP errors.
Terminal video-generation failures are reported through
``GenerationOutcome`` rather than raised.
"""

from typing import Any


class PromoReelError(Exception):
    """Base class for all promoreel errors."""


class InputValidationError(PromoReelError):
    """Local input problem detected before any remote call is made.

    Always recoverable by correcting the input (selection counts, empty
    prompt, upload quota, deleting a preloaded asset).
    """


class UploadQuotaError(InputValidationError):
    """More files were offered than the remaining upload quota allows.

    Raised after the allowed prefix has been added; ``added`` holds the
    assets that were accepted.
    """

    def __init__(self, message: str, added: list[Any], rejected: int) -> None:
        super().__init__(message)
        self.added = added
        self.rejected = rejected


class CapabilityError(InputValidationError):
    """The environment or stored credential does not permit generation."""


class GatewayError(PromoReelError):
    """Idea or refinement generation failed; retrying the stage may help."""


class WorkflowError(PromoReelError):
    """An action was requested in a stage that does not allow it."""


class GenerationInProgressError(PromoReelError):
    """A video generation job is already running."""


class ConfigurationError(PromoReelError):
    """The YAML configuration file is malformed or names unknown settings."""
