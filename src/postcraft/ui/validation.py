"""Validation utilities for Postcraft UI actions."""

import logging

from .models import Session, Stage

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when user input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


class PreconditionError(ValidationError):
    """A stage was requested before its inputs exist.

    Raised before any backend call is made.
    """

    pass


def validate_not_busy(session: Session, stage: Stage) -> None:
    """Refuse to start a stage whose loading flag is already raised.

    Raises:
        PreconditionError: If the stage is already in progress
    """
    if session.loading.is_set(stage):
        logger.warning(f"Refusing to start {stage.value}: already in progress")
        raise PreconditionError("That request is already in progress. Please wait.")


def validate_generation_prompt(prompt: str) -> str:
    """Validate the text-to-image prompt.

    Returns:
        The stripped prompt

    Raises:
        PreconditionError: If the prompt is empty
    """
    if not prompt or not prompt.strip():
        raise PreconditionError("Please enter a prompt to generate an image.")
    return prompt.strip()


def validate_can_edit(session: Session) -> None:
    """Raises PreconditionError if there is no working image to edit."""
    if not session.has_image():
        raise PreconditionError("Please upload or generate an image first.")


def validate_can_generate_hashtags(session: Session) -> None:
    """Hashtags need a quote or an edited image to describe.

    Raises:
        PreconditionError: If neither exists
    """
    if not session.quote and session.edited_image is None:
        raise PreconditionError(
            "Please generate an image and a quote first to create relevant hashtags."
        )


def validate_can_download(session: Session) -> None:
    """Raises PreconditionError if there is no edited result to download."""
    if session.edited_image is None:
        raise PreconditionError("There is no edited image to download yet.")
