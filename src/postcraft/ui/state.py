"""Workflow controller for Postcraft sessions.

This module drives a :class:`~postcraft.ui.models.Session` through the
upload → edit → hashtag workflow::

    IDLE ─┬─ upload ───► UPLOADING ──┐
          └─ generate ─► GENERATING ─┴─► READY ─► EDITING ─► EDITED ─► HASHTAGS_READY
                                           ▲                    │              │
                                           └──── edit again ────┴──────────────┘

``start_over`` returns to IDLE from any stage. Quote and hashtag generation
run beside the main transitions with their own loading flags.

Every stage method is a coroutine returning a
:class:`~postcraft.ui.models.StageResult`. Failures are caught at the stage
boundary and stored as a single message in ``Session.error``; nothing is
re-raised to the caller.

Stale Results
-------------
Requests are tagged with ``Session.epoch`` when issued. A reset bumps the
epoch, and a request that completes under an older epoch is discarded
without touching the session, its data or its loading flags.
"""

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Awaitable, Callable

from postcraft.core.adapters import create_gateway
from postcraft.core.catalog import PRESET_EDITS, AspectRatio, ColorPalette, Font, QuotePosition
from postcraft.core.config import config
from postcraft.core.encoding import EncodedImage, encode_image_file, save_download
from postcraft.core.gateway import GatewayBase
from postcraft.core.prompt_builder import HASHTAG_FALLBACK_CONTEXT, compose_edit_prompt

from .models import (
    ImageSource,
    LoadingState,
    OriginImage,
    Session,
    Stage,
    StageResult,
    WorkflowMode,
    WorkflowStage,
)
from .validation import (
    PreconditionError,
    validate_can_download,
    validate_can_edit,
    validate_can_generate_hashtags,
    validate_generation_prompt,
    validate_not_busy,
)

logger = logging.getLogger(__name__)

UPLOAD_ERROR = "Failed to load image. Please try another file."
GENERATE_ERROR = "Failed to generate the image. Please try a different prompt."
EDIT_ERROR = (
    "Failed to edit the image. The model may be unable to process this request. "
    "Please try a different prompt or image."
)
QUOTE_ERROR = "Could not generate a quote. Please try again."
HASHTAG_ERROR = "Could not generate hashtags. Please try again."

_gateway: GatewayBase | None = None


def get_gateway() -> GatewayBase:
    """Return the process-wide gateway, building it on first use.

    Raises:
        MissingCredentialError: If the backend credential is not configured
    """
    global _gateway
    if _gateway is None:
        logger.info("Initializing gateway")
        _gateway = create_gateway(config)
    return _gateway


class WorkflowController:
    """Applies user intents and backend results to a Session.

    The controller owns no state of its own beyond references; a fresh
    controller can be built around the same session for every UI event.

    Attributes
    ----------
    session : Session
        Session being driven (mutated in place)
    gateway : GatewayBase
        Backend used for generation, editing, quotes and hashtags
    """

    def __init__(self, session: Session, gateway: GatewayBase) -> None:
        self.session = session
        self.gateway = gateway

    # ------------------------------------------------------------------
    # Resets and simple selections
    # ------------------------------------------------------------------

    def _reset(self, mode: WorkflowMode | None) -> None:
        s = self.session
        s.epoch += 1
        s.mode = mode
        s.origin = None
        s.working_image = None
        s.edited_image = None
        s.quote = ""
        s.hashtags = []
        s.instruction = ""
        s.watermark = ""
        s.error = None
        s.loading = LoadingState()
        s.stage = WorkflowStage.IDLE
        logger.info(f"Session reset (epoch={s.epoch}, mode={mode.value if mode else None})")

    def start_over(self) -> None:
        """Discard everything and return to mode selection."""
        self._reset(None)

    def select_mode(self, mode: WorkflowMode) -> None:
        """Choose upload or generate mode, starting a fresh session."""
        self._reset(mode)

    def dismiss_error(self) -> None:
        self.session.error = None

    def set_instruction(self, text: str) -> None:
        self.session.instruction = text or ""

    def apply_preset(self, name: str) -> None:
        """Replace the edit instruction with a preset theme.

        Raises:
            KeyError: If the preset name is unknown
        """
        self.session.instruction = PRESET_EDITS[name]

    def set_watermark(self, text: str) -> None:
        self.session.watermark = text or ""

    def set_generation_prompt(self, text: str) -> None:
        self.session.generation_prompt = text or ""

    def set_aspect_ratio(self, aspect_ratio: AspectRatio) -> None:
        self.session.aspect_ratio = aspect_ratio

    def set_style(
        self,
        font: Font | None = None,
        palette: ColorPalette | None = None,
        position: QuotePosition | None = None,
    ) -> None:
        """Update one or more parts of the quote style."""
        changes: dict[str, Any] = {}
        if font is not None:
            changes["font"] = font
        if palette is not None:
            changes["palette"] = palette
        if position is not None:
            changes["position"] = position
        self.session.style = replace(self.session.style, **changes)

    def set_quote(self, text: str) -> None:
        """Apply a user edit to the quote; hashtags for the old quote are dropped."""
        text = text or ""
        if text == self.session.quote:
            return
        self.session.quote = text
        self._clear_hashtags()

    def edit_again(self) -> None:
        """Promote the edited result to the working image and return to READY."""
        s = self.session
        if s.edited_image is None:
            logger.debug("edit_again ignored: no edited image")
            return
        s.working_image = s.edited_image
        s.edited_image = None
        s.instruction = ""
        s.hashtags = []
        s.stage = WorkflowStage.READY
        logger.info("Edited image promoted to working image")

    def _clear_hashtags(self) -> None:
        s = self.session
        s.hashtags = []
        if s.stage is WorkflowStage.HASHTAGS_READY:
            s.stage = WorkflowStage.EDITED

    def _refuse(self, error: PreconditionError) -> StageResult:
        self.session.error = str(error)
        return StageResult(error=error)

    # ------------------------------------------------------------------
    # Stage runner
    # ------------------------------------------------------------------

    async def _run(
        self,
        stage: Stage,
        call: Callable[[], Awaitable[Any]],
        on_success: Callable[[Any], None],
        on_failure: Callable[[], None],
        message: str,
    ) -> StageResult:
        """Run one backend call under a loading flag and epoch guard.

        Args:
            stage: Stage whose loading flag is raised during the call
            call: Zero-argument coroutine factory performing the request
            on_success: Applies the result to the session
            on_failure: Restores the stage transition after a failure
            message: User-facing error message for failures

        Returns:
            StageResult with the value, the error, or ``stale=True``
        """
        s = self.session
        epoch = s.epoch
        s.loading.set(stage, True)

        try:
            value = await call()
        except Exception as e:
            if s.epoch != epoch:
                logger.info(f"Discarding stale {stage.value} failure from epoch {epoch}")
                return StageResult(error=e, stale=True)
            s.loading.set(stage, False)
            on_failure()
            s.error = message
            logger.error(f"{stage.value} failed: {e}", exc_info=True)
            return StageResult(error=e)

        if s.epoch != epoch:
            logger.info(f"Discarding stale {stage.value} result from epoch {epoch}")
            return StageResult(value=value, stale=True)

        s.loading.set(stage, False)
        on_success(value)
        return StageResult(value=value)

    # ------------------------------------------------------------------
    # Image acquisition
    # ------------------------------------------------------------------

    async def upload_image(self, path: str | Path) -> StageResult:
        """Load an uploaded file as the new origin image.

        On failure the session returns to upload-mode selection with an error.
        """
        self._reset(WorkflowMode.UPLOAD)
        s = self.session
        epoch = s.epoch
        s.stage = WorkflowStage.UPLOADING

        try:
            image = await asyncio.to_thread(encode_image_file, path)
        except Exception as e:
            if s.epoch != epoch:
                return StageResult(error=e, stale=True)
            logger.error(f"Failed to load uploaded image {path}: {e}")
            s.stage = WorkflowStage.IDLE
            s.error = UPLOAD_ERROR
            return StageResult(error=e)

        if s.epoch != epoch:
            logger.info(f"Discarding stale upload from epoch {epoch}")
            return StageResult(value=image, stale=True)

        s.origin = OriginImage(ImageSource.UPLOAD, image, filename=Path(path).name)
        s.working_image = image
        s.stage = WorkflowStage.READY
        logger.info(f"Uploaded image {Path(path).name} ({image.mime_type})")
        return StageResult(value=image)

    async def generate_image(self) -> StageResult:
        """Generate a new origin image from ``generation_prompt``."""
        s = self.session
        try:
            validate_not_busy(s, Stage.IMAGE_GENERATE)
            prompt = validate_generation_prompt(s.generation_prompt)
        except PreconditionError as e:
            return self._refuse(e)

        self._reset(WorkflowMode.GENERATE)
        s.stage = WorkflowStage.GENERATING
        aspect_ratio = s.aspect_ratio

        def on_success(image: EncodedImage) -> None:
            s.origin = OriginImage(ImageSource.GENERATED, image)
            s.working_image = image
            s.stage = WorkflowStage.READY

        def on_failure() -> None:
            s.stage = WorkflowStage.IDLE

        return await self._run(
            Stage.IMAGE_GENERATE,
            lambda: self.gateway.generate_image(prompt, aspect_ratio),
            on_success,
            on_failure,
            GENERATE_ERROR,
        )

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def build_edit_prompt(self) -> str:
        """Compose the edit prompt from the current selections."""
        s = self.session
        return compose_edit_prompt(
            s.instruction,
            quote=s.quote or None,
            style=s.style,
            watermark=s.watermark or None,
        )

    async def edit_image(self) -> StageResult:
        """Edit the working image with the composed prompt."""
        s = self.session
        try:
            validate_not_busy(s, Stage.IMAGE_EDIT)
            validate_can_edit(s)
        except PreconditionError as e:
            return self._refuse(e)

        source = s.working_image
        prompt = self.build_edit_prompt()

        s.error = None
        s.edited_image = None
        s.hashtags = []
        s.stage = WorkflowStage.EDITING

        def on_success(image: EncodedImage) -> None:
            s.edited_image = image
            s.hashtags = []
            s.stage = WorkflowStage.EDITED

        def on_failure() -> None:
            s.stage = WorkflowStage.READY

        return await self._run(
            Stage.IMAGE_EDIT,
            lambda: self.gateway.edit_image(source.data, source.mime_type, prompt),
            on_success,
            on_failure,
            EDIT_ERROR,
        )

    # ------------------------------------------------------------------
    # Quote and hashtags
    # ------------------------------------------------------------------

    async def generate_quote(self) -> StageResult:
        s = self.session
        try:
            validate_not_busy(s, Stage.QUOTE)
        except PreconditionError as e:
            return self._refuse(e)

        s.error = None

        def on_success(quote: str) -> None:
            s.quote = quote
            self._clear_hashtags()

        return await self._run(
            Stage.QUOTE,
            self.gateway.generate_quote,
            on_success,
            lambda: None,
            QUOTE_ERROR,
        )

    async def generate_hashtags(self) -> StageResult:
        """Generate hashtags for the current quote, or the edited image without one."""
        s = self.session
        try:
            validate_not_busy(s, Stage.HASHTAGS)
            validate_can_generate_hashtags(s)
        except PreconditionError as e:
            return self._refuse(e)

        s.error = None
        requested_quote = s.quote
        context = requested_quote or HASHTAG_FALLBACK_CONTEXT

        def on_success(hashtags: list[str]) -> None:
            # Hashtags belong to the quote they were requested for
            if s.quote != requested_quote:
                logger.info("Discarding hashtags generated for a previous quote")
                return
            s.hashtags = list(hashtags)
            if s.edited_image is not None and s.stage is WorkflowStage.EDITED:
                s.stage = WorkflowStage.HASHTAGS_READY

        return await self._run(
            Stage.HASHTAGS,
            lambda: self.gateway.generate_hashtags(context),
            on_success,
            lambda: None,
            HASHTAG_ERROR,
        )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def download(self) -> StageResult:
        """Write the edited result as a PNG file for download.

        Returns:
            StageResult whose value is the written Path
        """
        s = self.session
        try:
            validate_can_download(s)
        except PreconditionError as e:
            return self._refuse(e)

        try:
            path = save_download(s.edited_image, config.outputs_dir, config.download_filename)
        except OSError as e:
            logger.error(f"Failed to save download: {e}", exc_info=True)
            s.error = "Could not prepare the image for download."
            return StageResult(error=e)

        return StageResult(value=path)
