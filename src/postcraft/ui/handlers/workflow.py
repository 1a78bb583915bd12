"""Image acquisition, editing and session navigation handlers."""

import asyncio
import logging
from collections.abc import AsyncIterator, Coroutine
from typing import Any

from postcraft.core.catalog import AspectRatio, ColorPalette, Font, QuotePosition

from ..components import render_session
from ..models import Session, StageResult, WorkflowMode
from ..state import WorkflowController, get_gateway

logger = logging.getLogger(__name__)


def _controller(state: Session | None) -> WorkflowController:
    return WorkflowController(state if state is not None else Session(), get_gateway())


async def stream_stage(
    controller: WorkflowController, stage: Coroutine[Any, Any, StageResult]
) -> AsyncIterator[tuple]:
    """Render the session while a stage runs and again once it finishes.

    The first render shows the raised loading flag (disabled button); the
    second shows the applied result or error.

    Args:
        controller: Controller driving the session
        stage: Stage coroutine returned by a controller method

    Yields:
        Render tuples followed by the session
    """
    task = asyncio.create_task(stage)
    # Let the stage raise its loading flag before the first render
    await asyncio.sleep(0)
    yield (*render_session(controller.session), controller.session)

    result = await task
    if result.stale:
        logger.info("Stage result was stale; session left unchanged")
    yield (*render_session(controller.session), controller.session)


def select_upload_mode(state: Session) -> tuple:
    controller = _controller(state)
    controller.select_mode(WorkflowMode.UPLOAD)
    return (*render_session(controller.session), controller.session)


def select_generate_mode(state: Session) -> tuple:
    controller = _controller(state)
    controller.select_mode(WorkflowMode.GENERATE)
    return (*render_session(controller.session), controller.session)


def start_over(state: Session) -> tuple:
    """Reset the session back to mode selection."""
    controller = _controller(state)
    controller.start_over()
    return (*render_session(controller.session), controller.session)


def dismiss_error(state: Session) -> tuple:
    controller = _controller(state)
    controller.dismiss_error()
    return (*render_session(controller.session), controller.session)


async def upload_image(path: str | None, state: Session) -> AsyncIterator[tuple]:
    """Handle a file dropped on the uploader.

    Args:
        path: Temporary file path from ``gr.Image(type="filepath")``
        state: Session

    Yields:
        Render tuples followed by the session
    """
    controller = _controller(state)
    if not path:
        yield (*render_session(controller.session), controller.session)
        return

    async for update in stream_stage(controller, controller.upload_image(path)):
        yield update


async def generate_image(
    prompt: str, aspect_ratio_label: str, state: Session
) -> AsyncIterator[tuple]:
    """Generate a new origin image from the prompt and aspect ratio."""
    controller = _controller(state)
    controller.set_generation_prompt(prompt)
    controller.set_aspect_ratio(AspectRatio.from_label(aspect_ratio_label))

    async for update in stream_stage(controller, controller.generate_image()):
        yield update


async def edit_image(
    instruction: str,
    quote: str,
    font_label: str,
    palette_label: str,
    position_label: str,
    watermark: str,
    state: Session,
) -> AsyncIterator[tuple]:
    """Sync the control panel into the session and request an edit.

    Args:
        instruction: Free-form edit instruction
        quote: Quote text
        font_label: Selected font display name
        palette_label: Selected palette display name
        position_label: Selected placement display name
        watermark: Watermark text
        state: Session

    Yields:
        Render tuples followed by the session
    """
    controller = _controller(state)
    controller.set_instruction(instruction)
    controller.set_quote(quote)
    controller.set_style(
        font=Font.from_label(font_label),
        palette=ColorPalette.from_label(palette_label),
        position=QuotePosition.from_label(position_label),
    )
    controller.set_watermark(watermark)

    async for update in stream_stage(controller, controller.edit_image()):
        yield update


def edit_again(state: Session) -> tuple:
    """Promote the edited result to the working image."""
    controller = _controller(state)
    controller.edit_again()
    return (*render_session(controller.session), controller.session)
