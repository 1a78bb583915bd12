"""Quote, hashtag, style and download handlers."""

import logging
from collections.abc import AsyncIterator

import gradio as gr

from postcraft.core.catalog import ColorPalette, Font, QuotePosition

from ..components import render_session
from ..formatting import format_hashtags
from ..models import Session
from .workflow import _controller, stream_stage

logger = logging.getLogger(__name__)


async def generate_quote(state: Session) -> AsyncIterator[tuple]:
    """Ask the backend for a motivational quote."""
    controller = _controller(state)
    async for update in stream_stage(controller, controller.generate_quote()):
        yield update


async def generate_hashtags(quote: str, state: Session) -> AsyncIterator[tuple]:
    """Generate hashtags for the quote currently in the textbox."""
    controller = _controller(state)
    controller.set_quote(quote)
    async for update in stream_stage(controller, controller.generate_hashtags()):
        yield update


def update_quote(quote: str, state: Session) -> tuple[gr.update, gr.update, Session]:
    """Track user edits to the quote text.

    Returns:
        Tuple of (style_group_update, hashtags_update, state)
    """
    controller = _controller(state)
    controller.set_quote(quote)
    session = controller.session
    return (
        gr.update(visible=bool(session.quote)),
        gr.update(value=format_hashtags(session.hashtags), visible=bool(session.hashtags)),
        session,
    )


def update_instruction(instruction: str, state: Session) -> Session:
    """Keep the typed edit instruction in the session."""
    controller = _controller(state)
    controller.set_instruction(instruction)
    return controller.session


def update_watermark(watermark: str, state: Session) -> Session:
    controller = _controller(state)
    controller.set_watermark(watermark)
    return controller.session


def update_style(
    font_label: str, palette_label: str, position_label: str, state: Session
) -> Session:
    """Store the style pickers' selection in the session."""
    controller = _controller(state)
    controller.set_style(
        font=Font.from_label(font_label),
        palette=ColorPalette.from_label(palette_label),
        position=QuotePosition.from_label(position_label),
    )
    return controller.session


def apply_preset(name: str, state: Session) -> tuple[gr.update, Session]:
    """Fill the instruction box with a preset theme.

    Returns:
        Tuple of (instruction_update, state)
    """
    controller = _controller(state)
    controller.apply_preset(name)
    return gr.update(value=controller.session.instruction), controller.session


def download(state: Session) -> tuple:
    """Write the edited result to disk and expose it as a file download."""
    controller = _controller(state)
    result = controller.download()
    download_path = result.value if result.ok else None
    return (*render_session(controller.session, download_path=download_path), controller.session)
