"""Reusable UI components for the Postcraft Gradio interface.

The view is strictly reactive: every handler returns
``render_session(session)``, which maps the session onto the components in
``PostView.outputs()`` order.
"""

from pathlib import Path
from typing import Any

import gradio as gr

from postcraft.core.catalog import PRESET_EDITS, AspectRatio, ColorPalette, Font, QuotePosition
from postcraft.core.encoding import decode_image

from .formatting import format_error, format_hashtags, format_status
from .models import Session, WorkflowMode


class QuoteStyleUI:
    """Quote text plus its font, color and placement pickers.

    The pickers stay hidden until the session has a quote.
    """

    def __init__(self):
        self.generate_btn = gr.Button("💬 Generate Motivational Quote", variant="secondary")
        self.quote = gr.Textbox(
            label="Quote",
            placeholder="Generate a quote or type your own...",
            lines=3,
        )

        with gr.Group(visible=False) as self.style_group:
            self.position = gr.Radio(
                label="Position",
                choices=QuotePosition.labels(),
                value=QuotePosition.default().label,
            )
            self.font = gr.Radio(
                label="Font",
                choices=Font.labels(),
                value=Font.default().label,
            )
            self.palette = gr.Radio(
                label="Color",
                choices=ColorPalette.labels(),
                value=ColorPalette.default().label,
            )

    def get_input_components(self) -> list[gr.components.Component]:
        """Return components whose values feed an edit request.

        Order: quote, font, palette, position
        """
        return [self.quote, self.font, self.palette, self.position]


class ImageGeneratorUI:
    """Prompt and aspect ratio controls for AI image generation."""

    def __init__(self):
        self.prompt = gr.Textbox(
            label="Describe the image you want to create",
            placeholder=(
                "e.g., 'A mystical forest with glowing mushrooms and a serene lake "
                "under a starry sky'"
            ),
            lines=4,
        )
        self.aspect_ratio = gr.Radio(
            label="Aspect Ratio for Instagram",
            choices=AspectRatio.labels(),
            value=AspectRatio.default().label,
        )
        self.generate_btn = gr.Button("✨ Generate Image", variant="primary")


class PostView:
    """All session-driven components of the app.

    Built inside a ``gr.Blocks`` context by :func:`postcraft.ui.app.create_ui`.
    """

    def __init__(self):
        with gr.Row():
            self.error_banner = gr.Markdown(value="", visible=False)
            self.dismiss_btn = gr.Button("Dismiss", size="sm", visible=False)
        self.status = gr.Markdown(value="*Choose how you would like to start.*")

        # Mode selection
        with gr.Group(visible=True) as self.mode_group:
            gr.Markdown("### How would you like to start?")
            with gr.Row():
                self.generate_mode_btn = gr.Button("✨ Generate Image with AI", variant="primary")
                self.upload_mode_btn = gr.Button("📤 Edit My Own Image")

        # Upload
        with gr.Group(visible=False) as self.upload_group:
            self.uploader = gr.Image(
                label="Upload an image to get started",
                type="filepath",
                sources=["upload", "clipboard"],
                height=300,
            )

        # Generate
        with gr.Group(visible=False) as self.generate_group:
            self.generator = ImageGeneratorUI()

        # Workspace
        with gr.Row(visible=False) as self.workspace_group:
            with gr.Column(scale=1):
                self.instruction = gr.Textbox(
                    label="1. Describe your edits (Optional)",
                    placeholder="e.g., 'Add a retro filter' or 'Make the background blurry'",
                    lines=3,
                )
                gr.Markdown("Or try a preset theme")
                with gr.Row():
                    self.preset_btns = {name: gr.Button(name, size="sm") for name in PRESET_EDITS}

                gr.Markdown("### 2. Add & Style Quote (Optional)")
                self.quote_style = QuoteStyleUI()

                self.watermark = gr.Textbox(
                    label="3. Add Watermark (Optional)",
                    placeholder="e.g., @yourhandle or yoursite.com",
                )

                gr.Markdown("### 4. Create Your Post")
                self.edit_btn = gr.Button("✨ Generate Post", variant="primary")

            with gr.Column(scale=1):
                self.source_image = gr.Image(
                    label="Original", type="pil", interactive=False, height=300
                )
                with gr.Group(visible=False) as self.results_group:
                    self.edited_image = gr.Image(
                        label="Your Post", type="pil", interactive=False, height=300
                    )
                    with gr.Row():
                        self.download_btn = gr.Button("⬇️ Download")
                        self.edit_again_btn = gr.Button("✏️ Edit Again")
                    self.download_file = gr.File(label="Download", visible=False)

                self.hashtags_btn = gr.Button("#️⃣ Generate Hashtags")
                self.hashtags = gr.Textbox(
                    label="Hashtags",
                    interactive=False,
                    show_copy_button=True,
                    visible=False,
                )
                self.start_over_btn = gr.Button("🔄 Start Over", variant="stop")

    def outputs(self) -> list[gr.components.Component]:
        """Components updated by ``render_session``, in matching order."""
        return [
            self.error_banner,
            self.dismiss_btn,
            self.status,
            self.mode_group,
            self.upload_group,
            self.uploader,
            self.generate_group,
            self.generator.generate_btn,
            self.workspace_group,
            self.source_image,
            self.instruction,
            self.quote_style.quote,
            self.quote_style.style_group,
            self.quote_style.generate_btn,
            self.watermark,
            self.edit_btn,
            self.results_group,
            self.edited_image,
            self.download_file,
            self.hashtags_btn,
            self.hashtags,
        ]


def render_session(session: Session, download_path: Path | None = None) -> tuple[Any, ...]:
    """Map a session onto ``PostView.outputs()``.

    Args:
        session: Session to render
        download_path: Prepared download file to expose, if any

    Returns:
        Tuple of ``gr.update`` values in ``PostView.outputs()`` order
    """
    loading = session.loading
    awaiting_origin = session.origin is None

    return (
        gr.update(value=format_error(session.error), visible=bool(session.error)),
        gr.update(visible=bool(session.error)),
        gr.update(value=format_status(session)),
        gr.update(visible=session.mode is None and awaiting_origin),
        gr.update(visible=session.mode is WorkflowMode.UPLOAD and awaiting_origin),
        gr.update(value=None) if awaiting_origin else gr.update(),
        gr.update(visible=session.mode is WorkflowMode.GENERATE and awaiting_origin),
        gr.update(
            value="Generating..." if loading.image_generate else "✨ Generate Image",
            interactive=not loading.image_generate,
        ),
        gr.update(visible=session.has_image()),
        gr.update(
            value=decode_image(session.working_image) if session.working_image else None
        ),
        gr.update(value=session.instruction),
        gr.update(value=session.quote),
        gr.update(visible=bool(session.quote)),
        gr.update(
            value="Generating..." if loading.quote else "💬 Generate Motivational Quote",
            interactive=not loading.quote,
        ),
        gr.update(value=session.watermark),
        gr.update(
            value="Generating Image..." if loading.image_edit else "✨ Generate Post",
            interactive=not loading.image_edit,
        ),
        gr.update(visible=session.edited_image is not None),
        gr.update(
            value=decode_image(session.edited_image) if session.edited_image else None
        ),
        gr.update(value=str(download_path) if download_path else None, visible=bool(download_path)),
        gr.update(
            value="Generating..." if loading.hashtags else "#️⃣ Generate Hashtags",
            interactive=not loading.hashtags,
        ),
        gr.update(value=format_hashtags(session.hashtags), visible=bool(session.hashtags)),
    )
