"""Gradio UI for Postcraft."""

import logging
import sys

import gradio as gr

from postcraft.core.config import MissingCredentialError, config

from .components import PostView
from .handlers import (
    apply_preset,
    dismiss_error,
    download,
    edit_again,
    edit_image,
    generate_hashtags,
    generate_image,
    generate_quote,
    select_generate_mode,
    select_upload_mode,
    start_over,
    update_instruction,
    update_quote,
    update_style,
    update_watermark,
    upload_image,
)
from .models import Session
from .state import get_gateway

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_ui() -> gr.Blocks:
    """Create the Gradio UI.

    Returns:
        Gradio Blocks app
    """
    app = gr.Blocks(title="Postcraft")

    with app:
        # Session state - one instance per user
        session_state = gr.State(Session())

        gr.Markdown(
            """
            # AI Instagram Post Generator
            ### Create stunning, share-worthy posts in minutes.
            """
        )

        view = PostView()
        wire_events(view, session_state)

    return app


def wire_events(view: PostView, session_state: gr.State) -> None:
    """Connect component events to handlers.

    Args:
        view: Components of the app
        session_state: Per-user Session state
    """
    render_outputs = view.outputs() + [session_state]
    quote_ui = view.quote_style

    view.dismiss_btn.click(fn=dismiss_error, inputs=[session_state], outputs=render_outputs)
    view.upload_mode_btn.click(
        fn=select_upload_mode, inputs=[session_state], outputs=render_outputs
    )
    view.generate_mode_btn.click(
        fn=select_generate_mode, inputs=[session_state], outputs=render_outputs
    )
    view.start_over_btn.click(fn=start_over, inputs=[session_state], outputs=render_outputs)

    view.uploader.upload(
        fn=upload_image,
        inputs=[view.uploader, session_state],
        outputs=render_outputs,
    )
    view.generator.generate_btn.click(
        fn=generate_image,
        inputs=[view.generator.prompt, view.generator.aspect_ratio, session_state],
        outputs=render_outputs,
    )

    # Typed text is stored as it changes so re-renders keep it
    view.instruction.input(
        fn=update_instruction,
        inputs=[view.instruction, session_state],
        outputs=[session_state],
    )
    view.watermark.input(
        fn=update_watermark,
        inputs=[view.watermark, session_state],
        outputs=[session_state],
    )

    # Presets fill the instruction box
    for name, button in view.preset_btns.items():
        button.click(
            fn=lambda state, name=name: apply_preset(name, state),
            inputs=[session_state],
            outputs=[view.instruction, session_state],
        )

    quote_ui.generate_btn.click(
        fn=generate_quote, inputs=[session_state], outputs=render_outputs
    )
    quote_ui.quote.input(
        fn=update_quote,
        inputs=[quote_ui.quote, session_state],
        outputs=[quote_ui.style_group, view.hashtags, session_state],
    )
    for picker in (quote_ui.font, quote_ui.palette, quote_ui.position):
        picker.change(
            fn=update_style,
            inputs=[quote_ui.font, quote_ui.palette, quote_ui.position, session_state],
            outputs=[session_state],
        )

    view.edit_btn.click(
        fn=edit_image,
        inputs=[
            view.instruction,
            *quote_ui.get_input_components(),
            view.watermark,
            session_state,
        ],
        outputs=render_outputs,
    )
    view.edit_again_btn.click(fn=edit_again, inputs=[session_state], outputs=render_outputs)
    view.hashtags_btn.click(
        fn=generate_hashtags,
        inputs=[quote_ui.quote, session_state],
        outputs=render_outputs,
    )
    view.download_btn.click(fn=download, inputs=[session_state], outputs=render_outputs)


def main():
    """Main entry point for the application."""
    logger.info("Starting Postcraft...")
    logger.info(f"Configuration: {config.model_dump(exclude={'gemini_api_key'})}")

    try:
        get_gateway()
    except MissingCredentialError as e:
        logger.critical(str(e))
        sys.exit(1)

    app = create_ui()

    logger.info(f"Launching Gradio UI on {config.gradio_server_name}:{config.gradio_server_port}")

    app.launch(
        server_name=config.gradio_server_name,
        server_port=config.gradio_server_port,
        share=config.gradio_share,
        show_error=True,
        inbrowser=False,
    )


if __name__ == "__main__":
    main()
