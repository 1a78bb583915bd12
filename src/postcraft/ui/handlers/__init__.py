"""UI event handlers organized by feature area.

This package provides handlers for all Gradio UI events, organized into logical modules:
- workflow: Mode selection, upload, generation, editing and session reset
- content: Quotes, hashtags, style pickers, presets and download
"""

from .content import (
    apply_preset,
    download,
    generate_hashtags,
    generate_quote,
    update_instruction,
    update_quote,
    update_style,
    update_watermark,
)
from .workflow import (
    dismiss_error,
    edit_again,
    edit_image,
    generate_image,
    select_generate_mode,
    select_upload_mode,
    start_over,
    upload_image,
)

__all__ = [
    # Workflow handlers
    "dismiss_error",
    "edit_again",
    "edit_image",
    "generate_image",
    "select_generate_mode",
    "select_upload_mode",
    "start_over",
    "upload_image",
    # Content handlers
    "apply_preset",
    "download",
    "generate_hashtags",
    "generate_quote",
    "update_instruction",
    "update_quote",
    "update_style",
    "update_watermark",
]
