"""Formatting utilities for Postcraft UI output."""

from .models import Session, WorkflowStage

_STAGE_MESSAGES = {
    WorkflowStage.IDLE: "*Choose how you would like to start.*",
    WorkflowStage.UPLOADING: "⏳ Loading your image...",
    WorkflowStage.GENERATING: "⏳ Generating your image...",
    WorkflowStage.READY: "✅ **Image ready.** Describe your edits, add a quote, then create your post.",
    WorkflowStage.EDITING: "⏳ Generating your post...",
    WorkflowStage.EDITED: "✅ **Post created!** Generate hashtags, download, or edit again.",
    WorkflowStage.HASHTAGS_READY: "✅ **Hashtags ready!** Copy them and share your post.",
}


def format_hashtags(hashtags: list[str]) -> str:
    """Render hashtags for copying, one ``#`` per tag.

    Tags that already start with ``#`` are not prefixed again.

    Args:
        hashtags: Tags in display order

    Returns:
        Space-separated hashtags, or an empty string
    """
    return " ".join(tag if tag.startswith("#") else f"#{tag}" for tag in hashtags if tag)


def format_error(message: str | None) -> str:
    """Render the error banner text (empty when there is no error)."""
    if not message:
        return ""
    return f"❌ **Error:** {message}"


def format_status(session: Session) -> str:
    """Describe the current workflow stage for the status line."""
    return _STAGE_MESSAGES[session.stage]
