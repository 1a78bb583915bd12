"""Data models for Postcraft UI session state."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from postcraft.core.catalog import AspectRatio
from postcraft.core.encoding import EncodedImage
from postcraft.core.prompt_builder import StyleSelection

logger = logging.getLogger(__name__)


class WorkflowMode(Enum):
    """How the user chose to start the session."""

    UPLOAD = "upload"
    GENERATE = "generate"


class WorkflowStage(Enum):
    """Stage of the upload → edit → hashtag workflow."""

    IDLE = "idle"
    UPLOADING = "uploading"
    GENERATING = "generating"
    READY = "ready"
    EDITING = "editing"
    EDITED = "edited"
    HASHTAGS_READY = "hashtags_ready"


class ImageSource(Enum):
    UPLOAD = "upload"
    GENERATED = "generated"


class Stage(Enum):
    """Asynchronous operation categories, one loading flag each."""

    IMAGE_EDIT = "image_edit"
    QUOTE = "quote"
    HASHTAGS = "hashtags"
    IMAGE_GENERATE = "image_generate"


@dataclass(frozen=True)
class OriginImage:
    """The image a session started from.

    Attributes:
        source: Whether the image was uploaded or AI-generated
        image: Encoded image payload
        filename: Original filename (uploads only)
    """

    source: ImageSource
    image: EncodedImage
    filename: str | None = None

    @property
    def is_upload(self) -> bool:
        return self.source is ImageSource.UPLOAD


@dataclass
class LoadingState:
    """Independent in-flight flags, one per stage."""

    image_edit: bool = False
    quote: bool = False
    hashtags: bool = False
    image_generate: bool = False

    def is_set(self, stage: Stage) -> bool:
        return getattr(self, stage.value)

    def set(self, stage: Stage, value: bool) -> None:
        setattr(self, stage.value, value)

    def any(self) -> bool:
        return any(self.is_set(stage) for stage in Stage)


@dataclass
class StageResult:
    """Outcome of one stage operation.

    Exactly one of ``value`` and ``error`` is meaningful. ``stale`` marks a
    result that completed after the session was reset and was discarded.
    """

    value: Any = None
    error: Exception | None = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.stale


@dataclass
class Session:
    """Working state for one editing pass.

    Each browser session gets its own Session instance, held in a
    ``gr.State`` and mutated only through ``WorkflowController``.

    Attributes
    ----------
    mode : WorkflowMode | None
        Upload or generate mode, None until chosen
    origin : OriginImage | None
        Image the session started from
    working_image : EncodedImage | None
        Image currently subject to editing
    edited_image : EncodedImage | None
        Result of the last edit
    quote : str
        Quote text, empty when unset
    hashtags : list[str]
        Hashtags for the current quote/image pair
    loading : LoadingState
        In-flight flags
    error : str | None
        Last human-readable error message
    stage : WorkflowStage
        Current workflow stage
    epoch : int
        Incremented on every reset; results tagged with an older epoch are discarded
    """

    mode: WorkflowMode | None = None
    origin: OriginImage | None = None
    working_image: EncodedImage | None = None
    edited_image: EncodedImage | None = None
    quote: str = ""
    hashtags: list[str] = field(default_factory=list)
    loading: LoadingState = field(default_factory=LoadingState)
    error: str | None = None
    stage: WorkflowStage = WorkflowStage.IDLE
    epoch: int = 0

    # User selections
    style: StyleSelection = field(default_factory=StyleSelection)
    aspect_ratio: AspectRatio = field(default_factory=AspectRatio.default)
    instruction: str = ""  # Free-form edit instruction
    watermark: str = ""
    generation_prompt: str = ""  # Prompt for AI image generation

    def has_image(self) -> bool:
        """Check if a working image is present."""
        return self.working_image is not None

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Session(stage={self.stage.value}, mode={self.mode.value if self.mode else None}, "
            f"epoch={self.epoch}, edited={self.edited_image is not None}, "
            f"hashtags={len(self.hashtags)})"
        )
