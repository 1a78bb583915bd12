"""Fixed style catalogs for quote overlays and image generation.

Every user-facing selection (font, color palette, quote placement, aspect
ratio) is a closed ``Enum`` whose members carry their display name and the
values that end up in backend prompts. The UI lists members by display name
and resolves them back with the ``from_label`` helpers, so an invalid
selection cannot travel past the UI boundary.

The first member of each enum is the default selection.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class FontStyle:
    """A font choice for the quote overlay."""

    label: str
    family: str


@dataclass(frozen=True)
class PaletteStyle:
    """A color palette for the quote overlay.

    ``swatch`` is the color shown on the picker button; ``text_shadow`` is a
    natural-language description passed to the backend.
    """

    label: str
    text_color: str
    swatch: str
    text_shadow: str | None = None


class _LabeledEnum(Enum):
    """Enum whose values expose a human-readable ``label``."""

    @property
    def label(self) -> str:
        return self.value.label

    @classmethod
    def labels(cls) -> list[str]:
        """Display names in catalog order."""
        return [member.label for member in cls]

    @classmethod
    def default(cls):
        """First catalog entry."""
        return next(iter(cls))

    @classmethod
    def from_label(cls, label: str):
        """Resolve a display name back to its member.

        Raises:
            ValueError: If no member has that display name
        """
        for member in cls:
            if member.label == label:
                return member
        raise ValueError(f"Unknown {cls.__name__} selection: {label!r}")


class Font(_LabeledEnum):
    MONTSERRAT = FontStyle("Montserrat", "Montserrat")
    PLAYFAIR = FontStyle("Playfair", "Playfair Display")
    OSWALD = FontStyle("Oswald", "Oswald")
    LATO = FontStyle("Lato", "Lato")
    RALEWAY = FontStyle("Raleway", "Raleway")
    MERRIWEATHER = FontStyle("Merriweather", "Merriweather")
    PACIFICO = FontStyle("Pacifico", "Pacifico")
    CAVEAT = FontStyle("Caveat", "Caveat")
    LOBSTER = FontStyle("Lobster", "Lobster")
    ROBOTO = FontStyle("Roboto", "Roboto")

    @property
    def family(self) -> str:
        return self.value.family


class ColorPalette(_LabeledEnum):
    ALPINE_SNOW = PaletteStyle("Alpine Snow", "#FFFFFF", "#FFFFFF", "a subtle black shadow")
    GOLDEN_HOUR = PaletteStyle("Golden Hour", "#FFD700", "#FACC15", "a soft dark brown shadow")
    SUNSET_GLOW = PaletteStyle("Sunset Glow", "#FF8C00", "#F97316", "a deep purple shadow")
    FOREST_CANOPY = PaletteStyle(
        "Forest Canopy", "#228B22", "#15803D", "a light mossy green glow"
    )
    OCEAN_DEEP = PaletteStyle("Ocean Deep", "#00008B", "#1E40AF", "a bright white outline")
    EARTHY_CLAY = PaletteStyle("Earthy Clay", "#A0522D", "#854D0E", "a soft cream outline")
    MISTY_MORNING = PaletteStyle("Misty Morning", "#B0C4DE", "#94A3B8", "a dark grey shadow")
    WILDFLOWER = PaletteStyle("Wildflower", "#DA70D6", "#DA70D6", "a crisp white shadow")
    CLASSIC_BLACK = PaletteStyle("Classic Black", "#000000", "#000000", "a subtle white shadow")
    VIBRANT_AQUA = PaletteStyle("Vibrant Aqua", "#00FFFF", "#22D3EE", "a deep blue shadow")

    @property
    def text_color(self) -> str:
        return self.value.text_color

    @property
    def swatch(self) -> str:
        return self.value.swatch

    @property
    def text_shadow(self) -> str | None:
        return self.value.text_shadow


class QuotePosition(Enum):
    """Placement zone of the quote block."""

    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def labels(cls) -> list[str]:
        return [member.label for member in cls]

    @classmethod
    def default(cls) -> "QuotePosition":
        return cls.TOP

    @classmethod
    def from_label(cls, label: str) -> "QuotePosition":
        for member in cls:
            if member.label == label or member.value == label:
                return member
        raise ValueError(f"Unknown QuotePosition selection: {label!r}")


class AspectRatio(Enum):
    """Aspect ratios supported by the image generation backend."""

    SQUARE = "1:1"
    LANDSCAPE = "16:9"
    STORY = "9:16"
    STANDARD = "4:3"
    PORTRAIT = "3:4"

    @property
    def label(self) -> str:
        return f"{_ASPECT_RATIO_NAMES[self.value]} ({self.value})"

    @classmethod
    def labels(cls) -> list[str]:
        return [member.label for member in cls]

    @classmethod
    def default(cls) -> "AspectRatio":
        return cls.SQUARE

    @classmethod
    def from_label(cls, label: str) -> "AspectRatio":
        for member in cls:
            if member.label == label or member.value == label:
                return member
        raise ValueError(f"Unknown AspectRatio selection: {label!r}")


_ASPECT_RATIO_NAMES = {
    "1:1": "Square",
    "16:9": "Landscape",
    "9:16": "Story",
    "4:3": "Standard",
    "3:4": "Portrait",
}


# Preset edit instructions offered as one-click themes
PRESET_EDITS: dict[str, str] = {
    "Retro Filter": (
        "Apply a warm, grainy retro filter to the image, reminiscent of a vintage photograph."
    ),
    "Nature Enhance": (
        "Enhance the natural elements. Make the greens more lush, the sky more blue, "
        "and add a soft, sunny glow."
    ),
    "Dramatic B&W": "Convert the image to a high-contrast, dramatic black and white.",
    "Remove Background": (
        "Remove the background, leaving only the main subject with a clean, "
        "transparent background."
    ),
}
