"""Prompt composition for image edits, quotes and hashtags.

The image edit prompt is assembled from up to three blocks::

    [Base instruction, or the default enhancement instruction]

    --- TEXT OVERLAY INSTRUCTIONS ---
    [Numbered rules: exact text, font, color & style, placement]

    --- WATERMARK INSTRUCTIONS ---
    [Exact watermark text, bottom-right, small and semi-transparent]

Blocks are emitted in that order and only when they apply. The backend is
prompt-sensitive, so the headers and numbered rules are kept fixed.

Usage
-----
::

    prompt = compose_edit_prompt(
        "Make the sky more dramatic",
        quote="Adventure awaits",
        style=StyleSelection(font=Font.CAVEAT, position=QuotePosition.BOTTOM),
        watermark="@traveler",
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .catalog import ColorPalette, Font, QuotePosition

# ---------------------------------------------------------------------------
# Fixed request templates.
# ---------------------------------------------------------------------------

DEFAULT_EDIT_INSTRUCTION = (
    "Subtly enhance the colors and lighting to make the image more vibrant and "
    "appealing for social media."
)

QUOTE_REQUEST = (
    "Generate a short, motivational quote about travel with friends, stepping into the "
    "outdoors, and connecting with nature. The quote should be inspiring and concise, "
    "perfect for an Instagram post. No quotation marks."
)

HASHTAG_FALLBACK_CONTEXT = "a stunning travel photo featuring nature and friends"

_DEFAULT_SHADOW = "a subtle shadow for readability"


@dataclass(frozen=True)
class StyleSelection:
    """Quote overlay style: one font, one palette, one placement.

    Each field defaults to the first entry of its catalog.
    """

    font: Font = field(default_factory=Font.default)
    palette: ColorPalette = field(default_factory=ColorPalette.default)
    position: QuotePosition = field(default_factory=QuotePosition.default)


def _quote_block(quote: str, style: StyleSelection) -> str:
    shadow = style.palette.text_shadow or _DEFAULT_SHADOW
    return (
        "\n\n--- TEXT OVERLAY INSTRUCTIONS ---\n"
        "Please add the following text to the image, following these rules precisely:\n"
        f'1. EXACT TEXT: "{quote}"\n'
        f"2. FONT: Use a font that strongly resembles '{style.font.family}'.\n"
        f"3. COLOR & STYLE: The text color must be {style.palette.text_color}. "
        f"Apply {shadow}.\n"
        f"4. PLACEMENT: Position the text block in the {style.position.value} area of the "
        "image. It must be aesthetically pleasing and not cover any key subjects.\n"
    )


def _watermark_block(watermark: str) -> str:
    return (
        "\n--- WATERMARK INSTRUCTIONS ---\n"
        f'Add a discreet watermark with the text "{watermark}" in the bottom-right corner. '
        "It should be small and semi-transparent.\n"
    )


def compose_edit_prompt(
    base_instruction: str | None,
    quote: str | None = None,
    style: StyleSelection | None = None,
    watermark: str | None = None,
) -> str:
    """Build the instruction sent with an image edit request.

    Args:
        base_instruction: User's free-form edit instruction (may be empty)
        quote: Exact quote text to render on the image (optional)
        style: Font, palette and placement for the quote (first entries if omitted)
        watermark: Exact watermark text (optional)

    Returns:
        Composed instruction string. With no instruction, quote or watermark
        this is exactly ``DEFAULT_EDIT_INSTRUCTION``.
    """
    prompt = base_instruction or ""

    if not prompt and not quote and not watermark:
        prompt = DEFAULT_EDIT_INSTRUCTION

    if quote:
        prompt += _quote_block(quote, style or StyleSelection())

    if watermark:
        prompt += _watermark_block(watermark)

    return prompt


def build_hashtag_request(context: str, count: int = 10) -> str:
    """Build the hashtag request for a quote or fallback context.

    Args:
        context: Quote text, or ``HASHTAG_FALLBACK_CONTEXT`` when there is none
        count: Number of hashtags to request

    Returns:
        Request text for the backend
    """
    return (
        f'Based on the quote "{context}", generate an array of {count} trending and '
        "relevant Instagram hashtags to maximize reach."
    )
