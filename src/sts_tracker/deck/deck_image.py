"""Render a deck as a PNG strip of card tiles, for sharing alongside summary.html."""

from math import ceil

from PIL import Image, ImageDraw, ImageFont

from sts_tracker.deck.card import CardId

TILE_W, TILE_H = 150, 26
COLUMNS = 5
PADDING = 4

BACKGROUND = (30, 30, 30)
TEXT = (212, 212, 212)
# (fill, outline) per tile kind
TILE_BASE = ((51, 51, 51), (85, 85, 85))
TILE_UPGRADED = ((26, 76, 26), (68, 187, 68))


def _fit(draw: ImageDraw.ImageDraw, text: str, font, max_width: int) -> str:
    """Trim ``text`` with an ellipsis until it fits in ``max_width`` pixels."""
    if draw.textlength(text, font=font) <= max_width:
        return text
    while text and draw.textlength(text + "...", font=font) > max_width:
        text = text[:-1]
    return text + "..."


def render_deck_image(cards: list[str]) -> Image.Image:
    """One tile per card, row-major, upgraded cards in green."""
    rows = max(1, ceil(len(cards) / COLUMNS))
    width = PADDING + COLUMNS * (TILE_W + PADDING)
    height = PADDING + rows * (TILE_H + PADDING)

    image = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    for i, text in enumerate(cards):
        row, col = divmod(i, COLUMNS)
        x = PADDING + col * (TILE_W + PADDING)
        y = PADDING + row * (TILE_H + PADDING)
        fill, outline = TILE_UPGRADED if CardId.parse(text).level else TILE_BASE
        draw.rounded_rectangle((x, y, x + TILE_W - 1, y + TILE_H - 1), radius=4, fill=fill, outline=outline)
        draw.text((x + 6, y + 7), _fit(draw, text, font, TILE_W - 12), fill=TEXT, font=font)

    return image


def save_deck_image(cards: list[str], path) -> None:
    render_deck_image(cards).save(path, format="PNG")
