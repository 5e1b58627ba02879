from __future__ import annotations

from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from solver.rules import SolverState, capped_sum

CARD_W, CARD_H = 56, 76
STEP_Y = 22
GAP = 14
M = 16
HEADER_H = 34
RANKS = ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"]

TABLE_BG = (27, 67, 50)
CARD_BG = (250, 250, 245)
CARD_BORDER = (17, 24, 39)
FACE_COLOR = (185, 28, 28)
PIP_COLOR = (17, 24, 39)
STACK_OUTLINE = (241, 245, 249)
TEXT_COLOR = (241, 245, 249)


def font(size):
    for name in ("DejaVuSans-Bold.ttf", "Arial.ttf", "Helvetica.ttc"):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            pass
    return ImageFont.load_default()


def _column_height(length):
    if length <= 0:
        return CARD_H
    return CARD_H + STEP_Y * (length - 1)


def draw_card(d, x, y, rank, f):
    color = FACE_COLOR if rank > 10 else PIP_COLOR
    d.rounded_rectangle((x, y, x + CARD_W, y + CARD_H), radius=6, fill=CARD_BG, outline=CARD_BORDER, width=2)
    d.text((x + 6, y + 3), RANKS[rank - 1], fill=color, font=f)


def draw_column(d, x, y, cards, f, outline=STACK_OUTLINE):
    if not cards:
        d.rounded_rectangle((x, y, x + CARD_W, y + CARD_H), radius=6, outline=outline, width=1)
        return
    for i, rank in enumerate(cards):
        draw_card(d, x, y + i * STEP_Y, rank, f)


def render_state_image(state: SolverState, out_path: Optional[Path] = None) -> Image.Image:
    """Draw the piles (bottom card at the top of each column) and the running stack."""

    columns = list(state.piles) + [state.stack]
    width = M * 2 + len(columns) * CARD_W + (len(columns) - 1) * GAP + GAP
    tallest = max(_column_height(len(cards)) for cards in columns)
    height = M * 2 + HEADER_H + tallest

    img = Image.new("RGB", (width, height), TABLE_BG)
    d = ImageDraw.Draw(img)
    card_font = font(16)
    d.text((M, M), f"Score: {state.score}   Stack: {capped_sum(state.stack)}", fill=TEXT_COLOR, font=font(18))

    top = M + HEADER_H
    for idx, pile in enumerate(state.piles):
        draw_column(d, M + idx * (CARD_W + GAP), top, pile, card_font)
    # Extra gap separates the stack from the piles.
    stack_x = M + len(state.piles) * (CARD_W + GAP) + GAP
    draw_column(d, stack_x, top, state.stack, card_font)

    if out_path is not None:
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        img.save(out_path, "PNG")
    return img
