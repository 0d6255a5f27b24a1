"""
Life Weeks Image Generation Service

Rasterizes a WeekBreakdown into a 'Life in Weeks' grid PNG: one row per year,
52 cells per row, lived weeks filled orange and future weeks left white. The
PNG can be wrapped as a ``data:`` URI and handed to the snapshot store.
"""

import base64
import logging
import math
from io import BytesIO
from typing import Tuple, Union

from PIL import Image, ImageDraw, ImageFont
from PIL.ImageFont import FreeTypeFont

from .life_weeks_domain import (
    WEEKS_PER_YEAR,
    CellState,
    WeekBreakdown,
    format_summary,
    week_cells,
)

logger = logging.getLogger(__name__)

# Constants for grid design
CELL_SIZE = 12  # pixels
CELL_GAP = 2  # pixels between cells
GRID_PADDING = 40  # pixels around the grid
HEADER_HEIGHT = 70  # pixels for the title above the grid
TEXT_AREA_HEIGHT = 90  # pixels for text overlay at bottom

# Colors (RGB)
LIVED_COLOR = (251, 146, 60)  # Orange
FUTURE_COLOR = (255, 255, 255)  # White
CELL_BORDER_COLOR = (0, 0, 0)
TEXT_COLOR = (0, 0, 0)
BACKGROUND_COLOR = (255, 255, 255)
HEADER_COLOR = (255, 222, 89)  # Yellow title band

FONT_PATHS = (
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
)

PNG_MIME = "image/png"


def grid_rows(breakdown: WeekBreakdown) -> int:
    """Number of year rows needed to show every cell (at least one)."""
    return max(1, math.ceil(breakdown.grid_length / WEEKS_PER_YEAR))


def _calculate_grid_dimensions(rows: int) -> Tuple[int, int]:
    """Calculate image dimensions based on grid size."""
    pitch = CELL_SIZE + CELL_GAP
    grid_width = (WEEKS_PER_YEAR * pitch) + (2 * GRID_PADDING)
    grid_height = (
        (rows * pitch) + (2 * GRID_PADDING) + HEADER_HEIGHT + TEXT_AREA_HEIGHT
    )
    return grid_width, grid_height


def _load_font(size: int) -> Union[FreeTypeFont, ImageFont.ImageFont]:
    for path in FONT_PATHS:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default(size)


def _draw_cells(
    draw: ImageDraw.ImageDraw, x_offset: int, y_offset: int, breakdown: WeekBreakdown
) -> None:
    """Draw lived and future cells, one row per year."""
    pitch = CELL_SIZE + CELL_GAP

    for cell in week_cells(breakdown):
        row = cell.index // WEEKS_PER_YEAR
        col = cell.index % WEEKS_PER_YEAR

        x = x_offset + (col * pitch)
        y = y_offset + (row * pitch)

        color = LIVED_COLOR if cell.state is CellState.LIVED else FUTURE_COLOR
        draw.rectangle(
            [x, y, x + CELL_SIZE - 1, y + CELL_SIZE - 1],
            fill=color,
            outline=CELL_BORDER_COLOR,
        )


def _draw_header(draw: ImageDraw.ImageDraw, image_width: int) -> None:
    draw.rectangle(
        [GRID_PADDING, GRID_PADDING // 2, image_width - GRID_PADDING, HEADER_HEIGHT],
        fill=HEADER_COLOR,
        outline=CELL_BORDER_COLOR,
        width=2,
    )
    draw.text(
        (image_width // 2, (GRID_PADDING // 2 + HEADER_HEIGHT) // 2),
        "Life in Weeks",
        fill=TEXT_COLOR,
        font=_load_font(28),
        anchor="mm",
    )


def _draw_text_overlay(
    draw: ImageDraw.ImageDraw,
    image_width: int,
    image_height: int,
    breakdown: WeekBreakdown,
) -> None:
    """Draw the stats line and summary under the grid."""
    text_y_start = image_height - TEXT_AREA_HEIGHT

    stats_text = (
        f"Weeks lived {breakdown.weeks_lived:,}  |  "
        f"Weeks dreaming {breakdown.sleep_weeks:,}  |  "
        f"Future awake weeks {breakdown.awake_weeks:,}"
    )
    draw.text(
        (image_width // 2, text_y_start),
        stats_text,
        fill=TEXT_COLOR,
        font=_load_font(18),
        anchor="mt",
    )

    summary_font = _load_font(13)
    for i, line in enumerate(format_summary(breakdown).split(". ", 1)):
        draw.text(
            (image_width // 2, text_y_start + 32 + i * 20),
            line,
            fill=TEXT_COLOR,
            font=summary_font,
            anchor="mt",
        )


def render_grid_image(breakdown: WeekBreakdown) -> Image.Image:
    """Draw the full grid visualization for a breakdown."""
    image_width, image_height = _calculate_grid_dimensions(grid_rows(breakdown))

    image = Image.new("RGB", (image_width, image_height), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)

    _draw_header(draw, image_width)
    _draw_cells(draw, GRID_PADDING, GRID_PADDING + HEADER_HEIGHT, breakdown)
    _draw_text_overlay(draw, image_width, image_height, breakdown)

    return image


def render_grid_png(breakdown: WeekBreakdown) -> bytes:
    """
    Generate a 'Life in Weeks' grid visualization as PNG bytes.

    Args:
        breakdown: Week accounting to visualize

    Returns:
        PNG-encoded image
    """
    image = render_grid_image(breakdown)
    buffer = BytesIO()
    image.save(buffer, "PNG", optimize=True)
    data = buffer.getvalue()
    logger.info(
        "Generated life weeks grid: %dx%d, %d bytes",
        image.width,
        image.height,
        len(data),
    )
    return data


def to_data_uri(png_bytes: bytes, mime_type: str = PNG_MIME) -> str:
    """Wrap encoded image bytes as an embeddable ``data:`` URI."""
    encoded = base64.b64encode(png_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
