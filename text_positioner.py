from __future__ import annotations
import math
from typing import Optional

import structlog

from colors import format_number
from geometry import parse_text_transform, strip_unit
from shapes import ShapeDescriptor
from surface import DrawingSurface, saved_state

logger = structlog.get_logger(__name__)

DEFAULT_TEXT_FILL = "#000000"
DEFAULT_FONT_FAMILY = "sans-serif"

def font_string(shape: ShapeDescriptor, font: Optional[str] = None) -> str:
    style = shape.style
    size = strip_unit(style.font_size if style else None)
    family = font
    if family is None:
        family = style.font_family if style and style.font_family else DEFAULT_FONT_FAMILY

    css = f"{format_number(size)}px {family}"
    weight = shape.font_weight
    if weight is None and style is not None:
        weight = style.font_weight
    if weight is not None:
        css = f"{weight} {css}"
    return css

def text_fill(shape: ShapeDescriptor) -> str:
    if shape.style is not None and shape.style.fill is not None:
        return shape.style.fill
    return DEFAULT_TEXT_FILL

def rotation_for(angle: float) -> float:
    # only the sign of the angle is used: labels are either up or down
    return -math.pi / 2 if angle < 0 else math.pi / 2

def draw_text(surface: DrawingSurface, shape: ShapeDescriptor, font: Optional[str] = None):
    surface.set_font(font_string(shape, font))
    surface.set_fill_style(text_fill(shape))
    content = shape.content or ""

    anchor = parse_text_transform(shape.transform)
    if anchor is None:
        if shape.transform is not None:
            logger.debug("Unreadable text transform", transform=shape.transform)
        surface.fill_text(content, shape.number("x"), shape.number("y"))
        return

    tx, ty, rotation = anchor
    with saved_state(surface):
        surface.translate(tx, ty)
        if rotation is not None:
            surface.rotate(rotation_for(rotation))
        surface.fill_text(content, 0, 0)
