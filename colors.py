from __future__ import annotations
import math
import re
from typing import TYPE_CHECKING, Optional

import structlog
from PIL import ImageColor

from geometry import parse_number

if TYPE_CHECKING:
    from shapes import Style

logger = structlog.get_logger(__name__)

# Invisible but well-formed; always safe to hand to a drawing primitive
TRANSPARENT = "rgba(255,255,255,0)"

hex_pattern = re.compile(r'#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})')
rgba_pattern = re.compile(r'rgba?\(([^)]*)\)', re.IGNORECASE)

def decode_color(hex_str: Optional[str]) -> Optional[tuple[int, int, int]]:
    """Decode ``#RRGGBB`` (prefix optional, case-insensitive) to channels.

    Anything else, including 3-digit shorthand, decodes to None.
    """
    if not isinstance(hex_str, str):
        return None
    match = hex_pattern.fullmatch(hex_str)
    if match is None:
        return None
    return (int(match.group(1), 16), int(match.group(2), 16), int(match.group(3), 16))

def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))

def rgba_string(rgb: tuple[int, int, int], opacity: float) -> str:
    r, g, b = rgb
    return f"rgba({r},{g},{b},{format_number(opacity)})"

def _encode(color: str, opacity: float, channel: str) -> str:
    rgb = decode_color(color)
    if rgb is None:
        logger.warning("Malformed colour encoding", channel=channel, value=color)
        return TRANSPARENT
    return rgba_string(rgb, opacity)

def fill_color_string(style: Optional[Style], alpha_over: float) -> Optional[str]:
    # None means there is no fill to draw at all
    if style is None or style.fill is None:
        return None

    opacity = 1.0
    if style.fill_opacity is not None:
        opacity = parse_number(style.fill_opacity)

    return _encode(style.fill, opacity / alpha_over, "fill")

def stroke_color_string(style: Optional[Style]) -> str:
    if (style is None or style.stroke is None or style.stroke == "none"
            or parse_number(style.stroke_width) == 0):
        return TRANSPARENT

    opacity = 1.0
    if style.stroke_opacity is not None:
        opacity = parse_number(style.stroke_opacity)

    return _encode(style.stroke, opacity, "stroke")

def parse_css_color(color_str: Optional[str]) -> tuple[int, int, int, int]:
    """Resolve a CSS colour to an RGBA tuple with 0-255 channels.

    Unusable input resolves to fully transparent black.
    """
    if not color_str:
        return (0, 0, 0, 0)

    color_str = color_str.strip()
    match = rgba_pattern.fullmatch(color_str)
    if match:
        values = [v.strip() for v in match.group(1).split(',')]
        if len(values) < 3:
            return (0, 0, 0, 0)
        channels = [parse_number(v) for v in values[:3]]
        alpha = parse_number(values[3]) if len(values) > 3 else 1.0
        if not all(math.isfinite(c) for c in channels) or not math.isfinite(alpha):
            return (0, 0, 0, 0)
        r, g, b = (max(0, min(255, int(c))) for c in channels)
        a = int(round(max(0.0, min(1.0, alpha)) * 255))
        return (r, g, b, a)

    try:
        rgb = ImageColor.getrgb(color_str)
    except ValueError:
        return (0, 0, 0, 0)
    if len(rgb) == 4:
        return rgb
    return (rgb[0], rgb[1], rgb[2], 255)
