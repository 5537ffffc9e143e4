from __future__ import annotations
import math
import re
from typing import Any, Optional

Point = tuple[float, float]

INCHES_TO_PX = 96.0
CM_TO_PX = INCHES_TO_PX / 2.54
MM_TO_PX = CM_TO_PX / 10
PT_TO_PX = INCHES_TO_PX / 72.0
PC_TO_PX = PT_TO_PX * 12

number_pattern = re.compile(r'^([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Z%]*)$')
paren_pattern = re.compile(r'\(([^)]+)\)')
rotate_pattern = re.compile(r'rotate\(([^)]*)\)')
separator_pattern = re.compile(r'[,\s]+')
decimal_pattern = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?', re.ASCII)
infinity_pattern = re.compile(r'([-+]?)Infinity')
radix_pattern = re.compile(r'0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)')

def parse_number(value: Any) -> float:
    # Number() semantics: absent is NaN, blank is 0, garbage is NaN
    if value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return 0.0
    if decimal_pattern.fullmatch(text):
        return float(text)
    match = infinity_pattern.fullmatch(text)
    if match:
        return -math.inf if match.group(1) == "-" else math.inf
    if radix_pattern.fullmatch(text):
        return float(int(text, 0))
    return math.nan

def parse_number_with_unit(value: Any) -> tuple[float, str]:
    if isinstance(value, (int, float)):
        return (float(value), "")
    if not value or not isinstance(value, str):
        return (math.nan, "")

    match = number_pattern.match(value.strip())
    if match:
        return (float(match.group(1)), match.group(2) or "")

    return (math.nan, "")

def strip_unit(value: Any) -> float:
    return parse_number_with_unit(value)[0]

def normalize_length(value: Any) -> float:
    num_value, unit = parse_number_with_unit(value)
    unit = unit.lower()

    if unit in ("", "px"):
        return num_value
    elif unit == "pt":
        return num_value * PT_TO_PX
    elif unit == "pc":
        return num_value * PC_TO_PX
    elif unit == "in":
        return num_value * INCHES_TO_PX
    elif unit == "cm":
        return num_value * CM_TO_PX
    elif unit == "mm":
        return num_value * MM_TO_PX

    return num_value

def parse_points(points_str: Optional[str]) -> list[Point]:
    """Parse ``"x,y x,y ..."`` into an ordered list of points.

    Tokens that do not hold exactly one comma-separated pair are dropped.
    """
    if not points_str:
        return []

    points = []
    for token in points_str.split():
        parts = token.split(',')
        if len(parts) != 2:
            continue
        points.append((parse_number(parts[0]), parse_number(parts[1])))
    return points

def parse_text_transform(transform: Optional[str]) -> Optional[tuple[float, float, Optional[float]]]:
    """Extract ``(tx, ty, rotation)`` from ``translate(tx,ty) rotate(a)``.

    The first parenthesised group is read as the translation. Rotation is
    None when no ``rotate(...)`` is present.
    """
    if not transform:
        return None

    match = paren_pattern.search(transform)
    if match is None:
        return None

    values = [parse_number(v) for v in separator_pattern.split(match.group(1).strip()) if v]
    tx = values[0] if len(values) > 0 else 0.0
    ty = values[1] if len(values) > 1 else 0.0

    rotation = None
    rotate_match = rotate_pattern.search(transform)
    if rotate_match:
        args = [v for v in separator_pattern.split(rotate_match.group(1).strip()) if v]
        rotation = parse_number(args[0]) if args else 0.0

    return (tx, ty, rotation)

def rotate_point(point: Point, center: Point, degrees: float) -> Point:
    angle = math.radians(degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point[0] - center[0]
    dy = point[1] - center[1]
    return (center[0] + dx * cos_a - dy * sin_a,
            center[1] + dx * sin_a + dy * cos_a)

def hachure_segments(polygons: list[list[Point]], angle: float, gap: float) -> list[tuple[Point, Point]]:
    """Scan-line a set of polygons with parallel lines ``gap`` apart.

    Polygons are rotated so the hachure lines become horizontal, cut with
    horizontal scan lines using the even-odd rule, and the resulting
    segments are rotated back.
    """
    if not math.isfinite(gap) or not math.isfinite(angle):
        return []
    gap = max(gap, 0.1)
    rotation = angle + 90
    center = (0.0, 0.0)

    edges = []
    min_y = math.inf
    max_y = -math.inf
    for polygon in polygons:
        pts = [rotate_point(p, center, rotation) for p in polygon
               if math.isfinite(p[0]) and math.isfinite(p[1])]
        if len(pts) < 3:
            continue
        for i in range(len(pts)):
            a = pts[i]
            b = pts[(i + 1) % len(pts)]
            if a[1] != b[1]:
                edges.append((a, b))
            min_y = min(min_y, a[1])
            max_y = max(max_y, a[1])

    segments = []
    if not edges:
        return segments

    y = min_y + gap / 2
    while y < max_y:
        xs = []
        for a, b in edges:
            lo, hi = (a, b) if a[1] < b[1] else (b, a)
            if lo[1] <= y < hi[1]:
                xs.append(lo[0] + (y - lo[1]) * (hi[0] - lo[0]) / (hi[1] - lo[1]))
        xs.sort()
        for i in range(0, len(xs) - 1, 2):
            start = rotate_point((xs[i], y), center, -rotation)
            end = rotate_point((xs[i + 1], y), center, -rotation)
            segments.append((start, end))
        y += gap

    return segments
