from __future__ import annotations
import math
import re
from dataclasses import dataclass, field
from typing import List, Tuple

Point = Tuple[float, float]

token_pattern = re.compile(r'[MmLlHhVvCcSsQqTtAaZz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')

@dataclass
class Subpath:
    points: List[Point] = field(default_factory=list)
    closed: bool = False

def _midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)

def subdivide_cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point,
                           tolerance: float = 0.5) -> List[Point]:
    points = [p0]

    def flatness(p0, p1, p2, p3):
        ux = 3 * p1[0] - 2 * p0[0] - p3[0]
        uy = 3 * p1[1] - 2 * p0[1] - p3[1]
        vx = 3 * p2[0] - 2 * p3[0] - p0[0]
        vy = 3 * p2[1] - 2 * p3[1] - p0[1]
        return max(ux * ux + uy * uy, vx * vx + vy * vy)

    def subdivide(p0, p1, p2, p3, depth=0):
        # NaN flatness never compares below tolerance, the depth cap stops it
        if depth > 10 or flatness(p0, p1, p2, p3) < tolerance * tolerance:
            points.append(p3)
            return

        m01 = _midpoint(p0, p1)
        m12 = _midpoint(p1, p2)
        m23 = _midpoint(p2, p3)
        m012 = _midpoint(m01, m12)
        m123 = _midpoint(m12, m23)
        m0123 = _midpoint(m012, m123)

        subdivide(p0, m01, m012, m0123, depth + 1)
        subdivide(m0123, m123, m23, p3, depth + 1)

    subdivide(p0, p1, p2, p3)
    return points

def subdivide_quadratic_bezier(p0: Point, p1: Point, p2: Point,
                               tolerance: float = 0.5) -> List[Point]:
    points = [p0]

    def flatness(p0, p1, p2):
        ux = 2 * p1[0] - p0[0] - p2[0]
        uy = 2 * p1[1] - p0[1] - p2[1]
        return ux * ux + uy * uy

    def subdivide(p0, p1, p2, depth=0):
        if depth > 10 or flatness(p0, p1, p2) < tolerance * tolerance:
            points.append(p2)
            return

        m01 = _midpoint(p0, p1)
        m12 = _midpoint(p1, p2)
        m012 = _midpoint(m01, m12)

        subdivide(p0, m01, m012, depth + 1)
        subdivide(m012, m12, p2, depth + 1)

    subdivide(p0, p1, p2)
    return points

def approximate_arc(x1: float, y1: float, rx: float, ry: float,
                    rotation: float, large_arc: bool, sweep: bool,
                    x2: float, y2: float) -> List[Point]:
    if rx == 0 or ry == 0:
        return [(x1, y1), (x2, y2)]

    cos_phi = math.cos(math.radians(rotation))
    sin_phi = math.sin(math.radians(rotation))

    dx = (x1 - x2) / 2
    dy = (y1 - y2) / 2
    x1p = cos_phi * dx + sin_phi * dy
    y1p = -sin_phi * dx + cos_phi * dy

    rx = abs(rx)
    ry = abs(ry)

    lambda_val = (x1p * x1p) / (rx * rx) + (y1p * y1p) / (ry * ry)
    if lambda_val > 1:
        rx *= math.sqrt(lambda_val)
        ry *= math.sqrt(lambda_val)

    denominator = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    if denominator == 0:
        return [(x1, y1), (x2, y2)]
    factor = math.sqrt(max(0, (rx * rx * ry * ry - denominator) / denominator))

    if large_arc == sweep:
        factor = -factor

    cxp = factor * rx * y1p / ry
    cyp = -factor * ry * x1p / rx

    cx = cos_phi * cxp - sin_phi * cyp + (x1 + x2) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (y1 + y2) / 2

    theta1 = math.atan2((y1p - cyp) / ry, (x1p - cxp) / rx)
    dtheta = math.atan2((-y1p - cyp) / ry, (-x1p - cxp) / rx) - theta1

    if sweep and dtheta < 0:
        dtheta += 2 * math.pi
    elif not sweep and dtheta > 0:
        dtheta -= 2 * math.pi

    num_segments = max(4, int(abs(dtheta) / (math.pi / 16)) + 1)
    points = []

    for i in range(num_segments + 1):
        theta = theta1 + dtheta * i / num_segments
        x = cx + rx * math.cos(theta) * cos_phi - ry * math.sin(theta) * sin_phi
        y = cy + rx * math.cos(theta) * sin_phi + ry * math.sin(theta) * cos_phi
        points.append((x, y))

    return points

def _tokenize(path_str: str) -> List[Tuple[str, List[float]]]:
    commands = []
    for token in token_pattern.findall(path_str):
        if token.isalpha():
            commands.append((token, []))
        elif commands:
            commands[-1][1].append(float(token))
    return commands

def parse_path(path_str: str) -> List[Subpath]:
    """Flatten a path-command string into polyline subpaths.

    Curves and arcs are subdivided into line segments. ``Z`` marks the
    current subpath closed; drawing resumes from its start point.
    """
    if not path_str:
        return []

    subpaths: List[Subpath] = []
    current: Subpath = None
    current_x, current_y = 0.0, 0.0
    start_x, start_y = 0.0, 0.0
    prev_cp = None
    prev_qcp = None

    def begin(x, y):
        nonlocal current
        current = Subpath(points=[(x, y)])
        subpaths.append(current)

    def line_to(x, y):
        if current is None or current.closed:
            begin(start_x, start_y)
        current.points.append((x, y))

    def extend(points):
        if current is None or current.closed:
            begin(start_x, start_y)
        current.points.extend(points[1:])

    for cmd, numbers in _tokenize(path_str):
        is_relative = cmd.islower()
        cmd_upper = cmd.upper()
        last_cp, last_qcp = prev_cp, prev_qcp
        prev_cp = prev_qcp = None

        if cmd_upper == 'Z':
            if current is not None and not current.closed:
                current.closed = True
            current_x, current_y = start_x, start_y

        elif cmd_upper == 'M':
            for i in range(0, len(numbers) - 1, 2):
                if is_relative:
                    current_x += numbers[i]
                    current_y += numbers[i + 1]
                else:
                    current_x, current_y = numbers[i], numbers[i + 1]
                if i == 0:
                    start_x, start_y = current_x, current_y
                    begin(current_x, current_y)
                else:
                    line_to(current_x, current_y)

        elif cmd_upper == 'L':
            for i in range(0, len(numbers) - 1, 2):
                if is_relative:
                    current_x += numbers[i]
                    current_y += numbers[i + 1]
                else:
                    current_x, current_y = numbers[i], numbers[i + 1]
                line_to(current_x, current_y)

        elif cmd_upper == 'H':
            for num in numbers:
                current_x = current_x + num if is_relative else num
                line_to(current_x, current_y)

        elif cmd_upper == 'V':
            for num in numbers:
                current_y = current_y + num if is_relative else num
                line_to(current_x, current_y)

        elif cmd_upper in ('C', 'S'):
            step = 6 if cmd_upper == 'C' else 4
            for i in range(0, len(numbers) - step + 1, step):
                ox, oy = (current_x, current_y) if is_relative else (0.0, 0.0)
                if cmd_upper == 'C':
                    cp1 = (ox + numbers[i], oy + numbers[i + 1])
                    rest = numbers[i + 2:i + 6]
                elif last_cp is not None:
                    cp1 = (2 * current_x - last_cp[0], 2 * current_y - last_cp[1])
                    rest = numbers[i:i + 4]
                else:
                    cp1 = (current_x, current_y)
                    rest = numbers[i:i + 4]
                cp2 = (ox + rest[0], oy + rest[1])
                end = (ox + rest[2], oy + rest[3])
                extend(subdivide_cubic_bezier((current_x, current_y), cp1, cp2, end))
                current_x, current_y = end
                last_cp = prev_cp = cp2

        elif cmd_upper in ('Q', 'T'):
            step = 4 if cmd_upper == 'Q' else 2
            for i in range(0, len(numbers) - step + 1, step):
                ox, oy = (current_x, current_y) if is_relative else (0.0, 0.0)
                if cmd_upper == 'Q':
                    cp = (ox + numbers[i], oy + numbers[i + 1])
                    end = (ox + numbers[i + 2], oy + numbers[i + 3])
                else:
                    if last_qcp is not None:
                        cp = (2 * current_x - last_qcp[0], 2 * current_y - last_qcp[1])
                    else:
                        cp = (current_x, current_y)
                    end = (ox + numbers[i], oy + numbers[i + 1])
                extend(subdivide_quadratic_bezier((current_x, current_y), cp, end))
                current_x, current_y = end
                last_qcp = prev_qcp = cp

        elif cmd_upper == 'A':
            for i in range(0, len(numbers) - 6, 7):
                rx, ry, rotation = numbers[i], numbers[i + 1], numbers[i + 2]
                large_arc = bool(int(numbers[i + 3]))
                sweep = bool(int(numbers[i + 4]))
                if is_relative:
                    end_x = current_x + numbers[i + 5]
                    end_y = current_y + numbers[i + 6]
                else:
                    end_x, end_y = numbers[i + 5], numbers[i + 6]
                extend(approximate_arc(current_x, current_y, rx, ry, rotation,
                                       large_arc, sweep, end_x, end_y))
                current_x, current_y = end_x, end_y

    return subpaths
