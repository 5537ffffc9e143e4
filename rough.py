"""Sketchy drawing primitives on top of a RasterSurface.

Strokes are drawn twice as jittered cubic curves whose midpoints bow away
from the straight line; fills are either solid polygons or scan-line
patterns (hachure, cross-hatch, zigzag, dots). Every random draw goes
through the random source given at construction.
"""

from __future__ import annotations

import math
from typing import List, Sequence

from colors import parse_css_color
from geometry import Point, hachure_segments
from noise import RandomSource
from options import RenderOptions
from path_parser import parse_path, subdivide_cubic_bezier
from raster import RasterSurface

MAX_RANDOMNESS_OFFSET = 2.0
MIN_ELLIPSE_STEPS = 9
MAX_ELLIPSE_STEPS = 90


class RoughCanvas:
    """Implements the SketchCanvas capability."""

    def __init__(self, surface: RasterSurface, random_source: RandomSource) -> None:
        self.surface = surface
        self._rng = random_source

    def rectangle(self, x: float, y: float, width: float, height: float,
                  options: RenderOptions) -> None:
        corners = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        self._fill([corners], options)
        self._stroke(self._polyline_strokes(corners, options, close=True), options)

    def circle(self, x: float, y: float, diameter: float, options: RenderOptions) -> None:
        radius = abs(diameter) / 2
        if not math.isfinite(radius) or not (math.isfinite(x) and math.isfinite(y)):
            return
        outline = self._ellipse_points(x, y, radius, options, overlap=0)
        self._fill([outline], options)
        self._stroke([outline + outline[:1], self._ellipse_points(x, y, radius, options, overlap=2)],
                     options)

    def path(self, d: str, options: RenderOptions) -> None:
        subpaths = parse_path(d)
        self._fill([sp.points for sp in subpaths], options)
        strokes = []
        for sp in subpaths:
            strokes.extend(self._polyline_strokes(sp.points, options, close=sp.closed))
        self._stroke(strokes, options)

    def linear_path(self, points: Sequence[Point], options: RenderOptions) -> None:
        self._stroke(self._polyline_strokes(list(points), options, close=False), options)

    def _offset(self, low: float, high: float, roughness: float, gain: float = 1.0) -> float:
        return roughness * gain * (float(self._rng.random()) * (high - low) + low)

    def _offset_opt(self, x: float, roughness: float, gain: float = 1.0) -> float:
        return self._offset(-x, x, roughness, gain)

    def _rough_line(self, p1: Point, p2: Point, options: RenderOptions,
                    overlay: bool = False) -> List[Point]:
        roughness = options.roughness
        x1, y1 = p1
        x2, y2 = p2
        length = math.hypot(x2 - x1, y2 - y1)
        if length < 200:
            gain = 1.0
        elif length > 500:
            gain = 0.4
        else:
            gain = -0.0016668 * length + 1.233334

        offset = MAX_RANDOMNESS_OFFSET
        if offset * offset * 100 > length * length:
            offset = length / 10
        jitter = offset / 2 if overlay else offset

        diverge = 0.2 + float(self._rng.random()) * 0.2
        mid_x = self._offset_opt(options.bowing * MAX_RANDOMNESS_OFFSET * (y2 - y1) / 200,
                                 roughness, gain)
        mid_y = self._offset_opt(options.bowing * MAX_RANDOMNESS_OFFSET * (x1 - x2) / 200,
                                 roughness, gain)

        def j():
            return self._offset_opt(jitter, roughness, gain)

        start = (x1 + j(), y1 + j())
        cp1 = (mid_x + x1 + (x2 - x1) * diverge + j(), mid_y + y1 + (y2 - y1) * diverge + j())
        cp2 = (mid_x + x1 + 2 * (x2 - x1) * diverge + j(),
               mid_y + y1 + 2 * (y2 - y1) * diverge + j())
        end = (x2 + j(), y2 + j())
        return subdivide_cubic_bezier(start, cp1, cp2, end)

    def _polyline_strokes(self, points: List[Point], options: RenderOptions,
                          close: bool) -> List[List[Point]]:
        if len(points) < 2:
            return []
        pairs = list(zip(points, points[1:]))
        if close and len(points) > 2:
            pairs.append((points[-1], points[0]))
        strokes = []
        for a, b in pairs:
            strokes.append(self._rough_line(a, b, options))
            strokes.append(self._rough_line(a, b, options, overlay=True))
        return strokes

    def _ellipse_points(self, cx: float, cy: float, radius: float,
                        options: RenderOptions, overlap: int) -> List[Point]:
        roughness = options.roughness
        steps = int(max(MIN_ELLIPSE_STEPS, min(MAX_ELLIPSE_STEPS, 2 * math.pi * radius / 4)))
        increment = 2 * math.pi / steps
        start = self._offset_opt(0.5, roughness) - math.pi / 2
        wobble = max(radius * 0.02, 0.5)
        points = []
        for k in range(steps + overlap):
            theta = start + k * increment
            r = radius + self._offset_opt(wobble, roughness)
            points.append((cx + r * math.cos(theta), cy + r * math.sin(theta)))
        return points

    def _fill(self, polygons: List[List[Point]], options: RenderOptions) -> None:
        if options.fill is None:
            return
        color = parse_css_color(options.fill)
        polygons = [p for p in polygons if len(p) >= 3]
        if color[3] == 0 or not polygons:
            return

        fill_style = options.fill_style or "hachure"
        if fill_style == "solid":
            self.surface.fill_polygons(polygons, color)
            return

        gap = options.hachure_gap if options.hachure_gap is not None else 6.0
        angle = options.hachure_angle if options.hachure_angle is not None else 0.0
        weight = options.fill_weight
        if weight is None or not math.isfinite(weight) or weight <= 0:
            weight = 1.0

        segments = hachure_segments(polygons, angle, gap)
        if fill_style == "dots":
            self._dots(segments, gap, weight, options, color)
            return
        if fill_style == "cross-hatch":
            segments = segments + hachure_segments(polygons, angle + 90, gap)
        if fill_style == "zigzag":
            lines = self._zigzag(segments, options)
        else:
            lines = [self._rough_line(a, b, options) for a, b in segments]
        self.surface.stroke_polylines(lines, color, weight)

    def _zigzag(self, segments, options: RenderOptions) -> List[List[Point]]:
        chain = []
        for i, (a, b) in enumerate(segments):
            chain.extend([a, b] if i % 2 == 0 else [b, a])
        return [self._rough_line(a, b, options) for a, b in zip(chain, chain[1:])]

    def _dots(self, segments, gap: float, weight: float,
              options: RenderOptions, color) -> None:
        spacing = max(gap, 0.5) if math.isfinite(gap) else 6.0
        radius = weight / 2
        for (x1, y1), (x2, y2) in segments:
            length = math.hypot(x2 - x1, y2 - y1)
            count = int(length // spacing) + 1
            for k in range(count):
                t = 0.0 if length == 0 else min(1.0, (k * spacing + spacing / 2) / length)
                cx = x1 + (x2 - x1) * t + self._offset_opt(spacing / 4, options.roughness - 1)
                cy = y1 + (y2 - y1) * t + self._offset_opt(spacing / 4, options.roughness - 1)
                self.surface.fill_circle(cx, cy, radius, color)

    def _stroke(self, polylines: List[List[Point]], options: RenderOptions) -> None:
        color = parse_css_color(options.stroke)
        if color[3] == 0 or not polylines:
            return
        width = options.stroke_width
        # invalid widths fall back to a 1px line
        if not math.isfinite(width) or width <= 0:
            width = 1.0
        self.surface.stroke_polylines(polylines, color, width)
