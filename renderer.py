from __future__ import annotations
import math
import time
from typing import Iterable, Optional

import structlog

from exceptions import RenderError, RoughSketchError
from geometry import parse_points, strip_unit
from log_setup import RenderStats
from noise import RandomSource, default_random_source
from options import build_render_options
from shapes import ShapeDescriptor, ShapeKind
from surface import DrawingSurface, SketchCanvas
from text_positioner import draw_text

logger = structlog.get_logger(__name__)

# The declared radius measures a different radius than the sketch circle expects
CIRCLE_SCALE = 4

class SketchRenderer:
    """Draws an ordered list of shapes, later shapes over earlier ones."""

    def __init__(self, canvas: SketchCanvas, surface: DrawingSurface,
                 random_source: Optional[RandomSource] = None,
                 font: Optional[str] = None):
        self.canvas = canvas
        self.surface = surface
        self.random_source = random_source if random_source is not None else default_random_source()
        self.font = font
        self.stats = RenderStats()
        self._handlers = {
            ShapeKind.RECT: self.draw_rect,
            ShapeKind.CIRCLE: self.draw_circle,
            ShapeKind.PATH: self.draw_path,
            ShapeKind.LINEAR_PATH: self.draw_linear_path,
            ShapeKind.TEXT: self.draw_text,
        }

    def render(self, shapes: Iterable[ShapeDescriptor]) -> RenderStats:
        self.stats = RenderStats(start_time=time.perf_counter())
        logger.info("Render pass started")

        for index, shape in enumerate(shapes):
            logger.debug("Drawing shape", index=index, kind=shape.kind.value)
            try:
                self._handlers[shape.kind](shape)
            except RoughSketchError:
                raise
            except Exception as e:
                raise RenderError(index, shape.kind.value, str(e)) from e

        self.stats.end_time = time.perf_counter()
        logger.info(
            "Render pass finished",
            drawn=self.stats.drawn_count,
            skipped=self.stats.skipped_count,
            draw_calls=self.stats.draw_calls,
            duration_ms=round(self.stats.duration_seconds * 1000, 2),
        )
        return self.stats

    def draw_rect(self, shape: ShapeDescriptor):
        options = build_render_options(shape, self.random_source)
        x, y = shape.number("x"), shape.number("y")
        width, height = shape.number("width"), shape.number("height")

        # ceil(N) passes at opacity/N each; the canvas resamples its noise per pass
        for _ in range(math.ceil(shape.rough.alpha_over)):
            self.canvas.rectangle(x, y, width, height, options)
            self.stats.draw_calls += 1
        self.stats.drawn_count += 1

    def draw_circle(self, shape: ShapeDescriptor):
        options = build_render_options(shape, self.random_source)
        diameter = strip_unit(shape.geometry.get("r")) * CIRCLE_SCALE
        self.canvas.circle(shape.number("cx"), shape.number("cy"), diameter, options)
        self.stats.draw_calls += 1
        self.stats.drawn_count += 1

    def draw_path(self, shape: ShapeDescriptor):
        options = build_render_options(shape, self.random_source)
        self.canvas.path(shape.text("points") or "", options)
        self.stats.draw_calls += 1
        self.stats.drawn_count += 1

    def draw_linear_path(self, shape: ShapeDescriptor):
        if shape.style is not None and shape.style.stroke == "none":
            self.stats.skipped_count += 1
            return

        points = parse_points(shape.text("points"))
        options = build_render_options(shape, self.random_source, with_fill=False)
        self.canvas.linear_path(points, options)
        self.stats.draw_calls += 1
        self.stats.drawn_count += 1

    def draw_text(self, shape: ShapeDescriptor):
        draw_text(self.surface, shape, self.font)
        self.stats.draw_calls += 1
        self.stats.drawn_count += 1
