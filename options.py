from __future__ import annotations
import math
from dataclasses import dataclass, replace
from typing import Optional

from colors import TRANSPARENT, fill_color_string, stroke_color_string
from geometry import parse_number
from noise import RandomSource, perturb_angle, perturb_gap
from shapes import ShapeDescriptor

# Any other roughness displaces dot positions in the dot filler
DOTS_ROUGHNESS = 1.0

@dataclass(frozen=True)
class StrokeOptions:
    stroke: str = TRANSPARENT
    stroke_width: float = math.nan

@dataclass(frozen=True)
class FillOptions:
    fill: Optional[str] = None
    fill_style: Optional[str] = None
    fill_weight: Optional[float] = None
    hachure_gap: Optional[float] = None
    hachure_angle: Optional[float] = None
    roughness: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self == FillOptions()

@dataclass(frozen=True)
class RenderOptions:
    """Everything a sketch primitive needs for one draw call."""

    bowing: float
    roughness: float
    stroke: str = TRANSPARENT
    stroke_width: float = math.nan
    fill: Optional[str] = None
    fill_style: Optional[str] = None
    fill_weight: Optional[float] = None
    hachure_gap: Optional[float] = None
    hachure_angle: Optional[float] = None

class RenderOptionsBuilder:
    """Accumulates RenderOptions stage by stage.

    Structural options come first, then stroke, then fill. Each stage only
    touches the fields it owns, except that a fill fragment may pin the
    roughness.
    """

    def __init__(self, bowing: float, roughness: float):
        self._options = RenderOptions(bowing=bowing, roughness=roughness)

    def with_stroke(self, stroke: StrokeOptions) -> RenderOptionsBuilder:
        self._options = replace(self._options, stroke=stroke.stroke,
                                stroke_width=stroke.stroke_width)
        return self

    def with_fill(self, fill: FillOptions) -> RenderOptionsBuilder:
        if fill.is_empty:
            return self
        self._options = replace(
            self._options,
            fill=fill.fill,
            fill_style=fill.fill_style,
            fill_weight=fill.fill_weight,
            hachure_gap=fill.hachure_gap,
            hachure_angle=fill.hachure_angle,
        )
        if fill.roughness is not None:
            self._options = replace(self._options, roughness=fill.roughness)
        return self

    def build(self) -> RenderOptions:
        return self._options

def build_stroke_options(shape: ShapeDescriptor) -> StrokeOptions:
    style = shape.style
    # width is not defaulted: an absent stroke-width stays NaN
    width = parse_number(style.stroke_width) if style is not None else math.nan
    return StrokeOptions(stroke=stroke_color_string(style), stroke_width=width)

def build_fill_options(shape: ShapeDescriptor, rng: RandomSource) -> FillOptions:
    style = shape.style
    if style is None or style.fill is None:
        return FillOptions()

    rough = shape.rough
    fill_style = rough.fill_style
    fill_weight = None
    gap = None
    angle = None
    roughness = None

    if fill_style != "solid":
        fill_weight = rough.fill_weight
        gap = perturb_gap(rough.gap, rough.gap_noise, rng)
    if fill_style == "dots":
        roughness = DOTS_ROUGHNESS
    elif fill_style != "solid":
        angle = perturb_angle(rough.angle, rough.angle_noise, rng)

    return FillOptions(
        fill=fill_color_string(style, rough.alpha_over),
        fill_style=fill_style,
        fill_weight=fill_weight,
        hachure_gap=gap,
        hachure_angle=angle,
        roughness=roughness,
    )

def build_render_options(shape: ShapeDescriptor, rng: RandomSource,
                         with_fill: bool = True) -> RenderOptions:
    # noise is resampled on every call, nothing here is cached
    builder = RenderOptionsBuilder(shape.rough.bowing, shape.rough.roughness)
    builder.with_stroke(build_stroke_options(shape))
    if with_fill:
        builder.with_fill(build_fill_options(shape, rng))
    return builder.build()
