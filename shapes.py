"""Shape descriptors consumed by the renderer.

A ShapeDescriptor is one visual primitive of the scene: its kind, raw
geometry fields, parsed style and resolved rough options. Descriptors are
immutable and are rebuilt for every render pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from geometry import parse_number
from settings import RoughOptions


class ShapeKind(str, Enum):
    """Shape kinds understood by the dispatcher."""

    RECT = "rect"
    CIRCLE = "circle"
    PATH = "path"
    LINEAR_PATH = "linearPath"
    TEXT = "text"


STYLE_KEYS = {
    "fill": "fill",
    "fill-opacity": "fill_opacity",
    "stroke": "stroke",
    "stroke-opacity": "stroke_opacity",
    "stroke-width": "stroke_width",
    "font-size": "font_size",
    "font-family": "font_family",
    "font-weight": "font_weight",
}


def parse_style_attrs(style: Optional[str]) -> dict[str, str]:
    """Split a ``"key: value; key: value"`` attribute into a mapping.

    Declarations without a value are dropped; whitespace is squished.
    """
    result: dict[str, str] = {}
    if not style:
        return result
    for declaration in style.split(";"):
        if ":" not in declaration:
            continue
        key, value = declaration.split(":", 1)
        key = " ".join(key.split())
        if key:
            result[key] = " ".join(value.split())
    return result


@dataclass(frozen=True)
class Style:
    """Style attributes of a shape; None marks an absent key."""

    fill: Optional[str] = None
    fill_opacity: Optional[str] = None
    stroke: Optional[str] = None
    stroke_opacity: Optional[str] = None
    stroke_width: Optional[str] = None
    font_size: Optional[str] = None
    font_family: Optional[str] = None
    font_weight: Optional[str] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Style:
        values = {}
        for key, name in STYLE_KEYS.items():
            value = mapping.get(key)
            if value is not None:
                values[name] = str(value)
        return cls(**values)

    @classmethod
    def from_css(cls, text: str) -> Style:
        return cls.from_mapping(parse_style_attrs(text))


@dataclass(frozen=True)
class ShapeDescriptor:
    """One shape of the scene.

    Attributes:
        kind: Which geometry handler draws the shape
        geometry: Kind-specific fields (x/y/width/height, cx/cy/r, points, ...)
        style: Parsed style, or None when the shape carries none
        rough: Resolved sketchiness options
        transform: Raw transform attribute (text only)
        content: Text content (text only)
        font_weight: Font weight carried on the shape itself
    """

    kind: ShapeKind
    geometry: Mapping[str, Any] = field(default_factory=dict)
    style: Optional[Style] = None
    rough: RoughOptions = field(default_factory=RoughOptions)
    transform: Optional[str] = None
    content: Optional[str] = None
    font_weight: Optional[str] = None

    def number(self, key: str) -> float:
        return parse_number(self.geometry.get(key))

    def text(self, key: str) -> Optional[str]:
        value = self.geometry.get(key)
        return None if value is None else str(value)
