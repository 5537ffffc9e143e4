"""Scene loading and the caller-side shape validation.

Shape records arrive as mappings using the chart converter keys (``shape``,
geometry fields, ``style``, ``rough_options``, ``transform``, ``content``,
``font-weight``). Anything that cannot be drawn is rejected here, before it
reaches the renderer.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping

import structlog
from pydantic import ValidationError

from exceptions import SceneLoadError, ShapeValidationError
from settings import RenderSettings
from shapes import ShapeDescriptor, ShapeKind, Style

logger = structlog.get_logger(__name__)

REQUIRED_KEYS = {
    ShapeKind.RECT: ("x", "y", "width", "height"),
    ShapeKind.CIRCLE: ("cx", "cy", "r"),
    ShapeKind.PATH: ("points",),
    ShapeKind.LINEAR_PATH: ("points",),
    ShapeKind.TEXT: ("content",),
}

RESERVED_KEYS = {"shape", "style", "rough_options", "transform", "content", "font-weight"}


@dataclass
class Scene:
    """A batch of shapes plus the surface size they were laid out for."""

    width: int
    height: int
    shapes: list[ShapeDescriptor] = field(default_factory=list)
    skipped: int = 0


def _parse_style(kind: ShapeKind, raw: Any) -> Style | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return Style.from_css(raw)
    if isinstance(raw, Mapping):
        return Style.from_mapping(raw)
    raise ShapeValidationError(kind.value, "style must be a flat mapping, not a collection")


def shape_from_mapping(data: Any, settings: RenderSettings) -> ShapeDescriptor:
    """Validate one shape record and build its descriptor.

    Raises:
        ShapeValidationError: if the record cannot be drawn
    """
    if not isinstance(data, Mapping):
        raise ShapeValidationError("?", "shape record is not an object")

    try:
        kind = ShapeKind(data.get("shape"))
    except ValueError:
        raise ShapeValidationError(str(data.get("shape")), "unknown shape kind") from None

    style = _parse_style(kind, data.get("style"))

    missing = [key for key in REQUIRED_KEYS[kind] if data.get(key) is None]
    if missing:
        raise ShapeValidationError(kind.value, f"missing {', '.join(missing)}")

    rough_raw = data.get("rough_options")
    if rough_raw is not None and not isinstance(rough_raw, Mapping):
        raise ShapeValidationError(kind.value, "rough_options must be an object")
    try:
        rough = settings.rough_for(kind.value, rough_raw)
    except ValidationError as e:
        raise ShapeValidationError(kind.value, f"invalid rough_options: {e}") from e

    content = data.get("content")
    transform = data.get("transform")
    font_weight = data.get("font-weight")
    return ShapeDescriptor(
        kind=kind,
        geometry={k: v for k, v in data.items() if k not in RESERVED_KEYS},
        style=style,
        rough=rough,
        transform=None if transform is None else str(transform),
        content=None if content is None else str(content),
        font_weight=None if font_weight is None else str(font_weight),
    )


def shapes_from_records(records: Iterable[Any], settings: RenderSettings) -> tuple[list[ShapeDescriptor], int]:
    """Build descriptors for every valid record; returns (shapes, skipped)."""
    shapes = []
    skipped = 0
    for index, record in enumerate(records):
        try:
            shapes.append(shape_from_mapping(record, settings))
        except ShapeValidationError as e:
            logger.debug("Shape skipped", index=index, kind=e.kind, reason=e.reason)
            skipped += 1
    return shapes, skipped


def _dimension(value: Any, default: int) -> int:
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def load_scene(path: Path, settings: RenderSettings) -> Scene:
    """Load a JSON scene: a list of shape records or ``{"data": [...]}``.

    Raises:
        SceneLoadError: if the file cannot be read or has the wrong layout
    """
    try:
        with open(path, "r", encoding="utf-8") as file:
            payload = json.load(file)
    except OSError as e:
        raise SceneLoadError(str(path), str(e)) from e
    except json.JSONDecodeError as e:
        raise SceneLoadError(str(path), f"invalid JSON: {e}") from e

    width, height = settings.width, settings.height
    if isinstance(payload, Mapping):
        records = payload.get("data")
        width = _dimension(payload.get("width"), width)
        height = _dimension(payload.get("height"), height)
    else:
        records = payload

    if not isinstance(records, list):
        raise SceneLoadError(str(path), "expected a list of shapes")

    shapes, skipped = shapes_from_records(records, settings)
    logger.info("Scene loaded", path=str(path), shapes=len(shapes), skipped=skipped)
    return Scene(width=width, height=height, shapes=shapes, skipped=skipped)
