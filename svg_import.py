from __future__ import annotations
import math
from pathlib import Path
from typing import Optional

import structlog

from exceptions import SceneLoadError
from geometry import normalize_length, parse_number
from scene import Scene, shapes_from_records
from settings import RenderSettings
from shapes import STYLE_KEYS, parse_style_attrs
from svg_parser import Node, parse_svg_file

logger = structlog.get_logger(__name__)

# content of these elements is never painted directly
HIDDEN_CONTAINERS = {'defs', 'clipPath', 'mask', 'pattern', 'symbol', 'marker'}
DROPPED_ATTRIBUTES = {'style', 'clip-path', 'class', 'id'}

def _style_of(node: Node) -> Optional[dict]:
    style = parse_style_attrs(node.get_attribute('style'))
    for key in STYLE_KEYS:
        value = node.get_attribute(key)
        if value is not None and key not in style:
            style[key] = value
    return style or None

def _visible_fill(style: Optional[dict]) -> bool:
    return bool(style) and style.get('fill', 'none') != 'none'

def node_to_record(node: Node) -> Optional[dict]:
    tag = node.tag
    if tag not in ('rect', 'circle', 'polyline', 'text'):
        return None

    record = {k: v for k, v in node.attributes.items()
              if k not in DROPPED_ATTRIBUTES and k not in STYLE_KEYS}
    style = _style_of(node)
    if style is not None:
        record['style'] = style

    if tag == 'polyline':
        points = " ".join(node.get_attribute('points', '').split())
        # filled polylines are areas and get closed, the rest are lines
        if _visible_fill(style):
            record['shape'] = 'path'
            record['points'] = f"M{points}Z"
        else:
            record['shape'] = 'linearPath'
            record['points'] = points
    elif tag == 'text':
        record['shape'] = 'text'
        record['content'] = node.text
        if node.get_attribute('font-weight') is not None:
            record['font-weight'] = node.get_attribute('font-weight')
    else:
        record['shape'] = tag
        if tag == 'rect' and style is None:
            # unstyled rects are clipping or layout boxes, never painted
            return None

    return record

def _collect(node: Node, records: list):
    if node.tag in HIDDEN_CONTAINERS:
        return
    record = node_to_record(node)
    if record is not None:
        records.append(record)
    if node.tag != 'text':
        for child in node.children:
            _collect(child, records)

def viewport_size(root: Node, settings: RenderSettings) -> tuple[int, int]:
    viewbox = root.get_attribute('viewBox')
    if viewbox:
        parts = [parse_number(p) for p in viewbox.replace(',', ' ').split()]
        if len(parts) == 4 and all(math.isfinite(p) and p > 0 for p in parts[2:]):
            return int(math.ceil(parts[2])), int(math.ceil(parts[3]))

    width = normalize_length(root.get_attribute('width'))
    height = normalize_length(root.get_attribute('height'))
    return (int(math.ceil(width)) if math.isfinite(width) and width > 0 else settings.width,
            int(math.ceil(height)) if math.isfinite(height) and height > 0 else settings.height)

def shapes_from_svg(root: Node, settings: RenderSettings) -> Scene:
    records = []
    _collect(root, records)
    shapes, skipped = shapes_from_records(records, settings)
    width, height = viewport_size(root, settings)
    return Scene(width=width, height=height, shapes=shapes, skipped=skipped)

def load_svg_scene(path: Path, settings: RenderSettings) -> Scene:
    try:
        root = parse_svg_file(path)
    except (OSError, UnicodeDecodeError) as e:
        raise SceneLoadError(str(path), str(e)) from e
    if root is None:
        raise SceneLoadError(str(path), "no <svg> element found")

    scene = shapes_from_svg(root, settings)
    logger.info("SVG imported", path=str(path), shapes=len(scene.shapes), skipped=scene.skipped)
    return scene
