"""Unit tests for the SVG tokenizer and the SVG-to-scene adapter."""

import pytest

from exceptions import SceneLoadError
from settings import RenderSettings
from shapes import ShapeKind
from svg_import import load_svg_scene, node_to_record, shapes_from_svg, viewport_size
from svg_parser import parse_svg

CHART = """<?xml version="1.0"?>
<svg xmlns="http://www.w3.org/2000/svg" width="400" height="300">
  <!-- plot area -->
  <defs><clipPath id="c"><rect x="0" y="0" width="400" height="300"/></clipPath></defs>
  <rect x="0" y="0" width="400" height="300" style="fill: #ffffff; stroke: none;"/>
  <g clip-path="url(#c)">
    <circle cx="50" cy="60" r="3pt" style="fill: #00ff00"/>
    <polyline points="10,10 20,20 30,10" style="stroke: #000000; stroke-width: 1.07; fill: none"/>
    <polyline points="10,10 20,20 30,10 10,10" style="fill: #ff0000"/>
    <rect x="5" y="5" width="10" height="10"/>
  </g>
  <text x="1" y="2" transform="translate(20,280) rotate(-90)" style="font-size: 11px;"
        font-weight="bold">Fish &amp; chips</text>
</svg>
"""


@pytest.fixture
def settings():
    return RenderSettings()


class TestParseSvg:
    def test_tree_and_text(self):
        root = parse_svg(CHART)
        assert root.tag == "svg"
        text = [node for node in root.children if node.tag == "text"][0]
        assert text.text == "Fish & chips"
        assert text.get_attribute("font-weight") == "bold"

    def test_no_svg_element(self):
        assert parse_svg("<html></html>") is None


class TestNodeToRecord:
    """Tests for the element mapping."""

    def test_open_polyline_is_a_linear_path(self):
        root = parse_svg('<svg><polyline points="0,0  5,5" stroke="#000000"/></svg>')
        record = node_to_record(root.children[0])
        assert record["shape"] == "linearPath"
        assert record["points"] == "0,0 5,5"
        assert record["style"] == {"stroke": "#000000"}

    def test_filled_polyline_is_a_closed_path(self):
        root = parse_svg('<svg><polyline points="0,0 5,5 0,5" style="fill:#ff0000"/></svg>')
        record = node_to_record(root.children[0])
        assert record["shape"] == "path"
        assert record["points"] == "M0,0 5,5 0,5Z"

    def test_unstyled_rect_is_dropped(self):
        root = parse_svg('<svg><rect x="0" y="0" width="1" height="1"/></svg>')
        assert node_to_record(root.children[0]) is None


class TestShapesFromSvg:
    def test_chart(self, settings):
        scene = shapes_from_svg(parse_svg(CHART), settings)
        kinds = [shape.kind for shape in scene.shapes]
        assert kinds == [ShapeKind.RECT, ShapeKind.CIRCLE, ShapeKind.LINEAR_PATH,
                         ShapeKind.PATH, ShapeKind.TEXT]
        assert (scene.width, scene.height) == (400, 300)

        text = scene.shapes[-1]
        assert text.content == "Fish & chips"
        assert text.font_weight == "bold"
        assert text.transform == "translate(20,280) rotate(-90)"

    def test_viewbox_wins(self, settings):
        root = parse_svg('<svg viewBox="0 0 120.5 80" width="10" height="10"></svg>')
        assert viewport_size(root, settings) == (121, 80)

    def test_missing_size_uses_settings(self, settings):
        assert viewport_size(parse_svg("<svg></svg>"), settings) == (800, 600)


class TestLoadSvgScene:
    def test_missing_file(self, tmp_path, settings):
        with pytest.raises(SceneLoadError):
            load_svg_scene(tmp_path / "none.svg", settings)

    def test_file_without_svg(self, tmp_path, settings):
        path = tmp_path / "page.svg"
        path.write_text("<html/>")
        with pytest.raises(SceneLoadError):
            load_svg_scene(path, settings)
