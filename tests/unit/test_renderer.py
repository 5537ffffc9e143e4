"""Unit tests for shape dispatch in SketchRenderer."""

import math

import pytest

from colors import TRANSPARENT
from exceptions import RenderError
from renderer import SketchRenderer


@pytest.fixture
def renderer(canvas, surface, rng):
    return SketchRenderer(canvas, surface, rng)


class TestRect:
    """Tests for rectangle overdraw."""

    def test_alpha_over_repeats_the_rectangle(self, renderer, canvas, make_shape):
        shape = make_shape("rect", style={"fill": "#ff0000"}, rough={"alpha_over": 3},
                           x=1, y=2, width=30, height=40)
        renderer.render([shape])

        assert [call[0] for call in canvas.calls] == ["rectangle"] * 3
        assert all(call[1] == (1.0, 2.0, 30.0, 40.0) for call in canvas.calls)
        assert canvas.calls[0][2].fill == "rgba(255,0,0,0.3333333333333333)"
        assert len({id(call[2]) for call in canvas.calls}) == 1

    def test_fractional_alpha_over_rounds_passes_up(self, renderer, canvas, make_shape):
        shape = make_shape("rect", style={"fill": "#ff0000"}, rough={"alpha_over": 2.5},
                           x=0, y=0, width=10, height=10)
        renderer.render([shape])

        assert [call[0] for call in canvas.calls] == ["rectangle"] * 3
        assert canvas.calls[0][2].fill == "rgba(255,0,0,0.4)"

    def test_string_geometry_is_numeric(self, renderer, canvas, make_shape):
        renderer.render([make_shape("rect", style={"fill": "#000000"},
                                    x="10", y="20", width="5", height="6")])
        assert canvas.calls[0][1] == (10.0, 20.0, 5.0, 6.0)


class TestCircle:
    def test_radius_becomes_scaled_diameter(self, renderer, canvas, make_shape):
        shape = make_shape("circle", style={"fill": "#00FF00"}, cx="10", cy="10", r="5px",
                           rough={"fill_style": "solid", "roughness": 1, "bowing": 1})
        renderer.render([shape])

        name, args, options = canvas.calls[0]
        assert name == "circle"
        assert args == (10.0, 10.0, 20.0)
        assert options.fill == "rgba(0,255,0,1)"
        assert options.stroke == TRANSPARENT


class TestPath:
    def test_points_pass_through_as_path_data(self, renderer, canvas, make_shape):
        shape = make_shape("path", style={"fill": "#000000"}, points="M0,0L10,0L10,10Z")
        renderer.render([shape])
        assert canvas.calls[0][:2] == ("path", ("M0,0L10,0L10,10Z",))


class TestLinearPath:
    """Tests for open polylines."""

    def test_stroke_none_draws_nothing(self, renderer, canvas, make_shape):
        shape = make_shape("linearPath", style={"stroke": "none"}, points="0,0 10,10")
        stats = renderer.render([shape])
        assert canvas.calls == []
        assert stats.skipped_count == 1

    def test_points_are_parsed_and_fill_is_ignored(self, renderer, canvas, make_shape):
        shape = make_shape("linearPath", style={"stroke": "#000000", "fill": "#ff0000"},
                           points="0,0 10,5 bogus 20,0")
        renderer.render([shape])
        name, (points,), options = canvas.calls[0]
        assert points == [(0.0, 0.0), (10.0, 5.0), (20.0, 0.0)]
        assert options.fill is None

    def test_unstyled_line_still_draws(self, renderer, canvas, make_shape):
        renderer.render([make_shape("linearPath", points="0,0 1,1")])
        assert canvas.calls[0][2].stroke == TRANSPARENT
        assert math.isnan(canvas.calls[0][2].stroke_width)


class TestText:
    def test_text_goes_to_the_surface(self, renderer, canvas, surface, make_shape):
        renderer.render([make_shape("text", content="hi", x=3, y=4)])
        assert canvas.calls == []
        assert ("fill_text", "hi", 3.0, 4.0) in surface.calls


class TestRenderPass:
    """Tests for ordering, counters and failures."""

    def test_order_is_preserved(self, renderer, canvas, make_shape):
        shapes = [
            make_shape("circle", style={"fill": "#000000"}, cx=0, cy=0, r=1),
            make_shape("rect", style={"fill": "#000000"}, x=0, y=0, width=1, height=1),
            make_shape("path", style={"fill": "#000000"}, points="M0,0L1,1"),
        ]
        stats = renderer.render(shapes)
        assert [call[0] for call in canvas.calls] == ["circle", "rectangle", "path"]
        assert stats.drawn_count == 3
        assert stats.draw_calls == 3

    def test_surface_failure_aborts_with_render_error(self, canvas, recording_surface,
                                                      rng, make_shape):
        surface = recording_surface(fail_on_text=True)
        renderer = SketchRenderer(canvas, surface, rng)
        shapes = [make_shape("text", content="x", transform="translate(1,2) rotate(-90)"),
                  make_shape("rect", style={"fill": "#000000"}, x=0, y=0, width=1, height=1)]

        with pytest.raises(RenderError) as info:
            renderer.render(shapes)

        assert info.value.index == 0
        assert info.value.kind == "text"
        assert isinstance(info.value.__cause__, RuntimeError)
        assert surface.depth == 0
        assert canvas.calls == []
