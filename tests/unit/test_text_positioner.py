"""Unit tests for text font, colour and placement."""

import math

import pytest

from text_positioner import draw_text, font_string, rotation_for, text_fill


class TestFontString:
    def test_size_and_family(self, make_shape):
        shape = make_shape("text", style={"font-size": "12px", "font-family": "Arial"}, content="a")
        assert font_string(shape) == "12px Arial"

    def test_weight_prefix_from_shape_or_style(self, make_shape):
        shape = make_shape("text", style={"font-size": "9", "font-family": "Arial"},
                           font_weight="bold", content="a")
        assert font_string(shape) == "bold 9px Arial"

        styled = make_shape("text", style={"font-size": "9", "font-weight": "300"}, content="a")
        assert font_string(styled) == "300 9px sans-serif"

    def test_family_override(self, make_shape):
        shape = make_shape("text", style={"font-size": "10.5px", "font-family": "Arial"}, content="a")
        assert font_string(shape, "Mono") == "10.5px Mono"


class TestTextFill:
    def test_default_is_black(self, make_shape):
        assert text_fill(make_shape("text", content="a")) == "#000000"

    def test_style_fill_is_used_verbatim(self, make_shape):
        assert text_fill(make_shape("text", style={"fill": "#123456"}, content="a")) == "#123456"


class TestRotationFor:
    """Only the sign of the angle matters."""

    @pytest.mark.parametrize("angle", [-90, -45, -0.1])
    def test_negative_turns_up(self, angle):
        assert rotation_for(angle) == -math.pi / 2

    @pytest.mark.parametrize("angle", [0, 30, 90])
    def test_zero_and_positive_turn_down(self, angle):
        assert rotation_for(angle) == math.pi / 2


class TestDrawText:
    """Tests for the save / translate / rotate / restore sequence."""

    def test_translate_and_rotate(self, surface, make_shape):
        shape = make_shape("text", content="Label", transform="translate(100, 50) rotate(-45)")
        draw_text(surface, shape)

        assert surface.names() == ["font", "fill_style", "save", "translate",
                                   "rotate", "fill_text", "restore"]
        assert ("translate", 100.0, 50.0) in surface.calls
        assert ("rotate", -math.pi / 2) in surface.calls
        assert ("fill_text", "Label", 0, 0) in surface.calls

    def test_translate_only(self, surface, make_shape):
        draw_text(surface, make_shape("text", content="a", transform="translate(5 6)"))
        assert "rotate" not in surface.names()
        assert ("translate", 5.0, 6.0) in surface.calls

    def test_no_transform_draws_at_position(self, surface, make_shape):
        draw_text(surface, make_shape("text", content="a", x="7", y="8"))
        assert "save" not in surface.names()
        assert surface.calls[-1] == ("fill_text", "a", 7.0, 8.0)

    def test_unreadable_transform_draws_at_position(self, surface, make_shape):
        draw_text(surface, make_shape("text", content="a", transform="matrix", x=1, y=2))
        assert surface.calls[-1] == ("fill_text", "a", 1.0, 2.0)

    def test_state_is_restored_on_failure(self, recording_surface, make_shape):
        surface = recording_surface(fail_on_text=True)
        with pytest.raises(RuntimeError):
            draw_text(surface, make_shape("text", content="a", transform="translate(1,1) rotate(90)"))
        assert surface.depth == 0
        assert surface.names()[-1] == "restore"
