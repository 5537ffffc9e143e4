"""Unit tests for colour decoding and rgba encoding."""

from colors import (
    TRANSPARENT,
    decode_color,
    fill_color_string,
    format_number,
    parse_css_color,
    stroke_color_string,
)
from shapes import Style


class TestDecodeColor:
    """Tests for strict 6-digit hex decoding."""

    def test_with_and_without_prefix(self):
        assert decode_color("#ff8000") == (255, 128, 0)
        assert decode_color("FF8000") == (255, 128, 0)

    def test_shorthand_is_rejected(self):
        assert decode_color("#abc") is None

    def test_channels_stay_in_byte_range(self):
        for value in ("000000", "FFFFFF", "#7f80a1", "0a0B0c"):
            assert all(0 <= channel <= 255 for channel in decode_color(value))

    def test_names_and_garbage_are_rejected(self):
        assert decode_color("red") is None
        assert decode_color("#ff00001") is None
        assert decode_color(None) is None


class TestFormatNumber:
    def test_integers_have_no_fraction(self):
        assert format_number(1.0) == "1"
        assert format_number(0.0) == "0"

    def test_fractions_and_nan(self):
        assert format_number(0.5) == "0.5"
        assert format_number(float("nan")) == "NaN"


class TestFillColorString:
    """Tests for fill encoding with overdraw opacity."""

    def test_opaque_fill(self):
        assert fill_color_string(Style(fill="#ff0000"), 1) == "rgba(255,0,0,1)"

    def test_fill_opacity_is_kept(self):
        style = Style(fill="#ff0000", fill_opacity="0.5")
        assert fill_color_string(style, 1) == "rgba(255,0,0,0.5)"

    def test_opacity_is_split_across_passes(self):
        assert fill_color_string(Style(fill="#00ff00"), 2) == "rgba(0,255,0,0.5)"
        assert fill_color_string(Style(fill="#00ff00", fill_opacity="0.5"), 4) == "rgba(0,255,0,0.125)"

    def test_no_fill_means_none(self):
        assert fill_color_string(None, 1) is None
        assert fill_color_string(Style(stroke="#000000"), 1) is None

    def test_malformed_fill_becomes_transparent(self):
        assert fill_color_string(Style(fill="red"), 1) == TRANSPARENT


class TestStrokeColorString:
    """Tests for the transparent stroke sentinel."""

    def test_missing_style(self):
        assert stroke_color_string(None) == TRANSPARENT

    def test_missing_stroke(self):
        assert stroke_color_string(Style(fill="#ffffff")) == TRANSPARENT

    def test_stroke_none(self):
        assert stroke_color_string(Style(stroke="none", stroke_width="2")) == TRANSPARENT

    def test_zero_width(self):
        assert stroke_color_string(Style(stroke="#000000", stroke_width="0")) == TRANSPARENT

    def test_visible_stroke(self):
        style = Style(stroke="#0000ff", stroke_width="2", stroke_opacity="0.25")
        assert stroke_color_string(style) == "rgba(0,0,255,0.25)"

    def test_absent_width_still_strokes(self):
        assert stroke_color_string(Style(stroke="#0000ff")) == "rgba(0,0,255,1)"


class TestParseCssColor:
    def test_rgba_strings(self):
        assert parse_css_color("rgba(255,0,0,1)") == (255, 0, 0, 255)
        assert parse_css_color("rgba(255,255,255,0)") == (255, 255, 255, 0)

    def test_named_and_hex(self):
        assert parse_css_color("red") == (255, 0, 0, 255)
        assert parse_css_color("#000000") == (0, 0, 0, 255)

    def test_unusable_is_transparent(self):
        assert parse_css_color("not a colour") == (0, 0, 0, 0)
        assert parse_css_color(None) == (0, 0, 0, 0)
        assert parse_css_color("rgba(1,2)") == (0, 0, 0, 0)
