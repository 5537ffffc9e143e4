"""Unit tests for command line parsing."""

import pytest

from main import main, parse_args


class TestParseArgs:
    """Tests for the argument loop."""

    def test_files_and_flags(self):
        options = parse_args(["a.json", "b.svg", "-w", "300", "--height", "200",
                              "--seed", "7", "-v", "-o", "out"])
        assert options.files == ["a.json", "b.svg"]
        assert (options.width, options.height) == (300, 200)
        assert options.seed == 7
        assert options.verbose
        assert options.output == "out"

    def test_rough_defaults(self):
        settings = parse_args(["a.json", "--alpha-over", "3", "--fill-style", "hachure"]).to_settings()
        assert settings.rough.alpha_over == 3
        assert settings.rough.fill_style == "hachure"

    def test_fractional_alpha_over(self):
        settings = parse_args(["a.json", "--alpha-over", "1.5"]).to_settings()
        assert settings.rough.alpha_over == 1.5

    def test_background_and_anti_aliasing(self):
        options = parse_args(["a.json", "-b", "0, 10, 300", "-aa", "off"])
        assert options.background == (0, 10, 255)
        assert options.anti_aliasing is False
        assert parse_args(["-aa", "a.json"]).files == ["a.json"]

    def test_font_and_log_file(self):
        settings = parse_args(["a.json", "--font", "DejaVu Sans", "--log-file", "x.log"]).to_settings()
        assert settings.font_family == "DejaVu Sans"
        assert str(settings.logging.log_file) == "x.log"

    @pytest.mark.parametrize("args", [
        ["a.json", "-w", "0"],
        ["a.json", "-w", "wide"],
        ["a.json", "--seed"],
        ["a.json", "-b", "1,2"],
        ["a.json", "--frobnicate"],
        ["a.json", "--alpha-over", "0"],
        ["a.json", "--alpha-over", "inf"],
    ])
    def test_bad_arguments(self, args):
        with pytest.raises(ValueError):
            parse_args(args)


class TestMain:
    def test_usage_without_arguments(self, capsys):
        assert main([]) == 0
        assert "Usage" in capsys.readouterr().out

    def test_bad_arguments_exit_code(self, capsys):
        assert main(["--width"]) == 2
        assert "Error" in capsys.readouterr().out

    def test_missing_input_fails(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "File not found" in capsys.readouterr().out
