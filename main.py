from __future__ import annotations
import math
import os
import sys
from pathlib import Path
from typing import Optional

from exceptions import RoughSketchError
from log_setup import configure_logging
from noise import default_random_source
from raster import RasterSurface
from renderer import SketchRenderer
from rough import RoughCanvas
from scene import Scene, load_scene
from settings import RenderSettings, get_default_settings
from svg_import import load_svg_scene

USAGE = """Rough sketch renderer
Usage: python main.py <scene.json|drawing.svg> [more files] ... [options]

Options:
  -v, --verbose           Print detailed information
  -o, --output PATH       Output file, or directory when rendering several inputs
  -w, --width WIDTH       Override output width in pixels
  -h, --height HEIGHT     Override output height in pixels
  -b, --background RGB    Background color as R,G,B (default: 255,255,255)
  -aa, --anti-aliasing    on/off (default: on)
  --font FAMILY           Font family for every text shape
  --seed N                Seed the random source for repeatable output
  --alpha-over N          Default overdraw passes
  --fill-style STYLE      Default fill style (solid, hachure, cross-hatch, zigzag, dots)
  --log-file PATH         Write a debug log to PATH

Examples:
  python main.py chart.json
  python main.py chart.svg --fill-style hachure --alpha-over 2
  python main.py chart.json -w 800 -h 600 --seed 7"""

class CliOptions:
    def __init__(self):
        self.files: list[str] = []
        self.output: Optional[str] = None
        self.verbose = False
        self.width: Optional[int] = None
        self.height: Optional[int] = None
        self.background = (255, 255, 255)
        self.anti_aliasing = True
        self.font: Optional[str] = None
        self.seed: Optional[int] = None
        self.rough: dict = {}
        self.log_file: Optional[str] = None

    def to_settings(self) -> RenderSettings:
        defaults = get_default_settings()
        return RenderSettings(
            width=self.width or defaults.width,
            height=self.height or defaults.height,
            background=self.background,
            anti_aliasing=self.anti_aliasing,
            font_family=self.font,
            seed=self.seed,
            rough=defaults.rough.merged(self.rough),
            logging={"log_file": self.log_file,
                     "log_level": "INFO" if self.verbose else "WARNING"},
        )

def _positive_int(value: str, name: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer") from None
    if number <= 0:
        raise ValueError(f"{name} must be positive")
    return number

def _at_least_one(value: str, name: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number") from None
    if not (math.isfinite(number) and number >= 1):
        raise ValueError(f"{name} must be at least 1")
    return number

def _parse_background(value: str) -> tuple[int, int, int]:
    rgb_parts = value.split(',')
    if len(rgb_parts) != 3:
        raise ValueError("Background must be R,G,B (e.g., 255,255,255)")
    try:
        r, g, b = (max(0, min(255, int(part.strip()))) for part in rgb_parts)
    except ValueError:
        raise ValueError("Background must be R,G,B integers (e.g., 255,255,255)") from None
    return (r, g, b)

def _parse_switch(value: str) -> bool:
    value = value.lower()
    if value in ['true', '1', 'yes', 'on']:
        return True
    if value in ['false', '0', 'no', 'off']:
        return False
    raise ValueError("-aa/--anti-aliasing requires true/false, 1/0, yes/no, or on/off")

def parse_args(args: list[str]) -> CliOptions:
    """Parse command line arguments.

    Raises:
        ValueError: with a user-facing message on bad input
    """
    options = CliOptions()
    value_flags = {'-o', '--output', '-w', '--width', '-h', '--height', '-b', '--background',
                   '--font', '--seed', '--alpha-over', '--fill-style', '--log-file'}

    i = 0
    while i < len(args):
        arg = args[i]
        value = None
        if arg in value_flags:
            if i + 1 >= len(args):
                raise ValueError(f"{arg} requires a value")
            value = args[i + 1]
            i += 1

        if arg in ['-v', '--verbose']:
            options.verbose = True
        elif arg in ['-o', '--output']:
            options.output = value
        elif arg in ['-w', '--width']:
            options.width = _positive_int(value, "Width")
        elif arg in ['-h', '--height']:
            options.height = _positive_int(value, "Height")
        elif arg in ['-b', '--background']:
            options.background = _parse_background(value)
        elif arg in ['-aa', '--anti-aliasing']:
            if i + 1 < len(args) and not args[i + 1].startswith('-') and \
                    args[i + 1].lower() in ['true', '1', 'yes', 'on', 'false', '0', 'no', 'off']:
                options.anti_aliasing = _parse_switch(args[i + 1])
                i += 1
            else:
                options.anti_aliasing = True
        elif arg == '--font':
            options.font = value
        elif arg == '--seed':
            try:
                options.seed = int(value)
            except ValueError:
                raise ValueError("Seed must be an integer") from None
        elif arg == '--alpha-over':
            options.rough['alpha_over'] = _at_least_one(value, "Alpha over")
        elif arg == '--fill-style':
            options.rough['fill_style'] = value
        elif arg == '--log-file':
            options.log_file = value
        elif arg.startswith('-'):
            raise ValueError(f"Unknown option: {arg}")
        else:
            options.files.append(arg)
        i += 1

    return options

def load_input(path: str, settings: RenderSettings) -> Scene:
    if path.lower().endswith('.svg'):
        return load_svg_scene(Path(path), settings)
    return load_scene(Path(path), settings)

def render_scene(scene: Scene, settings: RenderSettings,
                 width: Optional[int] = None, height: Optional[int] = None) -> RasterSurface:
    surface = RasterSurface(width or scene.width, height or scene.height,
                            background=settings.background,
                            anti_aliasing=settings.anti_aliasing)
    rng = default_random_source(settings.seed)
    canvas = RoughCanvas(surface, rng)
    renderer = SketchRenderer(canvas, surface, rng, font=settings.font_family)
    renderer.render(scene.shapes)
    return surface

def process_file(path: str, output_path: Optional[str], settings: RenderSettings,
                 options: CliOptions) -> bool:
    if not os.path.exists(path):
        print(f"Error: File not found: {path}")
        return False

    if output_path is None:
        base_name = os.path.splitext(os.path.basename(path))[0]
        output_path = f"{base_name}.png"

    try:
        scene = load_input(path, settings)
        if options.verbose:
            print(f"\nProcessing: {path}")
            print(f"Shapes: {len(scene.shapes)} ({scene.skipped} skipped)")
            print(f"Output will be: {output_path}")

        surface = render_scene(scene, settings, options.width, options.height)
        surface.save_png(output_path)
    except RoughSketchError as e:
        print(f"Error: {e}")
        return False
    except OSError as e:
        print(f"Error saving PNG: {e}")
        return False

    if options.verbose:
        print(f"[OK] Rendered and saved: {output_path}")
    else:
        print(f"[OK] {path} -> {output_path}")
    return True

def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    if len(args) == 0:
        print(USAGE)
        return 0

    try:
        options = parse_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    if len(options.files) == 0:
        print("Error: No input files specified")
        return 2

    settings = options.to_settings()
    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
    )

    success_count = 0
    for input_file in options.files:
        output_path = None
        if options.output:
            if os.path.isdir(options.output):
                base_name = os.path.splitext(os.path.basename(input_file))[0]
                output_path = os.path.join(options.output, f"{base_name}.png")
            elif len(options.files) == 1:
                output_path = options.output
            else:
                print("Warning: -o with multiple files requires a directory, not a file")

        if process_file(input_file, output_path, settings, options):
            success_count += 1

    print(f"\nProcessed {success_count}/{len(options.files)} file(s) successfully")
    return 0 if success_count == len(options.files) else 1

if __name__ == "__main__":
    sys.exit(main())
