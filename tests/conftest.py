"""Shared fakes for the renderer tests.

The renderer only talks to a SketchCanvas, a DrawingSurface and a random
source, so tests replace all three with recorders.
"""

import itertools

import pytest

from settings import RoughOptions
from shapes import ShapeDescriptor, ShapeKind, Style


class SequenceRandom:
    """Random source returning the given values in a cycle."""

    def __init__(self, *values):
        self.values = values or (0.5,)
        self._cycle = itertools.cycle(self.values)
        self.calls = 0

    def random(self):
        self.calls += 1
        return next(self._cycle)


class RecordingCanvas:
    """SketchCanvas that records every primitive call."""

    def __init__(self):
        self.calls = []

    def rectangle(self, x, y, width, height, options):
        self.calls.append(("rectangle", (x, y, width, height), options))

    def circle(self, x, y, diameter, options):
        self.calls.append(("circle", (x, y, diameter), options))

    def path(self, d, options):
        self.calls.append(("path", (d,), options))

    def linear_path(self, points, options):
        self.calls.append(("linear_path", (list(points),), options))


class RecordingSurface:
    """DrawingSurface that records state changes and text draws."""

    def __init__(self, fail_on_text=False):
        self.calls = []
        self.depth = 0
        self.fail_on_text = fail_on_text

    def save(self):
        self.depth += 1
        self.calls.append(("save",))

    def restore(self):
        self.depth -= 1
        self.calls.append(("restore",))

    def translate(self, tx, ty):
        self.calls.append(("translate", tx, ty))

    def rotate(self, radians):
        self.calls.append(("rotate", radians))

    def set_font(self, font):
        self.calls.append(("font", font))

    def set_fill_style(self, color):
        self.calls.append(("fill_style", color))

    def fill_text(self, text, x, y):
        if self.fail_on_text:
            raise RuntimeError("surface is gone")
        self.calls.append(("fill_text", text, x, y))

    def names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def rng():
    return SequenceRandom(0.25, 0.75)


@pytest.fixture
def make_shape():
    """Build a ShapeDescriptor from plain keyword arguments."""

    def _make(kind, style=None, rough=None, transform=None, content=None,
              font_weight=None, **geometry):
        return ShapeDescriptor(
            kind=ShapeKind(kind),
            geometry=geometry,
            style=Style.from_mapping(style) if isinstance(style, dict) else style,
            rough=RoughOptions().merged(rough),
            transform=transform,
            content=content,
            font_weight=font_weight,
        )

    return _make


@pytest.fixture
def random_values():
    """Factory for a SequenceRandom cycling through the given values."""
    return SequenceRandom


@pytest.fixture
def recording_surface():
    """Factory for a RecordingSurface, optionally failing inside fill_text."""
    return RecordingSurface
