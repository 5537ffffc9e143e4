"""Capabilities the renderer draws through.

``SketchCanvas`` is the sketchy-primitive library: one call per shape kind,
each perturbing its own geometry. ``DrawingSurface`` is the plain 2D context
used for text. The renderer depends only on these protocols.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Protocol, Sequence

from options import RenderOptions

Point = tuple[float, float]


class SketchCanvas(Protocol):
    def rectangle(self, x: float, y: float, width: float, height: float,
                  options: RenderOptions) -> None: ...

    def circle(self, x: float, y: float, diameter: float,
               options: RenderOptions) -> None: ...

    def path(self, d: str, options: RenderOptions) -> None: ...

    def linear_path(self, points: Sequence[Point], options: RenderOptions) -> None: ...


class DrawingSurface(Protocol):
    def save(self) -> None: ...

    def restore(self) -> None: ...

    def translate(self, tx: float, ty: float) -> None: ...

    def rotate(self, radians: float) -> None: ...

    def set_font(self, font: str) -> None: ...

    def set_fill_style(self, color: str) -> None: ...

    def fill_text(self, text: str, x: float, y: float) -> None: ...


@contextmanager
def saved_state(surface: DrawingSurface) -> Iterator[DrawingSurface]:
    """Save the surface state and restore it on exit, even on error."""
    surface.save()
    try:
        yield surface
    finally:
        surface.restore()
