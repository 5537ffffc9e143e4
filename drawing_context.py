from __future__ import annotations
import math
from dataclasses import dataclass, field, replace
from typing import Any

@dataclass(frozen=True)
class TransformMatrix:
    """2D affine map ``[a c e; b d f]``, canvas ordering."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> TransformMatrix:
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> TransformMatrix:
        return cls(e=tx, f=ty)

    @classmethod
    def rotation(cls, radians: float) -> TransformMatrix:
        cos_r, sin_r = math.cos(radians), math.sin(radians)
        return cls(a=cos_r, b=sin_r, c=-sin_r, d=cos_r)

    def multiply(self, other: TransformMatrix) -> TransformMatrix:
        # self applied after other
        return TransformMatrix(
            a=self.a * other.a + self.c * other.b,
            b=self.b * other.a + self.d * other.b,
            c=self.a * other.c + self.c * other.d,
            d=self.b * other.c + self.d * other.d,
            e=self.a * other.e + self.c * other.f + self.e,
            f=self.b * other.e + self.d * other.f + self.f,
        )

    def is_identity(self, tolerance: float = 1e-6) -> bool:
        reference = TransformMatrix()
        return all(abs(getattr(self, name) - getattr(reference, name)) < tolerance
                   for name in 'abcdef')

    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        return (self.a * x + self.c * y + self.e,
                self.b * x + self.d * y + self.f)

    def rotation_degrees(self) -> float:
        return math.degrees(math.atan2(self.b, self.a))

    def scale_factor(self) -> float:
        # uniform scale equivalent, used for line widths and radii
        return math.sqrt(abs(self.a * self.d - self.b * self.c))

@dataclass
class DrawingContext:
    """State captured by save() and brought back by restore()."""

    transform: TransformMatrix = field(default_factory=TransformMatrix.identity)
    fill_color: tuple[int, int, int, int] = (0, 0, 0, 255)
    font: Any = None

    def copy(self) -> DrawingContext:
        return replace(self)

    def translate(self, tx: float, ty: float):
        self.transform = self.transform.multiply(TransformMatrix.translation(tx, ty))

    def rotate(self, radians: float):
        self.transform = self.transform.multiply(TransformMatrix.rotation(radians))
