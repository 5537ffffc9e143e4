from __future__ import annotations
import math
import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog
from PIL import Image, ImageDraw, ImageFont

from colors import parse_css_color
from drawing_context import DrawingContext

logger = structlog.get_logger(__name__)

Point = Tuple[float, float]
Color = Tuple[int, int, int, int]

font_pattern = re.compile(
    r'^\s*(?:(?P<weight>\S+)\s+)?(?P<size>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)px\s+(?P<family>.+?)\s*$'
)
BOLD_WEIGHTS = {'bold', 'bolder', '600', '700', '800', '900'}
DEFAULT_FONT_SIZE = 10
MIN_DOT_RADIUS = 1.0

class RasterSurface:
    """RGBA numpy buffer with a canvas-like drawing state.

    Geometry handed to the stroke and fill primitives is in user space and
    goes through the current transform before rasterisation.
    """

    def __init__(self, width: int, height: int,
                 background: Tuple[int, int, int] = (255, 255, 255),
                 anti_aliasing: bool = True):
        self.width = width
        self.height = height
        self.anti_aliasing = anti_aliasing

        self.buffer = np.zeros((height, width, 4), dtype=np.uint8)
        self.buffer[:, :, 0] = background[0]
        self.buffer[:, :, 1] = background[1]
        self.buffer[:, :, 2] = background[2]
        self.buffer[:, :, 3] = 255

        self.context_stack = [DrawingContext()]
        self._fonts = {}
        self.context.font = ImageFont.load_default(size=DEFAULT_FONT_SIZE)

    @property
    def context(self) -> DrawingContext:
        return self.context_stack[-1]

    def save(self):
        self.context_stack.append(self.context.copy())

    def restore(self):
        if len(self.context_stack) > 1:
            self.context_stack.pop()

    def translate(self, tx: float, ty: float):
        self.context.translate(tx, ty)

    def rotate(self, radians: float):
        self.context.rotate(radians)

    def set_fill_style(self, color: str):
        self.context.fill_color = parse_css_color(color)

    def set_font(self, font: str):
        # an unparsable font string leaves the current font in place
        match = font_pattern.match(font or "")
        if match is None:
            logger.debug("Ignoring font", font=font)
            return
        size = float(match.group('size'))
        if not math.isfinite(size) or size <= 0:
            return
        self.context.font = self._load_font(match.group('weight'), size, match.group('family'))

    def _load_font(self, weight: Optional[str], size: float, family: str):
        pixel_size = max(1, int(round(size)))
        key = (weight, pixel_size, family)
        if key in self._fonts:
            return self._fonts[key]

        candidates = []
        for name in family.split(','):
            name = name.strip().strip('"\'')
            if not name:
                continue
            if weight is not None and weight.lower() in BOLD_WEIGHTS:
                candidates.extend([f"{name} Bold", f"{name}-Bold", f"{name.replace(' ', '')}-Bold"])
            candidates.extend([name, name.replace(' ', '')])

        font = None
        for candidate in candidates:
            try:
                font = ImageFont.truetype(candidate, pixel_size)
                break
            except OSError:
                continue

        if font is None:
            logger.warning("Font not found, using default", family=family, size=pixel_size)
            font = ImageFont.load_default(size=pixel_size)

        self._fonts[key] = font
        return font

    def fill_text(self, text: str, x: float, y: float):
        color = self.context.fill_color
        if not text or color[3] == 0:
            return

        transform = self.context.transform
        ax, ay = transform.transform_point(x, y)
        if not (math.isfinite(ax) and math.isfinite(ay)):
            return

        font = self.context.font
        left, top, right, bottom = font.getbbox(text, anchor='ls')
        radius = int(math.ceil(max(math.hypot(cx, cy)
                                   for cx in (left, right) for cy in (top, bottom)))) + 2

        # glyphs are drawn around the centre of a square layer so rotating
        # about the anchor never clips them
        layer = Image.new('L', (2 * radius, 2 * radius), 0)
        ImageDraw.Draw(layer).text((radius, radius), text, font=font, fill=255, anchor='ls')
        angle = transform.rotation_degrees()
        if abs(angle) > 1e-9:
            layer = layer.rotate(-angle, resample=Image.BICUBIC, center=(radius, radius))

        alpha = np.asarray(layer, dtype=np.float64) / 255.0 * (color[3] / 255.0)
        self._composite(int(round(ax)) - radius, int(round(ay)) - radius,
                        np.array(color[:3], dtype=np.float64), alpha)

    def _to_device(self, points: Sequence[Point]) -> np.ndarray:
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        transform = self.context.transform
        if transform.is_identity():
            return pts
        xs = transform.a * pts[:, 0] + transform.c * pts[:, 1] + transform.e
        ys = transform.b * pts[:, 0] + transform.d * pts[:, 1] + transform.f
        return np.stack([xs, ys], axis=1)

    def _bounds(self, min_x: float, min_y: float, max_x: float, max_y: float):
        left = max(0, int(math.floor(min_x)))
        top = max(0, int(math.floor(min_y)))
        right = min(self.width, int(math.ceil(max_x)) + 1)
        bottom = min(self.height, int(math.ceil(max_y)) + 1)
        if left >= right or top >= bottom:
            return None
        return left, top, right, bottom

    def _sample_offsets(self) -> List[float]:
        if self.anti_aliasing:
            samples = 2
            return [(s + 0.5) / samples for s in range(samples)]
        return [0.5]

    def stroke_polylines(self, polylines: Sequence[Sequence[Point]], color: Color, width: float):
        if color[3] == 0 or width <= 0:
            return

        half_width = max(width * self.context.transform.scale_factor() / 2.0, 0.5)
        segments = []
        for line in polylines:
            pts = self._to_device(line)
            for i in range(len(pts) - 1):
                a, b = pts[i], pts[i + 1]
                if np.all(np.isfinite(a)) and np.all(np.isfinite(b)):
                    segments.append((a, b))
        if not segments:
            return

        ends = np.array([p for seg in segments for p in seg])
        pad = half_width + 1
        bounds = self._bounds(ends[:, 0].min() - pad, ends[:, 1].min() - pad,
                              ends[:, 0].max() + pad, ends[:, 1].max() + pad)
        if bounds is None:
            return
        left, top, right, bottom = bounds
        mask = np.zeros((bottom - top, right - left), dtype=np.float64)

        for a, b in segments:
            seg_bounds = self._bounds(min(a[0], b[0]) - pad, min(a[1], b[1]) - pad,
                                      max(a[0], b[0]) + pad, max(a[1], b[1]) + pad)
            if seg_bounds is None:
                continue
            sl, st, sr, sb = seg_bounds
            px, py = np.meshgrid(np.arange(sl, sr) + 0.5, np.arange(st, sb) + 0.5)
            coverage = self._segment_coverage(px, py, a, b, half_width)
            region = mask[st - top:sb - top, sl - left:sr - left]
            np.maximum(region, coverage, out=region)

        self._composite(left, top, np.array(color[:3], dtype=np.float64),
                        mask * (color[3] / 255.0))

    def _segment_coverage(self, px: np.ndarray, py: np.ndarray,
                          a: np.ndarray, b: np.ndarray, half_width: float) -> np.ndarray:
        pax = px - a[0]
        pay = py - a[1]
        bax = b[0] - a[0]
        bay = b[1] - a[1]
        denom = bax * bax + bay * bay
        if denom == 0:
            h = 0.0
        else:
            h = np.clip((pax * bax + pay * bay) / denom, 0.0, 1.0)
        dist = np.hypot(pax - bax * h, pay - bay * h)
        if self.anti_aliasing:
            return np.clip(half_width + 0.5 - dist, 0.0, 1.0)
        return (dist <= half_width).astype(np.float64)

    def fill_polygons(self, polygons: Sequence[Sequence[Point]], color: Color):
        if color[3] == 0:
            return

        device = []
        for polygon in polygons:
            pts = self._to_device(polygon)
            pts = pts[np.all(np.isfinite(pts), axis=1)]
            if len(pts) >= 3:
                device.append(pts)
        if not device:
            return

        everything = np.concatenate(device)
        bounds = self._bounds(everything[:, 0].min(), everything[:, 1].min(),
                              everything[:, 0].max(), everything[:, 1].max())
        if bounds is None:
            return
        left, top, right, bottom = bounds

        offsets = self._sample_offsets()
        mask = np.zeros((bottom - top, right - left), dtype=np.float64)
        for oy in offsets:
            for ox in offsets:
                px, py = np.meshgrid(np.arange(left, right) + ox, np.arange(top, bottom) + oy)
                mask += self._nonzero_inside(px, py, device)
        mask /= len(offsets) ** 2

        self._composite(left, top, np.array(color[:3], dtype=np.float64),
                        mask * (color[3] / 255.0))

    def _nonzero_inside(self, px: np.ndarray, py: np.ndarray, polygons: List[np.ndarray]) -> np.ndarray:
        winding = np.zeros(px.shape, dtype=np.int32)
        for pts in polygons:
            nxt = np.roll(pts, -1, axis=0)
            for (xi, yi), (xj, yj) in zip(pts, nxt):
                cross = (xj - xi) * (py - yi) - (yj - yi) * (px - xi)
                upward = (yi <= py) & (yj > py) & (cross > 0)
                downward = (yi > py) & (yj <= py) & (cross < 0)
                winding += upward.astype(np.int32) - downward.astype(np.int32)
        return (winding != 0).astype(np.float64)

    def fill_circle(self, cx: float, cy: float, radius: float, color: Color):
        if color[3] == 0 or not (radius > 0):
            return
        (dx, dy), = self._to_device([(cx, cy)])
        # sub-pixel dots would vanish between pixel centres
        r = max(radius * self.context.transform.scale_factor(), MIN_DOT_RADIUS)
        if not (math.isfinite(dx) and math.isfinite(dy)):
            return
        bounds = self._bounds(dx - r - 1, dy - r - 1, dx + r + 1, dy + r + 1)
        if bounds is None:
            return
        left, top, right, bottom = bounds
        px, py = np.meshgrid(np.arange(left, right) + 0.5, np.arange(top, bottom) + 0.5)
        dist = np.hypot(px - dx, py - dy)
        if self.anti_aliasing:
            mask = np.clip(r + 0.5 - dist, 0.0, 1.0)
        else:
            mask = (dist <= r).astype(np.float64)
        self._composite(left, top, np.array(color[:3], dtype=np.float64),
                        mask * (color[3] / 255.0))

    def _composite(self, left: int, top: int, fg_rgb: np.ndarray, fg_alpha: np.ndarray):
        # source-over, same arithmetic as blending one pixel at a time
        h, w = fg_alpha.shape
        x0 = max(left, 0)
        y0 = max(top, 0)
        x1 = min(left + w, self.width)
        y1 = min(top + h, self.height)
        if x0 >= x1 or y0 >= y1:
            return

        fa = fg_alpha[y0 - top:y1 - top, x0 - left:x1 - left]
        dst = self.buffer[y0:y1, x0:x1].astype(np.float64)
        ba = dst[..., 3] / 255.0

        out_a = fa + ba * (1 - fa)
        safe = np.where(out_a > 0, out_a, 1.0)
        out_rgb = (fg_rgb * fa[..., None] + dst[..., :3] * (ba * (1 - fa))[..., None]) / safe[..., None]

        self.buffer[y0:y1, x0:x1, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
        self.buffer[y0:y1, x0:x1, 3] = np.clip(np.rint(out_a * 255), 0, 255).astype(np.uint8)

    def get_rgb_buffer(self) -> np.ndarray:
        return self.buffer[:, :, 0:3].copy()

    def get_rgba_buffer(self) -> np.ndarray:
        return self.buffer.copy()

    def save_png(self, path: Path):
        Image.fromarray(self.get_rgb_buffer(), 'RGB').save(path)
