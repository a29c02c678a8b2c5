"""
Debug snapshots of solver state and a PNG renderer for them.

Solvers build a GraphicsSnapshot from their current state in
``visualize()``; nothing here feeds back into placement.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image, ImageDraw

from padpack.geometry import Point, Rect


@dataclass(frozen=True)
class SnapPoint:
    at: Point
    color: str = "marker"
    label: str = ""


@dataclass(frozen=True)
class SnapLine:
    points: tuple[Point, ...]
    color: str = "outline"
    label: str = ""


@dataclass(frozen=True)
class SnapRect:
    rect: Rect
    color: str = "pad"
    label: str = ""


@dataclass(frozen=True)
class SnapText:
    at: Point
    text: str


@dataclass
class GraphicsSnapshot:
    """Renderable primitives describing one solver's state."""

    title: str = ""
    points: list[SnapPoint] = field(default_factory=list)
    lines: list[SnapLine] = field(default_factory=list)
    rects: list[SnapRect] = field(default_factory=list)
    texts: list[SnapText] = field(default_factory=list)

    def merge(self, other: GraphicsSnapshot) -> GraphicsSnapshot:
        return GraphicsSnapshot(
            title=self.title or other.title,
            points=self.points + other.points,
            lines=self.lines + other.lines,
            rects=self.rects + other.rects,
            texts=self.texts + other.texts,
        )

    def is_empty(self) -> bool:
        return not (self.points or self.lines or self.rects or self.texts)

    def extent(self) -> Rect | None:
        xs: list[float] = []
        ys: list[float] = []
        for p in self.points:
            xs.append(p.at.x)
            ys.append(p.at.y)
        for ln in self.lines:
            xs.extend(q.x for q in ln.points)
            ys.extend(q.y for q in ln.points)
        for r in self.rects:
            xs.extend((r.rect.min_x, r.rect.max_x))
            ys.extend((r.rect.min_y, r.rect.max_y))
        for t in self.texts:
            xs.append(t.at.x)
            ys.append(t.at.y)
        if not xs:
            return None
        return Rect(min(xs), min(ys), max(xs), max(ys))


class SnapshotRenderer:
    """Rasterize GraphicsSnapshots with Pillow (y axis up)."""

    COLORS = {
        'background': (11, 17, 32),
        'grid': (51, 65, 85),
        'outline': (239, 68, 68),
        'hole': (59, 130, 246),
        'pad': (255, 215, 0),
        'pad_outline': (180, 140, 0),
        'component': (134, 239, 172),
        'obstacle': (148, 163, 184),
        'candidate': (147, 197, 253),
        'free_rect': (34, 197, 94),
        'marker': (253, 186, 116),
        'best': (255, 255, 255),
        'text': (248, 250, 252),
    }

    MAX_PX = 2000   # longest image side, excluding margins

    def __init__(self, px_per_unit: float = 20.0, margin_px: int = 20):
        self.px_per_unit = px_per_unit
        self.margin_px = margin_px

    def _color(self, name: str) -> tuple[int, int, int]:
        return self.COLORS.get(name, self.COLORS['marker'])

    def render(self, snapshot: GraphicsSnapshot) -> Image.Image:
        ext = snapshot.extent() or Rect(-1, -1, 1, 1)
        s = min(self.px_per_unit, self.MAX_PX / max(ext.width, ext.height, 1e-9))
        m = self.margin_px
        width = max(1, int(ext.width * s) + 2 * m)
        height = max(1, int(ext.height * s) + 2 * m)

        def px(p: Point) -> tuple[float, float]:
            return (m + (p.x - ext.min_x) * s, height - m - (p.y - ext.min_y) * s)

        img = Image.new('RGB', (width, height), self.COLORS['background'])
        draw = ImageDraw.Draw(img)

        for r in snapshot.rects:
            x0, y0 = px(Point(r.rect.min_x, r.rect.max_y))
            x1, y1 = px(Point(r.rect.max_x, r.rect.min_y))
            if r.color == 'pad':
                draw.rectangle([x0, y0, x1, y1], fill=self.COLORS['pad'],
                               outline=self.COLORS['pad_outline'])
            else:
                draw.rectangle([x0, y0, x1, y1], outline=self._color(r.color))
        for ln in snapshot.lines:
            if len(ln.points) >= 2:
                draw.line([px(q) for q in ln.points], fill=self._color(ln.color), width=2)
        for p in snapshot.points:
            x, y = px(p.at)
            draw.ellipse([x - 3, y - 3, x + 3, y + 3], fill=self._color(p.color))
        for t in snapshot.texts:
            draw.text(px(t.at), t.text, fill=self.COLORS['text'])
        if snapshot.title:
            draw.text((4, 4), snapshot.title, fill=self.COLORS['text'])
        return img


def render_png(
    snapshot: GraphicsSnapshot, path: Path | str, px_per_unit: float = 20.0,
) -> Path:
    """Write *snapshot* to a PNG file and return its path."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    SnapshotRenderer(px_per_unit=px_per_unit).render(snapshot).save(out)
    return out


def loop_line(points: list[Point], color: str = "outline") -> SnapLine:
    """Closed polyline for a loop's vertices."""
    return SnapLine(points=tuple(points + points[:1]), color=color)
