"""Pan/zoom transform and its constraints.

The transform maps layout coordinates to screen coordinates:
``screen = layout * k + (x, y)``. It never touches simulation positions.
"""

from dataclasses import dataclass

from entity_topology.config import settings

Point = tuple[float, float]


@dataclass(frozen=True)
class ZoomTransform:
    """Uniform scale ``k`` followed by translation ``(x, y)``."""

    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    @property
    def scale(self) -> float:
        return self.k

    def apply(self, point: Point) -> Point:
        return (point[0] * self.k + self.x, point[1] * self.k + self.y)

    def invert(self, point: Point) -> Point:
        return ((point[0] - self.x) / self.k, (point[1] - self.y) / self.k)

    def translate(self, dx: float, dy: float) -> "ZoomTransform":
        """Translate by ``(dx, dy)`` in layout units."""
        return ZoomTransform(self.k, self.x + self.k * dx, self.y + self.k * dy)

    def to_svg(self) -> str:
        return f"translate({self.x:g}, {self.y:g}) scale({self.k:g})"


IDENTITY = ZoomTransform()

WHEEL_FACTORS = {0: 0.002, 1: 0.05, 2: 1.0}  # pixel, line, page delta modes


def wheel_delta(delta_y: float, delta_mode: int = 0, ctrl_key: bool = False) -> float:
    """Convert a wheel event into a base-2 exponent for ``scale_by``."""
    factor = WHEEL_FACTORS.get(delta_mode, 1.0)
    return -delta_y * factor * (10 if ctrl_key else 1)


class ZoomBehavior:
    """
    Scale and translate extents for a canvas of ``width`` x ``height``.

    Scale is clamped to ``[min_scale, max_scale]``; translation is constrained
    so the viewport never leaves the canvas extent.
    """

    def __init__(
        self,
        width: float,
        height: float,
        min_scale: float | None = None,
        max_scale: float | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.min_scale = min_scale if min_scale is not None else settings.min_scale
        self.max_scale = max_scale if max_scale is not None else settings.max_scale

    @property
    def center(self) -> Point:
        return (self.width / 2, self.height / 2)

    def clamp_scale(self, k: float) -> float:
        return max(self.min_scale, min(self.max_scale, k))

    def constrain(self, transform: ZoomTransform) -> ZoomTransform:
        """Shift ``transform`` so the visible area stays inside the canvas."""
        dx0 = transform.invert((0, 0))[0]
        dx1 = transform.invert((self.width, self.height))[0] - self.width
        dy0 = transform.invert((0, 0))[1]
        dy1 = transform.invert((self.width, self.height))[1] - self.height

        if dx1 > dx0:
            tx = (dx0 + dx1) / 2
        else:
            tx = min(0, dx0) or max(0, dx1)
        if dy1 > dy0:
            ty = (dy0 + dy1) / 2
        else:
            ty = min(0, dy0) or max(0, dy1)
        return transform.translate(tx, ty)

    def scale_to(
        self,
        transform: ZoomTransform,
        k: float,
        point: Point | None = None,
    ) -> ZoomTransform:
        """Set the scale to ``k`` keeping ``point`` (default centre) fixed on screen."""
        anchor = point if point is not None else self.center
        layout_point = transform.invert(anchor)
        k1 = self.clamp_scale(k)
        scaled = ZoomTransform(
            k1,
            anchor[0] - layout_point[0] * k1,
            anchor[1] - layout_point[1] * k1,
        )
        return self.constrain(scaled)

    def scale_by(
        self,
        transform: ZoomTransform,
        factor: float,
        point: Point | None = None,
    ) -> ZoomTransform:
        return self.scale_to(transform, transform.k * factor, point)

    def pan(
        self,
        transform: ZoomTransform,
        anchor: Point,
        pointer: Point,
    ) -> ZoomTransform:
        """Translate so the layout point under ``anchor`` moves under ``pointer``.

        ``anchor`` is given in layout coordinates, ``pointer`` in screen coordinates.
        """
        moved = ZoomTransform(
            transform.k,
            pointer[0] - anchor[0] * transform.k,
            pointer[1] - anchor[1] * transform.k,
        )
        return self.constrain(moved)
