from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray
from shewchuk import orientation

from pyvoronoy.utils import EPS, Vec2d


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in screen convention (top is the smaller y)."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def corners(self) -> NDArray[np.floating]:
        """Corners ordered (left, top), (left, bottom), (right, bottom), (right, top)."""
        return np.array(
            [
                [self.left, self.top],
                [self.left, self.bottom],
                [self.right, self.bottom],
                [self.right, self.top],
            ],
            dtype=float,
        )

    def contains(self, point: Vec2d) -> bool:
        return (
            self.left <= point[0] <= self.right
            and self.top <= point[1] <= self.bottom
        )


@dataclass(frozen=True)
class Circle:
    center: NDArray[np.floating]
    radius: float


def as_points(points: ArrayLike) -> NDArray[np.floating]:
    """
    Convert a sequence of 2D coordinates into a float array of shape (n, 2).

    :param points: any array-like of (x, y) pairs, possibly empty
    :return: float array of shape (n, 2)
    """
    arr = np.asarray(points, dtype=float)
    if arr.size == 0:
        return arr.reshape(0, 2)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected an (n, 2) array of points, got shape {arr.shape}")
    return arr


def extended_bounds(
    points: ArrayLike,
    scale: float = 1.1,
    symmetric: bool = False,
) -> Bounds:
    """
    Bounding rectangle of `points` grown by `scale` in both axes.

    The default follows the two-step construction used for the bounding quad:
    width and height are scaled keeping the top-left corner fixed, then the
    rectangle is shifted up-left by (scale - 1) / 2 of the *scaled* size. With
    scale 1.1 this leaves a 5.5% margin on the left/top and 4.5% on the
    right/bottom. With `symmetric=True` the margin is (scale - 1) / 2 of the
    original size on every side.

    :param points: input points, shape (n, 2) with n >= 1
    :param scale: growth factor, strictly between 1 and 2
    :param symmetric: center the grown rectangle on the original one
    :return: the extended bounds
    """
    if not 1.0 < scale < 2.0:
        raise ValueError(f"Bounds scale must be in (1, 2), got {scale}")

    pts = as_points(points)
    if len(pts) == 0:
        raise ValueError("Cannot compute bounds of an empty point set")

    left, top = pts.min(axis=0)
    right, bottom = pts.max(axis=0)
    width = float(right - left)
    height = float(bottom - top)

    if symmetric:
        dx = width * (scale - 1.0) / 2
        dy = height * (scale - 1.0) / 2
        return Bounds(left - dx, top - dy, right + dx, bottom + dy)

    scaled_width = width * scale
    scaled_height = height * scale
    left = float(left) - scaled_width * (scale - 1.0) / 2
    top = float(top) - scaled_height * (scale - 1.0) / 2
    return Bounds(left, top, left + scaled_width, top + scaled_height)


def circumcircle(a: Vec2d, b: Vec2d, c: Vec2d) -> Circle:
    """
    Circle through the three corners of a triangle.

    Collinear corners have no circumcircle; the result then has an infinite
    center and radius.
    """
    ax, ay = a[0], a[1]
    bx, by = b[0], b[1]
    cx, cy = c[0], c[1]

    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if d == 0:
        return Circle(center=np.array([np.inf, np.inf]), radius=float("inf"))

    a2 = ax * ax + ay * ay
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / d
    uy = (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / d
    center = np.array([ux, uy], dtype=float)
    return Circle(center=center, radius=float(np.hypot(ax - ux, ay - uy)))


def angular_order(points: ArrayLike, center: Vec2d) -> NDArray[np.integer]:
    """Indices that sort `points` by ascending polar angle around `center`."""
    pts = as_points(points)
    angles = np.arctan2(pts[:, 1] - center[1], pts[:, 0] - center[0])
    return np.argsort(angles, kind="stable")


def sort_by_angle_around(points: ArrayLike, center: Vec2d) -> NDArray[np.floating]:
    """
    Sort points by ascending angle (arctan2) around `center`.

    In a y-up frame this walks counterclockwise; ties keep their input order.
    """
    pts = as_points(points)
    return pts[angular_order(pts, center)]


def is_collinear(points: ArrayLike) -> bool:
    """True if all points lie on one line (fewer than two distinct points included)."""
    pts = as_points(points)
    if len(pts) < 3:
        return True

    a = pts[0]
    distinct = np.any(pts != a, axis=1)
    if not np.any(distinct):
        return True
    b = pts[int(np.argmax(distinct))]

    return all(orientation(a[0], a[1], b[0], b[1], p[0], p[1]) == 0 for p in pts)


def squared_displacement(a: ArrayLike, b: ArrayLike) -> float:
    """Sum of squared per-index distances between two equally sized point sets."""
    pa = as_points(a)
    pb = as_points(b)
    if pa.shape != pb.shape:
        raise ValueError(f"Point sets differ in shape: {pa.shape} vs {pb.shape}")
    return float(np.sum((pa - pb) ** 2))


def polygon_area(coords: ArrayLike) -> float:
    """Signed area of polygon (positive for CCW)."""
    pts = as_points(coords)
    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def is_convex_polygon(coords: ArrayLike, eps: float = EPS) -> bool:
    """
    Check that walking the polygon in the given order always turns the same way.

    Turns whose cross product is within `eps` of zero (relative to the
    polygon's extent) are treated as straight.
    """
    pts = as_points(coords)
    if len(pts) < 3:
        return False

    edges = np.roll(pts, -1, axis=0) - pts
    nxt = np.roll(edges, -1, axis=0)
    cross = edges[:, 0] * nxt[:, 1] - edges[:, 1] * nxt[:, 0]

    extent = float(np.max(np.ptp(pts, axis=0)))
    if extent == 0:
        return False
    tol = eps * extent * extent
    turns = cross[np.abs(cross) > tol]
    if len(turns) == 0:
        return False
    return bool(np.all(turns > 0) or np.all(turns < 0))


def frame_corners(width: float, height: float) -> NDArray[np.floating]:
    """
    Four far-off points around a width x height viewport.

    Appending them after the real points keeps every visible cell bounded by
    real neighbours instead of the bounding quad.
    """
    return np.array(
        [
            [-width, -height],
            [-width, 2 * height],
            [2 * width, 2 * height],
            [2 * width, -height],
        ],
        dtype=float,
    )
