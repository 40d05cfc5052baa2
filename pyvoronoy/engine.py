import numpy as np
from loguru import logger
from numpy.typing import ArrayLike, NDArray

from pyvoronoy.build import triangulate
from pyvoronoy.config import VoronoySettings, get_settings
from pyvoronoy.delaunay import Face, Triangulation
from pyvoronoy.geometry import as_points, squared_displacement
from pyvoronoy.utils import Polygon
from pyvoronoy.voronoi import voronoi_polygons


class InvalidThresholdError(ValueError): ...


class Voronoy:
    """
    Voronoi diagram of a moving point set.

    Points are replaced wholesale with `set_points`; the triangulation and the
    polygons are rebuilt lazily, on the next read, and cached until the points
    change. Cell i of `get_voronoy_polygons()` belongs to point i of the last
    accepted `set_points` call.

    One instance per independent point set: the caches are not meant to be
    shared.
    """

    def __init__(self, settings: VoronoySettings | None = None) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.nodes: NDArray[np.floating] = np.empty((0, 2), dtype=float)
        self._triangulation: Triangulation | None = None
        self._polygons: list[Polygon] | None = None

    def set_points(self, points: ArrayLike, threshold: float | None = None) -> bool:
        """
        Replace the point set unless it barely moved.

        The new points are compared with the stored ones index by index, so
        callers must keep a stable order across calls. When the counts match
        and the sum of squared displacements is below `threshold` the call is
        a no-op.

        :param points: new points, shape (n, 2)
        :param threshold: movement threshold; defaults to the configured one
        :return: True if the points were replaced, False if the call was skipped
        """
        if threshold is None:
            threshold = self.settings.threshold
        if threshold < 0:
            raise InvalidThresholdError(f"Threshold must be non-negative, got {threshold}")

        pts = as_points(points).copy()
        if len(pts) == len(self.nodes):
            moved = squared_displacement(pts, self.nodes)
            if moved < threshold:
                logger.trace(f"Points moved by {moved:.4g} < {threshold}; keeping cache")
                return False

        logger.debug(f"Accepted {len(pts)} points; invalidating cache")
        pts.flags.writeable = False
        self.nodes = pts
        self.clear()
        return True

    def clear(self) -> None:
        """Drop the cached triangulation and polygons; keep the points."""
        self._triangulation = None
        self._polygons = None

    @property
    def triangulation(self) -> Triangulation:
        self.calculate_triangulation()
        return self._triangulation if self._triangulation is not None else Triangulation()

    def get_triangulation(self) -> list[Face]:
        """Faces of the current triangulation, bounding faces excluded."""
        return self.triangulation.faces

    def calculate_triangulation(self, force: bool = False) -> None:
        if len(self.nodes) < 3:
            return

        if not force and self._triangulation is not None:
            return

        self._triangulation = triangulate(
            self.nodes,
            bounds_scale=self.settings.bounds_scale,
            symmetric_bounds=self.settings.symmetric_bounds,
            skip_collinear=self.settings.skip_collinear,
        )
        self._polygons = None

    def get_voronoy_polygons(self) -> list[Polygon]:
        """One read-only (k, 2) polygon per point, in input order."""
        self.calculate_voronoy_polygons()
        return self._polygons if self._polygons is not None else []

    def calculate_voronoy_polygons(self) -> None:
        self.calculate_triangulation()
        if self._triangulation is None or self._polygons is not None:
            return

        polygons = voronoi_polygons(self._triangulation)
        for poly in polygons:
            poly.flags.writeable = False
        self._polygons = polygons

    def plot(self, ax=None, show: bool = False, title: str = "Voronoy", **kwargs):
        """Debug overlay: triangles, circumcircles and Voronoi cells (needs matplotlib)."""
        logger.debug(f"Plotting {len(self.get_voronoy_polygons())} polygons")
        return self.triangulation.plot(
            polygons=self.get_voronoy_polygons(),
            ax=ax,
            show=show,
            title=title,
            **kwargs,
        )
