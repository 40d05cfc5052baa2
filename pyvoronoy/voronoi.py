import numpy as np
from loguru import logger

from pyvoronoy.delaunay import Triangulation, Vertex
from pyvoronoy.geometry import sort_by_angle_around
from pyvoronoy.utils import Polygon


def voronoi_cell(triangulation: Triangulation, vertex: Vertex) -> Polygon:
    """
    Voronoi cell of one vertex: the circumcenters of its incident faces,
    sorted counterclockwise around it.

    :param triangulation: triangulation containing `vertex`
    :param vertex: a retained (non-bounding) vertex
    :return: array of shape (k, 2); empty if the vertex has no faces
    """
    centers = [f.circumcenter for f in triangulation.faces_around(vertex.id)]
    if not centers:
        return np.empty((0, 2), dtype=float)
    return sort_by_angle_around(np.array(centers), vertex.point)


def voronoi_polygons(triangulation: Triangulation) -> list[Polygon]:
    """
    Dual of the triangulation: one polygon per retained vertex.

    Polygon i belongs to the i-th input point. Every cell is convex as long as
    no two circumcenters coincide and the vertex has degree >= 3.
    """
    polygons = [voronoi_cell(triangulation, v) for v in triangulation.vertices]
    empty = sum(1 for p in polygons if len(p) == 0)
    if empty:
        logger.debug(f"{empty} of {len(polygons)} Voronoi cells are empty (duplicate points?)")
    return polygons
