import numpy as np
from loguru import logger
from numpy.typing import ArrayLike, NDArray

from pyvoronoy.delaunay import Face, Triangulation, Vertex
from pyvoronoy.geometry import (
    Bounds,
    angular_order,
    as_points,
    extended_bounds,
    is_collinear,
)
from pyvoronoy.utils import N_BOUNDING_VERTICES


def initialize_triangulation(bounds: Bounds) -> tuple[list[Vertex], list[Face]]:
    """
    Seed the triangulation with the bounding quad split along one diagonal.

    :param bounds: rectangle enclosing every point to be inserted
    :return: the four bounding vertices (ids 0-3) and the two seed faces
    """
    # 0 = (left, top), 1 = (left, bottom), 2 = (right, bottom), 3 = (right, top)
    vertices = [
        Vertex(float(x), float(y), vertex_id)
        for vertex_id, (x, y) in enumerate(bounds.corners())
    ]

    # [/]
    faces = [
        Face((vertices[0], vertices[1], vertices[3])),
        Face((vertices[1], vertices[2], vertices[3])),
    ]
    return vertices, faces


def find_bad_faces(
    faces: list[Face], point: NDArray[np.floating]
) -> tuple[list[Face], list[Face]]:
    """Split faces into those whose circumcircle strictly contains `point` and the rest."""
    bad_faces = []
    good_faces = []
    for face in faces:
        if face.circumcircle_contains(point):
            bad_faces.append(face)
        else:
            good_faces.append(face)
    return bad_faces, good_faces


def cavity_boundary(bad_faces: list[Face], center: NDArray[np.floating]) -> list[Vertex]:
    """
    Boundary loop of the cavity left by removing `bad_faces`.

    The union of the bad faces is star-shaped around the inserted point, so
    sorting their distinct corners by angle around it closes the loop.
    """
    by_id: dict[int, Vertex] = {}
    for face in bad_faces:
        for v in face.vertices:
            by_id.setdefault(v.id, v)

    hole = list(by_id.values())
    coords = np.array([[v.x, v.y] for v in hole], dtype=float)
    return [hole[i] for i in angular_order(coords, center)]


def insert_point(vertex: Vertex, faces: list[Face]) -> list[Face]:
    """
    Insert one vertex into the triangulation (Bowyer-Watson step).

    :param vertex: the new vertex
    :param faces: current faces, not modified
    :return: the faces of the updated triangulation
    """
    point = vertex.point
    bad_faces, good_faces = find_bad_faces(faces, point)

    if not bad_faces:
        # Only happens for a point coinciding with an existing vertex
        logger.debug(
            f"Vertex {vertex.id} at {np.round(point, 2)} lies in no circumcircle; not adding it"
        )
        return faces

    hole = cavity_boundary(bad_faces, point)
    logger.trace(
        f"Vertex {vertex.id}: {len(bad_faces)} bad faces, cavity of {len(hole)} vertices"
    )

    for prev, nxt in zip(hole, hole[1:] + hole[:1]):
        good_faces.append(Face((prev, nxt, vertex)))

    return good_faces


def remove_bounding_faces(faces: list[Face]) -> list[Face]:
    """Discard every face that references one of the bounding vertices."""
    return [f for f in faces if not f.touches_bounding_vertex()]


def triangulate(
    points: ArrayLike,
    bounds_scale: float = 1.1,
    symmetric_bounds: bool = False,
    skip_collinear: bool = True,
) -> Triangulation:
    """
    Delaunay triangulation by incremental (Bowyer-Watson) insertion.

    Points are inserted in input order inside a bounding quad whose faces are
    removed at the end. Vertex ids 0-3 belong to the quad, so input point i
    gets id i + 4.

    :param points: input points, shape (n, 2)
    :param bounds_scale: growth factor of the bounding quad
    :param symmetric_bounds: center the bounding quad on the points
    :param skip_collinear: return an empty triangulation for collinear input
    :return: the triangulation; empty if fewer than 3 points are given
    """
    pts = as_points(points)

    if len(pts) < 3:
        logger.debug(f"Skipping triangulation: only {len(pts)} points")
        return Triangulation()

    if skip_collinear and is_collinear(pts):
        logger.debug(f"Skipping triangulation: all {len(pts)} points are collinear")
        return Triangulation()

    bounds = extended_bounds(pts, scale=bounds_scale, symmetric=symmetric_bounds)
    bounding_vertices, faces = initialize_triangulation(bounds)

    vertices = []
    for vertex_id, (x, y) in enumerate(pts, start=N_BOUNDING_VERTICES):
        vertex = Vertex(float(x), float(y), vertex_id)
        vertices.append(vertex)
        faces = insert_point(vertex, faces)

    final_faces = remove_bounding_faces(faces)
    logger.debug(
        f"Triangulated {len(vertices)} points into {len(final_faces)} faces "
        f"({len(faces) - len(final_faces)} bounding faces removed)"
    )

    return Triangulation(
        faces=final_faces,
        vertices=vertices,
        bounding_vertices=bounding_vertices,
        all_faces=faces,
    )
