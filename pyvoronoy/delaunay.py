from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from shewchuk import incircle_test, orientation

from pyvoronoy.geometry import Circle, circumcircle
from pyvoronoy.utils import N_BOUNDING_VERTICES, Polygon, Vec2d


@dataclass(frozen=True)
class Vertex:
    x: float
    y: float
    id: int

    @property
    def point(self) -> NDArray[np.floating]:
        return np.array([self.x, self.y], dtype=float)

    @property
    def is_bounding(self) -> bool:
        return self.id < N_BOUNDING_VERTICES


@dataclass(eq=False)
class Face:
    """
    Triangulation facet over three vertices.

    Corners are stored counterclockwise (positive orientation). The triangle
    and its circumcircle are computed once, when the face is created.
    """

    vertices: tuple[Vertex, Vertex, Vertex]
    triangle: NDArray[np.floating] = field(init=False, repr=False)
    circumcircle: Circle = field(init=False, repr=False)
    degenerate: bool = field(init=False, repr=False)

    def __post_init__(self) -> None:
        v1, v2, v3 = self.vertices
        turn = orientation(v1.x, v1.y, v2.x, v2.y, v3.x, v3.y)
        if turn < 0:
            self.vertices = (v1, v3, v2)
        self.degenerate = turn == 0
        self.triangle = np.array([[v.x, v.y] for v in self.vertices], dtype=float)
        self.circumcircle = circumcircle(*self.triangle)

    @property
    def circumcenter(self) -> NDArray[np.floating]:
        return self.circumcircle.center

    def vertex_ids(self) -> tuple[int, int, int]:
        v1, v2, v3 = self.vertices
        return v1.id, v2.id, v3.id

    def contains_vertex_id(self, vertex_id: int) -> bool:
        return any(v.id == vertex_id for v in self.vertices)

    def touches_bounding_vertex(self) -> bool:
        return any(v.is_bounding for v in self.vertices)

    def circumcircle_contains(self, point: Vec2d) -> bool:
        """
        Strict in-circle test using Shewchuk's adaptive predicate.

        Points exactly on the circle are outside. A face with collinear
        corners contains nothing.
        """
        if self.degenerate:
            return False
        a, b, c = self.triangle
        return incircle_test(point[0], point[1], a[0], a[1], b[0], b[1], c[0], c[1]) > 0


@dataclass
class Triangulation:
    """
    Result of a triangulation pass.

    `faces` excludes every face touching a bounding vertex. `all_faces` keeps
    them; the Voronoi cells are built from it so that cells of points on the
    hull are closed by the bounding vertices.
    """

    faces: list[Face] = field(default_factory=list)
    vertices: list[Vertex] = field(default_factory=list)
    bounding_vertices: list[Vertex] = field(default_factory=list)
    all_faces: list[Face] = field(default_factory=list, repr=False)

    @property
    def points(self) -> NDArray[np.floating]:
        """Coordinates of the retained (non-bounding) vertices, in insertion order."""
        if not self.vertices:
            return np.empty((0, 2), dtype=float)
        return np.array([[v.x, v.y] for v in self.vertices], dtype=float)

    def is_empty(self) -> bool:
        return not self.faces

    def faces_around(self, vertex_id: int) -> list[Face]:
        """Faces incident to a vertex, bounding faces included."""
        return [f for f in self.all_faces if f.contains_vertex_id(vertex_id)]

    def plot(
        self,
        polygons: list[Polygon] | None = None,
        ax=None,
        show: bool = False,
        title: str = "Voronoy",
        circumcircles: bool = True,
        point_labels: bool = False,
        fontsize: int = 7,
    ):
        """
        Plot the triangulation and, optionally, its Voronoi polygons.

        :param polygons: Voronoi polygons to draw on top of the triangles
        :param ax: matplotlib axes to draw on; a new figure is created if None
        :param show: Whether to call plt.show() after plotting
        :param title: Title of the plot
        :param circumcircles: Whether to draw circumcircles and circumcenters
        :param point_labels: Whether to label points with their vertex ids
        :param fontsize: Font size for labels
        :return: the matplotlib axes
        """
        import matplotlib.pyplot as plt
        from matplotlib.patches import Circle as CirclePatch

        if ax is None:
            _, ax = plt.subplots()

        for face in self.faces:
            tri_closed = np.vstack([face.triangle, face.triangle[0]])
            ax.plot(tri_closed[:, 0], tri_closed[:, 1], "-", color="0.6", linewidth=1.0)

        if circumcircles:
            for face in self.faces:
                if face.degenerate:
                    continue
                cc = face.circumcircle
                ax.add_patch(
                    CirclePatch(
                        tuple(cc.center),
                        cc.radius,
                        fill=False,
                        color="red",
                        alpha=0.145,
                    )
                )
                ax.plot(*cc.center, "r.", markersize=4)

        for poly in polygons or []:
            if len(poly) == 0:
                continue
            closed = np.vstack([poly, poly[0]])
            ax.plot(closed[:, 0], closed[:, 1], "-", color="green", linewidth=2, alpha=0.4)

        points = self.points
        if len(points):
            ax.plot(points[:, 0], points[:, 1], "ko", markersize=4, zorder=11)

        if point_labels:
            for v in self.vertices:
                ax.text(v.x, v.y, str(v.id), fontsize=fontsize, color="purple")

        ax.set_aspect("equal")
        ax.set_title(title)

        if show:
            plt.show()

        return ax
