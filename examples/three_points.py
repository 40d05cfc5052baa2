import numpy as np

from pyvoronoy.engine import Voronoy


if __name__ == "__main__":
    points = np.array(
        [
            (0, 0),
            (100, 0),
            (50, 100),
        ]
    )

    vor = Voronoy()
    vor.set_points(points)
    print(f"{len(vor.get_triangulation())} face(s), {len(vor.get_voronoy_polygons())} cells")
    vor.plot(show=True, title="Three points")
