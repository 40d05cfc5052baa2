"""
Simulate points being dragged around a viewport.

Every tick the positions jitter slightly and one point moves noticeably; the
threshold keeps the cached cells while only the jitter is present.
"""

import numpy as np
from loguru import logger

from pyvoronoy.engine import Voronoy
from pyvoronoy.geometry import frame_corners

WIDTH, HEIGHT = 800, 600
N_POINTS = 12
N_TICKS = 60
THRESHOLD = 4.0


if __name__ == "__main__":
    rng = np.random.default_rng(0)
    balls = rng.uniform([0, 0], [WIDTH, HEIGHT], size=(N_POINTS, 2))
    corners = frame_corners(WIDTH, HEIGHT)

    vor = Voronoy()
    rebuilds = 0
    for tick in range(N_TICKS):
        balls += rng.normal(scale=0.05, size=balls.shape)
        if tick % 10 == 0:
            balls[0] += (15.0, -10.0)

        if vor.set_points(np.vstack([balls, corners]), threshold=THRESHOLD):
            rebuilds += 1
        cells = vor.get_voronoy_polygons()[:N_POINTS]
        logger.debug(f"tick {tick}: cell 0 has {len(cells[0])} corners")

    logger.info(f"{rebuilds} rebuilds over {N_TICKS} ticks")

    ax = vor.plot(title="Dragging points", circumcircles=False)
    ax.set_xlim(0, WIDTH)
    ax.set_ylim(HEIGHT, 0)

    import matplotlib.pyplot as plt

    plt.show()
