from typing import TypeAlias
from numpy.typing import NDArray
import numpy as np

EPS = 1e-9
N_BOUNDING_VERTICES = 4
Vec2d: TypeAlias = tuple[float, float] | NDArray[np.floating]
Polygon: TypeAlias = NDArray[np.floating]
