import numpy as np
from numpy.polynomial.legendre import leggauss

from .quadrature import Quadrature


class GaussLegendreQuadrature(Quadrature):
    """
    n-point Gauss-Legendre rule on the unit interval.

    The points are returned in 1D barycentric form ``(1 - x, x)`` and the
    weights are normalized to sum to one, so that ``ws@f(bcs)*h`` integrates
    over an interval of length ``h``. The rule is exact for polynomials of
    degree ``2n - 1``.
    """
    def __init__(self, index):
        if index < 1:
            raise ValueError(f"the number of points must be positive, got {index}")
        x, w = leggauss(index)
        self.quadpts = np.zeros((index, 2), dtype=np.float64)
        self.quadpts[:, 1] = (x + 1)/2
        self.quadpts[:, 0] = 1 - self.quadpts[:, 1]
        self.weights = w/2
