import numpy as np
from scipy.special import roots_jacobi

from .quadrature import Quadrature


class TriangleQuadrature(Quadrature):
    """
    Conical product (Stroud) rule on the reference triangle.

    The collapsed coordinates use a Gauss-Jacobi rule with weight ``(1-x)`` in
    the first direction and a Gauss-Legendre rule in the second. With ``n``
    points per direction the ``n*n`` point rule is exact for polynomials of
    total degree ``2n - 1``. Points are barycentric ``(NQ, 3)`` and the weights
    sum to one.
    """
    def __init__(self, index):
        if index < 1:
            raise ValueError(f"the number of points must be positive, got {index}")
        self.index = index

        points = []
        weights = []
        for alpha in (1, 0):
            p, w, s = roots_jacobi(index, alpha, 0, mu=True)
            points.append((p + 1)/2)
            weights.append(w/s)
        t0, t1 = np.meshgrid(*points, indexing='ij')
        w0, w1 = np.meshgrid(*weights, indexing='ij')
        t0 = t0.flatten()
        t1 = t1.flatten()

        self.quadpts = np.zeros((index*index, 3), dtype=np.float64)
        self.quadpts[:, 0] = t0
        self.quadpts[:, 1] = t1*(1 - t0)
        self.quadpts[:, 2] = 1 - self.quadpts[:, 0] - self.quadpts[:, 1]
        self.weights = (w0*w1).flatten()
