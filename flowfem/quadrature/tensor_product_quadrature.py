import numpy as np

from .quadrature import Quadrature


class TensorProductQuadrature(Quadrature):
    def __init__(self, qfs):
        """

        Notes
        -----

        qfs is a tuple of 1D rules. The points are kept as a tuple of 1D
        barycentric arrays, the weights are the flattened outer product in
        (i, j) order, i.e. the second direction varies fastest.
        """
        self.quadpts = ()
        weights = ()
        for qf in qfs:
            bcs, ws = qf.get_quadrature_points_and_weights()
            self.quadpts += (bcs, )
            weights += (ws, )

        s0 = 'abcdef'
        n = len(qfs)
        s = ', '.join(s0[:n]) + '->' + s0[:n]
        self.weights = np.einsum(s, *weights).reshape(-1)

    def number_of_quadrature_points(self):
        return self.weights.shape[0]

    def get_quadrature_point_and_weight(self, i):
        raise NotImplementedError("tensor product points are only available as a tuple")
