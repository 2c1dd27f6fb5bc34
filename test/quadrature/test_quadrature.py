import numpy as np
import pytest

from flowfem.quadrature import GaussLegendreQuadrature
from flowfem.quadrature import TriangleQuadrature
from flowfem.quadrature import TensorProductQuadrature

from quadrature_data import *


class TestGaussLegendreQuadrature:
    @pytest.mark.parametrize("data", interval_data)
    def test_exactness(self, data):
        qf = GaussLegendreQuadrature(data['index'])
        bcs, ws = qf.get_quadrature_points_and_weights()
        assert qf.number_of_quadrature_points() == data['index']
        np.testing.assert_allclose(np.sum(bcs, axis=-1), 1.0)
        val = ws@bcs[:, 1]**data['degree']
        np.testing.assert_allclose(val, data['integral'], rtol=1e-13)

    def test_invalid_index(self):
        with pytest.raises(ValueError):
            GaussLegendreQuadrature(0)


class TestTriangleQuadrature:
    @pytest.mark.parametrize("data", triangle_data)
    def test_exactness(self, data):
        qf = TriangleQuadrature(data['index'])
        bcs, ws = qf.get_quadrature_points_and_weights()
        assert bcs.shape == (data['index']**2, 3)
        assert np.all(bcs >= 0)
        np.testing.assert_allclose(np.sum(bcs, axis=-1), 1.0)
        val = ws@np.prod(bcs**np.array(data['alpha']), axis=-1)
        np.testing.assert_allclose(val, data['integral'], rtol=1e-12)

    def test_point_and_weight(self):
        qf = TriangleQuadrature(2)
        bcs, ws = qf.get_quadrature_points_and_weights()
        bc, w = qf.get_quadrature_point_and_weight(1)
        np.testing.assert_array_equal(bc, bcs[1])
        assert w == ws[1]


class TestTensorProductQuadrature:
    @pytest.mark.parametrize("n", [1, 2, 3])
    def test_weights(self, n):
        qf = GaussLegendreQuadrature(n)
        tqf = TensorProductQuadrature((qf, qf))
        bcs, ws = tqf.get_quadrature_points_and_weights()
        assert isinstance(bcs, tuple) and len(bcs) == 2
        assert tqf.number_of_quadrature_points() == n*n
        np.testing.assert_allclose(np.sum(ws), 1.0)

    def test_product_integral(self):
        # \int_0^1 \int_0^1 x^2 y^3 = 1/12
        qf = GaussLegendreQuadrature(3)
        tqf = TensorProductQuadrature((qf, qf))
        (bc0, bc1), ws = tqf.get_quadrature_points_and_weights()
        x = bc0[:, 1]
        y = bc1[:, 1]
        f = np.einsum('i, j->ij', x**2, y**3).reshape(-1)
        np.testing.assert_allclose(ws@f, 1/12, rtol=1e-13)
