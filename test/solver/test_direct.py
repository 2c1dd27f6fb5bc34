import numpy as np
import pytest
from scipy.sparse import csc_matrix, csr_matrix, diags

from flowfem.solver import spsolve, csc_arrays
from flowfem.errors import SolveError


def laplace_1d(n):
    return diags([-np.ones(n-1), 2*np.ones(n), -np.ones(n-1)], [-1, 0, 1], format='csc')


class TestSpsolve:
    @pytest.mark.parametrize("solver", ["scipy", "splu"])
    @pytest.mark.parametrize("n", [2, 5, 20])
    def test_solve(self, solver, n):
        A = laplace_1d(n)
        x = np.linspace(0, 1, n)
        b = A@x
        np.testing.assert_allclose(spsolve(A, b, solver=solver), x, atol=1e-12)

    def test_unsymmetric(self):
        A = csr_matrix(np.array([[4.0, 1.0, 0.0], [-1.0, 3.0, 2.0], [0.0, -2.0, 5.0]]))
        b = np.array([1.0, 2.0, 3.0])
        np.testing.assert_allclose(spsolve(A, b), np.linalg.solve(A.toarray(), b))

    def test_empty_system(self):
        x = spsolve(csc_matrix((0, 0)), np.zeros(0))
        assert x.shape == (0, )

    @pytest.mark.parametrize("solver", ["scipy", "splu"])
    def test_singular(self, solver):
        A = csc_matrix(np.array([[1.0, 1.0], [1.0, 1.0]]))
        with pytest.raises(SolveError):
            spsolve(A, np.array([1.0, 2.0]), solver=solver)

    def test_dense_matrix(self):
        with pytest.raises(TypeError):
            spsolve(np.eye(2), np.ones(2))

    def test_shape_mismatch(self):
        with pytest.raises(SolveError):
            spsolve(laplace_1d(3), np.ones(4))

    def test_unknown_solver(self):
        with pytest.raises(ValueError):
            spsolve(laplace_1d(3), np.ones(3), solver="mumps")


class TestCscArrays:
    def test_arrays(self):
        A = csr_matrix(np.array([[1.0, 0.0, 2.0], [0.0, 3.0, 0.0], [4.0, 0.0, 5.0]]))
        indptr, indices, data = csc_arrays(A)
        assert len(indptr) == 4
        assert len(indices) == len(data) == 5
        np.testing.assert_array_equal(indptr, [0, 2, 3, 5])
        np.testing.assert_array_equal(indices, [0, 2, 1, 0, 2])
        np.testing.assert_array_equal(data, [1.0, 4.0, 3.0, 2.0, 5.0])
