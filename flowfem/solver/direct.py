import warnings

import numpy as np
from scipy.sparse import csc_matrix, issparse
from scipy.sparse.linalg import spsolve as spsol, splu
from scipy.sparse.linalg import MatrixRankWarning

from ..errors import SolveError


def csc_arrays(A):
    """Return the compressed column arrays (indptr, indices, data) of `A`.

    Parameters:
        A(sparse matrix): The N x N matrix of the linear system.

    Returns:
        Tuple: indptr of length N+1, row indices and values of length nnz.
    """
    A = csc_matrix(A)
    A.sort_indices()
    return A.indptr, A.indices, A.data


def _scipy_solve(A, b):
    with warnings.catch_warnings():
        warnings.simplefilter('error', MatrixRankWarning)
        return spsol(A, b)


def _splu_solve(A, b):
    return splu(A).solve(b)


def spsolve(A, b, solver: str="scipy"):
    """Solve a sparse linear system with a direct solver.

    Parameters:
        A(csc_matrix): The matrix of the linear system.
        b(ndarray): The right-hand side.
        solver(str): "scipy" (SuperLU through spsolve) or "splu".

    Returns:
        ndarray: The solution of the linear system.

    Raises:
        SolveError: If the matrix is singular or the solution is not finite.
    """
    if not issparse(A):
        raise TypeError(f"expected a sparse matrix, got {type(A).__name__}")
    A = csc_matrix(A)
    b = np.asarray(b, dtype=np.float64)
    N = A.shape[0]
    if A.shape != (N, N) or b.shape != (N, ):
        raise SolveError(f"incompatible system: matrix {A.shape}, right hand side {b.shape}")
    if N == 0:
        return np.zeros(0, dtype=np.float64)

    try:
        if solver == "scipy":
            x = _scipy_solve(A, b)
        elif solver == "splu":
            x = _splu_solve(A, b)
        else:
            raise ValueError(f"Unknown solver: {solver}")
    except MatrixRankWarning as e:
        raise SolveError(f"singular matrix: {e}") from e
    except RuntimeError as e:
        raise SolveError(f"factorization failed: {e}") from e

    x = np.asarray(x, dtype=np.float64).reshape(-1)
    if not np.all(np.isfinite(x)):
        raise SolveError("the solution contains non finite values")
    return x
