"""
Building blocks of the weak form kernels.

Every function works on all cells of a chunk at once: `u` and `v` are the
trial and test `BasisValues`, `data` the `IntegrationData` of the chunk.
Bilinear blocks return (NC, ldof_v, ldof_u), linear ones (NC, ldof_v).
"""
from dataclasses import dataclass, field
from typing import Dict, Any

import numpy as np


@dataclass
class BasisValues:
    """Basis functions at the quadrature points, phi (NQ, NC, ldof) and
    gphi (NQ, NC, ldof, 2)."""
    phi: np.ndarray
    gphi: np.ndarray


@dataclass
class IntegrationData:
    """
    ws : (NQ, ) quadrature weights
    measure : (NQ, NC) integration density, sum_q ws[q]*measure[q, c] = |K_c|
    points : (NQ, NC, 2) cartesian quadrature points
    ext : name -> (NQ, NC) values of the external functions
    """
    ws: np.ndarray
    measure: np.ndarray
    points: np.ndarray
    index: Any = field(default_factory=lambda: np.s_[:])
    ext: Dict[str, np.ndarray] = field(default_factory=dict)


def int_u_v(u, v, data):
    return np.einsum('q, qc, qcj, qci->cij',
            data.ws, data.measure, u.phi, v.phi, optimize=True)


def int_grad_u_grad_v(u, v, data):
    return np.einsum('q, qc, qcjm, qcim->cij',
            data.ws, data.measure, u.gphi, v.gphi, optimize=True)


def int_w_nabla_u_v(w1, w2, u, v, data):
    """(w . grad) u against v for the vector field w = (w1, w2)."""
    wgu = np.einsum('qc, qcj->qcj', w1, u.gphi[..., 0]) \
        + np.einsum('qc, qcj->qcj', w2, u.gphi[..., 1])
    return np.einsum('q, qc, qcj, qci->cij',
            data.ws, data.measure, wgu, v.phi, optimize=True)


def int_u_dvdx(u, v, data):
    return np.einsum('q, qc, qcj, qci->cij',
            data.ws, data.measure, u.phi, v.gphi[..., 0], optimize=True)


def int_u_dvdy(u, v, data):
    return np.einsum('q, qc, qcj, qci->cij',
            data.ws, data.measure, u.phi, v.gphi[..., 1], optimize=True)


def int_f_v(f, v, data):
    return np.einsum('q, qc, qc, qci->ci',
            data.ws, data.measure, f, v.phi, optimize=True)
