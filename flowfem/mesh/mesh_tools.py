from itertools import combinations_with_replacement

import numpy as np
from matplotlib import colors
from matplotlib import cm
from matplotlib.collections import PolyCollection


def unique_row(a):
    b, i, j = np.unique(a, return_index=True, return_inverse=True, axis=0)
    return (b, i, j.reshape(-1))


def multi_index_matrix(p, dim):
    """
    The multi-indices of the degree `p` Lagrange points on a `dim` simplex.

    For dim == 1 row k is (p - k, k), i.e. the point x = k/p. For dim == 2
    the rows run from vertex 0 to vertex 2, e.g. p = 2 gives
    (2,0,0), (1,1,0), (1,0,1), (0,2,0), (0,1,1), (0,0,2).
    """
    sep = np.flip(np.array(
        tuple(combinations_with_replacement(range(p+1), dim)),
        dtype=np.int_), axis=0)
    raw = np.zeros((sep.shape[0], dim+2), dtype=np.int_)
    raw[:, -1] = p
    raw[:, 1:-1] = sep
    return raw[:, 1:] - raw[:, :-1]


def simplex_shape_function(bc, p, mi=None):
    """Degree `p` Lagrange basis at barycentric points `bc`, shape (..., ldof)."""
    if p == 1:
        return bc
    TD = bc.shape[-1] - 1
    if mi is None:
        mi = multi_index_matrix(p, TD)
    c = np.arange(1, p+1, dtype=np.int_)
    P = 1.0/np.multiply.accumulate(c)
    t = np.arange(0, p)
    shape = bc.shape[:-1]+(p+1, TD+1)
    A = np.ones(shape, dtype=bc.dtype)
    A[..., 1:, :] = p*bc[..., None, :] - t.reshape(-1, 1)
    np.cumprod(A, axis=-2, out=A)
    A[..., 1:, :] *= P.reshape(-1, 1)
    idx = np.arange(TD+1)
    phi = np.prod(A[..., mi, idx], axis=-1)
    return phi


def simplex_grad_shape_function(bc, p, mi=None):
    """
    Derivatives of the Lagrange basis with respect to the barycentric
    coordinates, shape (..., ldof, TD+1).
    """
    TD = bc.shape[-1] - 1
    if mi is None:
        mi = multi_index_matrix(p, TD)

    ldof = mi.shape[0]

    c = np.arange(1, p+1)
    P = 1.0/np.multiply.accumulate(c)

    t = np.arange(0, p)
    shape = bc.shape[:-1]+(p+1, TD+1)
    A = np.ones(shape, dtype=bc.dtype)
    A[..., 1:, :] = p*bc[..., None, :] - t.reshape(-1, 1)

    FF = np.einsum('...jk, m->...kjm', A[..., 1:, :], np.ones(p))
    FF[..., range(p), range(p)] = p
    np.cumprod(FF, axis=-2, out=FF)
    F = np.zeros(shape, dtype=bc.dtype)
    F[..., 1:, :] = np.sum(np.tril(FF), axis=-1).swapaxes(-1, -2)
    F[..., 1:, :] *= P.reshape(-1, 1)

    np.cumprod(A, axis=-2, out=A)
    A[..., 1:, :] *= P.reshape(-1, 1)

    Q = A[..., mi, range(TD+1)]
    M = F[..., mi, range(TD+1)]

    shape = bc.shape[:-1]+(ldof, TD+1)
    R = np.zeros(shape, dtype=bc.dtype)
    for i in range(TD+1):
        idx = list(range(TD+1))
        idx.remove(i)
        R[..., i] = M[..., i]*np.prod(Q[..., idx], axis=-1)
    return R


def polygon_signed_area(node, cell):
    """Shoelace formula, positive for counter-clockwise cells."""
    v = node[cell]
    w = np.roll(v, -1, axis=1)
    return 0.5*np.sum(v[..., 0]*w[..., 1] - w[..., 0]*v[..., 1], axis=-1)


def show_mesh_2d(
        axes, mesh,
        nodecolor='k', edgecolor='k',
        cellcolor='grey', aspect='equal',
        linewidths=1, markersize=20,
        showaxis=False, showcolorbar=False, cmap='gnuplot2'):

    axes.set_aspect(aspect)
    if showaxis is False:
        axes.set_axis_off()
    else:
        axes.set_axis_on()

    if isinstance(cellcolor, np.ndarray) and np.isreal(cellcolor[0]):
        cmax = cellcolor.max()
        cmin = cellcolor.min()
        norm = colors.Normalize(vmin=cmin, vmax=cmax)
        mapper = cm.ScalarMappable(norm=norm, cmap=cmap)
        mapper.set_array(cellcolor)
        cellcolor = mapper.to_rgba(cellcolor)
        if showcolorbar:
            f = axes.get_figure()
            f.colorbar(mapper, shrink=0.5, ax=axes)

    node = mesh.entity('node')
    cell = mesh.entity('cell')

    poly = PolyCollection(node[cell[:, mesh.ds.ccw], :])
    poly.set_edgecolor(edgecolor)
    poly.set_linewidth(linewidths)
    poly.set_facecolors(cellcolor)

    box = np.zeros(4, dtype=np.float64)
    box[0::2] = np.min(node, axis=0)
    box[1::2] = np.max(node, axis=0)

    axes.set_xlim(box[0:2])
    axes.set_ylim(box[2:4])

    if markersize > 0:
        axes.scatter(node[:, 0], node[:, 1], c=nodecolor, s=markersize)

    return axes.add_collection(poly)
