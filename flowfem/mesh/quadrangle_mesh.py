import numpy as np

from .mesh2d import Mesh2d, Mesh2dDataStructure
from .mesh_tools import simplex_shape_function, simplex_grad_shape_function
from ..quadrature import TensorProductQuadrature, GaussLegendreQuadrature
from .. import logger


class QuadrangleMeshDataStructure(Mesh2dDataStructure):
    localEdge = np.array([(0, 1), (1, 2), (2, 3), (3, 0)])
    ccw = np.array([0, 1, 2, 3])
    NEC = 4

    def __init__(self, NN, cell):
        super().__init__(NN, cell)


class QuadrangleMesh(Mesh2d):
    """
    Unstructured quadrilateral mesh.

    A cell (0, 1, 2, 3) is the image of the reference square under the
    bilinear map with vertex 0 at (xi, eta) = (0, 0), 1 at (1, 0), 2 at (1, 1)
    and 3 at (0, 1). The quadrature points are tuples of 1D barycentric
    arrays, the first one for xi and the second one for eta.
    """
    def __init__(self, node, cell):
        assert cell.shape[-1] == 4
        self.node = node
        self.itype = cell.dtype
        self.ftype = node.dtype
        cell = self._orient_cells(node, cell)
        self.ds = QuadrangleMeshDataStructure(node.shape[0], cell)

        self.meshtype = 'quad'
        self.p = 1

        self.celldata = {}
        self.nodedata = {}
        self.edgedata = {}
        self.meshdata = {}
        self._init_marker()

    def integrator(self, q, etype='cell'):
        qf = GaussLegendreQuadrature(q)
        if etype in {'cell', 2}:
            return TensorProductQuadrature((qf, qf))
        elif etype in {'edge', 1}:
            return qf

    def copy(self):
        mesh = QuadrangleMesh(self.node.copy(), self.ds.cell.copy())
        mesh.edgedata['marker'][:] = self.edgedata['marker']
        return mesh

    ## interpolation points

    def number_of_local_ipoints(self, p):
        return (p+1)*(p+1)

    def number_of_global_ipoints(self, p):
        NN = self.number_of_nodes()
        NE = self.number_of_edges()
        NC = self.number_of_cells()
        return NN + (p-1)*NE + (p-1)*(p-1)*NC

    def interpolation_points(self, p):
        node = self.entity('node')
        if p == 1:
            return node

        cell = self.entity('cell')
        edge = self.entity('edge')
        NN = self.number_of_nodes()
        NE = self.number_of_edges()
        GD = self.geo_dimension()

        gdof = self.number_of_global_ipoints(p)
        ipoints = np.zeros((gdof, GD), dtype=self.ftype)
        ipoints[:NN, :] = node

        w = np.zeros((p-1, 2), dtype=np.float64)
        w[:, 0] = np.arange(p-1, 0, -1)/p
        w[:, 1] = w[-1::-1, 0]
        ipoints[NN:NN+(p-1)*NE, :] = np.einsum('ij, ...jm->...im', w,
                node[edge, :]).reshape(-1, GD)

        bc = np.zeros((p-1, 2), dtype=np.float64)
        bc[:, 1] = np.arange(1, p)/p
        bc[:, 0] = 1 - bc[:, 1]
        w = np.einsum('im, jn->ijmn', bc, bc).reshape(-1, 4)
        ipoints[NN+(p-1)*NE:, :] = np.einsum('ij, kj...->ki...', w,
                node[cell[:, [0, 3, 1, 2]]]).reshape(-1, GD)
        return ipoints

    def edge_to_ipoint(self, p, index=np.s_[:]):
        NN = self.number_of_nodes()
        NE = self.number_of_edges()
        edge = self.entity('edge')[index]
        indices = np.arange(NE)[index]
        return np.concatenate([
            edge[:, 0].reshape(-1, 1),
            (p-1)*indices.reshape(-1, 1) + np.arange(0, p-1) + NN,
            edge[:, 1].reshape(-1, 1)], axis=-1)

    def cell_to_ipoint(self, p, index=np.s_[:]):
        """
        The local point (i, j) at (xi, eta) = (i/p, j/p) has the local number
        i*(p+1) + j.
        """
        cell = self.entity('cell')
        if p == 1:
            return cell[index][:, [0, 3, 1, 2]]

        edge2cell = self.ds.edge_to_cell()
        NN = self.number_of_nodes()
        NE = self.number_of_edges()
        NC = self.number_of_cells()

        cell2ipoint = np.zeros((NC, (p+1)*(p+1)), dtype=self.itype)
        c2p = cell2ipoint.reshape((NC, p+1, p+1))
        e2p = self.edge_to_ipoint(p)

        flag = edge2cell[:, 2] == 0
        c2p[edge2cell[flag, 0], :, 0] = e2p[flag]
        flag = edge2cell[:, 2] == 1
        c2p[edge2cell[flag, 0], -1, :] = e2p[flag]
        flag = edge2cell[:, 2] == 2
        c2p[edge2cell[flag, 0], :, -1] = e2p[flag, -1::-1]
        flag = edge2cell[:, 2] == 3
        c2p[edge2cell[flag, 0], 0, :] = e2p[flag, -1::-1]

        iflag = edge2cell[:, 0] != edge2cell[:, 1]
        flag = iflag & (edge2cell[:, 3] == 0)
        c2p[edge2cell[flag, 1], :, 0] = e2p[flag, -1::-1]
        flag = iflag & (edge2cell[:, 3] == 1)
        c2p[edge2cell[flag, 1], -1, :] = e2p[flag, -1::-1]
        flag = iflag & (edge2cell[:, 3] == 2)
        c2p[edge2cell[flag, 1], :, -1] = e2p[flag]
        flag = iflag & (edge2cell[:, 3] == 3)
        c2p[edge2cell[flag, 1], 0, :] = e2p[flag]

        c2p[:, 1:-1, 1:-1] = NN + NE*(p-1) + np.arange(NC*(p-1)*(p-1)).reshape(NC, p-1, p-1)
        return cell2ipoint[index]

    ## geometry

    def _tensor_bc(self, bc):
        bc0 = bc[0].reshape(-1, 2)
        bc1 = bc[1].reshape(-1, 2)
        return np.einsum('im, jn->ijmn', bc0, bc1).reshape(-1, 4)

    def bc_to_point(self, bc, index=np.s_[:]):
        node = self.entity('node')
        cell = self.entity('cell')[index]
        bc = self._tensor_bc(bc)
        return np.einsum('...j, cjk->...ck', bc, node[cell[:, [0, 3, 1, 2]]])

    def jacobi_matrix(self, bc, index=np.s_[:]):
        """
        J[q, c] = [[dx/dxi, dx/deta], [dy/dxi, dy/deta]], shape (NQ, NC, 2, 2).
        """
        node = self.entity('node')
        cell = self.entity('cell')[index]
        gphi = self._reference_grad_shape_function(bc, 1)
        return np.einsum('qlk, clm->qcmk', gphi, node[cell[:, [0, 3, 1, 2]]])

    def _reference_grad_shape_function(self, bc, p):
        """(NQ, ldof, 2) gradients with respect to (xi, eta)."""
        bc0, bc1 = bc
        phi0 = simplex_shape_function(bc0, p)
        phi1 = simplex_shape_function(bc1, p)
        R0 = simplex_grad_shape_function(bc0, p)
        R1 = simplex_grad_shape_function(bc1, p)
        gphi0 = R0[..., 1] - R0[..., 0]
        gphi1 = R1[..., 1] - R1[..., 0]
        n0 = phi0.shape[0]
        n1 = phi1.shape[0]
        ldof = (p+1)*(p+1)
        gphi = np.zeros((n0, n1, ldof, 2), dtype=np.float64)
        gphi[..., 0] = np.einsum('ik, jl->ijkl', gphi0, phi1).reshape(n0, n1, ldof)
        gphi[..., 1] = np.einsum('ik, jl->ijkl', phi0, gphi1).reshape(n0, n1, ldof)
        return gphi.reshape(-1, ldof, 2)

    def shape_function(self, bc, p=1):
        """(NQ, ldof) values of the degree `p` basis on the reference cell."""
        bc0, bc1 = bc
        phi0 = simplex_shape_function(bc0, p)
        phi1 = simplex_shape_function(bc1, p)
        n0 = phi0.shape[0]
        n1 = phi1.shape[0]
        phi = np.einsum('ik, jl->ijkl', phi0, phi1)
        return phi.reshape(n0*n1, -1)

    def grad_shape_function(self, bc, p=1, index=np.s_[:]):
        """(NQ, NC, ldof, 2) physical gradients, J^{-T} times the reference ones."""
        gphi = self._reference_grad_shape_function(bc, p)
        J = self.jacobi_matrix(bc, index=index)
        G = np.linalg.inv(J)
        return np.einsum('qckm, qlk->qclm', G, gphi, optimize=True)

    def quadrature_measure(self, bc, index=np.s_[:]):
        """|det J| at the quadrature points, shape (NQ, NC)."""
        J = self.jacobi_matrix(bc, index=index)
        return np.abs(np.linalg.det(J))

    ## modification

    def uniform_refine(self, n=1):
        for i in range(n):
            N = self.number_of_nodes()
            NE = self.number_of_edges()
            NC = self.number_of_cells()
            edge = self.entity('edge')
            marker = self.edgedata['marker']

            cell2edge = self.ds.cell_to_edge()
            edgeCenter = self.entity_barycenter('edge')
            cellCenter = self.entity_barycenter('cell')

            edge2center = np.arange(N, N+NE)

            cell = self.ds.cell
            cp = [cell[:, i].reshape(-1, 1) for i in range(4)]
            ep = [edge2center[cell2edge[:, i]].reshape(-1, 1) for i in range(4)]
            cc = np.arange(N + NE, N + NE + NC).reshape(-1, 1)

            cell = np.zeros((4*NC, 4), dtype=self.itype)
            cell[0::4, :] = np.r_['1', cp[0], ep[0], cc, ep[3]]
            cell[1::4, :] = np.r_['1', ep[0], cp[1], ep[1], cc]
            cell[2::4, :] = np.r_['1', cc, ep[1], cp[2], ep[2]]
            cell[3::4, :] = np.r_['1', ep[3], cc, ep[2], cp[3]]

            self.node = np.r_['0', self.node, edgeCenter, cellCenter]
            self.ds.reinit(N + NE + NC, cell)
            self._refine_marker(edge, marker, N)
        logger.debug(f"uniform_refine: {self.number_of_cells()} quadrangles")

    def delete_cell(self, threshold):
        """
        Remove the cells whose barycenter satisfies `threshold`. The edge
        markers are reset.
        """
        NN = self.number_of_nodes()
        cell = self.entity('cell')
        node = self.entity('node')

        bc = self.entity_barycenter('cell')
        cell = cell[~threshold(bc)]

        isValidNode = np.zeros(NN, dtype=np.bool_)
        isValidNode[cell] = True
        node = node[isValidNode]

        idxMap = np.zeros(NN, dtype=self.itype)
        idxMap[isValidNode] = range(isValidNode.sum())
        cell = idxMap[cell]
        self.node = node
        self.ds.reinit(len(node), cell)
        self._init_marker()

    @classmethod
    def from_box(cls, box=[0, 1, 0, 1], nx=10, ny=10, threshold=None):
        """
        Generate a quadrilateral mesh for a rectangular domain.

        :param box: x- and y-range of the domain
        :param nx: number of cells along the x-axis
        :param ny: number of cells along the y-axis
        :param threshold: optional function on the cell barycenters, the
            cells where it is true are removed
        """
        NN = (nx+1)*(ny+1)
        NC = nx*ny
        node = np.zeros((NN, 2))
        X, Y = np.mgrid[
                box[0]:box[1]:complex(0, nx+1),
                box[2]:box[3]:complex(0, ny+1)]
        node[:, 0] = X.flat
        node[:, 1] = Y.flat

        idx = np.arange(NN).reshape(nx+1, ny+1)
        cell = np.zeros((NC, 4), dtype=np.int_)
        cell[:, 0] = idx[0:-1, 0:-1].flat
        cell[:, 1] = idx[1:, 0:-1].flat
        cell[:, 2] = idx[1:, 1:].flat
        cell[:, 3] = idx[0:-1, 1:].flat

        mesh = cls(node, cell)
        if threshold is not None:
            mesh.delete_cell(threshold)
        return mesh
