import numpy as np

from .mesh2d import Mesh2d, Mesh2dDataStructure
from .mesh_tools import multi_index_matrix
from .mesh_tools import simplex_shape_function, simplex_grad_shape_function
from ..quadrature import TriangleQuadrature
from ..quadrature import GaussLegendreQuadrature
from .. import logger


class TriangleMeshDataStructure(Mesh2dDataStructure):
    localEdge = np.array([(1, 2), (2, 0), (0, 1)])
    ccw = np.array([0, 1, 2])
    NEC = 3

    def __init__(self, NN, cell):
        super().__init__(NN, cell)


class TriangleMesh(Mesh2d):
    def __init__(self, node, cell):
        assert cell.shape[-1] == 3
        self.node = node
        self.itype = cell.dtype
        self.ftype = node.dtype
        cell = self._orient_cells(node, cell)
        self.ds = TriangleMeshDataStructure(node.shape[0], cell)

        self.meshtype = 'tri'
        self.p = 1

        self.celldata = {}
        self.nodedata = {}
        self.edgedata = {}
        self.meshdata = {}
        self._init_marker()

    def integrator(self, q, etype='cell'):
        if etype in {'cell', 2}:
            return TriangleQuadrature(q)
        elif etype in {'edge', 1}:
            return GaussLegendreQuadrature(q)

    def copy(self):
        mesh = TriangleMesh(self.node.copy(), self.ds.cell.copy())
        mesh.edgedata['marker'][:] = self.edgedata['marker']
        return mesh

    ## interpolation points

    def number_of_local_ipoints(self, p):
        return (p+1)*(p+2)//2

    def number_of_global_ipoints(self, p):
        NN = self.number_of_nodes()
        NE = self.number_of_edges()
        NC = self.number_of_cells()
        return NN + (p-1)*NE + (p-2)*(p-1)//2*NC

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
        if p > 2:
            mi = multi_index_matrix(p, 2)
            isInCellIPoints = np.sum(mi > 0, axis=1) == 3
            w = mi[isInCellIPoints, :]/p
            ipoints[NN+(p-1)*NE:, :] = np.einsum('ij, kj...->ki...', w,
                    node[cell, :]).reshape(-1, GD)
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
        The map from the local interpolation points (in multi-index order) of
        every cell to the global ones.
        """
        cell = self.entity('cell')
        if p == 1:
            return cell[index]

        mi = multi_index_matrix(p, 2)
        idx0, = np.nonzero(mi[:, 0] == 0)
        idx1, = np.nonzero(mi[:, 1] == 0)
        idx2, = np.nonzero(mi[:, 2] == 0)

        edge2cell = self.ds.edge_to_cell()
        NN = self.number_of_nodes()
        NE = self.number_of_edges()
        NC = self.number_of_cells()

        e2p = self.edge_to_ipoint(p)
        ldof = self.number_of_local_ipoints(p)
        c2p = np.zeros((NC, ldof), dtype=self.itype)

        flag = edge2cell[:, 2] == 0
        c2p[edge2cell[flag, 0][:, None], idx0] = e2p[flag]

        flag = edge2cell[:, 2] == 1
        c2p[edge2cell[flag, 0][:, None], idx1[-1::-1]] = e2p[flag]

        flag = edge2cell[:, 2] == 2
        c2p[edge2cell[flag, 0][:, None], idx2] = e2p[flag]

        iflag = edge2cell[:, 0] != edge2cell[:, 1]
        flag = iflag & (edge2cell[:, 3] == 0)
        c2p[edge2cell[flag, 1][:, None], idx0[-1::-1]] = e2p[flag]

        flag = iflag & (edge2cell[:, 3] == 1)
        c2p[edge2cell[flag, 1][:, None], idx1] = e2p[flag]

        flag = iflag & (edge2cell[:, 3] == 2)
        c2p[edge2cell[flag, 1][:, None], idx2[-1::-1]] = e2p[flag]

        cdof = (p-1)*(p-2)//2
        flag = np.sum(mi > 0, axis=1) == 3
        c2p[:, flag] = NN + NE*(p-1) + np.arange(NC*cdof).reshape(NC, cdof)
        return c2p[index]

    ## geometry

    def grad_lambda(self, index=np.s_[:]):
        node = self.node
        cell = self.ds.cell[index]
        NC = cell.shape[0]
        v0 = node[cell[:, 2], :] - node[cell[:, 1], :]
        v1 = node[cell[:, 0], :] - node[cell[:, 2], :]
        v2 = node[cell[:, 1], :] - node[cell[:, 0], :]
        length = v1[:, 0]*v2[:, 1] - v1[:, 1]*v2[:, 0]
        W = np.array([[0, 1], [-1, 0]])
        Dlambda = np.zeros((NC, 3, 2), dtype=self.ftype)
        Dlambda[:, 0, :] = v0@W/length.reshape((-1, 1))
        Dlambda[:, 1, :] = v1@W/length.reshape((-1, 1))
        Dlambda[:, 2, :] = v2@W/length.reshape((-1, 1))
        return Dlambda

    def shape_function(self, bc, p=1):
        """(NQ, ldof) values of the degree `p` basis on the reference cell."""
        return simplex_shape_function(bc, p)

    def grad_shape_function(self, bc, p=1, index=np.s_[:]):
        """(NQ, NC, ldof, 2) physical gradients of the degree `p` basis."""
        R = simplex_grad_shape_function(bc, p)
        Dlambda = self.grad_lambda(index=index)
        return np.einsum('...ij, kjm->...kim', R, Dlambda, optimize=True)

    def bc_to_point(self, bc, index=np.s_[:]):
        node = self.node
        cell = self.ds.cell[index]
        return np.einsum('...j, ijk->...ik', bc, node[cell])

    def quadrature_measure(self, bc, index=np.s_[:]):
        """The integration density at the quadrature points, shape (NQ, NC)."""
        area = self.cell_area(index)
        return np.broadcast_to(area, (bc.shape[0], area.shape[0]))

    ## modification

    def uniform_refine(self, n=1):
        for i in range(n):
            NN = self.number_of_nodes()
            NE = self.number_of_edges()
            node = self.entity('node')
            edge = self.entity('edge')
            cell = self.entity('cell')
            marker = self.edgedata['marker']
            cell2edge = self.ds.cell_to_edge()
            edge2newNode = np.arange(NN, NN+NE)
            newNode = (node[edge[:, 0], :] + node[edge[:, 1], :])/2.0

            self.node = np.concatenate((node, newNode), axis=0)
            p = np.r_['-1', cell, edge2newNode[cell2edge]]
            cell = np.r_['0', p[:, [0, 5, 4]], p[:, [5, 1, 3]], p[:, [4, 3, 2]], p[:, [3, 4, 5]]]
            self.ds.reinit(self.node.shape[0], cell)
            self._refine_marker(edge, marker, NN)
        logger.debug(f"uniform_refine: {self.number_of_cells()} triangles")

    def delete_cell(self, threshold):
        """
        Remove the cells whose barycenter satisfies `threshold`. The edge
        markers are reset.
        """
        NN = self.number_of_nodes()

        cell = self.entity('cell')
        node = self.entity('node')

        bc = self.entity_barycenter('cell')
        isKeepCell = ~threshold(bc)
        cell = cell[isKeepCell]

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
        NN = (nx+1)*(ny+1)
        NC = nx*ny
        node = np.zeros((NN, 2))
        X, Y = np.mgrid[
                box[0]:box[1]:complex(0, nx+1),
                box[2]:box[3]:complex(0, ny+1)]
        node[:, 0] = X.flat
        node[:, 1] = Y.flat

        idx = np.arange(NN).reshape(nx+1, ny+1)
        cell = np.zeros((2*NC, 3), dtype=np.int_)
        cell[:NC, 0] = idx[1:, 0:-1].flat
        cell[:NC, 1] = idx[1:, 1:].flat
        cell[:NC, 2] = idx[0:-1, 0:-1].flat
        cell[NC:, 0] = idx[0:-1, 1:].flat
        cell[NC:, 1] = idx[0:-1, 0:-1].flat
        cell[NC:, 2] = idx[1:, 1:].flat

        mesh = cls(node, cell)
        if threshold is not None:
            mesh.delete_cell(threshold)
        return mesh
