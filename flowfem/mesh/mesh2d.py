import numpy as np
from types import ModuleType

from .mesh_tools import unique_row, show_mesh_2d, polygon_signed_area
from .. import logger


class Mesh2d():
    """ The base class of TriangleMesh and QuadrangleMesh

        Besides the geometry and topology, a 2d mesh stores one integer
        marker per edge in ``edgedata['marker']``. Interior edges and boundary
        edges nobody marked carry 0.
    """
    def number_of_nodes(self):
        return self.ds.NN

    def number_of_edges(self):
        return self.ds.NE

    def number_of_cells(self):
        return self.ds.NC

    def geo_dimension(self):
        return self.node.shape[1]

    def entity(self, etype=2):
        if etype in ['cell', 2]:
            return self.ds.cell
        elif etype in ['edge', 1]:
            return self.ds.edge
        elif etype in ['node', 0]:
            return self.node
        else:
            raise ValueError(f"`etype` {etype} is wrong!")

    def entity_measure(self, etype=2, index=np.s_[:]):
        if etype in ['cell', 2]:
            return self.cell_area(index)
        elif etype in ['edge', 1]:
            return self.edge_length(index)
        elif etype in ['node', 0]:
            return 0
        else:
            raise ValueError(f"`etype` {etype} is wrong!")

    def entity_barycenter(self, etype=2, index=np.s_[:]):
        node = self.node
        if etype in ['cell', 2]:
            cell = self.ds.cell
            bc = np.sum(node[cell[index], :], axis=1)/cell.shape[1]
        elif etype in ['edge', 1]:
            edge = self.ds.edge
            bc = np.sum(node[edge[index], :], axis=1)/edge.shape[1]
        elif etype in ['node', 0]:
            bc = node[index]
        else:
            raise ValueError(f"`etype` {etype} is wrong!")
        return bc

    def cell_area(self, index=np.s_[:]):
        return polygon_signed_area(self.node, self.ds.cell[index])

    def edge_length(self, index=np.s_[:]):
        node = self.node
        edge = self.ds.edge
        v = node[edge[index, 1], :] - node[edge[index, 0], :]
        return np.sqrt(np.sum(v**2, axis=-1))

    def _orient_cells(self, node, cell):
        """Return `cell` with every clockwise cell reversed."""
        area = polygon_signed_area(node, cell)
        isCW = area < 0
        if np.any(isCW):
            logger.debug(f"reorient {isCW.sum()} clockwise cells")
            cell = cell.copy()
            cell[isCW, 1:] = cell[isCW, :0:-1]
        return cell

    ## boundary markers

    def _init_marker(self):
        NE = self.number_of_edges()
        self.edgedata['marker'] = np.zeros(NE, dtype=self.itype)

    def edge_marker(self, index=np.s_[:]):
        return self.edgedata['marker'][index]

    def find_edge_index(self, edges):
        """
        Look up the edge numbers of vertex pairs (in any orientation). Pairs
        that are not edges of the mesh get -1.
        """
        NN = self.number_of_nodes()
        edges = np.asarray(edges, dtype=self.itype).reshape(-1, 2)
        key = np.sort(self.ds.edge, axis=1)
        key = key[:, 0]*NN + key[:, 1]
        query = np.sort(edges, axis=1)
        query = query[:, 0]*NN + query[:, 1]

        order = np.argsort(key)
        loc = np.searchsorted(key[order], query)
        loc[loc == len(key)] = 0
        idx = order[loc]
        idx[key[idx] != query] = -1
        return idx

    def set_boundary_marker(self, edges, markers):
        """
        Set the markers of the boundary edges given by vertex pairs.
        """
        idx = self.find_edge_index(edges)
        if np.any(idx < 0):
            raise ValueError(f"{np.sum(idx < 0)} vertex pairs are not edges of the mesh")
        isBdEdge = self.ds.boundary_edge_flag()
        if not np.all(isBdEdge[idx]):
            raise ValueError(f"{np.sum(~isBdEdge[idx])} vertex pairs are not boundary edges")
        self.edgedata['marker'][idx] = markers

    def mark_boundary(self, threshold, marker):
        """
        Mark the boundary edges whose barycenter satisfies `threshold`.

        Returns the number of edges marked.
        """
        index = self.ds.boundary_edge_index()
        bc = self.entity_barycenter('edge', index=index)
        flag = threshold(bc)
        self.edgedata['marker'][index[flag]] = marker
        return int(np.sum(flag))

    def boundary_markers(self):
        """The sorted markers found on the boundary edges (0 means unmarked)."""
        index = self.ds.boundary_edge_index()
        return np.unique(self.edgedata['marker'][index])

    def _refine_marker(self, edge, marker, NN):
        """
        After one refinement step the old edge `e` = (a, b) is split at the
        new node NN + e into (a, NN + e) and (NN + e, b).
        """
        self._init_marker()
        e, = np.nonzero(marker)
        if len(e) == 0:
            return
        m = NN + e
        child = np.r_['0', np.c_[edge[e, 0], m], np.c_[m, edge[e, 1]]]
        self.set_boundary_marker(child, np.r_[marker[e], marker[e]])

    def add_plot(self, plot,
            nodecolor='k', edgecolor='k',
            cellcolor=[0.5, 0.9, 0.45], aspect='equal',
            linewidths=1, markersize=0,
            showaxis=False, showcolorbar=False, cmap='rainbow'):

        if isinstance(plot, ModuleType):
            fig = plot.figure()
            fig.set_facecolor('white')
            axes = fig.gca()
        else:
            axes = plot
        return show_mesh_2d(axes, self,
                nodecolor=nodecolor, edgecolor=edgecolor,
                cellcolor=cellcolor, aspect=aspect,
                linewidths=linewidths, markersize=markersize,
                showaxis=showaxis, showcolorbar=showcolorbar, cmap=cmap)


class Mesh2dDataStructure():
    """ The topology data structure of mesh 2d
        This is just a abstract class, and you can not use it directly.
    """

    def __init__(self, NN, cell):
        self.NN = NN
        self.NC = cell.shape[0]
        self.cell = cell
        self.itype = cell.dtype
        self.construct()

    def reinit(self, NN, cell):
        self.NN = NN
        self.NC = cell.shape[0]
        self.cell = cell
        self.construct()

    def total_edge(self):
        cell = self.cell
        localEdge = self.localEdge
        totalEdge = cell[:, localEdge].reshape(-1, 2)
        return np.sort(totalEdge, axis=1)

    def construct(self):
        """ Construct edge and edge2cell from cell
        """
        NC = self.NC
        E = self.NEC

        totalEdge = self.total_edge()
        _, i0, j = unique_row(totalEdge)
        NE = i0.shape[0]
        self.NE = NE

        self.edge2cell = np.zeros((NE, 4), dtype=self.itype)

        i1 = np.zeros(NE, dtype=self.itype)
        i1[j] = np.arange(E*NC, dtype=self.itype)

        self.edge2cell[:, 0] = i0//E
        self.edge2cell[:, 1] = i1//E
        self.edge2cell[:, 2] = i0%E
        self.edge2cell[:, 3] = i1%E

        cell = self.cell
        localEdge = self.localEdge
        edge2cell = self.edge2cell
        self.edge = cell[edge2cell[:, [0]], localEdge[edge2cell[:, 2]]]

    def cell_to_edge(self):
        NE = self.NE
        NC = self.NC
        E = self.NEC

        edge2cell = self.edge2cell
        cell2edge = np.zeros((NC, E), dtype=self.itype)
        cell2edge[edge2cell[:, 0], edge2cell[:, 2]] = np.arange(NE)
        cell2edge[edge2cell[:, 1], edge2cell[:, 3]] = np.arange(NE)
        return cell2edge

    def edge_to_cell(self):
        return self.edge2cell

    def boundary_node_flag(self):
        NN = self.NN
        edge = self.edge
        isBdEdge = self.boundary_edge_flag()
        isBdPoint = np.zeros((NN,), dtype=np.bool_)
        isBdPoint[edge[isBdEdge, :]] = True
        return isBdPoint

    def boundary_edge_flag(self):
        edge2cell = self.edge2cell
        return edge2cell[:, 0] == edge2cell[:, 1]

    def boundary_edge_index(self):
        isBdEdge = self.boundary_edge_flag()
        idx, = np.nonzero(isBdEdge)
        return idx
