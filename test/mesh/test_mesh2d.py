import os

import numpy as np
import pytest

from flowfem.mesh import TriangleMesh, QuadrangleMesh
from flowfem.mesh import MeshFileReader, read_mesh
from flowfem.mesh.mesh_tools import multi_index_matrix
from flowfem.errors import MeshFileError

from mesh_data import *


MESH = {'quad': QuadrangleMesh, 'tri': TriangleMesh}
DATA_DIR = os.path.join(os.path.dirname(__file__), '..', '..', 'data')


def local_lattice_points(mesh, p):
    """The cartesian coordinates of the local interpolation points, (NC, ldof, 2)."""
    if mesh.meshtype == 'quad':
        t = np.arange(p+1)/p
        bc = np.c_[1 - t, t]
        ps = mesh.bc_to_point((bc, bc))
    else:
        bcs = multi_index_matrix(p, 2)/p
        ps = mesh.bc_to_point(bcs)
    return np.swapaxes(ps, 0, 1)


class TestMeshInterfaces:
    @pytest.mark.parametrize("meshdata", box_data)
    def test_from_box(self, meshdata):
        mesh = MESH[meshdata['meshtype']].from_box(
                meshdata['box'], nx=meshdata['nx'], ny=meshdata['ny'])
        assert mesh.number_of_nodes() == meshdata['NN']
        assert mesh.number_of_edges() == meshdata['NE']
        assert mesh.number_of_cells() == meshdata['NC']
        assert len(mesh.ds.boundary_edge_index()) == meshdata['NBE']

        box = meshdata['box']
        area = mesh.entity_measure('cell')
        assert np.all(area > 0)
        np.testing.assert_allclose(np.sum(area), (box[1] - box[0])*(box[3] - box[2]))

        length = mesh.entity_measure('edge', index=mesh.ds.boundary_edge_index())
        np.testing.assert_allclose(np.sum(length), 2*(box[1] - box[0] + box[3] - box[2]))

    @pytest.mark.parametrize("meshtype", ['quad', 'tri'])
    def test_quadrature_measure(self, meshtype):
        mesh = MESH[meshtype].from_box([0, 2, 0, 1], nx=3, ny=2)
        qf = mesh.integrator(3)
        bcs, ws = qf.get_quadrature_points_and_weights()
        d = mesh.quadrature_measure(bcs)
        np.testing.assert_allclose(np.einsum('q, qc->c', ws, d), mesh.entity_measure('cell'))

    @pytest.mark.parametrize("meshdata", ipoint_data)
    def test_interpolation_points(self, meshdata):
        p = meshdata['p']
        mesh = MESH[meshdata['meshtype']].from_box([0, 1, 0, 1], nx=2, ny=2)
        assert mesh.number_of_global_ipoints(p) == meshdata['gdof']
        assert mesh.number_of_local_ipoints(p) == meshdata['ldof']

        ipoints = mesh.interpolation_points(p)
        cell2ipoint = mesh.cell_to_ipoint(p)
        assert ipoints.shape == (meshdata['gdof'], 2)
        assert cell2ipoint.shape == (mesh.number_of_cells(), meshdata['ldof'])
        np.testing.assert_array_equal(np.unique(cell2ipoint), np.arange(meshdata['gdof']))
        np.testing.assert_allclose(ipoints[cell2ipoint], local_lattice_points(mesh, p), atol=1e-14)

    @pytest.mark.parametrize("meshtype", ['quad', 'tri'])
    @pytest.mark.parametrize("p", [1, 2, 3])
    def test_edge_to_ipoint(self, meshtype, p):
        mesh = MESH[meshtype].from_box([0, 1, 0, 1], nx=2, ny=2)
        ipoints = mesh.interpolation_points(p)
        edge = mesh.entity('edge')
        node = mesh.entity('node')
        edge2ipoint = mesh.edge_to_ipoint(p)
        t = np.arange(p+1)/p
        ps = np.einsum('k, em->ekm', 1 - t, node[edge[:, 0]]) \
           + np.einsum('k, em->ekm', t, node[edge[:, 1]])
        np.testing.assert_allclose(ipoints[edge2ipoint], ps, atol=1e-14)

    def test_delete_cell(self):
        mesh = QuadrangleMesh.from_box([0, 3, 0, 1], nx=6, ny=4,
                threshold=lambda p: (p[..., 0] > 1) & (p[..., 0] < 1.5)
                    & (p[..., 1] > 0.25) & (p[..., 1] < 0.75))
        assert mesh.number_of_cells() == 22
        assert mesh.number_of_nodes() == 35
        assert len(mesh.ds.boundary_edge_index()) == 26
        np.testing.assert_allclose(np.sum(mesh.entity_measure('cell')), 3 - 0.25)


class TestBoundaryMarker:
    def unit_square(self, meshtype, n=2):
        mesh = MESH[meshtype].from_box([0, 1, 0, 1], nx=n, ny=n)
        mesh.mark_boundary(lambda p: p[..., 1] < 1e-12, 1)
        mesh.mark_boundary(lambda p: p[..., 0] > 1 - 1e-12, 2)
        mesh.mark_boundary(lambda p: p[..., 1] > 1 - 1e-12, 3)
        mesh.mark_boundary(lambda p: p[..., 0] < 1e-12, 4)
        return mesh

    @pytest.mark.parametrize("meshtype", ['quad', 'tri'])
    def test_mark_boundary(self, meshtype):
        mesh = self.unit_square(meshtype)
        np.testing.assert_array_equal(mesh.boundary_markers(), [1, 2, 3, 4])
        isBdEdge = mesh.ds.boundary_edge_flag()
        assert np.all(mesh.edge_marker()[~isBdEdge] == 0)
        assert np.sum(mesh.edge_marker() == 2) == 2

    @pytest.mark.parametrize("meshtype", ['quad', 'tri'])
    @pytest.mark.parametrize("n", [1, 2])
    def test_refine_marker(self, meshtype, n):
        mesh = self.unit_square(meshtype)
        mesh.uniform_refine(n)
        index = mesh.ds.boundary_edge_index()
        marker = mesh.edge_marker(index)
        assert np.all(marker > 0)
        bc = mesh.entity_barycenter('edge', index=index)
        np.testing.assert_array_equal(marker[bc[:, 1] < 1e-12], 1)
        np.testing.assert_array_equal(marker[bc[:, 0] > 1 - 1e-12], 2)
        np.testing.assert_array_equal(marker[bc[:, 1] > 1 - 1e-12], 3)
        np.testing.assert_array_equal(marker[bc[:, 0] < 1e-12], 4)
        assert np.sum(marker == 1) == 2*2**n

    def test_find_edge_index(self):
        mesh = QuadrangleMesh.from_box([0, 1, 0, 1], nx=1, ny=1)
        edge = mesh.entity('edge')
        idx = mesh.find_edge_index(edge[:, ::-1])
        np.testing.assert_array_equal(idx, np.arange(len(edge)))
        assert mesh.find_edge_index([[0, 3]])[0] == -1

    def test_set_boundary_marker(self):
        mesh = QuadrangleMesh.from_box([0, 1, 0, 1], nx=2, ny=1)
        # node 0 is (0, 0), node 2 is (0.5, 0), node 3 is (0.5, 1)
        mesh.set_boundary_marker([[2, 0]], [7])
        assert np.sum(mesh.edge_marker() == 7) == 1
        with pytest.raises(ValueError):
            mesh.set_boundary_marker([[2, 3]], [7])
        with pytest.raises(ValueError):
            mesh.set_boundary_marker([[0, 3]], [7])


class TestMeshFileReader:
    def test_read_text(self):
        mesh = MeshFileReader(text=channel_text).read()
        assert isinstance(mesh, QuadrangleMesh)
        assert mesh.number_of_nodes() == 6
        assert mesh.number_of_cells() == 2
        np.testing.assert_array_equal(mesh.celldata['region'], [7, 7])
        np.testing.assert_array_equal(mesh.boundary_markers(), [1, 2, 3, 4])
        assert np.sum(mesh.edge_marker() == 1) == 2
        np.testing.assert_allclose(mesh.meshdata['curves'], [[2, 5, 90]])

    def test_read_file(self):
        mesh = read_mesh(os.path.join(DATA_DIR, 'domain-quad.mesh'))
        assert mesh.meshtype == 'quad'
        assert mesh.number_of_nodes() == 16
        assert mesh.number_of_cells() == 8
        np.testing.assert_allclose(np.sum(mesh.entity_measure('cell')), 300 - 4)
        np.testing.assert_array_equal(mesh.boundary_markers(), [1, 2, 3, 4, 5])
        assert mesh.meshdata['curves'].shape == (0, 3)

        mesh.uniform_refine(2)
        np.testing.assert_array_equal(mesh.boundary_markers(), [1, 2, 3, 4, 5])
        index = mesh.ds.boundary_edge_index()
        isObstacle = mesh.edge_marker(index) == 5
        length = mesh.entity_measure('edge', index=index[isObstacle])
        np.testing.assert_allclose(np.sum(length), 8)

    @pytest.mark.parametrize("text", bad_mesh_data)
    def test_bad_mesh(self, text):
        with pytest.raises(MeshFileError):
            MeshFileReader(text=text).read()

    def test_missing_file(self):
        with pytest.raises(MeshFileError):
            read_mesh(os.path.join(DATA_DIR, 'no-such.mesh'))
