import numpy as np

from .function import Function
from ..decorator import barycentric, cartesian


class SMDof2d():
    """
    Degrees of freedom of the scaled monomial space, all of them local to a
    cell.
    """
    def __init__(self, mesh, p):
        self.mesh = mesh
        self.p = p
        self.multiIndex = self.multi_index_matrix()
        self.cell2dof = self.cell_to_dof()

    def multi_index_matrix(self):
        """
        Compute the natural correspondence from the one-dimensional index
        starting from 0.

        Notes
        -----

        0<-->(0, 0), 1<-->(1, 0), 2<-->(0, 1), 3<-->(2, 0), 4<-->(1, 1),
        5<-->(0, 2), .....

        """
        ldof = self.number_of_local_dofs()
        idx = np.arange(0, ldof)
        idx0 = np.floor((-1 + np.sqrt(1 + 8*idx))/2).astype(np.int_)
        multiIndex = np.zeros((ldof, 2), dtype=np.int_)
        multiIndex[:, 1] = idx - idx0*(idx0 + 1)//2
        multiIndex[:, 0] = idx0 - multiIndex[:, 1]
        return multiIndex

    def cell_to_dof(self):
        NC = self.mesh.number_of_cells()
        ldof = self.number_of_local_dofs()
        return np.arange(NC*ldof).reshape(NC, ldof)

    def number_of_local_dofs(self):
        p = self.p
        return (p+1)*(p+2)//2

    def number_of_global_dofs(self):
        return self.mesh.number_of_cells()*self.number_of_local_dofs()


class ScaledMonomialSpace2d():
    """
    The discontinuous space of full degree `p` polynomials on every cell,
    spanned by ((x - x_K)/h_K)^a ((y - y_K)/h_K)^b with a + b <= p, where x_K
    is the barycenter and h_K = sqrt(|K|).
    """
    def __init__(self, mesh, p):
        if p < 0:
            raise ValueError(f"the degree must be nonnegative, got {p}")
        self.mesh = mesh
        self.p = p
        self.cellbarycenter = mesh.entity_barycenter('cell')
        self.cellmeasure = mesh.entity_measure('cell')
        self.cellsize = np.sqrt(self.cellmeasure)
        self.dof = SMDof2d(mesh, p)
        self.GD = 2

        self.itype = mesh.itype
        self.ftype = mesh.ftype

    def __str__(self):
        return f"scaled monomial space of degree {self.p} on a {self.mesh.meshtype} mesh"

    def _scaled_point(self, point, index):
        h = self.cellsize[index]
        return (point - self.cellbarycenter[index])/h[:, None]

    @cartesian
    def cartesian_basis(self, point, index=np.s_[:]):
        """
        point : (NQ, NC, 2) points in the cells `index`, returns (NQ, NC, ldof)
        """
        p = self.p
        ldof = self.number_of_local_dofs()
        shape = point.shape[:-1]+(ldof,)
        phi = np.ones(shape, dtype=np.float64)
        if p == 0:
            return phi

        phi[..., 1:3] = self._scaled_point(point, index)
        start = 3
        for i in range(2, p+1):
            phi[..., start:start+i] = phi[..., start-i:start]*phi[..., [1]]
            phi[..., start+i] = phi[..., start-1]*phi[..., 2]
            start += i+1
        return phi

    @cartesian
    def cartesian_grad_basis(self, point, index=np.s_[:]):
        """(NQ, NC, ldof, 2)"""
        ldof = self.number_of_local_dofs()
        shape = point.shape[:-1]+(ldof, 2)
        gphi = np.zeros(shape, dtype=np.float64)
        if self.p == 0:
            return gphi

        mi = self.dof.multiIndex
        xy = self._scaled_point(point, index)
        x = xy[..., [0]]
        y = xy[..., [1]]
        a = mi[:, 0]
        b = mi[:, 1]
        gphi[..., 0] = a*x**np.maximum(a-1, 0)*y**b
        gphi[..., 1] = b*x**a*y**np.maximum(b-1, 0)
        h = self.cellsize[index]
        return gphi/h[:, None, None]

    @barycentric
    def basis(self, bc, index=np.s_[:]):
        point = self.mesh.bc_to_point(bc, index=index)
        return self.cartesian_basis(point, index=index)

    @barycentric
    def grad_basis(self, bc, index=np.s_[:]):
        point = self.mesh.bc_to_point(bc, index=index)
        return self.cartesian_grad_basis(point, index=index)

    @barycentric
    def value(self, uh, bc, index=np.s_[:]):
        phi = self.basis(bc, index=index)
        cell2dof = self.cell_to_dof(index=index)
        return np.einsum('qci, ci->qc', phi, np.asarray(uh)[cell2dof])

    @barycentric
    def grad_value(self, uh, bc, index=np.s_[:]):
        gphi = self.grad_basis(bc, index=index)
        cell2dof = self.cell_to_dof(index=index)
        return np.einsum('qcim, ci->qcm', gphi, np.asarray(uh)[cell2dof])

    def cell_to_dof(self, index=np.s_[:]):
        return self.dof.cell2dof[index]

    def number_of_local_dofs(self):
        return self.dof.number_of_local_dofs()

    def number_of_global_dofs(self):
        return self.dof.number_of_global_dofs()

    def function(self, array=None):
        return Function(self, array=array)

    def array(self, dtype=np.float64):
        gdof = self.number_of_global_dofs()
        return np.zeros(gdof, dtype=dtype)
