from typing import Union, Callable

import numpy as np

from .function import Function
from ..decorator import barycentric


class LagrangeFESpace():
    """
    Continuous Lagrange finite element space, P_p on a triangle mesh and Q_p
    on a quadrilateral mesh. The degrees of freedom are the interpolation
    points of the mesh.
    """
    def __init__(self, mesh, p: int=1):
        if p < 1:
            raise ValueError(f"the degree of a continuous Lagrange space must be at least 1, got {p}")
        self.mesh = mesh
        self.p = p
        self.itype = mesh.itype
        self.ftype = mesh.ftype
        self.cell2dof = mesh.cell_to_ipoint(p)

    def __str__(self):
        return f"Lagrange finite element space of degree {self.p} on a {self.mesh.meshtype} mesh"

    def number_of_global_dofs(self):
        return self.mesh.number_of_global_ipoints(self.p)

    def number_of_local_dofs(self):
        return self.mesh.number_of_local_ipoints(self.p)

    def interpolation_points(self):
        return self.mesh.interpolation_points(self.p)

    def cell_to_dof(self, index=np.s_[:]):
        return self.cell2dof[index]

    def edge_to_dof(self, index=np.s_[:]):
        return self.mesh.edge_to_ipoint(self.p, index=index)

    def is_boundary_dof(self):
        gdof = self.number_of_global_dofs()
        index = self.mesh.ds.boundary_edge_index()
        isBdDof = np.zeros(gdof, dtype=np.bool_)
        isBdDof[self.edge_to_dof(index=index)] = True
        return isBdDof

    @barycentric
    def basis(self, bc, index=np.s_[:]):
        """(NQ, NC, ldof)"""
        phi = self.mesh.shape_function(bc, p=self.p)
        NC = len(self.cell2dof[index])
        return np.broadcast_to(phi[:, None, :], (phi.shape[0], NC, phi.shape[1]))

    @barycentric
    def grad_basis(self, bc, index=np.s_[:]):
        """(NQ, NC, ldof, 2)"""
        return self.mesh.grad_shape_function(bc, p=self.p, index=index)

    @barycentric
    def value(self,
            uh: np.ndarray,
            bc: np.ndarray,
            index: Union[np.ndarray, slice]=np.s_[:]
            ) -> np.ndarray:
        """
        @brief Evaluate the finite element function with coefficients `uh`
        at the quadrature points `bc` of every cell, shape (NQ, NC).
        """
        phi = self.basis(bc, index=index)
        cell2dof = self.cell_to_dof(index=index)
        return np.einsum('qci, ci->qc', phi, np.asarray(uh)[cell2dof])

    @barycentric
    def grad_value(self,
            uh: np.ndarray,
            bc: np.ndarray,
            index: Union[np.ndarray, slice]=np.s_[:]
            ) -> np.ndarray:
        """(NQ, NC, 2)"""
        gphi = self.grad_basis(bc, index=index)
        cell2dof = self.cell_to_dof(index=index)
        return np.einsum('qcim, ci->qcm', gphi, np.asarray(uh)[cell2dof])

    def interpolate(self, u: Callable) -> Function:
        """Nodal interpolant of a cartesian function `u(points)`."""
        ipoints = self.interpolation_points()
        return self.function(array=u(ipoints))

    def function(self, array=None):
        return Function(self, array=array)

    def array(self, dtype=np.float64):
        gdof = self.number_of_global_dofs()
        return np.zeros(gdof, dtype=dtype)
