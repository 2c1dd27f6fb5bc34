import numpy as np

from ..boundarycondition import BoundaryConditionPolicy
from ..functionspace import Solution
from ..errors import ConfigurationError
from .. import logger


class FieldSpace():
    """
    One unknown field: a finite element space together with the boundary
    condition policy of the field.

    The degrees of freedom lying on edges with an essential marker are
    removed from the unknowns and carry fixed values instead. The partition
    into free and essential degrees of freedom is computed once by
    `number_dofs` and cached; `assign_dofs` hands out global indices and
    refreshes the essential values for the current time.

    A dof shared by essential edges with different markers takes its value
    from the smallest marker.
    """
    def __init__(self, space, policy: BoundaryConditionPolicy, name=None):
        self.space = space
        self.mesh = space.mesh
        self.policy = policy
        self.name = name if name is not None else policy.field

        self.isEssentialDof = None
        self.dofmarker = None
        self.first = None
        self.time = None
        self.dof2global = None
        self.essential_values = None

    def __repr__(self):
        return f"FieldSpace({self.name}, {self.space})"

    def update(self):
        """Forget the cached numbering, e.g. after the mesh was refined."""
        self.isEssentialDof = None
        self.dofmarker = None
        self.first = None
        self.dof2global = None
        self.essential_values = None

    def number_of_global_dofs(self):
        return self.space.number_of_global_dofs()

    def number_of_free_dofs(self):
        self.number_dofs()
        return int(np.sum(~self.isEssentialDof))

    def number_dofs(self):
        if self.isEssentialDof is not None:
            return

        mesh = self.mesh
        policy = self.policy
        gdof = self.space.number_of_global_dofs()
        isEssentialDof = np.zeros(gdof, dtype=np.bool_)
        dofmarker = np.zeros(gdof, dtype=mesh.itype)

        bdEdgeIndex = mesh.ds.boundary_edge_index()
        bdMarker = mesh.edge_marker(bdEdgeIndex)
        essential = [m for m in np.unique(bdMarker) if policy.is_essential(m)]

        if len(essential) > 0:
            if not hasattr(self.space, 'edge_to_dof'):
                raise ConfigurationError(
                    f"field '{self.name}' uses a discontinuous space and can not "
                    f"have essential markers {essential}")
            edge2dof = self.space.edge_to_dof(index=bdEdgeIndex)
            for m in sorted(essential, reverse=True):
                dofs = edge2dof[bdMarker == m].reshape(-1)
                isEssentialDof[dofs] = True
                dofmarker[dofs] = m

        self.isEssentialDof = isEssentialDof
        self.dofmarker = dofmarker
        logger.debug(f"field '{self.name}': {gdof} dofs, {isEssentialDof.sum()} essential")

    def assign_dofs(self, first, t):
        """
        Give the free dofs the global indices first, first+1, ... in local
        order and evaluate the essential values at time `t`.

        Returns the number of free dofs.
        """
        self.number_dofs()
        isFree = ~self.isEssentialDof
        nfree = int(np.sum(isFree))

        dof2global = np.full(len(isFree), -1, dtype=np.int_)
        dof2global[isFree] = first + np.arange(nfree)

        values = np.zeros(len(isFree), dtype=np.float64)
        if nfree < len(isFree):
            ipoints = self.space.interpolation_points()
            for m in np.unique(self.dofmarker[self.isEssentialDof]):
                dofs, = np.nonzero(self.isEssentialDof & (self.dofmarker == m))
                values[dofs] = self.policy.value_at(m, ipoints[dofs, 0], ipoints[dofs, 1], t)

        self.first = first
        self.time = t
        self.dof2global = dof2global
        self.essential_values = values
        return nfree

    def free_dofs(self):
        self.number_dofs()
        idx, = np.nonzero(~self.isEssentialDof)
        return idx

    def essential_dofs(self):
        self.number_dofs()
        idx, = np.nonzero(self.isEssentialDof)
        return idx

    def solution(self, X, t=None):
        """
        Reconstruct the field from the global solution vector `X`.
        """
        if self.dof2global is None:
            raise RuntimeError(f"the dofs of field '{self.name}' have not been assigned")
        uh = self.essential_values.copy()
        isFree = ~self.isEssentialDof
        uh[isFree] = X[self.dof2global[isFree]]
        t = self.time if t is None else t
        return Solution(self.space, uh, time=t, name=self.name)
