from concurrent.futures import ThreadPoolExecutor
from typing import Mapping

import numpy as np
from scipy.sparse import csc_matrix

from .weak_form import WeakForm, Symmetry
from .dof_map import GlobalDOFMap
from .integrals import BasisValues, IntegrationData
from ..errors import AssemblyError, SymmetryError
from .. import logger


class GlobalAssembler():
    """
    Assemble the global matrix and right hand side of a weak form over the
    free dofs of a `GlobalDOFMap`.

    Rows of essential dofs are dropped, columns of essential dofs are moved
    to the right hand side with the current essential values. A symmetric
    entry is integrated once; on the diagonal the local matrix is rebuilt
    from its upper triangle, off the diagonal its transpose fills block
    (j, i). An antisymmetric entry fills block (j, i) with its negative
    transpose.

    Parameters
    ----------
    q : int, optional
        number of quadrature points per direction, the default is the
        largest degree of the fields plus 2.
    nworkers : int
        with more than one worker the cells are split into chunks assembled
        by a thread pool. Every chunk produces its own triplets which are
        summed afterwards.
    check_symmetry : bool
        compare kernel(u, v) with kernel(v, u)^T for every symmetric entry on
        a few cells and raise `SymmetryError` if they differ.
    """
    def __init__(self, wf: WeakForm, dofmap: GlobalDOFMap, q=None,
            nworkers=1, check_symmetry=False, nsample=3, rtol=1e-10):
        if len(dofmap) != wf.neq:
            raise ValueError(f"the weak form has {wf.neq} equations but the dof map {len(dofmap)} fields")
        if nworkers < 1:
            raise ValueError(f"nworkers must be positive, got {nworkers}")
        self.wf = wf
        self.dofmap = dofmap
        self.mesh = dofmap[0].mesh
        if q is None:
            q = max(field.space.p for field in dofmap.fields) + 2
        self.q = q
        self.nworkers = nworkers
        self.check_symmetry = check_symmetry
        self.nsample = nsample
        self.rtol = rtol

    def integration_data(self, index, external):
        mesh = self.mesh
        qf = mesh.integrator(self.q)
        bcs, ws = qf.get_quadrature_points_and_weights()
        ps = mesh.bc_to_point(bcs, index=index)
        ext = {}
        for name, f in external.items():
            if getattr(f, 'coordtype', 'cartesian') == 'barycentric':
                ext[name] = f(bcs, index=index)
            else:
                ext[name] = f(ps)
        data = IntegrationData(
                ws=ws,
                measure=mesh.quadrature_measure(bcs, index=index),
                points=ps,
                index=index,
                ext=ext)
        return bcs, data

    def basis_values(self, bcs, index):
        values = []
        for field in self.dofmap.fields:
            space = field.space
            values.append(BasisValues(
                phi=space.basis(bcs, index=index),
                gphi=space.grad_basis(bcs, index=index)))
        return values

    def assemble(self, external: Mapping=None):
        """
        Return the (N, N) matrix in compressed sparse column format and the
        right hand side of length N.

        `external` maps the names the weak form depends on to functions
        which are evaluated at the quadrature points: finite element
        functions and `@barycentric` callables as `f(bcs, index=index)`,
        any other callable as `f(points)`.
        """
        external = {} if external is None else dict(external)
        N = self.dofmap.number_of_dofs()
        if N is None:
            raise AssemblyError("the global dofs have not been assigned")
        missing = self.wf.required_ext() - set(external)
        if missing:
            raise AssemblyError(f"missing external functions: {sorted(missing)}")
        external = {name: external[name] for name in self.wf.required_ext()}

        NC = self.mesh.number_of_cells()
        if self.check_symmetry:
            self.symmetry_check(external)

        chunks = [c for c in np.array_split(np.arange(NC), self.nworkers) if len(c) > 0]
        if len(chunks) > 1:
            with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
                results = list(executor.map(lambda c: self.assemble_chunk(c, external), chunks))
        else:
            results = [self.assemble_chunk(np.s_[:], external)]

        I = np.concatenate([r[0] for r in results])
        J = np.concatenate([r[1] for r in results])
        V = np.concatenate([r[2] for r in results])
        A = csc_matrix((V, (I, J)), shape=(N, N))

        b = np.zeros(N, dtype=np.float64)
        for r in results:
            np.add.at(b, r[3], r[4])

        logger.debug(f"assembled a {N}x{N} matrix with {A.nnz} nonzeros on {len(chunks)} chunks")
        return A, b

    def assemble_chunk(self, index, external):
        bcs, data = self.integration_data(index, external)
        basis = self.basis_values(bcs, index)
        fields = self.dofmap.fields

        triplets = []
        rhs = []

        def add_block(i, j, K):
            cell2dof0 = fields[i].space.cell_to_dof(index=index)
            cell2dof1 = fields[j].space.cell_to_dof(index=index)
            rows = fields[i].dof2global[cell2dof0]
            cols = fields[j].dof2global[cell2dof1]
            I = np.broadcast_to(rows[:, :, None], K.shape)
            J = np.broadcast_to(cols[:, None, :], K.shape)

            flag = (I >= 0) & (J >= 0)
            triplets.append((I[flag], J[flag], K[flag]))

            flag = (I >= 0) & (J < 0)
            if np.any(flag):
                fixed = fields[j].essential_values[cell2dof1]
                lift = K*fixed[:, None, :]
                rhs.append((I[flag], -lift[flag]))

        for entry in self.wf.biforms:
            i, j = entry.i, entry.j
            K = entry.kernel(basis[j], basis[i], data)
            self._check_local(entry, K, basis[i], basis[j])
            if entry.sym is Symmetry.SYM and i == j:
                U = np.triu(K)
                add_block(i, i, U + np.swapaxes(np.triu(K, 1), -1, -2))
            elif entry.sym is Symmetry.SYM:
                add_block(i, j, K)
                add_block(j, i, np.swapaxes(K, -1, -2))
            elif entry.sym is Symmetry.ANTISYM:
                add_block(i, j, K)
                add_block(j, i, -np.swapaxes(K, -1, -2))
            else:
                add_block(i, j, K)

        for entry in self.wf.liforms:
            i = entry.i
            F = entry.kernel(basis[i], data)
            if not np.all(np.isfinite(F)):
                raise AssemblyError(f"non finite values in linear form {i}")
            cell2dof = fields[i].space.cell_to_dof(index=index)
            rows = fields[i].dof2global[cell2dof]
            flag = rows >= 0
            rhs.append((rows[flag], F[flag]))

        if len(triplets) == 0:
            triplets.append((np.zeros(0, dtype=np.int_), np.zeros(0, dtype=np.int_), np.zeros(0)))
        if len(rhs) == 0:
            rhs.append((np.zeros(0, dtype=np.int_), np.zeros(0)))

        return (np.concatenate([t[0] for t in triplets]),
                np.concatenate([t[1] for t in triplets]),
                np.concatenate([t[2] for t in triplets]),
                np.concatenate([r[0] for r in rhs]),
                np.concatenate([r[1] for r in rhs]))

    def _check_local(self, entry, K, v, u):
        NC = u.phi.shape[1]
        shape = (NC, v.phi.shape[-1], u.phi.shape[-1])
        if K.shape != shape:
            raise AssemblyError(f"bilinear form {entry} returned shape {K.shape}, expected {shape}")
        if not np.all(np.isfinite(K)):
            raise AssemblyError(f"non finite values in bilinear form {entry}")

    def symmetry_check(self, external):
        """
        Sample the symmetric entries on a few cells and make sure that
        kernel(u, v) == kernel(v, u)^T.
        """
        NC = self.mesh.number_of_cells()
        index = np.unique(np.linspace(0, NC-1, min(self.nsample, NC)).astype(np.int_))
        bcs, data = self.integration_data(index, external)
        basis = self.basis_values(bcs, index)
        for entry in self.wf.entries(sym=Symmetry.SYM):
            i, j = entry.i, entry.j
            K0 = entry.kernel(basis[j], basis[i], data)
            K1 = entry.kernel(basis[i], basis[j], data)
            error = np.max(np.abs(K0 - np.swapaxes(K1, -1, -2)))
            scale = max(1.0, np.max(np.abs(K0)))
            if error > self.rtol*scale:
                raise SymmetryError(str(entry), error)
        logger.debug(f"symmetry check passed on cells {index}")
