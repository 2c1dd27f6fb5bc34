from enum import IntEnum
from dataclasses import dataclass
from typing import Callable, Tuple


class Symmetry(IntEnum):
    """
    How the transposed block of a bilinear form entry is obtained.

    UNSYM : the entry only contributes to block (i, j)
    SYM : the entry is symmetric, block (j, i) is its transpose; on the
        diagonal only the upper triangle of the local matrix is used
    ANTISYM : block (j, i) is the negative transpose
    """
    ANTISYM = -1
    UNSYM = 0
    SYM = 1


@dataclass(frozen=True)
class BilinearFormEntry:
    i: int
    j: int
    kernel: Callable
    sym: Symmetry = Symmetry.UNSYM
    ext: Tuple[str, ...] = ()

    def __str__(self):
        return f"({self.i}, {self.j}, {self.sym.name}, {getattr(self.kernel, '__name__', 'kernel')})"


@dataclass(frozen=True)
class LinearFormEntry:
    i: int
    kernel: Callable
    ext: Tuple[str, ...] = ()


class WeakForm():
    """
    Registry of the bilinear and linear forms of a system with `neq` fields.

    A bilinear form entry (i, j) integrates the trial functions of field j
    against the test functions of field i. Its kernel is called as
    ``kernel(u, v, data)`` and returns the local matrices of shape
    (NC, ldof_i, ldof_j), a linear form kernel is called as
    ``kernel(v, data)`` and returns (NC, ldof_i). The names in `ext` are the
    external functions the kernel reads from ``data.ext``; they are
    evaluated at the quadrature points by the assembler.
    """
    def __init__(self, neq):
        if neq < 1:
            raise ValueError(f"the number of equations must be positive, got {neq}")
        self.neq = neq
        self.biforms = []
        self.liforms = []

    def _check_index(self, i):
        if not (0 <= i < self.neq):
            raise ValueError(f"field index {i} out of range [0, {self.neq})")

    def add_biform(self, i, j, kernel, sym=Symmetry.UNSYM, ext=()):
        self._check_index(i)
        self._check_index(j)
        sym = Symmetry(sym)
        if sym is Symmetry.ANTISYM and i == j:
            raise ValueError(f"an antisymmetric entry can not lie on the diagonal ({i}, {j})")
        if sym is not Symmetry.UNSYM and i > j:
            raise ValueError(
                f"the {sym.name} entry ({i}, {j}) must be given in the upper "
                f"half, register ({j}, {i}) instead")
        entry = BilinearFormEntry(i, j, kernel, sym, tuple(ext))
        self.biforms.append(entry)
        return entry

    def add_liform(self, i, kernel, ext=()):
        self._check_index(i)
        entry = LinearFormEntry(i, kernel, tuple(ext))
        self.liforms.append(entry)
        return entry

    def required_ext(self):
        names = set()
        for entry in self.biforms + self.liforms:
            names.update(entry.ext)
        return names

    def entries(self, i=None, j=None, sym=None):
        """Bilinear form entries filtered by position and symmetry."""
        return [e for e in self.biforms
                if (i is None or e.i == i)
                and (j is None or e.j == j)
                and (sym is None or e.sym == sym)]

    def restrict(self, *syms):
        """
        A new weak form keeping the bilinear entries whose symmetry is one
        of `syms` and all linear forms.
        """
        wf = WeakForm(self.neq)
        for e in self.biforms:
            if e.sym in syms:
                wf.add_biform(e.i, e.j, e.kernel, e.sym, e.ext)
        for e in self.liforms:
            wf.add_liform(e.i, e.kernel, e.ext)
        return wf
