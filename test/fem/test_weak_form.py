import numpy as np
import pytest

from flowfem.fem import WeakForm, Symmetry
from flowfem.fem import int_u_v, int_grad_u_grad_v, int_u_dvdx, int_f_v


def zero_rhs(v, data):
    return np.zeros(v.phi.shape[1:])


class TestWeakForm:
    def test_add_entries(self):
        wf = WeakForm(3)
        e = wf.add_biform(0, 0, int_u_v, sym=Symmetry.SYM)
        assert e.i == 0 and e.j == 0 and e.sym is Symmetry.SYM
        wf.add_biform(0, 2, int_u_dvdx, sym=Symmetry.ANTISYM)
        wf.add_biform(1, 1, int_grad_u_grad_v, sym=0, ext=('w', ))
        wf.add_liform(1, zero_rhs, ext=('f', ))
        assert len(wf.biforms) == 3
        assert len(wf.liforms) == 1
        assert wf.required_ext() == {'w', 'f'}
        assert wf.entries(sym=Symmetry.ANTISYM)[0].j == 2
        assert len(wf.entries(i=1)) == 1
        assert 'ANTISYM' in str(wf.entries(i=0, j=2)[0])

    @pytest.mark.parametrize("i, j, sym", [
        (0, 0, Symmetry.ANTISYM),
        (2, 0, Symmetry.SYM),
        (1, 0, Symmetry.ANTISYM),
        (0, 3, Symmetry.UNSYM),
        (-1, 0, Symmetry.UNSYM),
    ])
    def test_invalid_entries(self, i, j, sym):
        wf = WeakForm(3)
        with pytest.raises(ValueError):
            wf.add_biform(i, j, int_u_v, sym=sym)

    def test_lower_unsymmetric_entry(self):
        wf = WeakForm(2)
        e = wf.add_biform(1, 0, int_u_v)
        assert e.sym is Symmetry.UNSYM

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            WeakForm(0)

    def test_restrict(self):
        wf = WeakForm(2)
        wf.add_biform(0, 0, int_u_v, sym=Symmetry.SYM)
        wf.add_biform(0, 0, int_u_dvdx, ext=('w', ))
        wf.add_biform(0, 1, int_u_dvdx, sym=Symmetry.ANTISYM)
        wf.add_liform(0, zero_rhs)

        sub = wf.restrict(Symmetry.SYM)
        assert [e.sym for e in sub.biforms] == [Symmetry.SYM]
        assert len(sub.liforms) == 1
        assert sub.required_ext() == set()

        sub = wf.restrict(Symmetry.SYM, Symmetry.ANTISYM)
        assert [e.sym for e in sub.biforms] == [Symmetry.SYM, Symmetry.ANTISYM]
        assert len(wf.biforms) == 3
