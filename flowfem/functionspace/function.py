import numpy as np
from types import ModuleType


class Function(np.ndarray):
    """
    A finite element function: the coefficient array of a space, which can
    be evaluated at quadrature points of every cell.
    """
    coordtype = "barycentric"

    def __new__(cls, space, array=None):
        if array is None:
            self = space.array().view(cls)
        else:
            self = np.asarray(array).view(cls)
        self.space = space
        return self

    def __array_finalize__(self, obj):
        if obj is None:
            return
        self.space = getattr(obj, 'space', None)

    def __call__(self, bc, index=np.s_[:]):
        return self.space.value(self, bc, index=index)

    def value(self, bc, index=np.s_[:]):
        return self.space.value(self, bc, index=index)

    def grad_value(self, bc, index=np.s_[:]):
        return self.space.grad_value(self, bc, index=index)

    def add_plot(self, plot, cmap='rainbow', showcolorbar=True):
        """
        Draw the cell averages of the function on its mesh.
        """
        if isinstance(plot, ModuleType):
            fig = plot.figure()
            fig.set_facecolor('white')
            axes = fig.gca()
        else:
            axes = plot

        mesh = self.space.mesh
        qf = mesh.integrator(self.space.p + 1)
        bcs, ws = qf.get_quadrature_points_and_weights()
        d = mesh.quadrature_measure(bcs)
        val = np.einsum('q, qc, qc->c', ws, d, self(bcs))/np.einsum('q, qc->c', ws, d)
        return mesh.add_plot(axes, cellcolor=val, cmap=cmap, showcolorbar=showcolorbar)


class Solution(Function):
    """
    The read-only function of one field reconstructed from the solution
    vector of a time step.
    """
    def __new__(cls, space, array, time=None, name=None):
        self = Function.__new__(cls, space, array=np.array(array, dtype=np.float64))
        self.time = time
        self.name = name
        self.flags.writeable = False
        return self

    def __array_finalize__(self, obj):
        super().__array_finalize__(obj)
        self.time = getattr(obj, 'time', None)
        self.name = getattr(obj, 'name', None)
