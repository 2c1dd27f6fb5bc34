from ..fem import WeakForm, Symmetry
from ..fem import int_u_v, int_grad_u_grad_v, int_w_nabla_u_v
from ..fem import int_u_dvdx, int_u_dvdy, int_f_v


class NavierStokesWeakForm(WeakForm):
    """
    Implicit Euler discretization of the incompressible Navier-Stokes
    equations with the convection lagged to the previous time step.

    Fields: 0 x-velocity, 1 y-velocity, 2 pressure. The previous velocity is
    read from the external functions 'xprev' and 'yprev'.

        (0,0), (1,1)  SYM      int grad u . grad v/Re + int u v/dt
        (0,0), (1,1)  UNSYM    int (w . grad u) v, w = (xprev, yprev)
        (0,2)         ANTISYM  -int p dv/dx
        (1,2)         ANTISYM  -int p dv/dy
        0             int xprev v/dt
        1             int yprev v/dt
    """
    def __init__(self, reynolds, dt):
        super().__init__(3)
        self.reynolds = reynolds
        self.dt = dt

        for i in (0, 1):
            self.add_biform(i, i, self.diffusion_mass, sym=Symmetry.SYM)
            self.add_biform(i, i, self.convection, sym=Symmetry.UNSYM, ext=('xprev', 'yprev'))
        self.add_biform(0, 2, self.pressure_dx, sym=Symmetry.ANTISYM)
        self.add_biform(1, 2, self.pressure_dy, sym=Symmetry.ANTISYM)
        self.add_liform(0, self.xprev_source, ext=('xprev', ))
        self.add_liform(1, self.yprev_source, ext=('yprev', ))

    def diffusion_mass(self, u, v, data):
        return int_grad_u_grad_v(u, v, data)/self.reynolds + int_u_v(u, v, data)/self.dt

    def convection(self, u, v, data):
        return int_w_nabla_u_v(data.ext['xprev'], data.ext['yprev'], u, v, data)

    def pressure_dx(self, u, v, data):
        return -int_u_dvdx(u, v, data)

    def pressure_dy(self, u, v, data):
        return -int_u_dvdy(u, v, data)

    def xprev_source(self, v, data):
        return int_f_v(data.ext['xprev'], v, data)/self.dt

    def yprev_source(self, v, data):
        return int_f_v(data.ext['yprev'], v, data)/self.dt


def navier_stokes_weak_form(pde):
    return NavierStokesWeakForm(pde.reynolds, pde.dt)
