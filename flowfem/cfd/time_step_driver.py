from enum import Enum
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
from tqdm import tqdm

from ..model import ComputationalModel
from ..functionspace import LagrangeFESpace, ScaledMonomialSpace2d, Solution
from ..fem import FieldSpace, GlobalDOFMap, GlobalAssembler
from ..solver import spsolve
from ..timeintegratoralg import UniformTimeLine
from ..errors import AssemblyError, SolveError
from .navier_stokes_weak_form import navier_stokes_weak_form
from .state import PreviousStepState


class DriverState(Enum):
    INITIALIZING = 'initializing'
    STEPPING = 'stepping'
    FINALIZING = 'finalizing'
    FINISHED = 'finished'
    FAILED = 'failed'


@dataclass(frozen=True)
class StepRecord:
    step: int
    time: float
    xvel: Solution
    yvel: Solution
    press: Solution


@dataclass
class RunResult:
    status: DriverState
    steps: int
    time: float
    error: Optional[Exception] = None
    failed_step: Optional[int] = None

    @property
    def success(self):
        return self.status is DriverState.FINISHED


class TimeStepDriver(ComputationalModel):
    """
    Fixed step time integration of `ObstacleChannelFlow` like problems.

    Every step advances the time, refreshes the essential values, assembles
    the linearized system around the previous velocity, solves it and
    replaces the previous step state with the new velocity.

    Parameters
    ----------
    pde : the problem, it provides the parameters, the boundary condition
        policies and `number_of_time_steps()`.
    mesh : optional, the default is `pde.mesh()`.
    solver : callable `solver(A, b) -> x` with `A` in csc format.
    q, nworkers, check_symmetry : passed to `GlobalAssembler`.
    """
    def __init__(self, pde, mesh=None, solver: Callable=spsolve,
            q=None, nworkers=1, check_symmetry=False,
            pbar_log=False, log_level="WARNING"):
        super().__init__(pbar_log=pbar_log, log_level=log_level)
        pde.validate()
        self.pde = pde
        self.mesh = pde.mesh() if mesh is None else mesh
        self.solver = solver
        self.pbar_log = pbar_log

        self.uspace = LagrangeFESpace(self.mesh, p=pde.p_degree_velocity)
        self.pspace = ScaledMonomialSpace2d(self.mesh, p=pde.p_degree_pressure)
        self.xfield = FieldSpace(self.uspace, pde.xvelocity_policy(), name='xvel')
        self.yfield = FieldSpace(self.uspace, pde.yvelocity_policy(), name='yvel')
        self.pfield = FieldSpace(self.pspace, pde.pressure_policy(), name='press')
        for field in (self.xfield, self.yfield, self.pfield):
            field.number_dofs()

        self.dofmap = GlobalDOFMap([self.xfield, self.yfield, self.pfield])
        self.wf = navier_stokes_weak_form(pde)
        self.assembler = GlobalAssembler(self.wf, self.dofmap, q=q,
                nworkers=nworkers, check_symmetry=check_symmetry)

        NT = pde.number_of_time_steps()
        self.timeline = UniformTimeLine(0.0, NT*pde.dt, NT)
        self.state = PreviousStepState.zero(self.uspace)
        self.last = None
        self.status = DriverState.INITIALIZING
        self.observers = []

    def __str__(self) -> str:
        s = f"{self.__class__.__name__}(\n"
        s += f"  pde            : {self.pde.__class__.__name__}\n"
        s += f"  mesh           : {self.mesh.number_of_cells()} {self.mesh.meshtype} cells\n"
        s += f"  velocity space : {self.uspace}\n"
        s += f"  pressure space : {self.pspace}\n"
        s += f"  time steps     : {self.timeline.number_of_time_steps()} x {self.pde.dt}\n"
        s += f"  status         : {self.status.value}\n"
        s += ")"
        return s

    def add_observer(self, callback):
        """`callback(record)` is called with a `StepRecord` after every
        accepted step."""
        self.observers.append(callback)

    def initialize(self):
        if self.status is not DriverState.INITIALIZING:
            raise RuntimeError(f"can not initialize a driver in state '{self.status.value}'")
        free = [f.number_of_free_dofs() for f in self.dofmap.fields]
        self.logger.info(f"mesh: {self.mesh.number_of_nodes()} nodes, "
                f"{self.mesh.number_of_cells()} cells")
        self.logger.info(f"free dofs: xvel {free[0]}, yvel {free[1]}, press {free[2]}, "
                f"total {sum(free)}")
        self.status = DriverState.STEPPING

    def step(self):
        """
        Advance one time step and return its `StepRecord`. Assembly and
        solve errors propagate, the driver is left in the FAILED state.
        """
        if self.status is DriverState.INITIALIZING:
            self.initialize()
        if self.status is not DriverState.STEPPING:
            raise RuntimeError(f"can not step a driver in state '{self.status.value}'")

        k = self.timeline.current_time_level_index() + 1
        t = self.timeline.next_time_level()
        try:
            N = self.dofmap.assign(t)
            A, b = self.assembler.assemble(self.state.external())
            X = self.solver(A, b)
            X = np.asarray(X, dtype=np.float64)
            if X.shape != (N, ):
                raise SolveError(f"the solver returned shape {X.shape}, expected ({N},)")
        except (AssemblyError, SolveError):
            self.status = DriverState.FAILED
            raise

        xvel, yvel, press = self.dofmap.solutions(X, t=t)
        self.state = PreviousStepState(xvel, yvel, t)
        self.timeline.advance()

        record = StepRecord(k, t, xvel, yvel, press)
        self.last = record
        self.logger.info(f"step {k}/{self.timeline.number_of_time_steps()}, t = {t:.6g}, "
                f"N = {N}, max |u| = {max(np.max(np.abs(xvel)), np.max(np.abs(yvel))):.6g}")
        for callback in self.observers:
            callback(record)

        if self.timeline.stop():
            self.status = DriverState.FINALIZING
        return record

    def finalize(self):
        if self.status is not DriverState.FINALIZING:
            raise RuntimeError(f"can not finalize a driver in state '{self.status.value}'")
        self.status = DriverState.FINISHED
        self.logger.info(f"finished at t = {self.timeline.current_time_level():.6g}")

    def run(self, nsteps=None):
        """
        Run `nsteps` steps, by default all remaining ones. An assembly or
        solve failure ends the run with a FAILED result naming the step.
        """
        remaining = self.timeline.number_of_time_steps() - self.timeline.current_time_level_index()
        nsteps = remaining if nsteps is None else min(nsteps, remaining)

        steps = 0
        for _ in tqdm(range(nsteps), desc='time steps', disable=not self.pbar_log):
            k = self.timeline.current_time_level_index() + 1
            t = self.timeline.next_time_level()
            try:
                self.step()
            except (AssemblyError, SolveError) as e:
                self.logger.error(f"step {k} at t = {t:.6g} failed: {e}")
                return RunResult(DriverState.FAILED, steps, t, error=e, failed_step=k)
            steps += 1

        if self.status is DriverState.FINALIZING:
            self.finalize()
        return RunResult(self.status, steps, self.timeline.current_time_level())


def element_divergence(xvel, yvel, q=None):
    """
    The integral of div (xvel, yvel) over every cell, shape (NC, ).
    """
    space = xvel.space
    mesh = space.mesh
    q = space.p + 2 if q is None else q
    qf = mesh.integrator(q)
    bcs, ws = qf.get_quadrature_points_and_weights()
    d = mesh.quadrature_measure(bcs)
    div = xvel.grad_value(bcs)[..., 0] + yvel.grad_value(bcs)[..., 1]
    return np.einsum('q, qc, qc->c', ws, d, div)
