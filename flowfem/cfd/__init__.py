from .navier_stokes_weak_form import NavierStokesWeakForm, navier_stokes_weak_form
from .state import PreviousStepState
from .time_step_driver import DriverState, StepRecord, RunResult
from .time_step_driver import TimeStepDriver, element_divergence
