import argparse

import numpy as np
import matplotlib.pyplot as plt

from flowfem.mesh import read_mesh
from flowfem.pde import ObstacleChannelFlow
from flowfem.cfd import TimeStepDriver, element_divergence


parser = argparse.ArgumentParser(description=
        """
        Mixed finite element simulation of the flow past an obstacle in a
        channel: Q_p/P_p velocity, discontinuous P_{p-1} pressure, implicit
        Euler time stepping with lagged convection.
        """)

parser.add_argument('--mesh',
        default=None, type=str,
        help='mesh file, by default a structured channel mesh is generated.')

parser.add_argument('--meshtype',
        default='quad', type=str,
        help='type of the generated mesh, quad or tri, default is quad.')

parser.add_argument('--nx',
        default=30, type=int,
        help='number of cells along the channel of the generated mesh, default is 30.')

parser.add_argument('--ny',
        default=10, type=int,
        help='number of cells across the channel of the generated mesh, default is 10.')

parser.add_argument('--refine',
        default=1, type=int,
        help='number of uniform refinements of the mesh, default is 1.')

parser.add_argument('--reynolds',
        default=1000.0, type=float,
        help='Reynolds number, default is 1000.')

parser.add_argument('--inlet_velocity',
        default=1.0, type=float,
        help='peak inflow velocity, default is 1.')

parser.add_argument('--startup_time',
        default=1.0, type=float,
        help='time over which the inflow is switched on, default is 1.')

parser.add_argument('--dt',
        default=0.5, type=float,
        help='time step length, default is 0.5.')

parser.add_argument('--final_time',
        default=3000.0, type=float,
        help='final time, default is 3000.')

parser.add_argument('--udegree',
        default=2, type=int,
        help='degree of the velocity space, default is 2.')

parser.add_argument('--pdegree',
        default=1, type=int,
        help='degree of the pressure space, default is 1.')

parser.add_argument('--nsteps',
        default=None, type=int,
        help='number of time steps to run, by default all of them.')

parser.add_argument('--nworkers',
        default=1, type=int,
        help='number of assembly threads, default is 1.')

parser.add_argument('--plot',
        action='store_true',
        help='plot the velocity magnitude and the pressure at the end.')

args = parser.parse_args()

pde = ObstacleChannelFlow(
        reynolds=args.reynolds,
        inlet_velocity=args.inlet_velocity,
        startup_time=args.startup_time,
        dt=args.dt,
        final_time=args.final_time,
        p_degree_velocity=args.udegree,
        p_degree_pressure=args.pdegree)

if args.mesh is None:
    mesh = pde.mesh(meshtype=args.meshtype, nx=args.nx, ny=args.ny)
else:
    mesh = read_mesh(args.mesh)
mesh.uniform_refine(args.refine)

driver = TimeStepDriver(pde, mesh=mesh, nworkers=args.nworkers,
        pbar_log=True, log_level="INFO")
print(driver)

result = driver.run(nsteps=args.nsteps)
print(f"status: {result.status.value}, steps: {result.steps}, time: {result.time}")
if not result.success and result.error is not None:
    print(f"step {result.failed_step} failed: {result.error}")

record = driver.last
if record is not None:
    div = element_divergence(record.xvel, record.yvel)
    print(f"max |int_K div u|: {np.max(np.abs(div)):.3e}")

if args.plot and record is not None:
    uspace = record.xvel.space
    umag = uspace.function(array=np.sqrt(record.xvel**2 + record.yvel**2))

    fig, axes = plt.subplots(2, 1)
    umag.add_plot(axes[0])
    axes[0].set_title(f"velocity magnitude, t = {record.time}")
    record.press.add_plot(axes[1])
    axes[1].set_title(f"pressure, t = {record.time}")
    plt.show()
