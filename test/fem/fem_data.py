import numpy as np

from flowfem.mesh import TriangleMesh, QuadrangleMesh
from flowfem.pde import ObstacleChannelFlow


MESH = {'quad': QuadrangleMesh, 'tri': TriangleMesh}

# velocity and pressure degrees of the stable pairs
pair_data = [
    {"meshtype": "quad", "pv": 2, "pp": 1},
    {"meshtype": "tri", "pv": 2, "pp": 0},
    {"meshtype": "quad", "pv": 3, "pp": 2},
]


def unit_square(meshtype='quad', n=2):
    """Unit square with markers 1 bottom, 2 right, 3 top, 4 left."""
    mesh = MESH[meshtype].from_box([0, 1, 0, 1], nx=n, ny=n)
    mesh.mark_boundary(lambda p: p[..., 1] < 1e-12, 1)
    mesh.mark_boundary(lambda p: p[..., 0] > 1 - 1e-12, 2)
    mesh.mark_boundary(lambda p: p[..., 1] > 1 - 1e-12, 3)
    mesh.mark_boundary(lambda p: p[..., 0] < 1e-12, 4)
    return mesh


def small_channel(meshtype='quad', pv=2, pp=1, **options):
    """A short channel [0, 3] x [0, 1] around the obstacle [1, 1.5] x [0.25, 0.75]."""
    opts = dict(channel_length=3.0, domain_height=1.0,
            obstacle=(1.0, 1.5, 0.25, 0.75), reynolds=100.0,
            startup_time=1.0, dt=0.1, final_time=0.3,
            p_degree_velocity=pv, p_degree_pressure=pp)
    opts.update(options)
    pde = ObstacleChannelFlow(**opts)
    mesh = pde.mesh(meshtype=meshtype, nx=6, ny=4)
    return pde, mesh
