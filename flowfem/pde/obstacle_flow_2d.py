import numpy as np

from ..boundarycondition import BCKind, BoundaryConditionPolicy, ParabolicInletProfile
from ..mesh import TriangleMesh, QuadrangleMesh
from ..errors import ConfigurationError
from .. import logger


class ObstacleChannelFlow:
    """
    @brief Unsteady flow through a channel [0, L] x [0, H] past a rectangular
    obstacle.

    The inflow at the left wall is a parabola switched on linearly over the
    startup time, the right wall is a do-nothing outflow, the remaining walls
    and the obstacle are no-slip.

    All parameters are keyword options, see `defaults`.
    """
    defaults = {
        'reynolds': 1000.0,
        'inlet_velocity': 1.0,
        'startup_time': 1.0,
        'dt': 0.5,
        'final_time': 3000.0,
        'p_degree_velocity': 2,
        'p_degree_pressure': 1,
        'domain_height': 10.0,
        'marker_bottom': 1,
        'marker_right': 2,
        'marker_top': 3,
        'marker_left': 4,
        'marker_obstacle': 5,
        'channel_length': 30.0,
        'obstacle': (5.0, 7.0, 4.0, 6.0),
    }

    def __init__(self, options=None, eps=1e-10, **kwargs):
        opts = dict(self.defaults)
        given = {} if options is None else dict(options)
        given.update(kwargs)
        unknown = set(given) - set(opts)
        if unknown:
            raise ConfigurationError(f"unknown options: {sorted(unknown)}")
        opts.update(given)
        self.eps = eps

        self.reynolds = float(opts['reynolds'])
        self.inlet_velocity = float(opts['inlet_velocity'])
        self.startup_time = float(opts['startup_time'])
        self.dt = float(opts['dt'])
        self.final_time = float(opts['final_time'])
        self.p_degree_velocity = opts['p_degree_velocity']
        self.p_degree_pressure = opts['p_degree_pressure']
        self.domain_height = float(opts['domain_height'])
        self.marker_bottom = opts['marker_bottom']
        self.marker_right = opts['marker_right']
        self.marker_top = opts['marker_top']
        self.marker_left = opts['marker_left']
        self.marker_obstacle = opts['marker_obstacle']
        self.channel_length = float(opts['channel_length'])
        self.obstacle = tuple(float(v) for v in opts['obstacle'])

    @classmethod
    def from_options(cls, options):
        return cls(options=options)

    def options(self):
        return {key: getattr(self, key) for key in self.defaults}

    def __str__(self):
        s = f"{self.__class__.__name__}(\n"
        for key, val in self.options().items():
            s += f"  {key:<18}: {val}\n"
        s += ")"
        return s

    def markers(self):
        return [self.marker_bottom, self.marker_right, self.marker_top,
                self.marker_left, self.marker_obstacle]

    def validate(self):
        """
        Check the parameters, raise `ConfigurationError` on the first
        problem found.
        """
        pv = self.p_degree_velocity
        pp = self.p_degree_pressure
        if int(pv) != pv or int(pp) != pp:
            raise ConfigurationError(f"polynomial degrees must be integers, got {pv} and {pp}")
        if pv < 1:
            raise ConfigurationError(f"the velocity degree must be at least 1, got {pv}")
        if pp < 0:
            raise ConfigurationError(f"the pressure degree must be nonnegative, got {pp}")
        if pv <= pp:
            raise ConfigurationError(
                f"the velocity degree ({pv}) must exceed the pressure degree ({pp}), "
                "otherwise the discretization is not inf-sup stable")
        for name in ('reynolds', 'dt', 'final_time', 'startup_time', 'domain_height', 'channel_length'):
            val = getattr(self, name)
            if not (np.isfinite(val) and val > 0):
                raise ConfigurationError(f"`{name}` must be positive, got {val}")
        if self.inlet_velocity < 0 or not np.isfinite(self.inlet_velocity):
            raise ConfigurationError(f"`inlet_velocity` must be nonnegative, got {self.inlet_velocity}")

        markers = self.markers()
        for m in markers:
            if int(m) != m or m <= 0:
                raise ConfigurationError(f"boundary markers must be positive integers, got {m}")
        if len(set(markers)) != len(markers):
            raise ConfigurationError(f"boundary markers must be distinct, got {markers}")

        x0, x1, y0, y1 = self.obstacle
        if not (0 < x0 < x1 < self.channel_length and 0 < y0 < y1 < self.domain_height):
            raise ConfigurationError(f"the obstacle {self.obstacle} must lie inside the channel")

        if self.number_of_time_steps() < 1:
            raise ConfigurationError(
                f"final_time ({self.final_time}) is shorter than one time step ({self.dt})")

    def number_of_time_steps(self):
        """floor(final_time/dt), a ratio within 1e-10 of an integer counts as that integer."""
        n = self.final_time/self.dt
        return int(np.floor(n + 1e-10*max(1.0, n)))

    ## boundary conditions

    def inlet_profile(self):
        return ParabolicInletProfile(self.inlet_velocity, self.domain_height, self.startup_time)

    def _velocity_kinds(self):
        kinds = {m: BCKind.ESSENTIAL for m in self.markers()}
        kinds[self.marker_right] = BCKind.NATURAL
        return kinds

    def xvelocity_policy(self):
        return BoundaryConditionPolicy(
                self._velocity_kinds(),
                values={self.marker_left: self.inlet_profile()},
                field='xvel')

    def yvelocity_policy(self):
        return BoundaryConditionPolicy(self._velocity_kinds(), field='yvel')

    def pressure_policy(self):
        return BoundaryConditionPolicy(
                {m: BCKind.NATURAL for m in self.markers()}, field='press')

    ## mesh

    def is_obstacle_boundary(self, p):
        x = p[..., 0]
        y = p[..., 1]
        x0, x1, y0, y1 = self.obstacle
        eps = self.eps
        return (x > x0 - eps) & (x < x1 + eps) & (y > y0 - eps) & (y < y1 + eps)

    def mark_boundary(self, mesh):
        """Put the five markers on the boundary edges of a channel mesh."""
        eps = self.eps
        L = self.channel_length
        H = self.domain_height
        mesh.mark_boundary(self.is_obstacle_boundary, self.marker_obstacle)
        mesh.mark_boundary(lambda p: np.abs(p[..., 1]) < eps, self.marker_bottom)
        mesh.mark_boundary(lambda p: np.abs(p[..., 1] - H) < eps, self.marker_top)
        mesh.mark_boundary(lambda p: np.abs(p[..., 0]) < eps, self.marker_left)
        mesh.mark_boundary(lambda p: np.abs(p[..., 0] - L) < eps, self.marker_right)
        return mesh

    def mesh(self, meshtype='quad', nx=None, ny=None):
        """
        A structured mesh of the channel with the obstacle cells removed.
        The default resolution is one cell per unit length.
        """
        L = self.channel_length
        H = self.domain_height
        nx = int(np.ceil(L)) if nx is None else nx
        ny = int(np.ceil(H)) if ny is None else ny
        x0, x1, y0, y1 = self.obstacle
        box = [0, L, 0, H]

        def threshold(p):
            return (p[..., 0] > x0) & (p[..., 0] < x1) & (p[..., 1] > y0) & (p[..., 1] < y1)

        if meshtype == 'quad':
            mesh = QuadrangleMesh.from_box(box, nx=nx, ny=ny, threshold=threshold)
        elif meshtype == 'tri':
            mesh = TriangleMesh.from_box(box, nx=nx, ny=ny, threshold=threshold)
        else:
            raise ValueError(f"unknown mesh type `{meshtype}`")
        self.mark_boundary(mesh)
        logger.info(f"channel mesh: {mesh.number_of_cells()} {meshtype} cells, "
                f"boundary markers {mesh.boundary_markers().tolist()}")
        return mesh
