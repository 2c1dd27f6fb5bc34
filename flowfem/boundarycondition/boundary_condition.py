from enum import Enum
from typing import Callable, Dict, Optional, Union

import numpy as np

from ..errors import UnknownMarkerError


class BCKind(Enum):
    NATURAL = 'natural'
    ESSENTIAL = 'essential'


BCValue = Union[float, Callable[[np.ndarray, np.ndarray, float], np.ndarray]]


class BoundaryConditionPolicy():
    """
    Boundary condition of one field, given per boundary marker.

    Parameters
    ----------
    kinds : dict
        marker -> BCKind, every marker used on the mesh boundary must appear.
    values : dict, optional
        marker -> value of an essential marker, either a number or a function
        `g(x, y, t)` vectorized over the coordinate arrays. Essential markers
        without a value are homogeneous.
    field : str, optional
        name of the field, only used in error messages.
    """
    def __init__(self,
            kinds: Dict[int, BCKind],
            values: Optional[Dict[int, BCValue]]=None,
            field: Optional[str]=None):
        self.kinds = {int(m): BCKind(k) for m, k in kinds.items()}
        self.values = {} if values is None else {int(m): v for m, v in values.items()}
        self.field = field
        for m in self.values:
            if self.kind_for(m) is not BCKind.ESSENTIAL:
                raise ValueError(f"marker {m} of field '{field}' has a value but is not essential")

    def __repr__(self):
        kinds = ', '.join(f"{m}: {k.value}" for m, k in sorted(self.kinds.items()))
        return f"BoundaryConditionPolicy({self.field}, {{{kinds}}})"

    def markers(self):
        return sorted(self.kinds)

    def essential_markers(self):
        return sorted(m for m, k in self.kinds.items() if k is BCKind.ESSENTIAL)

    def kind_for(self, marker) -> BCKind:
        try:
            return self.kinds[int(marker)]
        except KeyError:
            raise UnknownMarkerError(marker, self.field) from None

    def is_essential(self, marker) -> bool:
        return self.kind_for(marker) is BCKind.ESSENTIAL

    def value_at(self, marker, x, y, t):
        """
        The prescribed value on an essential marker at the points (x, y) and
        time t.
        """
        if not self.is_essential(marker):
            raise ValueError(f"marker {marker} of field '{self.field}' is natural and has no value")
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        g = self.values.get(int(marker), 0.0)
        if callable(g):
            val = g(x, y, t)
        else:
            val = g
        return np.broadcast_to(np.asarray(val, dtype=np.float64), np.broadcast(x, y).shape)


class ParabolicInletProfile():
    """
    peak * 4 y (H - y)/H^2 * min(1, t/startup_time), the parabolic inflow
    switched on linearly over the startup time.
    """
    def __init__(self, peak, height, startup_time):
        self.peak = peak
        self.height = height
        self.startup_time = startup_time

    def ramp(self, t):
        return min(1.0, t/self.startup_time)

    def __call__(self, x, y, t):
        H = self.height
        return self.peak*self.ramp(t)*4*y*(H - y)/H**2


def natural_policy(markers, field=None):
    """A policy with no essential condition on any of `markers`."""
    return BoundaryConditionPolicy({m: BCKind.NATURAL for m in markers}, field=field)
