from dataclasses import dataclass

from ..functionspace import Function


@dataclass(frozen=True)
class PreviousStepState:
    """
    The velocity of the last accepted time step. The driver replaces the
    whole object after every solve, it is never changed in place.
    """
    xprev: Function
    yprev: Function
    time: float = 0.0

    @classmethod
    def zero(cls, space, time=0.0):
        return cls(space.function(), space.function(), time)

    def external(self):
        """The functions the weak form reads at the quadrature points."""
        return {'xprev': self.xprev, 'yprev': self.yprev}
