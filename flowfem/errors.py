"""
Exception hierarchy of flowfem.

Configuration problems are raised before the first time step; assembly and
solve problems are raised inside a step and turned into a failed run result by
the time step driver.
"""


class FlowFEMError(Exception):
    """Base class of all flowfem errors."""


class ConfigurationError(FlowFEMError):
    """Invalid simulation parameters, e.g. the velocity degree does not exceed
    the pressure degree."""


class UnknownMarkerError(ConfigurationError):
    def __init__(self, marker, field=None):
        self.marker = int(marker)
        self.field = field
        if field is None:
            msg = f"unknown boundary marker {self.marker}"
        else:
            msg = f"unknown boundary marker {self.marker} for field '{field}'"
        super().__init__(msg)


class MeshFileError(FlowFEMError):
    pass


class AssemblyError(FlowFEMError):
    pass


class SymmetryError(AssemblyError):
    """A weak form entry tagged symmetric whose kernel is not."""
    def __init__(self, entry, error):
        self.entry = entry
        self.error = error
        super().__init__(
            f"bilinear form entry {entry} is tagged symmetric but "
            f"|K - K^T| = {error:.3e}")


class SolveError(FlowFEMError):
    pass
