from .boundary_condition import BCKind, BoundaryConditionPolicy
from .boundary_condition import ParabolicInletProfile, natural_policy
