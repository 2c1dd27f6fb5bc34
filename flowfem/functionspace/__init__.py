from .function import Function, Solution
from .lagrange_fe_space import LagrangeFESpace
from .scaled_monomial_space_2d import ScaledMonomialSpace2d
