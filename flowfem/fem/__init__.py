from .field_space import FieldSpace
from .dof_map import GlobalDOFMap
from .weak_form import Symmetry, WeakForm, BilinearFormEntry, LinearFormEntry
from .integrals import BasisValues, IntegrationData
from .integrals import int_u_v, int_grad_u_grad_v, int_w_nabla_u_v
from .integrals import int_u_dvdx, int_u_dvdy, int_f_v
from .assembler import GlobalAssembler
