from .quadrature import Quadrature

from .gauss_legendre_quadrature import GaussLegendreQuadrature
from .triangle_quadrature import TriangleQuadrature
from .tensor_product_quadrature import TensorProductQuadrature
