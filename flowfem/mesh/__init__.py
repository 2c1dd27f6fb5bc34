from .triangle_mesh import TriangleMesh
from .quadrangle_mesh import QuadrangleMesh
from .mesh_file_reader import MeshFileReader, read_mesh
