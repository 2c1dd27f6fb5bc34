import re
import numpy as np

from .triangle_mesh import TriangleMesh
from .quadrangle_mesh import QuadrangleMesh
from ..errors import MeshFileError
from .. import logger


class MeshFileReader:
    """
    Reader of the brace delimited text mesh format

        a = 10          # named constants may be used in the lists below
        vertices = { { 0, 0 }, { a, 0 }, ... }
        elements = { { 0, 1, 5, 4, 0 }, ... }   # vertex indices + region tag
        boundaries = { { 0, 1, 1 }, ... }       # vertex pair + marker
        curves = { { 4, 5, 90 } }               # vertex pair + arc angle

    Elements with three vertices are triangles, with four quadrilaterals; a
    file must not mix them. Curves are kept in ``mesh.meshdata['curves']``,
    the geometry itself stays straight sided.
    """
    _token = re.compile(r'[{}=,]|[^\s{}=,]+')

    def __init__(self, fname=None, text=None):
        if text is None:
            if fname is None:
                raise ValueError("either `fname` or `text` must be given")
            try:
                with open(fname, 'r') as f:
                    text = f.read()
            except OSError as e:
                raise MeshFileError(f"can not open mesh file {fname}: {e}") from e
        self.fname = fname
        self.text = text
        self.sections = {}
        self.constants = {}

    def read(self):
        self.parse()
        node = self.read_vertices()
        cell, region = self.read_elements(len(node))
        if cell.shape[1] == 3:
            mesh = TriangleMesh(node, cell)
        else:
            mesh = QuadrangleMesh(node, cell)
        mesh.celldata['region'] = region
        self.read_boundaries(mesh)
        mesh.meshdata['curves'] = self.read_curves(len(node))
        logger.info(f"read {mesh.meshtype} mesh with {mesh.number_of_nodes()} "
                f"nodes and {mesh.number_of_cells()} cells")
        return mesh

    ## parsing

    def parse(self):
        lines = [line.split('#')[0] for line in self.text.split('\n')]
        tokens = self._token.findall('\n'.join(lines))
        pos = 0
        while pos < len(tokens):
            name = tokens[pos]
            if pos + 2 > len(tokens) or tokens[pos+1] != '=':
                raise MeshFileError(f"expected `{name} = ...`")
            value, pos = self._parse_value(tokens, pos + 2)
            if isinstance(value, list):
                self.sections[name] = value
            else:
                self.constants[name] = value

    def _parse_value(self, tokens, pos):
        if pos >= len(tokens):
            raise MeshFileError("unexpected end of the mesh file")
        tok = tokens[pos]
        if tok == '{':
            items = []
            pos += 1
            while True:
                if pos >= len(tokens):
                    raise MeshFileError("unbalanced braces in the mesh file")
                if tokens[pos] == '}':
                    return items, pos + 1
                item, pos = self._parse_value(tokens, pos)
                items.append(item)
                if pos < len(tokens) and tokens[pos] == ',':
                    pos += 1
        elif tok in {'}', '=', ','}:
            raise MeshFileError(f"unexpected token `{tok}`")
        else:
            return self._number(tok), pos + 1

    def _number(self, tok):
        sign = 1.0
        if tok.startswith('-'):
            sign = -1.0
            tok = tok[1:]
        if tok in self.constants:
            return sign*self.constants[tok]
        try:
            return sign*float(tok)
        except ValueError:
            raise MeshFileError(f"`{tok}` is neither a number nor a known constant") from None

    def _section(self, name, required=True):
        if name not in self.sections:
            if required:
                raise MeshFileError(f"the mesh file has no `{name}` section")
            return []
        return self.sections[name]

    def _index_array(self, rows, name, NN):
        a = np.array(rows, dtype=np.float64)
        if np.any(a != np.round(a)):
            raise MeshFileError(f"non integer entries in `{name}`")
        a = a.astype(np.int_)
        if np.any(a[:, :-1] < 0) or np.any(a[:, :-1] >= NN):
            raise MeshFileError(f"vertex index out of range in `{name}`")
        return a

    ## sections

    def read_vertices(self):
        rows = self._section('vertices')
        if len(rows) == 0 or any(len(r) != 2 for r in rows):
            raise MeshFileError("every vertex must have exactly two coordinates")
        return np.array(rows, dtype=np.float64)

    def read_elements(self, NN):
        rows = self._section('elements')
        nv = {len(r) - 1 for r in rows}
        if len(rows) == 0:
            raise MeshFileError("the mesh has no elements")
        if nv - {3, 4}:
            raise MeshFileError("elements must have 3 or 4 vertices plus a region tag")
        if len(nv) > 1:
            raise MeshFileError("mixed triangle and quadrilateral meshes are not supported")
        a = self._index_array(rows, 'elements', NN)
        return a[:, :-1], a[:, -1]

    def read_boundaries(self, mesh):
        rows = self._section('boundaries')
        if len(rows) == 0:
            return
        if any(len(r) != 3 for r in rows):
            raise MeshFileError("every boundary entry must be `v0, v1, marker`")
        a = self._index_array(rows, 'boundaries', mesh.number_of_nodes())
        if np.any(a[:, 2] <= 0):
            raise MeshFileError("boundary markers must be positive integers")
        try:
            mesh.set_boundary_marker(a[:, :2], a[:, 2])
        except ValueError as e:
            raise MeshFileError(f"bad `boundaries` section: {e}") from e

    def read_curves(self, NN):
        rows = self._section('curves', required=False)
        if len(rows) == 0:
            return np.zeros((0, 3), dtype=np.float64)
        if any(len(r) != 3 for r in rows):
            raise MeshFileError("every curve entry must be `v0, v1, angle`")
        curves = np.array(rows, dtype=np.float64)
        self._index_array(np.c_[curves[:, :2], np.zeros(len(curves))], 'curves', NN)
        return curves


def read_mesh(fname):
    return MeshFileReader(fname).read()
