"""
Tags telling the assembler how to evaluate a callable at the quadrature
points of a cell chunk.

A ``barycentric`` callable is called as ``f(bcs, index=index)`` with the
reference quadrature points, a ``cartesian`` one as ``f(points)`` with the
(NQ, NC, 2) physical points. Untagged callables are treated as cartesian.
"""
from functools import wraps


def _tag(coordtype):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)
        wrapper.coordtype = coordtype
        return wrapper
    return decorator


cartesian = _tag('cartesian')
barycentric = _tag('barycentric')
