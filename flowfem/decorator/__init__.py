from .coordinates import cartesian, barycentric
