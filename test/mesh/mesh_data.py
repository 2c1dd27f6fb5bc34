import numpy as np

box_data = [
    {"meshtype": "quad", "box": [0, 1, 0, 1], "nx": 2, "ny": 2, "NN": 9, "NE": 12, "NC": 4, "NBE": 8},
    {"meshtype": "quad", "box": [0, 3, 0, 1], "nx": 6, "ny": 4, "NN": 35, "NE": 58, "NC": 24, "NBE": 20},
    {"meshtype": "tri", "box": [0, 1, 0, 1], "nx": 2, "ny": 2, "NN": 9, "NE": 16, "NC": 8, "NBE": 8},
    {"meshtype": "tri", "box": [0, 3, 0, 1], "nx": 6, "ny": 4, "NN": 35, "NE": 82, "NC": 48, "NBE": 20},
]

# quad p: NN + (p-1) NE + (p-1)^2 NC, tri p: NN + (p-1) NE + (p-1)(p-2)/2 NC
ipoint_data = [
    {"meshtype": "quad", "p": 1, "gdof": 9, "ldof": 4},
    {"meshtype": "quad", "p": 2, "gdof": 25, "ldof": 9},
    {"meshtype": "quad", "p": 3, "gdof": 49, "ldof": 16},
    {"meshtype": "tri", "p": 1, "gdof": 9, "ldof": 3},
    {"meshtype": "tri", "p": 2, "gdof": 25, "ldof": 6},
    {"meshtype": "tri", "p": 3, "gdof": 49, "ldof": 10},
]

channel_text = """
# unit square split into two quadrilaterals
a = 1
vertices = { { 0, 0 }, { 0.5, 0 }, { a, 0 }, { 0, a }, { 0.5, a }, { a, a } }
elements = { { 0, 1, 4, 3, 7 }, { 1, 2, 5, 4, 7 } }
boundaries = {
  { 0, 1, 1 }, { 1, 2, 1 },
  { 2, 5, 2 },
  { 5, 4, 3 }, { 4, 3, 3 },
  { 3, 0, 4 }
}
curves = { { 2, 5, 90 } }
"""

bad_mesh_data = [
    # mixed element types
    """
    vertices = { { 0, 0 }, { 1, 0 }, { 1, 1 }, { 0, 1 }, { 2, 0 } }
    elements = { { 0, 1, 2, 3, 0 }, { 1, 4, 2, 0 } }
    """,
    # the pair (0, 2) is not an edge
    """
    vertices = { { 0, 0 }, { 1, 0 }, { 1, 1 }, { 0, 1 } }
    elements = { { 0, 1, 2, 3, 0 } }
    boundaries = { { 0, 2, 1 } }
    """,
    # unknown constant
    """
    vertices = { { 0, 0 }, { b, 0 }, { 1, 1 } }
    elements = { { 0, 1, 2, 0 } }
    """,
    # vertex index out of range
    """
    vertices = { { 0, 0 }, { 1, 0 }, { 1, 1 } }
    elements = { { 0, 1, 3, 0 } }
    """,
    # unbalanced braces
    """
    vertices = { { 0, 0 }, { 1, 0 }, { 1, 1 }
    """,
    # nonpositive marker
    """
    vertices = { { 0, 0 }, { 1, 0 }, { 1, 1 } }
    elements = { { 0, 1, 2, 0 } }
    boundaries = { { 0, 1, 0 } }
    """,
]
