import numpy as np
from math import factorial

# \int_0^1 x^k dx
interval_data = [
    {"index": n, "degree": k, "integral": 1.0/(k+1)}
    for n in (1, 2, 3, 4) for k in range(2*n)
]

# the average of l0^a l1^b l2^c over a triangle is 2 a! b! c!/(a+b+c+2)!
triangle_data = [
    {"index": n, "alpha": alpha,
     "integral": 2.0*factorial(alpha[0])*factorial(alpha[1])*factorial(alpha[2])/factorial(sum(alpha)+2)}
    for n in (1, 2, 3, 4)
    for alpha in [(0, 0, 0), (1, 0, 0), (0, 1, 1), (2, 1, 0), (1, 1, 1), (3, 0, 1), (2, 2, 1)]
    if sum(alpha) <= 2*n - 1
]
