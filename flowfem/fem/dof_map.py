import numpy as np


class GlobalDOFMap():
    """
    Concatenation of the free dofs of several fields into one global index
    space [0, N). Field i owns the contiguous range
    [offsets[i], offsets[i] + nfree_i).
    """
    def __init__(self, fields):
        self.fields = list(fields)
        self.offsets = None
        self.N = None

    def __len__(self):
        return len(self.fields)

    def __getitem__(self, i):
        return self.fields[i]

    def assign(self, t):
        """Re-run the dof assignment of all fields at time `t` and return N."""
        offsets = []
        N = 0
        for field in self.fields:
            offsets.append(N)
            N += field.assign_dofs(N, t)
        self.offsets = offsets
        self.N = N
        return N

    def number_of_dofs(self):
        return self.N

    def ranges(self):
        stops = self.offsets[1:] + [self.N]
        return [(a, b) for a, b in zip(self.offsets, stops)]

    def solutions(self, X, t=None):
        X = np.asarray(X)
        if X.shape != (self.N, ):
            raise ValueError(f"the solution vector has shape {X.shape}, expected ({self.N},)")
        return [field.solution(X, t=t) for field in self.fields]
