from .direct import spsolve, csc_arrays
