from .timeline import UniformTimeLine
