from .computational_model import ComputationalModel
