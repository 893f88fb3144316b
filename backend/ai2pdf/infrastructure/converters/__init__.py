from .simulated_converter import SimulatedConverter

__all__ = ["SimulatedConverter"]
