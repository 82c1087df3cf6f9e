"""Grassmann: sparse exterior algebra with a dense PyTorch backend."""

__version__ = "0.1.0"

from core.algebra import GrassmannAlgebra
from core.element import Element
from core.blade import Blade

__all__ = [
    "__version__",
    "GrassmannAlgebra",
    "Element",
    "Blade",
]
