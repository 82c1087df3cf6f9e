# Grassmann: Exterior Algebra Kernel (C) 2026 The Grassmann Authors
# Licensed under the Apache License, Version 2.0

"""Core mathematical kernel for the exterior algebra.

Provides the blade-level products, the algebra configuration with its
dense backend, the sparse element container, and input validation.
"""

from .blade import (
    Blade, grade, graded_order, perm, sign, complement, join, meet, meet_sign, orientation,
)
from .algebra import GrassmannAlgebra
from .element import Element
from .validation import (
    check_generator, check_index, check_multivector, check_same_algebra, check_width,
)

__all__ = [
    # blade
    "Blade",
    "grade",
    "graded_order",
    "perm",
    "sign",
    "complement",
    "join",
    "meet",
    "meet_sign",
    "orientation",
    # algebra
    "GrassmannAlgebra",
    "Element",
    # validation
    "check_generator",
    "check_index",
    "check_multivector",
    "check_same_algebra",
    "check_width",
]
