# Grassmann: Exterior Algebra Kernel
# Copyright (C) 2026 The Grassmann Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

"""Sparse Element Container.

Extends the blade algebra of :mod:`core.blade` bilinearly to linear
combinations of blades. Enables operator overloading (``A | B`` for the
wedge, ``A & B`` for the meet, ``~A`` for the dagger).

In-place operations carry a trailing underscore (``add_``, ``wedge_``, ...)
and return ``self``; the operators copy first and delegate to them.
"""

import math
import numbers
from collections.abc import Mapping
from functools import total_ordering
from typing import Dict, Iterator, List, Optional

import torch

from log import get_logger
from core.algebra import GrassmannAlgebra
from core.blade import Blade, complement, grade, join, meet, sign
from core.validation import check_index, check_multivector, check_same_algebra

logger = get_logger(__name__)


@total_ordering
class Element:
    """Sparse multivector: a mapping from blade index to coefficient.

    Zero coefficients left behind by cancellation are kept until
    :meth:`trim` is called. Equality is structural, so trim both sides
    before comparing.

    Attributes:
        algebra (GrassmannAlgebra): The algebra fixing the index width.
    """

    def __init__(self, algebra: GrassmannAlgebra, terms=None):
        """Initializes an Element.

        Args:
            algebra (GrassmannAlgebra): The algebra instance.
            terms (optional): ``None`` for zero, a number for a scalar, an
                ``(index, coeff)`` pair for a single blade, a mapping
                ``{index: coeff}``, or another Element to copy.
        """
        self.algebra = algebra
        self._terms: Dict[int, float] = {}

        if terms is None:
            return
        if isinstance(terms, Element):
            check_same_algebra(algebra, terms.algebra, "terms")
            self._terms = dict(terms._terms)
        elif isinstance(terms, numbers.Number):
            self._terms[0] = terms
        elif isinstance(terms, tuple):
            index, coeff = terms
            check_index(index, algebra)
            self._terms[index] = coeff
        elif isinstance(terms, Mapping):
            for index, coeff in terms.items():
                check_index(index, algebra)
                self._terms[index] = coeff
        else:
            raise TypeError(f"Cannot build an Element from {type(terms).__name__}")

    @classmethod
    def from_tensor(cls, algebra: GrassmannAlgebra, tensor: torch.Tensor):
        """Creates an Element from dense coefficients, dropping zeros.

        Args:
            algebra (GrassmannAlgebra): The algebra instance.
            tensor (torch.Tensor): Coefficients [dim].

        Returns:
            Element: Sparse instance.
        """
        check_multivector(tensor, algebra, "from_tensor")
        assert tensor.ndim == 1, f"from_tensor: expected a single element, got shape {tuple(tensor.shape)}"
        coeffs = tensor.detach().cpu().tolist()
        return cls(algebra, {i: c for i, c in enumerate(coeffs) if c != 0})

    def to_tensor(self, dtype=torch.float64, device=None) -> torch.Tensor:
        """Dense coefficients [dim] indexed by blade bitmask."""
        assert self.algebra.n <= GrassmannAlgebra.MAX_DENSE_N, (
            f"to_tensor: dense layout supports n <= {GrassmannAlgebra.MAX_DENSE_N}, got {self.algebra.n}"
        )
        t = torch.zeros(self.algebra.dim, dtype=dtype, device=device or self.algebra.device)
        for index, coeff in self._terms.items():
            t[index] = coeff
        return t

    def copy(self) -> "Element":
        """Independent copy; the term map is never shared."""
        return Element(self.algebra, self)

    def __copy__(self):
        return self.copy()

    def __deepcopy__(self, memo):
        return self.copy()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def size(self) -> int:
        """Number of stored terms, zero coefficients included."""
        return len(self._terms)

    def __len__(self):
        return len(self._terms)

    def contains(self, index: int) -> bool:
        return index in self._terms

    def __contains__(self, index):
        return index in self._terms

    def __getitem__(self, index: int):
        check_index(index, self.algebra)
        return self._terms.get(index, 0.0)

    def __setitem__(self, index: int, coeff):
        check_index(index, self.algebra)
        self._terms[index] = coeff

    def __iter__(self) -> Iterator[Blade]:
        """Yields the terms in canonical order."""
        for index in self.keys():
            yield Blade(index, self._terms[index])

    def keys(self) -> List[int]:
        return sorted(self._terms, key=self.algebra.order)

    def grades(self) -> List[int]:
        """Sorted grades present in the element."""
        return sorted({grade(index) for index in self._terms})

    def is_homogeneous(self) -> bool:
        return len(self.grades()) <= 1

    def grade(self, k: int) -> "Element":
        """Projects to grade k."""
        return Element(self.algebra, {i: c for i, c in self._terms.items() if grade(i) == k})

    # ------------------------------------------------------------------
    # In-place operations
    # ------------------------------------------------------------------

    def trim(self) -> "Element":
        """Removes every term whose coefficient equals zero."""
        self._terms = {i: c for i, c in self._terms.items() if c != 0}
        return self

    def add_(self, other) -> "Element":
        """Adds an element, blade or scalar term by term."""
        other = self._lift(other)
        for index, coeff in list(other._terms.items()):
            self._terms[index] = self._terms.get(index, 0) + coeff
        return self

    def sub_(self, other) -> "Element":
        """Subtracts an element, blade or scalar term by term."""
        other = self._lift(other)
        for index, coeff in list(other._terms.items()):
            self._terms[index] = self._terms.get(index, 0) - coeff
        return self

    def mul_(self, s) -> "Element":
        for index in self._terms:
            self._terms[index] *= s
        return self

    def div_(self, s) -> "Element":
        """Divides every coefficient by a scalar; dividing by zero gives NaN."""
        if s == 0:
            logger.debug("Division of %r by zero", self)
            for index in self._terms:
                self._terms[index] = math.nan
            return self
        for index in self._terms:
            self._terms[index] /= s
        return self

    def neg_(self) -> "Element":
        for index in self._terms:
            self._terms[index] = -self._terms[index]
        return self

    def dagger_(self) -> "Element":
        """Maps every blade to its complement within the algebra."""
        n = self.algebra.n
        terms = {}
        for index, coeff in self._terms.items():
            c = complement(index, n)
            terms[c] = sign(index, c) * coeff
        self._terms = terms
        return self

    def wedge_(self, other) -> "Element":
        """Progressive product, accumulated over all pairs of terms."""
        other = self._lift(other)
        terms = {}
        for a in self._terms.items():
            for b in other._terms.items():
                if a[0] & b[0]:
                    continue
                index, coeff = join(a, b)
                terms[index] = terms.get(index, 0) + coeff
        self._terms = terms
        return self

    def meet_(self, other) -> "Element":
        """Regressive product, accumulated over all pairs of terms."""
        other = self._lift(other)
        terms = {}
        for a in self._terms.items():
            for b in other._terms.items():
                if not a[0] & b[0]:
                    continue
                index, coeff = meet(a, b)
                terms[index] = terms.get(index, 0) + coeff
        self._terms = terms
        return self

    def quotient(self, other) -> float:
        """Ratio to a single blade sharing the key of every term.

        Args:
            other: Element with exactly one term, or an ``(index, coeff)`` pair.

        Returns:
            float: The scalar ``q`` with ``self == q * other``, or NaN when
            the divisor is not a single blade, has a zero coefficient, or
            any term of ``self`` sits on another blade.
        """
        other = self._lift(other)
        if other.size() != 1:
            logger.debug("Quotient by %r: divisor is not a single blade", other)
            return math.nan
        (j, y), = other._terms.items()
        if y == 0:
            logger.debug("Quotient by %r: zero divisor", other)
            return math.nan

        q = 0.0
        for i, x in self._terms.items():
            if i != j:
                logger.debug("Quotient of %r by %r: incompatible blades", self, other)
                return math.nan
            q += x / y
        return q

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def _coerce(self, other) -> Optional["Element"]:
        """Lifts scalars and blade pairs to Elements of this algebra."""
        if isinstance(other, Element):
            check_same_algebra(self.algebra, other.algebra)
            return other
        if isinstance(other, (numbers.Number, tuple)):
            return Element(self.algebra, other)
        return None

    def _lift(self, other) -> "Element":
        lifted = self._coerce(other)
        if lifted is None:
            raise TypeError(f"Unsupported operand type: {type(other).__name__}")
        return lifted

    def __add__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.copy().add_(other)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.copy().sub_(other)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.copy().sub_(self)

    def __mul__(self, other):
        """Scalar multiplication."""
        if not isinstance(other, numbers.Number):
            return NotImplemented
        return self.copy().mul_(other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        """Scalar division, or compatible-blade quotient when *other* is a blade."""
        if isinstance(other, numbers.Number):
            return self.copy().div_(other)
        if isinstance(other, (Element, tuple)):
            return self.quotient(other)
        return NotImplemented

    def __or__(self, other):
        """Wedge product (A | B)."""
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.copy().wedge_(other)

    def __ror__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.copy().wedge_(self)

    def __and__(self, other):
        """Meet (A & B)."""
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.copy().meet_(other)

    def __rand__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.copy().meet_(self)

    def __invert__(self):
        """Dagger (~A)."""
        return self.copy().dagger_()

    def __neg__(self):
        return self.copy().neg_()

    def __pos__(self):
        return self.copy()

    def __iadd__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.add_(other)

    def __isub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.sub_(other)

    def __imul__(self, other):
        if not isinstance(other, numbers.Number):
            return NotImplemented
        return self.mul_(other)

    def __itruediv__(self, other):
        if not isinstance(other, numbers.Number):
            return NotImplemented
        return self.div_(other)

    def __ior__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.wedge_(other)

    def __iand__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.meet_(other)

    # ------------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------------

    def _sort_key(self):
        order = self.algebra.order
        return [(order(index), coeff) for index, coeff in self]

    def __eq__(self, other):
        """Structural equality of the term maps.

        A plain number compares as the trimmed scalar element, so an empty
        element equals ``0``.
        """
        if isinstance(other, numbers.Number):
            other = Element(self.algebra, other).trim()
        if not isinstance(other, Element):
            return NotImplemented
        return self.algebra.n == other.algebra.n and self._terms == other._terms

    def __lt__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    __hash__ = None

    def format_terms(self) -> Iterator[str]:
        """Lazily renders ``coeff:index`` (index in hex) in canonical order."""
        for index, coeff in self:
            yield f"{coeff:+g}:{index:x}"

    def __str__(self):
        return " ".join(self.format_terms()) or "0"

    def __repr__(self):
        return f"Element({self}, algebra=G({self.algebra.n}))"
