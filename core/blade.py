# Grassmann: Exterior Algebra Kernel (C) 2026 The Grassmann Authors
# Licensed under the Apache License, Version 2.0

"""Blade-level algebra on bitmask basis indices.

A basis blade is identified by an ``int`` whose bit ``k`` is set when
generator ``k`` participates. All functions here act on a single pair of
blades; :class:`core.element.Element` extends them bilinearly.

Generators of a blade are read in descending bit order, so with
``P(k) = e_{2^k}``::

    P(0) ^ P(1) = -e_{0b11}
    P(1) ^ P(0) = +e_{0b11}

The meet is oriented by the ascending wedge of the generators, so
``(P(0) ^ P(1)) v (P(1) ^ P(2)) = +P(1)``.
"""

from typing import NamedTuple, Tuple


class Blade(NamedTuple):
    """Weighted basis element ``coeff * e_index``."""

    index: int
    coeff: float


ZERO_BLADE = Blade(0, 0.0)


def grade(index: int) -> int:
    """Number of generators in the blade (population count)."""
    return bin(index).count('1')


def graded_order(index: int) -> Tuple[int, int]:
    """Sort key for the canonical order: by grade, then by index."""
    return grade(index), index


def perm(i: int, j: int) -> int:
    """Counts the transpositions needed to merge the generators of ``j`` past ``i``.

    For every generator ``k`` of ``j`` (highest first) adds the number of
    generators of ``i`` strictly below ``k``.

    Args:
        i (int): Left blade index.
        j (int): Right blade index.

    Returns:
        int: Permutation count. ``perm(i, j)`` and ``perm(j, i)`` differ in general.
    """
    s = 0
    while j:
        k = 1 << (j.bit_length() - 1)
        s += grade(i & (k - 1))
        j &= ~k
    return s


def sign(i: int, j: int) -> int:
    """Sign picked up when reordering the generators of ``i`` then ``j``."""
    return -1 if perm(i, j) & 1 else 1


def complement(index: int, n: int) -> int:
    """Generators of the ``n``-dimensional ground set missing from ``index``."""
    return ~index & ((1 << n) - 1)


def join(a: Blade, b: Blade) -> Blade:
    """Progressive (wedge) product of two blades.

    Returns:
        Blade: ``(i | j, sign(i, j) * x * y)``, or the zero blade when the
        operands share a generator. Check the coefficient (or ``i & j``)
        to detect the degenerate case, not the index.
    """
    i, x = a
    j, y = b
    if i & j:
        return ZERO_BLADE
    return Blade(i | j, sign(i, j) * x * y)


def orientation(index: int) -> int:
    """Sign relating ``e_index`` to the ascending wedge of its generators.

    ``e_index = orientation(index) * P(k0) ^ P(k1) ^ ...`` for ``k0 < k1 < ...``;
    reversing ``g`` generators takes ``g * (g - 1) / 2`` swaps.
    """
    g = grade(index)
    return -1 if (g * (g - 1) // 2) & 1 else 1


def meet_sign(i: int, j: int) -> int:
    """Sign of the regressive product of unit blades ``e_i`` and ``e_j``.

    The meet is taken inside the join ``U = i | j`` of the two blades,
    oriented as the ascending wedge ``I_U = P(k0) ^ P(k1) ^ ...`` of its
    generators: ``e_i v e_j = L(R(e_i) ^ R(e_j))`` where ``R`` is the right
    complement (``e_k ^ R(e_k) = I_U``) and ``L`` the left complement, its
    inverse. With ``I_U = orientation(U) * e_U`` both complements carry one
    factor ``orientation(U)`` on top of the basis-blade signs.
    """
    ri = j & ~i
    rj = i & ~j
    return (orientation(i | j) * sign(i, ri) * sign(j, rj) * sign(ri, rj)
            * sign(i & j, i ^ j))


def meet(a: Blade, b: Blade) -> Blade:
    """Regressive (meet) product of two blades.

    Returns:
        Blade: ``(i & j, meet_sign(i, j) * x * y)``, or the zero blade when
        the operands have no generator in common.
    """
    i, x = a
    j, y = b
    if not i & j:
        return ZERO_BLADE
    return Blade(i & j, meet_sign(i, j) * x * y)
