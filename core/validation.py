# Grassmann: Exterior Algebra Kernel (C) 2026 The Grassmann Authors
# Licensed under the Apache License, Version 2.0

"""Lightweight input validation for Grassmann elements and tensors.

All checks use ``assert`` so they are free under ``python -O``.
Set ``VALIDATE = False`` to disable even without the -O flag.
"""

import torch

VALIDATE = True


def check_width(n: int, name: str = "n") -> None:
    """Assert *n* is a usable ground-set size."""
    if not VALIDATE:
        return
    assert isinstance(n, int) and n >= 0, (
        f"{name}: ground-set size must be a non-negative int, got {n!r}"
    )


def check_index(index: int, algebra, name: str = "index") -> None:
    """Assert *index* is a blade of *algebra* (``0 <= index < 2**n``)."""
    if not VALIDATE:
        return
    assert isinstance(index, int) and 0 <= index < algebra.dim, (
        f"{name}: blade index must lie in [0, {algebra.dim}) for n={algebra.n}, "
        f"got {index!r}"
    )


def check_same_algebra(a, b, name: str = "other") -> None:
    """Assert two elements were built over ground sets of the same size."""
    if not VALIDATE:
        return
    assert a.n == b.n, (
        f"{name}: algebras must match, got n={a.n} and n={b.n}"
    )


def check_multivector(x: torch.Tensor, algebra, name: str = "x") -> None:
    """Assert *x* looks like a dense element of *algebra*.

    Checks ``x.ndim >= 1`` and ``x.shape[-1] == algebra.dim``.
    """
    if not VALIDATE:
        return
    assert x.ndim >= 1, (
        f"{name}: expected ndim >= 1, got shape {tuple(x.shape)}"
    )
    assert x.shape[-1] == algebra.dim, (
        f"{name}: last dim should be {algebra.dim} (algebra dim), "
        f"got {x.shape[-1]} (shape {tuple(x.shape)})"
    )


def check_generator(k: int, algebra, name: str = "k") -> None:
    """Assert *k* names one of the ``n`` generators of *algebra*."""
    if not VALIDATE:
        return
    assert isinstance(k, int) and 0 <= k < algebra.n, (
        f"{name}: generator must lie in [0, {algebra.n}), got {k!r}"
    )
