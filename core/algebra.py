# Grassmann: Exterior Algebra Kernel
# Copyright (C) 2026 The Grassmann Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.

import torch

from log import get_logger
from core.blade import complement, graded_order
from core.validation import check_generator, check_index, check_multivector, check_width

logger = get_logger(__name__)


def _popcount(t: torch.Tensor, n: int) -> torch.Tensor:
    """Counts set bits of an integer tensor, looking at the low ``n`` bits."""
    cnt = torch.zeros_like(t)
    temp = t
    for _ in range(n):
        cnt += temp & 1
        temp = temp >> 1
    return cnt


def _sign_table(A: torch.Tensor, B: torch.Tensor, n: int) -> torch.Tensor:
    """Vectorized :func:`core.blade.sign` over broadcast index tensors."""
    swap_counts = torch.zeros(torch.broadcast_shapes(A.shape, B.shape),
                              dtype=torch.long, device=A.device)
    for k in range(n):
        # Each generator k of B crosses the generators of A below k
        b_k = (B >> k) & 1
        swap_counts += b_k * _popcount(A & ((1 << k) - 1), n)
    return 1 - 2 * (swap_counts & 1)


class GrassmannAlgebra:
    """Exterior algebra over a ground set of ``n`` generators.

    Holds the explicit index width every element of the algebra is built
    against, the ordering strategy used to traverse elements, and a dense
    batched backend working on coefficient tensors ``[..., 2**n]`` indexed by
    blade bitmask.

    Dense tables are built on first use and cached per ``(n, device)``.

    Attributes:
        n (int): Number of generators (index bit width).
        dim (int): Number of basis blades (2^n).
        universe (int): Index of the top blade (all generators).
        device (str): Device of the dense tables.
        order (callable): Key function giving the canonical order of blades.
    """
    _CACHED_TABLES = {}
    MAX_DENSE_N = 12

    def __init__(self, n: int, device='cpu', order=graded_order):
        """Initialize the algebra.

        Args:
            n (int): Number of generators.
            device (str, optional): Device for dense tables. Defaults to 'cpu'.
            order (callable, optional): Sort key over blade indices.
                Defaults to :func:`core.blade.graded_order`.
        """
        check_width(n)
        self.n = n
        self.dim = 1 << n
        self.universe = self.dim - 1
        self.device = device
        self.order = order
        self._tables_ready = False

    def __repr__(self):
        return f"GrassmannAlgebra(n={self.n})"

    @property
    def num_grades(self) -> int:
        """Counts the number of grades (n + 1)."""
        return self.n + 1

    # ------------------------------------------------------------------
    # Element factories
    # ------------------------------------------------------------------

    def element(self, terms=None):
        """Builds an element from a scalar, a blade, a mapping or another element."""
        from core.element import Element
        return Element(self, terms)

    def zero(self):
        """The additive identity (no terms)."""
        return self.element()

    def scalar(self, a):
        """Scalar element stored on the grade-0 blade."""
        return self.element(a)

    def blade(self, index: int, coeff=1.0):
        """Single weighted basis blade ``coeff * e_index``."""
        return self.element((index, coeff))

    def generator(self, k: int):
        """Unit generator ``e_{2^k}``."""
        check_generator(k, self)
        return self.blade(1 << k)

    def complement(self, index: int) -> int:
        """Index of the generators missing from ``index``."""
        check_index(index, self)
        return complement(index, self.n)

    # ------------------------------------------------------------------
    # Dense backend
    # ------------------------------------------------------------------

    def build_tables(self) -> "GrassmannAlgebra":
        """Builds (or fetches from cache) the dense product tables."""
        if self._tables_ready:
            return self
        assert self.n <= self.MAX_DENSE_N, (
            f"dense backend supports n <= {self.MAX_DENSE_N}, got {self.n}"
        )
        cache_key = (self.n, str(self.device))
        if cache_key not in GrassmannAlgebra._CACHED_TABLES:
            GrassmannAlgebra._CACHED_TABLES[cache_key] = self._generate_tables()

        (
            self.wedge_indices,
            self.wedge_signs,
            self.meet_indices,
            self.meet_signs,
            self.dagger_indices,
            self.dagger_signs,
            self.grade_masks,
        ) = GrassmannAlgebra._CACHED_TABLES[cache_key]
        self._tables_ready = True
        return self

    def _generate_tables(self):
        """Precompute the wedge, meet and dagger tables and the grade masks."""
        logger.debug("Building dense tables for n=%d on %s", self.n, self.device)
        n = self.n
        indices = torch.arange(self.dim, device=self.device)
        I = indices.unsqueeze(1)  # Row
        K = indices.unsqueeze(0)  # Col

        # Gather layout: result k collects A[i] * B[i ^ k] when i is a subset of k
        wedge_indices = I ^ K
        is_subset = (I & ~K) == 0
        wedge_signs = torch.where(
            is_subset, _sign_table(I, wedge_indices, n), torch.zeros_like(wedge_indices)
        ).to(torch.float32)

        # Scatter layout: A[i] * B[j] lands on i & j
        J = K
        common = I & J
        ri = J & ~I
        rj = I & ~J
        g = _popcount(I | J, n)
        orientation = 1 - 2 * ((g * (g - 1) // 2) & 1)
        meet_sign = (orientation * _sign_table(I, ri, n) * _sign_table(J, rj, n)
                     * _sign_table(ri, rj, n) * _sign_table(common, I ^ J, n))
        meet_indices = common
        meet_signs = torch.where(
            common != 0, meet_sign, torch.zeros_like(meet_sign)
        ).to(torch.float32)

        dagger_indices = indices ^ self.universe
        dagger_signs = _sign_table(indices, dagger_indices, n).to(torch.float32)

        grades = _popcount(indices, n)
        grade_masks = [grades == k for k in range(n + 1)]

        return (wedge_indices, wedge_signs, meet_indices, meet_signs,
                dagger_indices, dagger_signs, grade_masks)

    def ensure_device(self, device) -> None:
        """Move cached tables to the given device if not already there."""
        self.build_tables()
        if self.wedge_indices.device == torch.device(device):
            return
        self.wedge_indices = self.wedge_indices.to(device)
        self.wedge_signs = self.wedge_signs.to(device)
        self.meet_indices = self.meet_indices.to(device)
        self.meet_signs = self.meet_signs.to(device)
        self.dagger_indices = self.dagger_indices.to(device)
        self.dagger_signs = self.dagger_signs.to(device)
        self.grade_masks = [m.to(device) for m in self.grade_masks]
        self.device = str(device)
        self._CACHED_TABLES[(self.n, self.device)] = (
            self.wedge_indices, self.wedge_signs, self.meet_indices,
            self.meet_signs, self.dagger_indices, self.dagger_signs,
            self.grade_masks,
        )

    def embed_vector(self, vectors: torch.Tensor) -> torch.Tensor:
        """Injects vectors into the Grade-1 subspace.

        Args:
            vectors (torch.Tensor): Raw vectors [..., n].

        Returns:
            torch.Tensor: Dense coefficients [..., dim].
        """
        batch_shape = vectors.shape[:-1]
        mv = torch.zeros(*batch_shape, self.dim, device=vectors.device, dtype=vectors.dtype)
        for i in range(self.n):
            mv[..., 1 << i] = vectors[..., i]
        return mv

    def wedge(self, A: torch.Tensor, B: torch.Tensor) -> torch.Tensor:
        """Computes the progressive (wedge) product of dense elements.

        Args:
            A (torch.Tensor): Left operand [..., dim].
            B (torch.Tensor): Right operand [..., dim].

        Returns:
            torch.Tensor: A ^ B [..., dim].
        """
        check_multivector(A, self, "wedge(A)")
        check_multivector(B, self, "wedge(B)")
        self.ensure_device(A.device)

        # result[..., k] = sum_i A[..., i] * B[..., i ^ k] * signs[i, k]
        B_gathered = B[..., self.wedge_indices]  # [..., D, D]
        return (A.unsqueeze(-1) * B_gathered * self.wedge_signs).sum(dim=-2)

    def meet(self, A: torch.Tensor, B: torch.Tensor) -> torch.Tensor:
        """Computes the regressive (meet) product of dense elements.

        Args:
            A (torch.Tensor): Left operand [..., dim].
            B (torch.Tensor): Right operand [..., dim].

        Returns:
            torch.Tensor: A v B [..., dim].
        """
        check_multivector(A, self, "meet(A)")
        check_multivector(B, self, "meet(B)")
        self.ensure_device(A.device)

        prod = A.unsqueeze(-1) * B.unsqueeze(-2) * self.meet_signs  # [..., D, D]
        flat = prod.reshape(*prod.shape[:-2], self.dim * self.dim)
        result = prod.new_zeros(*prod.shape[:-2], self.dim)
        return result.index_add_(result.dim() - 1, self.meet_indices.reshape(-1), flat)

    def dagger(self, mv: torch.Tensor) -> torch.Tensor:
        """Maps every blade to its complement with the matching sign.

        Args:
            mv (torch.Tensor): Input element [..., dim].

        Returns:
            torch.Tensor: Complemented element [..., dim].
        """
        check_multivector(mv, self, "dagger(mv)")
        self.ensure_device(mv.device)
        # Complement is an involution, so the gather index is its own inverse
        return (mv * self.dagger_signs.to(mv.dtype))[..., self.dagger_indices]

    def grade_projection(self, mv: torch.Tensor, grade: int) -> torch.Tensor:
        """Isolates a specific grade.

        Args:
            mv (torch.Tensor): Dense element [..., dim].
            grade (int): Target grade.

        Returns:
            torch.Tensor: Projected element.
        """
        self.build_tables()
        mask = self.grade_masks[grade]
        if mask.device != mv.device:
            mask = mask.to(mv.device)
        result = torch.zeros_like(mv)
        result[..., mask] = mv[..., mask]
        return result
