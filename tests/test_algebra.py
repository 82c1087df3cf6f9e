"""Tests for the dense backend of GrassmannAlgebra.

Covers:
- table layout: wedge/meet/dagger signs against the blade functions
- dense wedge, meet, dagger agree with the sparse Element results
- grade projection, vector embedding, tensor round trips
- configuration: width validation, table cache
"""

import pytest
import torch
from core.algebra import GrassmannAlgebra
from core.blade import Blade, join, meet, sign, complement
from core.element import Element


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="module")
def alg3():
    return GrassmannAlgebra(3, device='cpu').build_tables()


@pytest.fixture(scope="module")
def alg4():
    return GrassmannAlgebra(4, device='cpu').build_tables()


def _one_hot(algebra, index, coeff=1.0):
    t = torch.zeros(algebra.dim, dtype=torch.float64)
    t[index] = coeff
    return t


def _random_element(algebra, generator):
    """Dense random coefficients with roughly half the blades switched off."""
    values = torch.randn(algebra.dim, generator=generator, dtype=torch.float64)
    mask = torch.rand(algebra.dim, generator=generator) < 0.5
    return values * mask


# ---------------------------------------------------------------------------
# TestTables
# ---------------------------------------------------------------------------

class TestTables:
    def test_wedge_table_matches_join(self, alg4):
        for i in range(alg4.dim):
            for k in range(alg4.dim):
                j = alg4.wedge_indices[i, k].item()
                expected = join(Blade(i, 1.0), Blade(j, 1.0))
                if expected.coeff == 0 or expected.index != k:
                    assert alg4.wedge_signs[i, k].item() == 0
                else:
                    assert alg4.wedge_signs[i, k].item() == expected.coeff

    def test_meet_table_matches_meet(self, alg4):
        for i in range(alg4.dim):
            for j in range(alg4.dim):
                expected = meet(Blade(i, 1.0), Blade(j, 1.0))
                assert alg4.meet_signs[i, j].item() == expected.coeff
                if expected.coeff:
                    assert alg4.meet_indices[i, j].item() == expected.index

    def test_dagger_table(self, alg4):
        for i in range(alg4.dim):
            c = complement(i, alg4.n)
            assert alg4.dagger_indices[i].item() == c
            assert alg4.dagger_signs[i].item() == sign(i, c)

    def test_grade_masks(self, alg4):
        assert len(alg4.grade_masks) == alg4.num_grades
        assert [int(m.sum()) for m in alg4.grade_masks] == [1, 4, 6, 4, 1]

    def test_tables_are_cached(self, alg3):
        other = GrassmannAlgebra(3, device='cpu').build_tables()
        assert other.wedge_signs is alg3.wedge_signs


# ---------------------------------------------------------------------------
# TestDenseProducts
# ---------------------------------------------------------------------------

class TestDenseProducts:
    def test_basis_wedge_sign(self, alg3):
        out = alg3.wedge(_one_hot(alg3, 0b1), _one_hot(alg3, 0b10))
        assert out[0b11].item() == -1.0
        out = alg3.wedge(_one_hot(alg3, 0b10), _one_hot(alg3, 0b1))
        assert out[0b11].item() == 1.0

    def test_meet_golden_sample(self, alg3):
        out = alg3.meet(_one_hot(alg3, 0b011), _one_hot(alg3, 0b110))
        expected = _one_hot(alg3, 0b010, 1.0)
        assert torch.equal(out, expected)

    @pytest.mark.parametrize("op", ["wedge", "meet"])
    def test_products_match_sparse(self, alg4, op):
        g = torch.Generator().manual_seed(0)
        for _ in range(8):
            a = _random_element(alg4, g)
            b = _random_element(alg4, g)
            A = Element.from_tensor(alg4, a)
            B = Element.from_tensor(alg4, b)
            sparse = (A | B) if op == "wedge" else (A & B)
            dense = getattr(alg4, op)(a, b)
            assert torch.allclose(sparse.to_tensor(), dense)

    def test_batched_wedge(self, alg3):
        g = torch.Generator().manual_seed(1)
        a = torch.stack([_random_element(alg3, g) for _ in range(5)])
        b = torch.stack([_random_element(alg3, g) for _ in range(5)])
        out = alg3.wedge(a, b)
        assert out.shape == (5, alg3.dim)
        for row in range(5):
            assert torch.allclose(out[row], alg3.wedge(a[row], b[row]))

    def test_batched_meet(self, alg3):
        g = torch.Generator().manual_seed(2)
        a = torch.stack([_random_element(alg3, g) for _ in range(4)])
        b = torch.stack([_random_element(alg3, g) for _ in range(4)])
        out = alg3.meet(a, b)
        assert out.shape == (4, alg3.dim)
        for row in range(4):
            assert torch.allclose(out[row], alg3.meet(a[row], b[row]))

    def test_dagger_matches_sparse(self, alg4):
        g = torch.Generator().manual_seed(3)
        a = _random_element(alg4, g)
        A = Element.from_tensor(alg4, a)
        assert torch.allclose((~A).to_tensor(), alg4.dagger(a))

    def test_wrong_width_rejected(self, alg3):
        with pytest.raises(AssertionError):
            alg3.wedge(torch.zeros(4), torch.zeros(8))


# ---------------------------------------------------------------------------
# TestHelpers
# ---------------------------------------------------------------------------

class TestHelpers:
    def test_grade_projection(self, alg3):
        mv = torch.arange(alg3.dim, dtype=torch.float64)
        proj = alg3.grade_projection(mv, 2)
        assert proj.tolist() == [0, 0, 0, 3, 0, 5, 6, 0]

    def test_embed_vector(self, alg3):
        v = torch.tensor([[1.0, 2.0, 3.0]])
        mv = alg3.embed_vector(v)
        assert mv.shape == (1, alg3.dim)
        assert mv[0, 1].item() == 1.0
        assert mv[0, 2].item() == 2.0
        assert mv[0, 4].item() == 3.0

    def test_tensor_round_trip_drops_zeros(self, alg3):
        E = Element(alg3, {0: 1.0, 5: -2.0, 6: 0.0})
        t = E.to_tensor()
        assert t.tolist() == [1.0, 0, 0, 0, 0, -2.0, 0, 0]
        assert Element.from_tensor(alg3, t) == E.trim()

    def test_factories(self, alg3):
        assert alg3.zero().size() == 0
        assert alg3.generator(2) == alg3.blade(0b100)
        assert alg3.universe == 0b111
        with pytest.raises(AssertionError):
            alg3.generator(3)


class TestConfiguration:
    def test_negative_width_rejected(self):
        with pytest.raises(AssertionError):
            GrassmannAlgebra(-1)

    def test_large_width_is_sparse_only(self):
        alg = GrassmannAlgebra(40)
        E = alg.generator(39) | alg.generator(0)
        assert list(E) == [Blade((1 << 39) | 1, 1.0)]
        with pytest.raises(AssertionError):
            alg.build_tables()

    def test_custom_order(self):
        alg = GrassmannAlgebra(3, order=lambda index: -index)
        E = alg.element({1: 1.0, 2: 1.0, 7: 1.0})
        assert E.keys() == [7, 2, 1]

    def test_generator_bound_uses_validation_switch(self, alg3, monkeypatch):
        import core.validation as validation
        with pytest.raises(AssertionError, match="generator must lie in"):
            alg3.generator(-1)
        monkeypatch.setattr(validation, "VALIDATE", False)
        assert alg3.generator(2) == alg3.blade(0b100)
        alg3.generator(3)
