"""
Unit Tests: Permutation Rerankers

Tests:
    - Zero-variance identity
    - Permutation validity and target length
    - Seeded reproducibility
    - Applying a permutation to a ranked list
"""

import numpy as np
import pytest

from fastrec.reranking import DitheringReranker, PermutationReranker, base_permutation


def ranked(m):
    return [(100 + i, 1.0 - i / (m + 1)) for i in range(m)]


class TestZeroVariance:
    """Tests for the deterministic case."""

    @pytest.mark.parametrize("m,max_length,expected", [
        (5, 3, [0, 1, 2]),
        (5, 0, [0, 1, 2, 3, 4]),
        (3, 10, [0, 1, 2]),
        (0, 4, []),
    ])
    def test_identity(self, m, max_length, expected):
        """Test variance 0 returns the truncated identity permutation."""
        assert DitheringReranker(0.0).rerank(ranked(m), max_length) == expected

    def test_rerank_list_identity(self):
        """Test applying the identity keeps the list head."""
        items = ranked(4)

        assert DitheringReranker(0.0).rerank_list(items, 2) == items[:2]


class TestDithering:
    """Tests for the noisy case."""

    @pytest.mark.parametrize("m,max_length", [(1, 0), (10, 0), (10, 4), (4, 10), (50, 20)])
    def test_valid_permutation(self, m, max_length):
        """Test output is a repetition-free selection of original positions."""
        reranker = DitheringReranker(2.0, seed=11)

        perm = reranker.rerank(ranked(m), max_length)

        length = m if max_length == 0 else min(m, max_length)
        assert len(perm) == length
        assert len(set(perm)) == length
        assert all(0 <= pos < m for pos in perm)

    def test_seeded_reproducible(self):
        """Test equal seeds give equal permutations."""
        items = ranked(30)

        first = DitheringReranker(1.0, seed=42).rerank(items, 10)
        second = DitheringReranker(1.0, seed=42).rerank(items, 10)

        assert first == second

    def test_injected_generator(self):
        """Test an explicit Generator drives the noise."""
        items = ranked(30)

        a = DitheringReranker(1.0, rng=np.random.default_rng(5)).rerank(items)
        b = DitheringReranker(1.0, rng=np.random.default_rng(5)).rerank(items)

        assert a == b
        assert sorted(a) == list(range(30))

    def test_successive_calls_draw_fresh_noise(self):
        """Test one reranker perturbs differently on each call."""
        reranker = DitheringReranker(5.0, seed=1)
        items = ranked(40)

        perms = {tuple(reranker.rerank(items)) for _ in range(5)}

        assert len(perms) > 1

    def test_negligible_noise_follows_log_rank_score(self):
        """Test with near-zero noise the order is by descending log(i + 1)."""
        perm = DitheringReranker(1e-12, seed=0).rerank(ranked(6), 3)

        assert perm == [5, 4, 3]

    def test_rerank_list_applies_permutation(self):
        """Test rerank_list returns the (item, score) pairs in permuted order."""
        items = ranked(8)
        reranker = DitheringReranker(1.0, seed=9)
        perm = DitheringReranker(1.0, seed=9).rerank(items, 5)

        assert reranker.rerank_list(items, 5) == [items[pos] for pos in perm]


class TestRerankerErrors:
    """Tests for argument validation."""

    def test_negative_variance(self):
        """Test negative variance is rejected."""
        with pytest.raises(ValueError):
            DitheringReranker(-0.5)

    def test_negative_max_length(self):
        """Test negative max_length is rejected."""
        with pytest.raises(ValueError):
            DitheringReranker(1.0).rerank(ranked(3), -1)

    def test_abstract_base(self):
        """Test the base class cannot be instantiated."""
        with pytest.raises(TypeError):
            PermutationReranker()

    def test_base_permutation(self):
        """Test the identity helper."""
        assert base_permutation(4) == [0, 1, 2, 3]
        assert base_permutation(0) == []
