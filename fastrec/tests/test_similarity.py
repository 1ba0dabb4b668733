"""
Unit Tests: Set Similarity

Tests:
    - Jaccard scenario
    - Self-exclusion and strategy equivalence on random data
    - Empty profiles
    - Pairwise similarity closure
    - Item orientation
    - Metric registry
"""

import math

import pytest

from fastrec.core.config import SimilarityConfig
from fastrec.core.errors import ConfigError
from fastrec.core.types import CounterStrategy, Orientation
from fastrec.similarity import (
    SetSimilarity,
    asymmetric_cosine,
    cosine,
    get_metric,
    jaccard,
    overlap,
)

VARIANTS = [
    (CounterStrategy.DENSE, False),
    (CounterStrategy.DENSE, True),
    (CounterStrategy.SPARSE, False),
    (CounterStrategy.SPARSE, True),
]


def as_dict(neighbors):
    return {nb.idx: nb.score for nb in neighbors}


class TestJaccardScenario:
    """Tests for the two-user Jaccard example."""

    @pytest.mark.parametrize("strategy,vectorized", VARIANTS)
    def test_single_neighbor(self, scenario_store, strategy, vectorized):
        """Test u0's only neighbor is u1 with 1 / (2 + 2 - 1)."""
        sim = SetSimilarity(scenario_store, jaccard, strategy, vectorized)

        assert as_dict(sim.neighbors(0)) == {1: pytest.approx(1 / 3)}
        assert as_dict(sim.neighbors(1)) == {0: pytest.approx(1 / 3)}

    @pytest.mark.parametrize("strategy,vectorized", VARIANTS)
    def test_intersection_counts(self, scenario_store, strategy, vectorized):
        """Test co-occurrence counting excludes the queried user."""
        sim = SetSimilarity(scenario_store, jaccard, strategy, vectorized)

        assert sim.intersection_counts(0) == {1: 1}

    def test_pairwise_closure(self, scenario_store):
        """Test similarity(a)(b) matches the neighbor score."""
        sim = SetSimilarity(scenario_store, jaccard)

        assert sim.similarity(0)(1) == pytest.approx(1 / 3)
        assert sim.similarity(0)(0) == 1.0


class TestRandomData:
    """Tests over the seeded random store."""

    @pytest.mark.parametrize("strategy,vectorized", VARIANTS)
    def test_self_exclusion(self, random_store, strategy, vectorized):
        """Test no index is ever its own neighbor."""
        sim = SetSimilarity(random_store, cosine, strategy, vectorized)

        for idx in range(random_store.num_users):
            assert idx not in as_dict(sim.neighbors(idx))

    def test_strategy_equivalence(self, random_store):
        """Test all counting variants produce identical (candidate, score) sets."""
        engines = [
            SetSimilarity(random_store, jaccard, strategy, vectorized)
            for strategy, vectorized in VARIANTS
        ]

        for idx in range(random_store.num_users):
            reference = as_dict(engines[0].neighbors(idx))
            for engine in engines[1:]:
                assert as_dict(engine.neighbors(idx)) == reference

    def test_closure_agrees_with_neighbors(self, random_store):
        """Test the pairwise closure reproduces every neighbor score."""
        sim = SetSimilarity(random_store, cosine, CounterStrategy.SPARSE, vectorized=True)

        for idx in range(0, random_store.num_users, 5):
            pairwise = sim.similarity(idx)
            for other, score in as_dict(sim.neighbors(idx)).items():
                assert pairwise(other) == pytest.approx(score)

    def test_neighbors_share_an_item(self, random_store):
        """Test every reported neighbor co-occurs at least once."""
        sim = SetSimilarity(random_store, overlap)

        for idx in range(random_store.num_users):
            items = set(random_store.user_profile(idx).idxs.tolist())
            for other, score in as_dict(sim.neighbors(idx)).items():
                shared = items & set(random_store.user_profile(other).idxs.tolist())
                assert score == len(shared) > 0


class TestEmptyProfiles:
    """Tests for elements without preferences."""

    @pytest.mark.parametrize("strategy,vectorized", VARIANTS)
    def test_empty_profile_yields_nothing(self, random_store, strategy, vectorized):
        """Test an empty profile produces an empty neighbor stream."""
        sim = SetSimilarity(random_store, jaccard, strategy, vectorized)

        assert list(sim.neighbors(39)) == []
        assert sim.intersection_counts(39) == {}

    def test_empty_profile_never_a_neighbor(self, random_store):
        """Test users without preferences never show up as candidates."""
        sim = SetSimilarity(random_store, jaccard)

        for idx in range(38):
            assert not {38, 39} & set(as_dict(sim.neighbors(idx)))


class TestItemOrientation:
    """Tests for item-item similarity."""

    @pytest.mark.parametrize("strategy,vectorized", VARIANTS)
    def test_item_neighbors(self, scenario_store, strategy, vectorized):
        """Test item neighbors come from shared users."""
        sim = SetSimilarity(
            scenario_store, jaccard, strategy, vectorized, orientation=Orientation.ITEM
        )

        assert sim.num_elements == 3
        assert as_dict(sim.neighbors(0)) == {1: 0.5, 2: 0.5}
        assert as_dict(sim.neighbors(1)) == {0: 0.5}

    def test_from_config(self, scenario_store):
        """Test construction from a SimilarityConfig."""
        config = SimilarityConfig(
            metric="cosine",
            strategy=CounterStrategy.DENSE,
            vectorized=True,
            orientation=Orientation.ITEM,
        )

        sim = SetSimilarity.from_config(scenario_store, config)

        assert sim.strategy is CounterStrategy.DENSE
        assert sim.vectorized
        assert as_dict(sim.neighbors(1)) == {0: pytest.approx(1 / math.sqrt(2))}


class TestMetrics:
    """Tests for the bundled metrics."""

    def test_values(self):
        """Test metric formulas on small inputs."""
        assert jaccard(1, 2, 2) == pytest.approx(1 / 3)
        assert cosine(1, 2, 2) == pytest.approx(0.5)
        assert overlap(3, 5, 7) == 3.0
        assert asymmetric_cosine(1.0)(1, 2, 4) == pytest.approx(0.5)
        assert asymmetric_cosine(0.5)(2, 4, 9) == pytest.approx(cosine(2, 4, 9))

    def test_registry(self):
        """Test metric lookup by name."""
        assert get_metric("jaccard") is jaccard
        assert get_metric("asymmetric_cosine", alpha=0.0)(1, 4, 2) == pytest.approx(0.5)

    def test_unknown_metric(self):
        """Test an unknown name raises ConfigError."""
        with pytest.raises(ConfigError):
            get_metric("euclid")

    def test_alpha_out_of_range(self):
        """Test alpha outside [0, 1] is rejected."""
        with pytest.raises(ConfigError):
            asymmetric_cosine(1.5)

    def test_invalid_config_rejected(self, scenario_store):
        """Test from_config validates before building."""
        with pytest.raises(ConfigError):
            SetSimilarity.from_config(scenario_store, SimilarityConfig(alpha=-0.1))
