"""
Unit Tests: Index Collaborators and Token Parsers

Tests:
    - SimpleIndex assignment and lookup
    - TSV column scanning
    - Parser defaults and failures
    - Protocol conformance
"""

import io
import math

import pytest

from fastrec.core.protocols import IndexProtocol, NeighborhoodSource
from fastrec.data import SimpleIndex, parse_int, parse_str, parse_weight, weight_parser
from fastrec.neighborhood import InvertedNeighborhood, TopKNeighborhood
from fastrec.similarity import SetSimilarity, jaccard


class TestSimpleIndex:
    """Tests for the in-memory index."""

    def test_first_seen_order(self):
        """Test indices are dense and assigned in first-seen order."""
        index = SimpleIndex(["b", "a", "b", "c"])

        assert index.count == 3
        assert [index.get_id(i) for i in index.indices()] == ["b", "a", "c"]
        assert index.add("a") == 1

    def test_unknown_id(self):
        """Test unknown identifiers map to -1."""
        index = SimpleIndex(["x"])

        assert index.get_index("y") == -1
        assert not index.contains("y")
        assert index.contains("x")

    def test_from_tsv(self):
        """Test scanning one column, skipping blank and short lines."""
        data = io.StringIO("u1\ti9\t2\n\nu2\ti9\nu1\ti4\nlonely\n")

        items = SimpleIndex.from_tsv(data, 1)

        assert len(items) == 2
        assert items.get_index("i4") == 1

    def test_protocol(self):
        """Test SimpleIndex satisfies IndexProtocol."""
        assert isinstance(SimpleIndex(), IndexProtocol)


class TestParsers:
    """Tests for token parsers."""

    def test_parse_str_strips(self):
        """Test string ids are stripped."""
        assert parse_str(" u1 ") == "u1"

    def test_parse_int(self):
        """Test integer ids parse and reject junk."""
        assert parse_int("42") == 42
        with pytest.raises(ValueError):
            parse_int("4x")

    def test_missing_token(self):
        """Test id parsers reject absent fields."""
        with pytest.raises(ValueError):
            parse_str(None)

    def test_weight_default(self):
        """Test absent or blank weights take the default."""
        assert parse_weight(None) == 1.0
        assert parse_weight("") == 1.0
        assert weight_parser(0.0)(None) == 0.0

    def test_weight_values(self):
        """Test weights parse, infinities pass and NaN is rejected."""
        assert parse_weight("2.5") == 2.5
        assert math.isinf(parse_weight("inf"))
        with pytest.raises(ValueError):
            parse_weight("nan")


class TestSourceProtocol:
    """Tests for NeighborhoodSource conformance."""

    def test_sources_conform(self, scenario_store):
        """Test every source type satisfies NeighborhoodSource."""
        sim = SetSimilarity(scenario_store, jaccard)

        assert isinstance(sim, NeighborhoodSource)
        assert isinstance(TopKNeighborhood(sim, 2), NeighborhoodSource)
        assert isinstance(InvertedNeighborhood.build(2, sim, max_workers=1), NeighborhoodSource)
