"""Tests for solution sets."""

import pytest

from rootfinder_pkg.expressions import Number
from rootfinder_pkg.solution_set import SolutionSet, unite

one, two, three = Number(1), Number(2), Number(3)


class TestFiniteSets:
    """Test finite solution sets."""

    def test_duplicates_collapse(self):
        """Test structural deduplication."""
        assert len(SolutionSet.of(one, Number(1), two)) == 2

    def test_union_and_difference(self):
        """Test set algebra."""
        assert SolutionSet.of(one) | SolutionSet.of(two) == SolutionSet.of(one, two)
        assert SolutionSet.of(one, two) - SolutionSet.of(two, three) == SolutionSet.of(one)

    def test_insertion_order(self):
        """Test that iteration follows insertion order."""
        assert list(SolutionSet.of(two, one)) == [two, one]
        assert SolutionSet.of(two, one).finite_elements() == (two, one)

    def test_empty(self):
        """Test the empty set."""
        assert SolutionSet.empty().is_empty
        assert SolutionSet.empty().is_finite
        assert one not in SolutionSet.empty()

    def test_unite(self):
        """Test uniting many sets."""
        assert unite([SolutionSet.of(one), SolutionSet.empty(), SolutionSet.of(two)]) == SolutionSet.of(one, two)

    def test_map(self):
        """Test mapping elements."""
        assert SolutionSet.of(one).map(lambda e: e + 1) == SolutionSet.of(one + 1)


class TestInfiniteSets:
    """Test infinite solution sets."""

    def test_union_absorbs(self):
        """Test that a union with an infinite set is infinite."""
        assert not (SolutionSet.of(one) | SolutionSet.infinite()).is_finite

    def test_difference(self):
        """Test difference with infinite operands."""
        assert not (SolutionSet.infinite() - SolutionSet.of(one)).is_finite
        assert (SolutionSet.of(one) - SolutionSet.infinite()).is_empty

    def test_not_enumerable(self):
        """Test that infinite sets refuse iteration."""
        infinite = SolutionSet.infinite()
        assert infinite.finite_elements() is None
        with pytest.raises(TypeError):
            list(infinite)
        with pytest.raises(TypeError):
            len(infinite)
