"""Unit tests for batched tuple arithmetic.

Tests cover:
- Packing tuples into numpy arrays
- batch_add / batch_sub / batch_neg / batch_is_equal against scalar results
- Undefined combinations reported through the valid array
- Input validation and empty batches
"""

import itertools

import numpy as np
import pytest


def _pairs(samples):
    """All ordered (a, b) sample pairs over every kind combination."""
    a = []
    b = []
    for ka, kb in itertools.product(samples, repeat=2):
        a.append(samples[ka])
        b.append(samples[kb])
    return a, b


class TestPacking:
    """Tests for pack_tuples."""

    def test_pack_tuples(self):
        """Test kinds and components are laid out row by row."""
        from src.python.core.batch import pack_tuples
        from src.python.core.primitives import Kind, Tuple

        kinds, comps = pack_tuples([Tuple.new_point(1, 2, 3), Tuple.new(4, 5, 6, 7)])
        assert kinds.dtype == np.int32
        assert comps.dtype == np.float64
        assert list(kinds) == [Kind.POINT, Kind.NONE]
        np.testing.assert_array_equal(comps, [[1, 2, 3, 0], [4, 5, 6, 7]])

    def test_pack_empty(self):
        """Test an empty sequence packs to empty arrays of the right shape."""
        from src.python.core.batch import pack_tuples

        kinds, comps = pack_tuples([])
        assert kinds.shape == (0,)
        assert comps.shape == (0, 4)


class TestBatchArithmetic:
    """Tests for batched operations matching the scalar Tuple methods."""

    def test_add_matches_scalar(self, all_kinds_samples):
        """Test batch_add agrees with Tuple.add for every kind pair."""
        from src.python.core.batch import batch_add

        a, b = _pairs(all_kinds_samples)
        result = batch_add(a, b).to_tuples()
        assert len(result) == 16
        for ta, tb, got in zip(a, b, result):
            expected = ta.add(tb)
            if expected is None:
                assert got is None
            else:
                assert got is not None
                assert got.is_equal(expected)

    def test_sub_matches_scalar(self, all_kinds_samples):
        """Test batch_sub agrees with Tuple.sub for every kind pair."""
        from src.python.core.batch import batch_sub

        a, b = _pairs(all_kinds_samples)
        result = batch_sub(a, b).to_tuples()
        for ta, tb, got in zip(a, b, result):
            expected = ta.sub(tb)
            if expected is None:
                assert got is None
            else:
                assert got is not None
                assert got.is_equal(expected)

    def test_neg_matches_scalar(self, all_kinds_samples):
        """Test batch_neg agrees with Tuple.neg."""
        from src.python.core.batch import batch_neg

        tuples = list(all_kinds_samples.values())
        result = batch_neg(tuples)
        assert result.valid.all()
        for t, got in zip(tuples, result.to_tuples()):
            assert got.is_equal(t.neg())

    def test_add_points_invalid(self):
        """Test point + point is flagged invalid in the valid array."""
        from src.python.core.batch import batch_add
        from src.python.core.primitives import Tuple

        result = batch_add(
            [Tuple.new_point(3, -2, 5), Tuple.new_vector(3, -2, 5)],
            [Tuple.new_point(-2, 3, 1), Tuple.new_vector(-2, 3, 1)],
        )
        assert list(result.valid) == [0, 1]
        np.testing.assert_allclose(result.components[1], [1.0, 1.0, 6.0, 0.0])

    def test_packed_input(self):
        """Test packed (kinds, components) arrays are accepted directly."""
        from src.python.core.batch import batch_sub
        from src.python.core.primitives import Kind

        kinds = np.array([Kind.POINT], dtype=np.int32)
        a = (kinds, np.array([[3.0, 2.0, 1.0, 0.0]]))
        b = (kinds, np.array([[5.0, 6.0, 7.0, 0.0]]))
        result = batch_sub(a, b)
        assert result.kinds[0] == Kind.VECTOR
        np.testing.assert_allclose(result.components[0], [-2.0, -4.0, -6.0, 0.0])

    def test_is_equal(self):
        """Test batch_is_equal applies tolerance and kind checks per element."""
        from src.python.core.batch import batch_is_equal
        from src.python.core.primitives import Tuple

        a = [Tuple.new(4.0, -4.0, 3.0, -5.2), Tuple.new_point(1, 2, 3), Tuple.new(0, 0, 0, 0)]
        b = [
            Tuple.new(3.999999, -4.000001, 3.0, -5.2),
            Tuple.new_vector(1, 2, 3),
            Tuple.new(0.001, 0, 0, 0),
        ]
        result = batch_is_equal(a, b)
        assert result.dtype == bool
        assert list(result) == [True, False, False]


    def test_is_equal_matches_scalar(self, all_kinds_samples):
        """Test batch_is_equal agrees with Tuple.is_equal for every kind pair."""
        from src.python.core.batch import batch_is_equal

        a, b = _pairs(all_kinds_samples)
        result = batch_is_equal(a, b)
        assert list(result) == [ta.is_equal(tb) for ta, tb in zip(a, b)]
        # Same-kind pairs compare a sample with itself
        assert result.sum() == 4

    def test_is_equal_non_finite_matches_scalar(self):
        """Test NaN and infinite components compare the same as on the host."""
        from src.python.core.batch import batch_is_equal
        from src.python.core.primitives import Tuple

        nan = float("nan")
        inf = float("inf")
        a = [
            Tuple.new(nan, 0, 0, 0),
            Tuple.new(inf, 0, 0, 0),
            Tuple.new(0, 0, 0, 0),
            Tuple.new_vector(0, -inf, 0),
            Tuple.new_point(1, 2, 3),
        ]
        b = [
            Tuple.new(1, 0, 0, 0),
            Tuple.new(inf, 0, 0, 0),
            Tuple.new(nan, 0, 0, 0),
            Tuple.new_vector(0, -inf, 0),
            Tuple.new_point(1, 2, inf),
        ]
        result = batch_is_equal(a, b)
        assert list(result) == [ta.is_equal(tb) for ta, tb in zip(a, b)]
        assert not result.any()


class TestBatchValidation:
    """Tests for input validation and edge cases."""

    def test_empty_batches(self):
        """Test empty inputs return empty results."""
        from src.python.core.batch import batch_add, batch_is_equal, batch_neg

        assert len(batch_add([], [])) == 0
        assert batch_add([], []).to_tuples() == []
        assert len(batch_neg([])) == 0
        assert batch_is_equal([], []).shape == (0,)

    def test_length_mismatch(self):
        """Test batches of different lengths raise ValueError."""
        from src.python.core.batch import batch_add
        from src.python.core.primitives import Tuple

        with pytest.raises(ValueError, match="length mismatch"):
            batch_add([Tuple.new_vector(1, 0, 0)], [])

    def test_bad_component_shape(self):
        """Test a components array not of shape (N, 4) raises ValueError."""
        from src.python.core.batch import batch_neg

        kinds = np.zeros(2, dtype=np.int32)
        with pytest.raises(ValueError, match="components must have shape"):
            batch_neg((kinds, np.zeros((2, 3))))

    def test_unknown_kind(self):
        """Test kind tags outside the enumeration raise ValueError."""
        from src.python.core.batch import batch_neg

        kinds = np.array([7], dtype=np.int32)
        with pytest.raises(ValueError, match="kinds must be in"):
            batch_neg((kinds, np.zeros((1, 4))))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
