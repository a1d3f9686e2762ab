"""
Tests for input validation functions.

Valid inputs should pass and be returned in canonical form; invalid inputs
should raise ValidationError.
"""

import pytest
import numpy as np
import scipy.sparse as sp

from absorbingLP.common.validators import (
    ValidationError,
    validate_num_classes,
    validate_adjacency_matrix,
    validate_index_array,
    validate_labeled_set,
    find_duplicate_indices
)


class TestValidateNumClasses:
    """Test class count validation."""

    def test_valid(self):
        """Positive integers are accepted and returned as int."""
        assert validate_num_classes(3) == 3
        assert isinstance(validate_num_classes(np.int32(2)), int)

    def test_invalid(self):
        """Zero, negatives, floats and booleans are rejected."""
        for value in (0, -2, 2.0, True, "3"):
            with pytest.raises(ValidationError):
                validate_num_classes(value)


class TestValidateAdjacencyMatrix:
    """Test adjacency matrix validation."""

    def test_dense_converted_to_csr(self):
        """Dense input becomes a float64 CSR matrix."""
        matrix = validate_adjacency_matrix([[0, 1], [1, 0]])

        assert sp.isspmatrix_csr(matrix)
        assert matrix.dtype == np.float64

    def test_returns_copy(self):
        """The result never shares data with the input."""
        original = sp.csr_matrix(np.array([[1.0, 0.0], [0.0, 1.0]]))
        matrix = validate_adjacency_matrix(original)
        matrix.data[:] = 5.0

        np.testing.assert_array_equal(original.toarray(), np.eye(2))

    def test_duplicate_coordinates_summed(self):
        """COO duplicates are summed."""
        coo = sp.coo_matrix((np.array([0.5, 0.5]), (np.array([0, 0]), np.array([1, 1]))), shape=(2, 2))

        assert validate_adjacency_matrix(coo)[0, 1] == 1.0

    def test_not_square(self):
        """Non-square matrices are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_adjacency_matrix(np.ones((2, 3)))
        assert exc_info.value.field == "A"

    def test_wrong_dimensions(self):
        """One-dimensional input is rejected."""
        with pytest.raises(ValidationError):
            validate_adjacency_matrix(np.ones(4))

    def test_empty(self):
        """A 0 x 0 matrix is rejected."""
        with pytest.raises(ValidationError):
            validate_adjacency_matrix(sp.csr_matrix((0, 0)))

    def test_negative_and_non_finite(self):
        """Negative, NaN and infinite weights are rejected."""
        for bad in (-1.0, np.nan, np.inf):
            with pytest.raises(ValidationError):
                validate_adjacency_matrix(np.array([[0.0, bad], [1.0, 0.0]]))

    def test_non_numeric(self):
        """Non-numeric content is rejected."""
        with pytest.raises(ValidationError):
            validate_adjacency_matrix([["a", "b"], ["c", "d"]])


class TestValidateIndexArray:
    """Test node index validation."""

    def test_valid_indices(self):
        """Indices are returned as int64 in their original order."""
        result = validate_index_array([3, 0, 2], 4, "test_ind")

        assert result.dtype == np.int64
        np.testing.assert_array_equal(result, [3, 0, 2])

    def test_integral_floats_accepted(self):
        """Floats holding whole numbers are converted."""
        np.testing.assert_array_equal(validate_index_array(np.array([1.0, 2.0]), 3, "test_ind"), [1, 2])

    def test_fractional_rejected(self):
        """Fractional values are not indices."""
        with pytest.raises(ValidationError):
            validate_index_array([0.5], 3, "test_ind")

    def test_out_of_range(self):
        """Indices must lie in [0, num_nodes)."""
        with pytest.raises(ValidationError) as exc_info:
            validate_index_array([0, 3], 3, "train_ind")
        assert exc_info.value.field == "train_ind"

        with pytest.raises(ValidationError):
            validate_index_array([-1], 3, "train_ind")

    def test_boolean_mask_rejected(self):
        """Boolean masks are not index lists."""
        with pytest.raises(ValidationError):
            validate_index_array([True, False], 3, "test_ind")

    def test_empty(self):
        """Empty lists are allowed unless forbidden."""
        assert validate_index_array([], 3, "test_ind").size == 0

        with pytest.raises(ValidationError):
            validate_index_array([], 3, "train_ind", allow_empty=False)

    def test_two_dimensional_rejected(self):
        """Nested lists are rejected."""
        with pytest.raises(ValidationError):
            validate_index_array([[0, 1]], 3, "test_ind")


class TestValidateLabeledSet:
    """Test combined validation of indices and labels."""

    def test_valid(self):
        """Matching indices and labels pass."""
        train, labels = validate_labeled_set([0, 2], [1, 0], 3, 2)

        np.testing.assert_array_equal(train, [0, 2])
        np.testing.assert_array_equal(labels, [1, 0])

    def test_length_mismatch(self):
        """Both sequences must be equally long."""
        with pytest.raises(ValidationError) as exc_info:
            validate_labeled_set([0, 1], [1], 3, 2)
        assert exc_info.value.details["train_ind_length"] == 2

    def test_label_out_of_range(self):
        """Labels must lie in [0, num_classes)."""
        with pytest.raises(ValidationError):
            validate_labeled_set([0], [2], 3, 2)
        with pytest.raises(ValidationError):
            validate_labeled_set([0], [-1], 3, 2)

    def test_empty(self):
        """An empty labeled set is valid."""
        train, labels = validate_labeled_set([], [], 3, 2)
        assert train.size == 0 and labels.size == 0


class TestFindDuplicateIndices:
    """Test detection of repeated indices."""

    def test_duplicates(self):
        """Repeated indices are reported once each, sorted."""
        np.testing.assert_array_equal(find_duplicate_indices([3, 1, 3, 1, 2, 3]), [1, 3])

    def test_no_duplicates(self):
        """Distinct indices give an empty result."""
        assert find_duplicate_indices([0, 1, 2]).size == 0
