"""
Tests for the active-learning candidate selectors.
"""

import pytest
import numpy as np
import scipy.sparse as sp

from absorbingLP.selection.selectors import identity_selector, graph_walk_selector
from absorbingLP.common.exceptions import ValidationError


class TestIdentitySelector:
    """Test selection of all unlabeled nodes."""

    def test_excludes_labeled_nodes(self):
        """Labeled nodes are removed, the rest come back in order."""
        np.testing.assert_array_equal(identity_selector([1, 3], 5), [0, 2, 4])

    def test_unordered_and_repeated_labels(self):
        """Order and repeats in train_ind do not matter."""
        np.testing.assert_array_equal(identity_selector([4, 0, 4], 5), [1, 2, 3])

    def test_no_labels(self):
        """Without labels every node is a candidate."""
        np.testing.assert_array_equal(identity_selector([], 3), [0, 1, 2])

    def test_all_labeled(self):
        """With every node labeled nothing is left."""
        assert identity_selector([0, 1, 2], 3).size == 0

    def test_invalid_input(self):
        """Out-of-range indices and bad sizes are rejected."""
        with pytest.raises(ValidationError):
            identity_selector([5], 5)
        with pytest.raises(ValidationError):
            identity_selector([], -1)


class TestGraphWalkSelector:
    """Test selection of the last labeled node's out-neighbors."""

    def setup_method(self):
        """Node 2's only out-edges go to nodes 4 and 5."""
        dense = np.zeros((6, 6))
        dense[0, 1] = 1.0
        dense[2, 5] = 0.3
        dense[2, 4] = 0.7
        dense[4, 2] = 1.0
        self.graph = sp.csr_matrix(dense)

    def test_returns_out_neighbors_of_last_node(self):
        """Only the most recent observation matters."""
        np.testing.assert_array_equal(graph_walk_selector([0, 2], self.graph), [4, 5])

    def test_direction_matters(self):
        """In-edges of the last node are not followed."""
        np.testing.assert_array_equal(graph_walk_selector([5], self.graph), [])
        np.testing.assert_array_equal(graph_walk_selector([4], self.graph), [2])

    def test_explicit_zeros_ignored(self):
        """Stored zero weights are not edges."""
        graph = sp.csr_matrix((np.array([0.0, 1.0]), (np.array([0, 0]), np.array([1, 2]))), shape=(3, 3))

        np.testing.assert_array_equal(graph_walk_selector([0], graph), [2])

    def test_dense_input(self):
        """Dense adjacency matrices are accepted."""
        np.testing.assert_array_equal(graph_walk_selector([2], self.graph.toarray()), [4, 5])

    def test_empty_train_ind(self):
        """There is no last node to walk from."""
        with pytest.raises(ValidationError):
            graph_walk_selector([], self.graph)

    def test_last_index_out_of_range(self):
        """The last node must exist in the graph."""
        with pytest.raises(ValidationError):
            graph_walk_selector([6], self.graph)
