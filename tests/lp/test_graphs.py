"""
Tests for graph adapters.
"""

import pytest
import numpy as np
import scipy.sparse as sp
import networkit as nk

from absorbingLP.lp.graphs import adjacency_from_networkit, as_sparse_adjacency
from absorbingLP.lp.propagation import label_propagation
from absorbingLP.common.exceptions import GraphConstructionError, ValidationError


class TestAdjacencyFromNetworkit:
    """Test conversion of NetworkIt graphs."""

    def test_directed_weighted_graph(self):
        """Directed edges appear once with their weight."""
        graph = nk.Graph(3, weighted=True, directed=True)
        graph.addEdge(0, 1, 2.0)
        graph.addEdge(1, 2, 0.5)

        adjacency = adjacency_from_networkit(graph)

        np.testing.assert_array_equal(adjacency.toarray(), [[0, 2.0, 0], [0, 0, 0.5], [0, 0, 0]])

    def test_undirected_graph_is_symmetric(self):
        """Undirected edges are stored in both directions."""
        graph = nk.Graph(3, weighted=True, directed=False)
        graph.addEdge(0, 1, 1.5)
        graph.addEdge(1, 2, 3.0)

        adjacency = adjacency_from_networkit(graph).toarray()

        np.testing.assert_array_equal(adjacency, adjacency.T)
        assert adjacency[1, 0] == 1.5

    def test_undirected_self_loop_counted_once(self):
        """A self-loop is not doubled."""
        graph = nk.Graph(2, weighted=True, directed=False)
        graph.addEdge(0, 0, 2.0)
        graph.addEdge(0, 1, 1.0)

        adjacency = adjacency_from_networkit(graph)

        assert adjacency[0, 0] == 2.0

    def test_unweighted_graph(self):
        """Unweighted edges get weight 1."""
        graph = nk.Graph(2, weighted=False, directed=True)
        graph.addEdge(0, 1)

        assert adjacency_from_networkit(graph)[0, 1] == 1.0

    def test_empty_graph(self):
        """A graph without nodes cannot be converted."""
        with pytest.raises(GraphConstructionError):
            adjacency_from_networkit(nk.Graph(0))


class TestAsSparseAdjacency:
    """Test the input normalization entry point."""

    def test_accepts_dense_sparse_and_networkit(self):
        """All three input kinds give the same CSR matrix."""
        dense = np.array([[0.0, 1.0], [1.0, 0.0]])
        graph = nk.Graph(2, weighted=True, directed=False)
        graph.addEdge(0, 1, 1.0)

        for source in (dense, sp.coo_matrix(dense), graph):
            adjacency = as_sparse_adjacency(source)
            assert sp.isspmatrix_csr(adjacency)
            np.testing.assert_array_equal(adjacency.toarray(), dense)

    def test_rejects_malformed_input(self):
        """Invalid matrices raise ValidationError."""
        with pytest.raises(ValidationError):
            as_sparse_adjacency(np.ones(3))

    def test_propagation_on_networkit_graph(self):
        """label_propagation accepts a NetworkIt graph directly."""
        graph = nk.Graph(5, weighted=True, directed=False)
        for i in range(4):
            graph.addEdge(i, i + 1, 1.0)

        probs = label_propagation(2, [0, 4], [0, 1], [1, 2, 3], graph)

        np.testing.assert_allclose(probs, [[0.75, 0.25], [0.5, 0.5], [0.25, 0.75]], atol=1e-8)
