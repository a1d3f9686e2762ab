"""
Adapters that turn graph objects into sparse adjacency matrices.

label_propagation works on scipy sparse matrices. These helpers let callers
hand in a NetworkIt graph or a dense numpy array instead.
"""

from typing import Any
import numpy as np
import scipy.sparse as sp
import networkit as nk

from ..common.exceptions import GraphConstructionError
from ..common.logging_config import get_logger, LoggingTimer
from ..common.validators import validate_adjacency_matrix

logger = get_logger(__name__)


def adjacency_from_networkit(graph: nk.Graph) -> sp.csr_matrix:
    """
    Build the weighted adjacency matrix of a NetworkIt graph.

    Node ids are used directly as row and column indices. Undirected edges
    are stored in both directions; unweighted graphs get weight 1 per edge.

    Parameters
    ----------
    graph : nk.Graph
        NetworkIt graph (directed or undirected, weighted or not)

    Returns
    -------
    sp.csr_matrix
        ``n x n`` float64 adjacency matrix, ``n = graph.upperNodeIdBound()``

    Raises
    ------
    GraphConstructionError
        If the graph has no nodes

    Examples
    --------
    >>> g = nk.Graph(3, weighted=True, directed=True)
    >>> g.addEdge(0, 1, 2.0)
    >>> adjacency_from_networkit(g).toarray()[0, 1]
    2.0
    """
    graph_type = "directed" if graph.isDirected() else "undirected"
    if graph.numberOfNodes() == 0:
        raise GraphConstructionError(
            "Graph has no nodes",
            graph_type=graph_type,
            node_count=0,
            operation="adjacency_from_networkit"
        )

    n_nodes = graph.upperNodeIdBound()

    with LoggingTimer("Converting NetworkIt graph", {"nodes": n_nodes, "edges": graph.numberOfEdges()}):
        row_indices = []
        col_indices = []
        edge_weights = []

        for u, v in graph.iterEdges():
            weight = graph.weight(u, v)

            row_indices.append(u)
            col_indices.append(v)
            edge_weights.append(weight)

            # Self-loops appear once even in undirected graphs
            if not graph.isDirected() and u != v:
                row_indices.append(v)
                col_indices.append(u)
                edge_weights.append(weight)

        adjacency = sp.coo_matrix(
            (edge_weights, (row_indices, col_indices)),
            shape=(n_nodes, n_nodes),
            dtype=np.float64
        ).tocsr()

    logger.debug(f"Converted {graph_type} graph: shape={adjacency.shape}, nnz={adjacency.nnz}")
    return adjacency


def as_sparse_adjacency(A: Any) -> sp.csr_matrix:
    """
    Return ``A`` as a validated float64 CSR adjacency matrix.

    Accepts NetworkIt graphs, scipy sparse matrices and dense array-likes.
    """
    if isinstance(A, nk.Graph):
        A = adjacency_from_networkit(A)
    return validate_adjacency_matrix(A)
