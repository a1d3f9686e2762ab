"""
Candidate selectors for active-learning loops.

A selector turns the current state of an active-learning loop into the set of
node indices that may be queried next. Both selectors here are stateless.
"""

from typing import Sequence
import numpy as np

from ..common.exceptions import ValidationError
from ..common.validators import validate_adjacency_matrix, validate_index_array


def identity_selector(train_ind: Sequence[int], num_nodes: int) -> np.ndarray:
    """
    Select every node that has not been labeled yet.

    Parameters
    ----------
    train_ind : Sequence[int]
        Indices of the labeled nodes
    num_nodes : int
        Total number of nodes

    Returns
    -------
    np.ndarray
        Ascending indices in ``[0, num_nodes)`` that are not in train_ind

    Examples
    --------
    >>> identity_selector([1, 3], 5)
    array([0, 2, 4])
    """
    if isinstance(num_nodes, bool) or not isinstance(num_nodes, (int, np.integer)) or num_nodes < 0:
        raise ValidationError(
            "Number of nodes must be a non-negative integer",
            field="num_nodes",
            value=num_nodes
        )

    train = validate_index_array(train_ind, num_nodes, "train_ind")
    mask = np.ones(num_nodes, dtype=bool)
    mask[train] = False
    return np.flatnonzero(mask)


def graph_walk_selector(train_ind: Sequence[int], A) -> np.ndarray:
    """
    Select the out-neighbors of the most recently labeled node.

    Observations selected this way follow a connected path through the
    (possibly directed) graph. Only the last entry of train_ind matters.

    Parameters
    ----------
    train_ind : Sequence[int]
        Indices of the labeled nodes, most recent last
    A : scipy.sparse matrix or array-like
        ``n x n`` adjacency matrix; a nonzero ``A[i, j]`` is an edge i -> j

    Returns
    -------
    np.ndarray
        Ascending indices j with ``A[train_ind[-1], j] != 0``

    Raises
    ------
    ValidationError
        If train_ind is empty or its last entry is not a node of A

    Examples
    --------
    >>> A = np.array([[0, 1, 1], [0, 0, 1], [1, 0, 0]])
    >>> graph_walk_selector([2, 0], A)
    array([1, 2])
    """
    adjacency = validate_adjacency_matrix(A)
    train = validate_index_array(train_ind, adjacency.shape[0], "train_ind", allow_empty=False)

    row = adjacency[int(train[-1])]
    row.eliminate_zeros()
    return np.sort(row.indices).astype(np.int64)
