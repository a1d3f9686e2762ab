"""
Partially absorbing label propagation.

This module estimates class-membership probabilities at unlabeled nodes of a
weighted graph from a handful of labeled nodes. The graph is read as a Markov
chain and augmented with one absorbing pseudo-node per class.

Mathematical Foundation:
- Row-normalize the adjacency matrix into a transition matrix P (n × n)
- Append C pseudo-nodes, each with a self-loop of weight 1
- For every labeled node v with label k, scale v's outgoing weights by
  (1 - α) and add an edge v -> pseudo-node k with weight α
- Start from the prior at every node, the observed label at labeled nodes
  and the identity at pseudo-nodes
- Iterate F^(t+1) = P_aug F^(t) for a fixed number of steps

Because every row of P_aug sums to 1 and every row of F^(0) is a
distribution, every row of F^(t) is a distribution for all t. With α = 1 this
reduces to classical label propagation; with α = 0 labels are never absorbed.

Node indices and class labels are 0-based.
"""

from typing import Any, Dict, Mapping, Optional, Tuple, Union
import numpy as np
import scipy.sparse as sp

from ..common.exceptions import ComputationError, ConfigurationError, ValidationError
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from ..common.validators import (
    find_duplicate_indices,
    validate_index_array,
    validate_labeled_set,
    validate_num_classes
)
from .builder import SparseMatrixBuilder
from .graphs import as_sparse_adjacency
from .options import PropagationOptions

logger = get_logger(__name__)

_PROGRESS_INTERVAL = 50


def label_propagation(
    num_classes: int,
    train_ind,
    observed_labels,
    test_ind,
    A,
    options: Optional[Union[PropagationOptions, Mapping[str, Any]]] = None,
    **option_overrides: Any
) -> np.ndarray:
    """
    Propagate observed labels through a graph with absorbing class pseudo-nodes.

    Time Complexity: O(i × nnz(A) × C) where i = num_iterations
    Space Complexity: O(nnz(A) + |train_ind| + (n + C) × C)

    Parameters
    ----------
    num_classes : int
        Number of classes C (at least 1). Labels are 0..C-1.
    train_ind : sequence of int
        Indices of the labeled nodes, in any order
    observed_labels : sequence of int
        Label of each entry of train_ind (same length)
    test_ind : sequence of int
        Indices of the nodes whose probabilities are returned
    A : scipy.sparse matrix, array-like or nk.Graph
        Non-negative ``n x n`` weighted adjacency matrix. A nonzero entry
        ``A[i, j]`` is the weight of the (possibly directed) edge i -> j.
        Rows that do not sum to 1 are normalized in a private copy.
    options : PropagationOptions or mapping, optional
        Propagation settings. Defaults to PropagationOptions().
    **option_overrides
        Individual option fields (num_iterations, alpha, use_prior,
        pseudocount, convergence_threshold, duplicates) overriding
        ``options``

    Returns
    -------
    np.ndarray
        Array of shape ``(len(test_ind), num_classes)``. Entry ``[i, k]``
        approximates ``Pr(label of test_ind[i] == k | observations)``. Each
        row is non-negative and sums to 1, except rows that depend on a
        zero-weight row of ``A``, which are NaN.

    Raises
    ------
    ConfigurationError
        If an option is outside its domain or an override is unknown
    ValidationError
        If num_classes < 1, A is not a square non-negative matrix, an index
        or label is out of range, train_ind and observed_labels differ in
        length, or train_ind repeats a node while duplicates="error"
    ComputationError
        If the sparse propagation product fails

    Examples
    --------
    >>> import scipy.sparse as sp
    >>> # Walks 3 -> 2 -> 1 -> 0, node 0 loops on itself
    >>> A = sp.csr_matrix(np.array([[1, 0, 0, 0],
    ...                             [1, 0, 0, 0],
    ...                             [0, 1, 0, 0],
    ...                             [0, 0, 1, 0]], dtype=float))
    >>> label_propagation(2, [0], [0], [3], A, num_iterations=50)
    array([[1., 0.]])

    >>> # Labels flow against edge direction only: node 0 never reaches node 3
    >>> label_propagation(2, [3], [1], [0], A)
    array([[0.5, 0.5]])

    Notes
    -----
    - The input matrix is never modified; the augmented graph and the belief
      matrix live only for the duration of the call.
    - Repeated indices in train_ind are merged by default: a node observed
      m times receives the average of its observed label indicators, and its
      absorption weight α is split in the same proportions.
    """
    opts = _resolve_options(options, option_overrides)
    log_function_entry(
        "label_propagation",
        num_classes=num_classes,
        num_iterations=opts.num_iterations,
        alpha=opts.alpha,
        use_prior=opts.use_prior
    )

    # Validate everything before building any matrix
    num_classes = validate_num_classes(num_classes)
    adjacency = as_sparse_adjacency(A)
    num_nodes = adjacency.shape[0]
    train, labels = validate_labeled_set(train_ind, observed_labels, num_nodes, num_classes)
    test = validate_index_array(test_ind, num_nodes, "test_ind")
    _check_duplicates(train, opts.duplicates)

    logger.info(
        f"Starting label propagation: nodes={num_nodes}, classes={num_classes}, "
        f"train={train.size}, test={test.size}, alpha={opts.alpha}, "
        f"iterations={opts.num_iterations}"
    )

    with LoggingTimer("Label propagation", {"nodes": num_nodes, "classes": num_classes}):
        transition, _ = normalize_rows(adjacency)

        prior = compute_prior(num_classes, labels, opts.use_prior, opts.pseudocount)
        train_nodes, label_fractions = summarize_training_labels(num_classes, train, labels)

        augmented = build_augmented_graph(
            transition, num_classes, train_nodes, label_fractions, opts.alpha
        )
        beliefs = initialize_beliefs(num_nodes, prior, train_nodes, label_fractions)

        try:
            beliefs, steps = propagate_beliefs(
                augmented, beliefs, opts.num_iterations, opts.convergence_threshold
            )
        except ComputationError as e:
            raise e.add_context(num_nodes=num_nodes, num_classes=num_classes, alpha=opts.alpha)

    logger.info(f"Label propagation finished after {steps} iterations")
    return beliefs[test]


def _resolve_options(
    options: Optional[Union[PropagationOptions, Mapping[str, Any]]],
    overrides: Dict[str, Any]
) -> PropagationOptions:
    """Merge options and keyword overrides, then validate the result."""
    if options is None:
        resolved = PropagationOptions()
    elif isinstance(options, PropagationOptions):
        resolved = options
    elif isinstance(options, Mapping):
        resolved = PropagationOptions().with_overrides(**options)
    else:
        raise ConfigurationError(
            f"Options must be a PropagationOptions instance or a mapping, "
            f"got {type(options).__name__}",
            parameter="options",
            value=type(options).__name__
        )

    if overrides:
        resolved = resolved.with_overrides(**overrides)

    return resolved.validate()


def _check_duplicates(train: np.ndarray, policy: str) -> None:
    """Apply the duplicate policy to the training indices."""
    duplicates = find_duplicate_indices(train)
    if duplicates.size == 0:
        return

    if policy == "error":
        raise ValidationError(
            f"train_ind contains repeated nodes: {duplicates[:5].tolist()}"
            f"{'...' if duplicates.size > 5 else ''}",
            field="train_ind",
            details={"duplicate_count": int(duplicates.size)}
        )

    logger.warning(
        f"train_ind repeats {duplicates.size} node(s); their observed labels are averaged"
    )


def normalize_rows(A: sp.spmatrix) -> Tuple[sp.csr_matrix, np.ndarray]:
    """
    Return a row-stochastic copy of ``A`` and the indices of zero-weight rows.

    Only rows whose sum differs from 1 (beyond ``np.isclose`` tolerance) are
    rescaled. A zero-weight row cannot be normalized: it receives a NaN
    self-loop, so the undefined belief of that node, and of every node that
    can reach it, shows up as NaN in the output instead of a made-up value.

    Parameters
    ----------
    A : sp.spmatrix
        Square non-negative matrix

    Returns
    -------
    Tuple[sp.csr_matrix, np.ndarray]
        ``(transition_matrix, degenerate_rows)``
    """
    matrix = sp.csr_matrix(A, dtype=np.float64, copy=True)
    num_nodes = matrix.shape[0]

    row_sums = np.asarray(matrix.sum(axis=1)).ravel()
    degenerate = np.flatnonzero(row_sums == 0)
    needs_scaling = (row_sums != 0) & ~np.isclose(row_sums, 1.0)

    if needs_scaling.any():
        logger.debug(f"Normalizing {int(needs_scaling.sum())} rows that do not sum to 1")
        scale = np.ones(num_nodes)
        scale[needs_scaling] = 1.0 / row_sums[needs_scaling]
        matrix = _scale_rows(matrix, scale)

    if degenerate.size:
        logger.warning(
            f"Adjacency matrix has {degenerate.size} zero-weight row(s) "
            f"(e.g. {degenerate[:5].tolist()}); their beliefs are undefined"
        )
        matrix = (
            SparseMatrixBuilder(matrix.shape)
            .add_matrix(matrix)
            .add_entries(degenerate, degenerate, np.nan)
            .to_csr()
        )

    return matrix, degenerate


def _scale_rows(matrix: sp.csr_matrix, scale: np.ndarray) -> sp.csr_matrix:
    """Multiply row i of a CSR matrix by scale[i], returning a new matrix."""
    scaled = matrix.copy()
    scaled.data = scaled.data * np.repeat(scale, np.diff(scaled.indptr))
    return scaled


def compute_prior(
    num_classes: int,
    observed_labels,
    use_prior: bool = False,
    pseudocount: float = 0.1
) -> np.ndarray:
    """
    Compute the prior class distribution.

    With ``use_prior`` the prior is the Dirichlet-smoothed empirical
    distribution of ``observed_labels``::

        prior[k] = (pseudocount + count_k) / sum_j (pseudocount + count_j)

    Otherwise it is uniform.

    Examples
    --------
    >>> compute_prior(2, [0, 0, 1], use_prior=True, pseudocount=0.1)
    array([0.65625, 0.34375])
    """
    if not use_prior:
        return np.full(num_classes, 1.0 / num_classes)

    labels = np.asarray(observed_labels, dtype=np.int64)
    counts = np.bincount(labels, minlength=num_classes).astype(np.float64)
    smoothed = pseudocount + counts
    return smoothed / smoothed.sum()


def summarize_training_labels(
    num_classes: int,
    train_ind: np.ndarray,
    observed_labels: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Collapse the labeled set to one label distribution per distinct node.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        ``(train_nodes, label_fractions)``: the sorted distinct training
        nodes and a ``(len(train_nodes), num_classes)`` array whose row is
        the fraction of each label among that node's observations. Without
        repeated nodes every row is one-hot.
    """
    train_nodes, inverse = np.unique(np.asarray(train_ind, dtype=np.int64), return_inverse=True)
    inverse = np.asarray(inverse).ravel()

    counts = np.zeros((train_nodes.size, num_classes), dtype=np.float64)
    np.add.at(counts, (inverse, np.asarray(observed_labels, dtype=np.int64)), 1.0)

    if train_nodes.size:
        counts /= counts.sum(axis=1, keepdims=True)

    return train_nodes, counts


def build_augmented_graph(
    transition: sp.csr_matrix,
    num_classes: int,
    train_nodes: np.ndarray,
    label_fractions: np.ndarray,
    alpha: float
) -> sp.csr_matrix:
    """
    Build the ``(n + C) x (n + C)`` transition matrix with class pseudo-nodes.

    The top-left block is ``transition`` with the rows of the training nodes
    scaled by ``1 - alpha``. Training node v gets weight
    ``alpha * label_fractions[v, k]`` on the edge to pseudo-node ``n + k``,
    added on top of anything already stored there. Pseudo-node rows hold a
    single self-loop of weight 1.

    Parameters
    ----------
    transition : sp.csr_matrix
        Row-stochastic ``n x n`` transition matrix
    num_classes : int
        Number of classes C
    train_nodes : np.ndarray
        Distinct training node indices
    label_fractions : np.ndarray
        ``(len(train_nodes), C)`` label distribution of each training node
    alpha : float
        Absorption strength in [0, 1]

    Returns
    -------
    sp.csr_matrix
        Augmented transition matrix; every row sums to 1
    """
    num_nodes = transition.shape[0]
    size = num_nodes + num_classes

    if label_fractions.shape != (train_nodes.size, num_classes):
        raise ValidationError(
            f"label_fractions has shape {label_fractions.shape}, "
            f"expected {(train_nodes.size, num_classes)}",
            field="label_fractions"
        )

    with LoggingTimer("Building augmented graph", {"nodes": size, "nnz": transition.nnz}):
        scale = np.ones(num_nodes)
        scale[train_nodes] = 1.0 - alpha

        row_idx, class_idx = np.nonzero(label_fractions)

        builder = SparseMatrixBuilder((size, size))
        builder.add_matrix(_scale_rows(transition, scale))
        builder.add_entries(
            train_nodes[row_idx],
            num_nodes + class_idx,
            alpha * label_fractions[row_idx, class_idx]
        )
        builder.add_identity(num_classes, offset=num_nodes)

        augmented = builder.to_csr()
        augmented.eliminate_zeros()

    logger.debug(f"Augmented graph shape: {augmented.shape}, nnz: {augmented.nnz}")
    return augmented


def initialize_beliefs(
    num_nodes: int,
    prior: np.ndarray,
    train_nodes: np.ndarray,
    label_fractions: np.ndarray
) -> np.ndarray:
    """
    Create the initial ``(n + C) x C`` belief matrix.

    Every node starts at the prior, training nodes at their observed label
    distribution and pseudo-nodes at the identity.
    """
    num_classes = prior.size
    beliefs = np.tile(np.asarray(prior, dtype=np.float64), (num_nodes + num_classes, 1))
    beliefs[train_nodes] = label_fractions
    beliefs[num_nodes:] = np.eye(num_classes)
    return beliefs


def propagate_beliefs(
    augmented: sp.csr_matrix,
    beliefs: np.ndarray,
    num_iterations: int,
    convergence_threshold: Optional[float] = None
) -> Tuple[np.ndarray, int]:
    """
    Repeatedly left-multiply the belief matrix by the augmented graph.

    Parameters
    ----------
    augmented : sp.csr_matrix
        Augmented transition matrix
    beliefs : np.ndarray
        Initial belief matrix (not modified)
    num_iterations : int
        Number of steps to perform
    convergence_threshold : float, optional
        If given, stop as soon as the largest finite change of any belief
        falls below this value

    Returns
    -------
    Tuple[np.ndarray, int]
        Final beliefs and the number of steps performed

    Raises
    ------
    ComputationError
        If the sparse product fails
    """
    with LoggingTimer("Iterative propagation", {"iterations": num_iterations}):
        for iteration in range(num_iterations):
            try:
                updated = augmented.dot(beliefs)
            except (ValueError, MemoryError, FloatingPointError) as e:
                raise ComputationError(
                    "Matrix operation failed during propagation iteration",
                    operation="matrix_multiplication",
                    error_type="memory" if isinstance(e, MemoryError) else "numerical",
                    resource_info={"augmented_nodes": augmented.shape[0], "iteration": iteration},
                    cause=e
                )

            if convergence_threshold is None:
                beliefs = updated
                if iteration % _PROGRESS_INTERVAL == 0:
                    logger.debug(f"Iteration {iteration} done")
                continue

            max_change = _max_change(updated, beliefs)
            beliefs = updated

            if iteration % _PROGRESS_INTERVAL == 0:
                logger.debug(f"Iteration {iteration}: max_change = {max_change:.2e}")

            if max_change < convergence_threshold:
                logger.debug(f"Converged at iteration {iteration + 1} (max_change = {max_change:.2e})")
                return beliefs, iteration + 1

        if convergence_threshold is not None and num_iterations > 0:
            logger.info(
                f"Reached {num_iterations} iterations before the convergence "
                f"threshold {convergence_threshold:.2e} was met"
            )

    return beliefs, num_iterations


def _max_change(new: np.ndarray, old: np.ndarray) -> float:
    """Largest absolute finite difference between two belief matrices."""
    diff = np.abs(new - old)
    finite = diff[np.isfinite(diff)]
    return float(finite.max()) if finite.size else 0.0


def get_propagation_info(
    num_classes: int,
    train_ind,
    observed_labels,
    A
) -> Dict[str, Any]:
    """
    Describe a potential propagation run without executing it.

    Parameters
    ----------
    num_classes : int
        Number of classes
    train_ind : sequence of int
        Labeled node indices
    observed_labels : sequence of int
        Labels of the labeled nodes
    A : scipy.sparse matrix or array-like
        Weighted adjacency matrix

    Returns
    -------
    Dict[str, Any]
        Dictionary containing:
        - graph_stats: nodes, nnz, density, degenerate and unnormalized rows
        - label_stats: per-class counts, repeated nodes, unobserved classes
        - memory_estimate: sizes of the augmented graph and belief matrix
        - computational_estimate: cost of a single propagation step
        - potential_issues: list of human-readable warnings

    Raises
    ------
    ValidationError
        If the inputs would be rejected by label_propagation

    Examples
    --------
    >>> info = get_propagation_info(2, [0, 3], [0, 1], A)
    >>> info["potential_issues"]
    []
    """
    num_classes = validate_num_classes(num_classes)
    adjacency = as_sparse_adjacency(A)
    num_nodes = adjacency.shape[0]
    train, labels = validate_labeled_set(train_ind, observed_labels, num_nodes, num_classes)

    row_sums = np.asarray(adjacency.sum(axis=1)).ravel()
    degenerate = np.flatnonzero(row_sums == 0)
    unnormalized = int(np.sum((row_sums != 0) & ~np.isclose(row_sums, 1.0)))

    graph_stats = {
        "nodes": num_nodes,
        "nnz": int(adjacency.nnz),
        "density": adjacency.nnz / (num_nodes * num_nodes),
        "degenerate_rows": degenerate.tolist(),
        "rows_needing_normalization": unnormalized,
        "is_symmetric": bool((adjacency != adjacency.T).nnz == 0),
    }

    counts = np.bincount(labels, minlength=num_classes)
    duplicates = find_duplicate_indices(train)
    label_stats = {
        "num_observations": int(train.size),
        "num_labeled_nodes": int(np.unique(train).size),
        "labels_per_class": {k: int(c) for k, c in enumerate(counts)},
        "repeated_nodes": duplicates.tolist(),
        "unobserved_classes": np.flatnonzero(counts == 0).tolist(),
        "labeled_ratio": np.unique(train).size / num_nodes,
    }

    float64_size = 8
    index_size = 4
    augmented_nnz = adjacency.nnz + train.size + num_classes
    augmented_size = num_nodes + num_classes
    augmented_mb = (augmented_nnz * (float64_size + index_size)
                    + (augmented_size + 1) * index_size) / (1024 * 1024)
    belief_mb = augmented_size * num_classes * float64_size / (1024 * 1024)

    memory_estimate = {
        "augmented_graph_mb": augmented_mb,
        # Two belief matrices are alive during each step
        "belief_matrix_mb": belief_mb,
        "total_mb": augmented_mb + 2 * belief_mb,
    }

    computational_estimate = {
        "augmented_nnz": int(augmented_nnz),
        "ops_per_iteration": int(augmented_nnz * num_classes),
    }

    potential_issues = []
    if degenerate.size:
        potential_issues.append(
            f"{degenerate.size} zero-weight row(s) will produce NaN beliefs"
        )
    if train.size == 0:
        potential_issues.append("No labeled nodes: every node keeps the prior")
    elif label_stats["unobserved_classes"]:
        potential_issues.append(
            f"No observations for classes: {label_stats['unobserved_classes']}"
        )
    if duplicates.size:
        potential_issues.append(f"{duplicates.size} node(s) appear more than once in train_ind")
    if memory_estimate["total_mb"] > 1000:
        potential_issues.append("High memory usage expected (>1GB)")

    return {
        "graph_stats": graph_stats,
        "label_stats": label_stats,
        "memory_estimate": memory_estimate,
        "computational_estimate": computational_estimate,
        "potential_issues": potential_issues,
    }
