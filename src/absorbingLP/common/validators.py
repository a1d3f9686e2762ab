"""
Input validation utilities for the absorbingLP library.

These functions check the caller-supplied graph, index sets and labels before
any matrix is built, so that malformed input is reported as a ValidationError
and no computation is attempted.
"""

from typing import Any, Optional, Sequence, Tuple
import numpy as np
import scipy.sparse as sp

from .exceptions import ValidationError


def validate_num_classes(num_classes: Any) -> int:
    """
    Validate the number of classes and return it as a Python int.

    Raises
    ------
    ValidationError
        If num_classes is not an integer or is smaller than 1
    """
    if isinstance(num_classes, (bool, np.bool_)) or not isinstance(num_classes, (int, np.integer)):
        raise ValidationError(
            "Number of classes must be an integer",
            field="num_classes",
            value=num_classes,
            expected="integer >= 1"
        )
    if num_classes < 1:
        raise ValidationError(
            f"Number of classes must be at least 1, got {num_classes}",
            field="num_classes",
            value=num_classes,
            expected="integer >= 1"
        )
    return int(num_classes)


def validate_adjacency_matrix(A: Any) -> sp.csr_matrix:
    """
    Validate a weighted adjacency matrix and return it as float64 CSR.

    Dense arrays and any scipy sparse format are accepted. The returned
    matrix is always a new object, so later in-place work never touches the
    caller's matrix.

    Parameters
    ----------
    A : array-like or scipy.sparse matrix
        Square, non-negative ``n x n`` matrix of transition weights

    Returns
    -------
    sp.csr_matrix
        Copy of ``A`` in CSR format with float64 entries and duplicate
        coordinates summed

    Raises
    ------
    ValidationError
        If A is not two-dimensional, not square, empty, non-numeric,
        or contains negative or non-finite weights

    Examples
    --------
    >>> A = validate_adjacency_matrix(np.array([[0, 1], [1, 0]]))
    >>> A.shape
    (2, 2)
    """
    if sp.issparse(A):
        matrix = sp.csr_matrix(A, dtype=np.float64, copy=True)
    else:
        try:
            dense = np.asarray(A, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                "Adjacency matrix must be numeric",
                field="A",
                cause=e
            )
        if dense.ndim != 2:
            raise ValidationError(
                f"Adjacency matrix must be two-dimensional, got {dense.ndim} dimensions",
                field="A",
                expected="n x n matrix"
            )
        matrix = sp.csr_matrix(dense)

    n_rows, n_cols = matrix.shape
    if n_rows != n_cols:
        raise ValidationError(
            f"Adjacency matrix must be square, got shape {matrix.shape}",
            field="A",
            expected="n x n matrix",
            details={"rows": n_rows, "columns": n_cols}
        )
    if n_rows == 0:
        raise ValidationError("Adjacency matrix has no nodes", field="A")

    matrix.sum_duplicates()

    if not np.all(np.isfinite(matrix.data)):
        raise ValidationError(
            "Adjacency matrix contains NaN or infinite weights",
            field="A",
            details={"non_finite_count": int(np.sum(~np.isfinite(matrix.data)))}
        )
    if np.any(matrix.data < 0):
        raise ValidationError(
            "Adjacency matrix contains negative weights",
            field="A",
            details={
                "negative_count": int(np.sum(matrix.data < 0)),
                "min_weight": float(matrix.data.min())
            }
        )

    return matrix


def validate_index_array(
    indices: Any,
    num_nodes: int,
    field: str,
    allow_empty: bool = True
) -> np.ndarray:
    """
    Validate a sequence of node indices against ``[0, num_nodes)``.

    Parameters
    ----------
    indices : sequence of int
        Node indices (0-based)
    num_nodes : int
        Number of nodes in the graph
    field : str
        Argument name reported in error messages
    allow_empty : bool, default True
        Whether an empty sequence is acceptable

    Returns
    -------
    np.ndarray
        One-dimensional int64 array of the indices, in the given order

    Raises
    ------
    ValidationError
        If the indices are not integral, not one-dimensional, empty when
        not allowed, or outside ``[0, num_nodes)``
    """
    array = _as_integer_array(indices, field)

    if array.size == 0 and not allow_empty:
        raise ValidationError("Index list cannot be empty", field=field)

    out_of_range = (array < 0) | (array >= num_nodes)
    if np.any(out_of_range):
        bad = array[out_of_range]
        raise ValidationError(
            f"Indices out of range [0, {num_nodes}): {bad[:5].tolist()}"
            f"{'...' if bad.size > 5 else ''}",
            field=field,
            details={"out_of_range_count": int(bad.size), "num_nodes": num_nodes}
        )

    return array


def validate_labeled_set(
    train_ind: Any,
    observed_labels: Any,
    num_nodes: int,
    num_classes: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Validate training indices and their observed labels together.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray]
        ``(train_ind, observed_labels)`` as int64 arrays

    Raises
    ------
    ValidationError
        If the two sequences differ in length, an index is out of range,
        or a label is outside ``[0, num_classes)``
    """
    train = validate_index_array(train_ind, num_nodes, "train_ind")
    labels = _as_integer_array(observed_labels, "observed_labels")

    if train.size != labels.size:
        raise ValidationError(
            f"train_ind has {train.size} entries but observed_labels has {labels.size}",
            field="observed_labels",
            details={"train_ind_length": int(train.size), "observed_labels_length": int(labels.size)}
        )

    invalid = (labels < 0) | (labels >= num_classes)
    if np.any(invalid):
        raise ValidationError(
            f"Labels must lie in [0, {num_classes}), got {np.unique(labels[invalid]).tolist()}",
            field="observed_labels",
            expected=f"integers in [0, {num_classes})"
        )

    return train, labels


def find_duplicate_indices(indices: Sequence[int]) -> np.ndarray:
    """Return the sorted unique indices that occur more than once."""
    values, counts = np.unique(np.asarray(indices, dtype=np.int64), return_counts=True)
    return values[counts > 1]


def _as_integer_array(values: Any, field: str) -> np.ndarray:
    """Convert ``values`` to a 1-D int64 array, rejecting non-integral input."""
    try:
        array = np.asarray(values)
    except (TypeError, ValueError) as e:
        raise ValidationError("Could not interpret values as an array", field=field, cause=e)

    if array.ndim == 0:
        array = array.reshape(1)
    if array.ndim != 1:
        raise ValidationError(
            f"Expected a one-dimensional sequence, got {array.ndim} dimensions",
            field=field
        )
    if array.size == 0:
        return np.zeros(0, dtype=np.int64)

    if array.dtype == np.bool_:
        raise ValidationError("Boolean masks are not accepted as indices", field=field)

    if not np.issubdtype(array.dtype, np.integer):
        try:
            as_float = array.astype(np.float64)
        except (TypeError, ValueError) as e:
            raise ValidationError("Values must be integers", field=field, cause=e)
        if not np.all(np.isfinite(as_float)) or np.any(as_float != np.round(as_float)):
            raise ValidationError(
                "Values must be integers",
                field=field,
                expected="integer indices"
            )
        array = as_float

    return array.astype(np.int64)
