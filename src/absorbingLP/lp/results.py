"""
Tabular view of propagation output.
"""

from typing import List, Optional, Sequence
import numpy as np
import polars as pl

from ..common.exceptions import ValidationError
from ..common.logging_config import get_logger

logger = get_logger(__name__)


def probabilities_to_dataframe(
    probabilities: np.ndarray,
    test_ind: Sequence[int],
    class_names: Optional[List[str]] = None,
    train_ind: Optional[Sequence[int]] = None
) -> pl.DataFrame:
    """
    Convert a probability matrix returned by label_propagation to a DataFrame.

    Parameters
    ----------
    probabilities : np.ndarray
        ``(len(test_ind), C)`` probability matrix
    test_ind : Sequence[int]
        Node indices the rows correspond to
    class_names : List[str], optional
        Name of each class. Defaults to "0", "1", ...
    train_ind : Sequence[int], optional
        Labeled nodes, used to fill the is_train column

    Returns
    -------
    pl.DataFrame
        Columns:
        - node_index: node index (int)
        - {class}_prob: probability of each class (float)
        - dominant_class: class with the highest probability (str, null
          for NaN rows)
        - confidence: highest probability (float)
        - is_train: whether the node is in train_ind (bool)

    Raises
    ------
    ValidationError
        If the shapes of the inputs do not agree

    Examples
    --------
    >>> df = probabilities_to_dataframe(probs, [2, 3], ["left", "right"])
    >>> df.columns
    ['node_index', 'left_prob', 'right_prob', 'dominant_class', 'confidence', 'is_train']
    """
    probabilities = np.asarray(probabilities, dtype=np.float64)
    test_ind = np.asarray(test_ind, dtype=np.int64).ravel()

    if probabilities.ndim != 2 or probabilities.shape[0] != test_ind.size:
        raise ValidationError(
            f"Probability matrix of shape {probabilities.shape} does not match "
            f"{test_ind.size} test indices",
            field="probabilities"
        )

    num_classes = probabilities.shape[1]
    if class_names is None:
        class_names = [str(k) for k in range(num_classes)]
    elif len(class_names) != num_classes:
        raise ValidationError(
            f"Got {len(class_names)} class names for {num_classes} classes",
            field="class_names"
        )

    defined = ~np.isnan(probabilities).any(axis=1)
    if num_classes and probabilities.shape[0]:
        filled = np.where(np.isnan(probabilities), -np.inf, probabilities)
        dominant = np.argmax(filled, axis=1)
        confidence = np.where(defined, filled.max(axis=1), np.nan)
    else:
        dominant = np.zeros(probabilities.shape[0], dtype=np.int64)
        confidence = np.full(probabilities.shape[0], np.nan)

    dominant_classes = [
        class_names[idx] if ok else None
        for idx, ok in zip(dominant.tolist(), defined.tolist())
    ]

    train_set = set(np.asarray(train_ind, dtype=np.int64).ravel().tolist()) if train_ind is not None else set()

    result_data = {"node_index": test_ind.tolist()}
    for k, name in enumerate(class_names):
        result_data[f"{name}_prob"] = probabilities[:, k].tolist()
    result_data["dominant_class"] = pl.Series(dominant_classes, dtype=pl.Utf8)
    result_data["confidence"] = confidence.tolist()
    result_data["is_train"] = [node in train_set for node in test_ind.tolist()]

    df = pl.DataFrame(result_data)
    logger.debug(f"Created result DataFrame with {len(df)} rows")
    return df
