"""
Coordinate-list builder for sparse matrices.

Entries are collected as (row, column, value) triplets and turned into a CSR
matrix in one step. Entries that share a coordinate are summed when the matrix
is finalized, which is how weights added on top of existing edges accumulate.
"""

from typing import List, Tuple
import numpy as np
import scipy.sparse as sp

from ..common.exceptions import ValidationError


class SparseMatrixBuilder:
    """
    Accumulate sparse entries and finalize them into a CSR matrix.

    Parameters
    ----------
    shape : Tuple[int, int]
        Shape of the matrix being built

    Examples
    --------
    >>> builder = SparseMatrixBuilder((3, 3))
    >>> builder.add_entries([0, 1], [1, 2], [0.5, 1.0])
    >>> builder.add_entries([0], [1], [0.5])
    >>> float(builder.to_csr()[0, 1])
    1.0
    """

    def __init__(self, shape: Tuple[int, int]):
        self.shape = (int(shape[0]), int(shape[1]))
        self._rows: List[np.ndarray] = []
        self._cols: List[np.ndarray] = []
        self._values: List[np.ndarray] = []

    @property
    def num_entries(self) -> int:
        """Number of triplets collected so far (before summing duplicates)."""
        return int(sum(block.size for block in self._values))

    def add_entries(self, rows, cols, values) -> "SparseMatrixBuilder":
        """
        Add triplets. A scalar ``values`` is broadcast over all coordinates.

        Raises
        ------
        ValidationError
            If the coordinate arrays differ in length or fall outside the shape
        """
        rows = np.asarray(rows, dtype=np.int64).ravel()
        cols = np.asarray(cols, dtype=np.int64).ravel()
        values = np.asarray(values, dtype=np.float64)

        if rows.shape != cols.shape:
            raise ValidationError(
                f"Row and column coordinate arrays differ in length ({rows.size} vs {cols.size})",
                field="cols"
            )
        if values.ndim == 0:
            values = np.full(rows.shape, float(values))
        values = values.ravel()
        if values.shape != rows.shape:
            raise ValidationError(
                f"Expected {rows.size} values, got {values.size}",
                field="values"
            )
        if rows.size and (rows.min() < 0 or rows.max() >= self.shape[0]
                          or cols.min() < 0 or cols.max() >= self.shape[1]):
            raise ValidationError(
                f"Coordinates fall outside matrix shape {self.shape}",
                field="rows"
            )

        self._rows.append(rows)
        self._cols.append(cols)
        self._values.append(values.copy())
        return self

    def add_matrix(self, matrix, row_offset: int = 0, col_offset: int = 0) -> "SparseMatrixBuilder":
        """Add every stored entry of ``matrix`` as a block at the given offset."""
        block = sp.coo_matrix(matrix)
        return self.add_entries(block.row + row_offset, block.col + col_offset, block.data)

    def add_identity(self, size: int, offset: int) -> "SparseMatrixBuilder":
        """Add a ``size x size`` identity block on the diagonal starting at ``offset``."""
        diagonal = np.arange(offset, offset + size)
        return self.add_entries(diagonal, diagonal, 1.0)

    def to_csr(self) -> sp.csr_matrix:
        """Sum coinciding entries and return the finished CSR matrix."""
        if self._values:
            rows = np.concatenate(self._rows)
            cols = np.concatenate(self._cols)
            values = np.concatenate(self._values)
        else:
            rows = cols = np.zeros(0, dtype=np.int64)
            values = np.zeros(0, dtype=np.float64)

        matrix = sp.coo_matrix((values, (rows, cols)), shape=self.shape, dtype=np.float64).tocsr()
        matrix.sum_duplicates()
        return matrix
