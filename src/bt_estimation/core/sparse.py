"""
Sparse matrix containers for pairwise comparison data.

This module defines:
- CSCMatrix: the compressed-sparse-column encoding accepted as input
- SparsePattern: a fixed sparsity pattern that can be refilled with new
  values without recomputing structure
- zero_masked_positions / zero_diagonal: batch value masking helpers
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import sparse

from bt_estimation.core.errors import InvalidArgumentError


@dataclass(frozen=True)
class CSCMatrix:
    """
    Sparse matrix in compressed sparse column form.

    Attributes:
        shape: (n_rows, n_cols) of the matrix.
        row_indices: Row index of each stored value, shape (nnz,).
        col_pointers: Offsets into row_indices/values where each column
            starts, shape (n_cols + 1,).
        values: Stored values, shape (nnz,).
    """

    shape: tuple[int, int]
    row_indices: NDArray[np.int64]
    col_pointers: NDArray[np.int64]
    values: NDArray[np.float64]

    def __post_init__(self) -> None:
        """Validate the encoding."""
        if len(self.shape) != 2:
            raise InvalidArgumentError(
                f"shape must have 2 dimensions, got {self.shape}"
            )
        n_rows, n_cols = (int(d) for d in self.shape)
        if n_rows < 0 or n_cols < 0:
            raise InvalidArgumentError(
                f"shape must be non-negative, got {self.shape}"
            )
        if n_rows != n_cols:
            raise InvalidArgumentError(
                f"comparison matrix must be square, got shape {self.shape}"
            )

        row_indices = np.asarray(self.row_indices)
        col_pointers = np.asarray(self.col_pointers)
        values = np.asarray(self.values, dtype=np.float64)

        for name, arr in (
            ("row_indices", row_indices),
            ("col_pointers", col_pointers),
        ):
            if arr.size > 0 and not np.issubdtype(arr.dtype, np.integer):
                raise InvalidArgumentError(
                    f"{name} must be integers, got dtype {arr.dtype}"
                )
        if row_indices.ndim != 1 or col_pointers.ndim != 1 or values.ndim != 1:
            raise InvalidArgumentError("CSC arrays must be 1D")
        if len(col_pointers) != n_cols + 1:
            raise InvalidArgumentError(
                f"col_pointers must have length {n_cols + 1}, "
                f"got {len(col_pointers)}"
            )
        if len(row_indices) != len(values):
            raise InvalidArgumentError(
                f"row_indices and values must have equal length, "
                f"got {len(row_indices)} and {len(values)}"
            )
        if col_pointers[0] != 0 or col_pointers[-1] != len(values):
            raise InvalidArgumentError(
                "col_pointers must start at 0 and end at the number of values"
            )
        if np.any(np.diff(col_pointers) < 0):
            raise InvalidArgumentError("col_pointers must be non-decreasing")
        if len(row_indices) > 0 and (
            row_indices.min() < 0 or row_indices.max() >= n_rows
        ):
            raise InvalidArgumentError(
                f"row_indices must lie in [0, {n_rows})"
            )
        if not np.all(np.isfinite(values)):
            raise InvalidArgumentError("values must be finite")
        if np.any(values < 0):
            raise InvalidArgumentError("values must be >= 0")

    @property
    def n_rows(self) -> int:
        """Number of rows."""
        return int(self.shape[0])

    @property
    def n_cols(self) -> int:
        """Number of columns."""
        return int(self.shape[1])

    @property
    def nnz(self) -> int:
        """Number of stored values."""
        return len(self.values)

    def to_scipy(self) -> sparse.csc_matrix:
        """Convert to a scipy CSC matrix (duplicate entries are summed)."""
        matrix = sparse.csc_matrix(
            (
                np.asarray(self.values, dtype=np.float64),
                np.asarray(self.row_indices, dtype=np.int64),
                np.asarray(self.col_pointers, dtype=np.int64),
            ),
            shape=(self.n_rows, self.n_cols),
        )
        matrix.sum_duplicates()
        return matrix

    @classmethod
    def from_scipy(cls, matrix: sparse.spmatrix) -> "CSCMatrix":
        """Build from any scipy sparse matrix."""
        csc = sparse.csc_matrix(matrix, dtype=np.float64)
        csc.sum_duplicates()
        return cls(
            shape=(int(csc.shape[0]), int(csc.shape[1])),
            row_indices=csc.indices.astype(np.int64),
            col_pointers=csc.indptr.astype(np.int64),
            values=csc.data.astype(np.float64),
        )

    @classmethod
    def from_dense(cls, matrix: NDArray[np.floating]) -> "CSCMatrix":
        """Build from a dense 2D array."""
        return cls.from_scipy(sparse.csc_matrix(np.asarray(matrix)))


@dataclass(frozen=True)
class SparsePattern:
    """
    Fixed sparsity pattern of a square matrix in CSR order.

    Index arrays are computed once; each rebuild only supplies a new values
    array aligned with `rows` / `cols`.

    Attributes:
        shape: (n_rows, n_cols) of the matrix.
        rows: Row index of each nonzero, shape (nnz,).
        cols: Column index of each nonzero, shape (nnz,).
        indptr: CSR row pointers, shape (n_rows + 1,).
    """

    shape: tuple[int, int]
    rows: NDArray[np.int64]
    cols: NDArray[np.int64]
    indptr: NDArray[np.int64]

    @classmethod
    def from_matrix(
        cls, matrix: sparse.spmatrix
    ) -> tuple["SparsePattern", NDArray[np.float64]]:
        """
        Extract the pattern and values of a sparse matrix.

        Returns:
            Tuple of (pattern, values) where values[k] sits at
            (rows[k], cols[k]).
        """
        csr = sparse.csr_matrix(matrix, dtype=np.float64)
        csr.sum_duplicates()
        indptr = csr.indptr.astype(np.int64)
        rows = np.repeat(
            np.arange(csr.shape[0], dtype=np.int64), np.diff(indptr)
        )
        pattern = cls(
            shape=(int(csr.shape[0]), int(csr.shape[1])),
            rows=rows,
            cols=csr.indices.astype(np.int64),
            indptr=indptr,
        )
        return pattern, csr.data.astype(np.float64)

    @property
    def nnz(self) -> int:
        """Number of positions in the pattern."""
        return len(self.rows)

    def build(self, values: NDArray[np.float64]) -> sparse.csr_matrix:
        """Rebuild the matrix from new values on the fixed pattern."""
        if len(values) != self.nnz:
            raise InvalidArgumentError(
                f"expected {self.nnz} values, got {len(values)}"
            )
        return sparse.csr_matrix(
            (values, self.cols, self.indptr), shape=self.shape
        )

    def nonzeros(
        self, values: NDArray[np.float64]
    ) -> Iterator[tuple[int, int, float]]:
        """Iterate (row, col, value) triples."""
        for row, col, value in zip(self.rows, self.cols, values):
            yield int(row), int(col), float(value)

    def row_sums(self, values: NDArray[np.float64]) -> NDArray[np.float64]:
        """Sum values per row, accumulating over stored positions only."""
        sums: NDArray[np.float64] = np.bincount(
            self.rows, weights=values, minlength=self.shape[0]
        ).astype(np.float64)
        return sums


def zero_masked_positions(
    matrix: sparse.spmatrix,
    mask: Callable[[NDArray[np.int64], NDArray[np.int64]], NDArray[np.bool_]],
) -> sparse.csc_matrix:
    """
    Zero the stored values selected by `mask` and rebuild once.

    Works on the value array of the coordinate form instead of editing the
    matrix structure entry by entry.

    Args:
        matrix: Input sparse matrix.
        mask: Function of (rows, cols) returning True where values must be
            zeroed.

    Returns:
        New CSC matrix without the masked entries.
    """
    coo = sparse.coo_matrix(matrix, dtype=np.float64)
    keep = ~np.asarray(mask(coo.row, coo.col), dtype=bool)
    result = sparse.csc_matrix(
        (coo.data * keep, (coo.row, coo.col)), shape=coo.shape
    )
    result.eliminate_zeros()
    return result


def zero_diagonal(matrix: sparse.spmatrix) -> sparse.csc_matrix:
    """Remove self-comparisons from a square sparse matrix."""
    return zero_masked_positions(matrix, lambda rows, cols: rows == cols)
