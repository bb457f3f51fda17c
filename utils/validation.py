"""
Validation utilities for the modeling primer.

This module provides helpers for checking bound values and matrix data
before they reach the solver library.
"""

import numbers
import numpy as np
from typing import Any, Optional, Tuple
from modeling.errors import DimensionMismatch
from utils.logging import setup_logger

logger = setup_logger(__name__)


def ensure_numeric_bound(value: Any, which: str, key: Optional[tuple] = None) -> Optional[float]:
    """
    Check that a bound value is a real number (or None for "no bound").

    Args:
        value: The evaluated bound.
        which: "lower" or "upper", used in the error message.
        key: The index tuple the bound was evaluated for, if any.

    Returns:
        The bound as a float, or None.

    Raises:
        TypeError: If the value is not a real number.
    """
    if value is None:
        return None

    # bool is an int subclass but never a sensible bound
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        where = f" at index {key}" if key is not None else ""
        raise TypeError(
            f"{which} bound{where} must be a real number, got {type(value).__name__}"
        )

    if np.isnan(value):
        where = f" at index {key}" if key is not None else ""
        raise TypeError(f"{which} bound{where} is NaN")

    return float(value)


def validate_matrix_shape(
    matrix: Any, n_columns: int, rhs: Any
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Validate the data of a matrix constraint ``A x (sense) b``.

    Args:
        matrix: Coefficient matrix, anything numpy can turn into a 2-D array.
        n_columns: Number of variables in ``x``.
        rhs: Right hand side vector.

    Returns:
        Tuple of (A, b) as float numpy arrays.

    Raises:
        DimensionMismatch: If the shapes do not line up.
    """
    a_mat = np.atleast_2d(np.asarray(matrix, dtype=float))
    b_vec = np.atleast_1d(np.asarray(rhs, dtype=float))

    if a_mat.ndim != 2:
        raise DimensionMismatch(f"Coefficient matrix must be 2-D, got {a_mat.ndim}-D")

    if a_mat.shape[1] != n_columns:
        raise DimensionMismatch(
            f"Coefficient matrix has {a_mat.shape[1]} columns but there are {n_columns} variables"
        )

    if b_vec.ndim != 1 or b_vec.shape[0] != a_mat.shape[0]:
        raise DimensionMismatch(
            f"Right hand side has shape {b_vec.shape}, expected ({a_mat.shape[0]},)"
        )

    logger.debug(f"Validated {a_mat.shape[0]}x{a_mat.shape[1]} constraint matrix")
    return a_mat, b_vec
