"""
Collection of utility functions used throughout the code base.
"""

import numpy as np
import logging
import psutil
import os

from gdcls.exceptions import ShapeError, ShapeMismatch, NumericError

logger = logging.getLogger(__name__)


def validate_matrix(X, name: str = "V", finite: bool = True):
    """
    Convert the input to a two-dimensional float64 numpy array and check that it is a usable data matrix.

    Parameters
    ----------
    X : array_like
        The matrix to validate.
    name : str
        The name of the matrix, used in the error messages.
    finite : bool
        Reject matrices containing NaN or infinite values.

    Returns
    -------
    np.ndarray
        A float64 copy of X with shape (rows, columns).
    """
    try:
        _X = np.array(X, dtype=np.float64)
    except (ValueError, TypeError) as ex:
        logger.error(f"Matrix {name} is not a rectangular numeric matrix. Error: {ex}")
        raise ShapeError(f"Matrix {name} is not a rectangular numeric matrix.") from ex
    if _X.ndim != 2:
        logger.error(f"Matrix {name} must be two dimensional. Current dimensions {_X.shape}")
        raise ShapeError(f"Matrix {name} must be two dimensional, got shape {_X.shape}.")
    if _X.shape[0] == 0 or _X.shape[1] == 0:
        logger.error(f"Matrix {name} must not be empty. Current dimensions {_X.shape}")
        raise ShapeError(f"Matrix {name} must not be empty, got shape {_X.shape}.")
    if finite and not np.all(np.isfinite(_X)):
        logger.error(f"Matrix {name} contains missing or invalid values.")
        raise NumericError(f"Matrix {name} contains missing or invalid values.")
    return _X


def validate_factors(factors):
    """
    Check that the requested rank is a positive integer and return it as an int.
    """
    if isinstance(factors, (bool, np.bool_)) or not isinstance(factors, (int, np.integer)):
        logger.error(f"The number of factors must be an integer. Current type: {type(factors)}")
        raise ShapeError(f"The number of factors must be an integer, got {factors!r}.")
    if factors <= 0:
        logger.error(f"The number of factors must be positive. Current value: {factors}")
        raise ShapeError(f"The number of factors must be positive, got {factors}.")
    return int(factors)


def validate_pair(V: np.ndarray, W, H):
    """
    Validate an existing (W, H) pair against the data matrix V.

    Returns
    -------
    np.ndarray, np.ndarray
        float64 copies of W and H. The values of H are not checked.
    """
    _W = validate_matrix(W, name="W")
    # only the shape of H is used before the first iteration
    _H = validate_matrix(H, name="H", finite=False)
    if _W.shape[1] != _H.shape[0]:
        logger.error(f"The number of columns of W ({_W.shape[1]}) must equal the number of rows of H "
                     f"({_H.shape[0]}).")
        raise ShapeMismatch(f"W has {_W.shape[1]} columns but H has {_H.shape[0]} rows.")
    if _W.shape[0] != V.shape[0]:
        logger.error(f"Factor matrix W must have dimensions of ({V.shape[0]}, {_H.shape[0]}). "
                     f"Current dimensions {_W.shape}")
        raise ShapeMismatch(f"W has {_W.shape[0]} rows but V has {V.shape[0]} rows.")
    if _H.shape[1] != V.shape[1]:
        logger.error(f"Factor matrix H must have dimensions of ({_W.shape[1]}, {V.shape[1]}). "
                     f"Current dimensions {_H.shape}")
        raise ShapeMismatch(f"H has {_H.shape[1]} columns but V has {V.shape[1]} columns.")
    return _W, _H


def memory_estimate(n_samples, n_features, factors, cores: int = None):
    """
    Estimate the memory usage of a single factorization.

    The estimate covers V and the m x n product WH, the W and H matrices with their working copies and the k x k
    normal equations matrix, all in float64.

    Parameters
    ----------
    n_samples
        Number of rows of V.
    n_features
        Number of columns of V.
    factors
        Number of factors.
    cores
        The number of cores requested, defaults to the cpu count.

    Returns
    -------
    dict
        The estimated bytes per model and the maximum number of models that fit in the available memory.
    """
    vm = psutil.virtual_memory()
    available_memory_bytes = int(vm.available)
    cores = os.cpu_count() if cores is None else cores

    max_bytes = 8 * (2 * (n_samples * n_features) + 3 * (n_samples * factors) + 3 * (n_features * factors) +
                     factors * factors)

    if max_bytes > available_memory_bytes:
        logger.warning(f"Estimated memory usage ({max_bytes} bytes) exceeds available memory "
                       f"({available_memory_bytes} bytes).")

    max_parallel = max(int(available_memory_bytes // max(max_bytes, 1)), 1)
    max_cores = max(min(max_parallel, cores), 1)

    if max_bytes / (1024 ** 3) > 1.0:
        byte_string = f"{max_bytes / (1024 ** 3):.4f} GB"
    elif max_bytes / (1024 ** 2) > 1.0:
        byte_string = f"{max_bytes / (1024 ** 2):.4f} MB"
    elif max_bytes / 1024 > 1.0:
        byte_string = f"{max_bytes / 1024:.4f} KB"
    else:
        byte_string = f"{max_bytes} Bytes"

    return {
        "max_cores": max_cores,
        "max_bytes": max_bytes,
        "available_memory_bytes": available_memory_bytes / (1024 ** 3),
        "estimate": byte_string
    }
