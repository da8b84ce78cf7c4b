"""
Rescaling transforms for a factorization W H. Both transforms return a new pair (W', H') with W' H' = W H.
"""
import numpy as np
import logging

from gdcls.exceptions import ShapeMismatch

logger = logging.getLogger(__name__)


def _check_pair(W, H):
    W = np.asarray(W, dtype=np.float64)
    H = np.asarray(H, dtype=np.float64)
    if W.ndim != 2 or H.ndim != 2 or W.shape[1] != H.shape[0]:
        logger.error(f"Matrix product is not conformant. W: {W.shape}, H: {H.shape}")
        raise ShapeMismatch(f"Matrix product is not conformant, W: {W.shape}, H: {H.shape}.")
    return W, H


def _inverse(d):
    inverse = np.zeros_like(d)
    np.divide(1.0, d, out=inverse, where=d != 0)
    return inverse


def normalize_columns(W, H):
    """
    Scale the columns of W to unit Euclidean norm and move the scale into the rows of H.

    Zero columns of W stay zero.

    Parameters
    ----------
    W : np.ndarray
       Shape (m, k).
    H : np.ndarray
       Shape (k, n).

    Returns
    -------
    np.ndarray, np.ndarray
       W S^-1 and S H where S = diag(||W[:, j]||).
    """
    W, H = _check_pair(W, H)
    d = np.linalg.norm(W, axis=0)
    S = np.diag(d)
    SI = np.diag(_inverse(d))
    return np.matmul(W, SI), np.matmul(S, H)


def normalize_rows(W, H):
    """
    Scale the rows of H to unit Euclidean norm and move the scale into the columns of W.

    A zero row of H is treated as already normalized, it stays zero and the matching column of W becomes zero, which
    leaves the product unchanged.

    Parameters
    ----------
    W : np.ndarray
       Shape (m, k).
    H : np.ndarray
       Shape (k, n).

    Returns
    -------
    np.ndarray, np.ndarray
       W S and S^-1 H where S = diag(||H[i, :]||).
    """
    W, H = _check_pair(W, H)
    d = np.linalg.norm(H, axis=1)
    S = np.diag(d)
    SI = np.diag(_inverse(d))
    return np.matmul(W, S), np.matmul(SI, H)
