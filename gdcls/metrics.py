"""
Collection of metric functions which are used throughout the code base.
"""
import numpy as np


def frobenius_norm(X):
    return float(np.linalg.norm(X, ord="fro"))


def residual_norm(V, W, H):
    _wh = np.matmul(W, H)
    residuals = np.subtract(V, _wh)
    return frobenius_norm(residuals)


def relative_error(V, W, H):
    """
    The Frobenius norm of the residual V - WH scaled by the Frobenius norm of V.

    Returns
    -------
    float
        The relative residual, or NaN when V is the zero matrix.
    """
    norm_v = frobenius_norm(V)
    if norm_v <= 0.0:
        return float("nan")
    return residual_norm(V, W, H) / norm_v
