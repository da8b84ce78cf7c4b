"""
Interpretation of basis vectors: pairing the largest coordinates of a vector with external labels.
"""
import numpy as np
import pandas as pd
import logging

logger = logging.getLogger(__name__)


def top_labeled(vec, n: int, labels):
    """
    Take the n largest coordinates of vec and pair them with the corresponding labels.

    The n coordinates with the largest magnitude are selected, ties going to the higher index, and returned ordered
    by weight from largest to smallest.

    Parameters
    ----------
    vec : array_like
       The vector of length L, typically a column of W.
    n : int
       The number of coordinates to return, 0 <= n <= L.
    labels : sequence
       The labels of the coordinates, of length L.

    Returns
    -------
    list
       A list of n (weight, label) tuples.
    """
    vec = np.asarray(vec)
    if vec.ndim != 1:
        vec = vec.ravel()
    labels = list(labels)
    size = vec.shape[0]
    if len(labels) != size:
        raise IndexError(f"The number of labels ({len(labels)}) does not match the vector length ({size}).")
    if n < 0 or n > size:
        raise IndexError(f"Cannot take {n} coordinates from a vector of length {size}.")
    index = np.arange(size)
    # np.lexsort sorts on the last key first, ascending
    by_magnitude = np.lexsort((index, np.abs(vec)))[::-1][:n]
    selected = by_magnitude[np.lexsort((by_magnitude, vec[by_magnitude]))[::-1]]
    return [(vec[i].item(), labels[i]) for i in selected]


def interpret_basis(W, n: int, labels, factor_names: list = None):
    """
    Apply top_labeled to every column of W.

    Parameters
    ----------
    W : np.ndarray
       The basis matrix, shape (m, k).
    n : int
       The number of coordinates to take from each column.
    labels : sequence
       The labels of the m rows of W.
    factor_names : list
       Optional names for the k columns. Default: 'Factor 1' ... 'Factor k'.

    Returns
    -------
    pd.DataFrame
       One row per selected coordinate with columns factor, rank, weight and label.
    """
    W = np.asarray(W)
    if W.ndim != 2:
        raise IndexError(f"The basis matrix must be two dimensional, got shape {W.shape}.")
    if factor_names is None:
        factor_names = [f"Factor {i + 1}" for i in range(W.shape[1])]
    if len(factor_names) != W.shape[1]:
        raise IndexError(f"The number of factor names ({len(factor_names)}) does not match the number of "
                         f"columns of W ({W.shape[1]}).")
    rows = []
    for j, factor in enumerate(factor_names):
        for rank, (weight, label) in enumerate(top_labeled(W[:, j], n, labels), start=1):
            rows.append({"factor": factor, "rank": rank, "weight": weight, "label": label})
    return pd.DataFrame(rows, columns=["factor", "rank", "weight", "label"])
