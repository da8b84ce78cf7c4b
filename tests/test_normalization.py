import sys
import os
src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
sys.path.append(src_path)
import numpy as np
import pytest
from gdcls.normalization import normalize_columns, normalize_rows
from gdcls.exceptions import ShapeMismatch


def _max_diff(W, H, W1, H1):
    return np.max(np.abs(np.matmul(W, H) - np.matmul(W1, H1)))


def test_normalize_columns(rng):
    W = rng.uniform(0.0, 3.0, size=(8, 3))
    H = rng.uniform(0.0, 3.0, size=(3, 6))
    W1, H1 = normalize_columns(W, H)
    assert _max_diff(W, H, W1, H1) < 1e-8
    assert np.allclose(np.linalg.norm(W1, axis=0), 1.0)


def test_normalize_columns_zero_column(rng):
    W = rng.uniform(0.0, 3.0, size=(8, 3))
    W[:, 1] = 0.0
    H = rng.uniform(0.0, 3.0, size=(3, 6))
    W1, H1 = normalize_columns(W, H)
    assert _max_diff(W, H, W1, H1) < 1e-8
    assert np.allclose(np.linalg.norm(W1, axis=0), [1.0, 0.0, 1.0])
    assert np.all(H1[1] == 0.0)


def test_normalize_rows(rng):
    W = rng.uniform(0.0, 3.0, size=(8, 3))
    H = rng.uniform(0.0, 3.0, size=(3, 6))
    W1, H1 = normalize_rows(W, H)
    assert _max_diff(W, H, W1, H1) < 1e-8
    assert np.allclose(np.linalg.norm(H1, axis=1), 1.0)


def test_normalize_rows_zero_row(rng):
    W = rng.uniform(0.0, 3.0, size=(8, 3))
    H = rng.uniform(0.0, 3.0, size=(3, 6))
    H[2] = 0.0
    W1, H1 = normalize_rows(W, H)
    assert np.all(np.isfinite(W1))
    assert np.all(np.isfinite(H1))
    assert _max_diff(W, H, W1, H1) < 1e-8
    assert np.allclose(np.linalg.norm(H1, axis=1), [1.0, 1.0, 0.0])


def test_inputs_unchanged(low_rank_data):
    W = low_rank_data[:, :3].copy()
    H = low_rank_data[:3, :].copy()
    W_copy, H_copy = W.copy(), H.copy()
    normalize_columns(W, H)
    normalize_rows(W, H)
    assert np.array_equal(W, W_copy)
    assert np.array_equal(H, H_copy)


def test_not_conformant():
    with pytest.raises(ShapeMismatch):
        normalize_columns(np.ones((4, 2)), np.ones((3, 5)))
    with pytest.raises(ShapeMismatch):
        normalize_rows(np.ones((4, 2)), np.ones((3, 5)))
