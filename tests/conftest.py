import numpy as np
import pytest


@pytest.fixture(scope="session")
def low_rank_data():
    """
    A non-negative 30 x 12 matrix of rank 3 with a small amount of non-negative noise.
    """
    rng = np.random.default_rng(1234)
    W = rng.uniform(0.0, 2.0, size=(30, 3))
    H = rng.uniform(0.0, 2.0, size=(3, 12))
    noise = rng.uniform(0.0, 0.01, size=(30, 12))
    return np.matmul(W, H) + noise


@pytest.fixture()
def rng():
    return np.random.default_rng(42)
