import sys
import os
src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
sys.path.append(src_path)
import numpy as np
import pytest
from gdcls.interpretation import top_labeled, interpret_basis


def test_top_labeled():
    result = top_labeled([0.1, 0.9, 0.3, 0.05], 2, ["a", "b", "c", "d"])
    assert result == [(0.9, "b"), (0.3, "c")]


def test_top_labeled_all(rng):
    vec = rng.uniform(0.0, 1.0, size=10)
    labels = [f"term{i}" for i in range(10)]
    result = top_labeled(vec, 10, labels)
    weights = [w for w, _ in result]
    assert len(result) == 10
    assert weights == sorted(weights, reverse=True)
    assert top_labeled(vec, 0, labels) == []


def test_top_labeled_largest_indices(rng):
    vec = rng.uniform(0.0, 1.0, size=25)
    labels = [f"term{i}" for i in range(25)]
    result = top_labeled(vec, 5, labels)
    expected = {labels[i] for i in np.argsort(vec)[-5:]}
    assert {label for _, label in result} == expected


def test_top_labeled_magnitude():
    result = top_labeled([0.2, -0.9, 0.5, 0.1], 2, ["a", "b", "c", "d"])
    assert {label for _, label in result} == {"b", "c"}
    assert result == [(0.5, "c"), (-0.9, "b")]


def test_top_labeled_ties():
    result = top_labeled([0.5, 0.2, 0.5, 0.5], 2, ["a", "b", "c", "d"])
    assert result == [(0.5, "d"), (0.5, "c")]


def test_top_labeled_errors():
    with pytest.raises(IndexError):
        top_labeled([0.1, 0.2], 3, ["a", "b"])
    with pytest.raises(IndexError):
        top_labeled([0.1, 0.2], 1, ["a", "b", "c"])
    with pytest.raises(IndexError):
        top_labeled([0.1, 0.2], -1, ["a", "b"])


def test_interpret_basis():
    W = np.array([[0.1, 0.7], [0.9, 0.2], [0.3, 0.4]])
    frame = interpret_basis(W, 2, ["x", "y", "z"])
    assert list(frame.columns) == ["factor", "rank", "weight", "label"]
    assert len(frame) == 4
    first = frame[frame["factor"] == "Factor 1"]
    assert list(first["label"]) == ["y", "z"]
    assert list(first["rank"]) == [1, 2]
    second = frame[frame["factor"] == "Factor 2"]
    assert list(second["label"]) == ["x", "z"]

    frame = interpret_basis(W, 1, ["x", "y", "z"], factor_names=["f1", "f2"])
    assert list(frame["factor"]) == ["f1", "f2"]
    with pytest.raises(IndexError):
        interpret_basis(W, 1, ["x", "y", "z"], factor_names=["f1"])
