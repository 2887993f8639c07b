"""Tests for veritas/tensor/invariants.py: invariant checkers on tensors."""

import pytest

from veritas.errors import InvariantViolationError
from veritas.numeric import ONE, ZERO, Circle
from veritas.tensor import Tensor, assert_invariants, check_all
from veritas.tensor.invariants import INVARIANT_REGISTRY


class TestRegistry:
    def test_fresh_tensor_passes_all(self):
        t = Tensor.from_values([1, ZERO / ZERO, 3, 4], [2, 2])
        assert check_all(t) == []
        assert assert_invariants(t) is t

    def test_registry_has_4_invariants(self):
        assert len(INVARIANT_REGISTRY) == 4


class TestGradShapeMatches:
    def test_pass(self):
        t = Tensor.ones([2])
        t.set_grad(Tensor.ones([2]))
        assert "inv_grad_shape_matches" not in check_all(t)

    def test_fail(self):
        t = Tensor.ones([2])
        t.set_grad(Tensor.ones([3]))
        assert "inv_grad_shape_matches" in check_all(t)
        with pytest.raises(InvariantViolationError) as exc:
            assert_invariants(t)
        assert exc.value.violations == ["inv_grad_shape_matches"]


class TestStorageCorruption:
    def test_length(self):
        t = Tensor.ones([2, 2])
        t._data = t.values[:3]
        assert "inv_length_matches_shape" in check_all(t)

    def test_homogeneous_kind(self):
        t = Tensor.ones([2])
        t._data = (ONE, Circle.one())
        assert check_all(t) == ["inv_homogeneous_kind"]
