"""Test Hessian representations."""

import jax.numpy as jnp
import pytest

from optimjax import DenseHessian, DiagonalHessian, InverseHessian, as_hessian, hessian_dot, to_dense
from optimjax.hessian import hessian_size


class TestHessian:
    
    def test_as_hessian_from_arrays(self):
        assert isinstance(as_hessian(jnp.eye(3)), DenseHessian)
        assert isinstance(as_hessian(jnp.ones(3)), DiagonalHessian)
    
    def test_as_hessian_passes_instances_through(self):
        H = InverseHessian(jnp.eye(2))
        assert as_hessian(H) is H
    
    def test_as_hessian_rejects_bad_input(self):
        with pytest.raises(TypeError):
            as_hessian(jnp.ones((2, 2, 2)))
        with pytest.raises(TypeError):
            as_hessian("not a hessian")
    
    def test_products_agree(self):
        """All representations of the same matrix give the same product."""
        M = jnp.array([[4.0, 1.0], [1.0, 3.0]])
        v = jnp.array([1.0, -2.0])
        
        dense = hessian_dot(DenseHessian(M), v)
        inverse = hessian_dot(InverseHessian(jnp.linalg.inv(M)), v)
        
        assert jnp.allclose(dense, M @ v)
        assert jnp.allclose(inverse, M @ v, atol=1e-12)
        assert jnp.allclose(hessian_dot(DiagonalHessian(jnp.array([2.0, 5.0])), v), jnp.array([2.0, -10.0]))
    
    def test_to_dense(self):
        M = jnp.array([[4.0, 1.0], [1.0, 3.0]])
        
        assert jnp.allclose(to_dense(DenseHessian(M)), M)
        assert jnp.allclose(to_dense(InverseHessian(jnp.linalg.inv(M))), M, atol=1e-12)
        assert jnp.allclose(to_dense(DiagonalHessian(jnp.array([1.0, 2.0]))), jnp.diag(jnp.array([1.0, 2.0])))
    
    def test_hessian_size(self):
        assert hessian_size(DiagonalHessian(jnp.ones(4))) == 4
        assert hessian_size(DenseHessian(jnp.eye(3))) == 3
        assert hessian_size(InverseHessian(jnp.eye(2))) == 2


if __name__ == "__main__":
    pytest.main([__file__])
