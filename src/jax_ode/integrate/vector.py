"""
Elementwise algebra on state vectors.

All operations return freshly allocated arrays and never modify their
operands. Lengths are checked before any arithmetic so that mismatched
operands raise `DimensionMismatch` instead of broadcasting.
"""

from typing import Sequence, Tuple

from jax import Array
import jax.numpy as jnp
from jax.typing import ArrayLike

from .errors import DimensionMismatch


def as_vector(v: ArrayLike) -> Array:
    """
    Convert an array-like to a one-dimensional JAX array.

    Raises:
        DimensionMismatch: If `v` is not one-dimensional.
    """
    v = jnp.asarray(v)
    if v.ndim != 1:
        raise DimensionMismatch(
            f"Expected a one-dimensional vector, got shape {v.shape}.",
            expected=1,
            actual=v.ndim,
        )
    return v


def _check_length(v: Array, n: int, operation: str) -> None:
    if v.shape[0] != n:
        raise DimensionMismatch(
            f"{operation}: expected a vector of length {n}, got length {v.shape[0]}.",
            expected=n,
            actual=v.shape[0],
        )


def add(a: ArrayLike, b: ArrayLike) -> Array:
    """Elementwise sum a + b of two vectors of equal length."""
    a = as_vector(a)
    b = as_vector(b)
    _check_length(b, a.shape[0], "add")
    return a + b


def scale(v: ArrayLike, k: ArrayLike) -> Array:
    """Multiply every entry of v by the scalar k."""
    return as_vector(v) * k


def combine(terms: Sequence[Tuple[ArrayLike, ArrayLike]]) -> Array:
    """
    Weighted linear combination of vectors.

    Computes $$ r_i = \\sum_j c_j v_{j,i} $$ for terms (v_j, c_j).

    Args:
        terms: Non-empty sequence of (vector, coefficient) pairs. Every vector
            must have the length of the first one.

    Returns:
        The combined vector.

    Raises:
        ValueError: If `terms` is empty.
        DimensionMismatch: If the vectors differ in length.
    """
    if len(terms) == 0:
        raise ValueError("combine requires at least one (vector, coefficient) term.")

    first, _ = terms[0]
    n = as_vector(first).shape[0]

    result = None
    for vec, coef in terms:
        vec = as_vector(vec)
        _check_length(vec, n, "combine")
        term = coef * vec
        result = term if result is None else result + term
    return result
