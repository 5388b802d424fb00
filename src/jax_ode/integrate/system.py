"""Evaluation of a system of per-component derivative functions."""

from jax import Array
import jax.numpy as jnp
from jax.typing import ArrayLike

from .custom_types import Context, DerivativeSystem
from .errors import DimensionMismatch
from .vector import as_vector


def check_dimensions(system: DerivativeSystem, y: Array) -> None:
    """Raise `DimensionMismatch` unless there is one function per component of y."""
    if len(system) != y.shape[0]:
        raise DimensionMismatch(
            f"Derivative system has {len(system)} equations but the state "
            f"vector has {y.shape[0]} components.",
            expected=len(system),
            actual=y.shape[0],
        )


def evaluate(
    system: DerivativeSystem,
    x: ArrayLike,
    y: ArrayLike,
    context: Context = ()
) -> Array:
    """
    Evaluate the derivative vector of a system at (x, y).

    Component i is computed as system[i](x, y[i], context). Each function
    only sees its own component; coupling between components has to be
    expressed through `context`, which is passed through untouched.

    Args:
        system: One derivative function per state component.
        x: Value of the independent variable.
        y: State vector.
        context: Auxiliary data forwarded to every function.

    Returns:
        Derivative vector with the same length as y.

    Raises:
        DimensionMismatch: If len(system) != len(y).
    """
    y = as_vector(y)
    check_dimensions(system, y)

    if len(system) == 0:
        return jnp.zeros_like(y)

    return jnp.stack([jnp.asarray(f_i(x, y[i], context)) for i, f_i in enumerate(system)])
