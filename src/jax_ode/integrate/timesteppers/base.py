"""Base class for explicit one-step schemes."""

from abc import abstractmethod
from typing import NamedTuple

from flax import nnx
from jax import Array
import jax.numpy as jnp
from jax.typing import ArrayLike

from ..custom_types import Context, DerivativeSystem
from ..errors import InvalidStep
from ..system import check_dimensions
from ..vector import as_vector


class StepResult(NamedTuple):
    """Independent variable and state vector after a step."""

    x: ArrayLike
    y: Array


class ExplicitStepper(nnx.Module):
    """
    Base class for explicit one-step schemes.

    Subclasses implement `increment`, which maps (x, y) to the state at
    x + h. `step` validates the inputs before delegating to it.

    Attributes:
        order: Order of accuracy of the scheme.
        stages: Number of system evaluations per step.
    """

    order = 0
    stages = 0

    def step(
        self,
        system: DerivativeSystem,
        x: ArrayLike,
        y: ArrayLike,
        context: Context,
        h: ArrayLike,
    ) -> StepResult:
        """
        Advance the solution from x to x + h.

        Args:
            system: One derivative function per state component.
            x: Current value of the independent variable.
            y: Current state vector. Not modified.
            context: Auxiliary data forwarded to every derivative function.
            h: Step size. May be negative; zero returns the input state.

        Returns:
            StepResult(x + h, y_next)

        Raises:
            DimensionMismatch: If len(system) != len(y).
            InvalidStep: If h is NaN or infinite.
        """
        y = as_vector(y)
        check_dimensions(system, y)

        if not bool(jnp.all(jnp.isfinite(h))):
            raise InvalidStep(f"Step size must be finite, got h={h}.", step_size=h)

        if h == 0:
            return StepResult(x, jnp.array(y))

        return StepResult(x + h, self.increment(system, x, y, context, h))

    @abstractmethod
    def increment(
        self,
        system: DerivativeSystem,
        x: ArrayLike,
        y: Array,
        context: Context,
        h: ArrayLike,
    ) -> Array:
        """Compute the state at x + h. Inputs are already validated."""
        ...
