"""Protocols for time-stepping schemes."""

from typing import Protocol, runtime_checkable

from jax.typing import ArrayLike

from ..custom_types import Context, DerivativeSystem
from .base import StepResult


@runtime_checkable
class StepperProtocol(Protocol):
    """
    Protocol for time-stepping schemes.

    Defines the interface for advancing an ODE system by one step.
    Any class implementing a step() method with this signature can be used
    by the drivers in `jax_ode.integrate.solve`.
    """

    def step(
        self,
        system: DerivativeSystem,
        x: ArrayLike,
        y: ArrayLike,
        context: Context,
        h: ArrayLike,
    ) -> StepResult:
        """
        Take a single step.

        Args:
            system: One derivative function per state component.
            x: Current value of the independent variable.
            y: Current state vector.
            context: Auxiliary data forwarded to every derivative function.
            h: Step size.

        Returns:
            (x + h, state at x + h)
        """
        ...
