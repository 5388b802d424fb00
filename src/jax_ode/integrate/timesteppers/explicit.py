"""Explicit time-stepping schemes."""

from typing import Dict, Type, Union

from jax import Array
from jax.typing import ArrayLike

from ..custom_types import Context, DerivativeSystem
from ..system import evaluate
from ..vector import add, combine, scale
from .base import ExplicitStepper, StepResult
from .protocol import StepperProtocol


class ForwardEuler(ExplicitStepper):
    """
    Forward Euler method.

    Discretisation:
        $$ \\frac{\\partial y}{\\partial x} \\rightarrow
        \\frac{(y_{n+1} - y_n)}{h} = f(x_n, y_n) $$
    """

    order = 1
    stages = 1

    def increment(
        self,
        system: DerivativeSystem,
        x: ArrayLike,
        y: Array,
        context: Context,
        h: ArrayLike,
    ) -> Array:
        """Computes $$ y_{n+1} = y_n + h f(x_n, y_n). $$"""
        k = evaluate(system, x, y, context)
        return add(y, scale(k, h))


class ModifiedEuler(ExplicitStepper):
    """
    Modified Euler (Heun) predictor-corrector method.

    Predictor: $$ \\tilde{y} = y_n + h f(x_n, y_n) $$
    Corrector: $$ y_{n+1} = y_n + \\frac{h}{2}
        \\left( f(x_n, y_n) + f(x_n + h, \\tilde{y}) \\right) $$
    """

    order = 2
    stages = 2

    def increment(
        self,
        system: DerivativeSystem,
        x: ArrayLike,
        y: Array,
        context: Context,
        h: ArrayLike,
    ) -> Array:
        k1 = evaluate(system, x, y, context)
        k2 = evaluate(system, x + h, add(y, scale(k1, h)), context)
        k_avg = scale(add(k1, k2), 0.5)
        return add(y, scale(k_avg, h))


class RK4(ExplicitStepper):
    """
    Fourth (4th) order Runge-Kutta method.

    Implements: StepperProtocol
    """

    order = 4
    stages = 4

    def increment(
        self,
        system: DerivativeSystem,
        x: ArrayLike,
        y: Array,
        context: Context,
        h: ArrayLike,
    ) -> Array:
        k1 = evaluate(system, x, y, context)
        k2 = evaluate(system, x + 0.5 * h, add(y, scale(k1, 0.5 * h)), context)
        k3 = evaluate(system, x + 0.5 * h, add(y, scale(k2, 0.5 * h)), context)
        k4 = evaluate(system, x + h, add(y, scale(k3, h)), context)
        weighted = combine([(k1, 1.0), (k2, 2.0), (k3, 2.0), (k4, 1.0)])
        return add(y, scale(weighted, h / 6.0))


METHODS: Dict[str, Type[ExplicitStepper]] = {
    "euler": ForwardEuler,
    "forward_euler": ForwardEuler,
    "modified_euler": ModifiedEuler,
    "heun": ModifiedEuler,
    "rk4": RK4,
}


def get_stepper(method: Union[str, StepperProtocol]) -> StepperProtocol:
    """
    Resolve a method selection to a stepper instance.

    Args:
        method: A stepper instance, returned unchanged, or one of the names
            in `METHODS` (case-insensitive).

    Returns:
        Stepper instance.
    """
    if isinstance(method, str):
        key = method.strip().lower().replace("-", "_").replace(" ", "_")
        if key not in METHODS:
            raise ValueError(
                f"Unknown integration method '{method}'. "
                f"Available methods: {sorted(METHODS)}"
            )
        return METHODS[key]()

    if not isinstance(method, StepperProtocol):
        raise ValueError(
            f"Expected a method name or a stepper with a step() method, "
            f"got {type(method).__name__}."
        )
    return method


def euler_step(
    system: DerivativeSystem,
    x: ArrayLike,
    y: ArrayLike,
    context: Context,
    h: ArrayLike,
) -> StepResult:
    """Single forward Euler step. See `ForwardEuler`."""
    return ForwardEuler().step(system, x, y, context, h)


def modified_euler_step(
    system: DerivativeSystem,
    x: ArrayLike,
    y: ArrayLike,
    context: Context,
    h: ArrayLike,
) -> StepResult:
    """Single modified Euler (Heun) step. See `ModifiedEuler`."""
    return ModifiedEuler().step(system, x, y, context, h)


def rk4_step(
    system: DerivativeSystem,
    x: ArrayLike,
    y: ArrayLike,
    context: Context,
    h: ArrayLike,
) -> StepResult:
    """Single classical Runge-Kutta step. See `RK4`."""
    return RK4().step(system, x, y, context, h)
