import math
import time
from typing import Iterator, Optional, Tuple, Union

from jax import Array
import jax.numpy as jnp
from jax.typing import ArrayLike

from .custom_types import Context, DerivativeSystem
from .errors import InvalidStep
from .timesteppers import StepperProtocol, StepResult, get_stepper
from .vector import as_vector

# Relative slack so a span that is a whole number of steps is not given an extra one
_SPAN_RTOL = 1e-9


def _check_step_size(x_span: Tuple[float, float], step_size: float) -> None:
    """Validate a step size for integrating over a non-empty span."""
    x_start, x_end = x_span
    if not bool(jnp.isfinite(step_size)) or step_size == 0:
        raise InvalidStep(
            f"Cannot integrate over {x_span} with step_size={step_size}.",
            step_size=step_size,
        )
    if (x_end > x_start) != (step_size > 0):
        raise ValueError(
            f"step_size={step_size} points away from x_end={x_end} "
            f"(x_start={x_start})"
        )


def _count_steps(x_span: Tuple[float, float], step_size: float) -> int:
    """Number of steps needed to cover a non-empty span, at least one."""
    x_start, x_end = x_span
    ratio = abs((x_end - x_start) / step_size)
    return max(1, math.ceil(ratio * (1.0 - _SPAN_RTOL)))


def trajectory(
    system: DerivativeSystem,
    x0: float,
    y0: ArrayLike,
    method: Union[str, StepperProtocol],
    step_size: float,
    n_steps: int,
    context: Context = ()
) -> Iterator[StepResult]:
    """
    Lazily take `n_steps` fixed steps, yielding the state after each one.

    The caller owns the loop: stopping iteration between steps cancels the
    integration.

    Args:
        system: One derivative function per state component.
        x0: Initial value of the independent variable.
        y0: Initial state vector.
        method: Stepper instance or method name (e.g. "rk4", "heun").
        step_size: Step size h.
        n_steps: Number of steps to take.
        context: Auxiliary data forwarded to every derivative function.

    Yields:
        StepResult(x, y) after each step.

    Example usage:
    ```python
    from jax_ode.integrate import trajectory

    decay = [lambda x, y, ctx: -y]

    for x, y in trajectory(decay, 0.0, [1.0], "rk4", 0.1, n_steps=100):
        if y[0] < 0.5:
            break
    ```
    """
    if n_steps < 0:
        raise ValueError(f"n_steps must be non-negative, got {n_steps}")

    stepper = get_stepper(method)
    x, y = x0, as_vector(y0)
    for _ in range(n_steps):
        x, y = stepper.step(system, x, y, context, step_size)
        yield StepResult(x, y)


def solve_ivp(
    system: DerivativeSystem,
    x_span: Tuple[float, float],
    y0: ArrayLike,
    method: Union[str, StepperProtocol],
    step_size: float,
    context: Context = ()
) -> StepResult:
    """
    Integrate dy_i/dx = system[i](x, y_i, context) over the interval x_span.

    Args:
        system: One derivative function per state component.
        x_span: (x_start, x_end) interval. x_end < x_start integrates backwards.
        y0: Initial condition
        method: Stepper instance or method name (e.g. "euler", "rk4")
        step_size: Step size. Its sign must match the direction of x_span.
        context: Auxiliary data forwarded to every derivative function.

    Returns:
        x_final: Final value of the independent variable (equal to x_end)
        y_final: Solution at x_end

    Example usage:
    ```python
    from jax_ode.integrate import solve_ivp, RK4

    # dy/dx = -k*y, with k supplied through the context
    system = [lambda x, y, ctx: -ctx[0]['k'] * y]

    x, y = solve_ivp(system, (0.0, 2.0), [1.0], RK4(), 0.01, context=[{'k': 0.5}])
    ```
    """
    x_start, x_end = x_span
    stepper = get_stepper(method)
    y = as_vector(y0)

    if x_end == x_start:
        return StepResult(x_start, jnp.array(y))
    _check_step_size(x_span, step_size)

    n_steps = _count_steps(x_span, step_size)

    # Grid points are x_start + i*h; the final one is clamped to x_end
    x = x_start
    for i in range(1, n_steps + 1):
        x_next = x_end if i == n_steps else x_start + i * step_size
        _, y = stepper.step(system, x, y, context, x_next - x)
        x = x_next
    return StepResult(x_end, y)


def solve_with_history(
    system: DerivativeSystem,
    x_span: Tuple[float, float],
    y0: ArrayLike,
    method: Union[str, StepperProtocol],
    step_size: float,
    x_eval: Optional[ArrayLike] = None,
    context: Context = (),
    verbose: bool = False
) -> Tuple[Array, Array]:
    """
    Integrate over x_span, storing the solution at the points `x_eval`.

    The integration is done in chunks by calling `solve_ivp` between
    consecutive evaluation points, so every stored state lies exactly on
    its evaluation point.

    Args:
        system: One derivative function per state component.
        x_span: (x_start, x_end) interval
        y0: Initial condition
        method: Stepper instance or method name
        step_size: Step size for integration.
        x_eval: Points at which to store the computed solution.
            If None, returns only the initial and final states.
            Must be ordered in the direction of integration and lie within x_span.
        context: Auxiliary data forwarded to every derivative function.
        verbose: Print progress information

    Returns:
        x: Array of evaluation points, shape (n_points,)
        y: Array of solution values at x, shape (n_points, len(y0))

    Example usage:
    ```python
    import jax.numpy as jnp
    from jax_ode.integrate import solve_with_history

    # Harmonic oscillator in the form x'' = -x, written per component
    system = [lambda t, y, ctx: -jnp.sin(t), lambda t, y, ctx: -jnp.cos(t)]
    x_eval = jnp.linspace(0.0, 2.0 * jnp.pi, 9)

    x, y = solve_with_history(
        system, (0.0, 2.0 * jnp.pi), [1.0, 0.0], "rk4", 0.01, x_eval=x_eval
    )
    ```
    """
    x_start, x_end = x_span
    stepper = get_stepper(method)
    y = as_vector(y0)

    # Set up evaluation points
    lo, hi = min(x_start, x_end), max(x_start, x_end)
    if x_eval is None:
        # Only save initial and final states
        x_eval = jnp.array([x_start, x_end])
    else:
        # Validate x_eval
        x_eval = jnp.asarray(x_eval)
        if x_eval.ndim != 1 or x_eval.size == 0:
            raise ValueError("x_eval must be a non-empty one-dimensional array")
        if jnp.any(x_eval < lo) or jnp.any(x_eval > hi):
            raise ValueError("All values in x_eval must be within x_span")
        direction = 1.0 if x_end >= x_start else -1.0
        if jnp.any(direction * jnp.diff(x_eval) < 0):
            raise ValueError("x_eval must be ordered in the direction of integration")

        # Ensure x_start is included
        if x_eval[0] != x_start:
            x_eval = jnp.concatenate([jnp.array([x_start], dtype=x_eval.dtype), x_eval])

    n_steps_total = 0
    if x_end != x_start:
        _check_step_size(x_span, step_size)
        n_steps_total = _count_steps(x_span, step_size)

    if verbose:
        method_name = type(stepper).__name__
        print(f"Solving with {method_name}")
        print(
            f"Span: [{x_start}, {x_end}], h={step_size}, "
            f"~{n_steps_total} total steps"
        )
        print(f"Evaluating at {len(x_eval)} points")

    # Integrate between consecutive evaluation points:
    y_save = [y]
    x_save = [x_start]
    warned = False

    start_wallclock = time.time()

    for i in range(len(x_eval) - 1):
        x_i = float(x_eval[i])
        x_ip1 = float(x_eval[i + 1])
        x, y = solve_ivp(system, (x_i, x_ip1), y, stepper, step_size, context)
        x_save.append(x)
        y_save.append(y)

        if verbose and not warned and not bool(jnp.all(jnp.isfinite(y))):
            print(
                f"WARNING: Solution became non-finite by x={x}. "
                f"Consider a smaller step size."
            )
            warned = True

    x_arr = jnp.asarray(x_save)
    y_arr = jnp.stack(y_save, axis=0)

    elapsed_wallclock = time.time() - start_wallclock

    if verbose:
        print(
            f"Completed in {elapsed_wallclock:.3f}s "
            f"({n_steps_total / max(elapsed_wallclock, 1e-9):.1f} steps/s)"
        )

    return x_arr, y_arr
