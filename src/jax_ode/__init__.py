"""
JAX ODE steppers

Fixed-step explicit integrators (Euler, modified Euler, RK4) for systems of
first-order ODEs given as one derivative function per component.

Main components:
- integrate: vector algebra, system evaluation, steppers and drivers
"""

import jax

# Step results and error-order behaviour assume float64 state vectors
jax.config.update("jax_enable_x64", True)

from .integrate import (
    solve_ivp,
    solve_with_history,
    trajectory,
    ForwardEuler,
    ModifiedEuler,
    RK4,
    get_stepper,
    euler_step,
    modified_euler_step,
    rk4_step,
    DimensionMismatch,
    InvalidStep,
)

__all__ = [
    # Drivers
    "solve_ivp",
    "solve_with_history",
    "trajectory",

    # ODE integration methods
    "ForwardEuler",
    "ModifiedEuler",
    "RK4",
    "get_stepper",
    "euler_step",
    "modified_euler_step",
    "rk4_step",

    # Errors
    "DimensionMismatch",
    "InvalidStep",
]
