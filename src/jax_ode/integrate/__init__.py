"""
Fixed-step explicit integration of ODE systems written in JAX.
"""

# Solver interfaces
from .solve import trajectory, solve_ivp, solve_with_history

# Time-stepping schemes
from .timesteppers import (
    ExplicitStepper,
    StepperProtocol,
    StepResult,
    ForwardEuler,
    ModifiedEuler,
    RK4,
    METHODS,
    get_stepper,
    euler_step,
    modified_euler_step,
    rk4_step,
)

# Building blocks
from .vector import as_vector, add, scale, combine
from .system import check_dimensions, evaluate
from .errors import DimensionMismatch, InvalidStep

__all__ = [
    # Solver interfaces
    'trajectory',
    'solve_ivp',
    'solve_with_history',

    # Time-stepping methods
    'ExplicitStepper',
    'StepperProtocol',
    'StepResult',
    'ForwardEuler',
    'ModifiedEuler',
    'RK4',
    'METHODS',
    'get_stepper',
    'euler_step',
    'modified_euler_step',
    'rk4_step',

    # Vector algebra and system evaluation
    'as_vector',
    'add',
    'scale',
    'combine',
    'check_dimensions',
    'evaluate',

    # Errors
    'DimensionMismatch',
    'InvalidStep',
]
