"""Time-stepping schemes for initial value problems."""

from .base import ExplicitStepper, StepResult
from .protocol import StepperProtocol
from .explicit import (
    ForwardEuler,
    ModifiedEuler,
    RK4,
    METHODS,
    get_stepper,
    euler_step,
    modified_euler_step,
    rk4_step,
)

__all__ = [
    # Base class and interface
    'ExplicitStepper',
    'StepperProtocol',
    'StepResult',

    # Explicit methods
    'ForwardEuler',
    'ModifiedEuler',
    'RK4',

    # Method selection
    'METHODS',
    'get_stepper',

    # Functional forms
    'euler_step',
    'modified_euler_step',
    'rk4_step',
]
