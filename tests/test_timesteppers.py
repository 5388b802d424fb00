"""Unit tests for the time stepping schemes."""

import math

import pytest
import jax.numpy as jnp

from jax_ode.integrate import (
    ForwardEuler,
    ModifiedEuler,
    RK4,
    METHODS,
    ExplicitStepper,
    DimensionMismatch,
    InvalidStep,
    StepperProtocol,
    euler_step,
    modified_euler_step,
    rk4_step,
    get_stepper,
    trajectory,
)

STEPPERS = [ForwardEuler, ModifiedEuler, RK4]
STEP_FUNCTIONS = [euler_step, modified_euler_step, rk4_step]


def decay(x, y, ctx):
    """dy/dx = -y"""
    return -y


def growth(x, y, ctx):
    """dy/dx = y"""
    return y


def integrate(stepper, system, y0, h, n_steps, context=()):
    """Take n_steps fixed steps from x = 0 and return the final state."""
    x, y = 0.0, jnp.asarray(y0)
    for x, y in trajectory(system, x, y, stepper, h, n_steps, context):
        pass
    return x, y


@pytest.fixture
def oscillator_setup():
    """
    Stand-in for the coupled harmonic oscillator y1' = y2, y2' = -y1 with
    y(0) = [1, 0]; this is not the coupled system itself.

    Derivative functions only see their own component, and coupling through
    the context is frozen for a whole step, so the coupled form cannot be
    integrated at higher order. Instead each component's derivative is written
    along the exact solution y1 = cos(t), y2 = -sin(t), which needs no context:
        y1' = -sin(t),  y2' = -cos(t)
    The energy y1^2 + y2^2 equals 1 for all t.
    """
    system = [
        lambda t, y, ctx: -jnp.sin(t),
        lambda t, y, ctx: -jnp.cos(t),
    ]
    return {
        'system': system,
        'y0': jnp.array([1.0, 0.0]),
        'h': 0.01,
        'n_steps': 1000,
    }


class TestSingleStep:
    """dy/dx = -y with y(0) = 1 and h = 0.1."""

    def test_forward_euler(self):
        x, y = ForwardEuler().step([decay], 0.0, [1.0], (), 0.1)
        assert x == pytest.approx(0.1)
        assert y.dtype == jnp.float64
        assert float(y[0]) == 0.9

    def test_modified_euler(self):
        x, y = ModifiedEuler().step([decay], 0.0, [1.0], (), 0.1)
        assert x == pytest.approx(0.1)
        assert float(y[0]) == pytest.approx(0.905, abs=1e-12)

    def test_rk4(self):
        x, y = RK4().step([decay], 0.0, [1.0], (), 0.1)
        assert x == pytest.approx(0.1)
        assert float(y[0]) == pytest.approx(0.904837, abs=1e-6)
        assert float(y[0]) == pytest.approx(math.exp(-0.1), abs=1e-6)

    @pytest.mark.parametrize("stepper_cls, step_fn", zip(STEPPERS, STEP_FUNCTIONS))
    def test_functional_form_matches_module(self, stepper_cls, step_fn):
        system = [decay, growth]
        x_a, y_a = stepper_cls().step(system, 0.5, [1.0, 2.0], (), 0.2)
        x_b, y_b = step_fn(system, 0.5, [1.0, 2.0], (), 0.2)
        assert x_a == x_b
        assert jnp.array_equal(y_a, y_b)


@pytest.mark.parametrize("stepper_cls", STEPPERS)
class TestStepInvariants:

    def test_length_is_preserved(self, stepper_cls):
        system = [decay, growth, lambda x, y, ctx: x]
        _, y = stepper_cls().step(system, 0.0, [1.0, 2.0, 3.0], (), 0.1)
        assert y.shape == (3,)

    def test_zero_step_returns_input(self, stepper_cls):
        def fail(x, y, ctx):
            raise AssertionError("zero step must not evaluate the system")

        y0 = jnp.array([1.0, -2.0])
        x, y = stepper_cls().step([fail, fail], 3.0, y0, (), 0.0)
        assert x == 3.0
        assert jnp.array_equal(y, y0)

    def test_input_is_not_modified(self, stepper_cls):
        y0 = [1.0, 2.0]
        stepper_cls().step([decay, decay], 0.0, y0, (), 0.1)
        assert y0 == [1.0, 2.0]

    def test_negative_step(self, stepper_cls):
        x, y = stepper_cls().step([decay], 1.0, [1.0], (), -0.1)
        assert x == pytest.approx(0.9)
        assert float(y[0]) > 1.0

    def test_dimension_mismatch(self, stepper_cls):
        with pytest.raises(DimensionMismatch):
            stepper_cls().step([decay, decay], 0.0, [1.0], (), 0.1)

    @pytest.mark.parametrize("h", [float('nan'), float('inf'), -float('inf')])
    def test_non_finite_step(self, stepper_cls, h):
        with pytest.raises(InvalidStep):
            stepper_cls().step([decay], 0.0, [1.0], (), h)

    def test_non_finite_state_propagates(self, stepper_cls):
        _, y = stepper_cls().step([decay], 0.0, [float('nan')], (), 0.1)
        assert jnp.isnan(y[0])

    def test_context_passed_to_every_evaluation(self, stepper_cls):
        context = [{'k': 2.0}]
        received = []

        def f(x, y, ctx):
            received.append(ctx)
            return -ctx[0]['k'] * y

        stepper = stepper_cls()
        stepper.step([f, f], 0.0, [1.0, 1.0], context, 0.1)

        assert len(received) == 2 * stepper.stages
        assert all(ctx is context for ctx in received)
        assert context == [{'k': 2.0}]

    def test_context_is_frozen_within_a_step(self, stepper_cls):
        # Coupling through context sees the values the caller supplied for
        # this step, so every scheme reduces to y + h * f(context).
        u, v, h = 1.0, 0.5, 0.1
        system = [lambda x, y, ctx: ctx[0]['v'], lambda x, y, ctx: -ctx[0]['u']]
        _, y = stepper_cls().step(system, 0.0, [u, v], [{'u': u, 'v': v}], h)
        assert jnp.allclose(y, jnp.array([u + h * v, v - h * u]))


@pytest.mark.parametrize("step_fn", STEP_FUNCTIONS)
def test_step_function_dimension_mismatch(step_fn):
    with pytest.raises(DimensionMismatch):
        step_fn([decay, decay], 0.0, [1.0], (), 0.1)


class TestConvergence:
    """Halving h on dy/dx = y over [0, 1] reduces the error by 2**order."""

    @pytest.mark.parametrize(
        "stepper_cls, h, expected_ratio, tol",
        [
            (ForwardEuler, 0.01, 2.0, 0.1),
            (ModifiedEuler, 0.01, 4.0, 0.2),
            (RK4, 0.05, 16.0, 1.0),
        ],
    )
    def test_order_of_accuracy(self, stepper_cls, h, expected_ratio, tol):
        n_steps = round(1.0 / h)
        _, y_coarse = integrate(stepper_cls(), [growth], [1.0], h, n_steps)
        _, y_fine = integrate(stepper_cls(), [growth], [1.0], h / 2, 2 * n_steps)

        err_coarse = abs(float(y_coarse[0]) - math.e)
        err_fine = abs(float(y_fine[0]) - math.e)

        assert err_fine < err_coarse
        assert err_coarse / err_fine == pytest.approx(expected_ratio, abs=tol)
        assert 2 ** stepper_cls.order == expected_ratio

    def test_euler_error_is_linear_in_h(self):
        h = 0.001
        _, y = integrate(ForwardEuler(), [growth], [1.0], h, 1000)
        # Leading error term of Euler for y' = y is e * h / 2
        assert abs(float(y[0]) - math.e) == pytest.approx(math.e * h / 2, rel=0.01)


class TestEnergy:

    def test_rk4_conserves_energy(self, oscillator_setup):
        s = oscillator_setup
        _, y = integrate(RK4(), s['system'], s['y0'], s['h'], s['n_steps'])
        energy = float(y[0] ** 2 + y[1] ** 2)
        assert energy == pytest.approx(1.0, abs=1e-8)

    def test_euler_drifts_more_than_rk4(self, oscillator_setup):
        s = oscillator_setup
        drift = {}
        for stepper in (ForwardEuler(), ModifiedEuler(), RK4()):
            _, y = integrate(stepper, s['system'], s['y0'], s['h'], s['n_steps'])
            drift[type(stepper).__name__] = abs(float(y[0] ** 2 + y[1] ** 2) - 1.0)

        assert drift['RK4'] < drift['ModifiedEuler'] < drift['ForwardEuler']


class TestMethodSelection:

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("euler", ForwardEuler),
            ("forward_euler", ForwardEuler),
            ("modified_euler", ModifiedEuler),
            ("Modified Euler", ModifiedEuler),
            ("heun", ModifiedEuler),
            ("RK4", RK4),
        ],
    )
    def test_lookup_by_name(self, name, expected):
        assert isinstance(get_stepper(name), expected)

    def test_instance_is_returned_unchanged(self):
        stepper = RK4()
        assert get_stepper(stepper) is stepper
        assert isinstance(stepper, StepperProtocol)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown integration method"):
            get_stepper("leapfrog")

    def test_rejects_non_stepper(self):
        with pytest.raises(ValueError):
            get_stepper(42)

    def test_method_table(self):
        assert set(METHODS.values()) == {ForwardEuler, ModifiedEuler, RK4}
        assert [cls.order for cls in STEPPERS] == [1, 2, 4]


class TestExplicitStepperBase:

    def test_subclass_must_implement_increment(self):
        class NoIncrement(ExplicitStepper):
            order = 1
            stages = 1

        with pytest.raises(TypeError):
            NoIncrement()

    def test_subclass_with_increment(self):
        class Constant(ExplicitStepper):
            def increment(self, system, x, y, context, h):
                return y + h

        x, y = Constant().step([decay], 0.0, [1.0], (), 0.5)
        assert x == 0.5
        assert float(y[0]) == 1.5
