import jax.numpy as jnp
from matplotlib import pyplot as plt
from jax_ode.integrate import solve_with_history, METHODS

def analytical_decay_solution(x, y0, k):
    """
    Analytical solution of dy/dx = -k * y with y(0) = y0:
    y(x) = y0 * exp(-k * x)
    """
    return y0 * jnp.exp(-k * x)

def main(k=1.5, y0=1.0, x_span=(0.0, 4.0), h=0.25):
    """
    Integrate exponential decay with each explicit method and plot the
    numerical solutions against the analytical one.

    Arguments:
        k - Decay rate, passed to the system through the context (default 1.5)
        y0 - Initial value (default 1.0)
        x_span - Integration interval (default (0.0, 4.0))
        h - Step size (default 0.25)
    """
    # One derivative function per component; the rate comes from the context
    system = [lambda x, y, ctx: -ctx[0]['k'] * y]
    context = [{'k': k}]

    # Store the solution at every step
    x_eval = jnp.arange(x_span[0], x_span[1] + 0.5 * h, h)

    fig, ax = plt.subplots()
    for name in ("euler", "modified_euler", "rk4"):
        print(f"Solving with {METHODS[name].__name__}...")
        x, y = solve_with_history(system, x_span, [y0], name, h, x_eval=x_eval, context=context)

        error = jnp.max(jnp.abs(y[:, 0] - analytical_decay_solution(x, y0, k)))
        print(f"  max abs error = {error:.3e}")

        ax.plot(x, y[:, 0], '-', marker='.', label=name)

    x_fine = jnp.linspace(x_span[0], x_span[1], 200)
    ax.plot(x_fine, analytical_decay_solution(x_fine, y0, k), '--', label="analytical")
    ax.legend()
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    plt.show()

if __name__ == "__main__":
    main()
