"""
Fixed-step RK4 integration of the gating variables.
"""

from .models import GATE_RATES, RateFunc, gating_derivative


def rk4_gating_step(h: float, V: float, x: float,
                    alpha: RateFunc, beta: RateFunc) -> float:
    """
    Advance one gating variable by a single RK4 step.

    The rates are evaluated once at V and held fixed across the four stages;
    only the gating variable itself varies between stages.

    Args:
        h: Step size (ms)
        V: Membrane potential used for this step (mV)
        x: Current value of the gating variable
        alpha: Opening rate function of voltage
        beta: Closing rate function of voltage

    Returns:
        Value of the gating variable after the step
    """
    a = alpha(V)
    b = beta(V)

    k1 = h * gating_derivative(a, b, x)
    k2 = h * gating_derivative(a, b, x + 0.5 * k1)
    k3 = h * gating_derivative(a, b, x + 0.5 * k2)
    k4 = h * gating_derivative(a, b, x + k3)

    return x + (k1 + 2.0 * k2 + 2.0 * k3 + k4) / 6.0


class GatingRK4:
    """
    RK4 stepper bound to a fixed time step.

    Dispatches to the rate functions of a gate by name ('m', 'n' or 'h').
    """

    def __init__(self, dt: float):
        self.dt = dt

    def step(self, V: float, x: float, alpha: RateFunc, beta: RateFunc) -> float:
        """Advance x by one step with the given rate functions."""
        return rk4_gating_step(self.dt, V, x, alpha, beta)

    def step_gate(self, gate: str, V: float, x: float) -> float:
        """Advance the named gate by one step."""
        try:
            alpha, beta = GATE_RATES[gate]
        except KeyError:
            raise ValueError(f"Unknown gate: '{gate}'. Valid options are 'm', 'n' or 'h'.")
        return rk4_gating_step(self.dt, V, x, alpha, beta)
