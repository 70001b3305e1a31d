"""
Hodgkin-Huxley rate functions, derivatives, and state records.

Voltages follow the original 1952 convention: resting potential at 0 mV,
depolarization positive.
"""

import numpy as np
from typing import Callable, Dict, NamedTuple, Tuple
from dataclasses import dataclass, asdict


RateFunc = Callable[[float], float]

# Below this the alpha_m / alpha_n denominators are treated as zero
SINGULARITY_TOL = 1e-7


@dataclass(frozen=True)
class SimulationConstants:
    """
    Membrane constants held fixed for the duration of a run.
    """
    # Maximal conductances (mS/cm^2)
    g_Na: float = 120.0
    g_K: float = 36.0
    g_L: float = 0.3

    # Reversal potentials (mV)
    E_Na: float = 115.0
    E_K: float = -12.0
    E_L: float = 10.613

    # Injected current (uA/cm^2)
    I_ext: float = 10.0

    def to_dict(self) -> Dict[str, float]:
        """Convert constants to dictionary."""
        return asdict(self)


@dataclass
class MembraneState:
    """
    Current membrane state: voltage and the three gating variables.
    """
    V: float
    m: float
    n: float
    h: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.V, self.m, self.n, self.h)


class TimeSeriesSample(NamedTuple):
    """Snapshot of the membrane state at time t (ms)."""
    t: float
    V: float
    m: float
    n: float
    h: float


# Gating variable rate functions (alpha and beta)
# Following Hodgkin & Huxley 1952 formulation

def alpha_m_func(V: float) -> float:
    """
    Sodium activation opening rate (m gate).

    alpha_m = 0.1 * (25 - V) / (exp((25 - V) / 10) - 1)
    """
    x = 25.0 - V
    denom = np.exp(x / 10.0) - 1.0
    # Removable singularity at V = 25
    if abs(denom) < SINGULARITY_TOL:
        return 1.0
    return 0.1 * x / denom


def beta_m_func(V: float) -> float:
    """
    Sodium activation closing rate (m gate).

    beta_m = 4.0 * exp(-V / 18)
    """
    return 4.0 * np.exp(-V / 18.0)


def alpha_n_func(V: float) -> float:
    """
    Potassium activation opening rate (n gate).

    alpha_n = 0.01 * (10 - V) / (exp((10 - V) / 10) - 1)
    """
    x = 10.0 - V
    denom = np.exp(x / 10.0) - 1.0
    # Removable singularity at V = 10
    if abs(denom) < SINGULARITY_TOL:
        return 0.1
    return 0.01 * x / denom


def beta_n_func(V: float) -> float:
    """
    Potassium activation closing rate (n gate).

    beta_n = 0.125 * exp(-V / 80)
    """
    return 0.125 * np.exp(-V / 80.0)


def alpha_h_func(V: float) -> float:
    """
    Sodium inactivation opening rate (h gate).

    alpha_h = 0.07 * exp(-V / 20)
    """
    return 0.07 * np.exp(-V / 20.0)


def beta_h_func(V: float) -> float:
    """
    Sodium inactivation closing rate (h gate).

    beta_h = 1.0 / (exp((30 - V) / 10) + 1)
    """
    return 1.0 / (np.exp((30.0 - V) / 10.0) + 1.0)


GATE_RATES: Dict[str, Tuple[RateFunc, RateFunc]] = {
    'm': (alpha_m_func, beta_m_func),
    'n': (alpha_n_func, beta_n_func),
    'h': (alpha_h_func, beta_h_func),
}


def steady_state(alpha: RateFunc, beta: RateFunc, V: float) -> float:
    """Steady-state value x_inf = alpha / (alpha + beta) at voltage V."""
    a = alpha(V)
    b = beta(V)
    return a / (a + b)


def time_constant(alpha: RateFunc, beta: RateFunc, V: float) -> float:
    """Relaxation time constant tau = 1 / (alpha + beta) at voltage V (ms)."""
    return 1.0 / (alpha(V) + beta(V))


def steady_gates(V: float) -> Tuple[float, float, float]:
    """Return (m_inf, n_inf, h_inf) at voltage V."""
    return tuple(steady_state(alpha, beta, V) for alpha, beta in
                 (GATE_RATES['m'], GATE_RATES['n'], GATE_RATES['h']))


def gating_derivative(alpha: float, beta: float, x: float) -> float:
    """
    Rate of change of a gating variable.

    dx/dt = alpha * (1 - x) - beta * x, used identically for m, n and h.
    """
    return alpha * (1.0 - x) - beta * x


def compute_currents(state: MembraneState,
                     constants: SimulationConstants) -> Dict[str, float]:
    """
    Compute ionic currents for given state and constants.

    Returns:
        Dictionary with keys: 'I_Na', 'I_K', 'I_L', 'I_ion' (total ionic current)
    """
    V = state.V

    # Sodium current
    I_Na = constants.g_Na * (state.m ** 3) * state.h * (V - constants.E_Na)

    # Potassium current
    I_K = constants.g_K * (state.n ** 4) * (V - constants.E_K)

    # Leak current
    I_L = constants.g_L * (V - constants.E_L)

    return {
        'I_Na': I_Na,
        'I_K': I_K,
        'I_L': I_L,
        'I_ion': I_Na + I_K + I_L
    }


def dv_dt(state: MembraneState, constants: SimulationConstants) -> float:
    """
    Rate of change of membrane potential (unit capacitance).

    dV/dt = -g_Na*m^3*h*(V - E_Na) - g_K*n^4*(V - E_K) - g_L*(V - E_L) + I_ext
    """
    V, m, n, h = state.as_tuple()
    return (-constants.g_Na * m * m * m * h * (V - constants.E_Na)
            - constants.g_K * n * n * n * n * (V - constants.E_K)
            - constants.g_L * (V - constants.E_L)
            + constants.I_ext)
