"""
Numba-accelerated kernel for the lagged-gating HH scheme.

Mirrors hhsim.simulator.Simulator step for step; useful for long time windows
where per-step Python overhead dominates.
"""

import numpy as np
from numba import njit


# Numba-jitted gating functions
@njit
def alpha_m(V):
    """Sodium activation opening rate (m gate)."""
    x = 25.0 - V
    denom = np.exp(x / 10.0) - 1.0
    if abs(denom) < 1e-7:
        return 1.0
    return 0.1 * x / denom


@njit
def beta_m(V):
    """Sodium activation closing rate (m gate)."""
    return 4.0 * np.exp(-V / 18.0)


@njit
def alpha_n(V):
    """Potassium activation opening rate (n gate)."""
    x = 10.0 - V
    denom = np.exp(x / 10.0) - 1.0
    if abs(denom) < 1e-7:
        return 0.1
    return 0.01 * x / denom


@njit
def beta_n(V):
    """Potassium activation closing rate (n gate)."""
    return 0.125 * np.exp(-V / 80.0)


@njit
def alpha_h(V):
    """Sodium inactivation opening rate (h gate)."""
    return 0.07 * np.exp(-V / 20.0)


@njit
def beta_h(V):
    """Sodium inactivation closing rate (h gate)."""
    return 1.0 / (np.exp((30.0 - V) / 10.0) + 1.0)


@njit
def rk4_gate(h, a, b, x):
    """RK4 step of dx/dt = a*(1-x) - b*x with a, b held fixed."""
    k1 = h * (a * (1.0 - x) - b * x)
    x2 = x + 0.5 * k1
    k2 = h * (a * (1.0 - x2) - b * x2)
    x3 = x + 0.5 * k2
    k3 = h * (a * (1.0 - x3) - b * x3)
    x4 = x + k3
    k4 = h * (a * (1.0 - x4) - b * x4)
    return x + (k1 + 2.0 * k2 + 2.0 * k3 + k4) / 6.0


@njit
def simulate_lagged(V0, m0, n0, h0,
                    g_Na, g_K, g_L, E_Na, E_K, E_L, I_ext,
                    t_start, dt, n_steps, label_offset):
    """
    Run the full time loop.

    Returns:
        Array of shape (n_steps + 1, 5) with columns [t, V, m, n, h]
    """
    out = np.empty((n_steps + 1, 5))
    V = V0
    m = m0
    n = n0
    h = h0

    out[0, 0] = t_start
    out[0, 1] = V
    out[0, 2] = m
    out[0, 3] = n
    out[0, 4] = h

    for i in range(n_steps):
        # Gates first, all against the previous voltage
        m = rk4_gate(dt, alpha_m(V), beta_m(V), m)
        n = rk4_gate(dt, alpha_n(V), beta_n(V), n)
        h = rk4_gate(dt, alpha_h(V), beta_h(V), h)

        dv = (-g_Na * m * m * m * h * (V - E_Na)
              - g_K * n * n * n * n * (V - E_K)
              - g_L * (V - E_L)
              + I_ext)
        V = V + dv * dt

        out[i + 1, 0] = t_start + (i + label_offset) * dt
        out[i + 1, 1] = V
        out[i + 1, 2] = m
        out[i + 1, 3] = n
        out[i + 1, 4] = h

    return out
