"""
hhsim - Fixed-step Hodgkin-Huxley simulation with lagged gating updates.
"""

from .models import (
    SimulationConstants,
    MembraneState,
    TimeSeriesSample,
    GATE_RATES,
    alpha_m_func,
    alpha_h_func,
    alpha_n_func,
    beta_m_func,
    beta_h_func,
    beta_n_func,
    steady_state,
    steady_gates,
    time_constant,
    gating_derivative,
    compute_currents,
    dv_dt,
)

from .integrators import (
    GatingRK4,
    rk4_gating_step,
)

from .simulator import (
    SimulationConfig,
    TimeSeries,
    Simulator,
    simulate,
)

from .utils import (
    detect_spikes,
    interpolate_spike_times,
    find_peak,
    compute_spike_statistics,
    compute_firing_rate,
)

__all__ = [
    # Models
    'SimulationConstants',
    'MembraneState',
    'TimeSeriesSample',
    'GATE_RATES',
    'alpha_m_func',
    'alpha_h_func',
    'alpha_n_func',
    'beta_m_func',
    'beta_h_func',
    'beta_n_func',
    'steady_state',
    'steady_gates',
    'time_constant',
    'gating_derivative',
    'compute_currents',
    'dv_dt',

    # Integrators
    'GatingRK4',
    'rk4_gating_step',

    # Simulator
    'SimulationConfig',
    'TimeSeries',
    'Simulator',
    'simulate',

    # Utils
    'detect_spikes',
    'interpolate_spike_times',
    'find_peak',
    'compute_spike_statistics',
    'compute_firing_rate',
]
