"""
Time-stepping driver for the lagged-gating Hodgkin-Huxley scheme.

Each step advances m, n and h with RK4 at the previous voltage, then takes a
single explicit Euler step on V using the freshly updated gates.
"""

import math
import warnings
from dataclasses import dataclass, asdict, fields
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .models import (
    GATE_RATES,
    MembraneState,
    SimulationConstants,
    TimeSeriesSample,
    dv_dt,
)
from .integrators import rk4_gating_step
from .utils import (
    compute_firing_rate,
    detect_spikes,
    find_peak,
    interpolate_spike_times,
)

TIME_LABELS = ('end', 'start')
BACKENDS = ('python', 'numba')


@dataclass
class SimulationConfig:
    """
    Full configuration of a single run.

    Default values reproduce the reference scenario: constant 10 uA/cm^2
    injection for 50 ms starting from rest.
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

    # Initial state
    V0: float = 0.0
    m0: float = 0.05
    n0: float = 0.32
    h0: float = 0.59

    # Time window (ms)
    t_start: float = 0.0
    t_end: float = 50.0
    dt: float = 0.01

    # 'end' labels a step's sample with the post-step time,
    # 'start' with the pre-step time
    time_label: str = 'end'

    def __post_init__(self):
        for f in fields(self):
            if f.name == 'time_label':
                continue
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise ValueError(f"{f.name} must be finite, got {value}")
        if self.dt <= 0:
            raise ValueError('dt must be positive')
        if self.t_end < self.t_start:
            raise ValueError('t_end must not be earlier than t_start')
        if self.time_label not in TIME_LABELS:
            raise ValueError(
                f"Unknown time_label: '{self.time_label}'. "
                f"Valid options are 'end' or 'start'."
            )

        # Spikes already drive the Euler step on V unstable around dt = 0.09
        if self.dt > 0.05:
            warnings.warn(f"Large dt ({self.dt} ms) may cause numerical instability. "
                          f"Recommended: dt <= 0.01 ms for this scheme.")

    @property
    def constants(self) -> SimulationConstants:
        return SimulationConstants(
            g_Na=self.g_Na, g_K=self.g_K, g_L=self.g_L,
            E_Na=self.E_Na, E_K=self.E_K, E_L=self.E_L,
            I_ext=self.I_ext
        )

    @property
    def initial_state(self) -> MembraneState:
        return MembraneState(V=self.V0, m=self.m0, n=self.n0, h=self.h0)

    @property
    def n_steps(self) -> int:
        """Number of steps: floor((t_end - t_start) / dt)."""
        # Tolerance keeps e.g. 50 / 0.01 from flooring to 4999
        return int(math.floor((self.t_end - self.t_start) / self.dt + 1e-9))

    def to_dict(self) -> Dict[str, object]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, object]) -> 'SimulationConfig':
        """Create configuration from dictionary."""
        known = {f.name for f in fields(cls)}
        for key in d:
            if key not in known:
                raise ValueError(f"Unknown parameter: {key}")
        return cls(**d)


class TimeSeries:
    """
    Ordered, append-only sequence of TimeSeriesSample records.

    Column views (time, V, m, n, h) are returned as NumPy arrays.
    """

    def __init__(self, samples: Optional[List[TimeSeriesSample]] = None):
        self._samples: List[TimeSeriesSample] = list(samples) if samples else []

    @classmethod
    def from_array(cls, data: np.ndarray) -> 'TimeSeries':
        """Build from an (N, 5) array with columns [t, V, m, n, h]."""
        return cls([TimeSeriesSample(*map(float, row)) for row in data])

    def append(self, sample: TimeSeriesSample):
        self._samples.append(sample)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[TimeSeriesSample]:
        return iter(self._samples)

    def __getitem__(self, idx):
        return self._samples[idx]

    def _column(self, idx: int) -> np.ndarray:
        return np.array([s[idx] for s in self._samples], dtype=float)

    @property
    def time(self) -> np.ndarray:
        return self._column(0)

    @property
    def V(self) -> np.ndarray:
        return self._column(1)

    @property
    def m(self) -> np.ndarray:
        return self._column(2)

    @property
    def n(self) -> np.ndarray:
        return self._column(3)

    @property
    def h(self) -> np.ndarray:
        return self._column(4)

    def to_array(self) -> np.ndarray:
        """Return an (N, 5) array with columns [t, V, m, n, h]."""
        return np.array(self._samples, dtype=float).reshape(len(self._samples), 5)

    def to_dict(self) -> Dict[str, np.ndarray]:
        data = self.to_array()
        return {name: data[:, i] for i, name in enumerate(TimeSeriesSample._fields)}

    def peak(self, window: Optional[Tuple[float, float]] = None) -> Tuple[float, float]:
        """Return (t_peak, V_peak), optionally within a (t_lo, t_hi) window."""
        return find_peak(self.V, self.time, window)

    def spike_times(self, threshold: float = 50.0,
                    min_interval: Optional[int] = None) -> np.ndarray:
        """Interpolated upward threshold crossings (ms)."""
        V = self.V
        time = self.time
        indices = detect_spikes(V, threshold, min_interval)
        return interpolate_spike_times(V, time, indices, threshold)

    def get_spike_count(self, threshold: float = 50.0,
                        min_interval: Optional[int] = None) -> int:
        return len(detect_spikes(self.V, threshold, min_interval))

    def firing_rate(self, threshold: float = 50.0) -> float:
        """Mean firing rate over the recorded window (Hz)."""
        time = self.time
        return compute_firing_rate(self.spike_times(threshold), time[-1] - time[0])


class Simulator:
    """
    Fixed-step simulator for a single Hodgkin-Huxley compartment.

    Gating variables are advanced with RK4 holding V at its previous value;
    V then takes one explicit Euler step using the updated gates and the
    previous V.
    """

    def __init__(self,
                 config: Optional[SimulationConfig] = None,
                 backend: str = 'python'):
        """
        Initialize simulator.

        Args:
            config: Run configuration (uses defaults if None)
            backend: 'python' or 'numba' (requires numba to be installed)
        """
        self.config = config if config is not None else SimulationConfig()
        self.constants = self.config.constants
        self.backend = backend.lower()

        if self.backend not in BACKENDS:
            raise ValueError(
                f"Unknown backend: '{backend}'. "
                f"Valid options are 'python' or 'numba'."
            )

        if self.backend == 'numba':
            try:
                from . import numba_kernels
            except ImportError:
                raise ValueError(
                    "Numba backend not available. Install with:\n"
                    "  pip install numba"
                )
            self._kernels = numba_kernels

    def step(self, state: MembraneState) -> MembraneState:
        """
        Advance the membrane state by one time step.

        Args:
            state: State at the start of the step

        Returns:
            New state; the input is left untouched
        """
        dt = self.config.dt
        V = state.V

        # A diverging run overflows to inf/nan instead of raising here
        with np.errstate(over='ignore', invalid='ignore'):
            m = rk4_gating_step(dt, V, state.m, *GATE_RATES['m'])
            n = rk4_gating_step(dt, V, state.n, *GATE_RATES['n'])
            h = rk4_gating_step(dt, V, state.h, *GATE_RATES['h'])

            # Updated gates, previous voltage
            dv = dv_dt(MembraneState(V=V, m=m, n=n, h=h), self.constants)

            return MembraneState(V=V + dv * dt, m=m, n=n, h=h)

    def _sample_time(self, i: int) -> float:
        offset = 1 if self.config.time_label == 'end' else 0
        return self.config.t_start + (i + offset) * self.config.dt

    def iter_samples(self) -> Iterator[TimeSeriesSample]:
        """
        Yield samples one at a time, starting with the initial state.

        Nothing is buffered, so this suits windows too long to keep in memory.

        Raises:
            RuntimeError: if the state stops being finite
        """
        state = self.config.initial_state
        yield TimeSeriesSample(self.config.t_start, *state.as_tuple())

        for i in range(self.config.n_steps):
            state = self.step(state)
            t = self._sample_time(i)
            if not all(math.isfinite(x) for x in state.as_tuple()):
                self._diverged(t)
            yield TimeSeriesSample(t, *state.as_tuple())

    def run(self) -> TimeSeries:
        """
        Run the full simulation window.

        Returns:
            TimeSeries with n_steps + 1 samples
        """
        if self.backend == 'numba':
            series = self._run_numba()
        else:
            series = TimeSeries()
            for sample in self.iter_samples():
                series.append(sample)

        self._check_gates(series)
        return series

    def _run_numba(self) -> TimeSeries:
        c = self.config
        offset = 1 if c.time_label == 'end' else 0
        data = self._kernels.simulate_lagged(
            float(c.V0), float(c.m0), float(c.n0), float(c.h0),
            float(c.g_Na), float(c.g_K), float(c.g_L),
            float(c.E_Na), float(c.E_K), float(c.E_L), float(c.I_ext),
            float(c.t_start), float(c.dt), c.n_steps, offset
        )
        finite = np.isfinite(data).all(axis=1)
        if not finite.all():
            self._diverged(data[int(np.argmin(finite)), 0])
        return TimeSeries.from_array(data)

    @staticmethod
    def _diverged(t: float):
        raise RuntimeError(
            f"Simulation diverged at t = {t:.4g} ms (non-finite state); "
            f"reduce dt or check the configuration."
        )

    @staticmethod
    def _check_gates(series: TimeSeries):
        """Warn when any gating variable left [0, 1]; values are not clamped."""
        data = series.to_array()
        gates = data[:, 2:]
        if gates.size and (gates.min() < 0.0 or gates.max() > 1.0):
            warnings.warn(
                f"Gating variables left [0, 1] (min={gates.min():.4g}, "
                f"max={gates.max():.4g}); consider a smaller dt.",
                RuntimeWarning
            )


def simulate(config: Optional[SimulationConfig] = None,
             backend: str = 'python', **overrides) -> TimeSeries:
    """
    Run a simulation and return its TimeSeries.

    Examples:
        >>> series = simulate(I_ext=6.5, t_end=100.0)
        >>> t_peak, V_peak = series.peak()
    """
    if config is None:
        config = SimulationConfig.from_dict(overrides)
    elif overrides:
        params = config.to_dict()
        params.update(overrides)
        config = SimulationConfig.from_dict(params)
    return Simulator(config, backend=backend).run()
