"""
Analysis helpers for recorded voltage traces: spikes, peaks and firing rate.
"""

import numpy as np
from typing import Optional, Tuple


def detect_spikes(voltage: np.ndarray, threshold: float = 50.0,
                  min_interval: Optional[int] = None) -> np.ndarray:
    """
    Detect spike times using threshold crossing.

    Detects upward crossings of the threshold (V[i] >= threshold and V[i-1] < threshold).
    The default threshold sits halfway up a spike in the 0 mV resting convention.

    Args:
        voltage: 1D array of voltage values
        threshold: Spike detection threshold (mV)
        min_interval: Minimum samples between spikes (refractory period)

    Returns:
        Array of spike indices
    """
    voltage = np.asarray(voltage, dtype=float)
    crossings = (voltage[1:] >= threshold) & (voltage[:-1] < threshold)
    spike_indices = np.where(crossings)[0] + 1

    # Apply minimum interval if specified
    if min_interval is not None and len(spike_indices) > 0:
        filtered_spikes = [spike_indices[0]]
        for spike_idx in spike_indices[1:]:
            if spike_idx - filtered_spikes[-1] >= min_interval:
                filtered_spikes.append(spike_idx)
        spike_indices = np.array(filtered_spikes)

    return spike_indices


def interpolate_spike_times(voltage: np.ndarray, time: np.ndarray,
                            spike_indices: np.ndarray,
                            threshold: float = 50.0) -> np.ndarray:
    """
    Interpolate precise spike times using linear interpolation.

    Args:
        voltage: Voltage trace
        time: Time array
        spike_indices: Indices where spikes were detected
        threshold: Threshold value

    Returns:
        Array of interpolated spike times
    """
    if len(spike_indices) == 0:
        return np.array([])

    spike_times = np.zeros(len(spike_indices))

    for i, idx in enumerate(spike_indices):
        if idx == 0:
            spike_times[i] = time[idx]
            continue

        v0 = voltage[idx - 1]
        v1 = voltage[idx]
        t0 = time[idx - 1]
        t1 = time[idx]

        if abs(v1 - v0) > 1e-10:
            spike_times[i] = t0 + (threshold - v0) / (v1 - v0) * (t1 - t0)
        else:
            spike_times[i] = t0

    return spike_times


def find_peak(voltage: np.ndarray, time: np.ndarray,
              window: Optional[Tuple[float, float]] = None) -> Tuple[float, float]:
    """
    Locate the maximum voltage, optionally restricted to a time window.

    Args:
        voltage: Voltage trace
        time: Time array, same length as voltage
        window: Inclusive (t_lo, t_hi) bounds (ms)

    Returns:
        (t_peak, V_peak)
    """
    voltage = np.asarray(voltage, dtype=float)
    time = np.asarray(time, dtype=float)
    if window is not None:
        mask = (time >= window[0]) & (time <= window[1])
        if not mask.any():
            raise ValueError(f"No samples inside window {window}")
        voltage = voltage[mask]
        time = time[mask]
    idx = int(np.argmax(voltage))
    return float(time[idx]), float(voltage[idx])


def compute_spike_statistics(spike_times: np.ndarray) -> dict:
    """
    Compute basic spike train statistics.

    Returns:
        Dictionary with:
            - 'count': number of spikes
            - 'isi_mean': mean inter-spike interval (ms)
            - 'isi_std': standard deviation of ISI (ms)
            - 'isi_cv': coefficient of variation of ISI
    """
    n_spikes = len(spike_times)

    stats = {'count': n_spikes}

    if n_spikes < 2:
        stats['isi_mean'] = np.nan
        stats['isi_std'] = np.nan
        stats['isi_cv'] = np.nan
    else:
        isis = np.diff(spike_times)
        stats['isi_mean'] = np.mean(isis)
        stats['isi_std'] = np.std(isis)
        stats['isi_cv'] = stats['isi_std'] / stats['isi_mean'] if stats['isi_mean'] > 0 else np.nan

    return stats


def compute_firing_rate(spike_times: np.ndarray, duration: float) -> float:
    """
    Compute mean firing rate in Hz from spike times over a duration in ms.
    """
    if duration <= 0:
        return 0.0

    # Convert ms to seconds for Hz
    return len(spike_times) / (duration / 1000.0)
