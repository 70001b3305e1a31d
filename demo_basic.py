"""
Example: Basic Hodgkin-Huxley simulation

Runs the reference scenario (constant current injection from rest), prints a
short summary and saves a 4-panel plot (V, m, n, h).
"""

import os
import time
import argparse
import matplotlib.pyplot as plt

from hhsim import SimulationConfig, Simulator, compute_spike_statistics


def run_sim(config, backend):
    simulator = Simulator(config, backend=backend)

    t0 = time.perf_counter()
    series = simulator.run()
    elapsed = time.perf_counter() - t0

    return series, elapsed


def plot_results(series, title, png_path):
    time_arr = series.time

    fig, axes = plt.subplots(4, 1, figsize=(12, 10), sharex=True)

    axes[0].plot(time_arr, series.V, color='C0')
    axes[0].set_ylabel('V (mV)')
    axes[0].grid(True, alpha=0.3)

    for ax, name in zip(axes[1:], ('m', 'n', 'h')):
        ax.plot(time_arr, getattr(series, name), label=name)
        ax.set_ylabel(name)
        ax.set_ylim(-0.05, 1.05)
        ax.grid(True, alpha=0.3)

    axes[3].set_xlabel('Time (ms)')

    fig.suptitle(f'Hodgkin-Huxley ({title})')
    plt.tight_layout()
    plt.savefig(png_path, dpi=150, bbox_inches='tight')
    print('Saved plot to', png_path)


def main():
    parser = argparse.ArgumentParser(description='Single-compartment HH simulation')
    parser.add_argument('--I', type=float, default=10.0, help='Injected current (uA/cm^2)')
    parser.add_argument('--dt', type=float, default=0.01, help='Time step (ms)')
    parser.add_argument('--T', type=float, default=50.0, help='End time (ms)')
    parser.add_argument('--backend', choices=['python', 'numba'], default='python')
    parser.add_argument('--no-plot', action='store_true', help='Skip plotting')
    args = parser.parse_args()

    config = SimulationConfig(I_ext=args.I, dt=args.dt, t_end=args.T)

    print("=" * 60)
    print("Hodgkin-Huxley Neuron Simulation - Basic Demo")
    print("=" * 60)
    print(f"I_ext = {config.I_ext} uA/cm^2, dt = {config.dt} ms, "
          f"window = [{config.t_start}, {config.t_end}] ms")

    series, elapsed = run_sim(config, args.backend)
    t_peak, V_peak = series.peak()
    stats = compute_spike_statistics(series.spike_times())

    print(f"Samples: {len(series)}")
    print(f"Peak: {V_peak:.2f} mV at t = {t_peak:.2f} ms")
    print(f"Spikes: {stats['count']}, mean ISI: {stats['isi_mean']:.2f} ms, "
          f"rate: {series.firing_rate():.1f} Hz")
    print(f"Elapsed ({args.backend}): {elapsed*1000:.3f} ms")

    if not args.no_plot:
        os.makedirs('plots', exist_ok=True)
        png = f'plots/hh_{args.backend}_I{args.I:g}.png'
        plot_results(series, f'I = {args.I:g} uA/cm^2', png)


if __name__ == '__main__':
    main()
