#!/usr/bin/env python3
"""
Visualize benchmark results from benchmark_results.json
Creates bar charts comparing execution times and speedups per worker count.
"""

import json
import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

BASELINE_IMPL = 'FilterSeq'

# Define colors for implementations
COLORS = {
    'FilterSeq': '#2E86AB',
    'FilterParallel': '#A23B72',
    'FilterPipeline': '#F18F01',
}


def load_results(json_path='benchmark_results.json'):
    """Load benchmark results from JSON file."""
    with open(json_path, 'r') as f:
        data = json.load(f)
    return data


def organize_data(data):
    """Organize results as {implementation: {workers: time_ms}} plus the baseline time."""
    results = {}
    baseline_ms = None

    for entry in data['results']:
        impl = entry['implementation']
        time_ms = entry['seconds'] * 1000
        if impl == BASELINE_IMPL:
            baseline_ms = time_ms
            continue
        results.setdefault(impl, {})[entry['workers']] = time_ms

    return results, baseline_ms


def plot_benchmark_results(data, output_path='benchmark_plot.png'):
    """Create visualization of benchmark results with execution times and speedups."""
    results, baseline_ms = organize_data(data)
    implementations = sorted(results.keys())
    worker_counts = sorted({w for times in results.values() for w in times})

    fig, (ax_time, ax_speed) = plt.subplots(1, 2, figsize=(16, 6))
    fig.suptitle('Blur + Invert Benchmark Results', fontsize=16, fontweight='bold')

    x = np.arange(len(worker_counts))
    width = 0.35

    for i, impl in enumerate(implementations):
        offset = (i - len(implementations)/2 + 0.5) * width
        color = COLORS.get(impl, '#999999')
        times = [results[impl].get(w, 0) for w in worker_counts]

        bars = ax_time.bar(x + offset, times, width, label=impl, color=color, alpha=0.8)
        for bar in bars:
            height = bar.get_height()
            if height > 0:
                ax_time.text(bar.get_x() + bar.get_width()/2., height,
                             f'{height:.1f}', ha='center', va='bottom', fontsize=7)

        if baseline_ms:
            speedups = [baseline_ms / t if t > 0 else 0 for t in times]
            bars = ax_speed.bar(x + offset, speedups, width, label=impl, color=color, alpha=0.8)
            for bar in bars:
                height = bar.get_height()
                if height > 0:
                    ax_speed.text(bar.get_x() + bar.get_width()/2., height,
                                  f'{height:.1f}x', ha='center', va='bottom', fontsize=7)

    if baseline_ms:
        ax_time.axhline(y=baseline_ms, color='#2E86AB', linestyle='--', linewidth=1,
                        alpha=0.7, label=f'{BASELINE_IMPL}')
        ax_speed.axhline(y=1.0, color='red', linestyle='--', linewidth=1, alpha=0.7,
                         label=f'Baseline ({BASELINE_IMPL})')

    for ax, ylabel, title in (
        (ax_time, 'Time (ms)', 'Execution Time'),
        (ax_speed, f'Speedup vs {BASELINE_IMPL}', 'Speedup'),
    ):
        ax.set_xlabel('Workers per stage', fontsize=11, fontweight='bold')
        ax.set_ylabel(ylabel, fontsize=11, fontweight='bold')
        ax.set_title(title, fontsize=12, fontweight='bold')
        ax.set_xticks(x)
        ax.set_xticklabels([str(w) for w in worker_counts])
        ax.legend(fontsize=8, loc='best')
        ax.grid(True, alpha=0.3, axis='y')

    plt.savefig(output_path, dpi=300, bbox_inches='tight')
    plt.close(fig)
    print(f"✓ Benchmark plot saved to: {output_path}")
    return output_path


def print_summary(data):
    """Print summary statistics."""
    results, baseline_ms = organize_data(data)

    print("\n" + "="*80)
    print("BENCHMARK SUMMARY")
    print("="*80)
    if baseline_ms:
        print(f"  {BASELINE_IMPL:30s}: {baseline_ms:10.2f} ms")

    for impl, times in sorted(results.items()):
        print(f"\n{impl}")
        print("-" * 80)
        for workers, time_ms in sorted(times.items()):
            line = f"  {workers:3d} workers: {time_ms:10.2f} ms"
            if baseline_ms and time_ms > 0:
                line += f"  ({baseline_ms / time_ms:6.2f}x)"
            print(line)


def main():
    # Load results
    json_path = Path(sys.argv[1] if len(sys.argv) > 1 else 'benchmark_results.json')
    if not json_path.exists():
        print(f"Error: {json_path} not found!")
        print("Run 'python benchmark.py' first to generate results.")
        return 1

    data = load_results(json_path)

    print_summary(data)

    print("\nGenerating plot...")
    plot_benchmark_results(data)

    print("\n✓ Visualization complete!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
