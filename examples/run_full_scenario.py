"""
Full Scenario: Seed -> Grow -> Dose -> Response
===============================================

Runs the same seeded tumor under several dosing regimens and saves the
results to the results/ folder.

Usage: python examples/run_full_scenario.py
"""

import sys
import os
import json
import argparse

# Ensure src is on path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from core.metrics import tumor_clusters
from simulations.engine import Simulation
from simulations.parameter_profiles import DEFAULT_PROFILE, SimulationInputs

RESULTS_DIR = os.path.join(os.path.dirname(__file__), "..", "results")
os.makedirs(RESULTS_DIR, exist_ok=True)


def run_scenario(
    regimen_name,
    drug_amount,
    dose_every,
    seed=42,
    start_percent=DEFAULT_PROFILE.start_percent,
    growth_rate=DEFAULT_PROFILE.growth_rate,
    pre_ticks=100,
    treat_ticks=300,
):
    """Run a complete scenario with one dosing regimen."""
    inputs = SimulationInputs(
        start_percent=start_percent,
        growth_rate=growth_rate,
        drug_amount=drug_amount,
    )
    sim = Simulation(inputs=inputs, seed=seed)
    sim.start()

    # Phase 1: Untreated growth
    sim.run(ticks=pre_ticks)
    pre_treatment = dict(sim.history[-1])

    # Phase 2: Dosing (no doses at all for the control)
    sim.run(ticks=treat_ticks, dose_every=dose_every if drug_amount > 0 else None)
    post_treatment = dict(sim.history[-1])
    sim.stop()

    return {
        "regimen": regimen_name,
        "pre_treatment": pre_treatment,
        "post_treatment": post_treatment,
        "clusters": len(tumor_clusters(sim.grid)),
        "total_killed": sum(sim.kill_series()),
        "tumor_series": sim.tumor_series(),
        "particle_series": sim.particle_series(),
    }


def main():
    parser = argparse.ArgumentParser(
        description="Compare dosing regimens on the same seeded tumor."
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed.")
    parser.add_argument(
        "--start-percent", type=float, default=DEFAULT_PROFILE.start_percent,
        help="Seeding density [0-100].",
    )
    parser.add_argument(
        "--growth-rate", type=float, default=DEFAULT_PROFILE.growth_rate,
        help="Tumor growth rate.",
    )
    parser.add_argument(
        "--pre-ticks",
        type=int,
        default=100,
        help="Growth-only ticks before dosing.",
    )
    parser.add_argument(
        "--treat-ticks",
        type=int,
        default=300,
        help="Ticks with dosing.",
    )
    args = parser.parse_args()

    print("=" * 60)
    print("  Prodrug Targeting: Dosing Regimen Comparison")
    print("=" * 60)
    print(
        "Run config: "
        f"seed={args.seed}, start_percent={args.start_percent}, "
        f"growth_rate={args.growth_rate}, "
        f"pre_ticks={args.pre_ticks}, treat_ticks={args.treat_ticks}"
    )

    regimens = [
        ("No Dosing (Control)", 0.0, 25),
        ("Low Dose, Every 25 Ticks", 5.0, 25),
        ("Standard Dose, Every 25 Ticks", 10.0, 25),
        ("High Dose, Every 25 Ticks", 60.0, 25),
        ("Standard Dose, Every 5 Ticks", 10.0, 5),
    ]

    all_results = []

    for name, amount, every in regimens:
        print(f"\n--- {name} ---")
        result = run_scenario(
            name,
            amount,
            every,
            seed=args.seed,
            start_percent=args.start_percent,
            growth_rate=args.growth_rate,
            pre_ticks=args.pre_ticks,
            treat_ticks=args.treat_ticks,
        )
        pre = result["pre_treatment"]
        post = result["post_treatment"]
        print(f"  Pre-dosing:   tumor={pre['tumor']}")
        print(f"  Killed:       {result['total_killed']} sites")
        print(f"  Post-dosing:  tumor={post['tumor']}, clusters={result['clusters']}")
        all_results.append(result)

    # Save numerical results
    results_file = os.path.join(RESULTS_DIR, "regimen_comparison.json")
    serializable = []
    for r in all_results:
        serializable.append({
            "regimen": r["regimen"],
            "pre_treatment_tumor": r["pre_treatment"]["tumor"],
            "post_treatment_tumor": r["post_treatment"]["tumor"],
            "post_treatment_clusters": r["clusters"],
            "total_killed": r["total_killed"],
        })
    with open(results_file, "w") as f:
        json.dump(serializable, f, indent=2)
    print(f"\nResults saved to {results_file}")

    # Generate comparison plot
    try:
        import matplotlib
        matplotlib.use("Agg")  # headless
        import matplotlib.pyplot as plt

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

        for r in all_results:
            ax1.plot(r["tumor_series"], label=r["regimen"], linewidth=1.5)
            ax2.plot(r["particle_series"], label=r["regimen"], linewidth=1.5)

        ax1.axvline(x=args.pre_ticks, color="black", linestyle="--", alpha=0.5, label="Dosing starts")
        ax2.axvline(x=args.pre_ticks, color="black", linestyle="--", alpha=0.5)

        ax1.set_ylabel("Tumor Site Count")
        ax1.legend(loc="upper left", fontsize=8)
        ax1.set_title("Regimen Comparison: Tumor Response")
        ax1.grid(True, alpha=0.3)

        ax2.set_ylabel("Live Particles")
        ax2.set_xlabel("Ticks")
        ax2.legend(loc="upper right", fontsize=8)
        ax2.grid(True, alpha=0.3)

        plt.tight_layout()
        plot_file = os.path.join(RESULTS_DIR, "regimen_comparison.png")
        plt.savefig(plot_file, dpi=150, bbox_inches="tight")
        print(f"Plot saved to {plot_file}")
        plt.close()

    except ImportError:
        print("Install matplotlib for plots: pip install matplotlib")

    # Print summary table
    print("\n" + "=" * 70)
    print(f"{'Regimen':<35} {'Pre':>8} {'Post':>8} {'Killed':>8}")
    print("-" * 70)
    for r in serializable:
        print(
            f"{r['regimen']:<35} "
            f"{r['pre_treatment_tumor']:>8} "
            f"{r['post_treatment_tumor']:>8} "
            f"{r['total_killed']:>8}"
        )
    print("=" * 70)


if __name__ == "__main__":
    main()
