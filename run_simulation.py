"""
Prodrug Tumor Targeting -- Single Run Demo
==========================================

This script demonstrates:
  1. Seeding a connected tumor cluster next to a curved vessel
  2. Stochastic tumor growth from the cluster edge
  3. Periodic prodrug dosing: compounds flow, leach and split
  4. Cytotoxic kill cascades through the tumor
  5. A frame of the final tissue and the tumor response over time

Run:  python run_simulation.py
Deps: pip install matplotlib networkx numpy
"""

import sys
import os
import argparse
import logging

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))
RESULTS_DIR = os.path.join(os.path.dirname(__file__), "results")
os.makedirs(RESULTS_DIR, exist_ok=True)

from simulations.engine import Simulation
from simulations.parameter_profiles import PROFILES, SimulationInputs


def main():
    parser = argparse.ArgumentParser(
        description="Run a single prodrug tumor-targeting simulation."
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed.")
    parser.add_argument(
        "--profile", choices=sorted(PROFILES), default="default", help="Parameter profile."
    )
    parser.add_argument("--start-percent", type=float, help="Override seeding density [0-100].")
    parser.add_argument("--growth-rate", type=float, help="Override tumor growth rate.")
    parser.add_argument("--drug-amount", type=float, help="Override dose size.")
    parser.add_argument(
        "--pre-ticks", type=int, default=100, help="Growth-only ticks before dosing."
    )
    parser.add_argument(
        "--treat-ticks", type=int, default=300, help="Ticks with periodic dosing."
    )
    parser.add_argument(
        "--realtime", action="store_true", help="Tick at the real-time cadence."
    )
    parser.add_argument(
        "--skip-plots", action="store_true", help="Skip plotting output files."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    profile = PROFILES[args.profile]
    base = profile.inputs()
    inputs = SimulationInputs(
        start_percent=base.start_percent if args.start_percent is None else args.start_percent,
        growth_rate=base.growth_rate if args.growth_rate is None else args.growth_rate,
        drug_amount=base.drug_amount if args.drug_amount is None else args.drug_amount,
    )

    print("=" * 60)
    print("  Prodrug Tumor Targeting")
    print("  Simulation Framework")
    print("=" * 60)
    print("\nParameter profile:")
    print(f"  name={profile.name}  ({profile.note})")
    print(
        "  "
        f"start_percent={inputs.start_percent}, growth_rate={inputs.growth_rate}, "
        f"drug_amount={inputs.drug_amount}, dose_every={profile.dose_every}"
    )
    print(
        "  "
        f"seed={args.seed}, pre_ticks={args.pre_ticks}, treat_ticks={args.treat_ticks}"
    )

    sim = Simulation(inputs=inputs, seed=args.seed)
    seeded = sim.start()
    print(f"\nSeeded {seeded} tumor sites")

    # Phase 1: Untreated growth
    print(f"\n--- Phase 1: Untreated Growth ({args.pre_ticks} ticks) ---")
    if args.realtime:
        sim.play(max_ticks=args.pre_ticks)
    else:
        sim.run(ticks=args.pre_ticks)
    print(sim.summary())

    # Phase 2: Dosing
    print(f"\n--- Phase 2: Prodrug Dosing ({args.treat_ticks} ticks) ---")
    if args.realtime:
        def dose_on_schedule(s):
            if s.tick_count % profile.dose_every == 0:
                s.give_dose()
        sim.play(max_ticks=args.treat_ticks, on_frame=dose_on_schedule)
    else:
        sim.run(ticks=args.treat_ticks, dose_every=profile.dose_every)
    sim.stop()
    print(sim.summary())

    # Visualize
    if args.skip_plots:
        print("\n--- Plot generation skipped (--skip-plots) ---")
    else:
        try:
            from visualization.plots import plot_frame, plot_tumor_response
            print("\n--- Generating Plots ---")
            plot_frame(sim, save_path=os.path.join(RESULTS_DIR, "final_frame.png"))
            plot_tumor_response(sim, save_path=os.path.join(RESULTS_DIR, "tumor_response.png"))
        except ImportError:
            print("\nInstall matplotlib and numpy for visualizations:")
            print("  pip install matplotlib numpy")

    print("\nDone.")

if __name__ == "__main__":
    main()
