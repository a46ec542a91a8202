"""
Survival Evaluation
===================

Runs a built-in policy over a list of seeds and reports survival times.
Survival time is the only score in Algae Race.

Usage:
    python -m tools.survival_eval [--policy greedy] [--seeds 1 2 3] [--output results.json]
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import numpy as np

from algae_race.race_core.config_loader import GameConfig, load_config
from algae_race.race_core.env_gym import ACTION_LEFT, ACTION_RIGHT, ACTION_STAY, AlgaeRaceEnv
from algae_race.race_core.row_generator import RowCell

DEFAULT_SEEDS = list(range(10))

Policy = Callable[[Dict[str, np.ndarray]], int]


@dataclass
class EvalResult:
    """Result for a single seed."""
    seed: int
    survival_time: float
    ticks: int
    bubbles_collected: int
    algae_contacts: int
    termination_reason: str
    elapsed_time: float


@dataclass
class EvalSummary:
    """Summary of evaluation across all seeds."""
    mean_survival: float
    std_survival: float
    min_survival: float
    max_survival: float
    median_survival: float
    total_time: float
    results: List[EvalResult]


def stay_policy(obs: Dict[str, np.ndarray]) -> int:
    """Never move."""
    return ACTION_STAY


def make_random_policy(seed: int = 0) -> Policy:
    """Uniformly random actions."""
    rng = np.random.default_rng(seed)

    def act(obs: Dict[str, np.ndarray]) -> int:
        return int(rng.integers(0, 3))

    return act


def greedy_policy(obs: Dict[str, np.ndarray]) -> int:
    """
    Steer toward the nearest bubble; otherwise sidestep algae in the next row.
    """
    rows = obs["rows"]
    slot = int(obs["fish_slot"])

    for row in rows:
        bubbles = np.flatnonzero(row == RowCell.OXYGEN)
        if bubbles.size:
            target = int(bubbles[0])
            if target < slot:
                return ACTION_LEFT
            if target > slot:
                return ACTION_RIGHT
            return ACTION_STAY

    nearest = rows[0]
    if nearest[slot] != RowCell.ALGAE:
        return ACTION_STAY
    if slot > 0 and nearest[slot - 1] != RowCell.ALGAE:
        return ACTION_LEFT
    if slot < nearest.size - 1 and nearest[slot + 1] != RowCell.ALGAE:
        return ACTION_RIGHT
    return ACTION_STAY


POLICIES: Dict[str, Callable[[], Policy]] = {
    "stay": lambda: stay_policy,
    "random": make_random_policy,
    "greedy": lambda: greedy_policy,
}


def evaluate_single_seed(
    policy: Policy,
    seed: int,
    config: Optional[GameConfig] = None,
    verbose: bool = False
) -> EvalResult:
    """
    Run one session with the given policy.

    Args:
        policy: (obs) -> action.
        seed: Random seed.
        config: Game configuration. Loads default if None.
        verbose: If True, print progress.

    Returns:
        EvalResult for this seed.
    """
    env = AlgaeRaceEnv(config=config)
    obs, info = env.reset(seed=seed)

    start_time = time.time()
    done = False
    while not done:
        obs, _, terminated, truncated, info = env.step(policy(obs))
        done = terminated or truncated

    elapsed = time.time() - start_time

    result = EvalResult(
        seed=seed,
        survival_time=info["survival_time"],
        ticks=info["ticks"],
        bubbles_collected=info["bubbles_collected"],
        algae_contacts=info["algae_contacts"],
        termination_reason=info["terminated_reason"] or info.get("truncated_reason", ""),
        elapsed_time=elapsed
    )

    env.close()

    if verbose:
        print(f"  Seed {seed}: survived={result.survival_time:.2f}s, "
              f"bubbles={result.bubbles_collected}, algae={result.algae_contacts}")

    return result


def evaluate_policy(
    policy: Policy,
    seeds: Optional[List[int]] = None,
    config: Optional[GameConfig] = None,
    verbose: bool = True
) -> EvalSummary:
    """
    Evaluate a policy on every seed.

    Args:
        policy: (obs) -> action.
        seeds: List of seeds. Uses DEFAULT_SEEDS if None.
        config: Game configuration. Loads default if None.
        verbose: If True, print progress.

    Returns:
        EvalSummary with aggregate statistics.
    """
    if seeds is None:
        seeds = DEFAULT_SEEDS
    if config is None:
        config = load_config()

    if verbose:
        print(f"Evaluating on {len(seeds)} seeds...")

    results: List[EvalResult] = []
    total_start = time.time()

    for i, seed in enumerate(seeds):
        if verbose:
            print(f"[{i+1}/{len(seeds)}] Running seed {seed}...")
        results.append(evaluate_single_seed(policy, seed, config=config, verbose=verbose))

    total_time = time.time() - total_start
    survival = [r.survival_time for r in results]

    summary = EvalSummary(
        mean_survival=float(np.mean(survival)),
        std_survival=float(np.std(survival)),
        min_survival=float(min(survival)),
        max_survival=float(max(survival)),
        median_survival=float(np.median(survival)),
        total_time=total_time,
        results=results
    )

    if verbose:
        print()
        print("=" * 50)
        print("SURVIVAL SUMMARY")
        print("=" * 50)
        print(f"Seeds evaluated: {len(seeds)}")
        print(f"Mean survival:   {summary.mean_survival:.2f}s")
        print(f"Std deviation:   {summary.std_survival:.2f}s")
        print(f"Min survival:    {summary.min_survival:.2f}s")
        print(f"Max survival:    {summary.max_survival:.2f}s")
        print(f"Median survival: {summary.median_survival:.2f}s")
        print(f"Total time:      {total_time:.2f}s")
        print("=" * 50)

    return summary


def save_results(summary: EvalSummary, policy_name: str, output_path: str) -> None:
    """Save evaluation results to JSON."""
    data = {
        "policy": policy_name,
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        "mean_survival": summary.mean_survival,
        "std_survival": summary.std_survival,
        "min_survival": summary.min_survival,
        "max_survival": summary.max_survival,
        "median_survival": summary.median_survival,
        "total_time": summary.total_time,
        "results": [
            {
                "seed": r.seed,
                "survival_time": r.survival_time,
                "ticks": r.ticks,
                "bubbles_collected": r.bubbles_collected,
                "algae_contacts": r.algae_contacts,
                "termination_reason": r.termination_reason,
            }
            for r in summary.results
        ]
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)

    print(f"Results saved to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate an Algae Race policy")
    parser.add_argument("--policy", choices=sorted(POLICIES), default="greedy",
                        help="Built-in policy to run")
    parser.add_argument("--seeds", type=int, nargs="+", default=None,
                        help="Seeds to evaluate (default: 0-9)")
    parser.add_argument("--config", type=str, default=None,
                        help="Path to game_config.yaml")
    parser.add_argument("--output", type=str, default=None,
                        help="Path to save results JSON")
    parser.add_argument("--quiet", action="store_true", help="Reduce output verbosity")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}")
        return 1

    summary = evaluate_policy(
        POLICIES[args.policy](),
        seeds=args.seeds,
        config=config,
        verbose=not args.quiet
    )

    if args.output:
        save_results(summary, args.policy, args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
