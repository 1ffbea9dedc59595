"""
Cart-Pole Balancing Simulation

Runs episodes with a scripted policy and prints how each one ended.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import numpy as np

from cartpole.analysis import EpisodeAnalyzer, best_episode
from cartpole.episode import EpisodeResult, run_episode
from cartpole.logger import setup_logging
from cartpole.params import SimulationConfig, load_config, validate_config
from cartpole.policies import POLICIES, make_policy

logger = logging.getLogger("cartpole")


def run_episodes(
    config: SimulationConfig, policy_name: str, episodes: int, seed: Optional[int] = None
) -> List[EpisodeResult]:
    """
    Run several independent episodes from one random stream

    Args:
        config: Simulation parameters
        policy_name: Name of a scripted policy
        episodes: Number of episodes
        seed: Seed for initial states and random actions

    Returns:
        Results in run order
    """
    rng = np.random.default_rng(seed)
    policy = make_policy(policy_name, rng)
    return [run_episode(policy, config, rng=rng) for _ in range(episodes)]


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run cart-pole episodes")
    parser.add_argument("--config", type=Path, help="YAML configuration file")
    parser.add_argument("--policy", default="lean", choices=sorted(POLICIES))
    parser.add_argument("--episodes", type=int, default=5)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-steps", type=int, default=None, help="Override max_steps")
    parser.add_argument("--log-level", default="WARNING", type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)

    try:
        config = load_config(args.config) if args.config else SimulationConfig()
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    if args.max_steps is not None:
        config = replace(config, max_steps=args.max_steps)

    for problem in validate_config(config):
        logger.warning("Config: %s", problem)

    results = run_episodes(config, args.policy, args.episodes, args.seed)
    analyzer = EpisodeAnalyzer(config)

    print(f"Cart-Pole Results ({args.policy} policy):")
    print("-" * 80)
    for i, result in enumerate(results, start=1):
        analysis = analyzer.analyze(result)
        print(f"\nEpisode {i}")
        print(f"  {analysis['message']}")
        print(f"  Steps: {analysis['steps']} ({analysis['duration_s']:.2f} s)")
        print(f"  Max cart offset: {analysis['x_max']:.3f} m")
        print(f"  Max pole angle: {analysis['theta_max_deg']:.2f} deg")
        print(f"  RMS pole angle: {analysis['theta_rms_deg']:.2f} deg")
        print(f"  Right pushes: {analysis['right_fraction']*100:.1f}%")
        print(f"  Action switches: {analysis['action_switches']}")

    if results:
        best = best_episode(results)
        print("-" * 80)
        print(f"Best episode: {results.index(best) + 1} with {best.final_state.steps} steps")
    return 0


if __name__ == "__main__":
    sys.exit(main())
