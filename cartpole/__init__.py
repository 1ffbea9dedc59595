"""
Cart-Pole Balancing Simulation

This package simulates a cart on a bounded track carrying an inverted pole,
pushed left or right by a fixed force each step, and reports why each
episode ends.
"""

from cartpole.params import SimulationConfig, load_config, validate_config
from cartpole.state import Action, SimulationState, TerminationCode
from cartpole.dynamics import step
from cartpole.episode import EpisodeResult, StepRecord, initialize, run_episode, stop
from cartpole.policies import make_policy
from cartpole.analysis import EpisodeAnalyzer, termination_message

__all__ = [
    "SimulationConfig",
    "load_config",
    "validate_config",
    "Action",
    "SimulationState",
    "TerminationCode",
    "step",
    "initialize",
    "stop",
    "run_episode",
    "EpisodeResult",
    "StepRecord",
    "make_policy",
    "EpisodeAnalyzer",
    "termination_message",
]
