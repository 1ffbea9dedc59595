"""
Episode initialization and the step loop that drives it
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Union

import numpy as np

from cartpole.dynamics import step
from cartpole.params import SimulationConfig
from cartpole.state import Action, SimulationState, TerminationCode

logger = logging.getLogger(__name__)

# Half-width of the uniform perturbation applied to every initial state variable
INITIAL_STATE_RANGE = 0.05

Policy = Callable[[SimulationState], Union[Action, int]]
RandomSource = Union[np.random.Generator, int, None]


def initialize(rng: RandomSource = None) -> SimulationState:
    """
    Create the starting state of a new episode

    x, x_dot, theta and theta_dot are drawn independently and uniformly from
    [-0.05, 0.05), in that order, one draw each.

    Args:
        rng: numpy Generator or integer seed; a fresh unseeded generator if None

    Returns:
        Running state with zero steps
    """
    rng = np.random.default_rng(rng)

    def perturbation() -> float:
        return float(rng.random() * (2 * INITIAL_STATE_RANGE) - INITIAL_STATE_RANGE)

    return SimulationState(
        x=perturbation(),
        x_dot=perturbation(),
        theta=perturbation(),
        theta_dot=perturbation(),
    )


def stop(state: SimulationState) -> SimulationState:
    """
    End a running episode by request

    Args:
        state: Current state

    Returns:
        Done state with MANUAL_STOP, or the state itself if already done
    """
    if state.done:
        return state
    return replace(state, done=True, terminated_code=TerminationCode.MANUAL_STOP)


@dataclass(frozen=True)
class StepRecord:
    """One tick of episode history"""

    step: int
    x: float  # Cart position after the step (m)
    theta: float  # Pole angle after the step (rad)
    action: int  # -1 for LEFT, +1 for RIGHT


@dataclass
class EpisodeResult:
    """Final state and per-step history of an episode"""

    final_state: SimulationState
    history: List[StepRecord] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.history)

    @property
    def steps(self) -> np.ndarray:
        return np.array([r.step for r in self.history], dtype=int)

    @property
    def x(self) -> np.ndarray:
        return np.array([r.x for r in self.history], dtype=float)

    @property
    def theta(self) -> np.ndarray:
        return np.array([r.theta for r in self.history], dtype=float)

    @property
    def actions(self) -> np.ndarray:
        return np.array([r.action for r in self.history], dtype=int)


def run_episode(
    policy: Policy,
    config: Optional[SimulationConfig] = None,
    state: Optional[SimulationState] = None,
    rng: RandomSource = None,
    max_ticks: Optional[int] = None,
) -> EpisodeResult:
    """
    Step an episode until it terminates

    Args:
        policy: Chooses the action for each tick from the current state
        config: Simulation parameters (defaults if None)
        state: Starting state; a fresh one from initialize(rng) if None
        rng: Random source for initialize when no state is given
        max_ticks: Stop the episode manually after this many ticks

    Returns:
        EpisodeResult with the final state and history
    """
    if config is None:
        config = SimulationConfig()
    if state is None:
        state = initialize(rng)

    history: List[StepRecord] = []
    while not state.done:
        if max_ticks is not None and len(history) >= max_ticks:
            state = stop(state)
            break
        action = Action(policy(state))
        state = step(state, action, config)
        history.append(StepRecord(step=state.steps, x=state.x, theta=state.theta, action=action.sign))

    logger.info(
        "Episode finished after %d steps (%s)", state.steps, state.terminated_code.value
    )
    return EpisodeResult(final_state=state, history=history)
