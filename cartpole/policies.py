"""
Scripted action sources for driving episodes
"""

from typing import Callable, Dict, Sequence

import numpy as np

from cartpole.episode import Policy, RandomSource
from cartpole.state import Action, SimulationState

# Weight of angular velocity when predicting which way the pole is falling
LEAN_GAIN = 0.5


def constant_policy(action: Action) -> Policy:
    """Always push the same way"""
    action = Action(action)

    def policy(state: SimulationState) -> Action:
        return action

    return policy


def random_policy(rng: RandomSource = None) -> Policy:
    """Push left or right with equal probability each tick"""
    rng = np.random.default_rng(rng)

    def policy(state: SimulationState) -> Action:
        return Action(int(rng.integers(0, 2)))

    return policy


def lean_policy() -> Policy:
    """
    Push the cart under the pole

    Pushes right when the pole leans (or is falling) to the right, left
    otherwise.
    """

    def policy(state: SimulationState) -> Action:
        if state.theta + LEAN_GAIN * state.theta_dot > 0:
            return Action.RIGHT
        return Action.LEFT

    return policy


def sequence_policy(actions: Sequence[Action]) -> Policy:
    """
    Replay a fixed list of actions

    After the list runs out the last action is held, the way a key press
    keeps pushing until the next one.

    Args:
        actions: Actions in tick order (must not be empty)

    Returns:
        Policy indexed by the state's step count
    """
    if not actions:
        raise ValueError("sequence_policy needs at least one action")
    actions = [Action(a) for a in actions]

    def policy(state: SimulationState) -> Action:
        return actions[min(state.steps, len(actions) - 1)]

    return policy


POLICIES: Dict[str, Callable[[RandomSource], Policy]] = {
    "left": lambda rng: constant_policy(Action.LEFT),
    "right": lambda rng: constant_policy(Action.RIGHT),
    "random": random_policy,
    "lean": lambda rng: lean_policy(),
}


def make_policy(name: str, rng: RandomSource = None) -> Policy:
    """
    Build a named policy

    Args:
        name: One of POLICIES
        rng: Random source, used by the random policy

    Returns:
        Policy callable
    """
    try:
        factory = POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown policy '{name}', expected one of: {', '.join(sorted(POLICIES))}"
        ) from None
    return factory(rng)
