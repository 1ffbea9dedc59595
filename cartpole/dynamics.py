"""
Cart-pole equations of motion and single-step integrator
"""

import logging
import math
from typing import Tuple, Union

import numpy as np

from cartpole.params import SimulationConfig
from cartpole.state import Action, SimulationState, TerminationCode

logger = logging.getLogger(__name__)


def accelerations(
    theta: float, theta_dot: float, force: float, config: SimulationConfig
) -> Tuple[float, float]:
    """
    Cart and pole accelerations for the current pole state and applied force

    Args:
        theta: Pole angle (rad)
        theta_dot: Pole angular velocity (rad/s)
        force: Horizontal force on the cart (N), positive to the right
        config: Physical parameters

    Returns:
        Tuple of (x_acc, theta_acc)
    """
    # float64 so that degenerate parameters give inf/nan instead of ZeroDivisionError
    total_mass = np.float64(config.total_mass)
    pole_mass_length = np.float64(config.pole_mass_length)

    if math.isfinite(theta):
        costheta = math.cos(theta)
        sintheta = math.sin(theta)
    else:
        costheta = sintheta = math.nan

    temp = (force + pole_mass_length * theta_dot * theta_dot * sintheta) / total_mass
    # 4/3 comes from the pole's moment of inertia about its center (half-length convention)
    theta_acc = (config.gravity * sintheta - costheta * temp) / (
        config.pole_length * (4.0 / 3.0 - config.pole_mass * costheta * costheta / total_mass)
    )
    x_acc = temp - pole_mass_length * theta_acc * costheta / total_mass

    return float(x_acc), float(theta_acc)


def check_termination(
    x: float, theta: float, steps: int, config: SimulationConfig
) -> TerminationCode:
    """
    Termination code for a post-step state

    Position is checked before angle, and angle before the step budget.

    Args:
        x: Cart position (m)
        theta: Pole angle (rad)
        steps: Step count after the step
        config: Thresholds

    Returns:
        First matching TerminationCode, RUNNING if none match
    """
    theta_threshold = config.theta_threshold_rad

    if x < -config.x_threshold or x > config.x_threshold:
        return TerminationCode.OUT_OF_BOUNDS
    if theta < -theta_threshold or theta > theta_threshold:
        return TerminationCode.POLE_FELL
    if steps >= config.max_steps:
        return TerminationCode.MAX_STEPS
    return TerminationCode.RUNNING


def step(
    state: SimulationState, action: Union[Action, int], config: SimulationConfig
) -> SimulationState:
    """
    Advance the system by one timestep

    Explicit Euler: positions are advanced with the velocities from before
    the update. The config is not validated; degenerate values (e.g. zero
    total mass) show up as NaN or infinity in the returned state.

    Args:
        state: Current state (not modified)
        action: Force direction
        config: Physical parameters and thresholds

    Returns:
        Next state
    """
    force = config.force_mag if Action(action) is Action.RIGHT else -config.force_mag

    x_acc, theta_acc = accelerations(state.theta, state.theta_dot, force, config)

    x = state.x + config.tau * state.x_dot
    x_dot = state.x_dot + config.tau * x_acc
    theta = state.theta + config.tau * state.theta_dot
    theta_dot = state.theta_dot + config.tau * theta_acc
    steps = state.steps + 1

    code = check_termination(x, theta, steps, config)
    done = code is not TerminationCode.RUNNING
    if done:
        logger.debug("Episode terminated at step %d: %s", steps, code.value)

    return SimulationState(
        x=x,
        x_dot=x_dot,
        theta=theta,
        theta_dot=theta_dot,
        steps=steps,
        done=done,
        terminated_code=code,
    )
