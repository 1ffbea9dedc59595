"""
Simulation state representation
"""

from dataclasses import dataclass
from enum import Enum, IntEnum

import numpy as np


class Action(IntEnum):
    """Direction of the fixed-magnitude force applied to the cart"""

    LEFT = 0
    RIGHT = 1

    @property
    def sign(self) -> int:
        return 1 if self is Action.RIGHT else -1


class TerminationCode(str, Enum):
    """Reason an episode ended (RUNNING while it has not)"""

    RUNNING = "running"
    POLE_FELL = "pole_fell"
    OUT_OF_BOUNDS = "out_of_bounds"
    MAX_STEPS = "max_steps"
    MANUAL_STOP = "manual_stop"


@dataclass(frozen=True)
class SimulationState:
    """State of one episode after a given number of steps"""

    x: float  # Cart position (m)
    x_dot: float  # Cart velocity (m/s)
    theta: float  # Pole angle (rad, 0 = upright)
    theta_dot: float  # Pole angular velocity (rad/s)
    steps: int = 0
    done: bool = False
    terminated_code: TerminationCode = TerminationCode.RUNNING

    @classmethod
    def upright(cls) -> "SimulationState":
        """Cart centered and at rest with the pole exactly vertical"""
        return cls(x=0.0, x_dot=0.0, theta=0.0, theta_dot=0.0)

    def to_array(self) -> np.ndarray:
        """Physical state as [x, x_dot, theta, theta_dot]"""
        return np.array([self.x, self.x_dot, self.theta, self.theta_dot])
