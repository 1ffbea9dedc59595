"""
Episode analysis functions
"""

from typing import Any, Dict, Sequence, Union

import numpy as np

from cartpole.episode import EpisodeResult
from cartpole.params import SimulationConfig
from cartpole.state import TerminationCode

_TERMINATION_MESSAGES: Dict[TerminationCode, str] = {
    TerminationCode.POLE_FELL: "Failed: Pole tilted too far!",
    TerminationCode.OUT_OF_BOUNDS: "Failed: Cart went off track!",
    TerminationCode.MAX_STEPS: "Success: Maximum steps reached!",
}


def termination_message(code: Union[TerminationCode, str]) -> str:
    """User-facing description of why an episode ended"""
    return _TERMINATION_MESSAGES.get(TerminationCode(code), "Game Over")


class EpisodeAnalyzer:
    """Summarizes an episode's history against the config's thresholds"""

    def __init__(self, config: SimulationConfig) -> None:
        """
        Initialize episode analyzer

        Args:
            config: Parameters the episode was run with
        """
        self.config = config

    def analyze(self, result: EpisodeResult) -> Dict[str, Any]:
        """
        Analyze an episode for duration, excursions and control activity

        Args:
            result: Finished (or stopped) episode

        Returns:
            Dictionary with analysis results
        """
        final = result.final_state
        x = result.x
        theta_deg = np.degrees(result.theta)
        actions = result.actions

        if len(x) > 0:
            x_max = float(np.max(np.abs(x)))
            theta_max_deg = float(np.max(np.abs(theta_deg)))
            theta_rms_deg = float(np.sqrt(np.mean(theta_deg**2)))
            right_fraction = float(np.mean(actions > 0))
            # Each sign change in the action trace is one reversal of the push
            action_switches = int(np.sum(np.diff(actions) != 0))
            x_margin = self.config.x_threshold - abs(float(x[-1]))
            theta_margin_deg = self.config.theta_threshold_degrees - abs(float(theta_deg[-1]))
        else:
            x_max = 0.0
            theta_max_deg = 0.0
            theta_rms_deg = 0.0
            right_fraction = 0.0
            action_switches = 0
            x_margin = 0.0
            theta_margin_deg = 0.0

        return {
            "steps": final.steps,
            "terminated_code": final.terminated_code.value,
            "success": final.terminated_code is TerminationCode.MAX_STEPS,
            "message": termination_message(final.terminated_code),
            "duration_s": final.steps * self.config.tau,
            "x_max": x_max,
            "theta_max_deg": theta_max_deg,
            "theta_rms_deg": theta_rms_deg,
            "right_fraction": right_fraction,
            "action_switches": action_switches,
            "x_margin": x_margin,
            "theta_margin_deg": theta_margin_deg,
        }


def best_episode(results: Sequence[EpisodeResult]) -> EpisodeResult:
    """
    Longest episode of a batch (the high score)

    Args:
        results: Non-empty sequence of episode results

    Returns:
        The result with the most steps; the earliest one on ties
    """
    if not results:
        raise ValueError("best_episode needs at least one result")
    return max(results, key=lambda r: r.final_state.steps)
