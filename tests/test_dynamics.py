"""
Unit tests for the cart-pole dynamics and stepper.

Tests the acceleration formulas, the termination priority order and the
explicit Euler step.
"""

import math

import numpy as np
import pytest

from cartpole.dynamics import accelerations, check_termination, step
from cartpole.params import SimulationConfig
from cartpole.state import Action, SimulationState, TerminationCode


@pytest.fixture
def config() -> SimulationConfig:
    """Classic benchmark parameters with a long step budget"""
    return SimulationConfig(
        gravity=9.8, cart_mass=1.0, pole_mass=0.1, pole_length=1.0,
        force_mag=10.0, tau=0.02, max_steps=500, x_threshold=2.4,
        theta_threshold_degrees=24,
    )


class TestAccelerations:
    """Test suite for the equations of motion"""

    def test_upright_at_rest_without_force(self, config: SimulationConfig) -> None:
        """Test that the upright equilibrium has zero acceleration"""
        x_acc, theta_acc = accelerations(0.0, 0.0, 0.0, config)

        assert x_acc == 0.0
        assert theta_acc == 0.0

    def test_matches_closed_form(self, config: SimulationConfig) -> None:
        """Test against the formulas written out by hand"""
        theta, theta_dot, force = 0.1, -0.3, 10.0
        total_mass = 1.1
        pml = 0.1 * 1.0
        temp = (force + pml * theta_dot**2 * math.sin(theta)) / total_mass
        expected_theta_acc = (9.8 * math.sin(theta) - math.cos(theta) * temp) / (
            1.0 * (4.0 / 3.0 - 0.1 * math.cos(theta) ** 2 / total_mass)
        )
        expected_x_acc = temp - pml * expected_theta_acc * math.cos(theta) / total_mass

        x_acc, theta_acc = accelerations(theta, theta_dot, force, config)

        assert abs(x_acc - expected_x_acc) < 1e-12
        assert abs(theta_acc - expected_theta_acc) < 1e-12

    def test_push_right_tips_pole_left(self, config: SimulationConfig) -> None:
        """Test that pushing the cart right accelerates it right and the pole left"""
        x_acc, theta_acc = accelerations(0.0, 0.0, config.force_mag, config)

        assert x_acc > 0
        assert theta_acc < 0

    def test_gravity_pulls_tilted_pole_down(self, config: SimulationConfig) -> None:
        """Test that an unforced tilted pole falls further"""
        _, theta_acc = accelerations(0.1, 0.0, 0.0, config)

        assert theta_acc > 0


class TestCheckTermination:
    """Test suite for termination evaluation"""

    def test_running_inside_limits(self, config: SimulationConfig) -> None:
        assert check_termination(0.0, 0.0, 1, config) is TerminationCode.RUNNING

    def test_out_of_bounds_both_sides(self, config: SimulationConfig) -> None:
        assert check_termination(2.41, 0.0, 1, config) is TerminationCode.OUT_OF_BOUNDS
        assert check_termination(-2.41, 0.0, 1, config) is TerminationCode.OUT_OF_BOUNDS

    def test_position_at_limit_is_running(self, config: SimulationConfig) -> None:
        """Test that the position check is a strict inequality"""
        assert check_termination(2.4, 0.0, 1, config) is TerminationCode.RUNNING
        assert check_termination(-2.4, 0.0, 1, config) is TerminationCode.RUNNING

    def test_pole_fell_both_sides(self, config: SimulationConfig) -> None:
        assert check_termination(0.0, 0.5, 1, config) is TerminationCode.POLE_FELL
        assert check_termination(0.0, -0.5, 1, config) is TerminationCode.POLE_FELL

    def test_max_steps(self, config: SimulationConfig) -> None:
        assert check_termination(0.0, 0.0, 499, config) is TerminationCode.RUNNING
        assert check_termination(0.0, 0.0, 500, config) is TerminationCode.MAX_STEPS

    def test_priority_order(self, config: SimulationConfig) -> None:
        """Test position before angle before step budget"""
        assert check_termination(3.0, 0.5, 500, config) is TerminationCode.OUT_OF_BOUNDS
        assert check_termination(0.0, 0.5, 500, config) is TerminationCode.POLE_FELL


class TestStep:
    """Test suite for the single-step integrator"""

    @pytest.fixture
    def state(self) -> SimulationState:
        return SimulationState(x=0.01, x_dot=-0.02, theta=0.03, theta_dot=0.04, steps=10)

    def test_steps_increment_by_one(self, state: SimulationState, config: SimulationConfig) -> None:
        for action in (Action.LEFT, Action.RIGHT):
            assert step(state, action, config).steps == state.steps + 1

    def test_does_not_mutate_input(self, state: SimulationState, config: SimulationConfig) -> None:
        before = (state.x, state.x_dot, state.theta, state.theta_dot, state.steps)

        step(state, Action.RIGHT, config)

        assert (state.x, state.x_dot, state.theta, state.theta_dot, state.steps) == before

    def test_deterministic(self, state: SimulationState, config: SimulationConfig) -> None:
        """Test that identical inputs give identical outputs"""
        for action in (Action.LEFT, Action.RIGHT):
            assert step(state, action, config) == step(state, action, config)

    def test_explicit_euler(self, state: SimulationState, config: SimulationConfig) -> None:
        """Test that positions advance with the pre-update velocities"""
        x_acc, theta_acc = accelerations(state.theta, state.theta_dot, config.force_mag, config)

        nxt = step(state, Action.RIGHT, config)

        assert nxt.x == state.x + config.tau * state.x_dot
        assert nxt.theta == state.theta + config.tau * state.theta_dot
        assert nxt.x_dot == state.x_dot + config.tau * x_acc
        assert nxt.theta_dot == state.theta_dot + config.tau * theta_acc

    def test_left_uses_negative_force(self, state: SimulationState, config: SimulationConfig) -> None:
        x_acc, _ = accelerations(state.theta, state.theta_dot, -config.force_mag, config)

        nxt = step(state, Action.LEFT, config)

        assert nxt.x_dot == state.x_dot + config.tau * x_acc

    def test_accepts_integer_action(self, state: SimulationState, config: SimulationConfig) -> None:
        assert step(state, 1, config) == step(state, Action.RIGHT, config)
        assert step(state, 0, config) == step(state, Action.LEFT, config)

    def test_done_iff_not_running(self, config: SimulationConfig) -> None:
        """Test that done and the termination code agree"""
        running = step(SimulationState.upright(), Action.RIGHT, config)
        fallen = step(SimulationState(x=0.0, x_dot=0.0, theta=0.5, theta_dot=0.0), Action.RIGHT, config)

        assert not running.done and running.terminated_code is TerminationCode.RUNNING
        assert fallen.done and fallen.terminated_code is TerminationCode.POLE_FELL

    def test_out_of_bounds_wins_over_pole_fell(self, config: SimulationConfig) -> None:
        """Test that position is checked before angle when both cross in one step"""
        state = SimulationState(x=2.39, x_dot=10.0, theta=0.5, theta_dot=1.0)

        nxt = step(state, Action.RIGHT, config)

        assert nxt.x > config.x_threshold
        assert nxt.theta > config.theta_threshold_rad
        assert nxt.done
        assert nxt.terminated_code is TerminationCode.OUT_OF_BOUNDS

    def test_angle_exactly_at_threshold_keeps_running(self, config: SimulationConfig) -> None:
        """Test that the angle check is a strict inequality"""
        threshold = 24 * math.pi / 180
        state = SimulationState(x=0.0, x_dot=0.0, theta=threshold, theta_dot=0.0)

        nxt = step(state, Action.RIGHT, config)

        assert nxt.theta == threshold
        assert not nxt.done
        assert nxt.terminated_code is TerminationCode.RUNNING

    def test_angle_one_ulp_past_threshold_falls(self, config: SimulationConfig) -> None:
        threshold = 24 * math.pi / 180
        past = float(np.nextafter(threshold, np.inf))
        state = SimulationState(x=0.0, x_dot=0.0, theta=past, theta_dot=0.0)

        nxt = step(state, Action.RIGHT, config)

        assert nxt.theta == past
        assert nxt.terminated_code is TerminationCode.POLE_FELL

    def test_negative_angle_one_ulp_past_threshold_falls(self, config: SimulationConfig) -> None:
        threshold = 24 * math.pi / 180
        past = float(np.nextafter(-threshold, -np.inf))
        state = SimulationState(x=0.0, x_dot=0.0, theta=past, theta_dot=0.0)

        assert step(state, Action.LEFT, config).terminated_code is TerminationCode.POLE_FELL

    def test_step_budget_exhausted(self, config: SimulationConfig) -> None:
        state = SimulationState(x=0.0, x_dot=0.0, theta=0.0, theta_dot=0.0, steps=499)

        nxt = step(state, Action.RIGHT, config)

        assert nxt.steps == 500
        assert nxt.terminated_code is TerminationCode.MAX_STEPS

    def test_termination_rederivable(self, config: SimulationConfig) -> None:
        """Test that the code can be re-derived from the returned x, theta and steps"""
        state = SimulationState.upright()
        while not state.done:
            state = step(state, Action.RIGHT, config)

        assert check_termination(state.x, state.theta, state.steps, config) is state.terminated_code

    def test_degenerate_config_propagates_nan(self) -> None:
        """Test that zero total mass is not signaled, only propagated"""
        config = SimulationConfig(cart_mass=0.0, pole_mass=0.0)

        with np.errstate(all="ignore"):
            nxt = step(SimulationState.upright(), Action.RIGHT, config)

        assert math.isnan(nxt.x_dot) or math.isinf(nxt.x_dot)
        assert nxt.steps == 1
