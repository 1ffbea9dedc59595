"""
Test suite for the Cart-Pole Balancing Simulation.

This package contains unit tests organized by component:
- test_params.py: Tests for SimulationConfig and config loading
- test_state.py: Tests for Action, TerminationCode and SimulationState
- test_dynamics.py: Tests for accelerations, termination and the stepper
- test_episode.py: Tests for initialization, manual stop and the episode loop
- test_policies.py: Tests for scripted policies
- test_analysis.py: Tests for episode analysis
- test_integration.py: End-to-end scenarios and the command line driver
"""
