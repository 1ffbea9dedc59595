"""
Cart-pole simulation parameters
"""

import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml


# Original parameter names, accepted when loading configs
_CAMEL_CASE_ALIASES: Dict[str, str] = {
    "cartMass": "cart_mass",
    "poleMass": "pole_mass",
    "poleLength": "pole_length",
    "forceMag": "force_mag",
    "maxSteps": "max_steps",
    "xThreshold": "x_threshold",
    "thetaThresholdDegrees": "theta_threshold_degrees",
}


@dataclass(frozen=True)
class SimulationConfig:
    """Physical and episode parameters, fixed for the lifetime of an episode"""

    gravity: float = 9.8  # m/s²
    cart_mass: float = 1.0  # kg
    pole_mass: float = 0.1  # kg
    pole_length: float = 1.5  # m, half-length of the pole
    force_mag: float = 10.0  # N, applied left or right every step
    tau: float = 0.008  # s between state updates
    max_steps: int = 1000
    x_threshold: float = 2.4  # m, track limit either side of center
    theta_threshold_degrees: float = 24.0  # deg, pole failure angle

    @property
    def total_mass(self) -> float:
        return self.cart_mass + self.pole_mass

    @property
    def pole_mass_length(self) -> float:
        return self.pole_mass * self.pole_length

    @property
    def theta_threshold_rad(self) -> float:
        """Failure angle in radians"""
        return self.theta_threshold_degrees * math.pi / 180

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        """
        Build a config from a mapping, falling back to defaults for missing keys

        Args:
            data: Field values keyed by snake_case or original camelCase names

        Returns:
            New SimulationConfig
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_CASE_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown simulation parameter: {key}")
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid value for {key}: {value!r}") from None
            if name == "max_steps":
                if not number.is_integer():
                    raise ValueError(f"Invalid value for {key}: {value!r} is not a whole number")
                values[name] = int(number)
            else:
                values[name] = number
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Union[str, Path]) -> SimulationConfig:
    """
    Load a SimulationConfig from a YAML file

    The parameters may sit at the top level of the document or under a
    ``simulation`` section.

    Args:
        path: YAML file path

    Returns:
        Loaded configuration
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if document is None:
        return SimulationConfig()
    if not isinstance(document, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(document).__name__}")

    section = document.get("simulation", document)
    if not isinstance(section, dict):
        raise ValueError("'simulation' section must be a mapping")
    return SimulationConfig.from_dict(section)


def validate_config(config: SimulationConfig) -> List[str]:
    """
    Check a config for values that make the physics degenerate

    The stepper itself never validates; a bad config just propagates NaN or
    infinity through the state. This is for callers that want to warn first.

    Args:
        config: Configuration to check

    Returns:
        List of problems (empty if valid)
    """
    errors: List[str] = []

    for name in ("gravity", "cart_mass", "pole_mass", "pole_length", "force_mag",
                 "tau", "x_threshold", "theta_threshold_degrees"):
        value = getattr(config, name)
        if not value > 0:
            errors.append(f"{name} must be positive, got {value}")

    if isinstance(config.max_steps, bool) or not isinstance(config.max_steps, int):
        errors.append(f"max_steps must be an integer, got {config.max_steps!r}")
    elif config.max_steps <= 0:
        errors.append(f"max_steps must be positive, got {config.max_steps}")

    if config.total_mass == 0:
        errors.append("cart_mass + pole_mass must not be zero")

    return errors
