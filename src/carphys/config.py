"""
Shared constants and configuration errors.

Vehicle specs validate themselves when constructed and raise
ConfigurationError, so a bad calibration stops the simulation before
the first tick instead of failing mid-loop.
"""

import numpy as np

# Gravitational acceleration (m/s^2)
GRAVITY: float = 9.81

# Smallest time step a tick will integrate over (seconds)
MIN_DT: float = 1e-4

# Default cap on a single integration step (seconds)
MAX_DT: float = 0.1


class ConfigurationError(ValueError):
    """Raised when a vehicle spec cannot be simulated."""


def require(condition: bool, message: str) -> None:
    """Raise ConfigurationError with message unless condition holds."""
    if not condition:
        raise ConfigurationError(message)


def clamp_unit(value: float) -> float:
    """Clamp a pedal value into [0, 1]; NaN reads as released."""
    return float(np.clip(np.nan_to_num(value, nan=0.0), 0.0, 1.0))
